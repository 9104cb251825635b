from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Tuple
import os
import logging

import numpy as np
from dotenv import load_dotenv

from ..models.kernel import Kernel, KERNEL_SIZE
from ..models.processed_image import ProcessedImage
from ..models.raster import Raster
from .raster_service import RasterService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

STRATEGIES = ("pixel", "vectorized", "threaded")


class ConvolutionService:
    """
    Applies a 3x3 kernel to the interior of an RGBA raster.
    *   RGB is the weighted sum of the 3x3 neighbourhood, alpha is copied.
    *   The 1-pixel border of the output is never written (stays zero).
    *   Sums are float32 and truncated to 8 bits after clamping to [0, 255].

    Every strategy accumulates the nine taps in the same (ky, kx) order,
    so they all produce the same bytes.
    """

    def __init__(self,
                 strategy: str = None,
                 workers: int = None,
                 row_band: int = None):
        if strategy is None:
            strategy = os.getenv("FILTER_STRATEGY", "vectorized")
        self.strategy = strategy.strip().lower()
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown filter strategy '{self.strategy}', expected one of {STRATEGIES}")

        if workers is None:
            workers = int(os.getenv("FILTER_WORKERS", str(os.cpu_count() or 1)))
        if row_band is None:
            row_band = int(os.getenv("FILTER_ROW_BAND", "64"))
        self.workers = workers
        self.row_band = row_band
        if self.workers < 1 or self.row_band < 1:
            raise ValueError("FILTER_WORKERS and FILTER_ROW_BAND must be positive")

        self.raster_service = RasterService()

        logger.info(f"ConvolutionService initialized: strategy={self.strategy}, "
                    f"workers={self.workers}, row_band={self.row_band}")

    # ─── Neighbourhood accumulator ────────────────────────────────
    @staticmethod
    def accumulate_neighborhood(kernel: Kernel, raster: Raster, x: int, y: int) -> np.ndarray:
        """
        Weighted R, G, B sums of the 3x3 window centred on (x, y).

        Args:
            kernel (Kernel): Weights, row-major.
            raster (Raster): Source image.
            x, y (int): Interior coordinates, 1 <= x <= width-2, 1 <= y <= height-2.

        Returns:
            (np.ndarray): Shape (3,), float32.
        """
        if not (1 <= x <= raster.width - 2 and 1 <= y <= raster.height - 2):
            raise IndexError(
                f"({x}, {y}) is not an interior pixel of a {raster.width}x{raster.height} image"
            )

        weights = kernel.as_array()
        sums = np.zeros(3, dtype=np.float32)
        for ky in range(KERNEL_SIZE):
            for kx in range(KERNEL_SIZE):
                neighbor = raster.pixels[y + ky - 1, x + kx - 1, :3].astype(np.float32)
                sums += neighbor * weights[ky, kx]
        return sums

    # ─── Channel clamper ──────────────────────────────────────────
    @staticmethod
    def clamp_channels(sums) -> np.ndarray:
        """
        Clamp float sums into [0, 255] and truncate to uint8.
        Works elementwise, so a single pixel (3,) or a whole block (..., 3).
        NaN maps to 0 and infinities saturate.
        """
        sums = np.asarray(sums, dtype=np.float32)
        sums = np.nan_to_num(sums, nan=0.0, posinf=255.0, neginf=0.0)
        return np.clip(sums, 0.0, 255.0).astype(np.uint8)

    # ─── Filter pass ──────────────────────────────────────────────
    def filter_pass(self, kernel: Kernel, raster: Raster) -> np.ndarray:
        """
        Run the whole pass and return the output pixels, shape (H, W, 4).
        """
        rows, cols = self.raster_service.require_interior_bounds(raster)
        output = self.raster_service.new_output(raster)

        logger.debug(f"Filtering {raster.width}x{raster.height} raster "
                     f"(strategy={self.strategy})")

        if self.strategy == "pixel":
            self._pixel_pass(kernel, raster, output, rows, cols)
        elif self.strategy == "threaded":
            self._threaded_pass(kernel, raster, output, rows)
        else:
            self._fill_rows(kernel.as_array(), raster.pixels, output, *rows)

        return output

    def process(self, kernel: Kernel, raster: Raster) -> ProcessedImage:
        output = self.filter_pass(kernel, raster)
        return self.raster_service.to_processed_image(raster, output)

    # ─── Strategies ───────────────────────────────────────────────
    def _pixel_pass(self, kernel: Kernel, raster: Raster, output: np.ndarray,
                    rows: Tuple[int, int], cols: Tuple[int, int]) -> None:
        for y in range(*rows):
            for x in range(*cols):
                sums = self.accumulate_neighborhood(kernel, raster, x, y)
                red, green, blue = self.clamp_channels(sums)
                alpha = raster.pixels[y, x, 3]
                output[y, x] = (red, green, blue, alpha)

    def _threaded_pass(self, kernel: Kernel, raster: Raster, output: np.ndarray,
                       rows: Tuple[int, int]) -> None:
        weights = kernel.as_array()
        y_start, y_stop = rows
        bands = [(start, min(start + self.row_band, y_stop))
                 for start in range(y_start, y_stop, self.row_band)]

        # Bands cover disjoint output rows and only read the source.
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [pool.submit(self._fill_rows, weights, raster.pixels, output, start, stop)
                       for start, stop in bands]
            for future in futures:
                future.result()

    @classmethod
    def _fill_rows(cls, weights: np.ndarray, pixels: np.ndarray, output: np.ndarray,
                   y_start: int, y_stop: int) -> None:
        """
        Filter interior rows [y_start, y_stop) in one go, all interior columns.
        """
        width = pixels.shape[1]
        x_stop = width - 1
        sums = np.zeros((y_stop - y_start, width - 2, 3), dtype=np.float32)
        for ky in range(KERNEL_SIZE):
            for kx in range(KERNEL_SIZE):
                window = pixels[y_start + ky - 1:y_stop + ky - 1, kx:width - 2 + kx, :3]
                sums += window.astype(np.float32) * weights[ky, kx]

        output[y_start:y_stop, 1:x_stop, :3] = cls.clamp_channels(sums)
        output[y_start:y_stop, 1:x_stop, 3] = pixels[y_start:y_stop, 1:x_stop, 3]
