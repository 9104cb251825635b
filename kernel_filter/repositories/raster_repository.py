from __future__ import annotations
from pathlib import Path
from typing import Union
import logging
import numpy as np

from ..exceptions import MalformedInput
from ..models.raster import Raster

logger = logging.getLogger(__name__)

CHANNELS = 4  # R, G, B, A


class RasterRepository:
    """
    Handles byte-level storage of RGBA8 buffers: input normalisation,
    output allocation and raw file I/O. No filtering logic here.
    """

    @staticmethod
    def _check_dimension(name: str, value) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise MalformedInput(f"{name} must be an integer, got {value!r}")
        if value < 0:
            raise MalformedInput(f"{name} must be non-negative, got {value}")
        return int(value)

    @staticmethod
    def _to_uint8(data) -> np.ndarray:
        """Flatten any supported buffer type into a 1-D uint8 array (copied)."""
        if isinstance(data, (bytes, bytearray, memoryview)):
            return np.frombuffer(bytes(data), dtype=np.uint8).copy()

        try:
            arr = np.asarray(data)
        except ValueError as err:
            raise MalformedInput(f"Pixel buffer is not a flat byte sequence: {err}") from None

        if arr.size == 0:
            return np.zeros(0, dtype=np.uint8)
        if arr.dtype == np.uint8:
            return arr.ravel().copy()
        if arr.dtype.kind not in "iu":
            raise MalformedInput(f"Pixel buffer must hold integers, got dtype {arr.dtype}")
        if arr.min() < 0 or arr.max() > 255:
            raise MalformedInput("Pixel values must lie in 0..255")
        return arr.ravel().astype(np.uint8)

    def create_raster(self, data, width, height, path: Union[str, Path] = None) -> Raster:
        width = self._check_dimension("width", width)
        height = self._check_dimension("height", height)

        flat = self._to_uint8(data)
        expected = width * height * CHANNELS
        if flat.size != expected:
            raise MalformedInput(
                f"Buffer length {flat.size} does not match {width}x{height} RGBA "
                f"(expected {expected})"
            )

        pixels = flat.reshape(height, width, CHANNELS)
        pixels.setflags(write=False)
        return Raster(width=width, height=height, pixels=pixels,
                      path=Path(path) if path is not None else None)

    @staticmethod
    def allocate_output(width: int, height: int) -> np.ndarray:
        """Zeroed (transparent black) RGBA buffer, shape (H, W, 4)."""
        return np.zeros((height, width, CHANNELS), dtype=np.uint8)

    @staticmethod
    def to_bytes(pixels: np.ndarray) -> bytes:
        return np.ascontiguousarray(pixels, dtype=np.uint8).tobytes()

    @staticmethod
    def read_raw(path: Union[str, Path]) -> bytes:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Raw image not found: {path}")
        data = path.read_bytes()
        logger.debug(f"Read {len(data)} bytes from {path}")
        return data

    @staticmethod
    def write_raw(path: Union[str, Path], data: bytes) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return path
