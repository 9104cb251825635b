from pathlib import Path
from typing import Union
import numpy as np

from ..exceptions import DegenerateImage
from ..models.processed_image import ProcessedImage
from ..models.raster import Raster
from ..repositories.raster_repository import RasterRepository

MARGIN = 1  # border left untouched on every side


class RasterService:
    """Business-level helpers around RGBA rasters."""

    def __init__(self):
        self.raster_repository = RasterRepository()

    def create_raster(self, data, width, height, path: Union[str, Path] = None) -> Raster:
        return self.raster_repository.create_raster(data, width, height, path)

    def load_raw(self, path: Union[str, Path], width: int, height: int) -> Raster:
        """Read a headerless RGBA8 file of known dimensions."""
        data = self.raster_repository.read_raw(path)
        return self.raster_repository.create_raster(data, width, height, path)

    def save_raw(self, image: ProcessedImage, path: Union[str, Path]) -> Path:
        return self.raster_repository.write_raw(path, image.data)

    @staticmethod
    def require_interior_bounds(raster: Raster):
        """
        Check the image is big enough for a 1-pixel margin and return the
        half-open interior ranges ((y_start, y_stop), (x_start, x_stop)).

        A 2-pixel dimension is accepted and gives an empty range.
        """
        if raster.width < 2 * MARGIN or raster.height < 2 * MARGIN:
            raise DegenerateImage(
                f"{raster.width}x{raster.height} image has no room for a "
                f"{MARGIN}-pixel border"
            )
        return (MARGIN, raster.height - MARGIN), (MARGIN, raster.width - MARGIN)

    def new_output(self, raster: Raster) -> np.ndarray:
        return self.raster_repository.allocate_output(raster.width, raster.height)

    def to_processed_image(self, raster: Raster, pixels: np.ndarray) -> ProcessedImage:
        return ProcessedImage(
            width=raster.width,
            height=raster.height,
            data=self.raster_repository.to_bytes(pixels),
        )
