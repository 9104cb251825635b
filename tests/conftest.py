import numpy as np
import pytest

from kernel_filter.models.kernel import Kernel
from kernel_filter.services.convolution_service import ConvolutionService, STRATEGIES
from kernel_filter.services.raster_service import RasterService


@pytest.fixture
def solid_rgba():
    """Factory for flat RGBA8 buffers filled with one colour."""
    def make(width: int, height: int, color) -> bytes:
        return bytes(color) * (width * height)
    return make


@pytest.fixture
def raster_service() -> RasterService:
    return RasterService()


@pytest.fixture(params=STRATEGIES)
def convolution_service(request) -> ConvolutionService:
    """One service per strategy; small bands so the threaded path splits work."""
    return ConvolutionService(strategy=request.param, workers=3, row_band=2)


@pytest.fixture
def reference_service() -> ConvolutionService:
    return ConvolutionService(strategy="pixel")


@pytest.fixture
def noisy_pixels() -> bytes:
    """Random 7x5 RGBA image with varied alpha."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=7 * 5 * 4, dtype=np.uint8).tobytes()


@pytest.fixture
def sharpen() -> Kernel:
    return Kernel((0, -1, 0, -1, 5, -1, 0, -1, 0))


@pytest.fixture
def box_blur() -> Kernel:
    return Kernel((1,) * 9).scaled(1 / 9)
