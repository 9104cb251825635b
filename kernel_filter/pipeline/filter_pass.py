from typing import Sequence, Union
import logging

from ..models.kernel import Kernel
from ..models.processed_image import ProcessedImage
from ..services.convolution_service import ConvolutionService
from ..services.raster_service import RasterService

logger = logging.getLogger(__name__)

# Filled on the first process_image call without injected services.
_default_services = {}


def get_default_services():
    """Shared (RasterService, ConvolutionService) pair for callers that inject none."""
    if not _default_services:
        convolution_service = ConvolutionService()
        _default_services["raster"] = RasterService()
        _default_services["convolution"] = convolution_service
    return _default_services["raster"], _default_services["convolution"]


def process_image(
    kernel: Union[Kernel, Sequence[float]],
    image,
    width: int,
    height: int,
    multiplier: float = 1.0,
    raster_service: RasterService = None,
    convolution_service: ConvolutionService = None,
) -> ProcessedImage:
    """
    Filter a raw RGBA8 buffer with a 3x3 kernel.

    Args:
        kernel: Nine row-major weights, or a Kernel.
        image: Flat RGBA8 bytes (bytes, bytearray, list of ints or uint8 array).
        width, height (int): Logical image size; len(image) must be width*height*4.
        multiplier (float): Applied to every weight before filtering.

    Returns:
        ProcessedImage: same width/height, border pixels zeroed, alpha preserved.

    Raises:
        InvalidKernel, MalformedInput, DegenerateImage
    """
    if raster_service is None or convolution_service is None:
        default_raster, default_convolution = get_default_services()
        raster_service = raster_service or default_raster
        convolution_service = convolution_service or default_convolution

    if not isinstance(kernel, Kernel):
        kernel = Kernel.from_sequence(kernel)
    if multiplier != 1:
        kernel = kernel.scaled(multiplier)

    raster = raster_service.create_raster(image, width, height)
    return convolution_service.process(kernel, raster)
