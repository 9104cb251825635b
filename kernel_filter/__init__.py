"""3x3 convolution filter for raw RGBA8 pixel buffers."""
from __future__ import annotations

from .exceptions import DegenerateImage, FilterError, InvalidKernel, MalformedInput
from .models.kernel import Kernel
from .models.processed_image import ProcessedImage
from .pipeline.filter_pass import process_image

__version__ = "1.0.0"

__all__ = [
    "DegenerateImage",
    "FilterError",
    "InvalidKernel",
    "Kernel",
    "MalformedInput",
    "ProcessedImage",
    "process_image",
]
