class FilterError(ValueError):
    """Base class for every error raised by a filter pass."""


class MalformedInput(FilterError):
    """The pixel buffer does not match its declared dimensions."""


class DegenerateImage(FilterError):
    """The image is too small to have any pixel to process."""


class InvalidKernel(FilterError):
    """The kernel is not nine finite weights."""
