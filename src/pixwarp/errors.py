"""
Error taxonomy for pixwarp.

Every error derives from ImageError and from the builtin exception a caller
would naturally catch (ValueError, IndexError, RuntimeError), so both
``except ImageError`` and ``except ValueError`` work.
"""

from __future__ import annotations


class ImageError(Exception):
    """Base class for all image and tensor errors."""


class ShapeMismatch(ImageError, ValueError):
    """Data length does not match the declared shape."""

    def __init__(self, actual: int, expected: int, what: str = "data length") -> None:
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"{what}={actual} does not match the expected {expected}. "
            f"Provide exactly height * width * channels elements in row-major order."
        )


class ChannelIndexOutOfBounds(ImageError, IndexError):
    """Channel index is outside [0, channels)."""

    def __init__(self, index: int, channels: int) -> None:
        self.index = index
        self.channels = channels
        super().__init__(f"channel index {index} is out of bounds for an image with {channels} channels")


class PixelIndexOutOfBounds(ImageError, IndexError):
    """Pixel coordinate is outside the image."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(f"pixel ({x}, {y}) is out of bounds for an image of size {width}x{height}")


class InvalidImageSize(ImageError, ValueError):
    """Two images that must share a size do not."""

    def __init__(self, width1: int, height1: int, width2: int, height2: int) -> None:
        self.sizes = ((width1, height1), (width2, height2))
        super().__init__(
            f"image sizes differ: {width1}x{height1} vs {width2}x{height2}. "
            f"Allocate the destination with the source size."
        )


class CannotComputeDeterminant(ImageError, ValueError):
    """The transform matrix is singular."""

    def __init__(self) -> None:
        super().__init__("cannot invert the perspective matrix: determinant is zero")


class CastError(ImageError, ValueError):
    """A value cannot be represented in the target element type."""

    def __init__(self, detail: str = "value is not representable in the target type") -> None:
        super().__init__(f"cast failed: {detail}")


class ImageDataNotInitialized(ImageError, ValueError):
    """A reduction was requested over an empty buffer."""

    def __init__(self) -> None:
        super().__init__("image data is empty")


class ImageDataNotContiguous(ImageError, RuntimeError):
    """The backing buffer is not C-contiguous."""

    def __init__(self) -> None:
        super().__init__("image data is not contiguous")


class DegenerateImageRange(ImageError, ValueError):
    """Min/max rescaling of an image whose values are all equal."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(
            f"cannot rescale an image whose minimum equals its maximum ({value}). "
            f"The image is constant; fill the destination directly instead."
        )
