"""
Image: a Tensor3 specialized to (height, width, channels).

The channel count is part of the image type. ``Image[3]`` is the concrete
type of three-channel images; it is created once and cached, so
``Image[3] is Image[3]`` and ``isinstance(img, Image[3])`` work as expected.

Example:
    >>> from pixwarp import Image, ImageSize
    >>> image = Image[3](ImageSize(width=10, height=20), np.zeros(10 * 20 * 3, np.uint8))
    >>> image.size
    ImageSize(width=10, height=20)
    >>> image.num_channels
    3
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Self

import numpy as np

from pixwarp.errors import (
    CastError,
    ChannelIndexOutOfBounds,
    ImageDataNotContiguous,
    PixelIndexOutOfBounds,
)
from pixwarp.image.kernels import abs_numba, powi_numba, sum_sequential_numba
from pixwarp.protocols import TensorAllocator
from pixwarp.tensor.dtypes import is_float_dtype
from pixwarp.tensor.tensor import Tensor3
from pixwarp.utils import commit_kernel_output, kernel_output, to_kernel_input

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSize:
    """
    Image size in pixels.

    Attributes:
        width: Number of columns
        height: Number of rows
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"{name}={value} must be non-negative")

    @classmethod
    def from_value(cls, value: ImageSize | Sequence[int]) -> ImageSize:
        """Accept an ImageSize or a [width, height] pair."""
        if isinstance(value, ImageSize):
            return value
        width, height = value
        return cls(int(width), int(height))

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height


class Image:
    """
    Image with pixel data stored as a (height, width, channels) tensor.

    Use ``Image[C]`` for a concrete channel count. The bare ``Image`` class is
    the shared interface and cannot be instantiated.

    Args:
        size: ImageSize or [width, height]
        data: Flat pixel data in row-major (height, width, channel) order
        dtype: Optional element type, inferred from data otherwise
        allocator: Allocation strategy (default: CpuAllocator)

    Raises:
        ShapeMismatch: If len(data) != width * height * channels
    """

    CHANNELS: ClassVar[int] = 0

    __slots__ = ("_tensor",)

    def __class_getitem__(cls, channels: int) -> type[Image]:
        return image_type(channels)

    def __init__(
        self,
        size: ImageSize | Sequence[int],
        data: Any,
        dtype: Any = None,
        allocator: TensorAllocator | None = None,
    ):
        channels = self._require_channels()
        size = ImageSize.from_value(size)
        self._tensor = Tensor3.from_shape_vec(
            (size.height, size.width, channels), data, allocator=allocator, dtype=dtype
        )

    @classmethod
    def _require_channels(cls) -> int:
        if cls.CHANNELS < 1:
            raise TypeError("Image needs a channel count; use Image[C], e.g. Image[3](size, data)")
        return cls.CHANNELS

    @classmethod
    def from_tensor(cls, tensor: Tensor3) -> Self:
        """
        Wrap an existing tensor without copying.

        Raises:
            TypeError: If the tensor's last dimension differs from CHANNELS
        """
        channels = cls._require_channels()
        if tensor.shape[2] != channels:
            raise TypeError(
                f"tensor has {tensor.shape[2]} channels, expected {channels} for {cls.__qualname__}"
            )
        image = cls.__new__(cls)
        image._tensor = tensor
        return image

    @classmethod
    def from_size_val(
        cls,
        size: ImageSize | Sequence[int],
        value: Any,
        dtype: Any = None,
        allocator: TensorAllocator | None = None,
    ) -> Self:
        """
        Create an image with every element set to value.

        Commonly used to allocate the destination of an operation; every
        operation in pixwarp overwrites the whole destination.

        Args:
            size: ImageSize or [width, height]
            value: Fill value
            dtype: Optional element type, inferred from value otherwise
            allocator: Allocation strategy (default: CpuAllocator)

        Example:
            >>> dst = Image[3].from_size_val(ImageSize(4, 5), 0.0, dtype=np.float32)
        """
        channels = cls._require_channels()
        size = ImageSize.from_value(size)
        tensor = Tensor3.from_shape_val(
            (size.height, size.width, channels), value, dtype=dtype, allocator=allocator
        )
        return cls.from_tensor(tensor)

    @classmethod
    def from_array(cls, array: np.ndarray, allocator: TensorAllocator | None = None) -> Image:
        """
        Create an image from a (H, W) or (H, W, C) array, copying the data.

        Called on the base class, the channel type is inferred from the array.
        Called on ``Image[C]``, the array must have C channels.
        """
        array = np.asarray(array)
        if array.ndim == 2:
            array = array[:, :, np.newaxis]
        if array.ndim != 3:
            raise ValueError(f"array must be [H, W] or [H, W, C], got shape {array.shape}")

        height, width, channels = array.shape
        target = cls if cls.CHANNELS > 0 else image_type(channels)
        if target.CHANNELS != channels:
            raise TypeError(f"array has {channels} channels, expected {target.CHANNELS}")
        return target(ImageSize(width, height), array, allocator=allocator)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def size(self) -> ImageSize:
        return ImageSize(width=self._tensor.shape[1], height=self._tensor.shape[0])

    @property
    def width(self) -> int:
        return self._tensor.shape[1]

    @property
    def height(self) -> int:
        return self._tensor.shape[0]

    @property
    def cols(self) -> int:
        return self.width

    @property
    def rows(self) -> int:
        return self.height

    @property
    def num_channels(self) -> int:
        return self.CHANNELS

    @property
    def dtype(self) -> np.dtype:
        return self._tensor.dtype

    @property
    def shape(self) -> tuple[int, int, int]:
        return self._tensor.shape

    @property
    def numel(self) -> int:
        return self._tensor.numel

    @property
    def tensor(self) -> Tensor3:
        return self._tensor

    @property
    def data(self) -> np.ndarray:
        """Read-only (height, width, channels) view."""
        return self._tensor.view()

    def as_slice(self) -> np.ndarray:
        """Read-only flat view of the pixel buffer."""
        return self._tensor.as_slice()

    def as_slice_mut(self) -> np.ndarray:
        """Writable flat view of the pixel buffer."""
        return self._tensor.as_slice_mut()

    def to_numpy(self) -> np.ndarray:
        """Independent (height, width, channels) copy of the pixel data."""
        return self._tensor.view().copy()

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def get(self, index: Sequence[int]) -> Any:
        """Element at [y, x, channel], or None when out of range."""
        return self._tensor.get(index)

    def get_pixel(self, x: int, y: int, ch: int) -> Any:
        """
        Get a single pixel value.

        Args:
            x: Column
            y: Row
            ch: Channel index

        Raises:
            PixelIndexOutOfBounds: If (x, y) lies outside the image
            ChannelIndexOutOfBounds: If ch >= channels
            ImageDataNotContiguous: If the backing buffer is not contiguous
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelIndexOutOfBounds(x, y, self.width, self.height)

        if not 0 <= ch < self.CHANNELS:
            raise ChannelIndexOutOfBounds(ch, self.CHANNELS)

        if not self._tensor.is_contiguous:
            raise ImageDataNotContiguous()

        value = self._tensor.get((y, x, ch))
        if value is None:
            raise ImageDataNotContiguous()
        return value

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def cast(self, dtype: Any) -> Self:
        """
        Convert every element to another type.

        Args:
            dtype: Target element type

        Returns:
            New image of the same channel type and size
        """
        return type(self).from_tensor(self._tensor.cast(dtype))

    def channel(self, index: int) -> Image:
        """
        Extract one channel as an independent single-channel image.

        Args:
            index: Channel index

        Returns:
            New Image[1] owning a copy of the channel

        Raises:
            ChannelIndexOutOfBounds: If index is not in [0, channels)
        """
        if not 0 <= index < self.CHANNELS:
            raise ChannelIndexOutOfBounds(index, self.CHANNELS)

        plane = np.ascontiguousarray(self._tensor.view()[:, :, index])
        return image_type(1)(self.size, plane, allocator=self._tensor.allocator)

    def split_channels(self) -> list[Image]:
        """Split the image into single-channel images, in channel order."""
        return [self.channel(i) for i in range(self.CHANNELS)]

    # ------------------------------------------------------------------
    # Elementwise statistics (float images only)
    # ------------------------------------------------------------------

    def _require_float(self, operation: str) -> None:
        if not is_float_dtype(self.dtype):
            raise TypeError(
                f"{operation}() requires a floating point image, got {self.dtype}. "
                f"Convert first with image.cast(np.float32)."
            )

    def powi(self, n: int) -> Self:
        """
        Raise every element to an integer power.

        Args:
            n: Integer exponent

        Returns:
            New image of the same shape
        """
        self._require_float("powi")
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise TypeError(f"n must be an integer, got {type(n).__name__}")

        def kernel(src: np.ndarray, out: np.ndarray) -> None:
            buffer = kernel_output(out)
            powi_numba(to_kernel_input(src), int(n), buffer)
            commit_kernel_output(buffer, out)

        return type(self).from_tensor(self._tensor.map(kernel))

    def abs(self) -> Self:
        """Absolute value of every element."""
        self._require_float("abs")

        def kernel(src: np.ndarray, out: np.ndarray) -> None:
            buffer = kernel_output(out)
            abs_numba(to_kernel_input(src), buffer)
            commit_kernel_output(buffer, out)

        return type(self).from_tensor(self._tensor.map(kernel))

    def mean(self) -> Any:
        """
        Mean of all elements.

        The sum is a sequential left-to-right fold in the element type, then
        divided by the element count converted to the element type.

        Returns:
            Scalar of the image dtype

        Raises:
            CastError: If the element count is not representable in the dtype
        """
        self._require_float("mean")
        flat = self.as_slice()
        element_type = self.dtype.type

        with np.errstate(over="ignore"):
            count = element_type(flat.size)
        if not np.isfinite(count):
            raise CastError(f"element count {flat.size} is not representable as {self.dtype}")

        if self.dtype == np.float16:
            # numba has no float16 arithmetic; cumsum is a sequential fold too
            total = np.cumsum(flat, dtype=np.float16)[-1] if flat.size else element_type(0)
        else:
            acc = np.zeros(1, dtype=self.dtype)
            sum_sequential_numba(flat, acc)
            total = acc[0]

        with np.errstate(invalid="ignore", divide="ignore"):
            return total / count

    # ------------------------------------------------------------------
    # Copy / comparison
    # ------------------------------------------------------------------

    def copy(self) -> Self:
        """Deep copy of the image."""
        return type(self).from_tensor(self._tensor.copy())

    def __copy__(self) -> Self:
        """Shallow copy (creates deep copy for safety)."""
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.CHANNELS == other.CHANNELS and self._tensor == other._tensor

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Image[{self.CHANNELS}](size={self.width}x{self.height}, dtype={self.dtype})"


@functools.cache
def image_type(channels: int) -> type[Image]:
    """
    Return the concrete image type for a channel count.

    Args:
        channels: Positive channel count

    Returns:
        Cached subclass of Image with CHANNELS fixed
    """
    if isinstance(channels, bool) or not isinstance(channels, int) or channels < 1:
        raise TypeError(f"channel count must be a positive integer, got {channels!r}")

    name = f"Image[{channels}]"
    return type(
        name,
        (Image,),
        {"CHANNELS": channels, "__slots__": (), "__module__": __name__, "__qualname__": name},
    )


ImageGray = image_type(1)
ImageRgb = image_type(3)
ImageRgba = image_type(4)
