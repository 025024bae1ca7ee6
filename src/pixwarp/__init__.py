"""
pixwarp - CPU image processing primitives

Typed images backed by rank-3 tensors, with Numba-parallel kernels.

Features:
- Image[C] family with compile-time style channel arity (Image[1], Image[3], ...)
- Rank-3 tensor storage with pluggable allocators and bounds-checked views
- Element type conversion with scaling (cast_and_scale)
- Mean/std and min/max normalization
- Perspective warping with nearest and bilinear sampling
- Composable Perspective pipeline (translate, scale, rotate, flip, matrix)
- RGB to grayscale conversion
- Compact binary image messages

Example - Normalization:
    >>> import numpy as np
    >>> from pixwarp import Image, ImageSize, normalize_mean_std
    >>>
    >>> src = Image[3].from_size_val(ImageSize(640, 480), 0.5, dtype=np.float32)
    >>> dst = Image[3].from_size_val(src.size, 0.0, dtype=np.float32)
    >>> normalize_mean_std(src, dst, mean=[0.5, 0.5, 0.5], std=[0.25, 0.25, 0.25])

Example - Perspective pipeline:
    >>> from pixwarp import Perspective
    >>>
    >>> warped = (
    ...     Perspective()
    ...     .rotate(np.pi / 6, center=(320, 240))
    ...     .translate(10, 0)
    ... )(src, size=ImageSize(640, 480))
"""

__version__ = "0.1.0"

from pixwarp.color import gray_from_rgb
from pixwarp.errors import (
    CannotComputeDeterminant,
    CastError,
    ChannelIndexOutOfBounds,
    DegenerateImageRange,
    ImageDataNotContiguous,
    ImageDataNotInitialized,
    ImageError,
    InvalidImageSize,
    PixelIndexOutOfBounds,
    ShapeMismatch,
)
from pixwarp.image import (
    Image,
    ImageGray,
    ImageMsg,
    ImageRgb,
    ImageRgba,
    ImageSize,
    cast_and_scale,
    decode_image,
    encode_image,
    image_type,
)
from pixwarp.normalize import find_min_max, normalize_mean_std, normalize_min_max
from pixwarp.protocols import TensorAllocator
from pixwarp.tensor import DEFAULT_ALLOCATOR, CpuAllocator, Tensor3
from pixwarp.utils import get_numba_status, set_num_threads
from pixwarp.warp import (
    InterpolationMode,
    Perspective,
    WarpConfig,
    interpolate_pixel,
    inverse_perspective_matrix,
    meshgrid,
    transform_point,
    warp_perspective,
)

__all__ = [
    # Tensor storage
    "Tensor3",
    "TensorAllocator",
    "CpuAllocator",
    "DEFAULT_ALLOCATOR",
    # Images
    "Image",
    "ImageSize",
    "ImageGray",
    "ImageRgb",
    "ImageRgba",
    "image_type",
    "cast_and_scale",
    # Codec
    "ImageMsg",
    "encode_image",
    "decode_image",
    # Normalization
    "normalize_mean_std",
    "normalize_min_max",
    "find_min_max",
    # Color
    "gray_from_rgb",
    # Warp
    "InterpolationMode",
    "meshgrid",
    "interpolate_pixel",
    "transform_point",
    "inverse_perspective_matrix",
    "warp_perspective",
    "Perspective",
    "WarpConfig",
    # Errors
    "ImageError",
    "ShapeMismatch",
    "ChannelIndexOutOfBounds",
    "PixelIndexOutOfBounds",
    "InvalidImageSize",
    "CannotComputeDeterminant",
    "CastError",
    "ImageDataNotInitialized",
    "ImageDataNotContiguous",
    "DegenerateImageRange",
    # Utilities
    "get_numba_status",
    "set_num_threads",
    # Version
    "__version__",
]
