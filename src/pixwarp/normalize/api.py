"""
Image normalization.

Functions:
- normalize_mean_std(): per-channel (value - mean) / std
- find_min_max(): global minimum and maximum of an image
- normalize_min_max(): linear rescale of the value range to [new_min, new_max]
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np

from pixwarp.errors import DegenerateImageRange, ImageDataNotInitialized, ShapeMismatch
from pixwarp.image.image import Image
from pixwarp.normalize.kernels import (
    find_min_max_numba,
    normalize_mean_std_numba,
    normalize_min_max_numba,
)
from pixwarp.utils import commit_kernel_output, kernel_dtype, kernel_output, to_kernel_input
from pixwarp.validators import (
    validate_float_dtype,
    validate_same_channels,
    validate_same_dtype,
    validate_same_size,
)

logger = logging.getLogger(__name__)


def _kernel_scalar(value: Any, dtype: np.dtype) -> Any:
    """Convert a scalar to the type the kernel computes in for this dtype."""
    return kernel_dtype(dtype).type(value)


def _channel_vector(values: Sequence[float], image: Image, name: str) -> np.ndarray:
    vector = np.asarray(values, dtype=kernel_dtype(image.dtype)).reshape(-1)
    if vector.size != image.num_channels:
        raise ShapeMismatch(vector.size, image.num_channels, what=f"len({name})")
    return vector


@validate_float_dtype("src")
@validate_same_dtype()
@validate_same_channels()
@validate_same_size()
def normalize_mean_std(
    src: Image,
    dst: Image,
    mean: Sequence[float],
    std: Sequence[float],
) -> None:
    """
    Normalize an image with per-channel mean and standard deviation.

    For every pixel and channel: dst = (src - mean[c]) / std[c]. A zero std
    yields inf/nan following IEEE arithmetic.

    Args:
        src: Input float image
        dst: Output image of the same size, channel count and dtype
        mean: One mean per channel
        std: One standard deviation per channel

    Raises:
        InvalidImageSize: If src and dst sizes differ
        ShapeMismatch: If mean or std does not have one entry per channel

    Example:
        >>> image = Image[3](ImageSize(2, 2), [0, 1, 0, 1, 2, 3, 0, 1, 0, 1, 2, 3], dtype=np.float32)
        >>> out = Image[3].from_size_val(image.size, 0.0, dtype=np.float32)
        >>> normalize_mean_std(image, out, [0.5, 1.0, 0.5], [1.0, 1.0, 1.0])
    """
    mean_vec = _channel_vector(mean, src, "mean")
    std_vec = _channel_vector(std, src, "std")

    out = dst.tensor.view_mut()
    buffer = kernel_output(out)
    normalize_mean_std_numba(to_kernel_input(src.data), mean_vec, std_vec, buffer)
    commit_kernel_output(buffer, out)

    logger.info("[normalize_mean_std] Normalized %s image of size %s", src.dtype, src.size)


def find_min_max(image: Image) -> tuple[Any, Any]:
    """
    Find the minimum and maximum values of an image.

    Args:
        image: Input image of any element type

    Returns:
        (min, max) as scalars of the image dtype

    Raises:
        ImageDataNotInitialized: If the image holds no elements

    Example:
        >>> image = Image[3](ImageSize(2, 2), [0, 1, 0, 1, 2, 3, 0, 1, 0, 1, 2, 3], dtype=np.uint8)
        >>> find_min_max(image)
        (np.uint8(0), np.uint8(3))
    """
    flat = image.as_slice()
    if flat.size == 0:
        raise ImageDataNotInitialized()

    source = to_kernel_input(flat)
    out = np.empty(2, dtype=source.dtype)
    find_min_max_numba(source, out)

    element_type = image.dtype.type
    return element_type(out[0]), element_type(out[1])


@validate_float_dtype("src")
@validate_same_dtype()
@validate_same_channels()
@validate_same_size()
def normalize_min_max(src: Image, dst: Image, min: float, max: float) -> None:
    """
    Rescale the value range of an image to [min, max].

    For every element: (v - src_min) * (max - min) / (src_max - src_min) + min,
    where src_min and src_max come from find_min_max(src).

    Args:
        src: Input float image
        dst: Output image of the same size, channel count and dtype
        min: Target minimum
        max: Target maximum

    Raises:
        InvalidImageSize: If src and dst sizes differ
        ImageDataNotInitialized: If src is empty
        DegenerateImageRange: If every element of src has the same value
    """
    min_val, max_val = find_min_max(src)
    if min_val == max_val:
        raise DegenerateImageRange(float(min_val))

    dtype = src.dtype
    out = dst.tensor.view_mut()
    buffer = kernel_output(out)
    normalize_min_max_numba(
        to_kernel_input(src.data),
        _kernel_scalar(min_val, dtype),
        _kernel_scalar(max_val, dtype),
        _kernel_scalar(min, dtype),
        _kernel_scalar(max, dtype),
        buffer,
    )
    commit_kernel_output(buffer, out)

    logger.info(
        "[normalize_min_max] Rescaled [%s, %s] -> [%s, %s] for image of size %s",
        min_val,
        max_val,
        min,
        max,
        src.size,
    )
