"""
Cross-type image operations.

Functions:
- cast_and_scale(): convert the element type of an image and apply a uniform
  multiplicative scale, writing into a pre-allocated destination
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from pixwarp.errors import CastError
from pixwarp.image.image import Image
from pixwarp.image.kernels import multiply_scalar_numba
from pixwarp.utils import commit_kernel_output, kernel_dtype, kernel_output, to_kernel_input
from pixwarp.validators import validate_same_channels, validate_same_size

logger = logging.getLogger(__name__)


def _check_representable(values: np.ndarray, target: np.dtype) -> None:
    """
    Raise CastError if any value cannot be converted to the target dtype.

    Float targets accept every value. Integer targets reject non-finite values
    and values whose truncation falls outside the target range.
    """
    if values.size == 0 or not np.issubdtype(target, np.integer):
        return

    if np.issubdtype(values.dtype, np.floating):
        if not np.all(np.isfinite(values)):
            raise CastError(f"non-finite value cannot be converted to {target}")
        values = np.trunc(values)

    info = np.iinfo(target)
    lowest = values.min()
    highest = values.max()

    # Compare as Python numbers to avoid mixed signed/unsigned promotion
    if int(lowest) < info.min or int(highest) > info.max:
        raise CastError(
            f"values in [{lowest}, {highest}] do not fit {target} range [{info.min}, {info.max}]"
        )


@validate_same_channels()
@validate_same_size()
def cast_and_scale(src: Image, dst: Image, scale: Any) -> None:
    """
    Convert the element type of src and multiply by scale, writing into dst.

    For every element: dst[e] = dtype(src[e]) * dtype(scale), where dtype is
    the destination element type. The previous contents of dst are not read.

    Args:
        src: Source image
        dst: Destination image with the same size and channel count
        scale: Scale factor, converted to the destination element type

    Raises:
        InvalidImageSize: If src and dst sizes differ
        CastError: If any source element is not representable in dst's dtype
                   (checked before anything is written)

    Example:
        >>> src = Image[1](ImageSize(2, 1), [0, 255], dtype=np.uint8)
        >>> dst = Image[1].from_size_val(src.size, 0.0, dtype=np.float32)
        >>> cast_and_scale(src, dst, 1.0 / 255.0)
        >>> dst.as_slice()
        array([0., 1.], dtype=float32)
    """
    target = dst.dtype
    source = src.as_slice()

    _check_representable(source, target)

    with np.errstate(over="ignore"):
        converted = source.astype(target)
        factor = target.type(scale)

    out = dst.as_slice_mut()
    buffer = kernel_output(out)
    kernel_factor = kernel_dtype(target).type(factor)
    multiply_scalar_numba(to_kernel_input(converted), kernel_factor, buffer)
    commit_kernel_output(buffer, out)

    logger.info(
        "[cast_and_scale] %s -> %s, scale=%s, %d elements", src.dtype, target, factor, source.size
    )
