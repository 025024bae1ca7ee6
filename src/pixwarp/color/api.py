"""
Color space conversions between image types.
"""

from __future__ import annotations

import logging

import numpy as np

from pixwarp.color.kernels import gray_from_rgb_numba
from pixwarp.image.image import Image
from pixwarp.utils import to_kernel_input
from pixwarp.validators import validate_same_dtype, validate_same_size

logger = logging.getLogger(__name__)


@validate_same_dtype()
@validate_same_size()
def gray_from_rgb(src: Image, dst: Image) -> None:
    """
    Convert an RGB image to grayscale.

    Uses integer luminance weights: gray = (76*r + 150*g + 29*b) / 255.
    Integer images are truncated toward zero.

    Args:
        src: Source image, Image[3]
        dst: Pre-allocated destination, Image[1] with the same size and dtype

    Raises:
        TypeError: If src is not three-channel or dst is not single-channel
        InvalidImageSize: If sizes differ

    Example:
        >>> rgb = Image[3].from_size_val(ImageSize(4, 4), 255, dtype=np.uint8)
        >>> gray = Image[1].from_size_val(ImageSize(4, 4), 0, dtype=np.uint8)
        >>> gray_from_rgb(rgb, gray)
        >>> gray.get_pixel(0, 0, 0)
        np.uint8(255)
    """
    if src.num_channels != 3:
        raise TypeError(f"src must be an Image[3], got {type(src).__qualname__}")
    if dst.num_channels != 1:
        raise TypeError(f"dst must be an Image[1], got {type(dst).__qualname__}")

    if src.numel == 0:
        return

    compute_type = np.float64 if dst.dtype == np.float64 else np.float32
    buffer = np.empty(dst.shape, dtype=compute_type)
    gray_from_rgb_numba(to_kernel_input(src.data), buffer)

    # float -> int copy truncates toward zero
    np.copyto(dst.tensor.view_mut(), buffer, casting="unsafe")

    logger.info("[gray_from_rgb] %s, dtype=%s", src.size, src.dtype)
