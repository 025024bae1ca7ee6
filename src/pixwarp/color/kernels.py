"""
Numba-optimized kernels for color space conversion.
"""

import numpy as np
from numba import njit, prange

from pixwarp.constants import GRAY_DIVISOR, GRAY_WEIGHT_B, GRAY_WEIGHT_G, GRAY_WEIGHT_R


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def gray_from_rgb_numba(src: np.ndarray, out: np.ndarray) -> None:
    """
    Weighted luminance of every pixel: (76*r + 150*g + 29*b) / 255

    Args:
        src: RGB image [H, W, 3] (any numeric dtype)
        out: Gray image [H, W, 1] (pre-allocated, floating point)
    """
    height = src.shape[0]
    width = src.shape[1]

    for row in prange(height):
        for col in range(width):
            r = src[row, col, 0] * GRAY_WEIGHT_R
            g = src[row, col, 1] * GRAY_WEIGHT_G
            b = src[row, col, 2] * GRAY_WEIGHT_B
            out[row, col, 0] = (r + g + b) / GRAY_DIVISOR
