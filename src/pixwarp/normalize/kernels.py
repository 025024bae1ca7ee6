"""
Numba-optimized kernels for image normalization.

Images are passed as (height, width, channels) arrays; parallel kernels split
the work by row.
"""

import numpy as np
from numba import njit, prange


@njit(parallel=True, cache=True, nogil=True, error_model="numpy")
def normalize_mean_std_numba(
    src: np.ndarray,
    mean: np.ndarray,
    std: np.ndarray,
    out: np.ndarray,
) -> None:
    """
    Per-channel standardization: (value - mean[c]) / std[c]

    Compiled without fastmath so a zero std yields inf/nan.

    Args:
        src: Input image [H, W, C]
        mean: Channel means [C]
        std: Channel standard deviations [C]
        out: Output image [H, W, C] (pre-allocated)
    """
    height = src.shape[0]
    width = src.shape[1]
    channels = src.shape[2]

    for y in prange(height):
        for x in range(width):
            for c in range(channels):
                out[y, x, c] = (src[y, x, c] - mean[c]) / std[c]


@njit(cache=True, nogil=True)
def find_min_max_numba(src: np.ndarray, out: np.ndarray) -> None:
    """
    Single sequential scan for the minimum and maximum.

    Strict comparisons keep the first occurrence on ties.

    Args:
        src: Input buffer [N], N >= 1
        out: Output [2] (pre-allocated, same dtype as src): (min, max)
    """
    lo = src[0]
    hi = src[0]
    for i in range(src.shape[0]):
        value = src[i]
        if value < lo:
            lo = value
        if value > hi:
            hi = value
    out[0] = lo
    out[1] = hi


@njit(parallel=True, cache=True, nogil=True, error_model="numpy")
def normalize_min_max_numba(
    src: np.ndarray,
    min_val: float,
    max_val: float,
    new_min: float,
    new_max: float,
    out: np.ndarray,
) -> None:
    """
    Linear rescale from [min_val, max_val] to [new_min, new_max].

    Compiled without fastmath so an infinite extent yields IEEE results.

    Args:
        src: Input image [H, W, C]
        min_val: Current minimum of src
        max_val: Current maximum of src
        new_min: Target minimum
        new_max: Target maximum
        out: Output image [H, W, C] (pre-allocated)
    """
    height = src.shape[0]
    width = src.shape[1]
    channels = src.shape[2]
    span = new_max - new_min
    extent = max_val - min_val

    for y in prange(height):
        for x in range(width):
            for c in range(channels):
                out[y, x, c] = (src[y, x, c] - min_val) * span / extent + new_min
