"""
Numba-optimized kernels for elementwise image operations.

All kernels take flat C-contiguous buffers and write into a pre-allocated
output, so they can be handed to Tensor3.map().
"""

import numpy as np
from numba import njit, prange


@njit(parallel=True, cache=True, nogil=True, error_model="numpy")
def powi_numba(src: np.ndarray, n: int, out: np.ndarray) -> None:
    """
    Raise every element to an integer power.

    A zero base with a negative exponent yields inf.

    Args:
        src: Input buffer [N]
        n: Integer exponent
        out: Output buffer [N] (pre-allocated)
    """
    for i in prange(src.shape[0]):
        out[i] = src[i] ** n


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def abs_numba(src: np.ndarray, out: np.ndarray) -> None:
    """
    Absolute value of every element.

    Args:
        src: Input buffer [N]
        out: Output buffer [N] (pre-allocated)
    """
    for i in prange(src.shape[0]):
        out[i] = abs(src[i])


@njit(cache=True, nogil=True)
def sum_sequential_numba(src: np.ndarray, acc: np.ndarray) -> None:
    """
    Left-to-right sum accumulated in the element type.

    Sequential on purpose: the result must not depend on the thread count.

    Args:
        src: Input buffer [N]
        acc: Accumulator [1] (pre-allocated, zero-initialized, same dtype as src)
    """
    for i in range(src.shape[0]):
        acc[0] += src[i]


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def multiply_scalar_numba(src: np.ndarray, scalar: float, out: np.ndarray) -> None:
    """
    Multiply a converted buffer by a scalar: out = src * scalar

    Args:
        src: Input buffer [N], already in the destination dtype
        scalar: Scale, already in the destination dtype
        out: Output buffer [N] (pre-allocated)
    """
    for i in prange(src.shape[0]):
        out[i] = src[i] * scalar
