"""
Utility functions for Numba configuration and kernel buffer handling.
"""

from __future__ import annotations

import logging
from typing import Any

import numba
import numpy as np

logger = logging.getLogger(__name__)


def get_numba_status() -> dict[str, Any]:
    """
    Get information about Numba availability and configuration.

    Returns:
        Dictionary with Numba status information
    """
    return {
        "available": True,
        "version": numba.__version__,
        "num_threads": numba.get_num_threads(),
        "max_threads": numba.config.NUMBA_NUM_THREADS,
        "threading_layer": numba.config.THREADING_LAYER,
    }


def set_num_threads(n: int) -> None:
    """
    Set the number of worker threads used by parallel kernels.

    Results of every pixwarp operation are independent of this setting.

    Args:
        n: Thread count in [1, NUMBA_NUM_THREADS]
    """
    max_threads = numba.config.NUMBA_NUM_THREADS
    if not 1 <= n <= max_threads:
        raise ValueError(f"n={n} is outside valid range [1, {max_threads}]")
    numba.set_num_threads(n)
    logger.debug("[set_num_threads] Using %d threads", n)


# Numba kernels do not compile for float16, so half precision buffers are
# staged through float32 copies.


def to_kernel_input(array: np.ndarray) -> np.ndarray:
    """Return array, or a float32 copy if Numba cannot operate on its dtype."""
    if array.dtype == np.float16:
        return array.astype(np.float32)
    return array


def kernel_output(out: np.ndarray) -> np.ndarray:
    """Return out, or a float32 scratch buffer of the same shape for float16."""
    if out.dtype == np.float16:
        return np.empty(out.shape, dtype=np.float32)
    return out


def commit_kernel_output(buffer: np.ndarray, out: np.ndarray) -> None:
    """Copy a scratch buffer from kernel_output() back into out."""
    if buffer is not out:
        np.copyto(out, buffer, casting="unsafe")


def kernel_dtype(dtype: np.dtype) -> np.dtype:
    """Element type kernels compute in for buffers of the given dtype."""
    if np.dtype(dtype) == np.float16:
        return np.dtype(np.float32)
    return np.dtype(dtype)
