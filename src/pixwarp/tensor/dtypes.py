"""
Element-safety contract for tensor buffers.

Only plain integer and floating point dtypes may back a tensor. Object,
string, structured, complex and boolean dtypes are rejected.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pixwarp.constants import SAFE_DTYPE_NAMES

SAFE_DTYPES: frozenset[np.dtype] = frozenset(np.dtype(name) for name in SAFE_DTYPE_NAMES)


def is_safe_dtype(dtype: Any) -> bool:
    """Return True if dtype may back a tensor buffer."""
    try:
        return np.dtype(dtype) in SAFE_DTYPES
    except TypeError:
        return False


def check_safe_dtype(dtype: Any) -> np.dtype:
    """
    Validate and normalize a tensor element type.

    Args:
        dtype: Anything accepted by np.dtype()

    Returns:
        The normalized np.dtype

    Raises:
        TypeError: If dtype is not part of the element-safety contract
    """
    if not is_safe_dtype(dtype):
        allowed = ", ".join(SAFE_DTYPE_NAMES)
        raise TypeError(f"dtype {dtype!r} cannot back a tensor. Allowed element types: {allowed}")
    return np.dtype(dtype)


def is_float_dtype(dtype: Any) -> bool:
    """Return True for the floating point members of the contract."""
    return np.issubdtype(np.dtype(dtype), np.floating)
