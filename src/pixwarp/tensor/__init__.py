"""
Rank-3 tensor storage: element-safety contract, allocators and Tensor3.
"""

from pixwarp.tensor.allocator import DEFAULT_ALLOCATOR, CpuAllocator
from pixwarp.tensor.dtypes import SAFE_DTYPES, check_safe_dtype, is_float_dtype, is_safe_dtype
from pixwarp.tensor.tensor import Tensor3

__all__ = [
    "Tensor3",
    "CpuAllocator",
    "DEFAULT_ALLOCATOR",
    "SAFE_DTYPES",
    "check_safe_dtype",
    "is_safe_dtype",
    "is_float_dtype",
]
