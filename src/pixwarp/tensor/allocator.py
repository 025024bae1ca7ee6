"""
Default CPU allocator for tensor buffers.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)


class CpuAllocator:
    """
    Plain heap allocator backed by NumPy.

    Buffers are returned C-contiguous and uninitialized. Deallocation is left
    to the NumPy reference count, so deallocate() only drops the reference.
    """

    __slots__ = ()

    def allocate(self, shape: tuple[int, ...], dtype: np.dtype) -> np.ndarray:
        return np.empty(shape, dtype=dtype, order="C")

    def deallocate(self, buffer: np.ndarray) -> None:
        logger.debug("[CpuAllocator] Released %d bytes", buffer.nbytes)

    def __repr__(self) -> str:
        return "CpuAllocator()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, CpuAllocator)

    def __hash__(self) -> int:
        return hash(CpuAllocator)


DEFAULT_ALLOCATOR = CpuAllocator()
