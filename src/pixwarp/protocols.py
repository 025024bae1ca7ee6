"""
Protocol definitions for pixwarp interfaces.

Defines the allocation strategy interface that backs every tensor buffer.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class TensorAllocator(Protocol):
    """
    Protocol for tensor allocation strategies.

    Tensors request their buffer through an allocator and hand it back when
    they are garbage collected, so arena or pool strategies can be plugged in
    without touching Tensor3 or Image logic.
    """

    def allocate(self, shape: tuple[int, ...], dtype: np.dtype) -> np.ndarray:
        """
        Allocate an uninitialized C-contiguous buffer.

        Args:
            shape: Buffer shape
            dtype: Element type

        Returns:
            Writable array of the requested shape and dtype
        """
        ...

    def deallocate(self, buffer: np.ndarray) -> None:
        """Release a buffer previously returned by allocate()."""
        ...
