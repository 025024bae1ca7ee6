"""
Tensor3: rank-3 owned buffer with a validated shape and an allocation strategy.

The buffer is always C-contiguous and holds exactly dim0 * dim1 * dim2
elements of a dtype from the element-safety contract.
"""

from __future__ import annotations

import logging
import math
import weakref
from collections.abc import Callable, Sequence
from typing import Any, Self, TypeAlias

import numpy as np

from pixwarp.constants import TENSOR_RANK
from pixwarp.errors import ShapeMismatch
from pixwarp.protocols import TensorAllocator
from pixwarp.tensor.allocator import DEFAULT_ALLOCATOR
from pixwarp.tensor.dtypes import check_safe_dtype

logger = logging.getLogger(__name__)

Shape3: TypeAlias = tuple[int, int, int]


def _validate_shape(shape: Sequence[int]) -> Shape3:
    """Normalize a shape to a tuple of three non-negative ints."""
    dims = tuple(shape)
    if len(dims) != TENSOR_RANK:
        raise ValueError(f"shape must have {TENSOR_RANK} dimensions, got {len(dims)}: {dims}")
    for dim in dims:
        if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)):
            raise TypeError(f"shape dimensions must be integers, got {type(dim).__name__}")
        if dim < 0:
            raise ValueError(f"shape dimensions must be non-negative, got {dims}")
    return int(dims[0]), int(dims[1]), int(dims[2])


class Tensor3:
    """
    Rank-3 tensor owning a contiguous buffer.

    Attributes:
        shape: (dim0, dim1, dim2)
        dtype: Element type (see pixwarp.tensor.dtypes)
        allocator: Strategy that allocated the buffer

    Example:
        >>> t = Tensor3((2, 1, 3), [0, 1, 2, 3, 4, 5], dtype=np.uint8)
        >>> t.get((1, 0, 2))
        np.uint8(5)
        >>> Tensor3((2, 2, 1), [1, 2, 3])
        Traceback (most recent call last):
        ...
        pixwarp.errors.ShapeMismatch: data length=3 does not match the expected 4. ...
    """

    __slots__ = ("_data", "_allocator", "_finalizer", "__weakref__")

    def __init__(
        self,
        shape: Sequence[int],
        data: Any,
        allocator: TensorAllocator | None = None,
        dtype: Any = None,
    ):
        shape = _validate_shape(shape)
        buffer = np.asarray(data, dtype=dtype)
        expected = math.prod(shape)

        if buffer.size != expected:
            raise ShapeMismatch(buffer.size, expected)

        element_type = check_safe_dtype(buffer.dtype)
        allocator = allocator if allocator is not None else DEFAULT_ALLOCATOR

        storage = allocator.allocate(shape, element_type)
        storage[...] = buffer.reshape(shape)
        self._adopt(storage, allocator)

    def _adopt(self, storage: np.ndarray, allocator: TensorAllocator) -> None:
        self._data = storage
        self._allocator = allocator
        self._finalizer = weakref.finalize(self, allocator.deallocate, storage)

    @classmethod
    def from_shape_vec(
        cls,
        shape: Sequence[int],
        data: Any,
        allocator: TensorAllocator | None = None,
        dtype: Any = None,
    ) -> Self:
        """
        Create a tensor from a flat buffer.

        Args:
            shape: (dim0, dim1, dim2)
            data: Flat sequence or array with product(shape) elements
            allocator: Allocation strategy (default: CpuAllocator)
            dtype: Optional element type, inferred from data otherwise

        Returns:
            New tensor owning a copy of data

        Raises:
            ShapeMismatch: If len(data) != product(shape)
        """
        return cls(shape, data, allocator=allocator, dtype=dtype)

    @classmethod
    def from_shape_val(
        cls,
        shape: Sequence[int],
        value: Any,
        dtype: Any = None,
        allocator: TensorAllocator | None = None,
    ) -> Self:
        """
        Create a tensor filled with a single value.

        Args:
            shape: (dim0, dim1, dim2)
            value: Fill value
            dtype: Optional element type, inferred from value otherwise
            allocator: Allocation strategy (default: CpuAllocator)

        Returns:
            New tensor with every element equal to value
        """
        shape = _validate_shape(shape)
        element_type = check_safe_dtype(dtype if dtype is not None else np.asarray(value).dtype)
        allocator = allocator if allocator is not None else DEFAULT_ALLOCATOR

        storage = allocator.allocate(shape, element_type)
        storage.fill(value)

        tensor = cls.__new__(cls)
        tensor._adopt(storage, allocator)
        return tensor

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def shape(self) -> Shape3:
        return self._data.shape  # type: ignore[return-value]

    @property
    def strides(self) -> Shape3:
        """Element (not byte) strides of the row-major buffer."""
        _, dim1, dim2 = self.shape
        return dim1 * dim2, dim2, 1

    @property
    def numel(self) -> int:
        return self._data.size

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def allocator(self) -> TensorAllocator:
        return self._allocator

    @property
    def nbytes(self) -> int:
        return self._data.nbytes

    @property
    def is_contiguous(self) -> bool:
        return bool(self._data.flags.c_contiguous)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def as_slice(self) -> np.ndarray:
        """Read-only flat view of the buffer."""
        flat = self._data.reshape(-1)
        flat.flags.writeable = False
        return flat

    def as_slice_mut(self) -> np.ndarray:
        """Writable flat view of the buffer."""
        return self._data.reshape(-1)

    def view(self) -> np.ndarray:
        """Read-only (dim0, dim1, dim2) view of the buffer."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def view_mut(self) -> np.ndarray:
        """Writable (dim0, dim1, dim2) view of the buffer."""
        return self._data.view()

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def get(self, index: Sequence[int]) -> Any:
        """
        Return the element at a 3-index, or None if any index is out of range.

        Negative indices are treated as out of range.
        """
        i, j, k = index
        dim0, dim1, dim2 = self.shape
        if not (0 <= i < dim0 and 0 <= j < dim1 and 0 <= k < dim2):
            return None
        return self._data[i, j, k]

    def get_unchecked(self, index: Sequence[int]) -> Any:
        """Return the element at a 3-index without range checks."""
        i, j, k = index
        return self._data[i, j, k]

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def map(
        self,
        func: Callable[[np.ndarray, np.ndarray], Any],
        dtype: Any = None,
    ) -> Tensor3:
        """
        Shape-preserving transformation into a newly allocated tensor.

        Args:
            func: Called as func(src_flat, out_flat); must write every element
                  of out_flat. src_flat is read-only.
            dtype: Element type of the result (default: same as self)

        Returns:
            New tensor with the same shape, allocated by the same allocator

        Example:
            >>> doubled = t.map(lambda src, out: np.multiply(src, 2, out=out))
        """
        element_type = check_safe_dtype(dtype if dtype is not None else self.dtype)
        storage = self._allocator.allocate(self.shape, element_type)
        func(self.as_slice(), storage.reshape(-1))

        result = Tensor3.__new__(Tensor3)
        result._adopt(storage, self._allocator)
        return result

    def cast(self, dtype: Any) -> Tensor3:
        """Per-element numeric conversion into a new tensor."""
        return self.map(lambda src, out: np.copyto(out, src, casting="unsafe"), dtype=dtype)

    def copy(self) -> Tensor3:
        """Deep copy of the tensor (same allocator)."""
        return self.map(lambda src, out: np.copyto(out, src))

    def __copy__(self) -> Tensor3:
        """Shallow copy (creates deep copy for safety)."""
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Tensor3:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor3):
            return NotImplemented
        return (
            self.shape == other.shape
            and self.dtype == other.dtype
            and bool(np.array_equal(self._data, other._data))
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Tensor3(shape={self.shape}, dtype={self.dtype}, allocator={self._allocator!r})"
