"""
Copyright (c) 2025. All rights reserved.
"""

"""
Dense tensor storage: a fixed shape over one contiguous float32 buffer.

Elements are laid out row-major (the last dimension varies fastest). Every
arithmetic result is a new tensor with its own buffer.
"""

import math
import numbers
import operator
from typing import List, Sequence, Tuple, Union

import numpy as np
import torch

from .errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    ShapeMismatchError,
)

Index = Union[int, Sequence[int]]


def _validate_shape(shape: Sequence[int]) -> Tuple[int, ...]:
    """Normalize a shape to a tuple of non-negative ints.

    Args:
        shape (Sequence[int]): Dimension sizes, outermost first

    Returns:
        Tuple[int, ...]: The validated shape

    Raises:
        InvalidArgumentError: If the shape is empty, or a dimension is negative
            or not an integer
    """
    try:
        dims = tuple(operator.index(dim) for dim in shape)
    except TypeError as e:
        raise InvalidArgumentError(f"Shape must be a sequence of integers, got {shape!r}") from e

    if not dims:
        raise InvalidArgumentError("Shape cannot be empty")
    for dim in dims:
        if dim < 0:
            raise InvalidArgumentError(f"Shape dimensions must be non-negative, got {list(dims)}")
    return dims


class Tensor:
    """Dense, row-major tensor of 32-bit floats.

    The shape is fixed at construction and the tensor exclusively owns its
    buffer. Values can be changed in place through indexed access, but no
    operation resizes a tensor; add, subtract, scale and reshape all return a
    fresh tensor.

    Example:
        t = Tensor([2, 2])
        t[0, 0] = 1.0
        t.set_at(1, 1, 4.0)
        doubled = t + t
    """

    def __init__(self, shape: Sequence[int]) -> None:
        """Allocate a zero-filled tensor.

        Args:
            shape (Sequence[int]): Dimension sizes, at least one. Zero-sized
                dimensions are allowed and give an empty buffer.

        Raises:
            InvalidArgumentError: If the shape is empty or has a negative dimension
        """
        self._shape = _validate_shape(shape)
        self._size = math.prod(self._shape)
        self._data = np.zeros(self._size, dtype=np.float32)

        # stride[last] = 1, stride[d] = stride[d + 1] * shape[d + 1]
        strides = [1] * len(self._shape)
        for d in range(len(self._shape) - 2, -1, -1):
            strides[d] = strides[d + 1] * self._shape[d + 1]
        self._strides = tuple(strides)

    @classmethod
    def _from_flat(cls, shape: Sequence[int], flat: np.ndarray) -> "Tensor":
        tensor = cls(shape)
        tensor._data[...] = flat
        return tensor

    @classmethod
    def from_numpy(cls, array) -> "Tensor":
        """Build a tensor from a numpy array or nested sequence of numbers.

        The values are copied and cast to float32; the result never shares
        memory with ``array``.

        Args:
            array: Array-like of rank >= 1

        Returns:
            Tensor: New tensor with the same shape and values

        Raises:
            InvalidArgumentError: If ``array`` is a scalar
        """
        values = np.asarray(array, dtype=np.float32)
        if values.ndim == 0:
            raise InvalidArgumentError("Cannot build a tensor from a scalar; rank must be >= 1")
        return cls._from_flat(values.shape, values.reshape(-1))

    @classmethod
    def from_torch(cls, tensor: torch.Tensor) -> "Tensor":
        """Copy a torch tensor (any device, any float dtype) into a new Tensor."""
        return cls.from_numpy(tensor.detach().cpu().numpy())

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def size(self) -> int:
        return self._size

    @property
    def rank(self) -> int:
        return len(self._shape)

    @property
    def data(self) -> np.ndarray:
        """Flat row-major buffer. Writes through it change this tensor."""
        return self._data

    def _flat_index(self, indices: Index) -> int:
        if isinstance(indices, (numbers.Integral, np.integer)):
            indices = (indices,)
        indices = tuple(indices)
        if len(indices) != len(self._shape):
            raise DimensionMismatchError(
                f"Dimension mismatch: tensor of rank {len(self._shape)} indexed with "
                f"{len(indices)} indices"
            )

        index = 0
        for d in range(len(self._shape) - 1, -1, -1):
            i = operator.index(indices[d])
            if i < 0 or i >= self._shape[d]:
                raise IndexOutOfRangeError(
                    f"Index {i} out of range for dimension {d} with size {self._shape[d]}"
                )
            index += i * self._strides[d]
        return index

    def read(self, indices: Index) -> float:
        """Return the element at a multi-index.

        Args:
            indices (Index): One index per dimension; a bare int for rank 1

        Returns:
            float: The stored value

        Raises:
            DimensionMismatchError: If the number of indices differs from the rank
            IndexOutOfRangeError: If any index is outside its dimension
        """
        return float(self._data[self._flat_index(indices)])

    def write(self, indices: Index, value: float) -> None:
        """Store ``value`` at a multi-index. Raises as ``read`` does."""
        self._data[self._flat_index(indices)] = value

    def __getitem__(self, indices: Index) -> float:
        return self.read(indices)

    def __setitem__(self, indices: Index, value: float) -> None:
        self.write(indices, value)

    def _matrix_offset(self, i: int, j: int) -> int:
        if len(self._shape) != 2:
            raise InvalidArgumentError(
                f"Two-index access requires a rank-2 tensor, got rank {len(self._shape)}"
            )
        if not (0 <= i < self._shape[0]) or not (0 <= j < self._shape[1]):
            raise IndexOutOfRangeError(
                f"Index ({i}, {j}) out of range for shape {list(self._shape)}"
            )
        return i * self._shape[1] + j

    def at(self, i: int, j: int) -> float:
        """Rank-2 accessor for element ``[i, j]``.

        Raises:
            InvalidArgumentError: If the tensor is not rank 2
            IndexOutOfRangeError: If ``i`` or ``j`` is outside its dimension
        """
        return float(self._data[self._matrix_offset(i, j)])

    def set_at(self, i: int, j: int, value: float) -> None:
        """Rank-2 setter for element ``[i, j]``. Raises as ``at`` does."""
        self._data[self._matrix_offset(i, j)] = value

    def _require_same_shape(self, other: "Tensor", op: str) -> None:
        if self._shape != other._shape:
            raise ShapeMismatchError(
                f"Shape mismatch in {op}: {list(self._shape)} vs {list(other._shape)}"
            )

    def add(self, other: "Tensor") -> "Tensor":
        """Element-wise sum of two tensors with identical shapes.

        Args:
            other (Tensor): Right operand

        Returns:
            Tensor: New tensor holding ``self + other``

        Raises:
            ShapeMismatchError: If the shapes differ
        """
        self._require_same_shape(other, "add")
        return Tensor._from_flat(self._shape, self._data + other._data)

    def subtract(self, other: "Tensor") -> "Tensor":
        """Element-wise difference ``self - other``. Raises as ``add`` does."""
        self._require_same_shape(other, "subtract")
        return Tensor._from_flat(self._shape, self._data - other._data)

    def scale(self, scalar: float) -> "Tensor":
        """Return a new tensor with every element multiplied by ``scalar``."""
        return Tensor._from_flat(self._shape, self._data * np.float32(scalar))

    def __add__(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, Tensor):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, scalar: float) -> "Tensor":
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return self.scale(scalar)

    __rmul__ = __mul__

    def copy(self) -> "Tensor":
        """Deep copy with an independent buffer."""
        return Tensor._from_flat(self._shape, self._data)

    def reshape(self, shape: Sequence[int]) -> "Tensor":
        """Return a copy of this tensor viewed under a new shape.

        Args:
            shape (Sequence[int]): Target shape with the same element count

        Returns:
            Tensor: New tensor, same row-major elements

        Raises:
            InvalidArgumentError: If ``shape`` is not a valid shape
            ShapeMismatchError: If the element counts differ
        """
        new_shape = _validate_shape(shape)
        if math.prod(new_shape) != self._size:
            raise ShapeMismatchError(
                f"Cannot reshape {list(self._shape)} ({self._size} elements) "
                f"to {list(new_shape)}"
            )
        return Tensor._from_flat(new_shape, self._data)

    def fill_(self, value: float) -> "Tensor":
        """Set every element to ``value`` in place and return ``self``."""
        self._data.fill(value)
        return self

    def zero_(self) -> "Tensor":
        return self.fill_(0.0)

    def numpy(self) -> np.ndarray:
        """Shaped float32 numpy copy of the data."""
        return self._data.reshape(self._shape).copy()

    def to_torch(self) -> torch.Tensor:
        """Shaped float32 torch copy of the data."""
        return torch.from_numpy(self.numpy())

    def tolist(self) -> List:
        return self.numpy().tolist()

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        array = self.numpy()
        return array if dtype is None else array.astype(dtype)

    def describe(self) -> str:
        """Debug dump: shape, element count and the flat data."""
        shape_str = ", ".join(str(dim) for dim in self._shape)
        data_str = ", ".join(f"{value:g}" for value in self._data)
        return f"Tensor(shape=[{shape_str}], size={self._size})\ndata=[{data_str}]"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Tensor(shape={list(self._shape)}, size={self._size})"
