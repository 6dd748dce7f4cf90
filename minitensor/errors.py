"""
Copyright (c) 2025. All rights reserved.
"""

"""
Exception types raised by Tensor and Linear.

Each error also derives from the closest builtin exception so callers can
catch either the specific kind or the generic Python category.
"""


class TensorError(Exception):
    """Base class for every error raised by minitensor."""


class InvalidArgumentError(TensorError, ValueError):
    """Bad construction argument or an accessor used on the wrong rank."""


class DimensionMismatchError(TensorError, ValueError):
    """Index length or feature dimension does not match the expected rank/size."""


class ShapeMismatchError(DimensionMismatchError):
    """Two tensors that must share a shape do not."""


class IndexOutOfRangeError(TensorError, IndexError):
    """An index component is outside its dimension's bound."""


class LayerStateError(TensorError, RuntimeError):
    """A layer operation was called in a state that does not allow it."""
