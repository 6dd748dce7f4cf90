"""
Copyright (c) 2025. All rights reserved.
"""

"""
Minimal dense tensors and a trainable linear layer with manual gradients.

Modules:
    tensor: Row-major float32 Tensor with bounds-checked indexing and arithmetic
    linear: Linear layer y = xW + b with gradient accumulation
    configs: LinearConfig dataclass
    errors: Exception types
"""

from .configs import LinearConfig
from .errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    LayerStateError,
    ShapeMismatchError,
    TensorError,
)
from .linear import Linear
from .tensor import Tensor

__version__ = "1.0.0"

__all__ = [
    # Storage
    "Tensor",
    # Layers
    "Linear",
    "LinearConfig",
    # Errors
    "TensorError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "ShapeMismatchError",
    "IndexOutOfRangeError",
    "LayerStateError",
]
