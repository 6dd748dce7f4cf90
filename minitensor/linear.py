"""
Copyright (c) 2025. All rights reserved.
"""

"""
Linear layer implementation: y = xW + b
"""

import logging
import math
from typing import Iterator, Optional, Tuple

import torch

from .configs import DEFAULT_SEED, LinearConfig
from .errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    LayerStateError,
    ShapeMismatchError,
)
from .tensor import Tensor

logger = logging.getLogger(__name__)


class Linear:
    """Fully connected layer with manually accumulated gradients.

    Implements the affine transformation y = xW + b over the last dimension
    of the input. The weight is stored as [in_features, out_features], so
    ``weight[i, o]`` connects input feature i to output feature o and the
    forward pass computes ``sum_i x[i] * weight[i, o]`` without a transpose.

    Every leading dimension of the input is treated as batch: an input of
    shape [2, 3, in_features] is processed as 6 independent rows and the
    output has shape [2, 3, out_features].

    There is no computation graph. Each layer owns ``grad_weight`` and
    ``grad_bias`` buffers with the same shapes as its parameters; ``backward``
    adds into them and ``zero_grad`` resets them. A training loop calls
    ``zero_grad``, then one ``forward``/``backward`` pair, then hands the
    gradients to an optimizer which updates ``weight`` and ``bias`` in place.

    The forward cache holds a single input, so an instance must not run
    forward/backward pairs from several threads at once.
    """

    def __init__(
        self,
        in_features: int,
        out_features: int,
        use_bias: bool = True,
        seed: int = DEFAULT_SEED,
    ) -> None:
        """Create the layer and initialize its parameters.

        Args:
            in_features (int): Size of the last input dimension
            out_features (int): Size of the last output dimension
            use_bias (bool): Whether to add a learned bias vector
            seed (int): Seed for this layer's own random generator. Layers
                built with the same arguments start with identical weights.

        Raises:
            InvalidArgumentError: If either feature count is not positive
        """
        if in_features <= 0 or out_features <= 0:
            raise InvalidArgumentError(
                f"Feature counts must be positive, got in_features={in_features}, "
                f"out_features={out_features}"
            )

        self._in_features = in_features
        self._out_features = out_features
        self._use_bias = use_bias

        self._weight = Tensor([in_features, out_features])
        self._grad_weight = Tensor([in_features, out_features])
        self._bias: Optional[Tensor] = Tensor([out_features]) if use_bias else None
        self._grad_bias: Optional[Tensor] = Tensor([out_features]) if use_bias else None

        # cache for backward
        self._cached_input: Optional[Tensor] = None
        self._cached_input_shape: Optional[Tuple[int, ...]] = None

        self._generator = torch.Generator().manual_seed(seed)
        self.reset_parameters()

        logger.info(
            f"Created Linear(in_features={in_features}, out_features={out_features}, "
            f"use_bias={use_bias}, seed={seed})"
        )

    @classmethod
    def from_config(cls, config: LinearConfig) -> "Linear":
        return cls(
            config.in_features,
            config.out_features,
            use_bias=config.use_bias,
            seed=config.seed,
        )

    @property
    def in_features(self) -> int:
        return self._in_features

    @property
    def out_features(self) -> int:
        return self._out_features

    @property
    def use_bias(self) -> bool:
        return self._use_bias

    @property
    def weight(self) -> Tensor:
        return self._weight

    @property
    def bias(self) -> Optional[Tensor]:
        return self._bias

    @property
    def grad_weight(self) -> Tensor:
        return self._grad_weight

    @property
    def grad_bias(self) -> Optional[Tensor]:
        return self._grad_bias

    @property
    def has_cache(self) -> bool:
        """True between a forward call and the backward call that consumes it."""
        return self._cached_input is not None

    def parameters(self) -> Iterator[Tuple[str, Tensor, Tensor]]:
        """Yield ``(name, parameter, gradient)`` for each trainable tensor.

        The tensors are the layer's own storage, so an optimizer can update
        them in place.
        """
        yield "weight", self._weight, self._grad_weight
        if self._use_bias:
            yield "bias", self._bias, self._grad_bias

    def reset_parameters(self) -> None:
        """Xavier/Glorot uniform weights, zero bias.

        Weights are drawn from U[-limit, limit) with
        limit = sqrt(6 / (in_features + out_features)), using the layer's
        generator. Calling this again continues the same random stream, so
        the new weights differ from the construction-time ones.
        """
        limit = math.sqrt(6.0 / (self._in_features + self._out_features))
        values = torch.empty(self._in_features, self._out_features, dtype=torch.float32)
        values.uniform_(-limit, limit, generator=self._generator)
        self._weight.data[...] = values.reshape(-1).numpy()

        if self._bias is not None:
            self._bias.zero_()

        logger.debug(f"Initialized weight {list(self._weight.shape)} with limit={limit:.6f}")

    def zero_grad(self) -> None:
        """Reset accumulated gradients to zero and drop the forward cache."""
        self._grad_weight.zero_()
        if self._grad_bias is not None:
            self._grad_bias.zero_()
        self._cached_input = None
        self._cached_input_shape = None
        logger.debug("Gradients reset")

    def forward(self, input: Tensor) -> Tensor:
        """Forward pass computing y = xW + b over the last dimension.

        Args:
            input (Tensor): Input features [..., in_features], rank >= 1

        Returns:
            Tensor: Output [..., out_features] with the input's leading dimensions

        Raises:
            InvalidArgumentError: If the input has no dimensions
            DimensionMismatchError: If the last dimension is not in_features
        """
        shape = tuple(input.shape)
        if not shape:
            raise InvalidArgumentError("input must have rank >= 1")
        if shape[-1] != self._in_features:
            raise DimensionMismatchError(
                f"Expected last input dimension {self._in_features}, got shape {list(shape)}"
            )

        batch = math.prod(shape[:-1])
        x = input.data.reshape(batch, self._in_features)
        y = x @ self._weight.data.reshape(self._in_features, self._out_features)
        if self._bias is not None:
            y = y + self._bias.data

        output_shape = shape[:-1] + (self._out_features,)
        output = Tensor.from_numpy(y.reshape(output_shape))

        self._cached_input = input.copy()
        self._cached_input_shape = shape

        logger.debug(f"Linear forward: {list(shape)} -> {list(output_shape)} (batch={batch})")
        return output

    __call__ = forward

    def backward(self, grad_output: Tensor) -> Tensor:
        """Backward pass accumulating parameter gradients.

        Computes, with x the cached input and g = grad_output, both flattened
        to [batch, features]:
        - ∂L/∂W = x^T @ g, added into grad_weight
        - ∂L/∂b = g summed over the batch, added into grad_bias
        - ∂L/∂x = g @ W^T, returned in the cached input's shape

        Gradients accumulate until ``zero_grad`` is called. The cache is
        consumed, so each forward supports exactly one backward.

        Args:
            grad_output (Tensor): Gradient w.r.t. the last forward output

        Returns:
            Tensor: Gradient w.r.t. the last forward input

        Raises:
            LayerStateError: If there is no forward call to differentiate
            ShapeMismatchError: If grad_output's shape differs from the last output's
        """
        if self._cached_input is None:
            raise LayerStateError("backward called without a preceding forward")

        input_shape = self._cached_input_shape
        expected_shape = input_shape[:-1] + (self._out_features,)
        if tuple(grad_output.shape) != expected_shape:
            raise ShapeMismatchError(
                f"grad_output shape {list(grad_output.shape)} does not match "
                f"forward output shape {list(expected_shape)}"
            )

        batch = math.prod(input_shape[:-1])
        x = self._cached_input.data.reshape(batch, self._in_features)
        g = grad_output.data.reshape(batch, self._out_features)
        weight = self._weight.data.reshape(self._in_features, self._out_features)

        self._grad_weight.data[...] += (x.T @ g).reshape(-1)
        if self._grad_bias is not None:
            self._grad_bias.data[...] += g.sum(axis=0)

        grad_input = Tensor.from_numpy((g @ weight.T).reshape(input_shape))

        self._cached_input = None
        self._cached_input_shape = None

        logger.debug(f"Linear backward: {list(expected_shape)} -> {list(input_shape)}")
        return grad_input

    def __repr__(self) -> str:
        return (
            f"Linear(in_features={self._in_features}, out_features={self._out_features}, "
            f"use_bias={self._use_bias})"
        )
