"""
Copyright (c) 2025. All rights reserved.
"""

"""
Configuration dataclasses for minitensor layers.
"""

from dataclasses import dataclass

DEFAULT_SEED = 1337


@dataclass
class LinearConfig:
    """
    Construction parameters for a Linear layer.

    Groups the layer's fixed hyperparameters so a layer can be rebuilt
    identically from a stored configuration. Two layers built from equal
    configs start with identical weights.

    Attributes:
        in_features (int): Size of the last input dimension, must be positive
        out_features (int): Size of the last output dimension, must be positive
        use_bias (bool): Whether the layer adds a learned bias vector
        seed (int): Seed for the layer's own weight-initialization generator

    Example:
        config = LinearConfig(
            in_features=4,
            out_features=2,
            use_bias=True,
            seed=1337
        )
        layer = Linear.from_config(config)
    """
    in_features: int           # Input feature count
    out_features: int          # Output feature count
    use_bias: bool = True      # Add bias after the matrix product
    seed: int = DEFAULT_SEED   # Weight initialization seed
