"""
Copyright (c) 2025. All rights reserved.
"""

"""
Test suite for minitensor.

This package contains tests for Tensor storage and arithmetic, the Linear
layer's forward and backward passes, and the demo script. Backward results
are verified against torch.autograd.
"""
