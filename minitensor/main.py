"""
Demonstration of a Linear layer with manually accumulated gradients.

This script builds a small layer with known weights, runs a forward pass
on a batch, backpropagates the gradient of a sum loss, and prints the
accumulated parameter gradients together with the input gradient.

The network is: Input [2, 3] -> Linear(3, 2) -> Sum (loss)

Since d(sum)/dy is all ones, the expected gradients are:
- grad_weight[i, o] = sum over rows of x[r, i]
- grad_bias[o] = number of rows
- grad_input[r, i] = sum over o of weight[i, o]
"""

import logging
from typing import Dict

from minitensor.linear import Linear
from minitensor.tensor import Tensor


def run_demo() -> Dict[str, Tensor]:
    """Run one forward/backward step and return every tensor it produced."""
    layer = Linear(3, 2, use_bias=True, seed=1337)

    # Replace the random initialization with known values so the output is checkable
    weight_values = [[3.0, 1.0], [3.0, 1.0], [3.0, 1.0]]  # [in=3, out=2]
    for i, row in enumerate(weight_values):
        for o, value in enumerate(row):
            layer.weight.set_at(i, o, value)
    layer.bias[0] = -5.0
    layer.bias[1] = -12.0

    x = Tensor.from_numpy([[2.0, 2.0, 2.0], [1.0, 0.0, -1.0]])  # Input [2, 3]

    layer.zero_grad()
    y = layer.forward(x)
    grad_output = Tensor(y.shape).fill_(1.0)  # d(sum(y))/dy
    grad_input = layer.backward(grad_output)

    return {
        "input": x,
        "output": y,
        "grad_input": grad_input,
        "grad_weight": layer.grad_weight,
        "grad_bias": layer.grad_bias,
    }


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    results = run_demo()

    print(f"Linear output: {results['output'].tolist()}")
    print(f"Loss: {float(results['output'].data.sum())}")
    print(f"x.grad: {results['grad_input'].tolist()}")
    print(f"w.grad: {results['grad_weight'].tolist()}")
    print(f"b.grad: {results['grad_bias'].tolist()}")
    print()
    print(results["output"])
