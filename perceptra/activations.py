"""Activation functions used by the network's neurons."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from enum import Enum


def sigmoid(x: float) -> float:
    """Logistic function, computed without overflowing for large |x|."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def sigmoid_derivative(y: float) -> float:
    """Derivative of the sigmoid expressed through its output ``y``."""
    return y * (1.0 - y)


def relu(x: float) -> float:
    return x if x > 0 else 0.0


def relu_derivative(x: float) -> float:
    return 1.0 if x > 0 else 0.0


def tanh_act(x: float) -> float:
    return math.tanh(x)


def tanh_derivative(y: float) -> float:
    """Derivative of tanh expressed through its output ``y``."""
    return 1.0 - y * y


def softmax(z: Sequence[float]) -> list[float]:
    """Numerically stable softmax of ``z``."""
    if not z:
        raise ValueError("softmax of an empty sequence")
    max_z = max(z)
    exps = [math.exp(value - max_z) for value in z]
    total = sum(exps)
    return [value / total for value in exps]


class Activation(Enum):
    """Activation kinds; the value is the id stored in model files."""

    SIGMOID = 0
    RELU = 1
    TANH = 2
    SOFTMAX = 3

    @property
    def is_elementwise(self) -> bool:
        """False for softmax, which is applied to a whole layer at once."""
        return self is not Activation.SOFTMAX

    def activate(self, x: float) -> float:
        if self is Activation.SOFTMAX:
            raise ValueError("softmax is applied per layer, not per neuron")
        return _ACTIVATE[self](x)

    def derive(self, y: float) -> float:
        if self is Activation.SOFTMAX:
            raise ValueError("softmax has no per-neuron derivative")
        return _DERIVE[self](y)


_ACTIVATE: dict[Activation, Callable[[float], float]] = {
    Activation.SIGMOID: sigmoid,
    Activation.RELU: relu,
    Activation.TANH: tanh_act,
}

_DERIVE: dict[Activation, Callable[[float], float]] = {
    Activation.SIGMOID: sigmoid_derivative,
    Activation.RELU: relu_derivative,
    Activation.TANH: tanh_derivative,
}


def activation_by_id(activation_id: int) -> Activation:
    """Return the activation stored under ``activation_id`` in a model file."""
    try:
        return Activation(activation_id)
    except ValueError:
        raise ValueError("Unknown activation id in model loading") from None