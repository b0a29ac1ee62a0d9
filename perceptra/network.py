"""Neurons, weighted connections and layers of a multilayer perceptron."""

from __future__ import annotations

import random
import struct
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import BinaryIO

from perceptra.activations import Activation, softmax

LEARNING_RATE = 0.1
RANDOM_SEED = 42

_WEIGHT = struct.Struct("<f")


@dataclass(eq=False)
class Connection:
    """A weighted edge shared by its source and target neurons."""

    source: Neuron
    target: Neuron
    weight: float


@dataclass(eq=False)
class Neuron:
    """A single unit holding its output, net input and error term."""

    activation: Activation = Activation.SIGMOID
    output: float = 0.0
    net_input: float = 0.0
    delta: float = 0.0
    is_bias: bool = False
    inputs: list[Connection] = field(default_factory=list)
    outputs: list[Connection] = field(default_factory=list)

    def compute_output(self) -> None:
        if self.is_bias:
            self.output = 1.0
            return
        self.net_input = sum(c.weight * c.source.output for c in self.inputs)
        if self.activation.is_elementwise:
            self.output = self.activation.activate(self.net_input)

    def compute_delta(self, is_output_neuron: bool, target: float = 0.0) -> None:
        if is_output_neuron:
            # For softmax with cross-entropy the derivative is already folded in.
            self.delta = self.output - target
        else:
            downstream = sum(c.weight * c.target.delta for c in self.outputs)
            self.delta = self.activation.derive(self.output) * downstream

    def update_weights(self) -> None:
        if self.is_bias:
            return
        for connection in self.inputs:
            connection.weight -= LEARNING_RATE * self.delta * connection.source.output


class Layer:
    """A layer of neurons, optionally ending with a bias neuron."""

    def __init__(self, num_neurons: int, activation: Activation, has_bias: bool = True):
        self.activation = activation
        self.is_output_layer = False
        self.softmax_enabled = False
        self.neurons = [Neuron(activation) for _ in range(num_neurons)]
        if has_bias:
            self.neurons.append(Neuron(activation, output=1.0, is_bias=True))

    def connect_to(self, next_layer: Layer) -> None:
        """Fully connect this layer to ``next_layer`` with seeded random weights."""
        rng = random.Random(RANDOM_SEED)
        for neuron in next_layer.neurons:
            if neuron.is_bias:
                continue
            for previous in self.neurons:
                connection = Connection(previous, neuron, rng.randrange(100) / 100.0 - 0.5)
                neuron.inputs.append(connection)
                previous.outputs.append(connection)

    def compute_outputs(self) -> None:
        for neuron in self.neurons:
            neuron.compute_output()

    def compute_deltas(self, targets: Sequence[float] | None = None) -> None:
        if self.is_output_layer:
            for index, neuron in enumerate(self.neurons):
                if not neuron.is_bias:
                    target = targets[index] if targets is not None else 0.0
                    neuron.compute_delta(True, target)
        else:
            for neuron in self.neurons:
                if not neuron.is_bias:
                    neuron.compute_delta(False)

    def update_weights(self) -> None:
        for neuron in self.neurons:
            neuron.update_weights()

    def apply_softmax(self) -> None:
        if not self.softmax_enabled:
            return
        active = [n for n in self.neurons if not n.is_bias]
        for neuron, value in zip(active, softmax([n.net_input for n in active])):
            neuron.output = value

    def outputs(self) -> list[float]:
        return [n.output for n in self.neurons if not n.is_bias]

    def set_inputs(self, inputs: Sequence[float]) -> None:
        if len(inputs) > len(self.neurons):
            raise ValueError(
                f"{len(inputs)} inputs given to a layer of {len(self.neurons)} neurons"
            )
        for neuron, value in zip(self.neurons, inputs):
            neuron.output = value

    def set_as_output_layer(self, softmax: bool = False) -> None:
        self.is_output_layer = True
        self.softmax_enabled = softmax

    def __len__(self) -> int:
        return len(self.neurons)

    def __getitem__(self, index: int) -> Neuron:
        return self.neurons[index]

    def _incoming(self):
        for neuron in self.neurons:
            if not neuron.is_bias:
                yield from neuron.inputs

    def save_weights(self, stream: BinaryIO) -> None:
        """Write incoming weights as little-endian 32-bit floats."""
        stream.write(b"".join(_WEIGHT.pack(c.weight) for c in self._incoming()))

    def load_weights(self, stream: BinaryIO) -> None:
        """Read incoming weights written by :meth:`save_weights`."""
        for connection in self._incoming():
            chunk = stream.read(_WEIGHT.size)
            if len(chunk) < _WEIGHT.size:
                raise ValueError("Unexpected end of weight data")
            (connection.weight,) = _WEIGHT.unpack(chunk)