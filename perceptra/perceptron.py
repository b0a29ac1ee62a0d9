"""A fully connected multilayer perceptron trained by backpropagation."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

from perceptra.activations import Activation, activation_by_id
from perceptra.mnist import display_image
from perceptra.network import Layer

_COUNT = struct.Struct("<Q")
_INT = struct.Struct("<i")
_MAX_PRINTED_EPOCHS = 20


def _argmax(values: Sequence[float]) -> int:
    """Index of the first largest value."""
    return max(range(len(values)), key=values.__getitem__)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    chunk = stream.read(size)
    if len(chunk) < size:
        raise ValueError("Unexpected end of model file")
    return chunk


class MultilayerPerceptron:
    """A layered network with bias neurons on every layer but the output."""

    def __init__(self) -> None:
        self.layers: list[Layer] = []
        self.softmax_output = False

    def _network(self) -> list[Layer]:
        if not self.layers:
            raise RuntimeError("The network has not been created")
        return self.layers

    def create_network(
        self, architecture: Sequence[int], activations: Sequence[Activation]
    ) -> None:
        """Build layers of the given sizes; one activation per non-input layer."""
        architecture = list(architecture)
        activations = list(activations)
        if len(architecture) < 2 or len(activations) != len(architecture) - 1:
            raise ValueError(
                "Number of activation functions must match hidden layers + output"
            )
        if any(size <= 0 for size in architecture):
            raise ValueError("Layer sizes must be positive")

        self.softmax_output = activations[-1] is Activation.SOFTMAX
        last = len(architecture) - 1
        layers = [
            Layer(
                size,
                Activation.SIGMOID if index == 0 else activations[index - 1],
                has_bias=index != last,
            )
            for index, size in enumerate(architecture)
        ]
        layers[-1].set_as_output_layer(self.softmax_output)
        for previous, following in zip(layers, layers[1:]):
            previous.connect_to(following)
        self.layers = layers

    def set_input(self, inputs: Sequence[float]) -> None:
        self._network()[0].set_inputs(inputs)

    def forward_propagate(self) -> list[float]:
        """Propagate the current input and return the output layer's values."""
        layers = self._network()
        for layer in layers[1:]:
            layer.compute_outputs()
        if self.softmax_output:
            layers[-1].apply_softmax()
        return layers[-1].outputs()

    def back_propagate(self, targets: Sequence[float]) -> None:
        """Compute error terms from ``targets`` and adjust every weight once."""
        layers = self._network()
        if len(targets) < len(layers[-1].outputs()):
            raise ValueError("Fewer targets than output neurons")
        layers[-1].compute_deltas(targets)
        for layer in reversed(layers[:-1]):
            layer.compute_deltas()
        for layer in layers[1:]:
            layer.update_weights()

    def train(self, sample: Sequence[float], target: Sequence[float]) -> None:
        """Run one forward and backward pass on a single sample."""
        self.set_input(sample)
        self.forward_propagate()
        self.back_propagate(target)

    def train_dataset(
        self,
        inputs: Sequence[Sequence[float]],
        targets: Sequence[Sequence[float]],
        epochs: int,
        batch_size: int = 1,
    ) -> list[tuple[float, float]]:
        """Train sample by sample for ``epochs`` epochs.

        Progress is printed on at most about twenty epochs. Samples are always
        applied one at a time; ``batch_size`` is accepted but has no effect.
        Returns the average loss and accuracy (in percent) of every epoch.
        """
        if len(inputs) != len(targets):
            raise ValueError("Inputs and targets must have the same size")
        if not inputs:
            raise ValueError("The training set is empty")

        print_interval = max(1, epochs // _MAX_PRINTED_EPOCHS)
        history = []
        for epoch in range(epochs):
            total_loss = 0.0
            correct = 0
            for sample, target in zip(inputs, targets):
                self.set_input(sample)
                output = self.forward_propagate()
                self.back_propagate(target)
                total_loss += self.calculate_loss(output, target)
                if _argmax(output) == _argmax(target):
                    correct += 1

            avg_loss = total_loss / len(inputs)
            accuracy = correct / len(inputs) * 100.0
            history.append((avg_loss, accuracy))
            if (epoch + 1) % print_interval == 0 or epoch in (0, epochs - 1):
                print(
                    f"Epoch {epoch + 1}/{epochs} - Loss: {avg_loss:g}"
                    f" - Accuracy: {accuracy:g}%"
                )
        return history

    def calculate_loss(self, output: Sequence[float], target: Sequence[float]) -> float:
        """Half the sum of squared differences."""
        return sum(0.5 * (o - t) ** 2 for o, t in zip(output, target))

    def calculate_accuracy(
        self, inputs: Sequence[Sequence[float]], targets: Sequence[Sequence[float]]
    ) -> float:
        """Percentage of samples whose largest output matches the target's."""
        if len(inputs) != len(targets):
            raise ValueError("Inputs and targets must have the same size")
        if not inputs:
            raise ValueError("No samples to evaluate")
        correct = 0
        for sample, target in zip(inputs, targets):
            self.set_input(sample)
            if _argmax(self.forward_propagate()) == _argmax(target):
                correct += 1
        return correct / len(inputs) * 100.0

    def save_model(self, filename: str | Path) -> None:
        """Write architecture, activation ids and weights to a binary file."""
        layers = self._network()
        last = len(layers) - 1
        architecture = [
            len(layer) - (1 if index != last else 0) for index, layer in enumerate(layers)
        ]
        header = _COUNT.pack(len(architecture))
        header += b"".join(_INT.pack(size) for size in architecture)
        header += b"".join(_INT.pack(layer.activation.value) for layer in layers[1:])
        try:
            stream = open(filename, "wb")
        except OSError as exc:
            raise OSError(f"Cannot open file for writing: {filename}") from exc
        with stream:
            stream.write(header)
            for layer in layers[1:]:
                layer.save_weights(stream)

    def load_model(self, filename: str | Path) -> None:
        """Rebuild the network from a file written by :meth:`save_model`."""
        try:
            stream = open(filename, "rb")
        except OSError as exc:
            raise OSError(f"Cannot open file for reading: {filename}") from exc
        with stream:
            (num_layers,) = _COUNT.unpack(_read_exact(stream, _COUNT.size))
            architecture = [
                _INT.unpack(_read_exact(stream, _INT.size))[0] for _ in range(num_layers)
            ]
            activations = [
                activation_by_id(_INT.unpack(_read_exact(stream, _INT.size))[0])
                for _ in range(num_layers - 1)
            ]
            self.create_network(architecture, activations)
            for layer in self.layers[1:]:
                layer.load_weights(stream)

    def print_network(self) -> None:
        """Print every neuron's output and error term, layer by layer."""
        layers = self._network()
        last = len(layers) - 1
        for index, layer in enumerate(layers):
            if index == 0:
                kind = "Input"
            elif index == last:
                kind = "Softmax" if self.softmax_output else "Output"
            else:
                kind = "Hidden"
            print(f"Layer {index} ({kind}):")
            for neuron in layer.neurons:
                line = f"  Output: {neuron.output:g}, Delta: {neuron.delta:g}"
                if neuron.is_bias:
                    line += " [bias]"
                print(line)

    def test_model(
        self,
        test_images: Sequence[Sequence[float]],
        test_labels: Sequence[Sequence[float]],
        show_details: bool = False,
    ) -> float:
        """Evaluate on images, print the accuracy and return it in percent."""
        if len(test_images) != len(test_labels):
            raise ValueError("Test images and labels must have the same size")
        if not test_images:
            raise ValueError("No test samples")
        correct = 0
        for number, (image, label) in enumerate(zip(test_images, test_labels), start=1):
            self.set_input(image)
            predicted = _argmax(self.forward_propagate())
            actual = _argmax(label)
            if show_details:
                print(f"Test Sample #{number}")
                display_image(image)
                print(f"Actual: {actual} | Predicted: {predicted}\n")
            if predicted == actual:
                correct += 1
        accuracy = correct / len(test_images) * 100.0
        print(f"Test Accuracy: {accuracy:g}% ({correct}/{len(test_images)})")
        return accuracy