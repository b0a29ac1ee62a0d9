"""A neuron-level multilayer perceptron with backpropagation, MNIST loading and a training command."""

__version__ = "0.1.0"