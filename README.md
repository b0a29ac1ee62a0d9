# perceptra

A small multilayer perceptron built neuron by neuron. Every neuron keeps its
own incoming and outgoing weighted connections, and training runs plain
stochastic gradient descent (learning rate 0.1) with backpropagation, one
sample at a time. The package provides sigmoid, ReLU, tanh and softmax
activations, a reader for MNIST IDX files and a command that trains on
logic-gate data or MNIST.

## Installation

```
pip install .
```

## Command line

```
perceptra <model.bin> <dataset> ["<architecture>"] ["<activations>"] [epochs]
```

- `dataset` is one of `xor`, `and`, `or` or `mnist` (default `xor`).
- `architecture` lists the layer sizes, separated by commas, for example
  `2,2,1`. It defaults to `2,2,1` for the logic gates and `784,128,64,10`
  for MNIST.
- `activations` lists one activation for each layer after the input layer:
  `sigmoid`, `relu`, `tanh` or `softmax`. It defaults to sigmoid everywhere
  for the logic gates, and to ReLU on the hidden layers with softmax on the
  output for MNIST.
- `epochs` defaults to 3000 for the logic gates and 20 for MNIST.

Examples:

```
perceptra model.bin xor "2,2,1" "sigmoid,sigmoid" 5000
perceptra model.bin mnist "784,128,64,10" "relu,relu,softmax" 20
```

Files are looked up relative to the current directory:

- The model is saved to `models/<model.bin>`. The `models/` directory must
  already exist.
- Logic-gate samples are read from `dataset/<name>_test.txt`. Each line holds
  two inputs and a target, separated by whitespace. The same samples are used
  for training and for the printed results.
- MNIST is read from `dataset/mnist/`, using `train-images.idx3-ubyte`,
  `train-labels.idx1-ubyte`, `t10k-images.idx3-ubyte` and
  `t10k-labels.idx1-ubyte`. Training uses the first 1000 training images and
  testing uses the first 10 test images.

If the model file already exists, the command asks whether to load it (`C`),
start a new model (`N`) or cancel (anything else). A loaded model takes its
architecture and activations from the file, not from the command line. You
are then asked whether to use it for inference only. On MNIST that evaluates
the first 100 test images. On a logic gate it prints the network's output for
each sample.

The command exits with status 1 and prints the usage text when it is given no
arguments or when an error occurs.

## Library use

```python
from perceptra.activations import Activation
from perceptra.perceptron import MultilayerPerceptron

mlp = MultilayerPerceptron()
mlp.create_network([2, 2, 1], [Activation.SIGMOID, Activation.SIGMOID])

inputs = [[0, 0], [0, 1], [1, 0], [1, 1]]
targets = [[0], [1], [1], [0]]
history = mlp.train_dataset(inputs, targets, 3000)  # [(avg_loss, accuracy%), ...]

mlp.set_input([1, 0])
print(mlp.forward_propagate())

mlp.save_model("xor.bin")
restored = MultilayerPerceptron()
restored.load_model("xor.bin")
```

### Modules

- `perceptra.activations`
  - `sigmoid`, `relu`, `tanh_act`, `softmax` and their derivatives.
  - The `Activation` enum, whose values are the ids stored in model files,
    and `activation_by_id`.
- `perceptra.network`
  - The `Neuron`, `Connection` and `Layer` building blocks. Every layer except
    the output layer ends with a bias neuron.
  - Weights start uniformly in `[-0.5, 0.5)`, drawn from a generator seeded
    with 42, so runs are reproducible.
- `perceptra.perceptron`
  - `MultilayerPerceptron`, with `create_network`, `train`, `train_dataset`,
    `calculate_loss` (half the sum of squared errors), `calculate_accuracy`,
    `test_model` (prints and returns the accuracy in percent), `print_network`,
    `save_model` and `load_model`.
- `perceptra.mnist`
  - `load_images` and `load_labels` read IDX files. Pixels are scaled to
    `[0, 1]` and labels come back as one-hot vectors. A positive limit caps how
    many are read.
  - `render_image` and `display_image` draw a digit as ASCII art.
- `perceptra.cli`
  - `main`, the entry point of the `perceptra` command, with the argument
    parsing helpers it uses.

### Model file format

All values are little-endian:

1. The number of layers, as an unsigned 64-bit integer.
2. Each layer's size without its bias neuron, as a 32-bit integer.
3. The activation id of each non-input layer, as a 32-bit integer.
4. The incoming weights of every non-bias neuron, layer by layer, as 32-bit
   floats.

## Limitations

- Training is online only. `train_dataset` accepts `batch_size` but always
  updates the weights after every sample.
- There is no optimiser other than fixed-rate gradient descent, and no
  learning-rate setting.
- No datasets are bundled. The logic-gate and MNIST files must be supplied.

## Tests

```
pip install .[test]
pytest
```