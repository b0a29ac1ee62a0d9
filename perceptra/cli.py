"""Command line entry point: train or reuse a model on a logic gate or MNIST."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

from perceptra.activations import Activation
from perceptra.mnist import load_images, load_labels
from perceptra.perceptron import MultilayerPerceptron

LOGIC_DATASETS = ("xor", "and", "or")
MODELS_DIR = Path("models")
DATASET_DIR = Path("dataset")
MNIST_DIR = DATASET_DIR / "mnist"

_ACTIVATIONS_BY_NAME = {
    "sigmoid": Activation.SIGMOID,
    "relu": Activation.RELU,
    "tanh": Activation.TANH,
    "softmax": Activation.SOFTMAX,
}

_RULE = "=" * 57

USAGE = (
    'Usage: perceptra <model.bin> <dataset> ["<structure>"] ["<activations>"] [epochs]\n'
    'Example: perceptra model.bin xor "2,2,1" "sigmoid,sigmoid" 5000\n'
    '         perceptra model.bin mnist "784,128,64,10" "relu,relu,softmax" 20'
)


def load_samples(filename: str | Path) -> tuple[list[list[float]], list[list[float]]]:
    """Read lines of ``x1 x2 y`` into inputs and one-element targets."""
    try:
        text = Path(filename).read_text()
    except OSError as exc:
        raise OSError(f"Could not open file '{filename}'") from exc
    inputs, targets = [], []
    for line in text.splitlines():
        fields = line.split()
        try:
            x1, x2, y = (float(value) for value in fields[:3])
        except ValueError:
            raise ValueError(f"Could not read a line of file '{filename}'") from None
        inputs.append([x1, x2])
        targets.append([y])
    return inputs, targets


def _split_list(text: str) -> list[str]:
    tokens = text.split(",")
    if tokens[-1] == "":
        tokens.pop()
    return tokens


def parse_architecture(text: str) -> list[int]:
    """Parse layer sizes such as ``"784,128,64,10"``."""
    try:
        return [int(token.strip()) for token in _split_list(text)]
    except ValueError:
        raise ValueError(f"Invalid network structure: {text}") from None


def activation_from_name(name: str) -> Activation:
    try:
        return _ACTIVATIONS_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Unsupported activation function: {name}") from None


def parse_activations(text: str) -> list[Activation]:
    """Parse activation names such as ``"relu,relu,softmax"``."""
    return [activation_from_name(token) for token in _split_list(text)]


def default_architecture(dataset: str) -> list[int]:
    if dataset in LOGIC_DATASETS:
        return [2, 2, 1]
    if dataset == "mnist":
        return [784, 128, 64, 10]
    raise ValueError("Unrecognised dataset for the default structure.")


def default_activations(num_layers: int, dataset: str) -> list[Activation]:
    if dataset in LOGIC_DATASETS:
        return [Activation.SIGMOID] * (num_layers - 1)
    if dataset == "mnist":
        return [Activation.RELU] * (num_layers - 2) + [Activation.SOFTMAX]
    raise ValueError("Unrecognised dataset for the default activations.")


def _ask(prompt: str) -> str:
    try:
        answer = input(prompt).strip()
    except EOFError:
        return ""
    return answer[:1]


def _print_gate_results(mlp: MultilayerPerceptron, dataset: str, inputs) -> None:
    for sample in inputs:
        mlp.set_input(sample)
        output = mlp.forward_propagate()
        print(f"{sample[0]:g} {dataset} {sample[1]:g} = {output[0]:g}")


def _evaluate_mnist(mlp: MultilayerPerceptron, count: int) -> None:
    test_images = load_images(MNIST_DIR / "t10k-images.idx3-ubyte", count)
    test_labels = load_labels(MNIST_DIR / "t10k-labels.idx1-ubyte", count)
    accuracy = mlp.calculate_accuracy(test_images, test_labels)
    print(f"\nTest accuracy: {accuracy:g}%")
    mlp.test_model(test_images, test_labels, True)


def _run(args: list[str]) -> int:
    model_name = args[0]
    dataset = args[1] if len(args) > 1 else "xor"
    architecture = (
        parse_architecture(args[2]) if len(args) > 2 else default_architecture(dataset)
    )
    activations = (
        parse_activations(args[3])
        if len(args) > 3
        else default_activations(len(architecture), dataset)
    )
    epochs = int(args[4]) if len(args) > 4 else (20 if dataset == "mnist" else 3000)

    print(f"\nModel: {model_name}")
    print(f"Dataset: {dataset}")
    print("Structure: " + "".join(f"{size} " for size in architecture))
    print("Activations: " + "".join(f"[{a.name.lower()}] " for a in activations))
    print(f"Epochs: {epochs}")

    mlp = MultilayerPerceptron()
    model_path = MODELS_DIR / model_name
    reuse_model = False

    if model_path.exists():
        print(f"\n[INFO] The model '{model_path}' already exists.")
        print("What do you want to do?")
        print("  [C] Load the existing model")
        print("  [N] New model from scratch (overwrite)")
        print("  [X] Cancel")
        choice = _ask("Your choice (C/N/X): ").lower()
        if choice == "c":
            print("\n[INFO] Loading model from disk...")
            mlp.load_model(model_path)
            reuse_model = True
        elif choice == "n":
            print("\n[INFO] Creating a new model...")
            mlp.create_network(architecture, activations)
        else:
            print("\n[INFO] Cancelled by the user.")
            return 0
    else:
        print("\n[INFO] No model found. Creating a new model...")
        mlp.create_network(architecture, activations)

    if reuse_model:
        answer = _ask("\n[INFO] Use the existing model for inference only? [y/n]: ")
        if answer.lower() in ("y", "s"):
            print("\n[INFO] Skipping training. Running the test...")
            if dataset == "mnist":
                _evaluate_mnist(mlp, 100)
            else:
                inputs, _ = load_samples(DATASET_DIR / f"{dataset}_test.txt")
                _print_gate_results(mlp, dataset, inputs)
            return 0

    if dataset in LOGIC_DATASETS:
        print(f"\n--- Loading the {dataset} dataset ---")
        inputs, targets = load_samples(DATASET_DIR / f"{dataset}_test.txt")
        print("\n--- Training ---")
        mlp.train_dataset(inputs, targets, epochs)
        print(f"\n--- Final results ({dataset}) ---")
        _print_gate_results(mlp, dataset, inputs)
    elif dataset == "mnist":
        print("\n--- Loading MNIST ---")
        train_images = load_images(MNIST_DIR / "train-images.idx3-ubyte", 1000)
        train_labels = load_labels(MNIST_DIR / "train-labels.idx1-ubyte", 1000)
        print("\n--- Training on MNIST ---")
        mlp.train_dataset(train_images, train_labels, epochs)
        _evaluate_mnist(mlp, 10)
    else:
        raise ValueError(f"Unrecognised dataset: {dataset}")

    print(f"\n[INFO] Saving the trained model to: {model_path}")
    mlp.save_model(model_path)

    print(f"\n{_RULE}\n            Finished successfully\n{_RULE}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    print(f"\n{_RULE}\n        Multilayer neural network\n{_RULE}")
    if not args:
        print(USAGE, file=sys.stderr)
        return 1
    try:
        return _run(args)
    except (ValueError, OSError, RuntimeError) as exc:
        print(f"\n[ERROR] {exc}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())