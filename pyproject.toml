[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "perceptra"
version = "0.1.0"
description = "A small neuron-level multilayer perceptron with backpropagation, MNIST loading and a training command"
requires-python = ">=3.10"
dependencies = []
keywords = ["neural-network", "perceptron", "backpropagation", "mnist", "machine-learning"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
perceptra = "perceptra.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["perceptra"]

[tool.pytest.ini_options]
addopts = "-ra"
