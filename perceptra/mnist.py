"""Reading MNIST files in the IDX format and drawing images as text."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from pathlib import Path

SHADES = " .:-=+*#%@"
NUM_CLASSES = 10


def _read_file(filename: str | Path, kind: str) -> bytes:
    try:
        return Path(filename).read_bytes()
    except OSError as exc:
        raise OSError(f"Cannot open MNIST {kind} file: {filename}") from exc


def _limit(count: int, maximum: int) -> int:
    if 0 < maximum < count:
        return maximum
    return count


def load_images(filename: str | Path, max_images: int = -1) -> list[list[float]]:
    """Load images as flat lists of pixels normalised to [0, 1]."""
    data = _read_file(filename, "images")
    header = struct.Struct(">iiii")
    if len(data) < header.size:
        raise ValueError(f"Truncated MNIST images header: {filename}")
    _magic, num_images, rows, cols = header.unpack_from(data)
    num_images = _limit(num_images, max_images)
    size = rows * cols
    end = header.size + num_images * size
    if len(data) < end:
        raise ValueError(f"Truncated MNIST images file: {filename}")
    return [
        [pixel / 255.0 for pixel in data[start:start + size]]
        for start in range(header.size, end, size)
    ] if size else [[] for _ in range(num_images)]


def load_labels(filename: str | Path, max_labels: int = -1) -> list[list[float]]:
    """Load labels as one-hot vectors of ten classes."""
    data = _read_file(filename, "labels")
    header = struct.Struct(">ii")
    if len(data) < header.size:
        raise ValueError(f"Truncated MNIST labels header: {filename}")
    _magic, num_labels = header.unpack_from(data)
    num_labels = _limit(num_labels, max_labels)
    raw = data[header.size:header.size + num_labels]
    if len(raw) < num_labels:
        raise ValueError(f"Truncated MNIST labels file: {filename}")
    labels = []
    for label in raw:
        if label >= NUM_CLASSES:
            raise ValueError(f"Label out of range: {label}")
        one_hot = [0.0] * NUM_CLASSES
        one_hot[label] = 1.0
        labels.append(one_hot)
    return labels


def render_image(image: Sequence[float], rows: int = 28, cols: int = 28) -> str:
    """Draw an image as text, two characters per pixel, one line per row."""
    lines = []
    for r in range(rows):
        row = image[r * cols:(r + 1) * cols]
        lines.append("".join(SHADES[int(pixel * (len(SHADES) - 1))] * 2 for pixel in row))
    return "".join(line + "\n" for line in lines)


def display_image(image: Sequence[float], rows: int = 28, cols: int = 28) -> None:
    """Print an image drawn by :func:`render_image`."""
    print(render_image(image, rows, cols), end="")