"""Shared fixtures: in-memory test images."""

import io
from collections.abc import Callable

import numpy as np
import pytest
from PIL import Image


def encode_png(arr: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(arr.astype(np.uint8)).save(buf, format='PNG')
    return buf.getvalue()


@pytest.fixture
def solid_png() -> Callable[..., bytes]:
    def make(rgb: tuple[int, ...], size: tuple[int, int] = (50, 50)) -> bytes:
        w, h = size
        arr = np.zeros((h, w, len(rgb)), dtype=np.uint8)
        arr[:, :] = rgb
        return encode_png(arr)

    return make


@pytest.fixture
def checkerboard_png() -> bytes:
    """200x200 single-pixel checkerboard of pure black and pure white."""
    y, x = np.indices((200, 200))
    mask = (x + y) % 2 == 0
    arr = np.zeros((200, 200, 3), dtype=np.uint8)
    arr[mask] = (255, 255, 255)
    return encode_png(arr)


@pytest.fixture
def quadrants_png() -> bytes:
    """200x200, four 100x100 quadrants: red, green, blue, yellow."""
    arr = np.zeros((200, 200, 3), dtype=np.uint8)
    arr[:100, :100] = (255, 0, 0)
    arr[:100, 100:] = (0, 255, 0)
    arr[100:, :100] = (0, 0, 255)
    arr[100:, 100:] = (255, 255, 0)
    return encode_png(arr)


@pytest.fixture
def noise_png() -> bytes:
    """Random colours, seeded — thousands of distinct buckets."""
    arr = np.random.default_rng(7).integers(0, 256, size=(120, 160, 3), dtype=np.uint8)
    return encode_png(arr)
