"""Shared pytest fixtures for Tap the Post tests."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from backend.app.composition.logo import clear_logo_cache


def _make_gradient(width: int, height: int) -> Image.Image:
    """RGB image where every row and column has a distinct color."""
    ys, xs = np.mgrid[0:height, 0:width]
    arr = np.stack([ys % 256, (ys // 256) % 256, xs % 256], axis=2).astype(np.uint8)
    return Image.fromarray(arr)


def _to_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture(autouse=True)
def _fresh_logo_cache():
    clear_logo_cache()
    yield
    clear_logo_cache()


@pytest.fixture
def gradient_image() -> Image.Image:
    """A 1200x1204 source with unique rows."""
    return _make_gradient(1200, 1204)


@pytest.fixture
def gradient_png(gradient_image) -> bytes:
    return _to_png(gradient_image)


@pytest.fixture
def translucent_image() -> Image.Image:
    """RGBA image with varying alpha."""
    arr = np.zeros((60, 40, 4), dtype=np.uint8)
    arr[:, :, 0] = 200
    arr[:, :, 1] = np.arange(40, dtype=np.uint8)[None, :]
    arr[:, :, 3] = np.linspace(0, 255, 60).astype(np.uint8)[:, None]
    return Image.fromarray(arr)


@pytest.fixture
def logo_path(tmp_path) -> str:
    """A wide RGBA logo on disk."""
    logo = Image.new("RGBA", (64, 32), (0, 0, 0, 0))
    logo.paste((220, 20, 20, 255), (8, 4, 56, 28))
    path = tmp_path / "logo.png"
    logo.save(path, format="PNG")
    return str(path)


@pytest.fixture
def make_gradient():
    """Factory for unique-row RGB images."""
    return _make_gradient


@pytest.fixture
def to_png():
    """Encode a PIL image as PNG bytes."""
    return _to_png
