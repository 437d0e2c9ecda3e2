"""Shared fixtures for argbimage tests."""

import numpy as np
import pytest
from PIL import Image

from argbimage.models.raw_bitmap import RawBitmap


@pytest.fixture
def red_image():
    """A 1x1 fully opaque red pixel."""
    return Image.new("RGBA", (1, 1), (255, 0, 0, 255))


@pytest.fixture
def quad_image():
    """A 2x2 opaque image: red, green / blue, white."""
    image = Image.new("RGBA", (2, 2))
    image.putdata([(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255), (255, 255, 255, 255)])
    return image


@pytest.fixture
def red_bitmap():
    """A 1x1 8-bit RGBA raw bitmap holding opaque red."""
    return RawBitmap(width=1, height=1, data=bytearray([255, 0, 0, 255]))


@pytest.fixture
def premultiplied_argb():
    """A 3x2 canonical buffer whose colour channels never exceed alpha."""
    rng = np.random.default_rng(1234)
    alpha = rng.integers(0, 256, size=6)
    colors = [rng.integers(0, a + 1, size=3) for a in alpha]
    words = [[a, *c] for a, c in zip(alpha, colors)]
    return np.array(words, dtype=np.uint8).tobytes()


@pytest.fixture
def tmp_png(tmp_path, quad_image):
    """A temporary PNG file holding quad_image."""
    path = tmp_path / "quad.png"
    quad_image.save(path)
    return path
