"""Shared fixtures: synthetic frames and reprojection contexts"""

import numpy as np
import pytest

from topdown.geometry import ReprojectionContext


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_rgba_frame(rng):
    """480x640 (W x H) RGBA frame as an (H, W, 4) uint8 array"""
    width, height = 480, 640
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    return pixels, width, height


@pytest.fixture
def identity_context():
    """Scale 1, no padding or offset, 480x640 original image"""
    return ReprojectionContext(
        scale=1.0,
        x_pad=0.0,
        y_pad=0.0,
        x_offset=0.0,
        y_offset=0.0,
        original_width=480,
        original_height=640,
    )
