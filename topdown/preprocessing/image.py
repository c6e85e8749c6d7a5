"""
Pixel buffer decoding

Source frames arrive as flat row-major byte buffers with the width,
height and channel layout supplied alongside; nothing is inferred.
"""

from typing import Union

import cv2
import numpy as np

from ..core.constants import CHANNEL_LAYOUTS
from ..core.exceptions import PreconditionError

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


def channels_for_layout(channel_layout: str) -> int:
    """Bytes per pixel for a channel layout name ('rgb' or 'rgba')"""
    try:
        return CHANNEL_LAYOUTS[channel_layout.lower()]
    except (KeyError, AttributeError):
        raise PreconditionError(
            f"Unknown channel layout {channel_layout!r}, "
            f"expected one of {list(CHANNEL_LAYOUTS)}"
        )


def buffer_to_image(
    pixel_buffer: PixelBuffer,
    width: int,
    height: int,
    channel_layout: str = "rgb"
) -> np.ndarray:
    """
    View a flat pixel buffer as an (H, W, C) uint8 image

    Args:
        pixel_buffer: Row-major interleaved bytes, or a uint8 array of
            either flat or (H, W, C) shape
        width: Image width in pixels
        height: Image height in pixels
        channel_layout: 'rgb' or 'rgba'

    Returns:
        (H, W, C) uint8 array; shares memory with the buffer when possible

    Raises:
        PreconditionError: On unknown layout, non-positive size or a
            buffer whose length does not match width * height * channels
    """
    channels = channels_for_layout(channel_layout)
    if width <= 0 or height <= 0:
        raise PreconditionError(f"Image size must be positive, got {width}x{height}")

    if isinstance(pixel_buffer, np.ndarray):
        if pixel_buffer.dtype != np.uint8:
            raise PreconditionError(f"Pixel array must be uint8, got {pixel_buffer.dtype}")
        flat = pixel_buffer.reshape(-1)
    else:
        flat = np.frombuffer(pixel_buffer, dtype=np.uint8)

    expected = width * height * channels
    if flat.size != expected:
        raise PreconditionError(
            f"Pixel buffer has {flat.size} bytes, expected {expected} "
            f"for {width}x{height} {channel_layout}"
        )

    return flat.reshape(height, width, channels)


def drop_alpha(image: np.ndarray) -> np.ndarray:
    """Strip the alpha channel of an RGBA image, keeping RGB order"""
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
    return image
