"""
IO module - image loading and debug output

Provides:
- Image loading with error handling
- Conversion to the flat pixel-buffer contract
- Debug image writing
"""

from .data_loader import ImageLoader, save_debug_image

__all__ = [
    "ImageLoader",
    "save_debug_image",
]
