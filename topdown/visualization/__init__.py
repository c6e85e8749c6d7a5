"""
Visualization module - rendering decoded poses for debugging

Provides:
- Bounding box drawing
- Keypoint and skeleton drawing
"""

from .drawer import (
    draw_bbox,
    draw_keypoints,
    draw_skeleton,
)

__all__ = [
    "draw_bbox",
    "draw_keypoints",
    "draw_skeleton",
]
