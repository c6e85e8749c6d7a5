"""
Geometry module - point math, affine transforms and crop regions

Provides:
- Point arithmetic and third-point construction
- Affine transform solving from triangle correspondences
- Bounding box and center/scale estimation
- Network-space <-> image-space reprojection
"""

from .points import (
    Point,
    get_third_point,
    get_affine_transform,
    apply_affine,
)
from .bbox import (
    BoundingBox,
    CenterScale,
    get_center_scale,
    get_null_center_scale,
    expand_bbox,
    validate_bbox,
)
from .reprojection import (
    ReprojectionContext,
    reproject_point,
    project_point,
)

__all__ = [
    # Points
    "Point",
    "get_third_point",
    "get_affine_transform",
    "apply_affine",
    # Boxes
    "BoundingBox",
    "CenterScale",
    "get_center_scale",
    "get_null_center_scale",
    "expand_bbox",
    "validate_bbox",
    # Reprojection
    "ReprojectionContext",
    "reproject_point",
    "project_point",
]
