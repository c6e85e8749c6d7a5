"""
Bookkeeping that bridges preprocessing and heatmap decoding

The crop+resize applied by the preprocessor is a pure scale+translate,
so the whole mapping between original-image pixels and network-input
pixels is captured by one scale, a padding and the bbox offset:

    net = (orig - offset) * scale + pad
    orig = (net - pad) / scale + offset
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .bbox import BoundingBox
from .points import apply_affine


@dataclass(frozen=True)
class ReprojectionContext:
    """Everything needed to map network-space coordinates back to the image"""
    scale: float
    x_pad: float
    y_pad: float
    x_offset: float
    y_offset: float
    original_width: int
    original_height: int

    @classmethod
    def from_transform(
        cls,
        transform: np.ndarray,
        crop_origin: Tuple[int, int],
        bbox: BoundingBox,
        original_width: int,
        original_height: int
    ) -> "ReprojectionContext":
        """
        Derive the context from the warp matrix and the crop window

        Args:
            transform: (2, 3) affine matrix used for the warp
            crop_origin: (x, y) of the crop window's top-left on the warped canvas
            bbox: Bbox whose top-left becomes the offset
            original_width: Source image width
            original_height: Source image height
        """
        # Position of the bbox corner inside the cropped network input
        corner = apply_affine(transform, np.array([bbox.x, bbox.y], dtype=np.float64))
        return cls(
            scale=float(transform[0, 0]),
            x_pad=float(corner[0] - crop_origin[0]),
            y_pad=float(corner[1] - crop_origin[1]),
            x_offset=float(bbox.x),
            y_offset=float(bbox.y),
            original_width=int(original_width),
            original_height=int(original_height),
        )


def reproject_point(x: float, y: float, context: ReprojectionContext) -> Tuple[float, float]:
    """
    Map a network-input pixel back to normalized original-image coordinates

    Order matters: subtract padding, divide by scale, add the bbox offset,
    divide by the original dimension.
    """
    x = (x - context.x_pad) / context.scale
    x += context.x_offset
    x /= context.original_width

    y = (y - context.y_pad) / context.scale
    y += context.y_offset
    y /= context.original_height
    return x, y


def project_point(x: float, y: float, context: ReprojectionContext) -> Tuple[float, float]:
    """Map an original-image pixel into network-input pixel coordinates"""
    return (
        (x - context.x_offset) * context.scale + context.x_pad,
        (y - context.y_offset) * context.scale + context.y_pad,
    )
