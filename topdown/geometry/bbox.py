"""
Bounding boxes and center/scale estimation

Provides:
- BoundingBox: integer (x, y, w, h) detector box with optional category
- CenterScale: aspect-corrected crop region in pixel-std units
- get_center_scale: bbox -> CenterScale for a target aspect ratio
- get_null_center_scale: CenterScale of the network input frame itself
- expand_bbox / validate_bbox: padding, clamping and precondition checks
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.constants import INPUT_WIDTH, INPUT_HEIGHT, PIXEL_STD, PADDING
from ..core.exceptions import PreconditionError


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned box in source-image pixels (top-left + extent)

    The category is forwarded opaquely and never read by the pipeline.
    """
    x: int
    y: int
    w: int
    h: int
    category: Optional[int] = None

    @classmethod
    def from_xyxy(
        cls,
        bbox: Tuple[float, float, float, float],
        category: Optional[int] = None
    ) -> "BoundingBox":
        """
        Build from corner format (x1, y1, x2, y2), rounding to pixels

        Example:
            >>> BoundingBox.from_xyxy((10, 20, 110, 220))
            BoundingBox(x=10, y=20, w=100, h=200, category=None)
        """
        x1, y1, x2, y2 = (int(round(v)) for v in bbox)
        return cls(x1, y1, x2 - x1, y2 - y1, category)

    @classmethod
    def from_normalized(
        cls,
        bbox: Tuple[float, float, float, float],
        image_width: int,
        image_height: int,
        category: Optional[int] = None
    ) -> "BoundingBox":
        """Build from normalized corner format (x1, y1, x2, y2) in [0, 1]"""
        x1, y1, x2, y2 = bbox
        return cls.from_xyxy(
            (x1 * image_width, y1 * image_height, x2 * image_width, y2 * image_height),
            category,
        )

    def to_xyxy(self) -> Tuple[int, int, int, int]:
        """Corner format (x1, y1, x2, y2)"""
        return (self.x, self.y, self.x + self.w, self.y + self.h)


@dataclass(frozen=True)
class CenterScale:
    """Crop region as a center point plus per-axis extent in pixel-std units"""
    center_x: float
    center_y: float
    scale_x: float
    scale_y: float


def validate_bbox(bbox: BoundingBox) -> BoundingBox:
    """
    Reject boxes whose transform would be undefined

    Raises:
        PreconditionError: If width or height is not positive
    """
    if bbox.w <= 0 or bbox.h <= 0:
        raise PreconditionError(
            f"bbox must have positive extent, got w={bbox.w}, h={bbox.h}"
        )
    return bbox


def get_center_scale(
    bbox: BoundingBox,
    aspect_ratio: float = INPUT_WIDTH / INPUT_HEIGHT,
    pixel_std: float = PIXEL_STD,
    padding: float = PADDING
) -> CenterScale:
    """
    Convert a bbox into an aspect-corrected center/scale

    The box is grown along one axis until it matches ``aspect_ratio``
    (never shrunk), then expressed in ``pixel_std`` units and multiplied
    by ``padding`` to leave a margin around the subject.

    Precondition: ``bbox.w > 0`` and ``bbox.h > 0``.

    Args:
        bbox: Source-image bounding box
        aspect_ratio: Target width / height of the network input
        pixel_std: Pixel standard the scale is expressed in
        padding: Margin factor (1.25 = 25% margin)

    Returns:
        CenterScale

    Example:
        >>> cs = get_center_scale(BoundingBox(0, 0, 150, 200))
        >>> (cs.center_x, cs.center_y, cs.scale_x, cs.scale_y)
        (75.0, 100.0, 0.9375, 1.25)
    """
    h = max(bbox.w / aspect_ratio, float(bbox.h))
    w = max(bbox.h * aspect_ratio, float(bbox.w))

    return CenterScale(
        center_x=bbox.x + bbox.w / 2.0,
        center_y=bbox.y + bbox.h / 2.0,
        scale_x=(w / pixel_std) * padding,
        scale_y=(h / pixel_std) * padding,
    )


def get_null_center_scale(
    input_width: int = INPUT_WIDTH,
    input_height: int = INPUT_HEIGHT,
    pixel_std: float = PIXEL_STD,
    padding: float = PADDING
) -> CenterScale:
    """Center/scale of the full network input frame, padded like any bbox"""
    return CenterScale(
        center_x=input_width / 2.0,
        center_y=input_height / 2.0,
        scale_x=(input_width / pixel_std) * padding,
        scale_y=(input_height / pixel_std) * padding,
    )


def expand_bbox(
    bbox: BoundingBox,
    padding_factor: float,
    image_width: int,
    image_height: int
) -> BoundingBox:
    """
    Pad each side by a fraction of the box size, clamped to the image

    Args:
        bbox: Source bbox
        padding_factor: Padding ratio (0.15 = 15% on each side)
        image_width: Image width (for clamping)
        image_height: Image height (for clamping)

    Returns:
        Expanded BoundingBox with the same category

    Example:
        >>> expand_bbox(BoundingBox(100, 100, 100, 200), 0.1, 640, 480)
        BoundingBox(x=90, y=80, w=120, h=240, category=None)
    """
    pad_x = padding_factor * bbox.w
    pad_y = padding_factor * bbox.h

    x1 = max(0.0, bbox.x - pad_x)
    y1 = max(0.0, bbox.y - pad_y)
    x2 = min(float(image_width), bbox.x + bbox.w + pad_x)
    y2 = min(float(image_height), bbox.y + bbox.h + pad_y)

    return BoundingBox.from_xyxy((x1, y1, x2, y2), bbox.category)
