"""
Drawing utilities for inspecting decoded poses

Provides:
- Draw bounding box
- Draw keypoints with confidence-scaled radius
- Draw pose skeleton

All functions take RGB images and keypoints in normalized [0, 1]
coordinates, and draw in place.
"""

import cv2
import numpy as np
from typing import List, Optional, Sequence, Tuple

from ..core.constants import (
    BBOX_COLOR,
    COCO_SKELETON_CONNECTIONS,
    GURU_SKELETON_CONNECTIONS,
    KEYPOINT_COLOR,
    SKELETON_COLOR,
)
from ..geometry import BoundingBox
from ..pose.decoder import Keypoint


def _to_pixels(
    keypoints: Sequence[Keypoint],
    image: np.ndarray,
    conf_threshold: float
) -> List[Optional[Tuple[int, int, float]]]:
    """Pixel positions of visible keypoints; None where below threshold"""
    h, w = image.shape[:2]
    coords = []
    for kp in keypoints:
        if kp.score >= conf_threshold and 0.0 <= kp.x <= 1.0 and 0.0 <= kp.y <= 1.0:
            coords.append((int(round(kp.x * w)), int(round(kp.y * h)), kp.score))
        else:
            coords.append(None)
    return coords


def draw_bbox(
    image: np.ndarray,
    bbox: BoundingBox,
    color: Tuple[int, int, int] = BBOX_COLOR,
    thickness: int = 2
) -> np.ndarray:
    """
    Draw a bounding box on image

    Args:
        image: Input image (H, W, 3) RGB
        bbox: Box in pixel coordinates
        color: (R, G, B) color
        thickness: Box line thickness

    Returns:
        Modified image with bbox drawn
    """
    x1, y1, x2, y2 = bbox.to_xyxy()
    cv2.rectangle(image, (x1, y1), (x2, y2), color, thickness)
    return image


def draw_keypoints(
    image: np.ndarray,
    keypoints: Sequence[Keypoint],
    color: Tuple[int, int, int] = KEYPOINT_COLOR,
    conf_threshold: float = 0.3,
    radius: int = 3
) -> np.ndarray:
    """
    Draw keypoint circles only (no skeleton)

    Args:
        image: Input image (H, W, 3) RGB
        keypoints: Decoded keypoints in normalized coordinates
        color: (R, G, B) color
        conf_threshold: Minimum score
        radius: Circle radius

    Returns:
        Modified image with keypoints drawn

    Example:
        >>> image = draw_keypoints(image, keypoints, color=(0, 255, 0))
    """
    for kp in _to_pixels(keypoints, image, conf_threshold):
        if kp is not None:
            x, y, _ = kp
            cv2.circle(image, (x, y), radius, color, -1)
            cv2.circle(image, (x, y), radius, (255, 255, 255), 1)
    return image


def draw_skeleton(
    image: np.ndarray,
    keypoints: Sequence[Keypoint],
    connections: Optional[Sequence[Tuple[int, int]]] = None,
    conf_threshold: float = 0.3,
    line_thickness: int = 2,
    point_radius: int = 4
) -> np.ndarray:
    """
    Draw pose skeleton on image

    Args:
        image: Input image (H, W, 3) RGB
        keypoints: Decoded keypoints in joint order
        connections: Joint index pairs (default: COCO, or the extended
            table when 21 keypoints are given)
        conf_threshold: Minimum score for visualization
        line_thickness: Skeleton line thickness
        point_radius: Keypoint circle radius

    Returns:
        Modified image with skeleton drawn
    """
    if connections is None:
        connections = (
            GURU_SKELETON_CONNECTIONS if len(keypoints) > 17 else COCO_SKELETON_CONNECTIONS
        )

    kp_coords = _to_pixels(keypoints, image, conf_threshold)

    for idx1, idx2 in connections:
        if idx1 >= len(kp_coords) or idx2 >= len(kp_coords):
            continue
        if kp_coords[idx1] is not None and kp_coords[idx2] is not None:
            pt1 = kp_coords[idx1][:2]
            pt2 = kp_coords[idx2][:2]
            cv2.line(image, pt1, pt2, SKELETON_COLOR, line_thickness)

    for kp in kp_coords:
        if kp is not None:
            x, y, score = kp
            # Radius grows with score, capped at point_radius
            radius = max(1, int(point_radius * (0.5 + min(score, 1.0) * 0.5)))
            cv2.circle(image, (x, y), radius, KEYPOINT_COLOR, -1)
            cv2.circle(image, (x, y), radius, (255, 255, 255), 1)

    return image
