"""
Keypoint utilities for decoded poses

Provides:
- Joint-name lookup (keypoint list <-> name dict)
- Array conversion
- Confidence filtering
- Normalized <-> pixel coordinate conversion
"""

import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.constants import COCO_KEYPOINT_NAMES
from ..core.exceptions import PreconditionError
from .decoder import Keypoint


def keypoints_to_dict(
    keypoints: Sequence[Keypoint],
    joint_names: Optional[Sequence[str]] = None
) -> Dict[str, Keypoint]:
    """
    Attach joint names to an ordered keypoint list

    Args:
        keypoints: Keypoints in network channel order
        joint_names: Name table in the same order (default: COCO)

    Returns:
        Dict mapping joint name to Keypoint

    Raises:
        PreconditionError: If the name table length differs from the keypoint count

    Example:
        >>> named = keypoints_to_dict(keypoints)
        >>> named['nose'].x
    """
    if joint_names is None:
        joint_names = COCO_KEYPOINT_NAMES

    if len(joint_names) != len(keypoints):
        raise PreconditionError(
            f"Joint name table has {len(joint_names)} entries "
            f"but {len(keypoints)} keypoints were decoded"
        )
    return dict(zip(joint_names, keypoints))


def keypoints_to_array(keypoints: Sequence[Keypoint]) -> np.ndarray:
    """
    Convert keypoints to array format

    Returns:
        Array of shape (K, 3) with [x, y, score] rows
    """
    if len(keypoints) == 0:
        return np.zeros((0, 3), dtype=np.float32)
    return np.array([kp.to_tuple() for kp in keypoints], dtype=np.float32)


def array_to_keypoints(arr: np.ndarray) -> List[Keypoint]:
    """
    Convert a (K, 3) [x, y, score] array back to keypoints
    """
    return [Keypoint(float(x), float(y), float(score)) for x, y, score in arr]


def filter_keypoints(
    keypoints: Dict[str, Keypoint],
    conf_threshold: float = 0.3
) -> Dict[str, Keypoint]:
    """
    Drop named keypoints whose score is below the threshold

    Example:
        >>> filtered = filter_keypoints(named, conf_threshold=0.3)
    """
    return {
        name: kp for name, kp in keypoints.items()
        if kp.score >= conf_threshold
    }


def to_pixel_coordinates(
    keypoints: Sequence[Keypoint],
    image_width: int,
    image_height: int
) -> List[Tuple[float, float, float]]:
    """
    Scale normalized keypoints to pixel (x, y, score) tuples

    Example:
        >>> to_pixel_coordinates([Keypoint(0.5, 0.25, 0.9)], 640, 480)
        [(320.0, 120.0, 0.9)]
    """
    return [(kp.x * image_width, kp.y * image_height, kp.score) for kp in keypoints]


def compute_pose_center(keypoints: Sequence[Keypoint]) -> Optional[Tuple[float, float]]:
    """
    Mean (x, y) of the keypoints, or None for an empty pose
    """
    if len(keypoints) == 0:
        return None

    coords = np.array([(kp.x, kp.y) for kp in keypoints])
    center = coords.mean(axis=0)
    return (float(center[0]), float(center[1]))
