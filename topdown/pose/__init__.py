"""
Pose estimation module - heatmap decoding and end-to-end inference

Provides:
- Heatmap decoder and Keypoint type
- Keypoint utilities (naming, filtering, conversion)
- Explicit inference session handle
- End-to-end top-down estimator
"""

from .decoder import (
    Keypoint,
    HeatmapDecoder,
    decode_heatmaps,
    argmax_heatmap,
    validate_heatmaps,
)
from .keypoint_utils import (
    keypoints_to_dict,
    keypoints_to_array,
    array_to_keypoints,
    filter_keypoints,
    to_pixel_coordinates,
    compute_pose_center,
)
from .session import PoseSession
from .estimator import TopDownPoseEstimator, FrameRequest

__all__ = [
    # Decoding
    "Keypoint",
    "HeatmapDecoder",
    "decode_heatmaps",
    "argmax_heatmap",
    "validate_heatmaps",
    # Keypoint utilities
    "keypoints_to_dict",
    "keypoints_to_array",
    "array_to_keypoints",
    "filter_keypoints",
    "to_pixel_coordinates",
    "compute_pose_center",
    # Inference
    "PoseSession",
    "TopDownPoseEstimator",
    "FrameRequest",
]
