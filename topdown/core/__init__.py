"""
Core module - Configuration, constants, and exceptions for the topdown pipeline
"""

from .config import (
    TopDownConfig,
    PreprocessConfig,
    DecodeConfig,
    SessionConfig,
)
from .constants import (
    INPUT_WIDTH,
    INPUT_HEIGHT,
    HEATMAP_WIDTH,
    HEATMAP_HEIGHT,
    PIXEL_STD,
    PADDING,
    IMAGENET_MEAN,
    IMAGENET_STD,
    COCO_KEYPOINT_NAMES,
    GURU_KEYPOINT_NAMES,
    COCO_SKELETON_CONNECTIONS,
    GURU_SKELETON_CONNECTIONS,
)
from .exceptions import (
    TopDownException,
    PreconditionError,
    ShapeMismatchError,
    ConfigError,
    ModelLoadError,
    InferenceError,
    ImageLoadError,
    format_exception,
)

__all__ = [
    "TopDownConfig",
    "PreprocessConfig",
    "DecodeConfig",
    "SessionConfig",
    "INPUT_WIDTH",
    "INPUT_HEIGHT",
    "HEATMAP_WIDTH",
    "HEATMAP_HEIGHT",
    "PIXEL_STD",
    "PADDING",
    "IMAGENET_MEAN",
    "IMAGENET_STD",
    "COCO_KEYPOINT_NAMES",
    "GURU_KEYPOINT_NAMES",
    "COCO_SKELETON_CONNECTIONS",
    "GURU_SKELETON_CONNECTIONS",
    "TopDownException",
    "PreconditionError",
    "ShapeMismatchError",
    "ConfigError",
    "ModelLoadError",
    "InferenceError",
    "ImageLoadError",
    "format_exception",
]
