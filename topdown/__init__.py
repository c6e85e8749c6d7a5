"""
topdown - preprocessing and heatmap decoding for top-down pose networks

A Python package for:
- Cropping a person bbox into a fixed-size, normalized network input
- Decoding per-joint heatmaps back to image-space keypoints
- Running a pose network through an explicit, caller-owned session
"""

__version__ = "0.1.0"
__author__ = "topdown-pose contributors"

# Core imports (no numpy/OpenCV needed)
from .core.config import TopDownConfig, PreprocessConfig, DecodeConfig, SessionConfig
from .core.constants import (
    COCO_KEYPOINT_NAMES,
    GURU_KEYPOINT_NAMES,
    COCO_SKELETON_CONNECTIONS,
    INPUT_WIDTH,
    INPUT_HEIGHT,
    HEATMAP_WIDTH,
    HEATMAP_HEIGHT,
)
from .core.exceptions import (
    TopDownException,
    PreconditionError,
    ShapeMismatchError,
    ConfigError,
    ModelLoadError,
    InferenceError,
    ImageLoadError,
)

_LAZY = {
    "BoundingBox": "geometry",
    "CenterScale": "geometry",
    "ReprojectionContext": "geometry",
    "get_center_scale": "geometry",
    "ImagePreprocessor": "preprocessing",
    "OutputMode": "preprocessing",
    "PreprocessedSample": "preprocessing",
    "preprocess": "preprocessing",
    "Keypoint": "pose",
    "HeatmapDecoder": "pose",
    "decode_heatmaps": "pose",
    "PoseSession": "pose",
    "TopDownPoseEstimator": "pose",
    "ImageLoader": "io",
}


# Lazy imports for modules with external dependencies
def __getattr__(name):
    """Lazy loading for modules with external dependencies"""
    if name in _LAZY:
        import importlib
        module = importlib.import_module(f".{_LAZY[name]}", __name__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Config
    "TopDownConfig",
    "PreprocessConfig",
    "DecodeConfig",
    "SessionConfig",
    # Constants
    "COCO_KEYPOINT_NAMES",
    "GURU_KEYPOINT_NAMES",
    "COCO_SKELETON_CONNECTIONS",
    "INPUT_WIDTH",
    "INPUT_HEIGHT",
    "HEATMAP_WIDTH",
    "HEATMAP_HEIGHT",
    # Exceptions
    "TopDownException",
    "PreconditionError",
    "ShapeMismatchError",
    "ConfigError",
    "ModelLoadError",
    "InferenceError",
    "ImageLoadError",
] + list(_LAZY)
