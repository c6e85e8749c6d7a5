"""
Preprocessing module - turn a raw frame + bbox into a network input

Provides:
- Pixel buffer decoding and alpha removal
- Affine crop/resize, normalization and CHW layout conversion
- Tensor and debug-image output modes sharing one pipeline
"""

from .image import buffer_to_image, drop_alpha, channels_for_layout
from .preprocessor import (
    ImagePreprocessor,
    OutputMode,
    PreprocessedSample,
    preprocess,
    normalize,
    hwc_to_chw,
    crop_window,
)

__all__ = [
    # Buffers
    "buffer_to_image",
    "drop_alpha",
    "channels_for_layout",
    # Pipeline
    "ImagePreprocessor",
    "OutputMode",
    "PreprocessedSample",
    "preprocess",
    "normalize",
    "hwc_to_chw",
    "crop_window",
]
