"""
Image preprocessing for top-down pose networks

Provides:
- ImagePreprocessor: crop + resize via affine warp, normalization and
  channel-first layout conversion in one parametrized pipeline
- OutputMode: network-ready tensor, or the cropped RGB image for debugging
- normalize / hwc_to_chw: the individual numeric steps

Pipeline (per call):
    drop alpha -> center/scale -> triangle correspondences -> affine warp
    onto a canvas the size of the source -> center crop to the network
    input -> /255 -> (x - mean) / std -> HWC to CHW
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from ..core.config import PreprocessConfig
from ..core.exceptions import PreconditionError
from ..geometry import (
    BoundingBox,
    CenterScale,
    Point,
    ReprojectionContext,
    get_affine_transform,
    get_center_scale,
    get_third_point,
    validate_bbox,
)
from .image import PixelBuffer, buffer_to_image, drop_alpha

logger = logging.getLogger(__name__)


class OutputMode(Enum):
    """What the preprocessor hands back"""
    TENSOR = "tensor"  # normalized float32 (3, H, W)
    IMAGE = "image"    # cropped uint8 RGB (H, W, 3), for visual inspection


@dataclass(frozen=True)
class PreprocessedSample:
    """
    Unit handed to the inference stage

    Exactly one of ``tensor`` / ``image`` is set depending on the
    OutputMode. ``context`` must be passed unchanged to the decoder.
    """
    context: ReprojectionContext
    center_scale: CenterScale
    tensor: Optional[np.ndarray] = None
    image: Optional[np.ndarray] = None


def normalize(
    image: np.ndarray,
    mean: Sequence[float],
    std: Sequence[float]
) -> np.ndarray:
    """
    Scale to [0, 1] and standardize each channel

    Not idempotent: applying it twice gives a different result.

    Args:
        image: (H, W, 3) image, channel order matching ``mean``/``std``
        mean: Per-channel mean
        std: Per-channel standard deviation

    Returns:
        (H, W, 3) float32 array
    """
    scaled = image.astype(np.float32) * np.float32(1.0 / 255)
    mean = np.asarray(mean, dtype=np.float32)
    std = np.asarray(std, dtype=np.float32)
    return (scaled - mean) / std


def hwc_to_chw(image: np.ndarray) -> np.ndarray:
    """Interleaved (H, W, C) to planar (C, H, W), contiguous"""
    return np.ascontiguousarray(image.transpose(2, 0, 1))


def crop_window(
    canvas_width: int,
    canvas_height: int,
    target_width: int,
    target_height: int
) -> Tuple[int, int]:
    """Top-left (x, y) of a target-sized window centered on the canvas"""
    return (
        canvas_width // 2 - target_width // 2,
        canvas_height // 2 - target_height // 2,
    )


class ImagePreprocessor:
    """
    Crop, resize and normalize a person crop for a fixed-size pose network

    Stateless apart from its configuration; one instance may be shared
    across threads as long as callers do not share pixel buffers.

    Example:
        >>> from topdown.preprocessing import ImagePreprocessor
        >>> from topdown.geometry import BoundingBox
        >>> pre = ImagePreprocessor()
        >>> sample = pre.preprocess(buf, 640, 480, "rgba", BoundingBox(0, 0, 480, 640))
        >>> sample.tensor.shape
        (3, 256, 192)
    """

    def __init__(self, config: Optional[PreprocessConfig] = None):
        self.config = config if config is not None else PreprocessConfig()

    def get_warp(
        self,
        center_scale: CenterScale,
        canvas_width: int,
        canvas_height: int,
        target_width: int
    ) -> np.ndarray:
        """
        Affine transform putting the crop region at the canvas center

        The source triangle is the box center, a point half the crop
        width above it, and their third point; the destination triangle
        is the same construction around the canvas center with half the
        target width.
        """
        src_w = center_scale.scale_x * self.config.pixel_std
        src_dir = Point(0.0, src_w * -0.5)
        dst_dir = Point(0.0, target_width * -0.5)

        src1 = Point(center_scale.center_x, center_scale.center_y)
        src2 = src1 + src_dir
        src3 = get_third_point(src1, src2)

        dst1 = Point(canvas_width, canvas_height) * 0.5
        dst2 = dst1 + dst_dir
        dst3 = get_third_point(dst1, dst2)

        return get_affine_transform((src1, src2, src3), (dst1, dst2, dst3))

    def preprocess(
        self,
        pixel_buffer: PixelBuffer,
        width: int,
        height: int,
        channel_layout: str,
        bbox: BoundingBox,
        target_width: Optional[int] = None,
        target_height: Optional[int] = None,
        output_mode: OutputMode = OutputMode.TENSOR
    ) -> PreprocessedSample:
        """
        Run the full preprocessing pipeline on one frame

        Args:
            pixel_buffer: Flat row-major RGB/RGBA bytes
            width: Source width in pixels
            height: Source height in pixels
            channel_layout: 'rgb' or 'rgba'
            bbox: Subject bbox in source pixels
            target_width: Network input width (default: config)
            target_height: Network input height (default: config)
            output_mode: TENSOR for inference, IMAGE for debugging

        Returns:
            PreprocessedSample with the ReprojectionContext

        Raises:
            PreconditionError: Degenerate bbox, buffer size mismatch,
                unknown layout, a non-positive target size or a source
                smaller than the target
        """
        if target_width is None:
            target_width = self.config.input_width
        if target_height is None:
            target_height = self.config.input_height
        if target_width <= 0 or target_height <= 0:
            raise PreconditionError(
                f"Network input size must be positive, got {target_width}x{target_height}"
            )

        validate_bbox(bbox)
        if width < target_width or height < target_height:
            raise PreconditionError(
                f"Source image {width}x{height} is smaller than the network "
                f"input {target_width}x{target_height}"
            )

        image = drop_alpha(buffer_to_image(pixel_buffer, width, height, channel_layout))

        center_scale = get_center_scale(
            bbox,
            aspect_ratio=target_width / target_height,
            pixel_std=self.config.pixel_std,
            padding=self.config.padding,
        )
        logger.debug(f"bbox={bbox} -> {center_scale}")

        transform = self.get_warp(center_scale, width, height, target_width)
        warped = cv2.warpAffine(
            image,
            transform,
            (width, height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=0,
        )

        x1, y1 = crop_window(width, height, target_width, target_height)
        cropped = warped[y1:y1 + target_height, x1:x1 + target_width]

        context = ReprojectionContext.from_transform(
            transform, (x1, y1), bbox, width, height
        )

        if output_mode is OutputMode.IMAGE:
            return PreprocessedSample(
                context=context,
                center_scale=center_scale,
                image=np.ascontiguousarray(cropped),
            )

        tensor = hwc_to_chw(normalize(cropped, self.config.mean, self.config.std))
        logger.debug(f"tensor shape={tensor.shape}, scale={context.scale:.4f}")
        return PreprocessedSample(
            context=context,
            center_scale=center_scale,
            tensor=tensor,
        )


def preprocess(
    pixel_buffer: PixelBuffer,
    width: int,
    height: int,
    channel_layout: str,
    bbox: BoundingBox,
    target_width: Optional[int] = None,
    target_height: Optional[int] = None,
    output_mode: OutputMode = OutputMode.TENSOR,
    config: Optional[PreprocessConfig] = None
) -> PreprocessedSample:
    """Functional shortcut for ``ImagePreprocessor(config).preprocess(...)``"""
    return ImagePreprocessor(config).preprocess(
        pixel_buffer, width, height, channel_layout, bbox,
        target_width, target_height, output_mode,
    )
