"""
Heatmap decoding for top-down pose networks

Provides:
- Keypoint: normalized image-space joint location with its peak score
- argmax_heatmap: discrete per-channel peak search
- HeatmapDecoder: heatmaps + ReprojectionContext -> keypoints

Each channel is decoded independently: the highest cell (first one in
row-major order on ties) is upscaled to network-input pixels and
reprojected to the original image. No sub-pixel refinement.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.config import DecodeConfig, PreprocessConfig
from ..core.exceptions import PreconditionError, ShapeMismatchError
from ..geometry import ReprojectionContext, reproject_point

logger = logging.getLogger(__name__)

HeatmapInput = Union[np.ndarray, Sequence[float]]


@dataclass(frozen=True)
class Keypoint:
    """
    Joint location in normalized [0, 1] original-image coordinates

    ``score`` is the raw heatmap peak value, not a probability.
    """
    x: float
    y: float
    score: float

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.score)


def validate_heatmaps(
    raw_heatmaps: HeatmapInput,
    channel_count: int,
    heatmap_height: int,
    heatmap_width: int
) -> np.ndarray:
    """
    Check heatmaps against their declared shape and return (K, H, W)

    Accepts a flat sequence of K*H*W values, a (K, H, W) array, or a
    (1, K, H, W) batch of one.

    Raises:
        ShapeMismatchError: If the data does not have the declared shape
        PreconditionError: If any value is NaN
    """
    expected = (channel_count, heatmap_height, heatmap_width)
    heatmaps = np.asarray(raw_heatmaps, dtype=np.float32)

    if heatmaps.ndim <= 1:
        if heatmaps.size != channel_count * heatmap_height * heatmap_width:
            raise ShapeMismatchError(
                "Flat heatmap buffer has wrong length", expected, heatmaps.shape
            )
        heatmaps = heatmaps.reshape(expected)
    else:
        if heatmaps.ndim == 4 and heatmaps.shape[0] == 1:
            heatmaps = heatmaps[0]
        if heatmaps.shape != expected:
            raise ShapeMismatchError("Heatmaps have wrong shape", expected, heatmaps.shape)

    if np.isnan(heatmaps).any():
        raise PreconditionError("Heatmaps contain NaN values")
    return heatmaps


def _declared_size(name: str, value: Optional[int], default: int) -> int:
    """Config default when undeclared; a declared size must be positive"""
    if value is None:
        return default
    if value <= 0:
        raise PreconditionError(f"{name} must be positive, got {value}")
    return value


def argmax_heatmap(heatmap: np.ndarray) -> Tuple[int, int, float]:
    """
    Find the peak of one (H, W) heatmap

    Returns:
        (col, row, value); ties resolve to the first cell in row-major order
    """
    flat_idx = int(np.argmax(heatmap))
    row, col = divmod(flat_idx, heatmap.shape[1])
    return col, row, float(heatmap[row, col])


class HeatmapDecoder:
    """
    Decode per-joint heatmaps into normalized keypoints

    Example:
        >>> decoder = HeatmapDecoder()
        >>> keypoints = decoder.decode(heatmaps, 17, 64, 48, sample.context)
        >>> keypoints[0].x, keypoints[0].y, keypoints[0].score
    """

    def __init__(
        self,
        config: Optional[DecodeConfig] = None,
        preprocess_config: Optional[PreprocessConfig] = None
    ):
        self.config = config if config is not None else DecodeConfig()
        self.preprocess_config = (
            preprocess_config if preprocess_config is not None else PreprocessConfig()
        )

    def decode(
        self,
        raw_heatmaps: HeatmapInput,
        channel_count: Optional[int] = None,
        heatmap_height: Optional[int] = None,
        heatmap_width: Optional[int] = None,
        reprojection_context: Optional[ReprojectionContext] = None,
        network_input_width: Optional[int] = None,
        network_input_height: Optional[int] = None
    ) -> List[Keypoint]:
        """
        Decode heatmaps into one keypoint per channel

        Args:
            raw_heatmaps: (K, H, W), (1, K, H, W) or flat K*H*W values
            channel_count: K (default: config.num_keypoints)
            heatmap_height: H (default: config)
            heatmap_width: W (default: config)
            reprojection_context: Context produced by the preprocessor
            network_input_width: Network input width (default: preprocess config)
            network_input_height: Network input height (default: preprocess config)

        Returns:
            List of K keypoints in channel order

        Raises:
            PreconditionError: Missing context, a non-positive declared size
                or malformed heatmaps
        """
        if reprojection_context is None:
            raise PreconditionError("A ReprojectionContext is required to decode heatmaps")

        channel_count = _declared_size("channel_count", channel_count, self.config.num_keypoints)
        heatmap_height = _declared_size("heatmap_height", heatmap_height, self.config.heatmap_height)
        heatmap_width = _declared_size("heatmap_width", heatmap_width, self.config.heatmap_width)
        input_width = _declared_size(
            "network_input_width", network_input_width, self.preprocess_config.input_width
        )
        input_height = _declared_size(
            "network_input_height", network_input_height, self.preprocess_config.input_height
        )

        heatmaps = validate_heatmaps(raw_heatmaps, channel_count, heatmap_height, heatmap_width)

        stride_x = input_width / heatmap_width
        stride_y = input_height / heatmap_height

        keypoints = []
        for k in range(channel_count):
            col, row, score = argmax_heatmap(heatmaps[k])
            x, y = reproject_point(col * stride_x, row * stride_y, reprojection_context)
            keypoints.append(Keypoint(x=float(x), y=float(y), score=score))

        logger.debug(f"Decoded {len(keypoints)} keypoints from {heatmaps.shape} heatmaps")
        return keypoints


def decode_heatmaps(
    raw_heatmaps: HeatmapInput,
    channel_count: int,
    heatmap_height: int,
    heatmap_width: int,
    reprojection_context: ReprojectionContext,
    network_input_width: int,
    network_input_height: int
) -> List[Keypoint]:
    """Functional form of ``HeatmapDecoder().decode`` with every size explicit"""
    return HeatmapDecoder().decode(
        raw_heatmaps,
        channel_count,
        heatmap_height,
        heatmap_width,
        reprojection_context,
        network_input_width,
        network_input_height,
    )
