"""
End-to-end top-down pose estimation

Provides:
- TopDownPoseEstimator: preprocess -> session.run -> decode for one bbox
- Batch processing with progress tracking

The estimator owns no global state: the PoseSession is created by the
caller and passed in, so several estimators (or threads) can share or
separate sessions explicitly.
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from tqdm import tqdm

from ..core.config import TopDownConfig
from ..core.exceptions import TopDownException
from ..geometry import BoundingBox
from ..preprocessing import ImagePreprocessor, OutputMode
from ..preprocessing.image import PixelBuffer
from .decoder import HeatmapDecoder, Keypoint
from .session import PoseSession

logger = logging.getLogger(__name__)


@dataclass
class FrameRequest:
    """One frame + bbox to estimate a pose for"""
    pixel_buffer: PixelBuffer
    width: int
    height: int
    channel_layout: str
    bbox: BoundingBox


class TopDownPoseEstimator:
    """
    Estimate one person's keypoints per call

    Example:
        >>> from topdown.core.config import TopDownConfig
        >>> from topdown.pose import PoseSession, TopDownPoseEstimator
        >>> config = TopDownConfig()
        >>> with PoseSession.from_onnx(config) as session:
        ...     estimator = TopDownPoseEstimator(session, config)
        ...     keypoints = estimator.estimate(buf, 480, 640, "rgba", bbox)
    """

    def __init__(self, session: PoseSession, config: Optional[TopDownConfig] = None):
        self.config = config if config is not None else TopDownConfig()
        self.session = session
        self.preprocessor = ImagePreprocessor(self.config.preprocess)
        self.decoder = HeatmapDecoder(self.config.decode, self.config.preprocess)

    def estimate(
        self,
        pixel_buffer: PixelBuffer,
        width: int,
        height: int,
        channel_layout: str,
        bbox: BoundingBox
    ) -> List[Keypoint]:
        """
        Run preprocessing, inference and decoding for one bbox

        Args:
            pixel_buffer: Flat row-major RGB/RGBA bytes
            width: Image width
            height: Image height
            channel_layout: 'rgb' or 'rgba'
            bbox: Person bbox in source pixels

        Returns:
            Keypoints in normalized image coordinates, in joint order

        Raises:
            PreconditionError: Bad input (bbox, buffer, shapes)
            InferenceError: Engine failure or closed session
        """
        t1 = time.perf_counter()
        sample = self.preprocessor.preprocess(
            pixel_buffer, width, height, channel_layout, bbox,
            output_mode=OutputMode.TENSOR,
        )
        t2 = time.perf_counter()

        heatmaps = self.session.run(sample.tensor)
        t3 = time.perf_counter()

        num_keypoints, heatmap_height, heatmap_width = heatmaps.shape
        keypoints = self.decoder.decode(
            heatmaps,
            num_keypoints,
            heatmap_height,
            heatmap_width,
            sample.context,
        )
        t4 = time.perf_counter()

        logger.debug(
            f"preprocess {(t2 - t1) * 1000:.1f} ms, predict {(t3 - t2) * 1000:.1f} ms, "
            f"end-to-end {(t4 - t1) * 1000:.1f} ms"
        )
        return keypoints

    def estimate_batch(
        self,
        requests: Sequence[FrameRequest],
        show_progress: bool = True
    ) -> List[List[Keypoint]]:
        """
        Estimate poses for multiple frames

        Failed items yield an empty list and are logged; the result keeps
        one entry per request.

        Args:
            requests: Frames to process
            show_progress: Show progress bar

        Returns:
            List of keypoint lists, aligned with ``requests``
        """
        results = []
        iterator = (
            tqdm(requests, total=len(requests), desc="Estimating poses")
            if show_progress
            else requests
        )

        for idx, req in enumerate(iterator):
            try:
                results.append(self.estimate(
                    req.pixel_buffer, req.width, req.height, req.channel_layout, req.bbox
                ))
            except TopDownException as e:
                logger.warning(f"Pose estimation failed for item {idx}: {e}")
                results.append([])

        return results
