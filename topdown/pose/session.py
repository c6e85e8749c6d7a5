"""
Inference session handle

Provides:
- PoseSession: explicit, caller-owned wrapper around an opaque
  synchronous inference runner (create once, reuse, close)
- PoseSession.from_onnx: build one on top of onnxruntime

The session validates tensors on both sides of the inference boundary:
input (3, H, W) float32 and output (K, h, w) heatmaps. The batch
dimension of the engine is added and removed here.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

import numpy as np

from ..core.config import TopDownConfig
from ..core.exceptions import InferenceError, ModelLoadError, ShapeMismatchError

logger = logging.getLogger(__name__)

Runner = Callable[[np.ndarray], np.ndarray]


class PoseSession:
    """
    Caller-owned handle to a pose network

    Args:
        runner: Callable taking a (1, 3, H, W) float32 array and returning
            (1, K, h, w) or (K, h, w) heatmaps
        input_shape: Expected (3, H, W) of a single input tensor
        output_shape: Expected (K, h, w) of the heatmaps
        close_fn: Optional callable releasing engine resources on close()

    Example:
        >>> with PoseSession.from_onnx(config) as session:
        ...     heatmaps = session.run(sample.tensor)
    """

    def __init__(
        self,
        runner: Runner,
        input_shape: Tuple[int, int, int],
        output_shape: Tuple[int, int, int],
        close_fn: Optional[Callable[[], None]] = None
    ):
        self._runner = runner
        self._close_fn = close_fn
        self.input_shape = tuple(input_shape)
        self.output_shape = tuple(output_shape)

    @classmethod
    def from_config(cls, runner: Runner, config: TopDownConfig) -> "PoseSession":
        """Wrap a runner using the tensor geometry from a config"""
        pre, dec = config.preprocess, config.decode
        return cls(
            runner,
            input_shape=(3, pre.input_height, pre.input_width),
            output_shape=(dec.num_keypoints, dec.heatmap_height, dec.heatmap_width),
        )

    @classmethod
    def from_onnx(cls, config: TopDownConfig) -> "PoseSession":
        """
        Load an ONNX pose model

        Args:
            config: TopDownConfig; session.model_path names the model file

        Returns:
            PoseSession backed by an onnxruntime.InferenceSession

        Raises:
            ModelLoadError: If onnxruntime is missing or the model fails to load
        """
        try:
            import onnxruntime as ort
        except ImportError:
            raise ModelLoadError(
                "onnxruntime package not installed. Install with: pip install onnxruntime"
            )

        model_path = Path(config.session.model_path)
        if not model_path.exists():
            raise ModelLoadError(f"Pose model not found: {model_path}")

        options = ort.SessionOptions()
        if config.session.intra_op_num_threads > 0:
            options.intra_op_num_threads = config.session.intra_op_num_threads

        try:
            ort_session = ort.InferenceSession(
                str(model_path),
                sess_options=options,
                providers=list(config.session.providers),
            )
        except Exception as e:
            raise ModelLoadError(f"Failed to load pose model '{model_path}': {e}")

        input_name = config.session.input_name
        output_name = config.session.output_name

        def runner(batch: np.ndarray) -> np.ndarray:
            return ort_session.run([output_name], {input_name: batch})[0]

        logger.debug(f"Loaded pose model {model_path}")
        return cls.from_config(runner, config)

    @property
    def closed(self) -> bool:
        return self._runner is None

    def run(self, tensor: np.ndarray) -> np.ndarray:
        """
        Run the network on one preprocessed tensor

        Args:
            tensor: (3, H, W) float32 tensor from the preprocessor

        Returns:
            (K, h, w) float32 heatmaps

        Raises:
            InferenceError: If the session is closed or the engine fails
            ShapeMismatchError: If the input or output shape is wrong
        """
        if self._runner is None:
            raise InferenceError("PoseSession is closed")

        tensor = np.asarray(tensor, dtype=np.float32)
        if tensor.shape != self.input_shape:
            raise ShapeMismatchError(
                "Input tensor has wrong shape", self.input_shape, tensor.shape
            )

        try:
            output = self._runner(tensor[np.newaxis])
        except Exception as e:
            raise InferenceError(f"Pose inference failed: {e}")

        heatmaps = np.asarray(output, dtype=np.float32)
        if heatmaps.ndim == 4 and heatmaps.shape[0] == 1:
            heatmaps = heatmaps[0]
        if heatmaps.shape != self.output_shape:
            raise ShapeMismatchError(
                "Inference output has wrong shape", self.output_shape, heatmaps.shape
            )
        return heatmaps

    def close(self) -> None:
        """Release the engine; further run() calls raise InferenceError"""
        if self._runner is None:
            return
        self._runner = None
        if self._close_fn is not None:
            self._close_fn()

    def __enter__(self) -> "PoseSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
