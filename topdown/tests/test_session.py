"""
Inference session tests with a fake engine
"""

import numpy as np
import pytest

from topdown.core.config import SessionConfig, TopDownConfig
from topdown.core.exceptions import InferenceError, ModelLoadError, ShapeMismatchError
from topdown.pose import PoseSession


def zeros_runner(batch):
    assert batch.shape == (1, 3, 256, 192)
    assert batch.dtype == np.float32
    return np.zeros((1, 17, 64, 48), dtype=np.float32)


def test_run_adds_and_strips_batch_dim():
    session = PoseSession.from_config(zeros_runner, TopDownConfig())
    assert session.input_shape == (3, 256, 192)
    assert session.output_shape == (17, 64, 48)

    heatmaps = session.run(np.zeros((3, 256, 192), dtype=np.float32))
    assert heatmaps.shape == (17, 64, 48)


def test_unbatched_runner_output_accepted():
    session = PoseSession(lambda b: np.ones((5, 8, 6)), (3, 32, 24), (5, 8, 6))
    assert session.run(np.zeros((3, 32, 24))).dtype == np.float32


def test_wrong_input_shape_rejected():
    session = PoseSession.from_config(zeros_runner, TopDownConfig())
    with pytest.raises(ShapeMismatchError):
        session.run(np.zeros((256, 192, 3), dtype=np.float32))


def test_wrong_output_shape_rejected():
    session = PoseSession(lambda b: np.zeros((1, 16, 64, 48)), (3, 256, 192), (17, 64, 48))
    with pytest.raises(ShapeMismatchError) as excinfo:
        session.run(np.zeros((3, 256, 192), dtype=np.float32))
    assert excinfo.value.actual == (16, 64, 48)


def test_engine_failure_wrapped():
    def broken(batch):
        raise RuntimeError("device lost")

    session = PoseSession(broken, (3, 256, 192), (17, 64, 48))
    with pytest.raises(InferenceError, match="device lost"):
        session.run(np.zeros((3, 256, 192), dtype=np.float32))


def test_lifecycle_close_once():
    calls = []
    with PoseSession(zeros_runner, (3, 256, 192), (17, 64, 48),
                     close_fn=lambda: calls.append(1)) as session:
        assert not session.closed
        session.run(np.zeros((3, 256, 192), dtype=np.float32))

    assert session.closed
    assert calls == [1]
    session.close()
    assert calls == [1]

    with pytest.raises(InferenceError):
        session.run(np.zeros((3, 256, 192), dtype=np.float32))


def test_from_onnx_missing_model(tmp_path):
    config = TopDownConfig(session=SessionConfig(model_path=str(tmp_path / "missing.onnx")))
    with pytest.raises(ModelLoadError):
        PoseSession.from_onnx(config)
