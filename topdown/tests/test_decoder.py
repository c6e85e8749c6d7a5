"""
Heatmap decoding tests: peak search, tie-break, reprojection and validation
"""

import numpy as np
import pytest

from topdown.core.config import DecodeConfig
from topdown.core.exceptions import PreconditionError, ShapeMismatchError
from topdown.geometry import ReprojectionContext
from topdown.pose import HeatmapDecoder, Keypoint, argmax_heatmap, decode_heatmaps


def empty_heatmaps(k=17, h=64, w=48):
    return np.zeros((k, h, w), dtype=np.float32)


def test_single_peak_forward_formula(identity_context):
    """Peak at (row=10, col=20) -> (20*4/480, 10*4/640)"""
    heatmaps = empty_heatmaps()
    heatmaps[0, 10, 20] = 0.87

    keypoints = decode_heatmaps(heatmaps, 17, 64, 48, identity_context, 192, 256)

    assert len(keypoints) == 17
    assert keypoints[0].x == pytest.approx(80 / 480)
    assert keypoints[0].y == pytest.approx(40 / 640)
    assert keypoints[0].score == pytest.approx(0.87)


def test_tie_break_is_row_major_first():
    heatmap = np.zeros((64, 48), dtype=np.float32)
    heatmap[5, 30] = 2.0
    heatmap[5, 10] = 2.0
    heatmap[40, 0] = 2.0
    assert argmax_heatmap(heatmap) == (10, 5, 2.0)

    heatmap = np.zeros((64, 48), dtype=np.float32)
    heatmap[3, 40] = 1.5
    heatmap[7, 2] = 1.5
    assert argmax_heatmap(heatmap) == (40, 3, 1.5)


def test_all_zero_heatmap_resolves_to_first_cell():
    context = ReprojectionContext(
        scale=2.0, x_pad=10.0, y_pad=20.0, x_offset=50.0, y_offset=60.0,
        original_width=400, original_height=300,
    )
    keypoints = decode_heatmaps(empty_heatmaps(k=2), 2, 64, 48, context, 192, 256)

    for kp in keypoints:
        assert kp.score == 0.0
        assert kp.x == pytest.approx(((0 - 10.0) / 2.0 + 50.0) / 400)
        assert kp.y == pytest.approx(((0 - 20.0) / 2.0 + 60.0) / 300)


def test_negative_heatmap_values():
    """Peak search works on logits below zero"""
    heatmap = np.full((64, 48), -5.0, dtype=np.float32)
    heatmap[12, 7] = -0.5
    assert argmax_heatmap(heatmap) == (7, 12, -0.5)


def test_inverse_order_pad_scale_offset_dims():
    """subtract pad -> divide scale -> add offset -> divide original size"""
    context = ReprojectionContext(
        scale=0.5, x_pad=8.0, y_pad=4.0, x_offset=100.0, y_offset=200.0,
        original_width=1000, original_height=800,
    )
    heatmaps = empty_heatmaps(k=1)
    heatmaps[0, 32, 24] = 1.0

    (kp,) = decode_heatmaps(heatmaps, 1, 64, 48, context, 192, 256)

    assert kp.x == pytest.approx(((96 - 8.0) / 0.5 + 100.0) / 1000)
    assert kp.y == pytest.approx(((128 - 4.0) / 0.5 + 200.0) / 800)


def test_channels_decoded_independently(identity_context, rng):
    heatmaps = rng.random((17, 64, 48)).astype(np.float32) * 0.1
    peaks = [(int(rng.integers(64)), int(rng.integers(48))) for _ in range(17)]
    for k, (row, col) in enumerate(peaks):
        heatmaps[k, row, col] = 1.0 + k

    keypoints = HeatmapDecoder().decode(heatmaps, 17, 64, 48, identity_context)

    for k, (row, col) in enumerate(peaks):
        assert keypoints[k].x == pytest.approx(col * 4 / 480)
        assert keypoints[k].y == pytest.approx(row * 4 / 640)
        assert keypoints[k].score == pytest.approx(1.0 + k)


def test_decoding_is_deterministic(identity_context, rng):
    heatmaps = rng.random((17, 64, 48)).astype(np.float32)
    decoder = HeatmapDecoder()
    first = decoder.decode(heatmaps, 17, 64, 48, identity_context)
    second = decoder.decode(heatmaps.copy(), 17, 64, 48, identity_context)
    assert first == second
    assert all(isinstance(kp.x, float) and isinstance(kp.score, float) for kp in first)


def test_accepts_flat_and_batched_input(identity_context):
    heatmaps = empty_heatmaps(k=3)
    heatmaps[1, 2, 3] = 1.0
    decoder = HeatmapDecoder()

    from_array = decoder.decode(heatmaps, 3, 64, 48, identity_context)
    from_flat = decoder.decode(heatmaps.reshape(-1).tolist(), 3, 64, 48, identity_context)
    from_batch = decoder.decode(heatmaps[np.newaxis], 3, 64, 48, identity_context)

    assert from_array == from_flat == from_batch
    assert from_array[1].x == pytest.approx(12 / 480)


def test_shape_mismatch_fails_fast(identity_context):
    decoder = HeatmapDecoder()
    with pytest.raises(ShapeMismatchError) as excinfo:
        decoder.decode(empty_heatmaps(k=16), 17, 64, 48, identity_context)
    assert excinfo.value.expected == (17, 64, 48)
    assert excinfo.value.actual == (16, 64, 48)

    with pytest.raises(ShapeMismatchError):
        decoder.decode(np.zeros(17 * 64 * 48 - 1), 17, 64, 48, identity_context)

    with pytest.raises(ShapeMismatchError):
        decoder.decode(empty_heatmaps(h=48, w=64), 17, 64, 48, identity_context)


def test_nan_and_missing_context_rejected(identity_context):
    heatmaps = empty_heatmaps()
    heatmaps[4, 0, 0] = np.nan
    with pytest.raises(PreconditionError):
        decode_heatmaps(heatmaps, 17, 64, 48, identity_context, 192, 256)

    with pytest.raises(PreconditionError):
        HeatmapDecoder().decode(empty_heatmaps(), 17, 64, 48, None)


def test_keypoint_tuple():
    assert Keypoint(0.1, 0.2, 0.3).to_tuple() == (0.1, 0.2, 0.3)


def test_undeclared_sizes_fall_back_to_config(identity_context):
    heatmaps = empty_heatmaps()
    heatmaps[2, 10, 20] = 1.0
    keypoints = HeatmapDecoder(DecodeConfig()).decode(
        heatmaps, reprojection_context=identity_context
    )
    assert len(keypoints) == 17
    assert keypoints[2].x == pytest.approx(80 / 480)


@pytest.mark.parametrize("sizes", [
    (0, 64, 48, 192, 256),
    (17, 0, 48, 192, 256),
    (17, 64, -1, 192, 256),
    (17, 64, 48, 0, 256),
    (17, 64, 48, 192, 0),
])
def test_non_positive_declared_sizes_rejected(identity_context, sizes):
    """A declared zero size is an error, never replaced by the config default"""
    k, h, w, in_w, in_h = sizes
    with pytest.raises(PreconditionError):
        HeatmapDecoder().decode(empty_heatmaps(), k, h, w, identity_context, in_w, in_h)
