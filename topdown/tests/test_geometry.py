"""
Geometry tests: point math, affine solving, center/scale and reprojection
"""

import numpy as np
import pytest

from topdown.core.exceptions import PreconditionError
from topdown.geometry import (
    BoundingBox,
    Point,
    ReprojectionContext,
    apply_affine,
    expand_bbox,
    get_affine_transform,
    get_center_scale,
    get_null_center_scale,
    get_third_point,
    project_point,
    reproject_point,
    validate_bbox,
)


def test_point_arithmetic():
    """Add, subtract, scale and rotate"""
    a = Point(1.0, 2.0)
    b = Point(3.0, -1.0)
    assert a + b == Point(4.0, 1.0)
    assert a - b == Point(-2.0, 3.0)
    assert a * 2 == Point(2.0, 4.0)
    assert 0.5 * a == Point(0.5, 1.0)
    assert a.rotate90() == Point(-2.0, 1.0)


def test_third_point_forms_right_isoceles_triangle():
    """b + rotate90(a - b) is perpendicular to (a - b) with equal length"""
    a = Point(10.0, 20.0)
    b = Point(10.0, 5.0)
    c = get_third_point(a, b)
    assert c == Point(-5.0, 5.0)

    ab = np.array((a - b).as_tuple())
    cb = np.array((c - b).as_tuple())
    assert np.dot(ab, cb) == pytest.approx(0.0)
    assert np.linalg.norm(ab) == pytest.approx(np.linalg.norm(cb))


def test_affine_transform_maps_triangles():
    """The solved transform sends each source point to its destination"""
    src = (Point(100.0, 200.0), Point(100.0, 150.0))
    src = src + (get_third_point(*src),)
    dst = (Point(240.0, 320.0), Point(240.0, 224.0))
    dst = dst + (get_third_point(*dst),)

    transform = get_affine_transform(src, dst)
    assert transform.shape == (2, 3)

    mapped = apply_affine(transform, np.array([p.as_tuple() for p in src]))
    expected = np.array([p.as_tuple() for p in dst])
    np.testing.assert_allclose(mapped, expected, atol=1e-3)

    # Axis-aligned construction gives a pure scale + translate
    assert transform[0, 1] == pytest.approx(0.0, abs=1e-6)
    assert transform[1, 0] == pytest.approx(0.0, abs=1e-6)
    assert transform[0, 0] == pytest.approx(transform[1, 1])


def test_affine_transform_requires_three_points():
    with pytest.raises(ValueError):
        get_affine_transform((Point(0, 0), Point(1, 1)), (Point(0, 0), Point(1, 1)))


def test_center_scale_matches_aspect_ratio():
    """Tall box: width grows to match 192/256"""
    cs = get_center_scale(BoundingBox(60, 26, 280, 571))
    assert cs.center_x == pytest.approx(200.0)
    assert cs.center_y == pytest.approx(311.5)
    assert cs.scale_x / cs.scale_y == pytest.approx(192 / 256)
    assert cs.scale_y == pytest.approx(571 / 200 * 1.25)


def test_center_scale_wide_box_grows_height():
    cs = get_center_scale(BoundingBox(0, 0, 300, 100), aspect_ratio=0.75)
    assert cs.scale_x == pytest.approx(300 / 200 * 1.25)
    assert cs.scale_y == pytest.approx(400 / 200 * 1.25)


def test_center_scale_never_shrinks_box():
    """Scale covers the box in pixel-std units for every box shape"""
    pixel_std = 200.0
    for w in (1, 7, 50, 192, 333, 1000):
        for h in (1, 9, 64, 256, 480, 2000):
            for padding in (1.0, 1.25):
                cs = get_center_scale(
                    BoundingBox(5, 5, w, h),
                    aspect_ratio=0.75,
                    pixel_std=pixel_std,
                    padding=padding,
                )
                assert cs.scale_x >= w / pixel_std - 1e-9
                assert cs.scale_y >= h / pixel_std - 1e-9
                assert cs.scale_x / cs.scale_y == pytest.approx(0.75)


def test_null_center_scale():
    cs = get_null_center_scale(192, 256)
    assert (cs.center_x, cs.center_y) == (96.0, 128.0)
    assert cs.scale_x == pytest.approx(192 / 200 * 1.25)
    assert cs.scale_y == pytest.approx(256 / 200 * 1.25)


def test_bbox_conversions():
    bbox = BoundingBox.from_xyxy((10, 20, 110, 220), category=0)
    assert (bbox.x, bbox.y, bbox.w, bbox.h, bbox.category) == (10, 20, 100, 200, 0)
    assert bbox.to_xyxy() == (10, 20, 110, 220)

    norm = BoundingBox.from_normalized((0.25, 0.5, 0.75, 1.0), 640, 480)
    assert norm.to_xyxy() == (160, 240, 480, 480)


def test_expand_bbox_clamps_to_image():
    bbox = BoundingBox(10, 10, 100, 100, category=3)
    expanded = expand_bbox(bbox, 0.15, 100, 120)
    assert expanded.to_xyxy() == (0, 0, 100, 120)
    assert expanded.category == 3


def test_validate_bbox_rejects_degenerate():
    assert validate_bbox(BoundingBox(0, 0, 1, 1)).w == 1
    for w, h in ((0, 10), (10, 0), (-5, 10)):
        with pytest.raises(PreconditionError):
            validate_bbox(BoundingBox(0, 0, w, h))


def test_reprojection_inverts_projection():
    context = ReprojectionContext(
        scale=0.4, x_pad=12.5, y_pad=-3.0, x_offset=100.0, y_offset=50.0,
        original_width=640, original_height=480,
    )
    for px, py in ((100.0, 50.0), (321.5, 77.25), (0.0, 479.0)):
        nx, ny = project_point(px, py, context)
        x, y = reproject_point(nx, ny, context)
        assert x * 640 == pytest.approx(px)
        assert y * 480 == pytest.approx(py)


def test_context_from_transform():
    """Scale is read from the matrix; pad is the bbox corner inside the crop"""
    transform = np.array([[0.5, 0.0, 10.0], [0.0, 0.5, 20.0]])
    bbox = BoundingBox(40, 60, 100, 100)
    context = ReprojectionContext.from_transform(transform, (5, 8), bbox, 640, 480)
    assert context.scale == 0.5
    assert context.x_pad == pytest.approx(40 * 0.5 + 10 - 5)
    assert context.y_pad == pytest.approx(60 * 0.5 + 20 - 8)
    assert (context.x_offset, context.y_offset) == (40.0, 60.0)
    assert (context.original_width, context.original_height) == (640, 480)
