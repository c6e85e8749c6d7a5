"""
Point arithmetic and triangle-based affine transforms

Provides:
- Point: immutable 2D point with add/subtract/scale
- get_third_point: right-isoceles completion of two landmarks
- get_affine_transform: 2x3 transform from three point correspondences
- apply_affine: map points through a 2x3 transform
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import cv2
import numpy as np


@dataclass(frozen=True)
class Point:
    """2D point in pixel coordinates"""
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> "Point":
        return Point(self.x * k, self.y * k)

    __rmul__ = __mul__

    def rotate90(self) -> "Point":
        """Rotate by 90 degrees: (x, y) -> (-y, x)"""
        return Point(-self.y, self.x)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


def get_third_point(a: Point, b: Point) -> Point:
    """
    Complete a right isoceles triangle from two points

    Returns ``b + rotate90(a - b)``, so that (a, b, result) fixes an
    affine transform from only two landmarks per coordinate space.

    Example:
        >>> get_third_point(Point(0, 0), Point(0, -1))
        Point(x=-1, y=-1)
    """
    return b + (a - b).rotate90()


def triangle_to_array(a: Point, b: Point, c: Point) -> np.ndarray:
    """Stack three points into the (3, 2) float32 layout OpenCV expects"""
    return np.array([a.as_tuple(), b.as_tuple(), c.as_tuple()], dtype=np.float32)


def get_affine_transform(
    src: Sequence[Point],
    dst: Sequence[Point]
) -> np.ndarray:
    """
    Solve the affine transform mapping one triangle onto another

    Args:
        src: Three source points
        dst: Three destination points

    Returns:
        (2, 3) float64 transform matrix
    """
    if len(src) != 3 or len(dst) != 3:
        raise ValueError("affine transform needs exactly 3 point pairs")
    return cv2.getAffineTransform(triangle_to_array(*src), triangle_to_array(*dst))


def apply_affine(
    transform: np.ndarray,
    points: Union[Point, np.ndarray]
) -> np.ndarray:
    """
    Map points through a (2, 3) affine transform

    Args:
        transform: (2, 3) affine matrix
        points: A Point, or array of shape (2,) or (N, 2)

    Returns:
        Array with the same leading shape as ``points``
    """
    if isinstance(points, Point):
        points = np.array(points.as_tuple(), dtype=np.float64)
    pts = np.asarray(points, dtype=np.float64)
    return pts @ transform[:, :2].T + transform[:, 2]
