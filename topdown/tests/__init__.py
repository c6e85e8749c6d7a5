"""
Tests module - Unit and integration tests for the topdown package

Provides:
- Core module tests (config, exceptions)
- Geometry tests (points, affine transforms, center/scale, reprojection)
- Preprocessing tests (warp, crop, normalization, layout)
- Pose tests (heatmap decoding, session, estimator)
- IO and visualization tests
"""

__all__ = []
