"""Unit tests for AffineTransform."""

from __future__ import annotations

import cv2
import numpy as np
import pytest

from projector_mapping.geometry import AffineTransform


class TestAffineTransform:
    """AffineTransformのテスト"""

    def test_identity(self):
        assert AffineTransform.identity().apply((3.5, -2.0)) == (3.5, -2.0)

    def test_translation(self):
        assert AffineTransform.translation(100, -5).apply((15, 5)) == (115.0, 0.0)

    def test_coefficient_layout(self):
        """(x, y) -> (a*x + c*y + e, b*x + d*y + f)"""
        t = AffineTransform(a=2, b=3, c=5, d=7, e=11, f=13)
        assert t.apply((1, 1)) == (2 + 5 + 11, 3 + 7 + 13)
        assert t.apply((1, 0)) == (2 + 11, 3 + 13)
        assert t.apply((0, 1)) == (5 + 11, 7 + 13)

    def test_immutable(self):
        t = AffineTransform.identity()
        with pytest.raises(AttributeError):
            t.a = 2.0

    def test_from_flat(self):
        t = AffineTransform.from_flat([1, 2, 3, 4, 5, 6])
        assert t.to_flat() == (1.0, 2.0, 3.0, 4.0, 5.0, 6.0)

    def test_from_flat_wrong_length(self):
        with pytest.raises(ValueError, match="6個"):
            AffineTransform.from_flat([1, 2, 3])

    def test_matrix_round_trip_layout(self):
        """2x3 行列は [[a, c, e], [b, d, f]]"""
        t = AffineTransform(a=1, b=2, c=3, d=4, e=5, f=6)
        np.testing.assert_array_equal(t.to_matrix(), [[1, 3, 5], [2, 4, 6]])
        assert AffineTransform.from_matrix(t.to_matrix()) == t

    def test_from_matrix_invalid_shape(self):
        with pytest.raises(ValueError, match="2x3"):
            AffineTransform.from_matrix([[1, 0], [0, 1]])

    def test_matches_opencv_affine(self):
        """cv2.getAffineTransform の行列と同じ結果になる"""
        src = np.float32([[0, 0], [10, 0], [0, 10]])
        dst = np.float32([[5, 5], [25, 8], [3, 30]])
        t = AffineTransform.from_matrix(cv2.getAffineTransform(src, dst))
        for s, d in zip(src, dst, strict=True):
            assert t.apply(tuple(s)) == pytest.approx(tuple(d), abs=1e-4)

    def test_apply_points_matches_apply(self):
        """ベクトル版は1点版とビット単位で一致する"""
        t = AffineTransform(a=0.98, b=0.013, c=-0.021, d=1.02, e=12.5, f=-3.25)
        rng = np.random.default_rng(1)
        points = rng.uniform(0, 2048, size=(500, 2))
        batch = t.apply_points(points)
        for p, q in zip(points, batch, strict=True):
            assert t.apply(tuple(p)) == (q[0], q[1])

    def test_no_drift_over_many_pixels(self):
        """多数の画素に適用しても誤差が蓄積しない"""
        t = AffineTransform(a=1.5, b=0.0, c=0.0, d=1.5, e=0.25, f=0.25)
        xs = np.arange(0, 4096, dtype=np.float64)
        mapped = t.apply_points(np.column_stack((xs, np.zeros_like(xs))))
        np.testing.assert_allclose(mapped[:, 0], xs * 1.5 + 0.25, rtol=0, atol=1e-9)
