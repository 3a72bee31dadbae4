"""2Dアフィン変換モジュール"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from typing import Self


@dataclass(frozen=True)
class AffineTransform:
    """2Dアフィン変換

    (x, y) -> (a*x + c*y + e, b*x + d*y + f)

    係数の並びは列優先の 2x3 行列 [[a, c, e], [b, d, f]] に対応する。

    Attributes:
        a: x' に対する x の係数
        b: y' に対する x の係数
        c: x' に対する y の係数
        d: y' に対する y の係数
        e: x' の平行移動
        f: y' の平行移動
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def __post_init__(self):
        for name in ("a", "b", "c", "d", "e", "f"):
            object.__setattr__(self, name, float(getattr(self, name)))

    @classmethod
    def identity(cls) -> Self:
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> Self:
        return cls(e=tx, f=ty)

    @classmethod
    def from_flat(cls, coefficients: Sequence[float]) -> Self:
        """(a, b, c, d, e, f) の並びから作成

        Raises:
            ValueError: 係数が6個でない場合
        """
        if len(coefficients) != 6:
            raise ValueError(f"アフィン係数は6個である必要があります: {len(coefficients)}個")
        return cls(*coefficients)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray | Sequence[Sequence[float]]) -> Self:
        """2x3（または3x3）行列から作成

        Args:
            matrix: [[a, c, e], [b, d, f]]（OpenCVの cv2.getAffineTransform と同じ並び）

        Raises:
            ValueError: 行列の形状が不正な場合
        """
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape not in ((2, 3), (3, 3)):
            raise ValueError(f"アフィン行列は 2x3 または 3x3 である必要があります: shape={m.shape}")
        return cls(a=m[0, 0], b=m[1, 0], c=m[0, 1], d=m[1, 1], e=m[0, 2], f=m[1, 2])

    def to_matrix(self) -> np.ndarray:
        """2x3 行列を返す"""
        return np.array([[self.a, self.c, self.e], [self.b, self.d, self.f]], dtype=np.float64)

    def to_flat(self) -> tuple[float, float, float, float, float, float]:
        return self.a, self.b, self.c, self.d, self.e, self.f

    def apply(self, point: tuple[float, float]) -> tuple[float, float]:
        """1点を変換する

        Args:
            point: 座標 (x, y)

        Returns:
            変換後の座標 (x', y')
        """
        x, y = float(point[0]), float(point[1])
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def apply_points(self, points: np.ndarray) -> np.ndarray:
        """複数の点を変換する

        Args:
            points: 座標 (N, 2)

        Returns:
            変換後の座標 (N, 2) float64
        """
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        x = pts[:, 0]
        y = pts[:, 1]
        return np.column_stack((self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f))
