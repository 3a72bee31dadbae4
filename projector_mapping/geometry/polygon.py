"""多角形モジュール

キャリブレーションセルおよびROIとして使う不変の多角形を提供します。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np


class Polygon:
    """不変の2D多角形

    頂点列は読み取り専用の (N, 2) float64 配列として保持する。
    等価比較は同一性で行う（数値が同じでも別のセルとして扱う）。

    内外判定は偶奇規則（Ray Casting）で、境界は半開区間として扱う:
    辺が交差とみなされるのは、端点のちょうど一方が点のyより厳密に下にあり、
    かつ点が交点より厳密に左にある場合。軸に平行な矩形では
    [x0, x1) × [y0, y1) となり、左辺・上辺は内側、右辺・下辺は外側になる。

    Attributes:
        vertices: 頂点配列 (N, 2)
    """

    __slots__ = ("_vertices",)

    def __init__(self, vertices: Iterable[tuple[float, float]] | np.ndarray):
        """初期化

        Args:
            vertices: 頂点列 [(x1, y1), (x2, y2), ...]

        Raises:
            ValueError: 頂点が空、または (x, y) 形式でない場合
        """
        array = np.array(vertices, dtype=np.float64)
        if array.size == 0:
            raise ValueError("多角形には少なくとも1つの頂点が必要です")
        if array.ndim == 1 and array.shape[0] == 2:
            array = array.reshape(1, 2)
        if array.ndim != 2 or array.shape[1] != 2:
            raise ValueError(f"頂点は (x, y) 形式である必要があります: shape={array.shape}")

        array.setflags(write=False)
        self._vertices = array

    @property
    def vertices(self) -> np.ndarray:
        return self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for x, y in self._vertices:
            yield float(x), float(y)

    def __repr__(self) -> str:
        return f"Polygon({self.to_list()})"

    def to_list(self) -> list[tuple[float, float]]:
        """頂点をタプルのリストで返す"""
        return list(self)

    def contains(self, point: tuple[float, float]) -> bool:
        """点が多角形内にあるか判定する

        Args:
            point: 判定する点 (x, y)

        Returns:
            内部（左辺・上辺を含む）ならTrue
        """
        return bool(self.contains_points(np.array([point], dtype=np.float64))[0])

    def contains_points(self, points: np.ndarray) -> np.ndarray:
        """複数の点について内外判定する

        Args:
            points: 判定する点 (N, 2)

        Returns:
            各点が内部にあるかを示すbool配列 (N,)
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        inside = np.zeros(len(points), dtype=bool)
        if len(self._vertices) < 3:
            return inside

        px = points[:, 0]
        py = points[:, 1]

        # 各辺 (p1 -> p2) について右方向の半直線との交差を数える
        p1 = self._vertices
        p2 = np.roll(self._vertices, -1, axis=0)
        for (x1, y1), (x2, y2) in zip(p1, p2, strict=True):
            straddles = (y1 > py) != (y2 > py)
            if not straddles.any():
                continue
            # straddles が真なら y1 != y2 なので除算は安全
            with np.errstate(divide="ignore", invalid="ignore"):
                x_cross = (x2 - x1) * (py - y1) / (y2 - y1) + x1
            inside ^= straddles & (px < x_cross)

        return inside

    def centroid(self) -> tuple[float, float]:
        """頂点の算術平均を返す

        Returns:
            重心 (x, y)
        """
        cx, cy = self._vertices.mean(axis=0)
        return float(cx), float(cy)

    def bounds(self) -> tuple[float, float, float, float]:
        """外接矩形 (min_x, min_y, max_x, max_y)"""
        min_x, min_y = self._vertices.min(axis=0)
        max_x, max_y = self._vertices.max(axis=0)
        return float(min_x), float(min_y), float(max_x), float(max_y)
