"""キャリブレーションセルマップモジュール

画像空間を多角形セルに分割し、セルごとのアフィン変換を保持する
読み取り専用のデータ構造を提供します。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

from projector_mapping.config.loader import load_config_file
from projector_mapping.geometry import AffineTransform, Polygon

if TYPE_CHECKING:
    from typing import Self

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CalibrationCell:
    """キャリブレーションセル

    Attributes:
        polygon: 画像空間のセル境界
        transform: セル内で有効な画像→デバイス変換
        centroid: 最近傍探索に使う代表点。None の場合は頂点の平均
            （キャリブレーション時のサンプル点の平均を指定できる）
    """

    polygon: Polygon
    transform: AffineTransform
    centroid: tuple[float, float] | None = None

    def __post_init__(self):
        if not isinstance(self.polygon, Polygon):
            raise TypeError(f"polygon は Polygon である必要があります: {type(self.polygon).__name__}")
        if self.transform is None:
            raise ValueError("セルには変換が必要です")
        if not isinstance(self.transform, AffineTransform):
            raise TypeError(f"transform は AffineTransform である必要があります: {type(self.transform).__name__}")
        if self.centroid is not None:
            object.__setattr__(self, "centroid", (float(self.centroid[0]), float(self.centroid[1])))

    def reference_point(self) -> tuple[float, float]:
        """最近傍探索用の代表点"""
        if self.centroid is not None:
            return self.centroid
        return self.polygon.centroid()


class CellMap:
    """キャリブレーションセルの集合

    構築後は変更できない。セルの順序は内外判定の優先順位と
    最近傍探索のタイブレークに使われる（先頭が優先）。
    同じ Polygon オブジェクトを2つのセルで共有することはできない。
    """

    __slots__ = ("_cells", "_centroids")

    def __init__(self, cells: Iterable[CalibrationCell] = ()):
        """初期化

        Args:
            cells: キャリブレーションセル

        Raises:
            ValueError: 同じ Polygon が複数のセルに含まれる場合
        """
        cells = tuple(cells)
        seen: set[int] = set()
        for i, cell in enumerate(cells):
            if not isinstance(cell, CalibrationCell):
                raise TypeError(f"cells[{i}] は CalibrationCell である必要があります")
            if id(cell.polygon) in seen:
                raise ValueError(f"cells[{i}] の多角形が他のセルと同一オブジェクトです")
            seen.add(id(cell.polygon))

        self._cells = cells
        if cells:
            centroids = np.array([cell.reference_point() for cell in cells], dtype=np.float64)
        else:
            centroids = np.empty((0, 2), dtype=np.float64)
        centroids.setflags(write=False)
        self._centroids = centroids

        logger.debug(f"CellMap を構築しました: {len(cells)}セル")

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[Polygon, AffineTransform]] | Mapping[Polygon, AffineTransform],
    ) -> Self:
        """(Polygon, AffineTransform) の組から作成"""
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        return cls(CalibrationCell(polygon, transform) for polygon, transform in pairs)

    @classmethod
    def from_config(cls, cells: Sequence[Mapping[str, Any]]) -> Self:
        """設定辞書のセル定義から作成

        各セルは以下の形式:
            {
                'polygon': [[x1, y1], [x2, y2], ...],
                'transform': [a, b, c, d, e, f],    # または
                'matrix': [[a, c, e], [b, d, f]],
                'centroid': [cx, cy]                # オプション
            }

        Args:
            cells: セル定義のリスト

        Returns:
            CellMap インスタンス

        Raises:
            ValueError: セル定義が不正な場合
        """
        if not isinstance(cells, list | tuple):
            raise ValueError("calibration.cells はリストである必要があります。")

        built = []
        for i, cell in enumerate(cells):
            if not isinstance(cell, Mapping):
                raise ValueError(f"cells[{i}] は辞書である必要があります。")
            if "polygon" not in cell:
                raise ValueError(f"cells[{i}] には 'polygon' が必要です。")

            try:
                polygon = Polygon(cell["polygon"])
                if "transform" in cell:
                    transform = AffineTransform.from_flat(cell["transform"])
                elif "matrix" in cell:
                    transform = AffineTransform.from_matrix(cell["matrix"])
                else:
                    raise ValueError("'transform' または 'matrix' が必要です")
            except (TypeError, ValueError) as e:
                raise ValueError(f"cells[{i}] の定義が不正です: {e}") from e

            centroid = cell.get("centroid")
            if centroid is not None and len(centroid) != 2:
                raise ValueError(f"cells[{i}].centroid は [x, y] 形式である必要があります。")

            built.append(CalibrationCell(polygon, transform, centroid))

        return cls(built)

    @classmethod
    def from_file(cls, path: Path | str) -> Self:
        """YAML/JSON ファイルから読み込む

        ファイルは ``calibration.cells`` または最上位の ``cells`` にセル定義を持つ。
        """
        data = load_config_file(str(path))
        section = data.get("calibration", data)
        cells = section.get("cells", []) if isinstance(section, Mapping) else []
        cell_map = cls.from_config(cells)
        logger.info(f"キャリブレーションを読み込みました: {path} ({len(cell_map)}セル)")
        return cell_map

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[CalibrationCell]:
        return iter(self._cells)

    def __getitem__(self, index: int) -> CalibrationCell:
        return self._cells[index]

    def __bool__(self) -> bool:
        return bool(self._cells)

    def __repr__(self) -> str:
        return f"CellMap({len(self._cells)} cells)"

    @property
    def cells(self) -> tuple[CalibrationCell, ...]:
        return self._cells

    @property
    def centroids(self) -> np.ndarray:
        """各セルの代表点 (N, 2)、読み取り専用"""
        return self._centroids

    def items(self) -> Iterator[tuple[Polygon, AffineTransform]]:
        """(Polygon, AffineTransform) の組を順に返す"""
        for cell in self._cells:
            yield cell.polygon, cell.transform
