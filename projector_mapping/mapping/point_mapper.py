"""点マッピングモジュール

画像座標の点をキャリブレーションセルのアフィン変換でデバイス座標に変換します。
点を含むセルが見つからない場合は、代表点が最も近いセルの変換で外挿します。
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

import numpy as np

from projector_mapping.errors import UnmappablePointError

if TYPE_CHECKING:
    from projector_mapping.mapping.cell_map import CellMap

logger = logging.getLogger(__name__)


@dataclass
class PointMappingResult:
    """点マッピング結果

    Attributes:
        device_point: デバイス座標 (x, y)
        cell_index: 使用したセルのインデックス
        is_extrapolated: 最近傍セルで外挿したか
    """

    device_point: tuple[float, float]
    cell_index: int
    is_extrapolated: bool = False


def _nearest_cell_index(cell_map: CellMap, point: tuple[float, float]) -> int:
    """代表点までのユークリッド距離が最小のセル（同距離なら先頭）"""
    centroids = cell_map.centroids
    distances = np.hypot(centroids[:, 0] - point[0], centroids[:, 1] - point[1])
    # argmin は同値なら最初のインデックスを返す
    return int(np.argmin(distances))


def _nearest_cell_indices(cell_map: CellMap, points: np.ndarray) -> np.ndarray:
    """各点について代表点が最も近いセルのインデックス（同距離なら先頭）

    メモリ使用量が点数×セル数にならないよう、セルごとに最小距離を更新する。
    """
    px = points[:, 0]
    py = points[:, 1]
    best_distance = np.full(len(points), np.inf)
    best_index = np.zeros(len(points), dtype=np.int64)
    for index, (cx, cy) in enumerate(cell_map.centroids):
        distance = np.hypot(px - cx, py - cy)
        # 厳密に小さい場合のみ更新するので、同距離なら先のセルが残る
        closer = distance < best_distance
        best_distance[closer] = distance[closer]
        best_index[closer] = index
    return best_index


def locate_point(cell_map: CellMap, point: tuple[float, float]) -> PointMappingResult:
    """点をデバイス座標に変換し、使用したセルの情報も返す

    1. セル順に内外判定し、最初に点を含むセルの変換を適用する。
       セルが重なっている場合の結果はセル順に依存する。
    2. どのセルにも含まれない場合、代表点が最も近いセルの変換を適用する。
    3. セルが1つもない場合は UnmappablePointError。

    Args:
        cell_map: キャリブレーションセルマップ
        point: 画像座標 (x, y)

    Returns:
        PointMappingResult

    Raises:
        UnmappablePointError: セルマップが空の場合
    """
    point = (float(point[0]), float(point[1]))
    if not cell_map:
        raise UnmappablePointError(point)

    for index, cell in enumerate(cell_map):
        if cell.polygon.contains(point):
            return PointMappingResult(device_point=cell.transform.apply(point), cell_index=index)

    index = _nearest_cell_index(cell_map, point)
    logger.debug(f"点 {point} はどのセルにも含まれません。最近傍セル {index} で外挿します。")
    return PointMappingResult(
        device_point=cell_map[index].transform.apply(point),
        cell_index=index,
        is_extrapolated=True,
    )


def map_point(cell_map: CellMap, point: tuple[float, float]) -> tuple[float, float]:
    """点を画像座標からデバイス座標に変換する

    Raises:
        UnmappablePointError: セルマップが空の場合
    """
    return locate_point(cell_map, point).device_point


def map_points(cell_map: CellMap, points: np.ndarray) -> np.ndarray:
    """複数の点をまとめて変換する

    map_point と同じ規則（セル順の内外判定、外れた点は最近傍セル、
    同距離は先頭セル）をベクトル化して適用する。

    Args:
        cell_map: キャリブレーションセルマップ
        points: 画像座標 (N, 2)

    Returns:
        デバイス座標 (N, 2) float64

    Raises:
        UnmappablePointError: セルマップが空で、点が1つ以上ある場合
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    result = np.empty_like(pts)
    if len(pts) == 0:
        return result
    if not cell_map:
        x, y = pts[0]
        raise UnmappablePointError((float(x), float(y)))

    assigned = np.full(len(pts), -1, dtype=np.int64)
    for index, cell in enumerate(cell_map):
        pending = assigned < 0
        if not pending.any():
            break
        hit = np.zeros(len(pts), dtype=bool)
        hit[pending] = cell.polygon.contains_points(pts[pending])
        assigned[hit] = index

    outside = assigned < 0
    if outside.any():
        assigned[outside] = _nearest_cell_indices(cell_map, pts[outside])
        logger.debug(f"{int(outside.sum())}点を最近傍セルで外挿しました")

    for index in np.unique(assigned):
        selected = assigned == index
        result[selected] = cell_map[int(index)].transform.apply_points(pts[selected])

    return result
