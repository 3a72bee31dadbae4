"""ROIポリゴン変換モジュール

ROIの頂点列を点マッピングでデバイス座標に変換します。
1頂点でも変換できなければそのポリゴン全体を失敗とし、部分的な結果は返しません。
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING

from projector_mapping.errors import UnmappablePointError
from projector_mapping.geometry import Polygon
from projector_mapping.mapping.point_mapper import map_point

if TYPE_CHECKING:
    from projector_mapping.mapping.cell_map import CellMap

logger = logging.getLogger(__name__)


class BatchFailurePolicy(str, Enum):
    """複数ポリゴン変換での失敗時の扱い"""

    SKIP_FAILED = "skip_failed"
    ABORT_REMAINING = "abort_remaining"


@dataclass
class PolygonFailure:
    """変換に失敗したポリゴン

    Attributes:
        index: 入力リスト中のインデックス
        polygon: 入力ポリゴン
        error: 発生したエラー
    """

    index: int
    polygon: Polygon
    error: UnmappablePointError


@dataclass
class PolygonBatchResult:
    """複数ポリゴン変換の結果

    Attributes:
        polygons: 変換に成功したポリゴン（入力順）
        source_indices: polygons の各要素に対応する入力インデックス
        failures: 失敗したポリゴン
        aborted: ABORT_REMAINING で残りを処理せずに終了したか
    """

    polygons: list[Polygon] = field(default_factory=list)
    source_indices: list[int] = field(default_factory=list)
    failures: list[PolygonFailure] = field(default_factory=list)
    aborted: bool = False

    @property
    def is_complete(self) -> bool:
        """すべての入力が変換されたか"""
        return not self.failures and not self.aborted


def transform_polygon(cell_map: CellMap, polygon: Polygon) -> Polygon:
    """ポリゴンの全頂点を順にデバイス座標へ変換する

    頂点数と順序は保持される。

    Args:
        cell_map: キャリブレーションセルマップ
        polygon: 画像座標のポリゴン

    Returns:
        デバイス座標のポリゴン

    Raises:
        UnmappablePointError: いずれかの頂点が変換できない場合
    """
    return Polygon([map_point(cell_map, vertex) for vertex in polygon])


def transform_polygons(
    cell_map: CellMap,
    polygons: Iterable[Polygon],
    policy: BatchFailurePolicy | str = BatchFailurePolicy.SKIP_FAILED,
) -> PolygonBatchResult:
    """複数のポリゴンを個別に変換する

    あるポリゴンの失敗は、すでに変換済みのポリゴンに影響しない。
    SKIP_FAILED では失敗を記録して残りを続行し、
    ABORT_REMAINING では失敗を記録して残りを処理せずに終了する。

    Args:
        cell_map: キャリブレーションセルマップ
        polygons: 画像座標のポリゴン
        policy: 失敗時の扱い

    Returns:
        PolygonBatchResult
    """
    policy = BatchFailurePolicy(policy)
    result = PolygonBatchResult()

    for index, polygon in enumerate(polygons):
        try:
            transformed = transform_polygon(cell_map, polygon)
        except UnmappablePointError as e:
            result.failures.append(PolygonFailure(index=index, polygon=polygon, error=e))
            if policy is BatchFailurePolicy.ABORT_REMAINING:
                result.aborted = True
                break
            continue

        result.polygons.append(transformed)
        result.source_indices.append(index)

    logger.debug(
        f"ポリゴン変換: 成功 {len(result.polygons)}, 失敗 {len(result.failures)}, 中断 {result.aborted}"
    )
    return result
