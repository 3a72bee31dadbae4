"""ROI形状の正規化モジュール

エディタ上の各種ROI形状（点群、矩形、多角形、フリーハンド、楕円）を
変換用の単純な頂点列ポリゴンに正規化します。
変換できない形状は例外ではなく UnsupportedShape として結果に含めます。
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
import logging
from typing import Any

import cv2
import numpy as np

from projector_mapping.errors import UnsupportedShapeError
from projector_mapping.geometry import Polygon

logger = logging.getLogger(__name__)

DEFAULT_ELLIPSE_ANGLE_STEP_DEG = 5


@dataclass(frozen=True)
class PointRoi:
    """点ROI（複数点のクラスタを含む）"""

    points: Sequence[tuple[float, float]]
    name: str | None = None


@dataclass(frozen=True)
class RectangleRoi:
    """矩形ROI (x, y, width, height)"""

    x: float
    y: float
    width: float
    height: float
    name: str | None = None


@dataclass(frozen=True)
class PolygonRoi:
    """多角形ROI"""

    vertices: Sequence[tuple[float, float]]
    name: str | None = None


@dataclass(frozen=True)
class FreehandRoi:
    """フリーハンドROI"""

    vertices: Sequence[tuple[float, float]]
    name: str | None = None


@dataclass(frozen=True)
class OvalRoi:
    """楕円ROI（外接矩形で指定）"""

    x: float
    y: float
    width: float
    height: float
    name: str | None = None


@dataclass(frozen=True)
class LineRoi:
    """直線ROI。ポリゴンに変換できない形状の一例。"""

    start: tuple[float, float]
    end: tuple[float, float]
    name: str | None = None


@dataclass(frozen=True)
class UnsupportedShape:
    """ポリゴンに変換できなかった形状

    Attributes:
        index: 入力リスト中のインデックス
        shape_type: 形状の種類名
        shape: 入力形状
    """

    index: int
    shape_type: str
    shape: Any = None


@dataclass
class RoiNormalizationResult:
    """ROI正規化の結果

    Attributes:
        polygons: 正規化されたポリゴン（点クラスタは1点ごとに分割）
        source_indices: polygons の各要素に対応する入力インデックス
        unsupported: 変換できなかった形状
    """

    polygons: list[Polygon] = field(default_factory=list)
    source_indices: list[int] = field(default_factory=list)
    unsupported: list[UnsupportedShape] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.unsupported

    def raise_for_unsupported(self) -> None:
        """変換できない形状があれば UnsupportedShapeError を送出する"""
        if self.unsupported:
            first = self.unsupported[0]
            raise UnsupportedShapeError(
                first.shape_type,
                f"このROI形状は使用できません: {first.shape_type} (index={first.index})",
            )


def ellipse_to_polygon(roi: OvalRoi, angle_step_deg: int = DEFAULT_ELLIPSE_ANGLE_STEP_DEG) -> Polygon:
    """楕円ROIを多角形で近似する

    cv2.ellipse2Poly は整数座標を返すため、頂点は画素単位に丸められる。
    閉じるための重複頂点は除く。
    """
    if roi.width <= 0 or roi.height <= 0:
        raise ValueError(f"楕円の幅と高さは正である必要があります: {roi.width}x{roi.height}")

    center = (int(round(roi.x + roi.width / 2)), int(round(roi.y + roi.height / 2)))
    axes = (max(int(round(roi.width / 2)), 1), max(int(round(roi.height / 2)), 1))
    points = cv2.ellipse2Poly(center, axes, 0, 0, 360, int(angle_step_deg))
    if len(points) > 1 and np.array_equal(points[0], points[-1]):
        points = points[:-1]
    return Polygon(points)


def normalize_roi(
    roi: Any,
    angle_step_deg: int = DEFAULT_ELLIPSE_ANGLE_STEP_DEG,
) -> list[Polygon] | None:
    """1つのROIをポリゴンのリストに正規化する

    Returns:
        ポリゴンのリスト。変換できない形状なら None
    """
    if isinstance(roi, PointRoi):
        return [Polygon([point]) for point in roi.points]
    if isinstance(roi, RectangleRoi):
        x, y, w, h = roi.x, roi.y, roi.width, roi.height
        return [Polygon([(x, y), (x + w, y), (x + w, y + h), (x, y + h)])]
    if isinstance(roi, PolygonRoi | FreehandRoi):
        return [Polygon(roi.vertices)]
    if isinstance(roi, OvalRoi):
        return [ellipse_to_polygon(roi, angle_step_deg)]
    return None


def normalize_rois(
    rois: Iterable[Any],
    angle_step_deg: int = DEFAULT_ELLIPSE_ANGLE_STEP_DEG,
) -> RoiNormalizationResult:
    """ROI群をポリゴンに正規化する

    点ROIのクラスタは1点ずつのポリゴンに分割し、楕円は多角形で近似する。
    名前などのROI固有情報は捨てる。

    Args:
        rois: ROI形状のリスト
        angle_step_deg: 楕円近似の角度刻み [deg]

    Returns:
        RoiNormalizationResult
    """
    result = RoiNormalizationResult()
    for index, roi in enumerate(rois):
        try:
            polygons = normalize_roi(roi, angle_step_deg)
        except ValueError as e:
            logger.debug(f"ROI[{index}] を正規化できません: {e}")
            polygons = None

        if polygons is None:
            result.unsupported.append(UnsupportedShape(index=index, shape_type=type(roi).__name__, shape=roi))
            continue

        result.polygons.extend(polygons)
        result.source_indices.extend([index] * len(polygons))

    if result.unsupported:
        logger.warning(f"{len(result.unsupported)}個のROIはポリゴンに変換できませんでした")
    return result


_ROI_TYPES = {
    "point": PointRoi,
    "rectangle": RectangleRoi,
    "polygon": PolygonRoi,
    "freehand": FreehandRoi,
    "oval": OvalRoi,
    "line": LineRoi,
}


def roi_from_dict(data: Mapping[str, Any]) -> Any:
    """設定辞書からROI形状を作成する

    例:
        {'type': 'rectangle', 'x': 0, 'y': 0, 'width': 10, 'height': 10}
        {'type': 'polygon', 'vertices': [[0, 0], [10, 0], [5, 8]]}
        {'type': 'point', 'points': [[3, 4], [5, 6]]}

    Raises:
        ValueError: type が未知、またはフィールドが不足している場合
    """
    if not isinstance(data, Mapping) or "type" not in data:
        raise ValueError("ROI定義には 'type' が必要です。")

    roi_type = str(data["type"]).lower()
    cls = _ROI_TYPES.get(roi_type)
    if cls is None:
        raise ValueError(f"未知のROI種別です: {roi_type}")

    fields = {k: v for k, v in data.items() if k != "type"}
    for key in ("points", "vertices"):
        if key in fields:
            fields[key] = [tuple(p) for p in fields[key]]
    for key in ("start", "end"):
        if key in fields:
            fields[key] = tuple(fields[key])

    try:
        return cls(**fields)
    except TypeError as e:
        raise ValueError(f"ROI定義 '{roi_type}' が不正です: {e}") from e
