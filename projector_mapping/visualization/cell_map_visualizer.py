"""キャリブレーションセルの可視化"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import cv2
import numpy as np

if TYPE_CHECKING:
    from projector_mapping.geometry import Polygon
    from projector_mapping.mapping.cell_map import CellMap

logger = logging.getLogger(__name__)

CELL_COLOR = (0, 255, 0)
CENTROID_COLOR = (255, 0, 0)
ROI_COLOR = (0, 0, 255)


def visualize_cell_map(
    cell_map: CellMap,
    image: np.ndarray | Path | str | None = None,
    image_size: tuple[int, int] = (1280, 720),
    rois: list[Polygon] | None = None,
    output_path: Path | str | None = None,
) -> np.ndarray:
    """セル境界と代表点を描画する

    Args:
        cell_map: キャリブレーションセルマップ
        image: 背景画像（オプション）
        image_size: 背景がない場合の画像サイズ (width, height)
        rois: 重ねて描画する画像座標のROI（オプション）
        output_path: 出力パス

    Returns:
        可視化画像 (BGR)
    """
    # 背景画像
    if image is not None:
        if isinstance(image, str | Path):
            img = cv2.imread(str(image))
            if img is None:
                logger.warning(f"背景画像を読み込めません: {image}")
                img = np.full((image_size[1], image_size[0], 3), 255, dtype=np.uint8)
        else:
            img = image.copy()
            if img.ndim == 2:
                img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    else:
        img = np.full((image_size[1], image_size[0], 3), 255, dtype=np.uint8)

    # セルを描画
    for index, cell in enumerate(cell_map):
        pts = np.round(cell.polygon.vertices).astype(np.int32)
        cv2.polylines(img, [pts.reshape(-1, 1, 2)], True, CELL_COLOR, 1)

        cx, cy = (int(round(v)) for v in cell.reference_point())
        cv2.circle(img, (cx, cy), 3, CENTROID_COLOR, -1)
        cv2.putText(img, str(index), (cx + 4, cy - 4), cv2.FONT_HERSHEY_SIMPLEX, 0.4, (0, 0, 0), 1)

    # ROIを描画
    for polygon in rois or []:
        pts = np.round(polygon.vertices).astype(np.int32)
        if len(pts) == 1:
            cv2.circle(img, (int(pts[0][0]), int(pts[0][1])), 2, ROI_COLOR, -1)
        else:
            cv2.polylines(img, [pts.reshape(-1, 1, 2)], True, ROI_COLOR, 1)

    cv2.putText(img, f"Cells: {len(cell_map)}", (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 0), 2)

    if output_path:
        cv2.imwrite(str(output_path), img)
        logger.info(f"セルマップを可視化しました: {output_path}")

    return img
