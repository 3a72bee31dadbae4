"""ポリゴンのラスタ化

デバイス座標に変換済みのROIポリゴンを、ラスタ型デバイス（SLM等）用の
マスクに塗りつぶします。
"""

from __future__ import annotations

from collections.abc import Iterable
import logging

import cv2
import numpy as np

from projector_mapping.geometry import Polygon
from projector_mapping.mapping.mask_transformer import DEFAULT_ON_VALUE

logger = logging.getLogger(__name__)


def rasterize_polygons(
    polygons: Iterable[Polygon],
    width: int,
    height: int,
    on_value: int = DEFAULT_ON_VALUE,
) -> np.ndarray:
    """ポリゴン群を塗りつぶしたマスクを作成する

    頂点座標は0方向に切り捨てて画素に合わせる。
    1頂点のポリゴンは1画素、2頂点のポリゴンは線分として描画する。

    Args:
        polygons: デバイス座標のポリゴン
        width: マスク幅
        height: マスク高さ
        on_value: ON画素値

    Returns:
        マスク (height, width) uint8
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"マスクサイズは正である必要があります: width={width}, height={height}")

    mask = np.zeros((height, width), dtype=np.uint8)
    count = 0
    for polygon in polygons:
        pts = np.trunc(polygon.vertices).astype(np.int32)
        if len(pts) == 1:
            x, y = pts[0]
            if 0 <= x < width and 0 <= y < height:
                mask[y, x] = on_value
        elif len(pts) == 2:
            cv2.line(mask, tuple(int(v) for v in pts[0]), tuple(int(v) for v in pts[1]), int(on_value), 1)
        else:
            cv2.fillPoly(mask, [pts.reshape(-1, 1, 2)], int(on_value))
        count += 1

    logger.debug(f"{count}個のポリゴンをラスタ化しました ({width}x{height})")
    return mask
