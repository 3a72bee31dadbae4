"""デバイス向けの変換・表示ヘルパー"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from projector_mapping.mapping.mask_transformer import DEFAULT_ON_VALUE, transform_mask
from projector_mapping.mapping.point_mapper import map_point

if TYPE_CHECKING:
    from projector_mapping.device.interfaces import ProjectionDevice
    from projector_mapping.mapping.cell_map import CellMap

logger = logging.getLogger(__name__)


def is_within_range(device: ProjectionDevice, x: float, y: float) -> bool:
    """デバイス座標がアドレス範囲 [min, min + range) に入っているか"""
    return (
        device.x_minimum <= x < device.x_minimum + device.x_range
        and device.y_minimum <= y < device.y_minimum + device.y_range
    )


def display_spot(device: ProjectionDevice, x: float, y: float) -> bool:
    """範囲内ならデバイス座標 (x, y) にスポットを表示する

    Returns:
        表示した場合True
    """
    if not is_within_range(device, x, y):
        logger.debug(f"スポット ({x}, {y}) はデバイス範囲外のため表示しません")
        return False
    device.display_spot(x, y)
    return True


def display_center_spot(device: ProjectionDevice) -> None:
    """デバイス範囲の中心にスポットを表示する"""
    x = device.x_range / 2 + device.x_minimum
    y = device.y_range / 2 + device.y_minimum
    device.display_spot(x, y)


def display_image_spot(cell_map: CellMap, device: ProjectionDevice, point: tuple[float, float]) -> bool:
    """画像座標の点を変換してスポットを表示する

    Raises:
        UnmappablePointError: キャリブレーションが空の場合
    """
    x, y = map_point(cell_map, point)
    return display_spot(device, x, y)


def transform_and_set_mask(
    cell_map: CellMap,
    device: ProjectionDevice,
    input_mask: bytes | bytearray | np.ndarray,
    width: int,
    height: int,
    on_value: int = DEFAULT_ON_VALUE,
) -> bool:
    """マスクをデバイス座標に変換してデバイスに表示する

    出力サイズはデバイスのアドレス範囲 (x_range, y_range) を使う。

    Returns:
        表示した場合True。デバイスがマスク表示に対応していなければFalse

    Raises:
        InvalidMaskDimensionsError: マスク長が width * height と一致しない場合
    """
    if not device.supports_raster_mask:
        logger.warning(f"{type(device).__name__} はマスク表示に対応していません")
        return False

    output_width = int(device.x_range)
    output_height = int(device.y_range)
    output = transform_mask(cell_map, input_mask, width, height, output_width, output_height, on_value)
    device.display_mask(output)
    logger.info(f"マスクをデバイスに送信しました: {output_width}x{output_height}, ON画素 {int(np.count_nonzero(output))}")
    return True
