"""マスク変換モジュール

画像空間の2値マスクをデバイス空間のラスタに変換します。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from projector_mapping.errors import InvalidMaskDimensionsError, UnmappablePointError
from projector_mapping.mapping.point_mapper import map_points

if TYPE_CHECKING:
    from projector_mapping.mapping.cell_map import CellMap

logger = logging.getLogger(__name__)

DEFAULT_ON_VALUE = 127

# 一度に点マッピングする画素数の上限
DEFAULT_CHUNK_SIZE = 65536


def _as_flat_buffer(mask: bytes | bytearray | np.ndarray | list[int]) -> np.ndarray:
    if isinstance(mask, bytes | bytearray | memoryview):
        return np.frombuffer(mask, dtype=np.uint8)
    return np.asarray(mask).ravel()


def transform_mask(
    cell_map: CellMap,
    input_mask: bytes | bytearray | np.ndarray | list[int],
    input_width: int,
    input_height: int,
    output_width: int,
    output_height: int,
    on_value: int = DEFAULT_ON_VALUE,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> np.ndarray:
    """マスクを画像座標からデバイス座標へ変換する

    値が0より大きい入力画素 (x, y) をそれぞれ点マッピングし、
    変換後の座標を0方向に切り捨てた画素を on_value にする。
    出力範囲外に写る画素、および変換できない画素は捨てる。
    ON画素は chunk_size 個ずつ処理するため、作業メモリはマスクの大きさに比例しない。

    Args:
        cell_map: キャリブレーションセルマップ
        input_mask: 行優先の入力マスク（index = x + y * input_width）
        input_width: 入力幅
        input_height: 入力高さ
        output_width: 出力幅（デバイスのアドレス範囲）
        output_height: 出力高さ
        on_value: 出力のON画素値
        chunk_size: 一度に変換する画素数

    Returns:
        行優先の出力マスク (output_width * output_height,) uint8

    Raises:
        InvalidMaskDimensionsError: バッファ長が input_width * input_height と一致しない場合
    """
    flat = _as_flat_buffer(input_mask)
    if input_width < 0 or input_height < 0 or flat.size != input_width * input_height:
        raise InvalidMaskDimensionsError(flat.size, input_width, input_height)
    if output_width < 0 or output_height < 0:
        raise InvalidMaskDimensionsError(
            output_width * output_height,
            output_width,
            output_height,
            message=f"出力サイズが不正です: width={output_width}, height={output_height}",
        )
    if not 0 < on_value <= 255:
        raise ValueError(f"on_value は 1 から 255 の範囲である必要があります: {on_value}")
    if chunk_size <= 0:
        raise ValueError(f"chunk_size は正である必要があります: {chunk_size}")

    output = np.zeros(output_width * output_height, dtype=np.uint8)

    on_indices = np.flatnonzero(flat > 0)
    if on_indices.size == 0:
        return output

    written = 0
    for start in range(0, on_indices.size, chunk_size):
        chunk = on_indices[start : start + chunk_size]
        source = np.column_stack((chunk % input_width, chunk // input_width)).astype(np.float64)

        try:
            mapped = map_points(cell_map, source)
        except UnmappablePointError:
            logger.warning(f"キャリブレーションが空のため、{on_indices.size}画素をすべて破棄しました")
            return output

        mapped = mapped[np.isfinite(mapped).all(axis=1)]
        xt, yt = np.trunc(mapped).astype(np.int64).T
        in_range = (xt >= 0) & (xt < output_width) & (yt >= 0) & (yt < output_height)
        output[xt[in_range] + yt[in_range] * output_width] = on_value
        written += int(in_range.sum())

    dropped = on_indices.size - written
    if dropped:
        logger.debug(f"出力範囲外の{dropped}画素を破棄しました")

    return output


def transform_mask_image(
    cell_map: CellMap,
    image: np.ndarray,
    output_shape: tuple[int, int],
    on_value: int = DEFAULT_ON_VALUE,
) -> np.ndarray:
    """2次元マスク画像を変換する

    Args:
        cell_map: キャリブレーションセルマップ
        image: 入力マスク (height, width)
        output_shape: 出力形状 (height, width)
        on_value: 出力のON画素値

    Returns:
        出力マスク (height, width) uint8
    """
    image = np.asarray(image)
    if image.ndim != 2:
        raise InvalidMaskDimensionsError(
            image.size, -1, -1, message=f"マスク画像は2次元である必要があります: shape={image.shape}"
        )
    height, width = image.shape
    out_height, out_width = output_shape
    flat = transform_mask(cell_map, image, width, height, out_width, out_height, on_value)
    return flat.reshape(out_height, out_width)
