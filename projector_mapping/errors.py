"""座標マッピングで発生するエラー定義。"""

from __future__ import annotations


class ProjectorMappingError(Exception):
    """projector_mapping の基底例外。"""


class UnmappablePointError(ProjectorMappingError):
    """キャリブレーションが空で、点をデバイス座標へ変換できない。

    Attributes:
        point: 変換できなかった画像座標 (x, y)
    """

    def __init__(self, point: tuple[float, float] | None = None, message: str | None = None):
        self.point = point
        if message is None:
            message = f"点をデバイス座標に変換できません: {point}（キャリブレーションセルがありません）"
        super().__init__(message)


class InvalidMaskDimensionsError(ProjectorMappingError, ValueError):
    """マスクバッファ長が width * height と一致しない。

    Attributes:
        length: 実際のバッファ長
        width: 宣言された幅
        height: 宣言された高さ
    """

    def __init__(self, length: int, width: int, height: int, message: str | None = None):
        self.length = length
        self.width = width
        self.height = height
        if message is None:
            message = f"マスクサイズが不正です: length={length}, width={width}, height={height}"
        super().__init__(message)


class UnsupportedShapeError(ProjectorMappingError):
    """ポリゴンに変換できないROI形状。

    Attributes:
        shape_type: 形状の種類名
    """

    def __init__(self, shape_type: str, message: str | None = None):
        self.shape_type = shape_type
        if message is None:
            message = f"このROI形状は使用できません: {shape_type}"
        super().__init__(message)
