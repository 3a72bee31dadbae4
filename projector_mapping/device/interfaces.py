"""投影デバイスのポートインターフェース定義。

デバイスの列挙・露光制御・通信は外部の実装に任せ、
ここでは座標変換側が必要とする最小の境界だけを定義する。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import numpy as np


@runtime_checkable
class ProjectionDevice(Protocol):
    """光ターゲティングデバイス（ガルバノ、SLM 等）のポート。

    supports_raster_mask はマスク画像を直接表示できるかを示す能力フラグで、
    具体的なデバイスクラスによる型判定の代わりに使う。
    """

    @property
    def x_minimum(self) -> float: ...

    @property
    def y_minimum(self) -> float: ...

    @property
    def x_range(self) -> float: ...

    @property
    def y_range(self) -> float: ...

    @property
    def supports_raster_mask(self) -> bool: ...

    def display_spot(self, x: float, y: float) -> None:
        """デバイス座標 (x, y) にスポットを表示する。"""

    def display_mask(self, image: np.ndarray) -> None:
        """行優先のマスク画像を表示する。supports_raster_mask が True の場合のみ呼ばれる。"""
