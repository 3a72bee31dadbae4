"""テスト向けの軽量な Fake デバイス実装群。"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class FakeGalvoDevice:
    """スポット表示のみ可能なデバイス。表示要求を記録する。"""

    x_minimum: float = 0.0
    y_minimum: float = 0.0
    x_range: float = 1024.0
    y_range: float = 1024.0
    spots: list[tuple[float, float]] = field(default_factory=list)

    @property
    def supports_raster_mask(self) -> bool:
        return False

    def display_spot(self, x: float, y: float) -> None:
        self.spots.append((x, y))

    def display_mask(self, image: np.ndarray) -> None:
        raise NotImplementedError("ガルバノはマスク表示に対応していません")


@dataclass
class FakeSlmDevice:
    """マスク表示可能なデバイス。最後に受け取ったマスクを保持する。"""

    x_minimum: float = 0.0
    y_minimum: float = 0.0
    x_range: float = 200.0
    y_range: float = 10.0
    spots: list[tuple[float, float]] = field(default_factory=list)
    masks: list[np.ndarray] = field(default_factory=list)

    @property
    def supports_raster_mask(self) -> bool:
        return True

    def display_spot(self, x: float, y: float) -> None:
        self.spots.append((x, y))

    def display_mask(self, image: np.ndarray) -> None:
        self.masks.append(np.array(image, copy=True))
