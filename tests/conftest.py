"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from projector_mapping.adapters import FakeGalvoDevice, FakeSlmDevice
from projector_mapping.geometry import AffineTransform, Polygon
from projector_mapping.mapping import CalibrationCell, CellMap


def square(x0: float, y0: float, size: float) -> Polygon:
    """左上 (x0, y0)、一辺 size の正方形"""
    return Polygon([(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)])


@pytest.fixture
def cell_a() -> CalibrationCell:
    """[0,10)x[0,10) の恒等変換セル"""
    return CalibrationCell(square(0, 0, 10), AffineTransform.identity())


@pytest.fixture
def cell_b() -> CalibrationCell:
    """[10,20)x[0,10) の +100 平行移動セル"""
    return CalibrationCell(square(10, 0, 10), AffineTransform.translation(100, 0))


@pytest.fixture
def two_cell_map(cell_a: CalibrationCell, cell_b: CalibrationCell) -> CellMap:
    """隣接する2セル（A, B の順）"""
    return CellMap([cell_a, cell_b])


@pytest.fixture
def empty_cell_map() -> CellMap:
    return CellMap()


@pytest.fixture
def galvo_device() -> FakeGalvoDevice:
    return FakeGalvoDevice(x_minimum=0.0, y_minimum=0.0, x_range=200.0, y_range=10.0)


@pytest.fixture
def slm_device() -> FakeSlmDevice:
    return FakeSlmDevice(x_range=200.0, y_range=10.0)
