"""Tests for PipelineOrchestrator."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import cv2
import numpy as np
import pytest
import yaml

from projector_mapping.config import ConfigManager
from projector_mapping.pipeline import PipelineOrchestrator

if TYPE_CHECKING:
    from pathlib import Path


def _config_data(output_dir: Path) -> dict:
    return {
        "calibration": {
            "cells": [
                {"polygon": [[0, 0], [10, 0], [10, 10], [0, 10]], "transform": [1, 0, 0, 1, 0, 0]},
                {"polygon": [[10, 0], [20, 0], [20, 10], [10, 10]], "transform": [1, 0, 0, 1, 100, 0]},
            ]
        },
        "device": {"width": 200, "height": 10},
        "mask": {"on_value": 127},
        "roi": {"batch_failure_policy": "skip_failed", "ellipse_angle_step_deg": 5},
        "rois": [
            {"type": "point", "points": [[15, 5], [2, 3]]},
            {"type": "line", "start": [0, 0], "end": [5, 5]},
            {"type": "rectangle", "x": 1, "y": 1, "width": 4, "height": 4},
        ],
        "output": {"directory": str(output_dir), "save_transformed_rois": True, "save_device_mask": True},
    }


def _make_orchestrator(tmp_path: Path, data: dict | None = None) -> PipelineOrchestrator:
    output_dir = tmp_path / "output"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(data or _config_data(output_dir)), encoding="utf-8")
    config = ConfigManager(str(config_path))
    config.validate()
    return PipelineOrchestrator(config, logging.getLogger("test_orchestrator"))


class TestPipelineOrchestrator:
    """PipelineOrchestratorのテスト"""

    def test_init_builds_cell_map(self, tmp_path: Path):
        orchestrator = _make_orchestrator(tmp_path)
        assert len(orchestrator.cell_map) == 2
        assert orchestrator.device_shape == (10, 200)
        assert orchestrator.output_path.exists()

    def test_output_dir_override(self, tmp_path: Path):
        data = _config_data(tmp_path / "output")
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump(data), encoding="utf-8")
        override = tmp_path / "override"

        orchestrator = PipelineOrchestrator(ConfigManager(str(config_path)), logging.getLogger("t"), override)
        assert orchestrator.output_path == override
        assert override.exists()

    def test_run_roi_transform(self, tmp_path: Path):
        orchestrator = _make_orchestrator(tmp_path)
        normalized, result = orchestrator.run_roi_transform()

        assert normalized.source_indices == [0, 0, 2]
        assert [u.index for u in normalized.unsupported] == [1]
        assert result.is_complete
        assert result.polygons[0].to_list() == [(115.0, 5.0)]

        saved = json.loads((orchestrator.output_path / "transformed_rois.json").read_text(encoding="utf-8"))
        assert [r["roi_index"] for r in saved["rois"]] == [0, 0, 2]
        assert saved["rois"][0]["vertices"] == [[115.0, 5.0]]
        assert saved["unsupported_roi_indices"] == [1]
        assert saved["failed_roi_indices"] == []
        assert saved["aborted"] is False

    def test_run_roi_transform_with_empty_calibration(self, tmp_path: Path):
        data = _config_data(tmp_path / "output")
        data["calibration"]["cells"] = []
        data["roi"]["batch_failure_policy"] = "abort_remaining"
        orchestrator = _make_orchestrator(tmp_path, data)

        _, result = orchestrator.run_roi_transform()
        assert result.polygons == []
        assert result.aborted is True

        saved = json.loads((orchestrator.output_path / "transformed_rois.json").read_text(encoding="utf-8"))
        assert saved["failed_roi_indices"] == [0]
        assert saved["aborted"] is True

    def test_run_mask_transform(self, tmp_path: Path):
        orchestrator = _make_orchestrator(tmp_path)
        mask = np.zeros((10, 20), dtype=np.uint8)
        mask[5, 15] = 255
        mask_path = tmp_path / "mask.png"
        cv2.imwrite(str(mask_path), mask)

        device_mask = orchestrator.run_mask_transform(mask_path)

        assert device_mask.shape == (10, 200)
        assert np.argwhere(device_mask).tolist() == [[5, 115]]
        assert device_mask[5, 115] == 127

        saved = cv2.imread(str(orchestrator.output_path / "device_mask.png"), cv2.IMREAD_GRAYSCALE)
        np.testing.assert_array_equal(saved, device_mask)

    def test_run_mask_transform_missing_file(self, tmp_path: Path):
        orchestrator = _make_orchestrator(tmp_path)
        with pytest.raises(FileNotFoundError):
            orchestrator.run_mask_transform(tmp_path / "missing.png")

    def test_run_visualization(self, tmp_path: Path):
        orchestrator = _make_orchestrator(tmp_path)
        normalized = orchestrator.normalize_configured_rois()

        output_file = orchestrator.run_visualization(normalized)
        assert output_file.exists()

    def test_run_roi_transform_saves_roi_mask(self, tmp_path: Path):
        """save_roi_mask が有効なら変換済みROIをデバイスサイズで塗りつぶす"""
        data = _config_data(tmp_path / "output")
        data["output"]["save_roi_mask"] = True
        orchestrator = _make_orchestrator(tmp_path, data)

        orchestrator.run_roi_transform()

        roi_mask = cv2.imread(str(orchestrator.output_path / "roi_mask.png"), cv2.IMREAD_GRAYSCALE)
        assert roi_mask.shape == (10, 200)
        # 点ROI (15, 5) -> (115, 5)、(2, 3) -> (2, 3)
        assert roi_mask[5, 115] == 127
        assert roi_mask[3, 2] == 127
        # 矩形ROI (1, 1)-(5, 5) の内部
        assert roi_mask[3, 4] == 127
        assert roi_mask[8, 150] == 0

    def test_roi_mask_not_saved_by_default(self, tmp_path: Path):
        orchestrator = _make_orchestrator(tmp_path)
        orchestrator.run_roi_transform()
        assert not (orchestrator.output_path / "roi_mask.png").exists()

    def test_run_roi_rasterization_with_failed_rois(self, tmp_path: Path):
        """変換に失敗したROIは塗りつぶされない"""
        data = _config_data(tmp_path / "output")
        data["calibration"]["cells"] = []
        orchestrator = _make_orchestrator(tmp_path, data)

        _, result = orchestrator.run_roi_transform()
        roi_mask = orchestrator.run_roi_rasterization(result)
        assert roi_mask.shape == (10, 200)
        assert not roi_mask.any()
