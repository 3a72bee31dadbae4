"""Configuration management module for the projector mapping tool."""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

BATCH_FAILURE_POLICIES = ("skip_failed", "abort_remaining")

ROI_TYPES = ("point", "rectangle", "polygon", "freehand", "oval", "line")


class ConfigManager:
    """設定ファイル管理クラス

    YAML/JSON形式の設定ファイルを読み込み、検証し、設定値を提供する。

    Attributes:
        config_path: 設定ファイルのパス
        config: 読み込まれた設定データ
    """

    # 必須項目の定義
    REQUIRED_KEYS = {
        "calibration": ["cells"],
        "device": ["width", "height"],
        "mask": ["on_value"],
        "roi": ["batch_failure_policy"],
        "output": ["directory"],
    }

    # デフォルト設定値
    DEFAULT_CONFIG = {
        "calibration": {"cells": []},
        "device": {"width": 1024, "height": 768},
        "mask": {"on_value": 127},
        "roi": {
            "batch_failure_policy": "skip_failed",
            "ellipse_angle_step_deg": 5,
        },
        "rois": [],
        "output": {
            "directory": "output",
            "save_transformed_rois": True,
            "save_device_mask": True,
            "save_roi_mask": False,
            "debug_mode": False,
        },
    }

    def __init__(self, config_path: str = "config.yaml"):
        """ConfigManagerを初期化する

        Args:
            config_path: 設定ファイルのパス（デフォルト: config.yaml）
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """設定ファイルを読み込む

        Returns:
            読み込まれた設定データ

        Raises:
            ValueError: 設定ファイルの形式が不正な場合
        """
        if not os.path.exists(self.config_path):
            logger.warning(f"設定ファイル '{self.config_path}' が見つかりません。デフォルト設定を使用します。")
            return copy.deepcopy(self.DEFAULT_CONFIG)

        file_ext = Path(self.config_path).suffix.lower()
        if file_ext not in [".yaml", ".yml", ".json"]:
            raise ValueError(f"サポートされていないファイル形式: {file_ext}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                if file_ext == ".json":
                    config = json.load(f)
                else:
                    config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"YAML解析エラー: {e}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"JSON解析エラー: {e}") from e
        except OSError as e:
            raise ValueError(f"設定ファイルの読み込みに失敗しました: {e}") from e

        if config is None:
            logger.warning("設定ファイルが空です。デフォルト設定を使用します。")
            return copy.deepcopy(self.DEFAULT_CONFIG)
        if not isinstance(config, dict):
            raise ValueError("設定ファイルは辞書形式である必要があります。")

        logger.info(f"設定ファイル '{self.config_path}' を読み込みました。")
        return config

    def validate(self) -> bool:
        """設定値の妥当性を検証する

        必須項目の存在チェック、型チェック、値の範囲チェックを実行する。

        Returns:
            検証が成功した場合True

        Raises:
            ValueError: 設定値が不正な場合
        """
        # 必須セクションと必須項目のチェック
        for section, required_keys in self.REQUIRED_KEYS.items():
            if section not in self.config:
                raise ValueError(f"必須セクション '{section}' が設定ファイルに存在しません。")

            section_config = self.config[section]
            if not isinstance(section_config, dict):
                raise ValueError(f"セクション '{section}' は辞書型である必要があります。")
            for key in required_keys:
                if key not in section_config:
                    raise ValueError(f"必須項目 '{section}.{key}' が設定ファイルに存在しません。")

        self._validate_calibration_config()
        self._validate_device_config()
        self._validate_mask_config()
        self._validate_roi_config()
        self._validate_rois_config()
        self._validate_output_config()

        logger.info("設定ファイルの検証が完了しました。")
        return True

    def _validate_calibration_config(self):
        """calibration セクションの検証"""
        cells = self.config["calibration"]["cells"]

        if not isinstance(cells, list):
            raise ValueError("calibration.cells はリストである必要があります。")

        for i, cell in enumerate(cells):
            if not isinstance(cell, dict):
                raise ValueError(f"calibration.cells[{i}] は辞書である必要があります。")

            # polygon の検証
            polygon = cell.get("polygon")
            if not isinstance(polygon, list) or len(polygon) < 3:
                raise ValueError(f"calibration.cells[{i}].polygon は少なくとも3つの頂点を持つリストである必要があります。")
            for j, point in enumerate(polygon):
                if not isinstance(point, list) or len(point) != 2:
                    raise ValueError(f"calibration.cells[{i}].polygon[{j}] は [x, y] 形式である必要があります。")
                if not all(isinstance(coord, (int, float)) for coord in point):
                    raise ValueError(f"calibration.cells[{i}].polygon[{j}] の座標は数値である必要があります。")

            # transform / matrix の検証
            if "transform" in cell:
                transform = cell["transform"]
                if not isinstance(transform, list) or len(transform) != 6:
                    raise ValueError(f"calibration.cells[{i}].transform は6要素のリストである必要があります。")
                if not all(isinstance(v, (int, float)) for v in transform):
                    raise ValueError(f"calibration.cells[{i}].transform の要素は数値である必要があります。")
            elif "matrix" in cell:
                matrix = cell["matrix"]
                if not isinstance(matrix, list) or len(matrix) != 2:
                    raise ValueError(f"calibration.cells[{i}].matrix は 2x3 行列である必要があります。")
                for r, row in enumerate(matrix):
                    if not isinstance(row, list) or len(row) != 3:
                        raise ValueError(f"calibration.cells[{i}].matrix の行 {r} は長さ3のリストである必要があります。")
                    if not all(isinstance(v, (int, float)) for v in row):
                        raise ValueError(f"calibration.cells[{i}].matrix[{r}] の要素は数値である必要があります。")
            else:
                raise ValueError(f"calibration.cells[{i}] には 'transform' または 'matrix' が必要です。")

            # centroid の検証（任意）
            if cell.get("centroid") is not None:
                centroid = cell["centroid"]
                if not isinstance(centroid, list) or len(centroid) != 2:
                    raise ValueError(f"calibration.cells[{i}].centroid は [x, y] 形式である必要があります。")

        if not cells:
            logger.warning("calibration.cells が空です。すべての点変換が失敗します。")

    def _validate_device_config(self):
        """device セクションの検証"""
        device_config = self.config["device"]

        for key in ("width", "height"):
            value = device_config.get(key)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"device.{key} は正の整数である必要があります。")

    def _validate_mask_config(self):
        """mask セクションの検証"""
        on_value = self.config["mask"].get("on_value")
        if not isinstance(on_value, int) or isinstance(on_value, bool) or not (1 <= on_value <= 255):
            raise ValueError("mask.on_value は 1 から 255 の整数である必要があります。")

    def _validate_roi_config(self):
        """roi セクションの検証"""
        roi_config = self.config["roi"]

        policy = roi_config.get("batch_failure_policy")
        if policy not in BATCH_FAILURE_POLICIES:
            raise ValueError(
                f"roi.batch_failure_policy は {', '.join(BATCH_FAILURE_POLICIES)} のいずれかである必要があります。"
            )

        if "ellipse_angle_step_deg" in roi_config:
            step = roi_config["ellipse_angle_step_deg"]
            if not isinstance(step, int) or isinstance(step, bool) or not (1 <= step <= 90):
                raise ValueError("roi.ellipse_angle_step_deg は 1 から 90 の整数である必要があります。")

    def _validate_rois_config(self):
        """rois セクションの検証（任意）"""
        rois = self.config.get("rois", [])

        if not isinstance(rois, list):
            raise ValueError("rois はリストである必要があります。")

        for i, roi in enumerate(rois):
            if not isinstance(roi, dict):
                raise ValueError(f"rois[{i}] は辞書である必要があります。")
            if "type" not in roi:
                raise ValueError(f"rois[{i}] には 'type' が必要です。")
            if roi["type"] not in ROI_TYPES:
                raise ValueError(f"rois[{i}].type は {', '.join(ROI_TYPES)} のいずれかである必要があります。")

    def _validate_output_config(self):
        """output セクションの検証"""
        output_config = self.config["output"]

        if not isinstance(output_config.get("directory"), str):
            raise ValueError("output.directory は文字列である必要があります。")

        bool_fields = ["save_transformed_rois", "save_device_mask", "save_roi_mask", "debug_mode"]
        for field in bool_fields:
            if field in output_config and not isinstance(output_config[field], bool):
                raise ValueError(f"output.{field} はブール値である必要があります。")

    def get(self, key: str, default: Any = None) -> Any:
        """設定値を取得する

        ドット記法（例: 'device.width'）で階層的な設定値にアクセスできる。

        Args:
            key: 設定キー（ドット記法をサポート）
            default: キーが存在しない場合のデフォルト値

        Returns:
            設定値、またはデフォルト値
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """設定セクション全体を取得する"""
        return self.config.get(section, {})

    def set(self, key: str, value: Any):
        """設定値を動的に変更する

        Args:
            key: 設定キー（ドット記法をサポート）
            value: 設定する値
        """
        keys = key.split(".")
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        logger.debug(f"設定値を変更しました: {key} = {value}")

    def save(self, output_path: Optional[str] = None):
        """設定をファイルに保存する

        Args:
            output_path: 保存先パス（指定しない場合は元のパスに上書き）
        """
        save_path = output_path or self.config_path
        file_ext = Path(save_path).suffix.lower()
        if file_ext not in [".yaml", ".yml", ".json"]:
            raise ValueError(f"サポートされていないファイル形式: {file_ext}")

        with open(save_path, "w", encoding="utf-8") as f:
            if file_ext == ".json":
                json.dump(self.config, f, indent=2, ensure_ascii=False)
            else:
                yaml.dump(self.config, f, default_flow_style=False, allow_unicode=True)

        logger.info(f"設定ファイルを保存しました: {save_path}")
