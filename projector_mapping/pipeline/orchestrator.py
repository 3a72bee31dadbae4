"""Pipeline orchestrator for ROI and mask transformation."""

import json
import logging
from pathlib import Path

import cv2
import numpy as np

from projector_mapping.config import ConfigManager
from projector_mapping.mapping import (
    BatchFailurePolicy,
    CellMap,
    PolygonBatchResult,
    rasterize_polygons,
    transform_mask_image,
    transform_polygons,
)
from projector_mapping.roi import RoiNormalizationResult, normalize_rois, roi_from_dict
from projector_mapping.visualization import visualize_cell_map


class PipelineOrchestrator:
    """設定に基づいて ROI・マスクの変換を統括するオーケストレーター"""

    def __init__(self, config: ConfigManager, logger: logging.Logger, output_dir: str | Path | None = None):
        """初期化

        Args:
            config: ConfigManagerインスタンス
            logger: ロガー
            output_dir: 出力ディレクトリ（指定しない場合は output.directory）
        """
        self.config = config
        self.logger = logger
        self.output_path = Path(output_dir or config.get("output.directory", "output"))
        self.output_path.mkdir(parents=True, exist_ok=True)
        self.cell_map = CellMap.from_config(config.get("calibration.cells", []))
        self.logger.info(f"キャリブレーションセル数: {len(self.cell_map)}")

    @property
    def device_shape(self) -> tuple[int, int]:
        """デバイスのアドレス範囲 (height, width)"""
        return int(self.config.get("device.height")), int(self.config.get("device.width"))

    def normalize_configured_rois(self) -> RoiNormalizationResult:
        """設定ファイルの rois を正規化する"""
        shapes = [roi_from_dict(roi) for roi in self.config.get("rois", [])]
        normalized = normalize_rois(shapes, self.config.get("roi.ellipse_angle_step_deg", 5))
        for unsupported in normalized.unsupported:
            self.logger.warning(f"ROI[{unsupported.index}] ({unsupported.shape_type}) は変換対象外です")
        return normalized

    def run_roi_transform(self) -> tuple[RoiNormalizationResult, PolygonBatchResult]:
        """設定ファイルの ROI をデバイス座標へ変換する

        Returns:
            (正規化結果, 変換結果)
        """
        normalized = self.normalize_configured_rois()
        policy = BatchFailurePolicy(self.config.get("roi.batch_failure_policy", "skip_failed"))
        result = transform_polygons(self.cell_map, normalized.polygons, policy)

        for failure in result.failures:
            roi_index = normalized.source_indices[failure.index]
            self.logger.error(f"ROI[{roi_index}] の変換に失敗しました: {failure.error}")
        if result.aborted:
            self.logger.error("ROI変換を中断しました（abort_remaining）")

        self.logger.info(f"ROI変換完了: {len(result.polygons)}/{len(normalized.polygons)}ポリゴン")

        if self.config.get("output.save_transformed_rois", True):
            self._save_transformed_rois(normalized, result)

        if self.config.get("output.save_roi_mask", False):
            self.run_roi_rasterization(result)

        return normalized, result

    def _save_transformed_rois(self, normalized: RoiNormalizationResult, result: PolygonBatchResult) -> Path:
        output_file = self.output_path / "transformed_rois.json"
        data = {
            "rois": [
                {
                    "roi_index": normalized.source_indices[source_index],
                    "vertices": [list(vertex) for vertex in polygon],
                }
                for polygon, source_index in zip(result.polygons, result.source_indices, strict=True)
            ],
            "failed_roi_indices": sorted({normalized.source_indices[f.index] for f in result.failures}),
            "unsupported_roi_indices": [u.index for u in normalized.unsupported],
            "aborted": result.aborted,
        }
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        self.logger.info(f"変換済みROIを保存しました: {output_file}")
        return output_file

    def run_roi_rasterization(self, result: PolygonBatchResult) -> np.ndarray:
        """変換済みROIをデバイスサイズのマスクに塗りつぶして保存する

        ラスタ型デバイス（SLM等）にROIをそのまま送る場合に使う。

        Args:
            result: run_roi_transform の変換結果

        Returns:
            ROIマスク (height, width) uint8
        """
        height, width = self.device_shape
        roi_mask = rasterize_polygons(result.polygons, width, height, self.config.get("mask.on_value", 127))

        output_file = self.output_path / "roi_mask.png"
        cv2.imwrite(str(output_file), roi_mask)
        self.logger.info(f"ROIマスクを保存しました: {output_file} (ON画素 {int(np.count_nonzero(roi_mask))})")
        return roi_mask

    def run_mask_transform(self, mask_path: str | Path) -> np.ndarray:
        """マスク画像をデバイス座標へ変換する

        Args:
            mask_path: マスク画像のパス

        Returns:
            デバイス座標のマスク (height, width) uint8

        Raises:
            FileNotFoundError: マスク画像を読み込めない場合
        """
        image = cv2.imread(str(mask_path), cv2.IMREAD_GRAYSCALE)
        if image is None:
            raise FileNotFoundError(f"マスク画像を読み込めません: {mask_path}")

        device_mask = transform_mask_image(
            self.cell_map,
            image,
            self.device_shape,
            on_value=self.config.get("mask.on_value", 127),
        )
        self.logger.info(
            f"マスク変換完了: 入力ON画素 {int(np.count_nonzero(image))}, 出力ON画素 {int(np.count_nonzero(device_mask))}"
        )

        if self.config.get("output.save_device_mask", True):
            output_file = self.output_path / "device_mask.png"
            cv2.imwrite(str(output_file), device_mask)
            self.logger.info(f"デバイスマスクを保存しました: {output_file}")

        return device_mask

    def run_visualization(self, normalized: RoiNormalizationResult | None = None) -> Path:
        """セルマップと ROI を描画する"""
        output_file = self.output_path / "cell_map.png"
        visualize_cell_map(
            self.cell_map,
            rois=normalized.polygons if normalized else None,
            output_path=output_file,
        )
        return output_file
