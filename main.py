#!/usr/bin/env python
"""
プロジェクタ座標変換 - メインエントリーポイント

キャリブレーションセル（多角形 + アフィン変換）を使って、
カメラ画像上の ROI とマスクを光ターゲティングデバイスの座標に変換します。
"""

import logging
import sys

from projector_mapping.cli import parse_arguments
from projector_mapping.config import ConfigManager
from projector_mapping.pipeline import PipelineOrchestrator
from projector_mapping.utils import setup_logging


def main():
    """メイン処理"""
    args = parse_arguments()

    # 初期ロギング設定（設定ファイル読み込み前）
    setup_logging(args.debug, args.output_dir or "output")
    logger = logging.getLogger(__name__)

    logger.info("=" * 80)
    logger.info("プロジェクタ座標変換 起動")
    logger.info("=" * 80)

    try:
        logger.info(f"設定ファイルを読み込んでいます: {args.config}")
        config = ConfigManager(args.config)
        config.validate()

        if args.debug:
            config.set("output.debug_mode", True)
            logger.info("デバッグモードが有効になりました")

        # ロギングを再設定（出力ディレクトリを反映）
        output_dir = args.output_dir or config.get("output.directory", "output")
        setup_logging(args.debug, output_dir)
        logger = logging.getLogger(__name__)

        orchestrator = PipelineOrchestrator(config, logger, output_dir)

        normalized, _ = orchestrator.run_roi_transform()

        if args.mask:
            orchestrator.run_mask_transform(args.mask)

        if args.visualize:
            orchestrator.run_visualization(normalized)

        logger.info("=" * 80)
        logger.info("処理が正常に完了しました")
        logger.info(f"出力ディレクトリ: {orchestrator.output_path.absolute()}")
        logger.info("=" * 80)
        return 0

    except FileNotFoundError as e:
        logger.error(f"ファイルが見つかりません: {e}")
        return 1
    except ValueError as e:
        logger.error(f"設定エラー: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("処理が中断されました")
        return 130
    except Exception as e:
        logger.error(f"予期しないエラーが発生しました: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
