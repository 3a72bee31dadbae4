"""Logging utilities for the projector mapping tool."""

import logging
from pathlib import Path
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME = "projector_mapping.log"


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(debug_mode: bool = False, output_dir: str = "output", log_filename: str = LOG_FILENAME) -> Path:
    """ロギングを設定する

    ルートロガーの既存ハンドラを外し、コンソールと出力ディレクトリ内の
    ログファイルに書き出すハンドラを設定する。
    変換処理の1点ごとのログはDEBUGレベルなので、通常はINFO以上のみ出力される。

    Args:
        debug_mode: デバッグモードの場合True
        output_dir: ログファイルの出力ディレクトリ
        log_filename: ログファイル名

    Returns:
        ログファイルのパス
    """
    log_level = logging.DEBUG if debug_mode else logging.INFO

    log_dir = Path(output_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_path = log_dir / log_filename

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(log_level)
    root_logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), log_level))
    root_logger.addHandler(_make_handler(logging.FileHandler(log_path, encoding="utf-8"), log_level))

    return log_path
