"""設定・キャリブレーションファイルの読み込み専用モジュール。"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

SUPPORTED_SUFFIXES = {".yaml", ".yml", ".json"}


def load_config_file(path: str | Path) -> dict[str, Any]:
    """YAML/JSONファイルを辞書として読み込む。

    空のYAMLは空辞書として扱う。

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: 形式が未対応、解析できない、または辞書でない場合
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"設定ファイルが見つかりません: {config_path}")

    suffix = config_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"サポートされない設定形式です: {suffix}")

    with config_path.open(encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) if suffix in {".yaml", ".yml"} else json.load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"YAML解析エラー: {e}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"JSON解析エラー: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"設定は辞書形式である必要があります: {config_path}")
    return data
