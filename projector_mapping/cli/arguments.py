"""Command-line argument parsing."""

import argparse


def parse_arguments() -> argparse.Namespace:
    """コマンドライン引数をパースする

    Returns:
        パース済み引数
    """
    parser = argparse.ArgumentParser(description="プロジェクタ座標変換 - ROI・マスクを画像座標からデバイス座標へ変換")

    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="設定ファイルのパス（デフォルト: config.yaml）",
    )

    parser.add_argument("--debug", action="store_true", help="デバッグモードで実行（詳細ログ）")

    parser.add_argument("--mask", type=str, help="変換するマスク画像のパス（グレースケールで読み込み、0より大きい画素をONとする）")

    parser.add_argument("--output-dir", type=str, help="出力ディレクトリ（指定しない場合は設定ファイルの output.directory）")

    parser.add_argument("--visualize", action="store_true", help="キャリブレーションセルとROIを画像に描画する")

    return parser.parse_args()
