"""オプションストア（YAMLファイル）"""

from pathlib import Path
from typing import Any

import yaml

from ...shared.exceptions.errors import StorageError
from ...shared.logging.config import get_logger
from ...shared.utils.text import sanitize_text_field

logger = get_logger(__name__)


class OptionsStore:
    """
    プラグインオプションのキー・バリューストア

    保存対象:
    - api_key: Mapbox APIキー
    - map_style: デフォルトの地図スタイル
    - default_lat / default_lng: デフォルトの地図中心
    - default_zoom: デフォルトのズームレベル
    - language: ジオコーディング結果の言語
    """

    API_KEY = "api_key"
    MAP_STYLE = "map_style"
    DEFAULT_LAT = "default_lat"
    DEFAULT_LNG = "default_lng"
    DEFAULT_ZOOM = "default_zoom"
    LANGUAGE = "language"

    def __init__(self, path: Path) -> None:
        """
        Args:
            path: YAMLファイルのパス（存在しない場合は空として扱う）
        """
        self.path = Path(path)
        logger.info(f"OptionsStore initialized: {self.path}")

    def _load(self) -> dict[str, Any]:
        """ファイルから全オプションを読み込み"""
        if not self.path.exists():
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load options: {e}")
            raise StorageError(f"Failed to load options from {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Options file must contain a mapping: {self.path}")

        return data

    def _save(self, data: dict[str, Any]) -> None:
        """全オプションをファイルに書き込み"""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, allow_unicode=True, sort_keys=True)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save options: {e}")
            raise StorageError(f"Failed to save options to {self.path}: {e}") from e

    def get_option(self, name: str, default: Any = None) -> Any:
        """
        オプションを取得

        Args:
            name: オプション名
            default: 未設定時のデフォルト値

        Returns:
            オプションの値
        """
        value = self._load().get(name)
        if value is None or value == "":
            return default
        return value

    def update_option(self, name: str, value: Any) -> None:
        """
        オプションを保存

        文字列はテキストフィールドとしてサニタイズしてから保存する
        """
        if isinstance(value, str):
            value = sanitize_text_field(value)

        data = self._load()
        data[name] = value
        self._save(data)

        # 値そのものはログに残さない（APIキーを含むため）
        logger.info(f"Option updated: {name}")

    def delete_option(self, name: str) -> None:
        """オプションを削除"""
        data = self._load()
        if name in data:
            del data[name]
            self._save(data)
            logger.info(f"Option deleted: {name}")

    def all_options(self) -> dict[str, Any]:
        """全オプションを取得"""
        return dict(self._load())
