"""アプリケーション設定（Pydantic Settings）"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_prefix="LOCATION_CARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="location-card",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # Credential
    mapbox_api_key: Optional[str] = Field(
        default=None,
        description="Mapbox APIキー（オプションストアより優先される上書き値）",
    )

    # Options store
    options_file: Path = Field(
        default=Path("options.yaml"),
        description="オプションストア（YAML）のパス",
    )

    # Geocoding
    geocoding_base_url: str = Field(
        default="https://api.mapbox.com",
        description="ジオコーディングAPIのベースURL",
    )
    geocoding_dataset: str = Field(
        default="mapbox.places",
        description="ジオコーディングのデータセット",
    )
    geocoding_language: str = Field(
        default="en",
        description="ジオコーディング結果の言語",
    )
    geocoding_timeout: float = Field(
        default=10.0,
        description="ジオコーディングのタイムアウト（秒）",
    )
    geocoding_max_retries: int = Field(
        default=0,
        description="ジオコーディングのリトライ回数（0: 再試行しない）",
    )
    search_debounce_seconds: float = Field(
        default=0.3,
        description="エディター検索のデバウンス時間（秒）",
    )
    user_agent: str = Field(
        default="location-card/1.0",
        description="外部APIリクエストのUser-Agent",
    )

    # Rendering
    site_url: str = Field(
        default="http://localhost",
        description="サイトのURL（schema.org の @id に使用）",
    )

    # Auth
    editor_tokens: str = Field(
        default="",
        description="編集権限を持つセッションのBearerトークン（カンマ区切り）",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Server
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )

    def get_editor_tokens(self) -> list[str]:
        """編集権限トークンのリストを取得"""
        return [token.strip() for token in self.editor_tokens.split(",") if token.strip()]

    @property
    def is_production(self) -> bool:
        """本番環境かどうか"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """開発環境かどうか"""
        return self.environment.lower() == "development"
