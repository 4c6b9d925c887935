"""APIキーと地図デフォルト値の解決"""
from dataclasses import dataclass, field
from typing import Callable, Optional

from ...features.map.domain.models import FALLBACK_CENTER, MapDefaults, MapStyle
from ...shared.exceptions.errors import StorageError
from ...shared.logging.config import get_logger
from ..storage.options_store import OptionsStore
from .settings import Settings

logger = get_logger(__name__)

CredentialSource = tuple[str, Callable[[Settings, OptionsStore], Optional[str]]]

# 優先順位順の取得元（先に見つかった値を採用）
CREDENTIAL_SOURCES: tuple[CredentialSource, ...] = (
    ("settings", lambda settings, store: settings.mapbox_api_key),
    ("options_store", lambda settings, store: store.get_option(OptionsStore.API_KEY)),
)


def resolve_credential(settings: Settings, store: OptionsStore) -> Optional[str]:
    """
    Mapbox APIキーを解決

    起動時に一度だけ呼び出し、結果を各コンポーネントに注入する

    Args:
        settings: アプリケーション設定
        store: オプションストア

    Returns:
        Optional[str]: APIキー（どの取得元にもない場合はNone）
    """
    for source_name, source in CREDENTIAL_SOURCES:
        try:
            value = source(settings, store)
        except StorageError as e:
            logger.warning(f"Credential source '{source_name}' unavailable: {e}")
            continue

        if value and str(value).strip():
            logger.info(f"Mapbox API key resolved from source: {source_name}")
            return str(value).strip()

    logger.warning("Mapbox API key is not configured")
    return None


def load_map_defaults(store: OptionsStore) -> MapDefaults:
    """
    オプションストアから地図のデフォルト値を読み込み

    不正な値はログに警告を出してデフォルトにフォールバックする
    """
    try:
        options = store.all_options()
    except StorageError as e:
        logger.warning(f"Failed to load map defaults, using fallbacks: {e}")
        return MapDefaults()

    try:
        map_style = MapStyle.from_value(options.get(OptionsStore.MAP_STYLE))
    except ValueError as e:
        logger.warning(f"{e}; falling back to {MapStyle.STREETS.value}")
        map_style = MapStyle.STREETS

    try:
        center = (
            float(options.get(OptionsStore.DEFAULT_LNG) or FALLBACK_CENTER[0]),
            float(options.get(OptionsStore.DEFAULT_LAT) or FALLBACK_CENTER[1]),
        )
    except (TypeError, ValueError):
        logger.warning("Invalid default center in options; using fallback center")
        center = FALLBACK_CENTER

    try:
        zoom = float(options.get(OptionsStore.DEFAULT_ZOOM) or 12)
    except (TypeError, ValueError):
        logger.warning("Invalid default zoom in options; using 12")
        zoom = 12.0

    return MapDefaults(
        map_style=map_style,
        center=center,
        zoom=zoom,
        language=str(options.get(OptionsStore.LANGUAGE) or "en"),
    )


@dataclass(frozen=True)
class EditorContext:
    """
    エディターに一度だけ注入される読み取り専用の設定

    APIキーは認証済みエディターセッションにのみ公開する
    """

    credential: Optional[str] = None
    defaults: MapDefaults = field(default_factory=MapDefaults)

    @classmethod
    def load(cls, settings: Settings, store: OptionsStore) -> "EditorContext":
        """設定とオプションストアから生成"""
        return cls(
            credential=resolve_credential(settings, store),
            defaults=load_map_defaults(store),
        )

    def to_client_dict(self) -> dict:
        """エディターに渡す辞書に変換"""
        return {
            "apiKey": self.credential or "",
            "mapStyle": self.defaults.map_style.value,
            "defaultLat": self.defaults.center[1],
            "defaultLng": self.defaults.center[0],
            "defaultZoom": self.defaults.zoom,
            "language": self.defaults.language,
        }
