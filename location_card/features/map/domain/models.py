"""地図機能のドメインモデル"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# 座標が未設定の場合の地図中心（経度, 緯度）
FALLBACK_CENTER: tuple[float, float] = (0.0, 0.0)

MIN_ZOOM = 1.0
MAX_ZOOM = 20.0


class MapStyle(str, Enum):
    """地図スタイル（Mapboxのスタイル ID）"""

    STREETS = "streets-v12"
    OUTDOORS = "outdoors-v12"
    LIGHT = "light-v11"
    DARK = "dark-v11"
    SATELLITE = "satellite-v9"
    SATELLITE_STREETS = "satellite-streets-v12"

    @property
    def label(self) -> str:
        """設定パネル用の表示名"""
        return MAP_STYLE_LABELS[self]

    @property
    def style_url(self) -> str:
        """SDKに渡すスタイルURL"""
        return f"mapbox://styles/mapbox/{self.value}"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "MapStyle":
        """スタイルIDから取得（空の場合はデフォルト）"""
        if not value:
            return cls.STREETS
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid map style: {value}")


MAP_STYLE_LABELS = {
    MapStyle.STREETS: "Streets",
    MapStyle.OUTDOORS: "Outdoors",
    MapStyle.LIGHT: "Light",
    MapStyle.DARK: "Dark",
    MapStyle.SATELLITE: "Satellite",
    MapStyle.SATELLITE_STREETS: "Satellite Streets",
}


class MapLifecycle(str, Enum):
    """地図ウィジェットのライフサイクル"""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class MapDefaults:
    """設定から読み込む地図のデフォルト値"""

    map_style: MapStyle = MapStyle.STREETS
    center: tuple[float, float] = FALLBACK_CENTER  # (経度, 緯度)
    zoom: float = 12.0
    language: str = "en"


@dataclass
class MapViewState:
    """
    地図ウィジェットの表示状態

    MapSyncControllerだけが所有・更新する
    """

    style_id: MapStyle
    center: tuple[float, float]  # (経度, 緯度)
    zoom: float
    marker_position: Optional[tuple[float, float]] = None  # (経度, 緯度)
