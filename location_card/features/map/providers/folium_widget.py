"""folium による地図ウィジェット

Mapbox のラスタータイルを folium (Leaflet) で描画する。
サーバー側で位置カードのプレビューHTMLを生成するために使用する。
"""
import html
from typing import Any, Callable, Optional

import folium

from ..domain.models import MapStyle
from ....shared.exceptions.errors import MapWidgetError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

TILES_URL = (
    "https://api.mapbox.com/styles/v1/mapbox/{style}/tiles/256/{{z}}/{{x}}/{{y}}@2x"
    "?access_token={credential}"
)
TILES_ATTRIBUTION = (
    '&copy; <a href="https://www.mapbox.com/about/maps/">Mapbox</a> '
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a>'
)
DEFAULT_HEIGHT_PX = 400


class FoliumMarker:
    """folium で描画するマーカー"""

    def __init__(self, widget: "FoliumMapWidget", lnglat: tuple[float, float]):
        self._widget = widget
        self.lnglat = lnglat
        self.removed = False

    def set_lnglat(self, lnglat: tuple[float, float]) -> None:
        if self.removed:
            raise MapWidgetError("Marker has been removed")
        self.lnglat = lnglat

    def remove(self) -> None:
        if self.removed:
            return
        self.removed = True
        self._widget._markers.remove(self)


class FoliumMapWidget:
    """
    folium で描画する地図ウィジェット

    状態だけを保持し、render_html() の呼び出し時に folium.Map を組み立てる
    """

    def __init__(
        self,
        credential: str,
        style: MapStyle,
        center: tuple[float, float],
        zoom: float,
        height_px: int = DEFAULT_HEIGHT_PX,
    ):
        self._credential = credential
        self.style = style
        self.center = center
        self.zoom = zoom
        self.height_px = height_px

        self.navigation_position: Optional[str] = None
        self.removed = False
        self._markers: list[FoliumMarker] = []
        self._zoom_callbacks: list[Callable[[float], None]] = []

    def _ensure_alive(self) -> None:
        if self.removed:
            raise MapWidgetError("Map widget has been removed")

    @property
    def markers(self) -> list[FoliumMarker]:
        return list(self._markers)

    def set_center(self, center: tuple[float, float]) -> None:
        self._ensure_alive()
        self.center = center

    def set_zoom(self, zoom: float) -> None:
        self._ensure_alive()
        self.zoom = zoom

    def get_zoom(self) -> float:
        return self.zoom

    def add_marker(self, lnglat: tuple[float, float]) -> FoliumMarker:
        self._ensure_alive()
        marker = FoliumMarker(self, lnglat)
        self._markers.append(marker)
        return marker

    def add_navigation_control(self, position: str = "top-left") -> None:
        self._ensure_alive()
        self.navigation_position = position

    def on_zoom(self, callback: Callable[[float], None]) -> None:
        self._ensure_alive()
        self._zoom_callbacks.append(callback)

    def emit_zoom(self, zoom: float) -> None:
        """ユーザー操作によるズーム変更を通知"""
        self._ensure_alive()
        self.zoom = zoom
        for callback in list(self._zoom_callbacks):
            callback(zoom)

    def resize(self) -> None:
        # サーバー側の描画ではレイアウトは render_html() 時に決まる
        self._ensure_alive()

    def remove(self) -> None:
        self.removed = True
        self._markers = []
        self._zoom_callbacks = []

    def build_map(self) -> folium.Map:
        """現在の状態から folium.Map を生成"""
        self._ensure_alive()

        longitude, latitude = self.center
        m = folium.Map(
            location=[latitude, longitude],
            zoom_start=self.zoom,
            tiles=TILES_URL.format(style=self.style.value, credential=self._credential),
            attr=TILES_ATTRIBUTION,
            zoom_control=self.navigation_position is not None,
            control_scale=True,
        )

        for marker in self._markers:
            marker_longitude, marker_latitude = marker.lnglat
            folium.Marker(location=[marker_latitude, marker_longitude]).add_to(m)

        return m

    def render_html(self) -> str:
        """
        iframe に埋め込んだ地図HTMLを生成

        Raises:
            MapWidgetError: 描画に失敗した場合
        """
        try:
            document_html = self.build_map().get_root().render()
        except MapWidgetError:
            raise
        except Exception as e:
            logger.error(f"Map rendering failed: {type(e).__name__}")
            raise MapWidgetError(f"Map rendering failed: {type(e).__name__}") from e

        escaped = html.escape(document_html, quote=True)
        return (
            f'<iframe srcdoc="{escaped}" '
            f'style="width:100%;height:{self.height_px}px;border:0;" '
            f'loading="lazy"></iframe>'
        )


class FoliumMapWidgetFactory:
    """FoliumMapWidget の生成"""

    def __init__(self, height_px: int = DEFAULT_HEIGHT_PX):
        self.height_px = height_px

    def create(
        self,
        container: Any,
        credential: str,
        style: MapStyle,
        center: tuple[float, float],
        zoom: float,
    ) -> FoliumMapWidget:
        if not credential:
            raise MapWidgetError("Mapbox API key is required to create a map")

        logger.debug(f"Creating folium map widget (style={style.value}, container={container})")
        return FoliumMapWidget(
            credential=credential,
            style=style,
            center=center,
            zoom=zoom,
            height_px=self.height_px,
        )
