"""地図ウィジェットのポート

地図SDKは不透明な描画エンジンとして扱い、このプロトコル経由でのみ操作する。
座標はすべて (経度, 緯度) の順。
"""
from typing import Any, Callable, Protocol

from ..domain.models import MapStyle


class MapMarker(Protocol):
    """地図上のマーカー"""

    def set_lnglat(self, lnglat: tuple[float, float]) -> None:
        ...

    def remove(self) -> None:
        ...


class MapWidget(Protocol):
    """地図ウィジェット"""

    def set_center(self, center: tuple[float, float]) -> None:
        ...

    def set_zoom(self, zoom: float) -> None:
        ...

    def add_marker(self, lnglat: tuple[float, float]) -> MapMarker:
        ...

    def add_navigation_control(self, position: str = "top-left") -> None:
        ...

    def on_zoom(self, callback: Callable[[float], None]) -> None:
        """ユーザー操作でズームが変わったときのコールバックを登録"""
        ...

    def resize(self) -> None:
        """コンテナサイズに合わせてレイアウトを再計算"""
        ...

    def remove(self) -> None:
        ...


class MapWidgetFactory(Protocol):
    """地図ウィジェットの生成"""

    def create(
        self,
        container: Any,
        credential: str,
        style: MapStyle,
        center: tuple[float, float],
        zoom: float,
    ) -> MapWidget:
        ...


class ResizeObserver(Protocol):
    """コンテナのリサイズ監視"""

    def observe(self, container: Any, callback: Callable[[], None]) -> None:
        ...

    def disconnect(self) -> None:
        ...


class RenderableMapWidget(MapWidget, Protocol):
    """HTMLとして書き出せる地図ウィジェット（サーバー側プレビュー用）"""

    def render_html(self) -> str:
        ...


class RenderableMapWidgetFactory(Protocol):
    """HTMLとして書き出せる地図ウィジェットの生成"""

    def create(
        self,
        container: Any,
        credential: str,
        style: MapStyle,
        center: tuple[float, float],
        zoom: float,
    ) -> RenderableMapWidget:
        ...
