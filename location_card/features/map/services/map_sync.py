"""地図ウィジェットの同期コントローラー"""

from typing import Any, Callable, Optional

from ..domain.models import MapDefaults, MapLifecycle, MapViewState
from ..ports.map_widget import MapMarker, MapWidget, MapWidgetFactory, ResizeObserver
from ...editor.domain.models import LocationAttributes
from ....shared.exceptions.errors import MapWidgetError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)


class MapSyncController:
    """
    地図ウィジェットのライフサイクルを管理するコントローラー

    ライフサイクル: UNINITIALIZED → READY → DISPOSED

    - スタイル変更: ウィジェットを破棄して作り直す
    - 座標のみの変更: 中心とマーカーを移動（作り直さない）
    - ズームのみの変更: set_zoom のみ（作り直さない）
    - 地図操作によるズーム変更: on_zoom_change で属性側に反映

    ウィジェットはこのコントローラーだけが操作する。
    """

    def __init__(
        self,
        factory: MapWidgetFactory,
        credential: Optional[str],
        defaults: Optional[MapDefaults] = None,
        resize_observer: Optional[ResizeObserver] = None,
        on_zoom_change: Optional[Callable[[float], None]] = None,
    ) -> None:
        """
        Args:
            factory: ウィジェットの生成元
            credential: 起動時に解決済みのAPIキー
            defaults: 地図のデフォルト値（未設定時の中心に使用）
            resize_observer: コンテナのリサイズ監視
            on_zoom_change: 地図操作でズームが変わったときの通知先
        """
        self.factory = factory
        self._credential = credential
        self.defaults = defaults or MapDefaults()
        self.resize_observer = resize_observer
        self.on_zoom_change = on_zoom_change

        self.lifecycle = MapLifecycle.UNINITIALIZED
        self.view_state: Optional[MapViewState] = None

        self._container: Any = None
        self._widget: Optional[MapWidget] = None
        self._observing = False
        self._marker: Optional[MapMarker] = None

    @property
    def widget(self) -> Optional[MapWidget]:
        return self._widget

    def mount(self, container: Any, attributes: LocationAttributes) -> bool:
        """
        ウィジェットを初回生成

        Args:
            container: 描画先のコンテナ
            attributes: ブロックの現在の属性

        Returns:
            bool: 生成した場合True（APIキー・コンテナがない場合はFalse）
        """
        if self.lifecycle is not MapLifecycle.UNINITIALIZED:
            logger.debug(f"Map mount ignored in state: {self.lifecycle.value}")
            return False

        if not self._credential:
            logger.error("Mapbox API key not found; map will not be initialized")
            return False

        if container is None:
            logger.warning("Map container is not available")
            return False

        self._container = container
        self._build(attributes)

        if self.resize_observer is not None and not self._observing:
            self.resize_observer.observe(container, self._handle_resize)
            self._observing = True

        self.lifecycle = MapLifecycle.READY
        logger.info(f"Map initialized with style: {attributes.map_style.value}")
        return True

    def _center_for(self, attributes: LocationAttributes) -> tuple[float, float]:
        return attributes.center if attributes.is_set else self.defaults.center

    def _build(self, attributes: LocationAttributes) -> None:
        """ウィジェット・ナビゲーション・マーカーを生成"""
        center = self._center_for(attributes)

        widget = self.factory.create(
            self._container,
            self._credential,
            attributes.map_style,
            center,
            attributes.zoom_level,
        )
        widget.add_navigation_control("top-left")
        widget.on_zoom(lambda zoom: self._handle_widget_zoom(widget, zoom))

        marker_position = None
        if attributes.is_set:
            self._marker = widget.add_marker(attributes.center)
            marker_position = attributes.center

        self._widget = widget
        self.view_state = MapViewState(
            style_id=attributes.map_style,
            center=center,
            zoom=attributes.zoom_level,
            marker_position=marker_position,
        )

    def _teardown(self) -> None:
        """マーカーとウィジェットを破棄（既に破棄済みでもエラーにしない）"""
        if self._marker is not None:
            try:
                self._marker.remove()
            except Exception as e:
                logger.warning(f"Failed to remove map marker: {e}")
            self._marker = None

        if self._widget is not None:
            try:
                self._widget.remove()
            except Exception as e:
                logger.warning(f"Failed to remove map widget: {e}")
            self._widget = None

        self.view_state = None

    def _rebuild(self, attributes: LocationAttributes) -> bool:
        """
        ウィジェットを作り直す

        生成に失敗した場合はログに残して UNINITIALIZED に戻し、コンテナは保持する
        （後続の sync / mount で再試行できる）
        """
        try:
            self._build(attributes)
        except MapWidgetError as e:
            logger.error(f"Failed to rebuild map: {e.message}")
            self._teardown()
            self.lifecycle = MapLifecycle.UNINITIALIZED
            return False

        self.lifecycle = MapLifecycle.READY
        return True

    def sync(self, attributes: LocationAttributes) -> None:
        """
        属性の変更をウィジェットに反映

        LocationEditorController.subscribe に登録して使用する
        """
        if self.lifecycle is MapLifecycle.UNINITIALIZED and self._container is not None:
            # 再構築に失敗した後は、次の属性変更で作り直す
            self._rebuild(attributes)
            return

        if self.lifecycle is not MapLifecycle.READY or self.view_state is None:
            return

        if attributes.map_style != self.view_state.style_id:
            logger.info(
                f"Map style changed: {self.view_state.style_id.value} -> "
                f"{attributes.map_style.value}; rebuilding map"
            )
            self._teardown()
            self._rebuild(attributes)
            return

        self._sync_position(attributes)

        if attributes.zoom_level != self.view_state.zoom:
            self._widget.set_zoom(attributes.zoom_level)
            self.view_state.zoom = attributes.zoom_level

    def _sync_position(self, attributes: LocationAttributes) -> None:
        """中心とマーカーを移動"""
        if attributes.is_set:
            position = attributes.center
            if position == self.view_state.marker_position:
                return

            self._widget.set_center(position)
            if self._marker is None:
                self._marker = self._widget.add_marker(position)
            else:
                self._marker.set_lnglat(position)

            self.view_state.center = position
            self.view_state.marker_position = position
            return

        # 位置がクリアされた
        if self.view_state.marker_position is None:
            return

        if self._marker is not None:
            self._marker.remove()
            self._marker = None
        self._widget.set_center(self.defaults.center)
        self.view_state.center = self.defaults.center
        self.view_state.marker_position = None

    def _handle_widget_zoom(self, widget: MapWidget, zoom: float) -> None:
        """地図操作によるズーム変更（破棄済みウィジェットからの通知は無視）"""
        if widget is not self._widget or self.view_state is None:
            return
        if zoom == self.view_state.zoom:
            return

        # 先に表示状態を更新し、属性側からの sync で set_zoom が再実行されないようにする
        self.view_state.zoom = zoom
        if self.on_zoom_change is not None:
            self.on_zoom_change(zoom)

    def _handle_resize(self) -> None:
        if self._widget is None:
            return
        self._widget.resize()

    def unmount(self) -> None:
        """ウィジェット・マーカー・リサイズ監視をすべて解放"""
        self._teardown()

        if self.resize_observer is not None:
            try:
                self.resize_observer.disconnect()
            except Exception as e:
                logger.warning(f"Failed to disconnect resize observer: {e}")

        self._container = None
        self._observing = False
        self.lifecycle = MapLifecycle.DISPOSED
        logger.info("Map disposed")
