"""地図同期コントローラーのテスト"""

from dataclasses import replace
from typing import Any, Callable, Optional
from unittest.mock import Mock

import pytest

from location_card.features.editor.domain.models import LocationAttributes
from location_card.features.editor.services.location_editor import LocationEditorController
from location_card.features.map.domain.models import MapDefaults, MapLifecycle, MapStyle
from location_card.features.map.services.map_sync import MapSyncController
from location_card.infrastructure.config.credentials import EditorContext
from location_card.shared.exceptions.errors import MapWidgetError

PLACED = LocationAttributes(
    address="1 Main St",
    latitude=40.0,
    longitude=-75.0,
    is_set=True,
    zoom_level=14.0,
)


class FakeWidgetFactory:
    """生成したウィジェットを記録するファクトリー"""

    def __init__(self) -> None:
        self.created: list[Mock] = []
        self.zoom_callbacks: list[Callable[[float], None]] = []
        self.create_args: list[tuple] = []

    def create(
        self,
        container: Any,
        credential: str,
        style: MapStyle,
        center: tuple[float, float],
        zoom: float,
    ) -> Mock:
        widget = Mock()
        widget.on_zoom.side_effect = self.zoom_callbacks.append
        self.created.append(widget)
        self.create_args.append((container, credential, style, center, zoom))
        return widget

    @property
    def widget(self) -> Mock:
        return self.created[-1]


class FakeResizeObserver:
    def __init__(self) -> None:
        self.callback: Optional[Callable[[], None]] = None
        self.disconnected = False

    def observe(self, container: Any, callback: Callable[[], None]) -> None:
        self.callback = callback

    def disconnect(self) -> None:
        self.disconnected = True


@pytest.fixture
def factory() -> FakeWidgetFactory:
    return FakeWidgetFactory()


@pytest.fixture
def observer() -> FakeResizeObserver:
    return FakeResizeObserver()


@pytest.fixture
def controller(factory: FakeWidgetFactory, observer: FakeResizeObserver) -> MapSyncController:
    return MapSyncController(
        factory,
        "pk.test",
        MapDefaults(center=(139.76, 35.68)),
        resize_observer=observer,
    )


def test_mount_with_location(controller: MapSyncController, factory: FakeWidgetFactory) -> None:
    """設定済みの位置を中心にし、マーカーとナビゲーションを追加"""
    assert controller.mount("map-1", PLACED) is True

    assert controller.lifecycle is MapLifecycle.READY
    assert factory.create_args == [("map-1", "pk.test", MapStyle.STREETS, (-75.0, 40.0), 14.0)]
    factory.widget.add_marker.assert_called_once_with((-75.0, 40.0))
    factory.widget.add_navigation_control.assert_called_once_with("top-left")
    assert controller.view_state.marker_position == (-75.0, 40.0)


def test_mount_without_location(
    controller: MapSyncController, factory: FakeWidgetFactory
) -> None:
    """未設定ならデフォルトの中心を使い、マーカーは追加しない"""
    controller.mount("map-1", LocationAttributes())

    assert factory.create_args[0][3] == (139.76, 35.68)
    factory.widget.add_marker.assert_not_called()
    assert controller.view_state.marker_position is None


@pytest.mark.parametrize("credential,container", [(None, "map-1"), ("", "map-1"), ("pk.test", None)])
def test_mount_requires_credential_and_container(
    factory: FakeWidgetFactory, credential: Optional[str], container: Any
) -> None:
    controller = MapSyncController(factory, credential)

    assert controller.mount(container, PLACED) is False
    assert factory.created == []
    assert controller.lifecycle is MapLifecycle.UNINITIALIZED


def test_zoom_only_change_does_not_rebuild(
    controller: MapSyncController, factory: FakeWidgetFactory
) -> None:
    controller.mount("map-1", PLACED)

    controller.sync(replace(PLACED, zoom_level=9.0))

    assert len(factory.created) == 1
    factory.widget.set_zoom.assert_called_once_with(9.0)
    factory.widget.remove.assert_not_called()


def test_style_change_rebuilds_once(
    controller: MapSyncController, factory: FakeWidgetFactory
) -> None:
    controller.mount("map-1", PLACED)
    first = factory.widget

    controller.sync(replace(PLACED, map_style=MapStyle.SATELLITE))

    assert len(factory.created) == 2
    first.remove.assert_called_once()
    assert factory.create_args[1][2] is MapStyle.SATELLITE
    factory.widget.add_marker.assert_called_once_with((-75.0, 40.0))
    assert controller.widget is factory.widget


def test_coordinate_change_moves_marker(
    controller: MapSyncController, factory: FakeWidgetFactory
) -> None:
    controller.mount("map-1", PLACED)
    marker = factory.widget.add_marker.return_value

    controller.sync(replace(PLACED, latitude=41.0, longitude=-74.0))

    assert len(factory.created) == 1
    factory.widget.set_center.assert_called_once_with((-74.0, 41.0))
    marker.set_lnglat.assert_called_once_with((-74.0, 41.0))


def test_first_selection_adds_marker(
    controller: MapSyncController, factory: FakeWidgetFactory
) -> None:
    controller.mount("map-1", LocationAttributes())

    controller.sync(PLACED)

    factory.widget.add_marker.assert_called_once_with((-75.0, 40.0))
    factory.widget.set_center.assert_called_once_with((-75.0, 40.0))


def test_clear_removes_marker(controller: MapSyncController, factory: FakeWidgetFactory) -> None:
    controller.mount("map-1", PLACED)
    marker = factory.widget.add_marker.return_value

    controller.sync(PLACED.cleared())

    marker.remove.assert_called_once()
    factory.widget.set_center.assert_called_once_with((139.76, 35.68))
    assert controller.view_state.marker_position is None


def test_widget_zoom_notifies_once(factory: FakeWidgetFactory) -> None:
    """地図操作のズームは属性側に1回だけ通知し、set_zoom は呼ばない"""
    changes: list[float] = []
    controller = MapSyncController(factory, "pk.test", on_zoom_change=changes.append)
    controller.mount("map-1", PLACED)

    factory.zoom_callbacks[-1](11.0)
    # 属性側から同じズームが戻ってきても再設定しない
    controller.sync(replace(PLACED, zoom_level=11.0))

    assert changes == [11.0]
    factory.widget.set_zoom.assert_not_called()


def test_stale_widget_zoom_is_ignored(factory: FakeWidgetFactory) -> None:
    changes: list[float] = []
    controller = MapSyncController(factory, "pk.test", on_zoom_change=changes.append)
    controller.mount("map-1", PLACED)
    stale_callback = factory.zoom_callbacks[0]

    controller.sync(replace(PLACED, map_style=MapStyle.DARK))
    stale_callback(5.0)

    assert changes == []


def test_resize_forwards_to_widget(
    controller: MapSyncController, factory: FakeWidgetFactory, observer: FakeResizeObserver
) -> None:
    controller.mount("map-1", PLACED)

    observer.callback()

    factory.widget.resize.assert_called_once()


def test_unmount_releases_everything(
    controller: MapSyncController, factory: FakeWidgetFactory, observer: FakeResizeObserver
) -> None:
    controller.mount("map-1", PLACED)
    widget = factory.widget
    marker = widget.add_marker.return_value

    controller.unmount()
    observer.callback()
    controller.sync(replace(PLACED, zoom_level=3.0))

    marker.remove.assert_called_once()
    widget.remove.assert_called_once()
    widget.resize.assert_not_called()
    widget.set_zoom.assert_not_called()
    assert observer.disconnected is True
    assert controller.lifecycle is MapLifecycle.DISPOSED
    assert controller.widget is None


def test_unmount_tolerates_sdk_errors(
    controller: MapSyncController, factory: FakeWidgetFactory
) -> None:
    """SDK側で既に破棄済みでも例外にしない"""
    controller.mount("map-1", PLACED)
    factory.widget.remove.side_effect = RuntimeError("already removed")

    controller.unmount()

    assert controller.lifecycle is MapLifecycle.DISPOSED


def test_editor_controller_drives_map(factory: FakeWidgetFactory) -> None:
    """エディターの属性変更を購読して地図に反映する"""
    editor = LocationEditorController(Mock(), EditorContext(credential="pk.test"), PLACED)
    controller = MapSyncController(factory, "pk.test", on_zoom_change=editor.set_zoom_from_map)
    editor.subscribe(controller.sync)
    controller.mount("map-1", editor.attributes)

    editor.update_map_settings(zoom_level=6)
    factory.zoom_callbacks[-1](8.0)

    assert editor.attributes.zoom_level == 8.0
    assert len(factory.created) == 1
    factory.widget.set_zoom.assert_called_once_with(6.0)


def test_failed_rebuild_recovers_on_next_change(
    controller: MapSyncController, factory: FakeWidgetFactory, observer: FakeResizeObserver
) -> None:
    """スタイル変更の再構築に失敗しても例外にせず、次の属性変更で作り直す"""
    controller.mount("map-1", PLACED)
    original_create = factory.create
    calls = {"count": 0}

    def failing_once(*args: Any) -> Mock:
        calls["count"] += 1
        if calls["count"] == 1:
            raise MapWidgetError("style failed to load")
        return original_create(*args)

    factory.create = failing_once

    controller.sync(replace(PLACED, map_style=MapStyle.DARK))

    assert controller.lifecycle is MapLifecycle.UNINITIALIZED
    assert controller.widget is None

    controller.sync(replace(PLACED, map_style=MapStyle.LIGHT))

    assert controller.lifecycle is MapLifecycle.READY
    assert len(factory.created) == 2
    assert factory.create_args[1][0] == "map-1"
    assert factory.create_args[1][2] is MapStyle.LIGHT
    assert controller.view_state.style_id is MapStyle.LIGHT
    # 再構築後もリサイズは新しいウィジェットに届く
    observer.callback()
    factory.widget.resize.assert_called_once()


def test_failed_rebuild_does_not_block_other_listeners(factory: FakeWidgetFactory) -> None:
    """地図の再構築失敗でエディターの他の購読者への通知は止まらない"""
    editor = LocationEditorController(Mock(), EditorContext(credential="pk.test"), PLACED)
    controller = MapSyncController(factory, "pk.test")
    received: list[LocationAttributes] = []
    editor.subscribe(controller.sync)
    editor.subscribe(received.append)
    controller.mount("map-1", editor.attributes)

    def broken_create(*args: Any) -> Mock:
        raise MapWidgetError("style failed to load")

    factory.create = broken_create

    editor.update_map_settings(map_style="dark-v11")

    assert len(received) == 1
    assert controller.lifecycle is MapLifecycle.UNINITIALIZED


def test_mount_after_failed_rebuild(
    controller: MapSyncController, factory: FakeWidgetFactory
) -> None:
    """再構築に失敗した後は mount でも作り直せる"""
    controller.mount("map-1", PLACED)
    original_create = factory.create

    def broken_create(*args: Any) -> Mock:
        raise MapWidgetError("style failed to load")

    factory.create = broken_create
    controller.sync(replace(PLACED, map_style=MapStyle.DARK))
    factory.create = original_create

    assert controller.mount("map-1", replace(PLACED, map_style=MapStyle.DARK)) is True
    assert controller.lifecycle is MapLifecycle.READY
