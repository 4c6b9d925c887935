"""位置情報属性のテスト"""

import pytest

from location_card.features.editor.domain.models import LocationAttributes, SchemaType
from location_card.features.map.domain.models import MapStyle


def test_defaults_are_unset() -> None:
    attributes = LocationAttributes()

    assert attributes.is_set is False
    assert attributes.center == (0.0, 0.0)
    assert attributes.map_style is MapStyle.STREETS
    assert attributes.zoom_level == 14.0


def test_zero_coordinates_can_be_set() -> None:
    """(0, 0) でも is_set なら設定済みとして扱う"""
    attributes = LocationAttributes(address="Null Island", is_set=True)

    assert attributes.is_set is True
    assert attributes.to_block_dict()["isSet"] is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"latitude": 91.0, "is_set": True},
        {"longitude": -181.0, "is_set": True},
        {"zoom_level": 0.5},
        {"zoom_level": 21.0},
    ],
)
def test_invalid_values(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        LocationAttributes(**kwargs)


def test_directions_url() -> None:
    attributes = LocationAttributes(address="1 Main St, Springfield", is_set=True)

    assert attributes.directions_url == (
        "https://www.google.com/maps/dir/?api=1&destination=1%20Main%20St%2C%20Springfield"
    )


def test_cleared_keeps_map_settings() -> None:
    """クリアしても地図スタイル・ズームは維持する"""
    attributes = LocationAttributes(
        address="1 Main St",
        latitude=40.0,
        longitude=-75.0,
        is_set=True,
        map_style=MapStyle.DARK,
        zoom_level=8.0,
        address_abbreviation="1 Main St",
    )

    cleared = attributes.cleared()

    assert cleared.is_set is False
    assert cleared.address == ""
    assert cleared.center == (0.0, 0.0)
    assert cleared.address_abbreviation == ""
    assert cleared.map_style is MapStyle.DARK
    assert cleared.zoom_level == 8.0


def test_block_dict_optional_fields() -> None:
    """任意の schema 項目は値がある場合のみ出力"""
    data = LocationAttributes(schema_name="Cafe", schema_telephone="").to_block_dict()

    assert data["schemaName"] == "Cafe"
    assert "schemaTelephone" not in data
    assert data["mapStyle"] == "streets-v12"
    assert data["schemaType"] == "Place"


def test_from_block_dict_legacy_content() -> None:
    """isSet を持たない保存済みコンテンツは座標から判定"""
    legacy = LocationAttributes.from_block_dict(
        {"address": "1 Main St", "latitude": 40.0, "longitude": -75.0}
    )
    empty = LocationAttributes.from_block_dict({"latitude": 0, "longitude": 0})

    assert legacy.is_set is True
    assert empty.is_set is False


def test_from_block_dict_tolerates_bad_values() -> None:
    """不正なスタイル・範囲外のズームはデフォルト・範囲内に補正"""
    attributes = LocationAttributes.from_block_dict(
        {"mapStyle": "neon-v1", "zoomLevel": 42, "schemaType": "Castle"}
    )

    assert attributes.map_style is MapStyle.STREETS
    assert attributes.zoom_level == 20.0
    assert attributes.schema_type is SchemaType.PLACE


def test_block_dict_round_trip() -> None:
    attributes = LocationAttributes(
        address="1 Main St",
        latitude=40.0,
        longitude=-75.0,
        is_set=True,
        map_style=MapStyle.SATELLITE,
        zoom_level=16.0,
        address_abbreviation="1 Main St",
        schema_type=SchemaType.RESTAURANT,
        schema_name="Diner",
        schema_opening_hours="Mo-Fr",
    )

    assert LocationAttributes.from_block_dict(attributes.to_block_dict()) == attributes


@pytest.mark.parametrize(
    "style,label",
    [
        (MapStyle.STREETS, "Streets"),
        (MapStyle.SATELLITE_STREETS, "Satellite Streets"),
    ],
)
def test_map_style_label(style: MapStyle, label: str) -> None:
    assert style.label == label
    assert style.style_url == f"mapbox://styles/mapbox/{style.value}"
