"""共通フィクスチャ"""

from typing import Any, Optional
from unittest.mock import Mock

import pytest

from location_card.features.geocoding.providers.mapbox_geocoder import MapboxGeocoder
from location_card.shared.http.client import HTTPClient


def make_feature(
    place_id: str,
    place_name: str,
    place_type: Optional[str],
    center: Any = (139.7671, 35.6812),
) -> dict[str, Any]:
    """プロバイダーの地物（GeoJSON Feature）を生成"""
    feature: dict[str, Any] = {"id": place_id, "place_name": place_name, "center": center}
    if place_type is not None:
        feature["place_type"] = [place_type]
    return feature


@pytest.fixture
def http_client() -> Mock:
    """外部通信を行わないHTTPクライアント"""
    client = Mock(spec=HTTPClient)
    client.get_json.return_value = {"type": "FeatureCollection", "features": []}
    return client


@pytest.fixture
def geocoder(http_client: Mock) -> MapboxGeocoder:
    return MapboxGeocoder(http_client=http_client)
