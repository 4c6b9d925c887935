"""ジオコーディングプロキシサービスのテスト"""

from unittest.mock import Mock

import pytest

from location_card.features.geocoding.domain.models import GeocodeSuggestion, PlaceType
from location_card.features.geocoding.providers.mapbox_geocoder import MapboxGeocoder
from location_card.features.geocoding.services.geocode_proxy import GeocodeProxyService
from location_card.shared.exceptions.errors import (
    ConfigurationError,
    ForbiddenError,
    NotFoundError,
    ProviderError,
    UpstreamError,
    ValidationError,
)


@pytest.fixture
def mock_geocoder() -> Mock:
    geocoder = Mock(spec=MapboxGeocoder)
    geocoder.lookup.return_value = GeocodeSuggestion(
        place_id="address.1",
        place_name="1600 Pennsylvania Avenue NW, Washington, District of Columbia 20500, United States",
        center=(-77.0365, 38.8977),
        place_type=PlaceType.ADDRESS,
    )
    return geocoder


def test_geocode_success(mock_geocoder: Mock) -> None:
    """最初の地物の住所・緯度・経度を返す"""
    service = GeocodeProxyService(mock_geocoder, "pk.test")

    location = service.geocode("1600 Pennsylvania Ave", can_edit=True)

    assert location.to_dict() == {
        "address": "1600 Pennsylvania Avenue NW, Washington, District of Columbia 20500, United States",
        "latitude": 38.8977,
        "longitude": -77.0365,
    }
    mock_geocoder.lookup.assert_called_once_with("1600 Pennsylvania Ave", "pk.test")


def test_geocode_sanitizes_address(mock_geocoder: Mock) -> None:
    """タグを除去し空白をまとめてから問い合わせる"""
    service = GeocodeProxyService(mock_geocoder, "pk.test")

    service.geocode("  <b>10 Downing</b>\n  Street ", can_edit=True)

    mock_geocoder.lookup.assert_called_once_with("10 Downing Street", "pk.test")


def test_geocode_forbidden(mock_geocoder: Mock) -> None:
    """編集権限がなければ 403（通信しない）"""
    service = GeocodeProxyService(mock_geocoder, "pk.test")

    with pytest.raises(ForbiddenError) as exc_info:
        service.geocode("1 Main St", can_edit=False)

    assert exc_info.value.status_code == 403
    assert exc_info.value.code == "rest_forbidden"
    mock_geocoder.lookup.assert_not_called()


@pytest.mark.parametrize("address", [None, "", "   ", "<br>"])
def test_geocode_missing_address(mock_geocoder: Mock, address: str) -> None:
    """空の住所は 400（通信しない）"""
    service = GeocodeProxyService(mock_geocoder, "pk.test")

    with pytest.raises(ValidationError) as exc_info:
        service.geocode(address, can_edit=True)

    assert exc_info.value.status_code == 400
    mock_geocoder.lookup.assert_not_called()


@pytest.mark.parametrize("credential", [None, ""])
def test_geocode_missing_api_key(mock_geocoder: Mock, credential: str) -> None:
    """APIキーが未設定なら 400 missing_api_key（通信しない）"""
    service = GeocodeProxyService(mock_geocoder, credential)

    with pytest.raises(ConfigurationError) as exc_info:
        service.geocode("1 Main St", can_edit=True)

    assert exc_info.value.status_code == 400
    assert exc_info.value.code == "missing_api_key"
    assert mock_geocoder.lookup.call_count == 0


def test_geocode_no_results(mock_geocoder: Mock) -> None:
    """0件なら 404 no_results"""
    mock_geocoder.lookup.return_value = None
    service = GeocodeProxyService(mock_geocoder, "pk.test")

    with pytest.raises(NotFoundError) as exc_info:
        service.geocode("nowhere at all", can_edit=True)

    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "no_results"


def test_geocode_upstream_failure(mock_geocoder: Mock) -> None:
    """プロバイダーの失敗は 500 geocoding_failed（再試行しない）"""
    mock_geocoder.lookup.side_effect = ProviderError("Geocoding request failed: timeout")
    service = GeocodeProxyService(mock_geocoder, "pk.test")

    with pytest.raises(UpstreamError) as exc_info:
        service.geocode("1 Main St", can_edit=True)

    assert exc_info.value.status_code == 500
    assert exc_info.value.code == "geocoding_failed"
    assert mock_geocoder.lookup.call_count == 1
