"""ジオコーディングプロキシサービス"""

from typing import Optional

from ..domain.models import GeoLocation
from ..providers.mapbox_geocoder import MapboxGeocoder
from ....shared.exceptions.errors import (
    ConfigurationError,
    ForbiddenError,
    NotFoundError,
    ProviderError,
    UpstreamError,
    ValidationError,
)
from ....shared.logging.config import get_logger
from ....shared.utils.text import sanitize_text_field

logger = get_logger(__name__)


class GeocodeProxyService:
    """
    サーバー側で保存済みのAPIキーを付与して住所を1件ジオコーディングする

    チェック順序（いずれも外部リクエストの前に行う）:
    1. 編集権限
    2. 入力値
    3. APIキーの有無
    """

    def __init__(self, geocoder: MapboxGeocoder, credential: Optional[str]) -> None:
        """
        Args:
            geocoder: ジオコーダー
            credential: 起動時に解決済みのAPIキー
        """
        self.geocoder = geocoder
        self._credential = credential

        logger.info(
            f"GeocodeProxyService initialized: credential_configured={bool(credential)}"
        )

    def geocode(self, address: Optional[str], can_edit: bool) -> GeoLocation:
        """
        住所をジオコーディング

        Args:
            address: 住所（未サニタイズ）
            can_edit: 呼び出し元が編集権限を持つか

        Returns:
            GeoLocation: 最初の地物の住所・緯度・経度

        Raises:
            ForbiddenError: 編集権限がない場合
            ValidationError: 住所が空の場合
            ConfigurationError: APIキーが未設定の場合
            UpstreamError: プロバイダーへのリクエストに失敗した場合
            NotFoundError: 結果が0件の場合
        """
        if not can_edit:
            raise ForbiddenError("Sorry, you are not allowed to do that.")

        clean_address = sanitize_text_field(address)
        if not clean_address:
            raise ValidationError("Missing parameter(s): address")

        if not self._credential:
            raise ConfigurationError("Mapbox API key is not configured.")

        try:
            suggestion = self.geocoder.lookup(clean_address, self._credential)
        except ProviderError as e:
            logger.error(f"Geocoding failed for address '{clean_address}': {e.message}")
            raise UpstreamError(e.message) from e

        if suggestion is None:
            raise NotFoundError("No results found for this address.")

        return GeoLocation(
            address=suggestion.place_name,
            latitude=suggestion.latitude,
            longitude=suggestion.longitude,
        )
