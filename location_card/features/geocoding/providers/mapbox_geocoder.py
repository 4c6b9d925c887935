"""Mapbox Geocoding API実装"""
from typing import Any, Optional
from urllib.parse import quote

from ..domain.models import GeocodeSuggestion, PlaceType
from ....shared.exceptions.errors import HTTPError, ProviderError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

MIN_QUERY_LENGTH = 3
SEARCH_LIMIT = 10
SEARCH_TYPES = (
    PlaceType.ADDRESS,
    PlaceType.PLACE,
    PlaceType.POI,
    PlaceType.LOCALITY,
    PlaceType.NEIGHBORHOOD,
    PlaceType.POSTCODE,
)


class MapboxGeocoder:
    """
    Mapbox Forward Geocoding API実装

    エディターの候補検索（search）とプロキシの単一検索（lookup）で共用する。
    APIキーは呼び出しごとに引数で受け取り、インスタンスには保持しない。
    """

    def __init__(
        self,
        http_client: Optional[HTTPClient] = None,
        base_url: str = "https://api.mapbox.com",
        dataset: str = "mapbox.places",
        language: str = "en",
    ) -> None:
        """
        Args:
            http_client: HTTPクライアント（Noneの場合は新規作成）
            base_url: APIのベースURL
            dataset: データセット名
            language: 結果の言語
        """
        self.http_client = http_client or HTTPClient()
        self.base_url = base_url.rstrip("/")
        self.dataset = dataset
        self.language = language

        logger.info(f"MapboxGeocoder initialized: dataset={dataset}, language={language}")

    @classmethod
    def from_settings(cls, settings: Any) -> "MapboxGeocoder":
        """アプリケーション設定から生成"""
        http_client = HTTPClient(
            timeout=settings.geocoding_timeout,
            max_retries=settings.geocoding_max_retries,
            user_agent=settings.user_agent,
        )
        return cls(
            http_client=http_client,
            base_url=settings.geocoding_base_url,
            dataset=settings.geocoding_dataset,
            language=settings.geocoding_language,
        )

    def build_url(self, query: str) -> str:
        """検索クエリをパスに埋め込んだURLを生成"""
        return f"{self.base_url}/geocoding/v5/{self.dataset}/{quote(query, safe='')}.json"

    def _request_features(
        self, query: str, credential: str, params: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """
        Forward Geocodingリクエストを1回だけ送信し、地物のリストを返す

        Raises:
            ProviderError: ネットワークエラー・非2xx・不正なレスポンスの場合
        """
        request_params = {"access_token": credential, **params}

        try:
            body = self.http_client.get_json(self.build_url(query), params=request_params)
        except HTTPError as e:
            raise ProviderError(f"Geocoding request failed: {e.message}") from e

        if not isinstance(body, dict):
            raise ProviderError("Unexpected geocoding response format")

        features = body.get("features") or []
        if not isinstance(features, list):
            raise ProviderError("Unexpected geocoding response format")

        return features

    def _to_suggestions(self, features: list[dict[str, Any]]) -> list[GeocodeSuggestion]:
        suggestions = []
        for feature in features:
            try:
                suggestions.append(GeocodeSuggestion.from_feature(feature))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid geocoding feature: {e}")
        return suggestions

    def search(self, query: str, credential: str) -> list[GeocodeSuggestion]:
        """
        住所・地名の候補を検索

        3文字未満のクエリは通信せずに空リストを返す。
        結果は種別の優先順位で安定ソートする（同順位はプロバイダーの順序を維持）。

        Args:
            query: 検索クエリ
            credential: Mapbox APIキー

        Returns:
            list[GeocodeSuggestion]: 並び替え済みの候補

        Raises:
            ProviderError: リクエストに失敗した場合
        """
        if not query or len(query) < MIN_QUERY_LENGTH:
            return []

        logger.debug(f"Searching locations: {query}")

        features = self._request_features(
            query,
            credential,
            {
                "types": ",".join(place_type.value for place_type in SEARCH_TYPES),
                "limit": str(SEARCH_LIMIT),
                "language": self.language,
            },
        )

        suggestions = sorted(self._to_suggestions(features), key=lambda s: s.priority)

        logger.debug(f"Found {len(suggestions)} suggestions for: {query}")

        return suggestions

    def lookup(self, address: str, credential: str) -> Optional[GeocodeSuggestion]:
        """
        住所を1件だけジオコーディング

        Args:
            address: 住所文字列
            credential: Mapbox APIキー

        Returns:
            Optional[GeocodeSuggestion]: 最良の一致（見つからない場合はNone）

        Raises:
            ProviderError: リクエストに失敗した場合
        """
        logger.debug(f"Geocoding address: {address}")

        features = self._request_features(
            address,
            credential,
            {"limit": "1", "types": PlaceType.ADDRESS.value},
        )

        suggestions = self._to_suggestions(features)
        if not suggestions:
            logger.warning(f"No geocoding results for address: {address}")
            return None

        return suggestions[0]

    def close(self) -> None:
        """リソースをクリーンアップ"""
        self.http_client.close()
