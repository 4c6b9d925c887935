"""カスタム例外定義"""
from typing import Optional


class LocationCardError(Exception):
    """
    ロケーションカード基底例外

    code / status_code はプロキシのエラーレスポンスにそのまま使用する
    """

    code = "location_card_error"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_response(self) -> dict:
        """エラーレスポンス用の辞書に変換"""
        return {
            "code": self.code,
            "message": self.message,
            "data": {"status": self.status_code},
        }


class HTTPError(LocationCardError):
    """HTTP関連のエラー"""

    code = "http_error"
    status_code = 502


class ProviderError(LocationCardError):
    """ジオコーディングプロバイダーのエラー（ネットワーク・非2xx・タイムアウト）"""

    code = "provider_error"
    status_code = 502


class UpstreamError(ProviderError):
    """プロキシ経由のジオコーディング失敗"""

    code = "geocoding_failed"
    status_code = 500


class NotFoundError(LocationCardError):
    """ジオコーディング結果が0件"""

    code = "no_results"
    status_code = 404


class ConfigurationError(LocationCardError):
    """設定エラー（APIキー未設定など）"""

    code = "missing_api_key"
    status_code = 400


class ValidationError(LocationCardError):
    """バリデーションエラー"""

    code = "invalid_param"
    status_code = 400


class ForbiddenError(LocationCardError):
    """権限エラー"""

    code = "rest_forbidden"
    status_code = 403


class StorageError(LocationCardError):
    """オプションストア関連のエラー"""

    code = "storage_error"
    status_code = 500


class MapWidgetError(LocationCardError):
    """地図ウィジェット関連のエラー"""

    code = "map_widget_error"
    status_code = 500
