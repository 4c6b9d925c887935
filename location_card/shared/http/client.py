"""外部API用HTTPクライアント"""

from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions.errors import HTTPError
from ..logging.config import get_logger
from ..utils.text import mask_access_token

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "location-card/1.0"
RETRY_STATUS_CODES = (500, 502, 503, 504)


def build_session(
    max_retries: int,
    backoff_factor: float,
    status_forcelist: tuple[int, ...],
    user_agent: str,
) -> requests.Session:
    """
    リトライ設定済みのセッションを作成

    読み取り系メソッド（HEAD / GET）のみリトライ対象とし、
    リトライを使い切った場合もレスポンスをそのまま返す（raise_for_status で判定する）
    """
    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=["HEAD", "GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)

    session = requests.Session()
    for prefix in ("http://", "https://"):
        session.mount(prefix, adapter)
    session.headers["User-Agent"] = user_agent
    return session


class HTTPClient:
    """
    外部API用HTTPクライアント

    - リクエストごとのタイムアウト
    - リトライはデフォルト無効（プロバイダーの失敗は呼び出し元に返す）
    - 例外メッセージ・ログの access_token は必ず伏せる
    """

    def __init__(
        self,
        timeout: float = 10,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
        status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES,
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            timeout: リクエストタイムアウト（秒）
            max_retries: 最大リトライ回数（0: 再試行しない）
            backoff_factor: リトライ間隔の係数
            status_forcelist: リトライ対象のステータスコード
            user_agent: User-Agentヘッダー
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.session = build_session(
            max_retries=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=status_forcelist,
            user_agent=self.user_agent,
        )

    def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """
        GETリクエストを送信（非2xxは失敗として扱う）

        Raises:
            HTTPError: 通信失敗・タイムアウト・非2xxの場合
        """
        logger.debug(f"GET {url}")

        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            # 失敗時のメッセージにはクエリ文字列ごとURLが含まれる
            reason = mask_access_token(str(e))
            logger.error(f"GET {url} failed: {reason}")
            raise HTTPError(f"Failed to GET {url}: {reason}") from e

        logger.debug(f"GET {url} -> {response.status_code}")
        return response

    def get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        GETリクエストを送信し、本文をJSONとしてデコード

        Raises:
            HTTPError: リクエスト失敗時、または本文がJSONでない場合
        """
        response = self.get(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"GET {url} returned a non-JSON body")
            raise HTTPError(f"Invalid JSON response from {url}") from e

    def close(self) -> None:
        self.session.close()
        logger.debug("HTTP session closed")

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
