"""位置検索エディターのコントローラー"""

import asyncio
from dataclasses import replace
from typing import Callable, Optional, Union

from ..domain.models import EditorState, LocationAttributes
from ...abbreviation.services.abbreviator import abbreviate
from ...geocoding.domain.models import GeocodeSuggestion
from ...geocoding.providers.mapbox_geocoder import MIN_QUERY_LENGTH, MapboxGeocoder
from ...map.domain.models import MAX_ZOOM, MIN_ZOOM, MapStyle
from ....infrastructure.config.credentials import EditorContext
from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import ConfigurationError, ProviderError, ValidationError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

AttributesListener = Callable[[LocationAttributes], None]

MESSAGE_SEARCH_PROMPT = "Search for an address"
MESSAGE_NO_RESULTS = "No locations found"
MESSAGE_SEARCH_ERROR = "Error searching locations. Please try again."
MESSAGE_MISSING_API_KEY = "Mapbox API key is not configured."


class LocationEditorController:
    """
    位置検索エディターのコントローラー

    状態遷移:
    - IDLE → open_search() → SEARCHING
    - SEARCHING → 検索成功（1件以上） → SUGGESTIONS_SHOWN
    - SEARCHING → 検索成功（0件） → SEARCHING（空メッセージを表示）
    - SEARCHING → 検索失敗 → ERROR（入力を続ければ再検索できる）
    - SUGGESTIONS_SHOWN → select_suggestion() → 属性を確定して IDLE
    - 任意の状態 → clear() / dismiss() → IDLE

    検索結果は最新のリクエストのものだけを反映する（リクエスト番号で判定）。
    """

    def __init__(
        self,
        geocoder: MapboxGeocoder,
        context: EditorContext,
        attributes: Optional[LocationAttributes] = None,
        debounce_seconds: float = 0.0,
        request_timeout: float = 10.0,
    ) -> None:
        """
        Args:
            geocoder: ジオコーダー
            context: 起動時に注入されるエディター設定（APIキー・デフォルト値）
            attributes: ブロックの現在の属性（Noneの場合はデフォルト値）
            debounce_seconds: 入力から検索開始までの待機時間（秒）
            request_timeout: 検索リクエストのタイムアウト（秒）
        """
        self.geocoder = geocoder
        self.context = context
        self.attributes = attributes or LocationAttributes(
            map_style=context.defaults.map_style
        )
        self.debounce_seconds = debounce_seconds
        self.request_timeout = request_timeout

        self.state = EditorState.IDLE
        self.query = ""
        self.suggestions: list[GeocodeSuggestion] = []
        self.is_loading = False
        self.error: Optional[str] = None

        self._request_seq = 0
        self._listeners: list[AttributesListener] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        geocoder: MapboxGeocoder,
        context: EditorContext,
        attributes: Optional[LocationAttributes] = None,
    ) -> "LocationEditorController":
        """設定値の待機時間・タイムアウトでコントローラーを作成"""
        return cls(
            geocoder,
            context,
            attributes=attributes,
            debounce_seconds=settings.search_debounce_seconds,
            request_timeout=settings.geocoding_timeout,
        )

    @property
    def is_search_open(self) -> bool:
        """検索モーダルが開いているか"""
        return self.state is not EditorState.IDLE

    @property
    def status_message(self) -> Optional[str]:
        """検索モーダルに表示するメッセージ（候補表示中・読み込み中はNone）"""
        if not self.is_search_open or self.is_loading:
            return None
        if self.error:
            return self.error
        if self.suggestions:
            return None
        if len(self.query) >= MIN_QUERY_LENGTH:
            return MESSAGE_NO_RESULTS
        return MESSAGE_SEARCH_PROMPT

    def subscribe(self, listener: AttributesListener) -> Callable[[], None]:
        """
        属性の確定を購読

        Returns:
            購読を解除する関数
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, attributes: LocationAttributes) -> None:
        """属性を確定し、購読者に通知"""
        self.attributes = attributes
        for listener in list(self._listeners):
            listener(attributes)

    def _reset_search(self) -> None:
        """検索の一時状態を破棄（実行中のリクエストの結果も無効化）"""
        self._request_seq += 1
        self.state = EditorState.IDLE
        self.query = ""
        self.suggestions = []
        self.is_loading = False
        self.error = None

    def open_search(self) -> None:
        """検索モーダルを開く"""
        self._reset_search()
        self.state = EditorState.SEARCHING
        logger.debug("Location search opened")

    def dismiss(self) -> None:
        """検索モーダルを閉じる（候補は破棄）"""
        self._reset_search()
        logger.debug("Location search dismissed")

    async def update_query(self, query: str) -> None:
        """
        検索クエリの入力を処理

        入力ごとに新しいリクエスト番号を発行し、
        待機・通信の後に番号が最新でなければ結果を捨てる
        """
        if not self.is_search_open:
            logger.debug("Ignoring query input while search is closed")
            return

        self._request_seq += 1
        seq = self._request_seq

        self.query = query
        self.error = None

        if len(query) < MIN_QUERY_LENGTH:
            self.suggestions = []
            self.is_loading = False
            self.state = EditorState.SEARCHING
            return

        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
            if seq != self._request_seq:
                return

        self.is_loading = True

        try:
            suggestions = await self._search(query)
        except (ConfigurationError, ProviderError) as e:
            if seq != self._request_seq:
                return
            self.is_loading = False
            self.suggestions = []
            self.error = (
                MESSAGE_MISSING_API_KEY if isinstance(e, ConfigurationError) else MESSAGE_SEARCH_ERROR
            )
            self.state = EditorState.ERROR
            logger.warning(f"Location search failed: {e.message}")
            return

        if seq != self._request_seq:
            logger.debug(f"Discarding stale search results for: {query}")
            return

        self.is_loading = False
        self.suggestions = suggestions
        self.state = EditorState.SUGGESTIONS_SHOWN if suggestions else EditorState.SEARCHING

    async def _search(self, query: str) -> list[GeocodeSuggestion]:
        """
        ジオコーダーをスレッドで呼び出す（タイムアウト付き）

        Raises:
            ConfigurationError: APIキーが未設定の場合
            ProviderError: 通信失敗・タイムアウトの場合
        """
        if not self.context.credential:
            raise ConfigurationError(MESSAGE_MISSING_API_KEY)

        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.geocoder.search, query, self.context.credential),
                timeout=self.request_timeout,
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"Geocoding request timed out after {self.request_timeout}s"
            ) from e

    def select_suggestion(self, suggestion: Union[GeocodeSuggestion, int]) -> LocationAttributes:
        """
        候補を選択して属性を確定

        Args:
            suggestion: 候補、または表示中の候補のインデックス

        Returns:
            LocationAttributes: 確定後の属性

        Raises:
            ValidationError: 候補表示中でない、または候補が不正な場合
        """
        if self.state is not EditorState.SUGGESTIONS_SHOWN:
            raise ValidationError("No suggestions are shown")

        if isinstance(suggestion, int):
            try:
                suggestion = self.suggestions[suggestion]
            except IndexError:
                raise ValidationError(f"Invalid suggestion index: {suggestion}")

        try:
            attributes = replace(
                self.attributes,
                address=suggestion.place_name,
                latitude=suggestion.latitude,
                longitude=suggestion.longitude,
                is_set=True,
                address_abbreviation=abbreviate(suggestion.place_name),
            )
        except ValueError as e:
            raise ValidationError(f"Invalid suggestion: {e}") from e

        self._reset_search()
        self._commit(attributes)

        logger.info(f"Location selected: {suggestion.place_name}")

        return attributes

    def clear(self) -> LocationAttributes:
        """位置情報をクリア"""
        self._reset_search()
        attributes = self.attributes.cleared()
        self._commit(attributes)
        logger.info("Location cleared")
        return attributes

    def update_map_settings(
        self,
        map_style: Optional[Union[MapStyle, str]] = None,
        zoom_level: Optional[float] = None,
    ) -> LocationAttributes:
        """
        設定パネルで地図スタイル・ズームを変更

        Raises:
            ValidationError: スタイルまたはズームが不正な場合
        """
        changes = {}

        if map_style is not None:
            try:
                changes["map_style"] = MapStyle(map_style)
            except ValueError:
                raise ValidationError(f"Invalid map style: {map_style}")

        if zoom_level is not None:
            if not MIN_ZOOM <= zoom_level <= MAX_ZOOM:
                raise ValidationError(f"Zoom level must be between 1 and 20: {zoom_level}")
            changes["zoom_level"] = float(zoom_level)

        if not changes:
            return self.attributes

        attributes = replace(self.attributes, **changes)
        self._commit(attributes)
        return attributes

    def set_zoom_from_map(self, zoom: float) -> None:
        """地図の操作（スクロールズームなど）で変わったズームを属性に反映"""
        zoom = min(max(float(zoom), MIN_ZOOM), MAX_ZOOM)
        if zoom == self.attributes.zoom_level:
            return
        self._commit(replace(self.attributes, zoom_level=zoom))
