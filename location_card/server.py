"""ジオコーディングプロキシ用HTTPサーバー（FastAPI）"""
from typing import Any, Optional

from fastapi import FastAPI, Header, Query, Request
from fastapi.responses import JSONResponse

from .features.geocoding.providers.mapbox_geocoder import MapboxGeocoder
from .features.geocoding.services.geocode_proxy import GeocodeProxyService
from .infrastructure.config.credentials import EditorContext
from .infrastructure.config.settings import Settings
from .infrastructure.storage.options_store import OptionsStore
from .shared.exceptions.errors import ForbiddenError, LocationCardError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)

SERVICE_NAME = "Location Card Geocoding Proxy"
SERVICE_VERSION = "1.0.0"


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Authorization ヘッダーから Bearer トークンを取り出す"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[OptionsStore] = None,
    geocoder: Optional[MapboxGeocoder] = None,
) -> FastAPI:
    """
    アプリケーションを作成

    APIキーはここで一度だけ解決し、各サービスに注入する

    Args:
        settings: アプリケーション設定（Noneの場合は環境変数から読み込み）
        store: オプションストア（Noneの場合は settings.options_file を使用）
        geocoder: ジオコーダー（Noneの場合は設定から生成）

    Returns:
        FastAPI: アプリケーション
    """
    settings = settings or Settings()
    store = store or OptionsStore(settings.options_file)
    geocoder = geocoder or MapboxGeocoder.from_settings(settings)

    context = EditorContext.load(settings, store)
    proxy = GeocodeProxyService(geocoder, context.credential)
    editor_tokens = set(settings.get_editor_tokens())

    app = FastAPI(
        title=SERVICE_NAME,
        description="保存済みのMapbox APIキーを使って住所をジオコーディングするプロキシ",
        version=SERVICE_VERSION,
    )
    app.state.settings = settings
    app.state.editor_context = context
    app.state.proxy = proxy

    def can_edit(authorization: Optional[str]) -> bool:
        token = _bearer_token(authorization)
        return token is not None and token in editor_tokens

    @app.on_event("startup")
    async def startup_event() -> None:
        """起動時の処理"""
        logger.info("Application starting up")
        logger.info(f"Environment: {settings.environment}")
        logger.info(f"Project: {settings.project_name}")

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        """シャットダウン時の処理"""
        geocoder.close()
        logger.info("Application shutting down")

    @app.get("/")
    async def root() -> dict[str, Any]:
        """ルートエンドポイント"""
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "running",
            "environment": settings.environment,
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """ヘルスチェックエンドポイント"""
        return {"status": "healthy"}

    @app.get("/geocode")
    def geocode(
        address: Optional[str] = Query(default=None),
        authorization: Optional[str] = Header(default=None),
    ) -> dict[str, Any]:
        """
        住所を1件ジオコーディング

        外部APIへの通信を伴うため、スレッドプールで実行される同期関数として定義する

        Args:
            address: 住所
            authorization: Bearerトークン

        Returns:
            dict[str, Any]: address / latitude / longitude
        """
        location = proxy.geocode(address, can_edit=can_edit(authorization))
        return location.to_dict()

    @app.get("/editor-config")
    async def editor_config(
        authorization: Optional[str] = Header(default=None),
    ) -> dict[str, Any]:
        """編集セッションに注入するAPIキーと地図のデフォルト値"""
        if not can_edit(authorization):
            raise ForbiddenError("Sorry, you are not allowed to do that.")
        return context.to_client_dict()

    @app.exception_handler(LocationCardError)
    async def location_card_exception_handler(
        request: Request, exc: LocationCardError
    ) -> JSONResponse:
        """アプリケーション例外ハンドラー"""
        logger.warning(f"{request.url.path} failed: [{exc.code}] {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """グローバル例外ハンドラー（内部の詳細は返さない）"""
        logger.error(f"Unhandled exception: {type(exc).__name__}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "code": "internal_error",
                "message": "Internal server error",
                "data": {"status": 500},
            },
        )

    return app


def create_default_app() -> FastAPI:
    """環境変数の設定でロギングを構成し、アプリケーションを作成"""
    settings = Settings()
    setup_logging(level=settings.log_level)
    return create_app(settings)


if __name__ == "__main__":
    import uvicorn

    _settings = Settings()
    setup_logging(level=_settings.log_level)

    uvicorn.run(
        create_app(_settings),
        host="0.0.0.0",
        port=_settings.port,
        log_level=_settings.log_level.lower(),
    )
