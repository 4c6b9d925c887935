"""CLIエントリーポイント"""
import argparse
import json
import sys
from typing import Optional

from .features.abbreviation.services.abbreviator import abbreviate
from .features.geocoding.providers.mapbox_geocoder import MapboxGeocoder
from .features.geocoding.services.geocode_proxy import GeocodeProxyService
from .features.map.providers.folium_widget import FoliumMapWidgetFactory
from .features.rendering.services.block_renderer import BlockRenderer
from .features.rendering.services.page_assembler import load_blocks, render_page
from .infrastructure.config.credentials import load_map_defaults, resolve_credential
from .infrastructure.config.settings import Settings
from .infrastructure.storage.options_store import OptionsStore
from .shared.exceptions.errors import LocationCardError, ValidationError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成"""
    parser = argparse.ArgumentParser(
        prog="location-card",
        description="Mapbox位置カードのジオコーディング・住所省略ツール",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    abbreviate_parser = subparsers.add_parser("abbreviate", help="住所を省略形に変換")
    abbreviate_parser.add_argument("address", type=str, help="住所")

    geocode_parser = subparsers.add_parser(
        "geocode", help="保存済みのAPIキーで住所を1件ジオコーディング"
    )
    geocode_parser.add_argument("address", type=str, help="住所")

    api_key_parser = subparsers.add_parser("set-api-key", help="Mapbox APIキーを保存")
    api_key_parser.add_argument("api_key", type=str, help="Mapbox APIキー")

    render_parser = subparsers.add_parser(
        "render", help="保存済みのブロック属性（JSON）からページのHTMLを生成"
    )
    render_parser.add_argument("attributes_file", type=str, help="ブロック属性のJSONファイル")
    render_parser.add_argument(
        "--home-url", type=str, help="サイトのURL（デフォルト: 設定値）"
    )
    render_parser.add_argument(
        "--no-map", action="store_true", help="プレビュー地図を埋め込まない"
    )

    serve_parser = subparsers.add_parser("serve", help="ジオコーディングプロキシを起動")
    serve_parser.add_argument("--host", type=str, default="0.0.0.0", help="待ち受けアドレス")
    serve_parser.add_argument("--port", type=int, help="ポート番号（デフォルト: 設定値）")

    return parser


def _run_geocode(settings: Settings, store: OptionsStore, address: str) -> None:
    """サーバー側の単一ジオコーディングを実行し、結果をJSONで出力"""
    geocoder = MapboxGeocoder.from_settings(settings)
    try:
        proxy = GeocodeProxyService(geocoder, resolve_credential(settings, store))
        location = proxy.geocode(address, can_edit=True)
    finally:
        geocoder.close()

    print(json.dumps(location.to_dict(), ensure_ascii=False))


def _run_render(
    settings: Settings,
    store: OptionsStore,
    attributes_file: str,
    home_url: Optional[str],
    with_map: bool,
) -> None:
    """ブロック属性のJSONを読み込み、ページのHTMLを出力"""
    try:
        with open(attributes_file, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ValidationError(f"Cannot read {attributes_file}: {e.strerror}") from e
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {attributes_file}: {e.msg}") from e

    renderer = BlockRenderer(
        home_url or settings.site_url,
        widget_factory=FoliumMapWidgetFactory() if with_map else None,
        credential=resolve_credential(settings, store),
        defaults=load_map_defaults(store),
    )
    print(render_page(load_blocks(data), renderer))


def _run_serve(settings: Settings, store: OptionsStore, host: str, port: Optional[int]) -> None:
    """HTTPサーバーを起動"""
    import uvicorn

    from .server import create_app

    uvicorn.run(
        create_app(settings, store),
        host=host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


def main(argv: Optional[list[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗, 130: 中断）
    """
    args = build_parser().parse_args(argv)

    try:
        # 設定を読み込み
        settings = Settings(_env_file=args.env_file)

        # ログレベルを上書き
        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(level=settings.log_level)

        store = OptionsStore(settings.options_file)

        if args.command == "abbreviate":
            print(abbreviate(args.address))
        elif args.command == "geocode":
            _run_geocode(settings, store, args.address)
        elif args.command == "set-api-key":
            store.update_option(OptionsStore.API_KEY, args.api_key)
            print("Mapbox API key saved.")
        elif args.command == "render":
            _run_render(settings, store, args.attributes_file, args.home_url, not args.no_map)
        elif args.command == "serve":
            logger.info(f"Starting server (environment={settings.environment})")
            _run_serve(settings, store, args.host, args.port)

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except LocationCardError as e:
        logger.error(f"Command failed: [{e.code}] {e.message}")
        return 1
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
