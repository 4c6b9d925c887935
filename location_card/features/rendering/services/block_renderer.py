"""位置カードブロックの描画"""

import html
from typing import Any, Optional, cast

from ..domain.models import RenderPass
from ...editor.domain.models import LocationAttributes
from ...map.domain.models import MapDefaults
from ...map.ports.map_widget import RenderableMapWidget, RenderableMapWidgetFactory
from ...map.services.map_sync import MapSyncController
from ....shared.exceptions.errors import MapWidgetError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

BLOCK_CLASS = "wp-block-location-card"
MAP_ARIA_LABEL = "Interactive map showing location"
MAP_ERROR_HTML = f'<div class="{BLOCK_CLASS}__error">Error loading map</div>'


def _attrs(values: dict[str, Any]) -> str:
    """HTML属性文字列を生成（値はエスケープ）"""
    return " ".join(
        f'{name}="{html.escape(str(value), quote=True)}"' for name, value in values.items()
    )


class BlockRenderer:
    """
    保存済みの位置カードをHTMLに変換するレンダラー

    - ラッパー要素に地図用の data 属性を付与
    - 地図・住所にアクセシビリティ属性を付与
    - schema.org の Place データを RenderPass に追加
    """

    def __init__(
        self,
        home_url: str,
        widget_factory: Optional[RenderableMapWidgetFactory] = None,
        credential: Optional[str] = None,
        defaults: Optional[MapDefaults] = None,
    ):
        """
        Args:
            home_url: サイトのURL（schema.org の @id に使用）
            widget_factory: プレビュー地図の生成元（Noneの場合は地図を埋め込まない）
            credential: 起動時に解決済みのAPIキー
            defaults: 地図のデフォルト値
        """
        self.home_url = home_url.rstrip("/")
        self.widget_factory = widget_factory
        self.credential = credential
        self.defaults = defaults or MapDefaults()

    def render(self, attributes: LocationAttributes, render_pass: RenderPass) -> str:
        """
        ブロックを描画

        Args:
            attributes: ブロックの保存済み属性
            render_pass: 現在のページ描画の蓄積領域

        Returns:
            str: ブロックのHTML
        """
        block_id = render_pass.next_block_id()
        address_id = f"{block_id}-address"

        wrapper = _attrs(
            {
                "id": block_id,
                "class": BLOCK_CLASS,
                "data-latitude": attributes.latitude,
                "data-longitude": attributes.longitude,
                "data-address": attributes.address,
                "data-map-style": attributes.map_style.value,
                "data-zoom-level": format(attributes.zoom_level, "g"),
                "role": "region",
            }
        )
        map_div = _attrs(
            {
                "class": f"{BLOCK_CLASS}__map",
                "aria-label": MAP_ARIA_LABEL,
                "role": "img",
                "aria-describedby": address_id,
            }
        )
        address_p = _attrs(
            {
                "class": f"{BLOCK_CLASS}__address",
                "id": address_id,
                "aria-live": "polite",
            }
        )

        parts = [
            f"<div {wrapper}>",
            f"<div {map_div}>{self._render_preview(block_id, attributes)}</div>",
            f"<p {address_p}>{html.escape(attributes.address)}</p>",
        ]
        if attributes.is_set and attributes.address:
            link = _attrs(
                {
                    "class": f"{BLOCK_CLASS}__directions",
                    "href": attributes.directions_url,
                    "target": "_blank",
                    "rel": "noopener noreferrer",
                }
            )
            parts.append(f"<a {link}>Get directions</a>")
        parts.append("</div>")

        render_pass.add_schema(self.build_schema(attributes, block_id))

        return "\n".join(parts)

    def build_schema(self, attributes: LocationAttributes, block_id: str) -> dict[str, Any]:
        """schema.org の JSON-LD データを生成"""
        schema: dict[str, Any] = {
            "@context": "https://schema.org",
            "@type": attributes.schema_type.value,
            "@id": f"{self.home_url}#{block_id}",
            "name": attributes.schema_name or attributes.address,
            "geo": {
                "@type": "GeoCoordinates",
                "latitude": attributes.latitude,
                "longitude": attributes.longitude,
            },
            "address": {
                "@type": "PostalAddress",
                "streetAddress": attributes.address,
            },
        }

        if attributes.schema_description:
            schema["description"] = attributes.schema_description
        if attributes.schema_telephone:
            schema["telephone"] = attributes.schema_telephone
        if attributes.schema_website:
            schema["url"] = attributes.schema_website
        if attributes.schema_opening_hours:
            schema["openingHoursSpecification"] = {
                "@type": "OpeningHoursSpecification",
                "dayOfWeek": attributes.schema_opening_hours,
            }

        return schema

    def _render_preview(self, block_id: str, attributes: LocationAttributes) -> str:
        """プレビュー地図のHTMLを生成（地図を埋め込まない場合は空文字）"""
        if self.widget_factory is None or not attributes.is_set:
            return ""

        controller = MapSyncController(self.widget_factory, self.credential, self.defaults)
        try:
            if not controller.mount(block_id, attributes):
                return ""
            return cast(RenderableMapWidget, controller.widget).render_html()
        except MapWidgetError as e:
            logger.warning(f"Map preview failed for {block_id}: {e.message}")
            return MAP_ERROR_HTML
        finally:
            controller.unmount()
