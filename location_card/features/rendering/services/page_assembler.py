"""ページ単位の位置カード描画"""

from typing import Any, Iterable

from .block_renderer import BlockRenderer
from ..domain.models import RenderPass
from ...editor.domain.models import LocationAttributes
from ....shared.exceptions.errors import ValidationError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)


def load_blocks(data: Any) -> list[LocationAttributes]:
    """
    保存形式のブロック属性（1件の dict または dict のリスト）を読み込む

    Raises:
        ValidationError: 形式・値が不正な場合
    """
    items = [data] if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise ValidationError("Blocks must be an object or a list of objects")

    blocks = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"Block {index} is not an object")
        try:
            blocks.append(LocationAttributes.from_block_dict(item))
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Block {index} has invalid attributes: {e}") from e
    return blocks


def render_page(
    blocks: Iterable[LocationAttributes],
    renderer: BlockRenderer,
    block_id_prefix: str = "location-card",
) -> str:
    """
    ページ内の全ブロックを1回の描画として出力

    ブロックのHTMLを順に並べ、最後に schema.org の script タグを1つだけ付ける
    """
    render_pass = RenderPass(block_id_prefix=block_id_prefix)
    parts = [renderer.render(attributes, render_pass) for attributes in blocks]
    block_count = len(parts)

    script = render_pass.drain_schema_script()
    if script is not None:
        parts.append(script)

    logger.info(f"Rendered page with {block_count} location card(s)")
    return "\n".join(parts)
