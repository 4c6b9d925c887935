"""ページ描画のドメインモデル"""
import json
from typing import Any, Optional

SCHEMA_SCRIPT_TEMPLATE = '<script type="application/ld+json">\n{payload}\n</script>'


def _has_coordinates(schema: dict[str, Any]) -> bool:
    geo = schema.get("geo") or {}
    return bool(geo.get("latitude")) and bool(geo.get("longitude"))


class RenderPass:
    """
    1回のページ描画で共有する蓄積領域

    ページ組み立て処理が描画ごとに生成し、各ブロックの schema.org データを集める
    """

    def __init__(self, block_id_prefix: str = "location-card"):
        self.block_id_prefix = block_id_prefix
        self.schemas: list[dict[str, Any]] = []
        self._block_count = 0

    def next_block_id(self) -> str:
        """描画内で一意なブロックIDを発行"""
        self._block_count += 1
        return f"{self.block_id_prefix}-{self._block_count}"

    def add_schema(self, schema: dict[str, Any]) -> None:
        self.schemas.append(schema)

    def drain_schema_script(self) -> Optional[str]:
        """
        蓄積した schema.org データを JSON-LD の script タグとして出力し、蓄積を空にする

        名前がない、または緯度・経度が0のデータは出力しない

        Returns:
            script タグ（出力対象がない場合はNone）
        """
        schemas, self.schemas = self.schemas, []

        valid = [schema for schema in schemas if schema.get("name") and _has_coordinates(schema)]
        if not valid:
            return None

        payload = json.dumps(valid, indent=4, ensure_ascii=False)
        # script タグ内で閉じタグとして解釈されないように
        payload = payload.replace("</", "<\\/")
        return SCHEMA_SCRIPT_TEMPLATE.format(payload=payload)
