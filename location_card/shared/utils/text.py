"""テキスト処理ユーティリティ"""

import re
from typing import Optional

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_ACCESS_TOKEN_RE = re.compile(r"(access_token=)[^&\s'\"]+")


def sanitize_text_field(text: Optional[str]) -> str:
    """
    CMSのテキストフィールドと同じ規則でサニタイズ

    - HTMLタグを除去
    - 全角スペース・改行・タブを含む連続した空白を1つに
    - 前後の空白を除去
    """
    if not text:
        return ""

    clean = _TAG_RE.sub("", str(text)).replace("　", " ")
    return _WHITESPACE_RE.sub(" ", clean).strip()


def mask_access_token(text: str) -> str:
    """URLやエラーメッセージに含まれる access_token の値を伏せる"""
    if not text:
        return text
    return _ACCESS_TOKEN_RE.sub(r"\1***", text)
