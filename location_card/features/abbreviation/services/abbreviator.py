"""住所の略記生成"""

from ..domain.tables import ABBREVIATION_TABLES

STREET_PART_MAX_LENGTH = 30
OTHER_PART_MAX_LENGTH = 20
ELLIPSIS = "..."


def abbreviate_word(word: str) -> str:
    """
    単語を略語に置き換え

    州名・方角・道路種別・国名の順に完全一致（大文字小文字を区別）で検索し、
    どれにも一致しなければ元の単語を返す
    """
    for table in ABBREVIATION_TABLES:
        if word in table:
            return table[word]
    return word


def _abbreviate_words(part: str) -> str:
    return " ".join(abbreviate_word(word) for word in part.split())


def _abbreviate_street(part: str) -> str:
    # 省略記号の判定は置換前の長さで行う
    abbreviated = _abbreviate_words(part)[:STREET_PART_MAX_LENGTH]
    if len(part) > STREET_PART_MAX_LENGTH:
        abbreviated += ELLIPSIS
    return abbreviated


def abbreviate(full_address: str) -> str:
    """
    住所の略記を生成

    カンマ区切りの各部分を単語単位で略語に置き換える。
    先頭（番地・通り）は30文字で切り詰めて省略記号を付け、
    以降の部分（市区町村・州・国）は20文字で切り詰める。

    Args:
        full_address: 住所全体

    Returns:
        str: 略記（空の入力には空文字列）

    Example:
        >>> abbreviate("123 North Main Street, California")
        '123 N Main St, CA'
    """
    if not full_address:
        return ""

    parts = [part.strip() for part in full_address.split(",")]

    abbreviated_parts = [_abbreviate_street(parts[0])]
    for part in parts[1:]:
        abbreviated_parts.append(_abbreviate_words(part)[:OTHER_PART_MAX_LENGTH])

    return ", ".join(abbreviated_parts)
