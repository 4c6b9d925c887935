"""住所略記のテスト"""

import pytest

from location_card.features.abbreviation.services.abbreviator import (
    abbreviate,
    abbreviate_word,
)


@pytest.mark.parametrize(
    "address,expected",
    [
        ("123 North Main Street, California", "123 N Main St, CA"),
        ("55 West Lake Avenue, Denver, Colorado", "55 W Lake Ave, Denver, CO"),
        ("9 Ocean Drive, Miami, Florida, Mexico", "9 Ocean Dr, Miami, FL, MX"),
        ("Tokyo Tower, Minato, Japan", "Tokyo Tower, Minato, JP"),
    ],
)
def test_abbreviate(address: str, expected: str) -> None:
    """カンマ区切りの各部分が単語単位で省略される"""
    assert abbreviate(address) == expected


def test_abbreviate_empty() -> None:
    """空の住所は空文字列"""
    assert abbreviate("") == ""


def test_abbreviate_word_priority() -> None:
    """州名の辞書が国名の辞書より優先される"""
    # Georgia は州名（GA）として扱われる
    assert abbreviate_word("Georgia") == "GA"
    assert abbreviate_word("Canada") == "CA"


def test_abbreviate_word_case_sensitive() -> None:
    """大文字小文字が異なる単語は置き換えない"""
    assert abbreviate_word("street") == "street"
    assert abbreviate_word("Street") == "St"


def test_multi_word_keys_are_not_matched() -> None:
    """複数単語のキーは単語単位の照合では一致しない"""
    assert abbreviate("1 Broadway, New York") == "1 Broadway, New York"


def test_street_part_truncated_with_ellipsis() -> None:
    """先頭部分は30文字で切り詰め、省略記号を付ける"""
    street = "1234 Extraordinarily Longnamed Boulevard"
    result = abbreviate(f"{street}, Austin")

    first, rest = result.split(", ")
    # 置換後の文字列を30文字で切り詰め、元の長さが30文字を超えるので省略記号を付ける
    assert first == "1234 Extraordinarily Longnamed Blvd"[:30] + "..."
    assert rest == "Austin"


def test_street_part_ellipsis_uses_unabbreviated_length() -> None:
    """置換後に30文字以下になっても、元の長さが30文字を超えれば省略記号を付ける"""
    street = "100 Northwest Boulevard Street"  # 30文字
    assert abbreviate(street) == "100 NW Blvd St"

    street = "1000 Northwest Boulevard Street"  # 31文字
    assert abbreviate(street) == "1000 NW Blvd St..."


def test_other_parts_truncated_without_ellipsis() -> None:
    """2番目以降の部分は20文字で切り詰め、省略記号は付けない"""
    result = abbreviate("1 Main Street, Llanfairpwllgwyngyllgogerych")
    assert result == "1 Main St, Llanfairpwllgwyngyll"
