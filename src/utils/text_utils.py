"""텍스트 처리 유틸리티 - 검색어 정규화 / 숫자 id 파싱 / 설명문 정리"""

from __future__ import annotations

import re
from typing import Optional

# "#25", "025", "25" 모두 허용 (앞의 '#'은 선택)
NUMERIC_QUERY_RE = re.compile(r"^#?(\d+)$")
WHITESPACE_RE = re.compile(r"\s+")


def normalize_query(raw: Optional[str]) -> str:
    """검색어 정규화 (trim + lowercase)

    Examples:
        >>> normalize_query("  PikaChu ")
        'pikachu'
        >>> normalize_query(None)
        ''
    """
    if not raw:
        return ""
    return raw.strip().lower()


def parse_pokemon_id(query: str) -> Optional[int]:
    """검색어를 포켓몬 id로 해석

    Examples:
        >>> parse_pokemon_id("25"), parse_pokemon_id("#25"), parse_pokemon_id("025")
        (25, 25, 25)
        >>> parse_pokemon_id("abc") is None, parse_pokemon_id("12a") is None
        (True, True)

    Args:
        query: 정규화된 검색어

    Returns:
        양의 정수 id, id 형식이 아니면 None (텍스트 검색으로 처리)
    """
    match = NUMERIC_QUERY_RE.match(query.strip()) if query else None
    if not match:
        return None

    value = int(match.group(1))
    return value if value > 0 else None


def clean_flavor_text(text: Optional[str]) -> Optional[str]:
    """PokeAPI 설명문 정리

    게임 원문에는 form feed(\\f), 개행, soft hyphen 등이 섞여 있어
    공백 하나로 치환합니다.
    """
    if not text:
        return None
    cleaned = text.replace("\u00ad", "").replace("\f", " ")
    cleaned = WHITESPACE_RE.sub(" ", cleaned).strip()
    return cleaned or None
