"""이미지 URL 선택 유틸리티"""
from typing import Any, Optional


def get_pokemon_image_url(sprites: Optional[dict[str, Any]]) -> Optional[str]:
    """
    sprites에서 표시할 이미지 URL 선택

    우선순위:
    1) other["official-artwork"].front_default (고화질)
    2) other.home.front_default
    3) front_default (클래식 스프라이트)
    4) None

    Args:
        sprites: PokeAPI /pokemon 응답의 sprites 객체

    Returns:
        이미지 URL 또는 None
    """
    if not sprites:
        return None

    other = sprites.get("other") or {}
    official = (other.get("official-artwork") or {}).get("front_default")
    if official:
        return official

    home = (other.get("home") or {}).get("front_default")
    if home:
        return home

    return sprites.get("front_default") or None
