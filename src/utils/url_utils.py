"""URL 파싱 유틸리티"""
import re

from src.core.exceptions import MalformedDataException

# PokeAPI 리소스 URL은 항상 ".../{id}/" 형태로 끝남
ID_FROM_URL_RE = re.compile(r"/(\d+)/?$")


def extract_id_from_url(url: str) -> int:
    """
    PokeAPI 리소스 URL에서 숫자 id 추출

    Examples:
        >>> extract_id_from_url("https://pokeapi.co/api/v2/pokemon/25/")
        25
        >>> extract_id_from_url("https://pokeapi.co/api/v2/pokemon-species/133")
        133

    Args:
        url: PokeAPI 리소스 URL

    Returns:
        양의 정수 id

    Raises:
        MalformedDataException: 패턴이 맞지 않거나 id가 0인 경우 (건너뛰지 않음)
    """
    match = ID_FROM_URL_RE.search(url or "")
    if not match:
        raise MalformedDataException(f"Cannot extract id from url: {url}", {"url": url})

    value = int(match.group(1))
    if value <= 0:
        raise MalformedDataException(f"Non-positive id in url: {url}", {"url": url})
    return value
