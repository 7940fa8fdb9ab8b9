"""테스트 자산(데이터) 레이어

규칙:
- 엔진/네트워크 의존 없음 (단순 dict/list/primitive)
"""

from .pokeapi_payloads import ALL_IDS, BASE_URL, build_routes

__all__ = [
    "ALL_IDS",
    "BASE_URL",
    "build_routes",
]
