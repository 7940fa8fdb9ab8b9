"""Catalog Index Builders

PokeAPI 응답 위에 검색용 인덱스를 구성합니다.
- 전체 인덱스: /pokemon?limit=100000 한 번 호출 → id 오름차순 (12h 캐시)
- 세대 인덱스: /generation/{1..9} 병렬 호출 → 종 이름 → 세대 (24h 캐시)
- 타입 멤버십: /type/{name} → id frozenset (24h 캐시, 타입별 lazy 조회)

인덱스 자체는 저장하지 않고 매 호출마다 (캐시된) 응답에서 다시 계산합니다.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from src.clients.poke_api_client import PokeApiClient
from src.core.config import settings
from src.core.exceptions import InvalidQueryException, UpstreamNotFoundException
from src.core.logging import logger
from src.utils.url_utils import extract_id_from_url

from .result import GenerationRef, IndexEntry

INDEX_ALL_PATH = "/pokemon?limit=100000&offset=0"

# 실제 포켓몬이 속하지 않는 타입 (필터 목록에서 제외)
NON_BATTLE_TYPES = frozenset({"unknown", "shadow", "stellar"})


class CatalogIndex:
    """검색/필터용 인덱스 빌더"""

    def __init__(
        self,
        client: PokeApiClient,
        generation_ids: Optional[Sequence[int]] = None,
        ttl_long_ms: Optional[int] = None,
        ttl_very_long_ms: Optional[int] = None,
    ):
        """
        Args:
            client: PokeAPI fetch client
            generation_ids: 조회할 세대 id 목록 (기본 settings.generation_ids = 1..9)
            ttl_long_ms: 전체 인덱스 TTL
            ttl_very_long_ms: 세대/타입 TTL

        Raises:
            ValueError: generation_ids가 비어 있는 경우
        """
        self.client = client
        self.generation_ids = list(settings.generation_ids if generation_ids is None else generation_ids)
        if not self.generation_ids:
            raise ValueError("generation_ids must not be empty")
        self.ttl_long_ms = settings.ttl_long_ms if ttl_long_ms is None else ttl_long_ms
        self.ttl_very_long_ms = settings.ttl_very_long_ms if ttl_very_long_ms is None else ttl_very_long_ms

    async def index_all(self) -> list[IndexEntry]:
        """전체 포켓몬 인덱스 (id 오름차순)

        Raises:
            MalformedDataException: URL에서 id를 추출할 수 없는 항목이 있는 경우
        """
        data = await self.client.fetch_json(INDEX_ALL_PATH, ttl_ms=self.ttl_long_ms)
        entries = [
            IndexEntry(id=extract_id_from_url(r["url"]), name=r["name"], url=r["url"])
            for r in data.get("results", [])
        ]
        entries.sort(key=lambda e: e.id)
        return entries

    async def _fetch_generations(self) -> list[dict]:
        return list(
            await asyncio.gather(
                *(
                    self.client.fetch_json(
                        f"/generation/{gen_id}", ttl_ms=self.ttl_very_long_ms, retry_once=True
                    )
                    for gen_id in self.generation_ids
                )
            )
        )

    async def generation_index(self) -> dict[str, GenerationRef]:
        """종 이름 → 세대 매핑 (O(1) 조회)"""
        generations = await self._fetch_generations()

        mapping: dict[str, GenerationRef] = {}
        for g in generations:
            ref = GenerationRef(id=g["id"], name=g["name"])
            for species in g.get("pokemon_species", []):
                mapping[species["name"]] = ref
        return mapping

    async def generation_member_ids(self, generation_id: int) -> frozenset[int]:
        """해당 세대에 속한 species id 집합

        기본 variety의 포켓몬 id는 species id와 같으므로 IndexEntry.id로
        바로 필터링할 수 있습니다 (wormadam-plant = 413 = species wormadam).
        id가 10000번대인 폼/변종은 species id가 아니므로 포함되지 않습니다.
        """
        generations = await self._fetch_generations()
        for g in generations:
            if g["id"] == generation_id:
                return frozenset(
                    extract_id_from_url(species["url"]) for species in g.get("pokemon_species", [])
                )
        return frozenset()

    async def generations_list(self) -> list[GenerationRef]:
        """설정된 세대 목록 (id 오름차순)"""
        generations = await self._fetch_generations()
        refs = [GenerationRef(id=g["id"], name=g["name"]) for g in generations]
        refs.sort(key=lambda r: r.id)
        return refs

    async def types_list(self) -> list[str]:
        """필터 선택지로 쓸 타입 이름 목록"""
        data = await self.client.fetch_json("/type?limit=100", ttl_ms=self.ttl_very_long_ms)
        return [
            r["name"] for r in data.get("results", [])
            if r.get("name") and r["name"] not in NON_BATTLE_TYPES
        ]

    async def type_member_ids(self, type_name: str) -> frozenset[int]:
        """해당 타입에 속한 포켓몬 id 집합

        Raises:
            InvalidQueryException: 존재하지 않는 타입
        """
        try:
            data = await self.client.fetch_json(f"/type/{type_name}", ttl_ms=self.ttl_very_long_ms)
        except UpstreamNotFoundException as e:
            logger.info(f"[INDEX] Unknown type requested: {type_name}")
            raise InvalidQueryException(f"Unknown type: {type_name}", {"type": type_name}) from e

        return frozenset(
            extract_id_from_url(member["pokemon"]["url"])
            for member in data.get("pokemon", [])
        )
