"""Search Orchestrator - Main Engine Entry Point

검색 파이프라인을 조율합니다:
1. 전체 인덱스 + 세대 인덱스 로드 (캐시 경유)
2. 세대 필터 (가장 저렴하고 효과가 큰 필터)
3. 이름/id 검색 + 진화 계열 확장
4. 타입 필터 (별도 업스트림 조회가 필요하므로 마지막)
5. 커서 페이지네이션
6. 현재 페이지만 하이드레이트 (풀 경유) 후 id 순 재정렬

세션 상태를 두지 않고 매 호출마다 (캐시된) 업스트림 데이터에서
후보 집합을 다시 계산합니다.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence

from src.clients.poke_api_client import PokeApiClient
from src.core.config import settings
from src.core.exceptions import (
    InvalidQueryException,
    PokemonNotFoundException,
    UpstreamNotFoundException,
)
from src.core.logging import logger, sanitize_for_log
from src.utils.image_utils import get_pokemon_image_url
from src.utils.text_utils import clean_flavor_text, normalize_query, parse_pokemon_id

from .evolution import EvolutionExpander
from .indexes import CatalogIndex
from .pool import ConcurrencyPool, best_effort_map
from .result import (
    CardItem,
    EvolutionItem,
    GenerationRef,
    IndexEntry,
    PokemonDetail,
    SearchResult,
    StatItem,
)

DETAIL_LANGUAGE = "en"


class SearchOrchestrator:
    """포켓몬 검색/집계 엔진

    fetch client와 풀은 생성자로 주입받습니다. 같은 인스턴스를 여러
    요청이 동시에 사용해도 안전합니다 (요청 간 공유 상태 없음).
    """

    def __init__(
        self,
        client: PokeApiClient,
        pool: ConcurrencyPool,
        index: Optional[CatalogIndex] = None,
        expander: Optional[EvolutionExpander] = None,
    ):
        """
        Args:
            client: PokeAPI fetch client
            pool: 하이드레이트/확장 팬아웃용 동시성 풀
            index: 인덱스 빌더 (없으면 client로 생성)
            expander: 진화 확장기 (없으면 client/pool로 생성)
        """
        if client is None:
            raise ValueError("client must not be None")
        if pool is None:
            raise ValueError("pool must not be None")

        self.client = client
        self.pool = pool
        self.index = index or CatalogIndex(client)
        self.expander = expander or EvolutionExpander(client, pool)

    # ------------------------------------------------------------------
    # 인덱스 조회
    # ------------------------------------------------------------------

    async def index_all(self) -> list[IndexEntry]:
        return await self.index.index_all()

    async def generation_index(self) -> dict[str, GenerationRef]:
        return await self.index.generation_index()

    async def types_list(self) -> list[str]:
        return await self.index.types_list()

    async def generations_list(self) -> list[GenerationRef]:
        return await self.index.generations_list()

    # ------------------------------------------------------------------
    # 하이드레이트 / 확장
    # ------------------------------------------------------------------

    async def hydrate(self, names: Sequence[str]) -> list[CardItem]:
        """이름 목록을 카드 아이템으로 변환 (id 오름차순)

        Raises:
            InvalidQueryException: 이름 개수가 1..hydrate_max_names 범위를 벗어난 경우
            PokemonNotFoundException: 존재하지 않는 이름이 포함된 경우
            UpstreamException: 개별 조회가 최종 실패한 경우
        """
        cleaned = [normalize_query(n) for n in names]
        if not cleaned or len(cleaned) > settings.hydrate_max_names or not all(cleaned):
            raise InvalidQueryException(
                f"names must contain 1..{settings.hydrate_max_names} non-empty entries"
            )
        return await self._hydrate_names(cleaned)

    async def expand_related(self, names: Sequence[str]) -> list[str]:
        """이름 목록의 진화 계열 전체 (정렬된 목록)"""
        cleaned = [normalize_query(n) for n in names]
        if not cleaned or len(cleaned) > settings.expand_max_names or not all(cleaned):
            raise InvalidQueryException(
                f"names must contain 1..{settings.expand_max_names} non-empty entries"
            )
        return sorted(await self.expander.expand(cleaned))

    async def _hydrate_names(self, names: Sequence[str]) -> list[CardItem]:
        generations = await self.index.generation_index()
        items = await asyncio.gather(
            *(self.pool.run(lambda n=name: self._card(n, generations)) for name in names)
        )
        # 풀은 완료 순서를 보장하지 않으므로 id로 재정렬
        return sorted(items, key=lambda item: item.id)

    async def _card(self, name: str, generations: dict[str, GenerationRef]) -> CardItem:
        try:
            pokemon = await self.expander.fetch_pokemon(name)
        except UpstreamNotFoundException as e:
            raise PokemonNotFoundException(name) from e
        return self._to_card(pokemon, generations)

    @staticmethod
    def _sorted_types(pokemon: dict[str, Any]) -> list[str]:
        slots = sorted(pokemon.get("types") or [], key=lambda t: t.get("slot", 0))
        return [t["type"]["name"] for t in slots]

    def _to_card(self, pokemon: dict[str, Any], generations: dict[str, GenerationRef]) -> CardItem:
        species_name = (pokemon.get("species") or {}).get("name") or pokemon["name"]
        return CardItem(
            id=pokemon["id"],
            name=pokemon["name"],
            image_url=get_pokemon_image_url(pokemon.get("sprites")),
            types=self._sorted_types(pokemon),
            generation=generations.get(species_name) or generations.get(pokemon["name"]),
        )

    # ------------------------------------------------------------------
    # 검색
    # ------------------------------------------------------------------

    async def search(
        self,
        q: Optional[str] = None,
        type_name: Optional[str] = None,
        generation: Optional[str] = None,
        cursor: int = 0,
        limit: int = 24,
    ) -> SearchResult:
        """통합 검색 실행

        Args:
            q: 이름 부분 문자열 또는 id ("25", "#25", "025")
            type_name: 타입 필터 (예: "water")
            generation: 세대 필터 (이름 "generation-i" 또는 id "1")
            cursor: 후보 목록 오프셋 (>= 0)
            limit: 페이지 크기 (1..search_max_limit)

        Returns:
            SearchResult: 현재 페이지 + 다음 커서 + 전체 후보 수

        Raises:
            InvalidQueryException: 파라미터가 유효하지 않거나 알 수 없는 타입/세대
        """
        if not isinstance(cursor, int) or cursor < 0:
            raise InvalidQueryException(f"cursor must be >= 0 (got {cursor})")
        if not isinstance(limit, int) or not 1 <= limit <= settings.search_max_limit:
            raise InvalidQueryException(
                f"limit must be between 1 and {settings.search_max_limit} (got {limit})"
            )

        query = normalize_query(q)
        type_name = normalize_query(type_name)
        generation = normalize_query(generation)

        logger.info(
            f"[SEARCH] q='{sanitize_for_log(query)}', type='{type_name}', "
            f"generation='{generation}', cursor={cursor}, limit={limit}"
        )

        candidates = await self.index.index_all()

        # 1. 세대 필터
        if generation:
            candidates = await self._filter_by_generation(candidates, generation)

        # 2. 이름/id 검색 + 진화 확장
        if query:
            candidates = await self._filter_by_query(candidates, query)

        # 3. 타입 필터 (후보가 남아 있을 때만 업스트림 조회)
        if type_name and candidates:
            member_ids = await self.index.type_member_ids(type_name)
            candidates = [entry for entry in candidates if entry.id in member_ids]

        # 4. 페이지네이션
        total = len(candidates)
        page = candidates[cursor: cursor + limit]

        # 5. 현재 페이지만 하이드레이트
        items = await self._hydrate_names([entry.name for entry in page]) if page else []

        next_cursor = cursor + limit if cursor + limit < total else None
        logger.info(f"[SEARCH] total={total}, page={len(items)}, next_cursor={next_cursor}")
        return SearchResult(items=items, next_cursor=next_cursor, total=total)

    async def _resolve_generation(self, generation: str) -> GenerationRef:
        generations = await self.index.generations_list()
        for ref in generations:
            if ref.name == generation or str(ref.id) == generation:
                return ref
        raise InvalidQueryException(f"Unknown generation: {generation}", {"generation": generation})

    async def _filter_by_generation(
        self, candidates: list[IndexEntry], generation: str
    ) -> list[IndexEntry]:
        target = await self._resolve_generation(generation)
        member_ids = await self.index.generation_member_ids(target.id)
        return [entry for entry in candidates if entry.id in member_ids]

    async def _filter_by_query(self, candidates: list[IndexEntry], query: str) -> list[IndexEntry]:
        pokemon_id = parse_pokemon_id(query)
        if pokemon_id is not None:
            matches = [entry for entry in candidates if entry.id == pokemon_id]
        else:
            matches = [entry for entry in candidates if query in entry.name]

        if not matches:
            return []

        # 체인은 species 단위이므로 id로 맞추고, 시드(폼/변종)는 이름으로 유지
        family = await self.expander.expand_family([entry.name for entry in matches])
        return [
            entry for entry in candidates
            if entry.id in family.species_ids or entry.name in family.names
        ]

    # ------------------------------------------------------------------
    # 상세
    # ------------------------------------------------------------------

    async def detail(self, name: str) -> PokemonDetail:
        """포켓몬 상세 정보

        /pokemon/{name}이 없으면 같은 이름의 species에서 기본 variety로
        폴백합니다 (예: wormadam → wormadam-plant).

        Raises:
            PokemonNotFoundException: pokemon/species 모두 존재하지 않는 경우
            UpstreamException: 일시적 업스트림 실패
        """
        name = normalize_query(name)
        if not name:
            raise InvalidQueryException("name must not be empty")

        try:
            pokemon = await self.expander.fetch_pokemon(name)
        except UpstreamNotFoundException:
            logger.info(f"[DETAIL] /pokemon/{name} not found, trying species default variety")
            pokemon = await self._default_variety(name)

        species_name = (pokemon.get("species") or {}).get("name") or pokemon["name"]
        species = await self.expander.fetch_species(species_name)
        chain = await self.expander.fetch_chain(species)
        generations = await self.index.generation_index()
        evolutions = await self._evolution_items([member.name for member in chain])

        return PokemonDetail(
            id=pokemon["id"],
            name=pokemon["name"],
            species_name=species_name,
            image_url=get_pokemon_image_url(pokemon.get("sprites")),
            types=self._sorted_types(pokemon),
            generation=generations.get(species_name),
            genus=self._english_genus(species),
            flavor_text=self._english_flavor_text(species),
            stats=[
                StatItem(name=s["stat"]["name"], value=s["base_stat"])
                for s in pokemon.get("stats") or []
            ],
            evolutions=evolutions,
        )

    async def _default_variety(self, species_name: str) -> dict[str, Any]:
        try:
            species = await self.expander.fetch_species(species_name)
        except UpstreamNotFoundException as e:
            raise PokemonNotFoundException(species_name) from e

        for variety in species.get("varieties") or []:
            if variety.get("is_default"):
                return await self.expander.fetch_pokemon(variety["pokemon"]["url"])

        raise PokemonNotFoundException(species_name, {"reason": "no default variety"})

    async def _evolution_image(self, species_name: str) -> EvolutionItem:
        try:
            pokemon = await self.expander.fetch_pokemon(species_name)
        except UpstreamNotFoundException:
            pokemon = await self._default_variety(species_name)
        return EvolutionItem(name=species_name, image_url=get_pokemon_image_url(pokemon.get("sprites")))

    async def _evolution_items(self, names: list[str]) -> list[EvolutionItem]:
        outcome = await best_effort_map(
            self.pool,
            names,
            self._evolution_image,
            fallback=lambda name, exc: EvolutionItem(name=name, image_url=None),
            label="evolutions",
        )
        return outcome.results

    @staticmethod
    def _english_genus(species: dict[str, Any]) -> Optional[str]:
        for entry in species.get("genera") or []:
            if (entry.get("language") or {}).get("name") == DETAIL_LANGUAGE:
                return entry.get("genus")
        return None

    @staticmethod
    def _english_flavor_text(species: dict[str, Any]) -> Optional[str]:
        for entry in species.get("flavor_text_entries") or []:
            if (entry.get("language") or {}).get("name") == DETAIL_LANGUAGE:
                return clean_flavor_text(entry.get("flavor_text"))
        return None
