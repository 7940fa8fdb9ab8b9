"""Evolution Expansion - 포켓몬 이름 집합을 진화 계열 전체로 확장

이름 하나당 (풀을 통해):
1. /pokemon/{name} → species 이름 (폼/변종은 이름이 다를 수 있음)
2. /pokemon-species/{species} → evolution_chain.url
3. evolution chain 트리 → 평탄화 (species 이름 + species id)

체인은 species 단위이므로 인덱스(포켓몬 이름)와는 species id로 맞춥니다.
wormadam처럼 기본 포켓몬 이름(wormadam-plant)이 species 이름과 다른
경우에도 id는 같습니다.

한 이름의 해석이 실패하면(변종 404 포함) 그 이름만 [name]으로 대체하고
배치 전체는 계속 진행합니다.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from src.clients.poke_api_client import PokeApiClient
from src.core.config import settings
from src.core.exceptions import MalformedDataException
from src.core.logging import logger
from src.utils.url_utils import extract_id_from_url

from .pool import ConcurrencyPool, best_effort_map
from .result import ChainMember, FamilyExpansion


def flatten_evolution_chain(root: dict[str, Any]) -> list[ChainMember]:
    """진화 트리를 species 목록으로 평탄화

    명시적 스택을 사용하는 반복 DFS (pre-order). 재귀를 쓰지 않으므로
    깊거나 넓은 체인에서도 안전하며, 이미 본 이름은 다시 방문하지 않아
    순환/공유 자손이 있어도 루프나 중복이 생기지 않습니다.

    Examples:
        bulbasaur → ivysaur → venusaur  => bulbasaur(1), ivysaur(2), venusaur(3)
        eevee → (vaporeon, jolteon, ...) => eevee(133), vaporeon(134), ...

    Raises:
        MalformedDataException: species 이름이 없거나 species url에서 id를 추출할 수 없는 노드
    """
    ordered: list[ChainMember] = []
    seen: set[str] = set()
    stack: list[dict[str, Any]] = [root]

    while stack:
        node = stack.pop()
        species = (node or {}).get("species") or {}
        name = species.get("name")
        if not name:
            raise MalformedDataException("Evolution chain node without species name")
        if name in seen:
            continue

        seen.add(name)
        ordered.append(ChainMember(name=name, species_id=extract_id_from_url(species.get("url"))))
        # 자식 순서를 유지하기 위해 역순으로 push
        stack.extend(reversed(node.get("evolves_to") or []))

    return ordered


class EvolutionExpander:
    """진화 계열 확장기"""

    def __init__(
        self,
        client: PokeApiClient,
        pool: ConcurrencyPool,
        max_seeds: Optional[int] = None,
        ttl_long_ms: Optional[int] = None,
        ttl_very_long_ms: Optional[int] = None,
    ):
        """
        Args:
            client: PokeAPI fetch client
            pool: 요청 팬아웃에 사용할 동시성 풀
            max_seeds: 실제로 탐색할 시드 이름 상한 (기본 10)

        Raises:
            ValueError: max_seeds가 양수가 아닌 경우
        """
        self.client = client
        self.pool = pool
        self.max_seeds = settings.expansion_max_seeds if max_seeds is None else max_seeds
        if self.max_seeds <= 0:
            raise ValueError(f"max_seeds must be positive: {self.max_seeds}")
        self.ttl_long_ms = settings.ttl_long_ms if ttl_long_ms is None else ttl_long_ms
        self.ttl_very_long_ms = settings.ttl_very_long_ms if ttl_very_long_ms is None else ttl_very_long_ms

    async def fetch_pokemon(self, name_or_url: str) -> dict[str, Any]:
        path = name_or_url if name_or_url.startswith("http") else f"/pokemon/{name_or_url}"
        return await self.client.fetch_json(path, ttl_ms=self.ttl_long_ms)

    async def fetch_species(self, species_name: str) -> dict[str, Any]:
        return await self.client.fetch_json(
            f"/pokemon-species/{species_name}", ttl_ms=self.ttl_very_long_ms
        )

    async def fetch_chain(self, species: dict[str, Any]) -> list[ChainMember]:
        """species 레코드의 진화 체인을 평탄화된 목록으로 반환"""
        chain_url = (species.get("evolution_chain") or {}).get("url")
        if not chain_url:
            raise MalformedDataException(
                f"Species without evolution_chain: {species.get('name')}"
            )
        chain = await self.client.fetch_json(chain_url, ttl_ms=self.ttl_very_long_ms)
        return flatten_evolution_chain(chain.get("chain") or {})

    async def family_of(self, name: str) -> list[ChainMember]:
        """한 이름의 진화 계열 (3단계 해석)"""
        pokemon = await self.fetch_pokemon(name)
        species_name = (pokemon.get("species") or {}).get("name") or name
        species = await self.fetch_species(species_name)
        return await self.fetch_chain(species)

    async def expand_family(self, names: Iterable[str]) -> FamilyExpansion:
        """이름 집합을 진화 계열로 확장 (이름 + species id)

        시드는 소문자/중복 제거 후 앞에서부터 max_seeds개만 탐색합니다
        (광범위한 검색어로 인한 요청 폭증 방지). 탐색하지 않은 시드도
        결과 names에는 자기 자신으로 포함됩니다.

        Args:
            names: 시드 이름

        Returns:
            FamilyExpansion: 시드 + 계열 species 이름, 계열 species id
        """
        seeds: list[str] = []
        for raw in names:
            name = (raw or "").strip().lower()
            if name and name not in seeds:
                seeds.append(name)

        if not seeds:
            return FamilyExpansion()

        explored = seeds[: self.max_seeds]
        if len(seeds) > len(explored):
            logger.info(f"[EXPAND] Seeds capped: {len(seeds)} -> {len(explored)}")

        outcome = await best_effort_map(
            self.pool,
            explored,
            self.family_of,
            fallback=lambda name, exc: [],
            label="expand",
        )

        expansion = FamilyExpansion(names=set(seeds))
        for family in outcome.results:
            expansion.names.update(member.name for member in family)
            expansion.species_ids.update(member.species_id for member in family)

        logger.debug(
            f"[EXPAND] seeds={len(seeds)}, explored={len(explored)}, "
            f"degraded={outcome.failure_count}, expanded={len(expansion.names)}"
        )
        return expansion

    async def expand(self, names: Iterable[str]) -> set[str]:
        """이름 집합을 진화 계열 이름 집합으로 확장 (실패한 이름은 자기 자신만)"""
        return (await self.expand_family(names)).names
