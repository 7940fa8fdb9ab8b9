"""Engine Results - Standardized result types

검색/하이드레이트/상세 경로가 공통으로 사용하는 결과 타입입니다.
호출자에게 반환된 뒤에는 원본 업스트림 데이터를 참조하지 않습니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class IndexEntry:
    """전체 인덱스 항목 (/pokemon 목록에서 파생)"""

    id: int
    name: str
    url: str


@dataclass(frozen=True)
class GenerationRef:
    """세대 참조 (예: id=1, name="generation-i")"""

    id: int
    name: str


@dataclass(frozen=True)
class ChainMember:
    """진화 체인의 한 단계 (species 기준)

    기본 variety의 포켓몬 id는 species id와 같으므로 species_id로
    전체 인덱스 항목을 찾을 수 있습니다 (예: wormadam → wormadam-plant, 413).
    """

    name: str
    species_id: int


@dataclass
class FamilyExpansion:
    """진화 확장 결과

    Attributes:
        names: 시드 이름 + 탐색된 계열의 species 이름
        species_ids: 탐색된 계열의 species id
    """

    names: set[str] = field(default_factory=set)
    species_ids: set[int] = field(default_factory=set)


@dataclass
class CardItem:
    """목록 카드 표시용 포켓몬 요약

    Attributes:
        id: 포켓몬 id
        name: 포켓몬 이름 (소문자)
        image_url: 대표 이미지 (없으면 None)
        types: 타입 이름 (slot 순)
        generation: 세대 (세대 인덱스에 없으면 None)
    """

    id: int
    name: str
    image_url: Optional[str] = None
    types: list[str] = field(default_factory=list)
    generation: Optional[GenerationRef] = None


@dataclass
class SearchResult:
    """검색 결과 페이지

    Attributes:
        items: 현재 페이지의 하이드레이트된 카드 (id 오름차순)
        next_cursor: 다음 페이지 시작 오프셋, 마지막 페이지면 None
        total: 필터 적용 후 전체 후보 수
    """

    items: list[CardItem] = field(default_factory=list)
    next_cursor: Optional[int] = None
    total: int = 0


@dataclass
class StatItem:
    name: str
    value: int


@dataclass
class EvolutionItem:
    name: str
    image_url: Optional[str] = None


@dataclass
class PokemonDetail:
    """상세 화면용 포켓몬 정보

    species_name은 폼/변종(예: wormadam-plant)에서 name과 다를 수 있으며,
    진화 단계에서 현재 위치를 표시할 때 사용합니다.
    """

    id: int
    name: str
    species_name: str
    image_url: Optional[str] = None
    types: list[str] = field(default_factory=list)
    generation: Optional[GenerationRef] = None
    genus: Optional[str] = None
    flavor_text: Optional[str] = None
    stats: list[StatItem] = field(default_factory=list)
    evolutions: list[EvolutionItem] = field(default_factory=list)
