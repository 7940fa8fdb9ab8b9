"""Pydantic 스키마 정의 (요청 검증 / 응답 직렬화)"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime

from src.core.config import settings


def _validate_names(v: List[str]) -> List[str]:
    cleaned = [name.strip().lower() for name in v]
    if any(not name for name in cleaned):
        raise ValueError("이름은 공백만으로 구성될 수 없습니다")
    for name in cleaned:
        if "/" in name or "?" in name or "#" in name:
            raise ValueError(f"이름에 허용되지 않는 문자가 포함되어 있습니다: {name}")
    return cleaned


class HydrateRequest(BaseModel):
    """카드 하이드레이트 요청"""
    names: List[str] = Field(
        ..., min_length=1, max_length=settings.hydrate_max_names, description="포켓몬 이름 목록"
    )

    @field_validator("names")
    @classmethod
    def validate_names(cls, v: List[str]) -> List[str]:
        return _validate_names(v)


class ExpandRequest(BaseModel):
    """진화 계열 확장 요청"""
    names: List[str] = Field(
        ..., min_length=1, max_length=settings.expand_max_names, description="시드 이름 목록"
    )

    @field_validator("names")
    @classmethod
    def validate_names(cls, v: List[str]) -> List[str]:
        return _validate_names(v)


class GenerationInfo(BaseModel):
    """세대 정보"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., ge=1, description="세대 id")
    name: str = Field(..., description="세대 이름 (예: generation-i)")


class IndexItem(BaseModel):
    """전체 인덱스 항목"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., ge=1)
    name: str
    url: str


class PokemonCard(BaseModel):
    """목록 카드"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., ge=1, description="포켓몬 id")
    name: str = Field(..., description="포켓몬 이름")
    image_url: Optional[str] = Field(None, description="대표 이미지 URL")
    types: List[str] = Field(default_factory=list, description="타입 (slot 순)")
    generation: Optional[GenerationInfo] = Field(None, description="세대")


class SearchResponse(BaseModel):
    """검색 응답"""
    model_config = ConfigDict(from_attributes=True)

    items: List[PokemonCard] = Field(default_factory=list, description="현재 페이지")
    next_cursor: Optional[int] = Field(None, ge=0, description="다음 페이지 커서 (없으면 null)")
    total: int = Field(..., ge=0, description="필터 적용 후 전체 개수")


class ExpandResponse(BaseModel):
    """진화 계열 확장 응답"""
    names: List[str] = Field(default_factory=list)


class StatInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: int


class EvolutionInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    image_url: Optional[str] = None


class PokemonDetailResponse(BaseModel):
    """상세 응답"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., ge=1)
    name: str
    species_name: str = Field(..., description="종 이름 (폼/변종은 name과 다를 수 있음)")
    image_url: Optional[str] = None
    types: List[str] = Field(default_factory=list)
    generation: Optional[GenerationInfo] = None
    genus: Optional[str] = None
    flavor_text: Optional[str] = None
    stats: List[StatInfo] = Field(default_factory=list)
    evolutions: List[EvolutionInfo] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """오류 응답"""
    status: str = Field("error", description="항상 error")
    message: str = Field(..., description="오류 메시지")
    error_code: str = Field(..., description="에러 코드")


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    cache: dict = Field(default_factory=dict, description="캐시 사용 현황")
    pool: dict = Field(default_factory=dict, description="동시성 풀 상태")
