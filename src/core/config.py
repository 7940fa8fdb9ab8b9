"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 업스트림 (PokeAPI)
    poke_api_base_url: str = "https://pokeapi.co/api/v2"
    upstream_timeout_ms: int = 8000
    upstream_retry_once: bool = True
    upstream_user_agent: str = "pokedex-bff/1.0"
    upstream_impersonate: str = "chrome110"
    upstream_max_clients: int = 20

    # 동시성 풀: PokeAPI에 동시에 나가는 요청 수 제한 (429 방지)
    pool_max_concurrent: int = 10

    # 인메모리 캐시
    # - TTL은 ms 단위 (업스트림 fetch 옵션과 단위 통일)
    # - cache_max_entries: LRU 상한 (장기 실행 시 메모리 증가 방지)
    cache_max_entries: int = 5000
    ttl_long_ms: int = 1000 * 60 * 60 * 12  # 12시간 (카탈로그/개별 포켓몬)
    ttl_very_long_ms: int = 1000 * 60 * 60 * 24  # 24시간 (세대/타입 등 준정적 데이터)

    # 세대 목록은 고정 범위 (업스트림에 새 세대가 추가되면 여기 갱신 필요)
    generation_ids: list[int] = [1, 2, 3, 4, 5, 6, 7, 8, 9]

    # 검색/확장 제한
    expansion_max_seeds: int = 10
    search_max_limit: int = 24
    hydrate_max_names: int = 40
    expand_max_names: int = 24

    # API
    api_title: str = "Pokédex BFF"
    api_version: str = "1.0.0"
    api_description: str = "PokeAPI를 검색/필터/상세 뷰로 집계하는 BFF입니다."

    # 로깅
    log_level: str = "INFO"

    @field_validator("upstream_timeout_ms", "ttl_long_ms", "ttl_very_long_ms")
    @classmethod
    def validate_positive_ms(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeouts and TTLs must be positive")
        return v

    @field_validator("pool_max_concurrent", "upstream_max_clients")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("concurrency limits must be positive")
        return v

    @field_validator("cache_max_entries")
    @classmethod
    def validate_cache_max_entries(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache_max_entries must be positive")
        return v

    @field_validator(
        "expansion_max_seeds", "search_max_limit", "hydrate_max_names", "expand_max_names"
    )
    @classmethod
    def validate_limits(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("search/expansion limits must be positive")
        return v

    @field_validator("generation_ids")
    @classmethod
    def validate_generation_ids(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("generation_ids must not be empty")
        if any(i <= 0 for i in v):
            raise ValueError("generation_ids must be positive integers")
        return v

    @field_validator("poke_api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("poke_api_base_url must start with http:// or https://")
        return v.rstrip("/")

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
