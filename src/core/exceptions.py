"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class PokedexException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 업스트림(PokeAPI) 관련 예외 - fetch client가 1회 재시도하는 대상
class UpstreamException(PokedexException):
    """업스트림 호출 실패의 기본 클래스"""
    def __init__(self, message: str, error_code: str = "UPSTREAM_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "UPSTREAM_ERROR", details)


class UpstreamTransportException(UpstreamException):
    """네트워크/전송 계층 실패"""
    def __init__(self, url: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Transport failure for {url}: {reason}"
        super().__init__(message, "UPSTREAM_TRANSPORT_ERROR",
                        details or {"url": url, "reason": reason})


class UpstreamTimeoutException(UpstreamException):
    """요청 타임아웃 (요청은 이미 취소된 상태)"""
    def __init__(self, url: str, timeout_ms: int, details: Optional[dict[str, Any]] = None):
        message = f"Upstream request timed out after {timeout_ms}ms: {url}"
        super().__init__(message, "UPSTREAM_TIMEOUT",
                        details or {"url": url, "timeout_ms": timeout_ms})


class UpstreamStatusException(UpstreamException):
    """2xx가 아닌 응답"""
    def __init__(self, url: str, status: int, body: str = "", details: Optional[dict[str, Any]] = None):
        message = f"PokeAPI {status} {url}" + (f" - {body}" if body else "")
        self.status = status
        self.url = url
        self.body = body
        super().__init__(message, "UPSTREAM_STATUS_ERROR",
                        details or {"url": url, "status": status, "body": body})


class UpstreamNotFoundException(UpstreamStatusException):
    """404 응답 (존재하지 않는 리소스)"""
    def __init__(self, url: str, body: str = "", details: Optional[dict[str, Any]] = None):
        super().__init__(url, 404, body, details)
        self.error_code = "UPSTREAM_NOT_FOUND"


class UpstreamParseException(UpstreamException):
    """응답 JSON 파싱 실패"""
    def __init__(self, url: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to parse upstream JSON from {url}: {reason}"
        super().__init__(message, "UPSTREAM_PARSE_ERROR",
                        details or {"url": url, "reason": reason})


# 데이터 관련 예외 - 재시도해도 해결되지 않으므로 항상 terminal
class MalformedDataException(PokedexException):
    """업스트림 데이터 형식 오류 (예: URL에서 id 추출 실패)"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Malformed upstream data: {reason}"
        super().__init__(message, "MALFORMED_DATA", details or {"reason": reason})


# 동시성 풀 예외
class PoolJobException(PokedexException):
    """풀 작업에서 발생한 비표준 예외를 감싼 예외"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Pool job failed: {reason}"
        super().__init__(message, "POOL_JOB_ERROR", details or {"reason": reason})


# 조회 관련 예외
class PokemonNotFoundException(PokedexException):
    """포켓몬을 찾을 수 없을 때 (일시적 실패와 구분)"""
    def __init__(self, name: str, details: Optional[dict[str, Any]] = None):
        message = f"Pokemon not found: {name}"
        super().__init__(message, "NOT_FOUND", details or {"name": name})


# 유효성 검증 관련 예외
class ValidationException(PokedexException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})


class InvalidQueryException(ValidationException):
    """유효하지 않은 검색 파라미터"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("query", reason, details)
