"""FastAPI 앱 팩토리"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from src.core.config import settings
from src.core.exceptions import (
    MalformedDataException,
    PokedexException,
    PokemonNotFoundException,
    UpstreamException,
    ValidationException,
)
from src.core.logging import logger
from src.api import health_router, pokemon_router
from src.clients.http_client import shutdown_shared_http_client
from src.schemas.pokemon_schema import ErrorResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기"""
    logger.info("Starting application...")
    yield
    logger.info("Shutting down application...")
    await shutdown_shared_http_client()


def _status_code_for(exc: PokedexException) -> int:
    """예외 → HTTP 상태 코드

    - 존재하지 않는 포켓몬: 404 (일시적 실패와 구분)
    - 잘못된 파라미터: 400
    - 업스트림 실패/데이터 오류: 502
    """
    if isinstance(exc, PokemonNotFoundException):
        return 404
    if isinstance(exc, ValidationException):
        return 400
    if isinstance(exc, (UpstreamException, MalformedDataException)):
        return 502
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PokedexException)
    async def pokedex_exception_handler(request: Request, exc: PokedexException):
        status_code = _status_code_for(exc)
        if status_code >= 500:
            logger.error(f"[API] {request.url.path} failed: {exc}")
        else:
            logger.info(f"[API] {request.url.path} rejected: {exc}")
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(message=exc.message, error_code=exc.error_code).model_dump(),
        )


def create_app() -> FastAPI:
    """
    FastAPI 앱 생성 (Factory Pattern)

    Returns:
        FastAPI 앱 인스턴스
    """
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(pokemon_router)

    return app

# 앱 인스턴스 생성 (uvicorn이 로드할 수 있도록)
app = create_app()
