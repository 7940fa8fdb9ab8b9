"""로깅 설정

`pokedex_bff` 로거 하나를 모든 모듈이 공유합니다.
ENVIRONMENT=production 이면 짧은 포맷과 최소 INFO 레벨을 사용합니다.
"""
import logging
import os
import sys
from typing import Optional

from src.core.config import settings

LOGGER_NAME = "pokedex_bff"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LINE_BREAKS = str.maketrans({"\r": " ", "\n": " "})

_FORMATS = {
    "production": "%(asctime)s [%(levelname)s] %(message)s",
    "development": "%(asctime)s [%(levelname)s] %(name)s %(module)s.%(funcName)s:%(lineno)d | %(message)s",
}


def _environment() -> str:
    env = os.getenv("ENVIRONMENT", "development").lower()
    return env if env in _FORMATS else "development"


def _resolve_level(name: Optional[str], environment: str) -> int:
    """레벨 이름 -> logging 상수 (알 수 없는 이름은 INFO)"""
    level = logging.getLevelName((settings.log_level if name is None else name).upper())
    if not isinstance(level, int):
        level = logging.INFO
    if environment == "production":
        level = max(level, logging.INFO)
    return level


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """공용 로거 구성

    여러 번 호출해도 stdout 핸들러는 하나만 유지되고, 레벨과 포맷만 갱신됩니다.
    """
    environment = _environment()
    resolved = _resolve_level(level, environment)

    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(resolved)

    handler = next((h for h in log.handlers if getattr(h, "_pokedex_stdout", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler._pokedex_stdout = True
        log.addHandler(handler)

    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt=_FORMATS[environment], datefmt=DATE_FORMAT))
    return log


logger = setup_logging()


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """사용자 입력을 한 줄로 만들고 길이를 제한

    Args:
        value: 로깅할 문자열
        max_length: 최대 길이

    Returns:
        정리된 문자열 (빈 값은 "[empty]")
    """
    if not value:
        return "[empty]"

    flattened = value.translate(_LINE_BREAKS)
    if len(flattened) > max_length:
        return flattened[:max_length] + "..."
    return flattened
