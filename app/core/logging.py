"""
structlog 기반 로깅 설정

- 개발 환경: 컬러풀한 콘솔 출력, 프로덕션 환경: JSON 출력
- request_id, username 컨텍스트 자동 주입
- stdlib 스타일 위치 인자(%s) 포맷 지원
- GitHub 토큰과 API 키는 환경과 무관하게 항상 마스킹
"""

import logging
import re
import sys

import structlog

from app.core.config import settings
from app.core.context import get_log_context

SENSITIVE_PATTERNS = [
    (re.compile(r"\b(gh[pousr]_)[A-Za-z0-9]{20,}"), r"\1***"),
    (re.compile(r"\b(github_pat_)[A-Za-z0-9_]{20,}"), r"\1***"),
    (re.compile(r"(Bearer\s+)[^\s\"']+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(token=)[^&\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(api[_-]?key=)[^&\s]+", re.IGNORECASE), r"\1***"),
]

# 요청마다 디버그 로그를 쏟아내는 라이브러리
NOISY_LOGGERS = (
    "httpcore",
    "httpx",
    "urllib3",
    "anyio",
    "openai",
    "google_genai",
    "langchain",
    "langgraph",
    "langfuse",
)


def mask_sensitive_data(value: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def add_context_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """요청 컨텍스트를 로그에 자동 주입, 명시한 값이 우선"""
    for key, value in get_log_context().items():
        event_dict.setdefault(key, value)
    return event_dict


def mask_sensitive_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = mask_sensitive_data(value)
    return event_dict


def _build_renderer(shared_processors: list):
    if settings.is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def setup_logging(level: str | None = None) -> None:
    """structlog과 루트 로거 설정 초기화"""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    shared_processors: list = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        add_context_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        mask_sensitive_processor,
    ]
    renderer = _build_renderer(shared_processors)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # uvicorn 로그도 루트 핸들러 하나로 출력
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).handlers.clear()

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
