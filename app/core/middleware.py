"""
HTTP 요청 로깅 미들웨어

- X-Request-ID 헤더 재사용 또는 새 request_id 발급, 응답 헤더로 반환
- 요청 시작/완료 로그, 5xx 응답은 warning 레벨
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.context import clear_context, set_request_id
from app.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SKIP_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico"})


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP 요청 로깅 및 request_id 관리 미들웨어"""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        fields = {"method": request.method, "path": request.url.path}
        started = time.perf_counter()

        logger.info("요청 시작", client_ip=_client_ip(request), **fields)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "요청 실패", error=type(e).__name__, duration_ms=_elapsed_ms(started), **fields
            )
            clear_context()
            raise

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "요청 완료",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
            **fields,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        clear_context()
        return response
