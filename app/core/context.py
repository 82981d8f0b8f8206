"""
요청 컨텍스트 관리 모듈

contextvars로 request_id와 조회 대상 GitHub username을 요청 단위로 보관하고,
로그 프로세서가 get_log_context()로 한 번에 읽어간다.
"""

import re
import uuid
from contextvars import ContextVar

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
username_var: ContextVar[str | None] = ContextVar("username", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_var,
    "username": username_var,
}

# 클라이언트가 보낸 X-Request-ID는 이 형식일 때만 재사용
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def get_request_id() -> str | None:
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """
    request_id 설정

    값이 없거나 형식이 맞지 않으면 8자리 UUID 생성
    """
    if not request_id or not REQUEST_ID_PATTERN.match(request_id):
        request_id = uuid.uuid4().hex[:8]
    request_id_var.set(request_id)
    return request_id


def set_username(username: str | None) -> None:
    username_var.set(username or None)


def get_log_context() -> dict[str, str]:
    """값이 설정된 컨텍스트 변수만 모아 반환"""
    context = {}
    for key, var in _CONTEXT_VARS.items():
        value = var.get()
        if value:
            context[key] = value
    return context


def clear_context() -> None:
    """모든 컨텍스트 변수 초기화"""
    for var in _CONTEXT_VARS.values():
        var.set(None)
