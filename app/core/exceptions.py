from enum import Enum

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings

RESUME_FAILED_MESSAGE = "Failed to generate resume"


class ErrorCode(str, Enum):
    """에러 코드 열거형"""

    INVALID_INPUT = "INVALID_INPUT"
    NO_REPOSITORIES = "NO_REPOSITORIES"

    GITHUB_UNAUTHORIZED = "GITHUB_UNAUTHORIZED"
    GITHUB_NOT_FOUND = "GITHUB_NOT_FOUND"
    GITHUB_RATE_LIMITED = "GITHUB_RATE_LIMITED"
    GITHUB_API_ERROR = "GITHUB_API_ERROR"

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    LLM_ERROR = "LLM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CustomException(Exception):
    def __init__(
        self,
        status_code: int,
        error_code: ErrorCode | str,
        message: str,
        detail: str | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail
        super().__init__(detail or message)


class InvalidInputError(CustomException):
    def __init__(self, message: str = "Username is required", detail: str | None = None):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.INVALID_INPUT,
            message=message,
            detail=detail,
        )


class NotFoundError(CustomException):
    def __init__(
        self,
        message: str = "GitHub user not found",
        detail: str | None = None,
        error_code: ErrorCode = ErrorCode.GITHUB_NOT_FOUND,
    ):
        super().__init__(
            status_code=404,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class GitHubAPIError(CustomException):
    def __init__(
        self,
        detail: str | None = None,
        error_code: ErrorCode = ErrorCode.GITHUB_API_ERROR,
    ):
        super().__init__(
            status_code=500,
            error_code=error_code,
            message=RESUME_FAILED_MESSAGE,
            detail=detail,
        )


class AuthenticationError(GitHubAPIError):
    def __init__(self, detail: str | None = "GitHub token not configured"):
        super().__init__(detail=detail, error_code=ErrorCode.GITHUB_UNAUTHORIZED)


class RateLimitedError(GitHubAPIError):
    def __init__(self, detail: str | None = "GitHub API rate limit exceeded"):
        super().__init__(detail=detail, error_code=ErrorCode.GITHUB_RATE_LIMITED)


class TransportError(GitHubAPIError):
    def __init__(self, detail: str | None = "GitHub API request failed"):
        super().__init__(detail=detail, error_code=ErrorCode.GITHUB_API_ERROR)


class ConfigurationError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=500,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            message=RESUME_FAILED_MESSAGE,
            detail=detail,
        )


class GenerationError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=500,
            error_code=ErrorCode.LLM_ERROR,
            message="Failed to generate description",
            detail=detail,
        )


class InternalError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=500,
            error_code=ErrorCode.INTERNAL_ERROR,
            message=RESUME_FAILED_MESSAGE,
            detail=detail,
        )


def _error_content(message: str, detail: str | None) -> dict:
    content = {"error": message}
    if detail and not settings.is_production:
        content["details"] = detail
    return content


def register_exception_handlers(app):
    @app.exception_handler(CustomException)
    async def custom_exception_handler(request: Request, exc: CustomException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_content(exc.message, exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content=_error_content("Invalid request body", detail),
        )
