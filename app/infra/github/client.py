import asyncio
import base64

import httpx

from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    GitHubAPIError,
    NotFoundError,
    RateLimitedError,
    TransportError,
)
from app.core.logging import get_logger
from app.domain.resume.schemas import RepositorySummary

logger = get_logger(__name__)

GITHUB_API_BASE = "https://api.github.com"
USER_AGENT = "GitHubResumeGenerator/1.0.0"

RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})

_client = httpx.AsyncClient(
    timeout=settings.github_timeout,
    headers={"User-Agent": USER_AGENT},
)


def _get_headers(token: str | None = None) -> dict[str, str]:
    """GitHub API 요청 헤더 생성

    Args:
        token: GitHub 토큰

    Returns:
        HTTP 헤더 딕셔너리
    """
    headers = {"Accept": "application/vnd.github.v3+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def close_client():
    """httpx 클라이언트 종료"""
    await _client.aclose()


def _resolve_token(token: str | None) -> str:
    """요청 토큰 또는 설정된 토큰 반환

    Raises:
        AuthenticationError: 사용 가능한 토큰이 없는 경우
    """
    resolved = token or settings.github_token
    if not resolved:
        raise AuthenticationError()
    return resolved


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return (
        response.status_code == 403
        and response.headers.get("X-RateLimit-Remaining") == "0"
    )


def _raise_for_status(response: httpx.Response, path: str) -> None:
    """HTTP 상태 코드를 GitHub 에러 타입으로 변환

    Raises:
        RateLimitedError: 429 또는 잔여 한도 0인 403
        AuthenticationError: 401, 403
        NotFoundError: 404
        TransportError: 그 외 4xx/5xx
    """
    status_code = response.status_code
    if status_code < 400:
        return

    if _is_rate_limited(response):
        raise RateLimitedError(f"GitHub API rate limit exceeded: {path}")
    if status_code in (401, 403):
        raise AuthenticationError(f"GitHub API authentication failed: HTTP {status_code}")
    if status_code == 404:
        raise NotFoundError(detail=f"GitHub resource not found: {path}")
    raise TransportError(f"GitHub API request failed: {path} HTTP {status_code}")


def _retryable_failure(response: httpx.Response, path: str) -> GitHubAPIError | None:
    """재시도 대상 응답이면 마지막 시도에 던질 에러 반환"""
    if _is_rate_limited(response):
        return RateLimitedError(f"GitHub API rate limit exceeded: {path}")
    if response.status_code in RETRYABLE_STATUS_CODES:
        return TransportError(f"GitHub API request failed: {path} HTTP {response.status_code}")
    return None


async def _get_json(path: str, token: str | None = None, params: dict | None = None):
    """GitHub REST API GET 요청, 실패 시 지수 백오프로 재시도

    Args:
        path: API 경로
        token: GitHub 토큰, 없으면 설정값 사용
        params: 쿼리 파라미터

    Returns:
        응답 JSON
    """
    headers = _get_headers(_resolve_token(token))
    url = f"{GITHUB_API_BASE}{path}"
    max_retries = max(settings.github_max_retries, 1)
    base_delay = settings.github_retry_base_delay

    for attempt in range(max_retries):
        try:
            response = await _client.get(url, headers=headers, params=params)
        except httpx.TimeoutException:
            failure: GitHubAPIError = TransportError(f"GitHub API request timed out: {path}")
        except httpx.RequestError as e:
            failure = TransportError(f"GitHub API request failed: {path} ({type(e).__name__})")
        else:
            retryable = _retryable_failure(response, path)
            if retryable is None:
                _raise_for_status(response, path)
                return response.json()
            failure = retryable

        if attempt == max_retries - 1:
            logger.error("GitHub 요청 최종 실패 path=%s attempts=%d", path, max_retries)
            raise failure

        delay = base_delay * (2**attempt)
        logger.warning(
            "GitHub 요청 재시도 path=%s attempt=%d delay=%.1f초 reason=%s",
            path,
            attempt + 1,
            delay,
            failure.error_code.value,
        )
        await asyncio.sleep(delay)


async def list_repositories(owner: str, token: str | None = None) -> list[RepositorySummary]:
    """사용자 레포지토리 목록 조회

    Args:
        owner: GitHub 유저네임
        token: GitHub 토큰

    Returns:
        최근 업데이트 순 레포지토리 목록, 최대 github_repos_per_page개
    """
    per_page = settings.github_repos_per_page
    params = {"sort": "updated", "direction": "desc", "per_page": per_page}

    data = await _get_json(f"/users/{owner}/repos", token, params=params)

    repositories = [
        RepositorySummary(
            name=repo["name"],
            description=repo.get("description"),
            primary_language=repo.get("language"),
            html_url=repo.get("html_url"),
        )
        for repo in data[:per_page]
        if repo.get("name")
    ]

    logger.info("레포지토리 목록 조회 완료 owner=%s count=%d", owner, len(repositories))
    return repositories


async def get_languages(owner: str, repo: str, token: str | None = None) -> dict[str, int]:
    """레포지토리 언어별 바이트 수 조회

    Args:
        owner: 레포지토리 소유자
        repo: 레포지토리 이름
        token: GitHub 토큰

    Returns:
        언어별 바이트 수 딕셔너리, 언어 정보가 없으면 빈 딕셔너리
    """
    try:
        data = await _get_json(f"/repos/{owner}/{repo}/languages", token)
    except NotFoundError:
        logger.info("언어 정보 없음 repo=%s/%s", owner, repo)
        return {}

    logger.info("언어 조회 완료 repo=%s/%s count=%d", owner, repo, len(data))
    return {str(name): int(size) for name, size in data.items()}


async def get_readme_text(owner: str, repo: str, token: str | None = None) -> str | None:
    """레포지토리 README 내용 조회

    Args:
        owner: 레포지토리 소유자
        repo: 레포지토리 이름
        token: GitHub 토큰

    Returns:
        디코딩된 README 텍스트, 없으면 None
    """
    try:
        data = await _get_json(f"/repos/{owner}/{repo}/readme", token)
    except NotFoundError:
        logger.info("README 없음 repo=%s/%s", owner, repo)
        return None

    if data.get("encoding") != "base64" or not data.get("content"):
        logger.info("README 인코딩 미지원 repo=%s/%s", owner, repo)
        return None

    content = base64.b64decode(data["content"]).decode("utf-8", errors="replace")
    logger.info("README 조회 완료 repo=%s/%s length=%d", owner, repo, len(content))
    return content
