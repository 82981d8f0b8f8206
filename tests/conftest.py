"""테스트 공통 fixture"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from unittest.mock import patch  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.core.exceptions import ConfigurationError  # noqa: E402
from app.domain.resume.schemas import (  # noqa: E402
    ProjectMetadata,
    RepositoryDetail,
    RepositorySummary,
)
from app.infra.github.cache import DetailCache  # noqa: E402
from app.infra.llm.base import BaseDescriptionGenerator  # noqa: E402
from app.main import app  # noqa: E402


class FakeClock:
    """수동으로 진행하는 테스트용 시계"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubGenerator(BaseDescriptionGenerator):
    """테스트용 설명 생성기: 고정 응답 또는 예외"""

    def __init__(self, text: str | None = None, error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[ProjectMetadata] = []

    async def generate(self, metadata: ProjectMetadata) -> str:
        self.calls.append(metadata)
        if self.error is not None:
            raise self.error
        return self.text or f"{metadata.name} generated"


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def detail_cache(fake_clock) -> DetailCache:
    """TTL 300초, 가짜 시계를 쓰는 캐시"""
    return DetailCache(ttl_seconds=300, max_entries=100, clock=fake_clock)


@pytest.fixture
def sample_repositories() -> list[RepositorySummary]:
    """테스트용 레포지토리 목록"""
    return [
        RepositorySummary(
            name="demo",
            description="Demo dashboard.",
            primary_language="TypeScript",
            html_url="https://github.com/ab/demo",
        ),
        RepositorySummary(
            name="cli",
            description=None,
            primary_language="TypeScript",
            html_url="https://github.com/ab/cli",
        ),
    ]


@pytest.fixture
def sample_details() -> dict[str, RepositoryDetail]:
    """테스트용 레포지토리 상세 정보"""
    return {
        "demo": RepositoryDetail(
            languages={"TypeScript": 1000, "CSS": 200},
            readme="# Demo\n\nA   dashboard   for metrics\nignored line",
        ),
        "cli": RepositoryDetail(languages={"TypeScript": 500}, readme=None),
    }


@pytest.fixture
def unconfigured_generator() -> StubGenerator:
    """자격 증명이 없는 설명 생성기"""
    return StubGenerator(error=ConfigurationError("CODESTRAL_API_KEY environment variable not set"))


@pytest.fixture
def async_client():
    """비동기 HTTP 클라이언트"""
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def create_response():
    """GitHub API 응답 생성 helper"""

    def _create(status_code: int = 200, json=None, headers: dict | None = None):
        return httpx.Response(
            status_code,
            json=json,
            headers=headers,
            request=httpx.Request("GET", "https://api.github.com/test"),
        )

    return _create


@pytest.fixture
def mock_github_settings():
    """GitHub 클라이언트 설정 mock"""
    with patch("app.infra.github.client.settings") as mock:
        mock.github_token = "test-token"
        mock.github_max_retries = 3
        mock.github_retry_base_delay = 0.0
        mock.github_repos_per_page = 10
        yield mock

