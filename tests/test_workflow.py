"""워크플로우 노드 및 실행 테스트"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from app.core.context import clear_context, get_log_context
from app.core.exceptions import (
    AuthenticationError,
    ErrorCode,
    InvalidInputError,
    NotFoundError,
    RateLimitedError,
    TransportError,
)
from app.domain.resume.schemas import RepositoryDetail, RepositorySummary, ResumeState
from app.domain.resume.workflow import (
    aggregate_skills_node,
    list_repositories_node,
    run_resume_workflow,
    should_continue,
)
from app.infra.llm.client import LLMDescriptionGenerator
from tests.conftest import StubGenerator


def _languages_for(mapping: dict[str, dict[str, int]], delays: dict[str, float] | None = None):
    """레포지토리 이름별 언어 응답, 지연을 주어 완료 순서를 뒤섞음"""
    delays = delays or {}

    async def _get_languages(owner, repo, token=None):
        await asyncio.sleep(delays.get(repo, 0))
        return mapping[repo]

    return _get_languages


class TestListRepositoriesNode:
    """list_repositories_node 함수 테스트"""

    @pytest.mark.asyncio
    async def test_success(self, sample_repositories):
        """목록 조회 성공"""
        with patch(
            "app.domain.resume.workflow.list_repositories",
            new_callable=AsyncMock,
            return_value=sample_repositories,
        ):
            result = await list_repositories_node(ResumeState(username="ab"))

        assert result["repositories"] == sample_repositories
        assert result.get("error_code") is None

    @pytest.mark.asyncio
    async def test_empty_list(self):
        """빈 목록은 NO_REPOSITORIES 에러 상태"""
        with patch(
            "app.domain.resume.workflow.list_repositories",
            new_callable=AsyncMock,
            return_value=[],
        ):
            result = await list_repositories_node(ResumeState(username="ab"))

        assert result["error_code"] == ErrorCode.NO_REPOSITORIES.value
        assert result["error_message"] == "No public repositories found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,expected_code",
        [
            (NotFoundError(detail="Not Found: /users/ab/repos"), ErrorCode.GITHUB_NOT_FOUND),
            (AuthenticationError(), ErrorCode.GITHUB_UNAUTHORIZED),
            (RateLimitedError(), ErrorCode.GITHUB_RATE_LIMITED),
            (TransportError(), ErrorCode.GITHUB_API_ERROR),
        ],
    )
    async def test_client_errors(self, error, expected_code):
        """클라이언트 에러는 에러 상태로 기록"""
        with patch(
            "app.domain.resume.workflow.list_repositories",
            new_callable=AsyncMock,
            side_effect=error,
        ):
            result = await list_repositories_node(ResumeState(username="ab"))

        assert result["error_code"] == expected_code.value
        assert result["error_message"] == error.detail


class TestAggregateSkillsNode:
    """aggregate_skills_node 함수 테스트"""

    @pytest.mark.asyncio
    async def test_aggregates_from_details(self, sample_repositories, sample_details):
        """상세 정보로 스킬 집계"""
        state = ResumeState(
            username="ab",
            repositories=sample_repositories,
            details=[sample_details["demo"], sample_details["cli"]],
        )

        result = await aggregate_skills_node(state)

        assert result["skills"] == {"TypeScript": 100, "CSS": 50}


class TestShouldContinue:
    """should_continue 함수 테스트"""

    def test_continue_without_error(self):
        assert should_continue(ResumeState(username="ab")) == "fetch_details"

    def test_end_on_error(self):
        state = ResumeState(username="ab", error_code=ErrorCode.NO_REPOSITORIES.value)
        assert should_continue(state) == "end"


class TestRunResumeWorkflow:
    """run_resume_workflow 함수 테스트"""

    @pytest.mark.asyncio
    async def test_full_run(self, sample_repositories, detail_cache):
        """목록 조회부터 설명 생성까지 전체 실행"""
        generator = StubGenerator()

        with (
            patch(
                "app.domain.resume.workflow.list_repositories",
                new_callable=AsyncMock,
                return_value=sample_repositories,
            ) as mock_list,
            patch(
                "app.domain.resume.service.get_languages",
                side_effect=_languages_for(
                    {"demo": {"TypeScript": 100, "CSS": 50}, "cli": {"TypeScript": 10}}
                ),
            ),
            patch(
                "app.domain.resume.service.get_readme_text",
                new_callable=AsyncMock,
                return_value="# Title",
            ),
        ):
            result = await run_resume_workflow("  ab  ", detail_cache, generator)

        mock_list.assert_awaited_once_with("ab")
        assert result.skills == {"TypeScript": 100, "CSS": 50}
        assert [p.name for p in result.projects] == ["demo", "cli"]
        assert result.projects[0].description.startswith("Description: demo generated")
        assert result.projects[0].source_url == "https://github.com/ab/demo"
        assert len(detail_cache) == 2

    @pytest.mark.asyncio
    async def test_preserves_listing_order(self, detail_cache):
        """상세 조회 완료 순서와 무관하게 목록 순서 유지"""
        repositories = [RepositorySummary(name=name) for name in ["slow", "medium", "fast"]]
        languages = {"slow": {"Go": 1}, "medium": {"Rust": 1}, "fast": {"C": 1}}
        delays = {"slow": 0.03, "medium": 0.02, "fast": 0.0}

        with (
            patch(
                "app.domain.resume.workflow.list_repositories",
                new_callable=AsyncMock,
                return_value=repositories,
            ),
            patch(
                "app.domain.resume.service.get_languages",
                side_effect=_languages_for(languages, delays),
            ),
            patch(
                "app.domain.resume.service.get_readme_text",
                new_callable=AsyncMock,
                return_value=None,
            ),
        ):
            result = await run_resume_workflow("ab", detail_cache, None)

        assert [p.name for p in result.projects] == ["slow", "medium", "fast"]
        assert result.projects[0].description.startswith("slow: No description provided.")
        assert "Technologies: Go." in result.projects[0].description

    @pytest.mark.asyncio
    async def test_no_repositories(self, detail_cache):
        """공개 레포지토리가 없으면 NotFoundError"""
        with patch(
            "app.domain.resume.workflow.list_repositories",
            new_callable=AsyncMock,
            return_value=[],
        ):
            with pytest.raises(NotFoundError) as exc_info:
                await run_resume_workflow("ab", detail_cache)

        assert exc_info.value.message == "No public repositories found"
        assert exc_info.value.error_code == ErrorCode.NO_REPOSITORIES

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,expected_error",
        [
            (NotFoundError(detail="Not Found"), NotFoundError),
            (AuthenticationError(), AuthenticationError),
            (RateLimitedError(), RateLimitedError),
            (TransportError("GitHub API request timed out"), TransportError),
        ],
    )
    async def test_listing_errors_raised(self, detail_cache, error, expected_error):
        """목록 조회 실패는 같은 종류의 예외로 전달"""
        with patch(
            "app.domain.resume.workflow.list_repositories",
            new_callable=AsyncMock,
            side_effect=error,
        ):
            with pytest.raises(expected_error) as exc_info:
                await run_resume_workflow("ab", detail_cache)

        assert exc_info.value.detail == error.detail

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", [None, "", "   "])
    async def test_invalid_username_skips_github(self, detail_cache, username):
        """유저네임이 없으면 GitHub 호출 없이 InvalidInputError"""
        with patch(
            "app.domain.resume.workflow.list_repositories", new_callable=AsyncMock
        ) as mock_list:
            with pytest.raises(InvalidInputError):
                await run_resume_workflow(username, detail_cache)

        mock_list.assert_not_called()

    @pytest.mark.asyncio
    async def test_detail_failure_keeps_project(self, sample_repositories, detail_cache):
        """레포지토리 하나의 언어 조회 실패도 프로젝트 목록에 포함"""

        async def _get_languages(owner, repo, token=None):
            if repo == "demo":
                raise RateLimitedError()
            return {"Python": 10}

        with (
            patch(
                "app.domain.resume.workflow.list_repositories",
                new_callable=AsyncMock,
                return_value=sample_repositories,
            ),
            patch("app.domain.resume.service.get_languages", side_effect=_get_languages),
            patch(
                "app.domain.resume.service.get_readme_text",
                new_callable=AsyncMock,
                return_value=None,
            ),
        ):
            result = await run_resume_workflow("ab", detail_cache, None)

        assert [p.name for p in result.projects] == ["demo", "cli"]
        assert "Technologies: Not specified." in result.projects[0].description
        assert detail_cache.get("ab", "demo") is None
        assert detail_cache.get("ab", "cli") == RepositoryDetail(languages={"Python": 10})

    @pytest.mark.asyncio
    async def test_generator_failure_falls_back(
        self, sample_repositories, detail_cache, unconfigured_generator
    ):
        """생성기 미설정 시 기본 설명으로 완료"""
        with (
            patch(
                "app.domain.resume.workflow.list_repositories",
                new_callable=AsyncMock,
                return_value=sample_repositories,
            ),
            patch(
                "app.domain.resume.service.get_languages",
                new_callable=AsyncMock,
                return_value={"TypeScript": 1},
            ),
            patch(
                "app.domain.resume.service.get_readme_text",
                new_callable=AsyncMock,
                return_value=None,
            ),
        ):
            result = await run_resume_workflow("ab", detail_cache, unconfigured_generator)

        assert result.projects[0].description == (
            "demo: Demo dashboard. Technologies: TypeScript. Features: No README available"
        )
        assert len(unconfigured_generator.calls) == 2

    @pytest.mark.asyncio
    async def test_unexpected_generator_error_falls_back(self, sample_repositories, detail_cache):
        """생성기의 예상치 못한 예외도 레포지토리별 기본 설명으로 대체"""
        generator = StubGenerator(error=RuntimeError("client exploded"))

        with (
            patch(
                "app.domain.resume.workflow.list_repositories",
                new_callable=AsyncMock,
                return_value=sample_repositories,
            ),
            patch(
                "app.domain.resume.service.get_languages",
                new_callable=AsyncMock,
                return_value={"TypeScript": 1},
            ),
            patch(
                "app.domain.resume.service.get_readme_text",
                new_callable=AsyncMock,
                return_value=None,
            ),
        ):
            result = await run_resume_workflow("ab", detail_cache, generator)

        assert [p.name for p in result.projects] == ["demo", "cli"]
        assert result.projects[0].description.startswith("demo: Demo dashboard.")
        assert result.projects[1].description.startswith("cli: No description provided.")
        assert len(generator.calls) == 2

    @pytest.mark.asyncio
    async def test_llm_client_init_failure_falls_back(self, sample_repositories, detail_cache):
        """LLM 클라이언트 생성 실패 시에도 전체 실행 완료"""
        with (
            patch(
                "app.domain.resume.workflow.list_repositories",
                new_callable=AsyncMock,
                return_value=sample_repositories,
            ),
            patch(
                "app.domain.resume.service.get_languages",
                new_callable=AsyncMock,
                return_value={"TypeScript": 1},
            ),
            patch(
                "app.domain.resume.service.get_readme_text",
                new_callable=AsyncMock,
                return_value=None,
            ),
            patch("app.infra.llm.client.is_generator_configured", return_value=True),
            patch(
                "app.infra.llm.client.get_generator_client",
                side_effect=ValueError("bad base_url"),
            ),
        ):
            result = await run_resume_workflow("ab", detail_cache, LLMDescriptionGenerator())

        assert [p.name for p in result.projects] == ["demo", "cli"]
        assert all("Technologies: TypeScript." in p.description for p in result.projects)

    @pytest.mark.asyncio
    async def test_sets_normalized_username_context(self, detail_cache):
        """검증된 유저네임을 로그 컨텍스트에 기록"""
        with patch(
            "app.domain.resume.workflow.list_repositories",
            new_callable=AsyncMock,
            return_value=[],
        ):
            with pytest.raises(NotFoundError):
                await run_resume_workflow("  ab  ", detail_cache)

        try:
            assert get_log_context()["username"] == "ab"
        finally:
            clear_context()
