import asyncio
from typing import Literal

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from app.core.config import settings
from app.core.context import set_username
from app.core.exceptions import (
    AuthenticationError,
    CustomException,
    ErrorCode,
    InternalError,
    NotFoundError,
    RateLimitedError,
    TransportError,
)
from app.core.logging import get_logger
from app.domain.resume.constants import NO_REPOSITORIES_MESSAGE
from app.domain.resume.schemas import ResumeResult, ResumeState
from app.domain.resume.service import (
    aggregate_skills,
    describe_project,
    fetch_repository_detail,
    validate_username,
)
from app.infra.github.cache import DetailCache
from app.infra.github.client import list_repositories
from app.infra.llm.base import BaseDescriptionGenerator

logger = get_logger(__name__)

_workflow: CompiledStateGraph | None = None


def _configurable(config: RunnableConfig | None) -> dict:
    return (config or {}).get("configurable", {})


async def list_repositories_node(state: ResumeState) -> ResumeState:
    """레포지토리 목록 조회 노드: 실패 또는 빈 목록이면 에러 상태로 종료"""
    username = state["username"]
    logger.info("list_repositories_node 시작 username=%s", username)

    try:
        repositories = await list_repositories(username)
    except CustomException as e:
        error_code = ErrorCode(e.error_code).value
        logger.error(
            "list_repositories_node GitHub 오류 code=%s detail=%s", error_code, e.detail
        )
        return {
            **state,
            "error_code": error_code,
            "error_message": e.detail or e.message,
        }

    if not repositories:
        logger.info("list_repositories_node 레포지토리 없음 username=%s", username)
        return {
            **state,
            "error_code": ErrorCode.NO_REPOSITORIES.value,
            "error_message": NO_REPOSITORIES_MESSAGE,
        }

    logger.info("list_repositories_node 완료 count=%d", len(repositories))
    return {**state, "repositories": repositories}


async def fetch_details_node(state: ResumeState, config: RunnableConfig) -> ResumeState:
    """레포지토리 상세 조회 노드: 레포지토리별 동시 조회 후 목록 순서대로 재조립"""
    username = state["username"]
    repositories = state["repositories"]
    cache: DetailCache = _configurable(config)["cache"]

    semaphore = asyncio.Semaphore(settings.github_max_concurrent_requests)

    async def fetch_with_limit(repo_name: str):
        async with semaphore:
            return await fetch_repository_detail(username, repo_name, cache)

    details = await asyncio.gather(*[fetch_with_limit(repo.name) for repo in repositories])

    logger.info("fetch_details_node 완료 repos=%d cache_size=%d", len(details), len(cache))
    return {**state, "details": list(details)}


async def aggregate_skills_node(state: ResumeState) -> ResumeState:
    """스킬 집계 노드"""
    details = state["details"]
    skills = aggregate_skills(
        [detail.languages for detail in details],
        total_repositories=len(state["repositories"]),
    )

    logger.info("aggregate_skills_node 완료 skills=%d scoring=%s", len(skills), settings.skill_scoring)
    return {**state, "skills": skills}


async def build_descriptions_node(state: ResumeState, config: RunnableConfig) -> ResumeState:
    """프로젝트 설명 생성 노드: 레포지토리별 생성 실패는 기본 설명으로 대체"""
    generator: BaseDescriptionGenerator | None = _configurable(config).get("generator")

    projects = await asyncio.gather(
        *[
            describe_project(repo, detail, generator)
            for repo, detail in zip(state["repositories"], state["details"], strict=True)
        ]
    )

    logger.info("build_descriptions_node 완료 projects=%d", len(projects))
    return {**state, "projects": list(projects)}


def should_continue(state: ResumeState) -> Literal["fetch_details", "end"]:
    """에러 상태 확인: 에러 있으면 종료, 없으면 상세 조회로"""
    if state.get("error_code"):
        logger.info("should_continue: 에러 발생, 종료 code=%s", state["error_code"])
        return "end"
    return "fetch_details"


def create_resume_workflow() -> CompiledStateGraph:
    """이력서 집계 워크플로우 생성"""
    workflow = StateGraph(ResumeState)

    workflow.add_node("list_repositories", list_repositories_node)
    workflow.add_node("fetch_details", fetch_details_node)
    workflow.add_node("aggregate_skills", aggregate_skills_node)
    workflow.add_node("build_descriptions", build_descriptions_node)

    workflow.set_entry_point("list_repositories")

    workflow.add_conditional_edges(
        "list_repositories",
        should_continue,
        {
            "fetch_details": "fetch_details",
            "end": END,
        },
    )
    workflow.add_edge("fetch_details", "aggregate_skills")
    workflow.add_edge("aggregate_skills", "build_descriptions")
    workflow.add_edge("build_descriptions", END)

    return workflow.compile()


def get_resume_workflow() -> CompiledStateGraph:
    """컴파일된 워크플로우 반환, 최초 호출 시 생성"""
    global _workflow

    if _workflow is None:
        _workflow = create_resume_workflow()
    return _workflow


def _raise_for_error_state(state: ResumeState) -> None:
    """워크플로우 에러 상태를 예외로 변환"""
    error_code = state.get("error_code")
    if not error_code:
        return

    message = state.get("error_message")
    if error_code == ErrorCode.NO_REPOSITORIES:
        raise NotFoundError(NO_REPOSITORIES_MESSAGE, error_code=ErrorCode.NO_REPOSITORIES)
    if error_code == ErrorCode.GITHUB_NOT_FOUND:
        raise NotFoundError(detail=message)
    if error_code == ErrorCode.GITHUB_UNAUTHORIZED:
        raise AuthenticationError(message)
    if error_code == ErrorCode.GITHUB_RATE_LIMITED:
        raise RateLimitedError(message)
    if error_code == ErrorCode.GITHUB_API_ERROR:
        raise TransportError(message)
    raise InternalError(message)


async def run_resume_workflow(
    username: str | None,
    cache: DetailCache,
    generator: BaseDescriptionGenerator | None = None,
) -> ResumeResult:
    """유저네임 검증 후 워크플로우 실행

    Args:
        username: GitHub 유저네임
        cache: 레포지토리 상세 캐시
        generator: 프로젝트 설명 생성기, None이면 기본 설명만 사용

    Returns:
        스킬 퍼센트와 프로젝트 설명 목록

    Raises:
        InvalidInputError: 유저네임이 비어 있거나 형식이 맞지 않는 경우
        NotFoundError: 사용자 또는 공개 레포지토리가 없는 경우
        GitHubAPIError: 레포지토리 목록 조회 실패
    """
    normalized = validate_username(username)
    set_username(normalized)

    state = await get_resume_workflow().ainvoke(
        ResumeState(username=normalized),
        config={"configurable": {"cache": cache, "generator": generator}},
    )
    _raise_for_error_state(state)

    return ResumeResult(skills=state["skills"], projects=state["projects"])
