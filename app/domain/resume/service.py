import asyncio
import re
from collections import Counter

from app.core.config import settings
from app.core.exceptions import ConfigurationError, GenerationError, InvalidInputError
from app.core.logging import get_logger
from app.domain.resume.constants import (
    DEFAULT_DESCRIPTION,
    DEFAULT_TECH,
    GITHUB_USERNAME_PATTERN,
    NO_README_EXCERPT,
    SKILL_SCORING_BYTES,
    USERNAME_FORMAT_MESSAGE,
    USERNAME_REQUIRED_MESSAGE,
)
from app.domain.resume.schemas import (
    ProjectDescription,
    ProjectMetadata,
    RepositoryDetail,
    RepositorySummary,
)
from app.infra.github.cache import DetailCache
from app.infra.github.client import get_languages, get_readme_text
from app.infra.llm.base import BaseDescriptionGenerator

logger = get_logger(__name__)

WHITESPACE_PATTERN = re.compile(r"\s+")


def validate_username(username: str | None, strict: bool | None = None) -> str:
    """GitHub 유저네임 검증 후 앞뒤 공백 제거한 값 반환.

    Args:
        username: 요청으로 받은 유저네임
        strict: GitHub 유저네임 문법까지 검사할지 여부, None이면 설정값 사용

    Returns:
        정규화된 유저네임

    Raises:
        InvalidInputError: 비어 있거나 형식이 맞지 않는 경우
    """
    if strict is None:
        strict = settings.strict_username_validation

    if not isinstance(username, str) or not username.strip():
        raise InvalidInputError(USERNAME_REQUIRED_MESSAGE)

    normalized = username.strip()
    if strict and not GITHUB_USERNAME_PATTERN.match(normalized):
        raise InvalidInputError(
            USERNAME_FORMAT_MESSAGE,
            detail=(
                "Username must be 1-39 characters of letters, digits or single hyphens "
                "and cannot start or end with a hyphen"
            ),
        )
    return normalized


def _round_percentage(part: int, whole: int) -> int:
    """part / whole * 100을 정수 연산으로 반올림 (0.5는 올림)."""
    return (part * 200 + whole) // (2 * whole)


def aggregate_skills(
    language_maps: list[dict[str, int]],
    total_repositories: int,
    scoring: str | None = None,
) -> dict[str, int]:
    """레포지토리별 언어 정보를 스킬 퍼센트로 변환.

    presence 방식은 레포지토리마다 언어가 존재하면 1회로 집계하고
    전체 레포지토리 수 대비 비율을 계산한다. bytes 방식은 전체 바이트 대비 비율이다.

    Args:
        language_maps: 레포지토리별 언어-바이트 딕셔너리
        total_repositories: 전체 레포지토리 수
        scoring: "presence" 또는 "bytes", None이면 설정값 사용

    Returns:
        퍼센트 내림차순으로 정렬된 언어별 퍼센트
    """
    if scoring is None:
        scoring = settings.skill_scoring

    if scoring == SKILL_SCORING_BYTES:
        totals: Counter[str] = Counter()
        for languages in language_maps:
            totals.update({name: max(size, 0) for name, size in languages.items()})
        whole = sum(totals.values())
        percentages = (
            {name: _round_percentage(size, whole) for name, size in totals.items()}
            if whole
            else {}
        )
    else:
        if total_repositories <= 0:
            return {}
        counts: Counter[str] = Counter()
        for languages in language_maps:
            counts.update(set(languages))
        ordered = [name for languages in language_maps for name in languages]
        first_seen = list(dict.fromkeys(ordered))
        percentages = {
            name: _round_percentage(counts[name], total_repositories) for name in first_seen
        }

    return dict(sorted(percentages.items(), key=lambda item: -item[1]))


def build_readme_excerpt(
    readme: str | None,
    max_lines: int | None = None,
    max_length: int | None = None,
) -> str:
    """README 앞부분을 한 줄 요약으로 변환"""
    if max_lines is None:
        max_lines = settings.readme_excerpt_lines
    if max_length is None:
        max_length = settings.readme_excerpt_max_length

    if not readme:
        return NO_README_EXCERPT

    head = " ".join(readme.splitlines()[:max_lines])
    excerpt = WHITESPACE_PATTERN.sub(" ", head).strip()[:max_length].rstrip()
    return excerpt or NO_README_EXCERPT


def format_technologies(languages: dict[str, int]) -> str:
    return ", ".join(languages.keys()) or DEFAULT_TECH


def fallback_description(repository: RepositorySummary) -> str:
    """레포지토리 자체 설명, 없으면 기본 문구"""
    description = (repository.description or "").strip()
    if description.endswith("."):
        description = description[:-1].rstrip()
    return description or DEFAULT_DESCRIPTION


def format_project_description(
    name: str,
    technologies: str,
    excerpt: str,
    generated_text: str | None,
    fallback: str,
) -> str:
    """최종 프로젝트 설명 문자열 조립"""
    if generated_text:
        return "\n".join(
            [
                f"Description: {generated_text}",
                f"Technologies: {technologies}",
                f"Implementation details: {excerpt}",
            ]
        )
    return f"{name}: {fallback}. Technologies: {technologies}. Features: {excerpt}"


async def _fetch_languages(owner: str, repo: str, token: str | None) -> dict[str, int] | None:
    try:
        return await get_languages(owner, repo, token)
    except Exception as e:
        logger.warning(
            "언어 조회 실패, 빈 값으로 대체 repo=%s/%s error=%s", owner, repo, type(e).__name__
        )
        return None


async def _fetch_readme(owner: str, repo: str, token: str | None) -> tuple[str | None, bool]:
    try:
        return await get_readme_text(owner, repo, token), True
    except Exception as e:
        logger.warning(
            "README 조회 실패, 없음으로 대체 repo=%s/%s error=%s", owner, repo, type(e).__name__
        )
        return None, False


async def fetch_repository_detail(
    owner: str,
    repo: str,
    cache: DetailCache,
    token: str | None = None,
) -> RepositoryDetail:
    """캐시를 우선 조회하고, 없으면 언어와 README를 동시에 가져와 저장.

    언어 또는 README 조회 실패는 빈 값으로 대체하며, 이 경우 캐시에 저장하지 않는다.

    Args:
        owner: 레포지토리 소유자
        repo: 레포지토리 이름
        cache: 레포지토리 상세 캐시
        token: GitHub 토큰

    Returns:
        레포지토리 상세 정보
    """
    cached = cache.get(owner, repo)
    if cached is not None:
        return cached

    languages, (readme, readme_ok) = await asyncio.gather(
        _fetch_languages(owner, repo, token),
        _fetch_readme(owner, repo, token),
    )

    detail = RepositoryDetail(languages=languages or {}, readme=readme)
    if languages is not None and readme_ok:
        cache.put(owner, repo, detail)
    return detail


async def describe_project(
    repository: RepositorySummary,
    detail: RepositoryDetail,
    generator: BaseDescriptionGenerator | None = None,
) -> ProjectDescription:
    """레포지토리 하나의 프로젝트 설명 생성, 생성기 실패 시 기본 설명으로 대체"""
    technologies = format_technologies(detail.languages)
    excerpt = build_readme_excerpt(detail.readme)

    generated_text = None
    if generator is not None:
        metadata = ProjectMetadata(
            name=repository.name,
            technologies=list(detail.languages.keys()),
            structural_excerpt=excerpt,
        )
        try:
            generated_text = await generator.generate(metadata)
        except ConfigurationError:
            logger.debug("설명 생성기 미설정, 기본 설명 사용 repo=%s", repository.name)
        except GenerationError as e:
            logger.warning(
                "설명 생성 실패, 기본 설명 사용 repo=%s error=%s", repository.name, e.detail
            )
        except Exception as e:
            logger.warning(
                "설명 생성 중 예상치 못한 오류, 기본 설명 사용 repo=%s error=%s",
                repository.name,
                type(e).__name__,
            )

    return ProjectDescription(
        name=repository.name,
        description=format_project_description(
            name=repository.name,
            technologies=technologies,
            excerpt=excerpt,
            generated_text=generated_text,
            fallback=fallback_description(repository),
        ),
        source_url=repository.html_url,
    )
