from typing import TypedDict

from pydantic import BaseModel, ConfigDict

from app.domain.resume.schemas.github import RepositoryDetail, RepositorySummary


class ProjectMetadata(BaseModel):
    """프로젝트 설명 생성기 입력"""

    name: str
    technologies: list[str]
    structural_excerpt: str


class ProjectDescription(BaseModel):
    """레포지토리별 프로젝트 설명"""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    source_url: str | None = None


class ResumeResult(BaseModel):
    """파이프라인 최종 결과"""

    skills: dict[str, int]
    projects: list[ProjectDescription]


class ResumeState(TypedDict, total=False):
    """LangGraph 워크플로우 상태"""

    username: str
    repositories: list[RepositorySummary]
    details: list[RepositoryDetail]
    skills: dict[str, int]
    projects: list[ProjectDescription]
    error_code: str
    error_message: str
