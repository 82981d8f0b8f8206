"""이력서 API 스키마."""

from pydantic import BaseModel, ConfigDict, Field

from app.domain.resume.schemas import ProjectDescription, ResumeResult


class GenerateRequest(BaseModel):
    """이력서 생성 요청.

    username 누락/공백 검증은 파이프라인에서 400으로 처리한다.
    """

    username: str | None = None


class ProjectResponse(BaseModel):
    """프로젝트 설명 응답 항목."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    source_url: str | None = Field(default=None, alias="sourceUrl")

    @classmethod
    def from_domain(cls, project: ProjectDescription) -> "ProjectResponse":
        return cls(
            name=project.name,
            description=project.description,
            source_url=project.source_url,
        )


class GenerateResponse(BaseModel):
    """이력서 생성 응답."""

    skills: dict[str, int]
    projects: list[ProjectResponse]

    @classmethod
    def from_result(cls, result: ResumeResult) -> "GenerateResponse":
        return cls(
            skills=result.skills,
            projects=[ProjectResponse.from_domain(p) for p in result.projects],
        )


class ErrorResponse(BaseModel):
    """에러 응답."""

    error: str
    details: str | None = None
