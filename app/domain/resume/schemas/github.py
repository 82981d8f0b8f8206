from pydantic import BaseModel, ConfigDict, Field


class RepositorySummary(BaseModel):
    """레포지토리 목록의 단일 항목"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str | None = None
    primary_language: str | None = None
    html_url: str | None = None


class RepositoryDetail(BaseModel):
    """레포지토리 상세 정보 - 언어별 바이트 수와 README"""

    model_config = ConfigDict(frozen=True)

    languages: dict[str, int] = Field(default_factory=dict)
    readme: str | None = None
