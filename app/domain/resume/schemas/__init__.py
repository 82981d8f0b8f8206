from app.domain.resume.schemas.base import (
    ProjectDescription,
    ProjectMetadata,
    ResumeResult,
    ResumeState,
)
from app.domain.resume.schemas.github import (
    RepositoryDetail,
    RepositorySummary,
)

__all__ = [
    "RepositorySummary",
    "RepositoryDetail",
    "ProjectMetadata",
    "ProjectDescription",
    "ResumeResult",
    "ResumeState",
]
