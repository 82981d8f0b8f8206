from app.api.v1.schemas.resume import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    ProjectResponse,
)

__all__ = [
    "GenerateRequest",
    "GenerateResponse",
    "ProjectResponse",
    "ErrorResponse",
]
