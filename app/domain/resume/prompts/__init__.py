from app.domain.resume.prompts.description import (
    PROJECT_DESCRIPTION_HUMAN,
    PROJECT_DESCRIPTION_SYSTEM,
)

__all__ = [
    "PROJECT_DESCRIPTION_SYSTEM",
    "PROJECT_DESCRIPTION_HUMAN",
]
