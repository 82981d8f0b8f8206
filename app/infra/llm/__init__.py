from app.infra.llm.base import BaseDescriptionGenerator, BaseLLMClient
from app.infra.llm.client import LLMDescriptionGenerator
from app.infra.llm.factory import (
    get_generator_client,
    is_generator_configured,
    reset_clients,
)
from app.infra.llm.providers import CodestralClient, GeminiClient, OpenAIClient

__all__ = [
    "BaseLLMClient",
    "BaseDescriptionGenerator",
    "LLMDescriptionGenerator",
    "CodestralClient",
    "OpenAIClient",
    "GeminiClient",
    "get_generator_client",
    "is_generator_configured",
    "reset_clients",
]
