from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.core.logging import get_logger
from app.infra.llm.base import BaseLLMClient
from app.infra.llm.providers import CodestralClient, GeminiClient, OpenAIClient

logger = get_logger(__name__)

_PROVIDER_CLIENTS: dict[str, type[BaseLLMClient]] = {
    "codestral": CodestralClient,
    "openai": OpenAIClient,
    "gemini": GeminiClient,
}

_generator_client: BaseLLMClient | None = None


def is_generator_configured() -> bool:
    """클라이언트를 만들지 않고 설명 생성 프로바이더 설정 여부 확인"""
    client_class = _PROVIDER_CLIENTS.get(settings.llm_provider)
    return client_class is not None and bool(client_class.api_key())


def get_generator_client() -> BaseLLMClient:
    """프로젝트 설명 생성용 LLM 클라이언트 반환

    Raises:
        ConfigurationError: 지원하지 않는 프로바이더이거나 API 키가 없는 경우
    """
    global _generator_client

    if _generator_client is not None:
        return _generator_client

    provider = settings.llm_provider
    client_class = _PROVIDER_CLIENTS.get(provider)
    if client_class is None:
        raise ConfigurationError(f"Unsupported LLM provider: {provider}")

    _generator_client = client_class()
    logger.info(
        "설명 생성 클라이언트 초기화 provider=%s model=%s",
        provider,
        _generator_client.get_model_name(),
    )
    return _generator_client


def reset_clients() -> None:
    """클라이언트 캐시 초기화 - 테스트용"""
    global _generator_client
    _generator_client = None
