"""설명 생성 프로바이더별 채팅 모델 클라이언트"""

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from app.core.config import settings
from app.infra.llm.base import BaseLLMClient


class CodestralClient(BaseLLMClient):
    """Codestral 클라이언트 - OpenAI 호환 엔드포인트, 기본 프로바이더"""

    api_key_env = "CODESTRAL_API_KEY"

    @classmethod
    def api_key(cls) -> str:
        return settings.codestral_api_key

    def _build_model(self) -> BaseChatModel:
        return ChatOpenAI(
            model=settings.codestral_model,
            api_key=settings.codestral_api_key,
            base_url=settings.codestral_api_url,
            timeout=settings.codestral_timeout,
            max_tokens=settings.description_max_tokens,
        )

    def get_model_name(self) -> str:
        return settings.codestral_model


class OpenAIClient(BaseLLMClient):
    api_key_env = "OPENAI_API_KEY"

    @classmethod
    def api_key(cls) -> str:
        return settings.openai_api_key

    def _build_model(self) -> BaseChatModel:
        return ChatOpenAI(
            model=settings.openai_model,
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout,
            max_tokens=settings.description_max_tokens,
        )

    def get_model_name(self) -> str:
        return settings.openai_model


class GeminiClient(BaseLLMClient):
    api_key_env = "GEMINI_API_KEY"

    @classmethod
    def api_key(cls) -> str:
        return settings.gemini_api_key

    def _build_model(self) -> BaseChatModel:
        return ChatGoogleGenerativeAI(
            model=settings.gemini_model,
            google_api_key=settings.gemini_api_key,
            timeout=settings.gemini_timeout,
            max_output_tokens=settings.description_max_tokens,
        )

    def get_model_name(self) -> str:
        return settings.gemini_model
