import os

from langchain_core.messages import HumanMessage, SystemMessage
from langfuse.langchain import CallbackHandler

from app.core.config import settings
from app.core.exceptions import ConfigurationError, GenerationError
from app.core.logging import get_logger
from app.domain.resume.prompts import PROJECT_DESCRIPTION_HUMAN, PROJECT_DESCRIPTION_SYSTEM
from app.domain.resume.schemas import ProjectMetadata
from app.infra.llm.base import BaseDescriptionGenerator
from app.infra.llm.factory import get_generator_client, is_generator_configured

logger = get_logger(__name__)

if settings.langfuse_public_key:
    os.environ["LANGFUSE_PUBLIC_KEY"] = settings.langfuse_public_key
if settings.langfuse_secret_key:
    os.environ["LANGFUSE_SECRET_KEY"] = settings.langfuse_secret_key
if settings.langfuse_base_url:
    os.environ["LANGFUSE_HOST"] = settings.langfuse_base_url


def get_langfuse_handler() -> CallbackHandler | None:
    """Langfuse 콜백 핸들러 반환"""
    if not settings.langfuse_public_key or not settings.langfuse_secret_key:
        return None

    return CallbackHandler()


def build_description_messages(metadata: ProjectMetadata) -> list:
    """프로젝트 메타데이터로 프롬프트 메시지 생성"""
    human_content = PROJECT_DESCRIPTION_HUMAN.format(
        name=metadata.name,
        technologies=", ".join(metadata.technologies),
        structure=metadata.structural_excerpt,
    )
    return [
        SystemMessage(
            content=PROJECT_DESCRIPTION_SYSTEM.format(language=settings.description_language)
        ),
        HumanMessage(content=human_content),
    ]


def _extract_text(content) -> str:
    """채팅 모델 응답 content에서 텍스트 추출"""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


class LLMDescriptionGenerator(BaseDescriptionGenerator):
    """LangChain 채팅 모델 기반 프로젝트 설명 생성기

    프로바이더 클라이언트는 첫 generate 호출 시점에만 만들어진다.
    """

    def is_configured(self) -> bool:
        return is_generator_configured()

    async def generate(self, metadata: ProjectMetadata) -> str:
        if not self.is_configured():
            raise ConfigurationError(
                f"Description generator not configured: provider={settings.llm_provider}"
            )

        try:
            client = get_generator_client()
        except ConfigurationError:
            raise
        except Exception as e:
            logger.warning(
                "설명 생성 클라이언트 초기화 실패 project=%s provider=%s error=%s",
                metadata.name,
                settings.llm_provider,
                type(e).__name__,
            )
            raise GenerationError(f"Description client initialization failed: {e}") from e

        try:
            langfuse_handler = get_langfuse_handler()
            config = {
                "callbacks": [langfuse_handler] if langfuse_handler else [],
                "metadata": {"langfuse_tags": ["resume", "description", metadata.name]},
            }
            result = await client.get_chat_model().ainvoke(
                build_description_messages(metadata), config=config
            )
        except Exception as e:
            logger.warning(
                "설명 생성 호출 실패 project=%s model=%s error=%s",
                metadata.name,
                client.get_model_name(),
                type(e).__name__,
            )
            raise GenerationError(f"Description generation failed: {e}") from e

        text = _extract_text(getattr(result, "content", None)).strip()
        if not text:
            raise GenerationError(f"Empty description returned for {metadata.name}")

        logger.debug("설명 생성 완료 project=%s length=%d", metadata.name, len(text))
        return text
