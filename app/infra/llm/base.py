from abc import ABC, abstractmethod

from langchain_core.language_models import BaseChatModel

from app.core.exceptions import ConfigurationError
from app.domain.resume.schemas import ProjectMetadata


class BaseLLMClient(ABC):
    """LLM 프로바이더 클라이언트 추상 클래스

    생성 시 API 키를 확인하고 LangChain 채팅 모델을 한 번만 만든다.
    """

    api_key_env: str = ""

    def __init__(self):
        if not self.api_key():
            raise ConfigurationError(f"{self.api_key_env} environment variable not set")
        self._model = self._build_model()

    @classmethod
    @abstractmethod
    def api_key(cls) -> str:
        """설정에서 읽은 API 키, 없으면 빈 문자열"""

    @abstractmethod
    def _build_model(self) -> BaseChatModel:
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """사용 중인 모델 이름 반환"""

    def get_chat_model(self) -> BaseChatModel:
        """LangChain 호환 채팅 모델 반환"""
        return self._model


class BaseDescriptionGenerator(ABC):
    """프로젝트 설명 생성기 인터페이스"""

    @abstractmethod
    async def generate(self, metadata: ProjectMetadata) -> str:
        """프로젝트 설명 문단 생성

        Raises:
            ConfigurationError: 프로바이더 자격 증명이 없는 경우
            GenerationError: 생성 호출이 실패한 경우
        """
        pass
