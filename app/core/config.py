from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    environment: str = "development"

    # GitHub
    github_token: str = ""
    github_timeout: float = 30.0
    github_repos_per_page: int = 10

    # 동시 요청 제한
    github_max_concurrent_requests: int = 10

    # GitHub 재시도 설정
    github_max_retries: int = 3
    github_retry_base_delay: float = 1.0

    # 레포지토리 상세 캐시 설정
    detail_cache_ttl_seconds: float = 300.0
    detail_cache_max_entries: int = 1024

    # 파이프라인 설정
    strict_username_validation: bool = True
    skill_scoring: Literal["presence", "bytes"] = "presence"

    # README 설정
    readme_excerpt_lines: int = 3
    readme_excerpt_max_length: int = 500

    # LLM 프로바이더 선택: "codestral", "openai" 또는 "gemini"
    llm_provider: str = "codestral"

    # Codestral 설정 - OpenAI 호환 엔드포인트
    codestral_api_key: str = ""
    codestral_api_url: str = "https://codestral.mistral.ai/v1"
    codestral_model: str = "codestral-latest"
    codestral_timeout: float = 60.0

    # OpenAI 설정
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout: float = 60.0

    # Gemini 설정
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_timeout: float = 60.0

    # 프로젝트 설명 생성 설정
    description_max_tokens: int = 200
    description_language: str = "English"

    # 로깅 설정
    log_level: str = "INFO"

    # CORS 설정
    cors_allowed_origins: str = ""

    # 요청 제한 설정
    rate_limit: str = "30/minute"
    rate_limit_enabled: bool = True

    # Langfuse 설정
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    def validate_for_production(self) -> list[str]:
        """프로덕션 환경에서 필수 설정 검증 후 누락된 항목 반환"""
        errors = []
        if not self.github_token:
            errors.append("GITHUB_TOKEN")
        return errors


settings = Settings()
