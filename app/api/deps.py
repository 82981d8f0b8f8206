from app.core.config import settings
from app.infra.github.cache import DetailCache
from app.infra.llm.base import BaseDescriptionGenerator
from app.infra.llm.client import LLMDescriptionGenerator

_detail_cache = DetailCache(
    ttl_seconds=settings.detail_cache_ttl_seconds,
    max_entries=settings.detail_cache_max_entries,
)
_description_generator = LLMDescriptionGenerator()


def get_detail_cache() -> DetailCache:
    """프로세스 단위 레포지토리 상세 캐시"""
    return _detail_cache


def get_description_generator() -> BaseDescriptionGenerator:
    """프로젝트 설명 생성기, 프로바이더 클라이언트는 호출 시점에 생성"""
    return _description_generator
