"""
레포지토리 상세 정보 TTL 캐시

- owner/repository 키 단위로 RepositoryDetail 저장
- fetched_at 기준 TTL이 지난 항목은 없는 것으로 취급
- 최대 항목 수 초과 시 만료 항목 정리 후 오래된 항목부터 제거
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from app.core.logging import get_logger
from app.domain.resume.schemas import RepositoryDetail

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60
DEFAULT_MAX_ENTRIES = 1024


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: RepositoryDetail
    fetched_at: float


class DetailCache:
    """레포지토리 상세 정보 캐시

    단일 이벤트 루프에서 사용한다. 같은 키에 대한 동시 put은 마지막으로 완료된 쓰기가 남는다.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds는 0보다 커야 합니다")
        if max_entries <= 0:
            raise ValueError("max_entries는 0보다 커야 합니다")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @staticmethod
    def make_key(owner: str, repo: str) -> str:
        return f"{owner}/{repo}"

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.fetched_at < self.ttl_seconds

    def get(self, owner: str, repo: str) -> RepositoryDetail | None:
        """TTL 이내의 값만 반환, 만료되었으면 제거 후 None"""
        key = self.make_key(owner, repo)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if not self._is_fresh(entry, self._clock()):
            self._entries.pop(key, None)
            logger.debug("캐시 만료 key=%s", key)
            return None

        logger.debug("캐시 적중 key=%s", key)
        return entry.value

    def put(self, owner: str, repo: str, detail: RepositoryDetail) -> None:
        """무조건 저장/덮어쓰기, fetched_at은 현재 시각"""
        key = self.make_key(owner, repo)
        self._entries[key] = CacheEntry(key=key, value=detail, fetched_at=self._clock())
        self._entries.move_to_end(key)

        if len(self._entries) > self.max_entries:
            self.sweep()
        while len(self._entries) > self.max_entries:
            evicted_key, _ = self._entries.popitem(last=False)
            logger.debug("캐시 용량 초과 제거 key=%s", evicted_key)

    def sweep(self) -> int:
        """만료된 항목 제거 후 제거 개수 반환"""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.info("만료 캐시 정리 removed=%d remaining=%d", len(expired), len(self._entries))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
