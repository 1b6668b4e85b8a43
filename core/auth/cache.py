"""
권한 캐시

사용자별 권한 집합을 TTL 동안 보관.
Authorizer가 소유하며 전역 상태로 두지 않음.
"""

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PermissionCache:
    """TTL + 최대 항목 수 제한 캐시

    user_id -> (저장 시각, 권한 집합)
    가득 차면 가장 오래 저장된 항목부터 제거.

    Args:
        ttl_sec: 유효 시간 (초)
        max_entries: 최대 사용자 수
        clock: 단조 시계 (테스트에서 주입)
    """

    def __init__(
        self,
        ttl_sec: float = 300,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_sec <= 0:
            raise ValueError(f"ttl_sec must be positive: {ttl_sec}")
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive: {max_entries}")

        self.ttl_sec = ttl_sec
        self.max_entries = max_entries
        self._clock = clock
        self._cache: dict[str, tuple[float, frozenset[str]]] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, user_id: str) -> frozenset[str] | None:
        """캐시 조회 (만료 시 None)"""
        cached = self._cache.get(user_id)
        if cached is None:
            return None

        stored_at, permissions = cached
        if self._clock() - stored_at >= self.ttl_sec:
            del self._cache[user_id]
            return None
        return permissions

    def set(self, user_id: str, permissions: frozenset[str]) -> None:
        """캐시 저장"""
        # 재저장 시 삽입 순서 갱신
        self._cache.pop(user_id, None)
        while len(self._cache) >= self.max_entries:
            oldest = next(iter(self._cache))
            del self._cache[oldest]
            logger.debug(f"Permission cache evicted: {oldest}")
        self._cache[user_id] = (self._clock(), permissions)

    def invalidate(self, user_id: str) -> None:
        """사용자 캐시 제거"""
        self._cache.pop(user_id, None)

    def clear(self) -> None:
        """전체 캐시 초기화"""
        self._cache.clear()
