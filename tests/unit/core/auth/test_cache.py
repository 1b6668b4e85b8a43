"""PermissionCache 테스트"""

import pytest

from core.auth.cache import PermissionCache


class FakeClock:
    """수동 시계"""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestPermissionCache:
    """TTL / 최대 항목 수"""

    def test_get_set(self) -> None:
        cache = PermissionCache(ttl_sec=10, clock=FakeClock())
        cache.set("alice", frozenset({"invoices:post"}))

        assert cache.get("alice") == frozenset({"invoices:post"})
        assert cache.get("bob") is None

    def test_expiry(self) -> None:
        clock = FakeClock()
        cache = PermissionCache(ttl_sec=10, clock=clock)
        cache.set("alice", frozenset({"*"}))

        clock.advance(9)
        assert cache.get("alice") is not None

        clock.advance(1)
        assert cache.get("alice") is None
        assert len(cache) == 0

    def test_eviction_oldest_first(self) -> None:
        cache = PermissionCache(ttl_sec=10, max_entries=2, clock=FakeClock())
        cache.set("a", frozenset())
        cache.set("b", frozenset())
        cache.set("c", frozenset())

        assert cache.get("a") is None
        assert cache.get("b") is not None
        assert cache.get("c") is not None
        assert len(cache) == 2

    def test_reset_refreshes_order(self) -> None:
        """재저장한 항목은 가장 최근으로 이동"""
        cache = PermissionCache(ttl_sec=10, max_entries=2, clock=FakeClock())
        cache.set("a", frozenset())
        cache.set("b", frozenset())
        cache.set("a", frozenset({"x:y"}))
        cache.set("c", frozenset())

        assert cache.get("a") == frozenset({"x:y"})
        assert cache.get("b") is None

    def test_invalidate_and_clear(self) -> None:
        cache = PermissionCache(clock=FakeClock())
        cache.set("a", frozenset())
        cache.set("b", frozenset())

        cache.invalidate("a")
        cache.invalidate("missing")
        assert cache.get("a") is None
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize(("ttl", "size"), [(0, 10), (-1, 10), (10, 0)])
    def test_invalid_arguments(self, ttl: float, size: int) -> None:
        with pytest.raises(ValueError):
            PermissionCache(ttl_sec=ttl, max_entries=size)
