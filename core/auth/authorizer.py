"""
Authorizer

(user_id, permission) → 허용 여부.
전기/취소 엔진은 상태를 바꾸기 전에 반드시 allows()를 호출.

권한 이름은 'resource:action' 형식.
와일드카드: '*' (전체), 'invoices:*' (리소스 전체)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from core.auth.cache import PermissionCache

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

WILDCARD = "*"


class Permissions:
    """권한 이름 상수"""

    INVOICES_POST = "invoices:post"
    INVOICES_VOID = "invoices:void"
    INVOICES_PAY = "invoices:pay"
    JOURNALS_POST = "journals:post"
    JOURNALS_VOID = "journals:void"
    ACCOUNTING_READ = "accounting:read"
    ACCOUNTING_WRITE = "accounting:write"

    @staticmethod
    def for_resource(resource: str, action: str) -> str:
        """리소스별 권한 이름

        Example:
            >>> Permissions.for_resource("invoices", "post")
            'invoices:post'
        """
        return f"{resource}:{action}"


def permission_matches(granted: Iterable[str], permission: str) -> bool:
    """부여된 권한 집합이 요청 권한을 포함하는지 확인"""
    granted = set(granted)
    if WILDCARD in granted or permission in granted:
        return True
    resource = permission.split(":", 1)[0]
    return f"{resource}:{WILDCARD}" in granted


@runtime_checkable
class Authorizer(Protocol):
    """권한 확인 인터페이스"""

    async def allows(self, user_id: str, permission: str) -> bool:
        ...


class StoreAuthorizer:
    """user_permission 테이블 기반 Authorizer

    사용자별 권한 집합을 PermissionCache에 TTL 동안 보관.
    grant/revoke 시 해당 사용자 캐시 즉시 무효화.

    Args:
        db: SQLite 어댑터
        cache: 권한 캐시 (생략 시 기본 TTL로 생성)
    """

    def __init__(self, db: SQLiteAdapter, cache: PermissionCache | None = None):
        self.db = db
        self.cache = cache if cache is not None else PermissionCache()

    async def allows(self, user_id: str, permission: str) -> bool:
        if not user_id:
            return False

        granted = await self.permissions_for(user_id)
        allowed = permission_matches(granted, permission)
        if not allowed:
            logger.debug(f"Permission denied: {user_id} -> {permission}")
        return allowed

    async def permissions_for(self, user_id: str) -> frozenset[str]:
        """사용자 권한 집합 (캐시 우선)"""
        cached = self.cache.get(user_id)
        if cached is not None:
            return cached

        rows = await self.db.fetchall(
            "SELECT permission FROM user_permission WHERE user_id = ?",
            (user_id,),
        )
        granted = frozenset(row[0] for row in rows)
        self.cache.set(user_id, granted)
        return granted

    async def grant(self, user_id: str, permission: str) -> None:
        """권한 부여"""
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT OR IGNORE INTO user_permission (user_id, permission)
                VALUES (?, ?)
                """,
                (user_id, permission),
            )
        self.cache.invalidate(user_id)
        logger.info("Permission granted", extra={"user_id": user_id, "permission": permission})

    async def revoke(self, user_id: str, permission: str) -> None:
        """권한 회수"""
        async with self.db.transaction():
            await self.db.execute(
                "DELETE FROM user_permission WHERE user_id = ? AND permission = ?",
                (user_id, permission),
            )
        self.cache.invalidate(user_id)
        logger.info("Permission revoked", extra={"user_id": user_id, "permission": permission})


class StaticAuthorizer:
    """메모리 내 고정 권한 Authorizer (테스트, 로컬 개발용)

    Args:
        grants: user_id -> 권한 목록
    """

    def __init__(self, grants: Mapping[str, Iterable[str]] | None = None):
        self._grants = {
            user_id: frozenset(permissions)
            for user_id, permissions in (grants or {}).items()
        }

    async def allows(self, user_id: str, permission: str) -> bool:
        return permission_matches(self._grants.get(user_id, ()), permission)
