"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import Authorizer, StoreAuthorizer
from core.auth.cache import PermissionCache
from core.config.loader import Settings, get_settings
from core.ledger.entry_builder import LedgerEntryBuilder


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    리포트/목록 조회용.
    """
    settings = get_settings()
    async with SQLiteAdapter(
        settings.db_path, readonly=True, busy_timeout_ms=settings.db_busy_timeout_ms,
    ) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    문서 생성/전기/취소 시 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(
        settings.db_path, readonly=False, busy_timeout_ms=settings.db_busy_timeout_ms,
    ) as db:
        yield db


# =========================================================================
# 권한 (Authorizer)
# =========================================================================

# 프로세스 단위 권한 캐시 (요청마다 생성되는 StoreAuthorizer가 공유)
_permission_cache: PermissionCache | None = None


def get_permission_cache() -> PermissionCache:
    """권한 캐시 반환 (최초 호출 시 설정값으로 생성)"""
    global _permission_cache
    if _permission_cache is None:
        auth = get_settings().auth
        _permission_cache = PermissionCache(
            ttl_sec=auth.permission_cache_ttl_sec,
            max_entries=auth.permission_cache_max_entries,
        )
    return _permission_cache


def reset_permission_cache() -> None:
    """권한 캐시 초기화 (테스트용)"""
    global _permission_cache
    _permission_cache = None


async def get_authorizer(
    db: SQLiteAdapter = Depends(get_db),
    cache: PermissionCache = Depends(get_permission_cache),
) -> Authorizer:
    """user_permission 기반 Authorizer (조회 전용 세션)"""
    return StoreAuthorizer(db, cache)


def get_entry_builder() -> LedgerEntryBuilder:
    """분개 생성기 (시스템 UTC 시계)"""
    return LedgerEntryBuilder()


async def get_current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> str:
    """요청 사용자 ID

    인증은 앞단(게이트웨이)에서 처리하고 사용자 ID만 헤더로 전달받음.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return x_user_id.strip()
