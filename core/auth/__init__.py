"""
권한 패키지

전기/취소/조회 권한 확인 (Authorizer) 및 권한 캐시
"""

from core.auth.authorizer import (
    Authorizer,
    Permissions,
    StaticAuthorizer,
    StoreAuthorizer,
)
from core.auth.cache import PermissionCache

__all__ = [
    "Authorizer",
    "Permissions",
    "PermissionCache",
    "StaticAuthorizer",
    "StoreAuthorizer",
]
