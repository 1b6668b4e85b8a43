"""
계정과목 서비스

계정과목 조회/생성 및 회사 기본 계정 생성
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import Authorizer, Permissions
from core.ledger.errors import DocumentValidationError, ForbiddenError
from core.ledger.models import Account
from core.ledger.schema import seed_company
from core.ledger.store import LedgerStore
from core.ledger.types import AccountType, JournalSide

logger = logging.getLogger(__name__)


def _account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "company_id": account.company_id,
        "code": account.code,
        "name": account.name,
        "account_type": account.account_type.value,
        "normal_side": account.normal_side.value,
        "is_active": account.is_active,
    }


class AccountService:
    """계정과목 서비스

    Args:
        db: SQLite 어댑터 (쓰기 가능)
        authorizer: 권한 확인
    """

    def __init__(self, db: SQLiteAdapter, authorizer: Authorizer):
        self.db = db
        self.authorizer = authorizer
        self.store = LedgerStore(db)

    async def _require(self, user_id: str, permission: str) -> None:
        if not await self.authorizer.allows(user_id, permission):
            raise ForbiddenError(user_id, permission)

    async def list_accounts(
        self,
        user_id: str,
        company_id: str,
        account_type: AccountType | None = None,
    ) -> list[dict[str, Any]]:
        """계정과목 목록"""
        await self._require(user_id, Permissions.ACCOUNTING_READ)
        accounts = await self.store.list_accounts(company_id, account_type)
        return [_account_to_dict(account) for account in accounts]

    async def create_account(
        self,
        user_id: str,
        company_id: str,
        code: str,
        name: str,
        account_type: AccountType,
        normal_side: JournalSide | None = None,
    ) -> dict[str, Any]:
        """계정과목 생성

        Raises:
            DocumentValidationError: 이미 존재하는 코드
        """
        await self._require(user_id, Permissions.ACCOUNTING_WRITE)
        if await self.store.get_account(company_id, code) is not None:
            raise DocumentValidationError(f"Account already exists: {code}", field="code")

        account = await self.store.create_account(
            company_id, code, name, account_type, normal_side,
        )
        logger.info("Account created", extra={"company_id": company_id, "code": code})
        return _account_to_dict(account)

    async def seed_defaults(self, user_id: str, company_id: str) -> list[dict[str, Any]]:
        """회사 기본 계정과목 + 분개 규칙 생성"""
        await self._require(user_id, Permissions.ACCOUNTING_WRITE)
        await seed_company(self.db, company_id)
        accounts = await self.store.list_accounts(company_id)
        return [_account_to_dict(account) for account in accounts]
