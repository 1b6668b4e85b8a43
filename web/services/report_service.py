"""
리포트 서비스

재무상태표, 손익계산서, 시산표, 계정별 잔액 조회.
"""

import logging
from datetime import date
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import Authorizer, Permissions
from core.ledger.aggregator import PeriodAggregator
from core.ledger.errors import ForbiddenError
from core.ledger.reports import ReportGenerator, ReportSection
from core.ledger.store import LedgerStore
from core.utils.money import format_amount

logger = logging.getLogger(__name__)


def _section_to_dict(section: ReportSection) -> dict[str, Any]:
    return {
        "items": [
            {"code": item.code, "name": item.name, "balance": format_amount(item.balance)}
            for item in section.items
        ],
        "total": format_amount(section.total),
    }


class ReportService:
    """리포트 서비스

    Args:
        db: SQLite 어댑터
        authorizer: 권한 확인
    """

    def __init__(self, db: SQLiteAdapter, authorizer: Authorizer):
        self.db = db
        self.authorizer = authorizer
        self.store = LedgerStore(db)
        self.aggregator = PeriodAggregator(self.store)
        self.reports = ReportGenerator(self.aggregator)

    async def _require_read(self, user_id: str) -> None:
        if not await self.authorizer.allows(user_id, Permissions.ACCOUNTING_READ):
            raise ForbiddenError(user_id, Permissions.ACCOUNTING_READ)

    async def balance_sheet(
        self,
        user_id: str,
        company_id: str,
        as_of: date,
    ) -> dict[str, Any]:
        """재무상태표"""
        await self._require_read(user_id)
        sheet = await self.reports.balance_sheet(company_id, as_of)
        return {
            "company_id": company_id,
            "as_of_date": as_of,
            "assets": _section_to_dict(sheet.assets),
            "liabilities": _section_to_dict(sheet.liabilities),
            "equity": _section_to_dict(sheet.equity),
            "current_earnings": format_amount(sheet.current_earnings),
            "total_assets": format_amount(sheet.total_assets),
            "total_liabilities": format_amount(sheet.total_liabilities),
            "total_equity": format_amount(sheet.total_equity),
            "discrepancy": format_amount(sheet.discrepancy),
            "is_balanced": sheet.is_balanced,
        }

    async def income_statement(
        self,
        user_id: str,
        company_id: str,
        start_date: date,
        end_date: date,
    ) -> dict[str, Any]:
        """손익계산서"""
        await self._require_read(user_id)
        statement = await self.reports.income_statement(company_id, start_date, end_date)
        return {
            "company_id": company_id,
            "start_date": start_date,
            "end_date": end_date,
            "revenue": _section_to_dict(statement.revenue),
            "expenses": _section_to_dict(statement.expenses),
            "total_revenue": format_amount(statement.total_revenue),
            "total_expenses": format_amount(statement.total_expenses),
            "net_income": format_amount(statement.net_income),
        }

    async def trial_balance(
        self,
        user_id: str,
        company_id: str,
        start_date: date,
        end_date: date,
    ) -> dict[str, Any]:
        """시산표"""
        await self._require_read(user_id)
        trial = await self.aggregator.trial_balance(company_id, start_date, end_date)
        return {
            "company_id": company_id,
            "start_date": start_date,
            "end_date": end_date,
            "rows": [
                {
                    "account_code": row.account.code,
                    "account_name": row.account.name,
                    "account_type": row.account.account_type.value,
                    "opening_debit": format_amount(row.opening_debit),
                    "opening_credit": format_amount(row.opening_credit),
                    "period_debit": format_amount(row.period_debit),
                    "period_credit": format_amount(row.period_credit),
                    "closing_debit": format_amount(row.closing_debit),
                    "closing_credit": format_amount(row.closing_credit),
                }
                for row in trial.rows
            ],
            "total_closing_debit": format_amount(trial.total_closing_debit),
            "total_closing_credit": format_amount(trial.total_closing_credit),
            "is_balanced": trial.is_balanced,
        }

    async def balances(
        self,
        user_id: str,
        company_id: str,
        as_of: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict[str, Any]:
        """계정별 잔액"""
        await self._require_read(user_id)
        balances = await self.aggregator.balances(
            company_id, as_of=as_of, start_date=start_date, end_date=end_date,
        )
        return {
            "company_id": company_id,
            "as_of_date": as_of,
            "start_date": start_date,
            "end_date": end_date,
            "balances": {code: format_amount(amount) for code, amount in balances.items()},
        }
