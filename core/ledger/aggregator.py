"""
Period Aggregator

불변 원장을 기간 기준으로 합산하여 계정별 잔액 계산.
저장하지 않고 매번 원장에서 다시 계산 (캐시 무효화 없음).
역분개도 원본과 똑같이 합산에 참여.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from core.ledger.errors import DocumentValidationError
from core.ledger.models import Account, LedgerEntry
from core.ledger.store import LedgerStore
from core.ledger.types import JournalSide

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class AccountBalance:
    """계정별 기간 합계

    balance는 정상 잔액 방향 기준 부호 (정상 방향 +, 반대 방향 -).
    """

    account: Account
    debit_total: Decimal = ZERO
    credit_total: Decimal = ZERO
    balance: Decimal = ZERO

    def add(self, entry: LedgerEntry) -> None:
        if entry.side == JournalSide.DEBIT:
            self.debit_total += entry.amount
        else:
            self.credit_total += entry.amount
        self.balance += self.account.signed(entry.side, entry.amount)


@dataclass
class TrialBalanceRow:
    """시산표 행 (기초 / 당기 / 기말 차대 합계)"""

    account: Account
    opening_debit: Decimal = ZERO
    opening_credit: Decimal = ZERO
    period_debit: Decimal = ZERO
    period_credit: Decimal = ZERO

    @property
    def closing_debit(self) -> Decimal:
        return self.opening_debit + self.period_debit

    @property
    def closing_credit(self) -> Decimal:
        return self.opening_credit + self.period_credit


@dataclass
class TrialBalance:
    """시산표"""

    company_id: str
    start_date: date
    end_date: date
    rows: list[TrialBalanceRow]

    @property
    def total_closing_debit(self) -> Decimal:
        return sum((row.closing_debit for row in self.rows), ZERO)

    @property
    def total_closing_credit(self) -> Decimal:
        return sum((row.closing_credit for row in self.rows), ZERO)

    @property
    def is_balanced(self) -> bool:
        return self.total_closing_debit == self.total_closing_credit


def resolve_window(
    as_of: date | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> tuple[date | None, date | None]:
    """조회 기간 결정 (양 끝 포함)

    as_of: entry_date <= as_of
    기간: start_date <= entry_date <= end_date

    Raises:
        DocumentValidationError: as_of와 기간 동시 지정, start > end
    """
    if as_of is not None:
        if start_date is not None or end_date is not None:
            raise DocumentValidationError(
                "as_of and a date range are mutually exclusive",
                field="as_of",
            )
        return None, as_of

    if start_date is not None and end_date is not None and start_date > end_date:
        raise DocumentValidationError(
            f"start_date {start_date} is after end_date {end_date}",
            field="start_date",
        )
    return start_date, end_date


class PeriodAggregator:
    """기간 잔액 집계

    Args:
        store: Ledger 저장소
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    async def balances(
        self,
        company_id: str,
        as_of: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict[str, Decimal]:
        """계정 코드 → 정상 방향 기준 잔액

        기간 내 분개가 있는 계정은 잔액이 0이어도 포함.
        """
        account_balances = await self.account_balances(
            company_id, as_of=as_of, start_date=start_date, end_date=end_date,
        )
        return {item.account.code: item.balance for item in account_balances}

    async def account_balances(
        self,
        company_id: str,
        as_of: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[AccountBalance]:
        """계정별 차변/대변 합계 + 잔액 (코드 순)"""
        start, end = resolve_window(as_of, start_date, end_date)

        accounts = {
            account.code: account
            for account in await self.store.list_accounts(company_id)
        }
        entries = await self.store.get_entries(company_id, start, end)

        totals: dict[str, AccountBalance] = {}
        for entry in entries:
            item = totals.get(entry.account_code)
            if item is None:
                item = AccountBalance(account=accounts[entry.account_code])
                totals[entry.account_code] = item
            item.add(entry)

        logger.debug(
            f"Aggregated {len(entries)} entries into {len(totals)} accounts",
            extra={"company_id": company_id},
        )
        return [totals[code] for code in sorted(totals)]

    async def trial_balance(
        self,
        company_id: str,
        start_date: date,
        end_date: date,
    ) -> TrialBalance:
        """시산표 (활성 계정 전체)

        기초: start_date 이전 분개
        당기: start_date ~ end_date 분개
        기말: 기초 + 당기
        """
        resolve_window(start_date=start_date, end_date=end_date)

        accounts = await self.store.list_accounts(company_id, active_only=True)
        rows = {account.code: TrialBalanceRow(account=account) for account in accounts}

        opening_end = start_date - timedelta(days=1)
        for entry in await self.store.get_entries(company_id, end_date=opening_end):
            row = rows.get(entry.account_code)
            if row is None:
                continue
            if entry.side == JournalSide.DEBIT:
                row.opening_debit += entry.amount
            else:
                row.opening_credit += entry.amount

        for entry in await self.store.get_entries(company_id, start_date, end_date):
            row = rows.get(entry.account_code)
            if row is None:
                continue
            if entry.side == JournalSide.DEBIT:
                row.period_debit += entry.amount
            else:
                row.period_credit += entry.amount

        return TrialBalance(
            company_id=company_id,
            start_date=start_date,
            end_date=end_date,
            rows=[rows[code] for code in sorted(rows)],
        )
