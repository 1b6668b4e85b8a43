"""
재무제표 생성

PeriodAggregator 잔액을 계정 유형별로 묶어 재무상태표/손익계산서 생성.
재무상태표 불일치(자산 != 부채 + 자본)는 보정하지 않고 그대로 보고.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from core.ledger.aggregator import AccountBalance, PeriodAggregator
from core.ledger.errors import DocumentValidationError
from core.ledger.types import NORMAL_SIDE_BY_TYPE, AccountType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class ReportLine:
    """재무제표 계정 행"""

    code: str
    name: str
    balance: Decimal


@dataclass
class ReportSection:
    """재무제표 구분 (자산, 부채 등)"""

    account_type: AccountType
    items: list[ReportLine] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((item.balance for item in self.items), ZERO)


@dataclass
class BalanceSheet:
    """재무상태표

    equity_total은 자본 계정 + 당기순이익.
    """

    company_id: str
    as_of: date
    assets: ReportSection
    liabilities: ReportSection
    equity: ReportSection
    current_earnings: Decimal

    @property
    def total_assets(self) -> Decimal:
        return self.assets.total

    @property
    def total_liabilities(self) -> Decimal:
        return self.liabilities.total

    @property
    def total_equity(self) -> Decimal:
        return self.equity.total + self.current_earnings

    @property
    def discrepancy(self) -> Decimal:
        """자산 - (부채 + 자본). 정상이면 0"""
        return self.total_assets - (self.total_liabilities + self.total_equity)

    @property
    def is_balanced(self) -> bool:
        return self.discrepancy == 0


@dataclass
class IncomeStatement:
    """손익계산서"""

    company_id: str
    start_date: date
    end_date: date
    revenue: ReportSection
    expenses: ReportSection

    @property
    def total_revenue(self) -> Decimal:
        return self.revenue.total

    @property
    def total_expenses(self) -> Decimal:
        return self.expenses.total

    @property
    def net_income(self) -> Decimal:
        return self.total_revenue - self.total_expenses


def natural_balance(item: AccountBalance) -> Decimal:
    """계정 유형의 정상 방향 기준 잔액

    차감 계정(정상 방향이 유형과 반대)은 부호 반전.
    """
    account = item.account
    if account.normal_side == NORMAL_SIDE_BY_TYPE[account.account_type]:
        return item.balance
    return -item.balance


def _group(
    balances: list[AccountBalance],
    *account_types: AccountType,
) -> dict[AccountType, ReportSection]:
    sections = {account_type: ReportSection(account_type) for account_type in account_types}
    for item in balances:
        section = sections.get(item.account.account_type)
        if section is None:
            continue
        section.items.append(ReportLine(
            code=item.account.code,
            name=item.account.name,
            balance=natural_balance(item),
        ))
    return sections


class ReportGenerator:
    """재무제표 생성기

    Args:
        aggregator: 기간 잔액 집계기
    """

    def __init__(self, aggregator: PeriodAggregator):
        self.aggregator = aggregator

    async def balance_sheet(self, company_id: str, as_of: date) -> BalanceSheet:
        """재무상태표 (as_of 이하 전체 분개)

        수익 - 비용을 당기순이익으로 자본에 포함.
        """
        balances = await self.aggregator.account_balances(company_id, as_of=as_of)
        sections = _group(
            balances,
            AccountType.ASSET,
            AccountType.LIABILITY,
            AccountType.EQUITY,
            AccountType.REVENUE,
            AccountType.EXPENSE,
        )
        current_earnings = (
            sections[AccountType.REVENUE].total - sections[AccountType.EXPENSE].total
        )

        sheet = BalanceSheet(
            company_id=company_id,
            as_of=as_of,
            assets=sections[AccountType.ASSET],
            liabilities=sections[AccountType.LIABILITY],
            equity=sections[AccountType.EQUITY],
            current_earnings=current_earnings,
        )

        if not sheet.is_balanced:
            logger.error(
                "Balance sheet does not balance",
                extra={
                    "company_id": company_id,
                    "as_of": as_of.isoformat(),
                    "discrepancy": f"{sheet.discrepancy:f}",
                },
            )
        return sheet

    async def income_statement(
        self,
        company_id: str,
        start_date: date,
        end_date: date,
    ) -> IncomeStatement:
        """손익계산서 (start_date ~ end_date)"""
        if start_date is None or end_date is None:
            raise DocumentValidationError(
                "start_date and end_date are required",
                field="start_date" if start_date is None else "end_date",
            )

        balances = await self.aggregator.account_balances(
            company_id, start_date=start_date, end_date=end_date,
        )
        sections = _group(balances, AccountType.REVENUE, AccountType.EXPENSE)

        return IncomeStatement(
            company_id=company_id,
            start_date=start_date,
            end_date=end_date,
            revenue=sections[AccountType.REVENUE],
            expenses=sections[AccountType.EXPENSE],
        )
