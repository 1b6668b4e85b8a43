"""
ReportGenerator 통합 테스트

재무상태표 항등식(자산 = 부채 + 자본), 손익계산서
"""

import asyncio
import logging
import tempfile
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.auth.authorizer import StaticAuthorizer
from core.ledger.aggregator import PeriodAggregator
from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.errors import DocumentValidationError
from core.ledger.models import LedgerEntry
from core.ledger.posting import PostingEngine
from core.ledger.reports import ReportGenerator
from core.ledger.reversal import ReversalEngine
from core.ledger.schema import seed_company
from core.ledger.store import LedgerStore
from core.ledger.types import AccountType, DocumentType, InvoiceType, JournalSide
from tests.utils.helpers import COMPANY_ID, FIXED_NOW, create_invoice, create_journal, line

ALL_CODES = ["1100", "1200", "1300", "1500", "2100", "2200", "3100", "3200", "4100", "4900", "5100", "6100"]


def reports_for(store: LedgerStore) -> ReportGenerator:
    return ReportGenerator(PeriodAggregator(store))


@pytest_asyncio.fixture
async def posting(
    store: LedgerStore,
    authorizer: StaticAuthorizer,
    builder: LedgerEntryBuilder,
) -> PostingEngine:
    return PostingEngine(store, authorizer, builder)


class TestBalanceSheet:
    """재무상태표"""

    @pytest.mark.asyncio
    async def test_empty_books(self, store: LedgerStore) -> None:
        sheet = await reports_for(store).balance_sheet(COMPANY_ID, date(2026, 3, 31))

        assert sheet.total_assets == Decimal("0")
        assert sheet.is_balanced is True
        assert sheet.assets.items == []

    @pytest.mark.asyncio
    async def test_identity_with_earnings(
        self, store: LedgerStore, posting: PostingEngine,
    ) -> None:
        """매출/비용이 있어도 당기순이익 포함 시 균형"""
        capital = await create_journal(store, [
            line("1100", "debit", "10000"),
            line("3100", "credit", "10000"),
        ])
        sale = await create_invoice(store, InvoiceType.OUTPUT, "1000", "100")
        purchase = await create_invoice(store, InvoiceType.INPUT, "400", "40")
        for document in (capital, sale, purchase):
            await posting.post(document.document_id, "alice")

        sheet = await reports_for(store).balance_sheet(COMPANY_ID, date(2026, 3, 31))

        assert sheet.total_assets == Decimal("11140")  # 현금 10000 + 채권 1100 + 선급 부가세 40
        assert sheet.total_liabilities == Decimal("540")  # 채무 440 + 예수 부가세 100
        assert sheet.current_earnings == Decimal("600")
        assert sheet.total_equity == Decimal("10600")
        assert sheet.discrepancy == Decimal("0")
        assert sheet.is_balanced is True
        assert [item.code for item in sheet.assets.items] == ["1100", "1200", "1300"]

    @pytest.mark.asyncio
    async def test_contra_account_reduces_section(
        self, store: LedgerStore, posting: PostingEngine,
    ) -> None:
        """차감 계정은 자산 합계를 줄임"""
        await store.create_account(COMPANY_ID, "1590", "Accumulated Depreciation", "asset", "credit")
        documents = [
            await create_journal(store, [
                line("1500", "debit", "1000"),
                line("3100", "credit", "1000"),
            ]),
            await create_journal(store, [
                line("6100", "debit", "100"),
                line("1590", "credit", "100"),
            ]),
        ]
        for document in documents:
            await posting.post(document.document_id, "alice")

        sheet = await reports_for(store).balance_sheet(COMPANY_ID, date(2026, 3, 31))
        assets = {item.code: item.balance for item in sheet.assets.items}

        assert assets["1590"] == Decimal("-100")
        assert sheet.total_assets == Decimal("900")
        assert sheet.is_balanced is True

    @pytest.mark.asyncio
    async def test_discrepancy_reported_not_corrected(
        self,
        store: LedgerStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """원장이 깨진 경우 불일치를 그대로 보고"""
        document = await create_journal(store, [])
        await store.insert_entries([
            LedgerEntry(
                entry_id="broken-1",
                company_id=COMPANY_ID,
                source_document_id=document.document_id,
                source_document_type=DocumentType.JOURNAL,
                account_code="1100",
                side=JournalSide.DEBIT,
                amount=Decimal("10"),
                entry_date=date(2026, 3, 31),
                created_at=FIXED_NOW,
            ),
        ])

        with caplog.at_level(logging.ERROR, logger="core.ledger.reports"):
            sheet = await reports_for(store).balance_sheet(COMPANY_ID, date(2026, 3, 31))

        assert sheet.is_balanced is False
        assert sheet.discrepancy == Decimal("10")
        assert "does not balance" in caplog.text

    @pytest.mark.asyncio
    async def test_voided_document_excluded_after_void(
        self,
        store: LedgerStore,
        posting: PostingEngine,
        authorizer: StaticAuthorizer,
    ) -> None:
        document = await create_invoice(store, InvoiceType.OUTPUT, "500", "50")
        await posting.post(document.document_id, "alice")
        voided_at = datetime(2026, 4, 10, tzinfo=timezone.utc)
        await ReversalEngine(
            store, authorizer, LedgerEntryBuilder(clock=lambda: voided_at),
        ).void(document.document_id, "alice", "wrong customer")

        march = await reports_for(store).balance_sheet(COMPANY_ID, date(2026, 3, 31))
        april = await reports_for(store).balance_sheet(COMPANY_ID, date(2026, 4, 30))

        assert march.total_assets == Decimal("550")
        assert april.total_assets == Decimal("0")
        assert april.is_balanced is True


class TestIncomeStatement:
    """손익계산서"""

    @pytest.mark.asyncio
    async def test_period_only(self, store: LedgerStore, posting: PostingEngine) -> None:
        march = await create_journal(store, [
            line("1100", "debit", "1200"),
            line("4100", "credit", "1200"),
        ], document_date=date(2026, 3, 15))
        rent = await create_journal(store, [
            line("6100", "debit", "500"),
            line("1100", "credit", "500"),
        ], document_date=date(2026, 3, 31))
        april = await create_journal(store, [
            line("1100", "debit", "300"),
            line("4900", "credit", "300"),
        ], document_date=date(2026, 4, 1))
        for document in (march, rent, april):
            await posting.post(document.document_id, "alice")

        statement = await reports_for(store).income_statement(
            COMPANY_ID, date(2026, 3, 1), date(2026, 3, 31),
        )

        assert statement.total_revenue == Decimal("1200")
        assert statement.total_expenses == Decimal("500")
        assert statement.net_income == Decimal("700")
        assert [item.code for item in statement.revenue.items] == ["4100"]
        assert statement.revenue.account_type == AccountType.REVENUE

    @pytest.mark.asyncio
    async def test_dates_required(self, store: LedgerStore) -> None:
        with pytest.raises(DocumentValidationError):
            await reports_for(store).income_statement(COMPANY_ID, None, date(2026, 3, 31))  # type: ignore[arg-type]


# =============================================================================
# 속성 테스트: 임의의 균형 전표 + 취소 후에도 항등식 유지
# =============================================================================

posting_strategy = st.tuples(
    st.lists(
        st.tuples(st.sampled_from(ALL_CODES), st.integers(min_value=1, max_value=10_000_000)),
        min_size=1,
        max_size=3,
    ),
    st.lists(st.sampled_from(ALL_CODES), min_size=1, max_size=3),
    st.integers(min_value=0, max_value=90),
    st.booleans(),
)


def _split(total_cents: int, parts: int) -> list[int]:
    """합계를 parts개 양수 금액으로 분할 (parts <= total)"""
    parts = min(parts, total_cents)
    base = [total_cents // parts] * parts
    base[-1] += total_cents - sum(base)
    return base


def _cents(value: int) -> str:
    return f"{Decimal(value).scaleb(-2):f}"


async def _run_identity_check(
    postings: list[tuple[list[tuple[str, int]], list[str], int, bool]],
    as_of_offset: int,
) -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        async with SQLiteAdapter(Path(tmpdir) / "prop.db") as db:
            await init_schema(db)
            await seed_company(db, COMPANY_ID)
            store = LedgerStore(db)
            authorizer = StaticAuthorizer({"alice": ["*"]})
            base = date(2026, 1, 1)
            engine = PostingEngine(store, authorizer, LedgerEntryBuilder(clock=lambda: FIXED_NOW))
            voider = ReversalEngine(
                store, authorizer,
                LedgerEntryBuilder(clock=lambda: datetime(2026, 2, 15, tzinfo=timezone.utc)),
            )

            for debits, credit_codes, day, void in postings:
                total = sum(cents for _, cents in debits)
                lines = [line(code, "debit", _cents(cents)) for code, cents in debits]
                credits = _split(total, len(credit_codes))
                lines += [
                    line(code, "credit", _cents(cents))
                    for code, cents in zip(credit_codes, credits)
                ]
                document = await create_journal(
                    store, lines, document_date=base + timedelta(days=day),
                )
                await engine.post(document.document_id, "alice")
                if void:
                    await voider.void(document.document_id, "alice", "property test")

            sheet = await reports_for(store).balance_sheet(
                COMPANY_ID, base + timedelta(days=as_of_offset),
            )

            assert sheet.discrepancy == 0
            assert sheet.is_balanced is True


class TestBalanceSheetIdentityProperty:
    """자산 = 부채 + 자본 (임의 전표)"""

    @settings(
        max_examples=25,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    @given(
        postings=st.lists(posting_strategy, min_size=1, max_size=8),
        as_of_offset=st.integers(min_value=0, max_value=120),
    )
    def test_identity_holds(self, postings, as_of_offset: int) -> None:
        asyncio.run(_run_identity_check(postings, as_of_offset))
