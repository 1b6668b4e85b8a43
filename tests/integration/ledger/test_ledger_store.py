"""LedgerStore 통합 테스트"""

from datetime import date, datetime, timezone
from decimal import Decimal

import aiosqlite
import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.schema import LEDGER_APPEND_ONLY_MESSAGE, seed_company
from core.ledger.store import LedgerStore
from core.ledger.types import (
    DEFAULT_CHART_OF_ACCOUNTS,
    AccountType,
    DocumentStatus,
    DocumentType,
    InvoiceType,
    JournalSide,
    PostingRole,
)
from tests.utils.helpers import COMPANY_ID, FIXED_NOW, create_invoice, create_journal, line


class TestAccounts:
    """계정과목"""

    @pytest.mark.asyncio
    async def test_seeded_accounts(self, store: LedgerStore) -> None:
        accounts = await store.list_accounts(COMPANY_ID)

        assert len(accounts) == len(DEFAULT_CHART_OF_ACCOUNTS)
        assert [a.code for a in accounts] == sorted(a.code for a in accounts)

    @pytest.mark.asyncio
    async def test_seed_idempotent(self, db: SQLiteAdapter, store: LedgerStore) -> None:
        await seed_company(db, COMPANY_ID)

        assert len(await store.list_accounts(COMPANY_ID)) == len(DEFAULT_CHART_OF_ACCOUNTS)

    @pytest.mark.asyncio
    async def test_filter_by_type(self, store: LedgerStore) -> None:
        revenue = await store.list_accounts(COMPANY_ID, AccountType.REVENUE)

        assert {a.code for a in revenue} == {"4100", "4900"}
        assert all(a.normal_side == JournalSide.CREDIT for a in revenue)

    @pytest.mark.asyncio
    async def test_create_account_default_side(self, store: LedgerStore) -> None:
        account = await store.create_account(COMPANY_ID, "1910", "Allowance", AccountType.ASSET)

        assert account.normal_side == JournalSide.DEBIT
        assert await store.get_account(COMPANY_ID, "1910") == account

    @pytest.mark.asyncio
    async def test_create_contra_account(self, store: LedgerStore) -> None:
        """차감 계정 (자산이지만 대변 정상)"""
        account = await store.create_account(
            COMPANY_ID, "1590", "Accumulated Depreciation", "asset", "credit",
        )

        assert account.normal_side == JournalSide.CREDIT

    @pytest.mark.asyncio
    async def test_duplicate_code(self, store: LedgerStore) -> None:
        with pytest.raises(aiosqlite.IntegrityError):
            await store.create_account(COMPANY_ID, "1100", "Cash again", AccountType.ASSET)

    @pytest.mark.asyncio
    async def test_companies_isolated(self, store: LedgerStore) -> None:
        assert await store.get_account("other", "1100") is None
        assert await store.list_accounts("other") == []


class TestPostingRules:
    """분개 규칙"""

    @pytest.mark.asyncio
    async def test_default_rules(self, store: LedgerStore) -> None:
        rules = await store.get_posting_rules(COMPANY_ID, InvoiceType.OUTPUT)

        assert rules == {
            PostingRole.RECEIVABLE: "1200",
            PostingRole.REVENUE: "4100",
            PostingRole.OUTPUT_TAX: "2200",
            PostingRole.CASH: "1100",
        }

    @pytest.mark.asyncio
    async def test_set_rule_replaces(self, store: LedgerStore) -> None:
        await store.set_posting_rule(COMPANY_ID, "OUTPUT", "revenue", "4900")

        rules = await store.get_posting_rules(COMPANY_ID, "OUTPUT")
        assert rules[PostingRole.REVENUE] == "4900"


class TestDocuments:
    """draft 문서"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, store: LedgerStore) -> None:
        created = await create_journal(store, [
            line("6100", "debit", "500.00"),
            line("1100", "credit", "500.00"),
        ])

        loaded = await store.get_document(created.document_id)

        assert loaded is not None
        assert loaded.status == DocumentStatus.DRAFT
        assert loaded.document_type == DocumentType.JOURNAL
        assert loaded.document_date == date(2026, 3, 31)
        assert [(l.account_code, l.side, l.amount, l.line_order) for l in loaded.lines] == [
            ("6100", JournalSide.DEBIT, Decimal("500.00"), 0),
            ("1100", JournalSide.CREDIT, Decimal("500.00"), 1),
        ]

    @pytest.mark.asyncio
    async def test_get_missing(self, store: LedgerStore) -> None:
        assert await store.get_document("missing") is None

    @pytest.mark.asyncio
    async def test_numbering_per_month(self, store: LedgerStore) -> None:
        """YYYYMM + 4자리 일련번호 (월별 재시작)"""
        first = await create_journal(store, [], document_date=date(2026, 3, 1))
        second = await create_journal(store, [], document_date=date(2026, 3, 31))
        april = await create_journal(store, [], document_date=date(2026, 4, 1))

        assert first.number == "2026030001"
        assert second.number == "2026030002"
        assert april.number == "2026040001"

    @pytest.mark.asyncio
    async def test_numbering_past_four_digits(self, store: LedgerStore) -> None:
        """9999 다음은 10000 (문자열 정렬이 아닌 숫자 정렬)"""
        last = await create_journal(store, [])
        await store.db.execute(
            "UPDATE document SET number = ? WHERE document_id = ?",
            ("2026039999", last.document_id),
        )
        await store.db.commit()

        overflow = await create_journal(store, [])
        following = await create_journal(store, [])

        assert overflow.number == "20260310000"
        assert following.number == "20260310001"

    @pytest.mark.asyncio
    async def test_numbering_per_document_type(self, store: LedgerStore) -> None:
        journal = await create_journal(store, [])
        invoice = await store.create_document(
            COMPANY_ID, DocumentType.INVOICE, date(2026, 3, 31), "alice",
            invoice_type=InvoiceType.OUTPUT,
        )

        assert journal.number == invoice.number == "2026030001"

    @pytest.mark.asyncio
    async def test_invoice_header_round_trip(self, store: LedgerStore) -> None:
        created = await store.create_document(
            COMPANY_ID, "invoice", date(2026, 3, 31), "alice",
            counterparty="Globex",
            invoice_type="OUTPUT",
            untaxed_amount=Decimal("1000.00"),
            tax_amount=Decimal("100.00"),
            total_amount=Decimal("1100.00"),
            created_at=FIXED_NOW,
        )

        loaded = await store.get_document(created.document_id)

        assert loaded.invoice_type == InvoiceType.OUTPUT
        assert loaded.untaxed_amount == Decimal("1000.00")
        assert loaded.total_amount == Decimal("1100.00")
        assert loaded.counterparty == "Globex"
        assert loaded.created_at == FIXED_NOW

    @pytest.mark.asyncio
    async def test_list_filters(self, store: LedgerStore) -> None:
        await create_journal(store, [], document_date=date(2026, 1, 15))
        await create_journal(store, [], document_date=date(2026, 2, 15))
        await create_journal(store, [], document_date=date(2026, 3, 15))

        documents = await store.list_documents(
            COMPANY_ID,
            document_type=DocumentType.JOURNAL,
            start_date=date(2026, 2, 1),
            end_date=date(2026, 3, 31),
        )

        assert [d.document_date for d in documents] == [date(2026, 3, 15), date(2026, 2, 15)]
        assert await store.list_documents(COMPANY_ID, status="posted") == []
        assert len(await store.list_documents(COMPANY_ID, limit=1, offset=1)) == 1

    @pytest.mark.asyncio
    async def test_replace_draft_lines(self, store: LedgerStore) -> None:
        document = await create_journal(store, [line("6100", "debit", "1")])

        replaced = await store.replace_draft_lines(document.document_id, [
            line("6100", "debit", "2"),
            line("1100", "credit", "2"),
        ])

        loaded = await store.get_document(document.document_id)
        assert replaced is True
        assert [l.amount for l in loaded.lines] == [Decimal("2"), Decimal("2")]

    @pytest.mark.asyncio
    async def test_delete_draft_cascades_lines(self, db: SQLiteAdapter, store: LedgerStore) -> None:
        document = await create_journal(store, [line("6100", "debit", "1")])

        assert await store.delete_draft_document(document.document_id) is True

        assert await store.get_document(document.document_id) is None
        row = await db.fetchone(
            "SELECT COUNT(*) FROM document_line WHERE document_id = ?",
            (document.document_id,),
        )
        assert row[0] == 0

    @pytest.mark.asyncio
    async def test_update_draft_keeps_number(self, store: LedgerStore) -> None:
        document = await create_journal(store, [line("6100", "debit", "1")])

        updated = await store.update_draft_document(
            document.document_id,
            document_date=date(2026, 3, 15),
            lines=[line("6100", "debit", "7"), line("1100", "credit", "7")],
            description="Corrected",
        )

        loaded = await store.get_document(document.document_id)
        assert updated.number == loaded.number == "2026030001"
        assert loaded.document_date == date(2026, 3, 15)
        assert loaded.description == "Corrected"
        assert [(l.account_code, l.amount, l.line_order) for l in loaded.lines] == [
            ("6100", Decimal("7"), 0),
            ("1100", Decimal("7"), 1),
        ]

    @pytest.mark.asyncio
    async def test_update_draft_renumbers_on_month_change(self, store: LedgerStore) -> None:
        """다른 월로 옮기면 그 월에서 다시 채번"""
        await create_journal(store, [], document_date=date(2026, 4, 2))
        document = await create_journal(store, [])

        updated = await store.update_draft_document(
            document.document_id, document_date=date(2026, 4, 20), lines=[],
        )

        assert updated.number == "2026040002"
        assert (await store.get_document(document.document_id)).number == "2026040002"

    @pytest.mark.asyncio
    async def test_update_invoice_header(self, store: LedgerStore) -> None:
        document = await create_invoice(store, InvoiceType.OUTPUT, "1000", "100")

        await store.update_draft_document(
            document.document_id,
            document_date=date(2026, 3, 31),
            lines=[],
            invoice_type=InvoiceType.INPUT,
            untaxed_amount=Decimal("200"),
            tax_amount=None,
            total_amount=Decimal("200"),
        )

        loaded = await store.get_document(document.document_id)
        assert loaded.invoice_type == InvoiceType.INPUT
        assert loaded.untaxed_amount == Decimal("200")
        assert loaded.tax_amount is None
        assert loaded.total_amount == Decimal("200")


class TestStatusCas:
    """상태 CAS"""

    @pytest.mark.asyncio
    async def test_mark_posted_once(self, store: LedgerStore) -> None:
        document = await create_journal(store, [])

        assert await store.mark_posted(document.document_id, "alice", FIXED_NOW) is True
        assert await store.mark_posted(document.document_id, "bob", FIXED_NOW) is False

        loaded = await store.get_document(document.document_id)
        assert loaded.status == DocumentStatus.POSTED
        assert loaded.posted_by == "alice"
        assert loaded.posted_at == FIXED_NOW

    @pytest.mark.asyncio
    async def test_mark_voided_requires_posted(self, store: LedgerStore) -> None:
        document = await create_journal(store, [])
        voided_at = datetime(2026, 5, 1, tzinfo=timezone.utc)

        assert await store.mark_voided(document.document_id, "alice", voided_at, "x") is False

        await store.mark_posted(document.document_id, "alice", FIXED_NOW)
        assert await store.mark_voided(document.document_id, "alice", voided_at, "dup") is True
        assert await store.mark_voided(document.document_id, "alice", voided_at, "dup") is False

        loaded = await store.get_document(document.document_id)
        assert loaded.void_reason == "dup"

    @pytest.mark.asyncio
    async def test_non_draft_not_editable(self, store: LedgerStore) -> None:
        document = await create_journal(store, [line("6100", "debit", "1")])
        await store.mark_posted(document.document_id, "alice", FIXED_NOW)

        assert await store.replace_draft_lines(document.document_id, []) is False
        assert await store.delete_draft_document(document.document_id) is False
        assert await store.update_draft_document(
            document.document_id, date(2026, 3, 31), [],
        ) is None
        assert await store.get_document(document.document_id) is not None


class TestLedgerEntries:
    """원장 분개 (append-only)"""

    async def _post(self, store: LedgerStore, builder: LedgerEntryBuilder):
        lines = [line("6100", "debit", "500.00"), line("1100", "credit", "500.00")]
        document = await create_journal(store, lines)
        entries = builder.build_posting_entries(document, lines, FIXED_NOW)
        await store.insert_entries(entries)
        return document, entries

    @pytest.mark.asyncio
    async def test_insert_and_read(self, store: LedgerStore, builder: LedgerEntryBuilder) -> None:
        document, entries = await self._post(store, builder)

        loaded = await store.get_entries_for_document(document.document_id)

        assert loaded == entries
        assert await store.count_entries(COMPANY_ID) == 2
        assert await store.count_entries() == 2

    @pytest.mark.asyncio
    async def test_get_entries_window(self, store: LedgerStore, builder: LedgerEntryBuilder) -> None:
        await self._post(store, builder)

        assert len(await store.get_entries(COMPANY_ID, end_date=date(2026, 3, 31))) == 2
        assert await store.get_entries(COMPANY_ID, start_date=date(2026, 4, 1)) == []
        assert await store.get_entries("other") == []

    @pytest.mark.asyncio
    async def test_update_blocked(
        self, db: SQLiteAdapter, store: LedgerStore, builder: LedgerEntryBuilder,
    ) -> None:
        """UPDATE는 트리거가 ABORT"""
        _, entries = await self._post(store, builder)

        with pytest.raises(aiosqlite.IntegrityError, match=LEDGER_APPEND_ONLY_MESSAGE):
            async with db.transaction():
                await db.execute(
                    "UPDATE ledger_entry SET amount = '1' WHERE entry_id = ?",
                    (entries[0].entry_id,),
                )

        reloaded = await store.get_entries_for_document(entries[0].source_document_id)
        assert reloaded[0].amount == Decimal("500.00")

    @pytest.mark.asyncio
    async def test_delete_blocked(
        self, db: SQLiteAdapter, store: LedgerStore, builder: LedgerEntryBuilder,
    ) -> None:
        """DELETE는 트리거가 ABORT"""
        await self._post(store, builder)

        with pytest.raises(aiosqlite.IntegrityError, match=LEDGER_APPEND_ONLY_MESSAGE):
            async with db.transaction():
                await db.execute("DELETE FROM ledger_entry")

        assert await store.count_entries() == 2

    @pytest.mark.asyncio
    async def test_single_reversal_per_entry(
        self, store: LedgerStore, builder: LedgerEntryBuilder,
    ) -> None:
        """원본당 역분개 1건 (UNIQUE)"""
        _, entries = await self._post(store, builder)
        await store.insert_entries(builder.build_reversal_entries(entries, FIXED_NOW))

        with pytest.raises(aiosqlite.IntegrityError):
            await store.insert_entries(builder.build_reversal_entries(entries, FIXED_NOW))

        assert await store.count_entries() == 4

    @pytest.mark.asyncio
    async def test_unknown_account_rejected(
        self, store: LedgerStore, builder: LedgerEntryBuilder,
    ) -> None:
        """외래 키: 없는 계정 분개 불가"""
        lines = [line("9999", "debit", "1"), line("1100", "credit", "1")]
        document = await create_journal(store, [])

        with pytest.raises(aiosqlite.IntegrityError):
            await store.insert_entries(builder.build_posting_entries(document, lines, FIXED_NOW))

        assert await store.count_entries() == 0
