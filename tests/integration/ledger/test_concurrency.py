"""
동시 전기/취소 테스트

서로 다른 연결(프로세스/워커 모사)에서 같은 문서를 동시에 전기/취소해도
정확히 한 요청만 성공하고 원장 분개는 한 벌만 남음.
"""

import asyncio
from pathlib import Path

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import StaticAuthorizer
from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.errors import InvalidStateTransitionError
from core.ledger.posting import PostingEngine
from core.ledger.reversal import ReversalEngine
from core.ledger.store import LedgerStore
from core.ledger.types import DocumentStatus
from tests.utils.helpers import create_journal, line

WORKERS = 4


async def _attempt(coro) -> object:
    try:
        return await coro
    except InvalidStateTransitionError as e:
        return e


class TestConcurrentPosting:
    """동시 전기"""

    @pytest.mark.asyncio
    async def test_exactly_one_post_succeeds(
        self,
        tmp_path: Path,
        store: LedgerStore,
        authorizer: StaticAuthorizer,
        builder: LedgerEntryBuilder,
    ) -> None:
        document = await create_journal(store, [
            line("6100", "debit", "500.00"),
            line("1100", "credit", "500.00"),
        ])

        adapters = [SQLiteAdapter(tmp_path / "ledger.db") for _ in range(WORKERS)]
        for adapter in adapters:
            await adapter.connect()
        try:
            results = await asyncio.gather(*[
                _attempt(
                    PostingEngine(LedgerStore(adapter), authorizer, builder)
                    .post(document.document_id, "alice")
                )
                for adapter in adapters
            ])
        finally:
            for adapter in adapters:
                await adapter.close()

        failures = [r for r in results if isinstance(r, InvalidStateTransitionError)]
        assert len(failures) == WORKERS - 1
        assert await store.count_entries() == 2
        assert (await store.get_document(document.document_id)).status == DocumentStatus.POSTED

    @pytest.mark.asyncio
    async def test_shared_connection_tasks(
        self,
        store: LedgerStore,
        authorizer: StaticAuthorizer,
        builder: LedgerEntryBuilder,
    ) -> None:
        """같은 연결을 공유하는 Task 간에도 한 번만 전기"""
        document = await create_journal(store, [
            line("6100", "debit", "5"),
            line("1100", "credit", "5"),
        ])
        engine = PostingEngine(store, authorizer, builder)

        results = await asyncio.gather(*[
            _attempt(engine.post(document.document_id, "alice")) for _ in range(WORKERS)
        ])

        failures = [r for r in results if isinstance(r, InvalidStateTransitionError)]
        assert len(failures) == WORKERS - 1
        assert await store.count_entries() == 2


class TestConcurrentVoid:
    """동시 취소"""

    @pytest.mark.asyncio
    async def test_exactly_one_void_succeeds(
        self,
        tmp_path: Path,
        store: LedgerStore,
        authorizer: StaticAuthorizer,
        builder: LedgerEntryBuilder,
    ) -> None:
        document = await create_journal(store, [
            line("6100", "debit", "500.00"),
            line("1100", "credit", "500.00"),
        ])
        await PostingEngine(store, authorizer, builder).post(document.document_id, "alice")

        adapters = [SQLiteAdapter(tmp_path / "ledger.db") for _ in range(WORKERS)]
        for adapter in adapters:
            await adapter.connect()
        try:
            results = await asyncio.gather(*[
                _attempt(
                    ReversalEngine(LedgerStore(adapter), authorizer, builder)
                    .void(document.document_id, "alice", f"worker {index}")
                )
                for index, adapter in enumerate(adapters)
            ])
        finally:
            for adapter in adapters:
                await adapter.close()

        failures = [r for r in results if isinstance(r, InvalidStateTransitionError)]
        assert len(failures) == WORKERS - 1
        assert await store.count_entries() == 4
        assert (await store.get_document(document.document_id)).status == DocumentStatus.VOIDED
