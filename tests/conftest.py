"""
pytest 공통 fixture 정의

임시 SQLite 원장 DB, 고정 시계, 권한 fixture
"""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.auth.authorizer import StaticAuthorizer
from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.schema import seed_company
from core.ledger.store import LedgerStore
from tests.utils.helpers import COMPANY_ID, FIXED_NOW


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def builder() -> LedgerEntryBuilder:
    """고정 시계 분개 생성기"""
    return LedgerEntryBuilder(clock=lambda: FIXED_NOW)


@pytest.fixture
def authorizer() -> StaticAuthorizer:
    """고정 권한

    - alice: 전체 권한
    - clerk: 작성/조회 + 전기 (취소 불가)
    - viewer: 조회만
    """
    return StaticAuthorizer({
        "alice": ["*"],
        "clerk": ["accounting:*", "invoices:post", "journals:post"],
        "viewer": ["accounting:read"],
    })


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> SQLiteAdapter:
    """스키마 + 기본 계정과목이 준비된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "ledger.db")
    await adapter.connect()
    await init_schema(adapter)
    await seed_company(adapter, COMPANY_ID)
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def store(db: SQLiteAdapter) -> LedgerStore:
    """LedgerStore"""
    return LedgerStore(db)
