"""
Web API 테스트 fixture

임시 DB와 고정 권한/시계를 dependency_overrides로 주입.
ASGITransport는 lifespan을 실행하지 않으므로 스키마는 db fixture가 준비.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import StaticAuthorizer
from core.ledger.entry_builder import LedgerEntryBuilder
from web.app import app
from web.dependencies import get_authorizer, get_db, get_db_write, get_entry_builder


@pytest_asyncio.fixture
async def client(
    db: SQLiteAdapter,
    authorizer: StaticAuthorizer,
    builder: LedgerEntryBuilder,
) -> AsyncClient:
    """테스트용 HTTP 클라이언트"""

    async def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_db_write] = override_db
    app.dependency_overrides[get_authorizer] = lambda: authorizer
    app.dependency_overrides[get_entry_builder] = lambda: builder

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()
