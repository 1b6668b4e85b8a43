"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config.loader import get_settings
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from web.errors import register_exception_handlers
from web.routes import accounts, health, invoices, journals, reports
from web.routes.health import API_VERSION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화
    async with SQLiteAdapter(
        settings.db_path, busy_timeout_ms=settings.db_busy_timeout_ms,
    ) as db:
        await init_schema(db)

    logger.info(
        "Ledger API started",
        extra={"environment": settings.environment.value, "db_path": str(settings.db_path)},
    )
    yield


app = FastAPI(
    title="Ledger API",
    description="복식부기 원장: 세금계산서/전표 전기, 취소(역분개), 재무제표",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(invoices.router)
app.include_router(journals.router)
app.include_router(reports.router)
app.include_router(accounts.router)
