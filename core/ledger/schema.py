"""
복식부기 스키마 초기화

Web 시작 시 자동으로 Ledger 테이블, 인덱스, 트리거 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

ledger_entry는 append-only: UPDATE/DELETE는 트리거가 ABORT.
"""

import logging
from typing import TYPE_CHECKING

from core.ledger.types import (
    DEFAULT_CHART_OF_ACCOUNTS,
    DEFAULT_POSTING_RULES,
    NORMAL_SIDE_BY_TYPE,
    AccountType,
)

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

LEDGER_APPEND_ONLY_MESSAGE = "ledger_entry is append-only"


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화 (테이블 + 인덱스 + 트리거)

    Web 시작 시 호출되어 필요한 모든 테이블을 생성.
    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_ledger_tables(db)
    await _create_ledger_indexes(db)
    await _create_append_only_triggers(db)
    await db.commit()
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # account 테이블 (계정과목)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS account (
            company_id       TEXT NOT NULL,
            code             TEXT NOT NULL,
            name             TEXT NOT NULL,
            account_type     TEXT NOT NULL
                CHECK (account_type IN ('asset', 'liability', 'equity', 'revenue', 'expense')),
            normal_side      TEXT NOT NULL CHECK (normal_side IN ('debit', 'credit')),
            is_active        INTEGER NOT NULL DEFAULT 1,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            PRIMARY KEY (company_id, code)
        )
    """)

    # posting_rule 테이블 (세금계산서 역할 → 계정)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS posting_rule (
            company_id       TEXT NOT NULL,
            invoice_type     TEXT NOT NULL CHECK (invoice_type IN ('OUTPUT', 'INPUT')),
            role             TEXT NOT NULL,
            account_code     TEXT NOT NULL,
            PRIMARY KEY (company_id, invoice_type, role),
            FOREIGN KEY (company_id, account_code) REFERENCES account(company_id, code)
        )
    """)

    # document 테이블 (세금계산서/전표 헤더)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS document (
            document_id      TEXT PRIMARY KEY,
            company_id       TEXT NOT NULL,
            document_type    TEXT NOT NULL CHECK (document_type IN ('invoice', 'journal')),
            status           TEXT NOT NULL DEFAULT 'draft'
                CHECK (status IN ('draft', 'posted', 'voided')),
            document_date    TEXT NOT NULL,
            number           TEXT NOT NULL,
            counterparty     TEXT,
            description      TEXT,
            created_by       TEXT NOT NULL,
            created_at       TEXT NOT NULL,
            posted_by        TEXT,
            posted_at        TEXT,
            voided_by        TEXT,
            voided_at        TEXT,
            void_reason      TEXT,
            invoice_type     TEXT CHECK (invoice_type IS NULL OR invoice_type IN ('OUTPUT', 'INPUT')),
            untaxed_amount   TEXT,
            tax_amount       TEXT,
            total_amount     TEXT,
            account_code     TEXT,
            UNIQUE (company_id, document_type, number)
        )
    """)

    # document_line 테이블 (draft 동안만 변경, 문서와 함께 삭제)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS document_line (
            line_id          INTEGER PRIMARY KEY AUTOINCREMENT,
            document_id      TEXT NOT NULL,
            account_code     TEXT NOT NULL,
            side             TEXT NOT NULL CHECK (side IN ('debit', 'credit')),
            amount           TEXT NOT NULL,
            description      TEXT,
            line_order       INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY (document_id) REFERENCES document(document_id) ON DELETE CASCADE
        )
    """)

    # ledger_entry 테이블 (원장, INSERT only)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger_entry (
            entry_id             TEXT PRIMARY KEY,
            company_id           TEXT NOT NULL,
            source_document_id   TEXT NOT NULL,
            source_document_type TEXT NOT NULL,
            account_code         TEXT NOT NULL,
            side                 TEXT NOT NULL CHECK (side IN ('debit', 'credit')),
            amount               TEXT NOT NULL,
            entry_date           TEXT NOT NULL,
            created_at           TEXT NOT NULL,
            is_reversal          INTEGER NOT NULL DEFAULT 0,
            reverses_entry_id    TEXT,
            line_order           INTEGER NOT NULL DEFAULT 0,
            memo                 TEXT,
            FOREIGN KEY (source_document_id) REFERENCES document(document_id),
            FOREIGN KEY (company_id, account_code) REFERENCES account(company_id, code),
            FOREIGN KEY (reverses_entry_id) REFERENCES ledger_entry(entry_id)
        )
    """)

    # invoice_payment 테이블 (세금계산서 결제, 결제마다 전표 1건)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS invoice_payment (
            payment_id           TEXT PRIMARY KEY,
            invoice_id           TEXT NOT NULL,
            journal_document_id  TEXT NOT NULL UNIQUE,
            amount               TEXT NOT NULL,
            payment_date         TEXT NOT NULL,
            payment_method       TEXT NOT NULL
                CHECK (payment_method IN ('cash', 'transfer', 'check', 'credit_card', 'unclassified')),
            reference            TEXT,
            recorded_by          TEXT NOT NULL,
            recorded_at          TEXT NOT NULL,
            FOREIGN KEY (invoice_id) REFERENCES document(document_id),
            FOREIGN KEY (journal_document_id) REFERENCES document(document_id)
        )
    """)

    # user_permission 테이블 (권한 부여)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS user_permission (
            user_id          TEXT NOT NULL,
            permission       TEXT NOT NULL,
            granted_at       TEXT NOT NULL DEFAULT (datetime('now')),
            PRIMARY KEY (user_id, permission)
        )
    """)


async def _create_ledger_indexes(db: "SQLiteAdapter") -> None:
    """조회용 인덱스 생성"""

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_ledger_entry_company_date
        ON ledger_entry(company_id, entry_date)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_ledger_entry_document
        ON ledger_entry(source_document_id)
    """)

    # 역분개는 원본당 최대 1건
    await db.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS ux_ledger_entry_reverses
        ON ledger_entry(reverses_entry_id)
        WHERE reverses_entry_id IS NOT NULL
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_document_company_status
        ON document(company_id, document_type, status, document_date)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_invoice_payment_invoice
        ON invoice_payment(invoice_id, payment_date)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_document_line_document
        ON document_line(document_id, line_order)
    """)


async def _create_append_only_triggers(db: "SQLiteAdapter") -> None:
    """ledger_entry UPDATE/DELETE 차단 트리거"""

    await db.execute(f"""
        CREATE TRIGGER IF NOT EXISTS trg_ledger_entry_no_update
        BEFORE UPDATE ON ledger_entry
        BEGIN
            SELECT RAISE(ABORT, '{LEDGER_APPEND_ONLY_MESSAGE}');
        END
    """)

    await db.execute(f"""
        CREATE TRIGGER IF NOT EXISTS trg_ledger_entry_no_delete
        BEFORE DELETE ON ledger_entry
        BEGIN
            SELECT RAISE(ABORT, '{LEDGER_APPEND_ONLY_MESSAGE}');
        END
    """)


async def seed_company(db: "SQLiteAdapter", company_id: str) -> None:
    """회사 기본 계정과목 + 분개 규칙 생성

    INSERT OR IGNORE로 이미 존재하는 계정은 건너뜀.

    Args:
        db: SQLiteAdapter 인스턴스
        company_id: 회사 ID
    """
    async with db.transaction():
        for code, account_type, name in DEFAULT_CHART_OF_ACCOUNTS:
            normal_side = NORMAL_SIDE_BY_TYPE[AccountType(account_type)]
            await db.execute(
                """
                INSERT OR IGNORE INTO account (
                    company_id, code, name, account_type, normal_side
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (company_id, code, name, account_type, normal_side.value),
            )

        for invoice_type, role, account_code in DEFAULT_POSTING_RULES:
            await db.execute(
                """
                INSERT OR IGNORE INTO posting_rule (
                    company_id, invoice_type, role, account_code
                ) VALUES (?, ?, ?, ?)
                """,
                (company_id, invoice_type, role, account_code),
            )

    logger.info(
        "회사 기본 계정과목 생성",
        extra={"company_id": company_id, "accounts": len(DEFAULT_CHART_OF_ACCOUNTS)},
    )
