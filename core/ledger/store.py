"""
Ledger 저장소

계정과목, 원천 문서, 원장 분개 저장 및 조회.
ledger_entry는 INSERT만 수행 (UPDATE/DELETE는 스키마 트리거가 차단).
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from core.ledger.models import (
    Account,
    Document,
    DocumentLine,
    InvoicePayment,
    LedgerEntry,
)
from core.ledger.types import (
    NORMAL_SIDE_BY_TYPE,
    AccountType,
    DocumentStatus,
    DocumentType,
    InvoiceType,
    JournalSide,
    PaymentMethod,
    PostingRole,
)
from core.utils.money import format_amount, parse_amount
from core.utils.timezone import format_date, now_utc, parse_date

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


DOCUMENT_COLUMNS = """
    document_id, company_id, document_type, status, document_date, number,
    counterparty, description, created_by, created_at,
    posted_by, posted_at, voided_by, voided_at, void_reason,
    invoice_type, untaxed_amount, tax_amount, total_amount, account_code
"""

ENTRY_COLUMNS = """
    entry_id, company_id, source_document_id, source_document_type,
    account_code, side, amount, entry_date, created_at,
    is_reversal, reverses_entry_id, line_order, memo
"""

PAYMENT_COLUMNS = """
    payment_id, invoice_id, journal_document_id, amount, payment_date,
    payment_method, reference, recorded_by, recorded_at
"""

PAYMENT_COLUMNS_QUALIFIED = """
    p.payment_id, p.invoice_id, p.journal_document_id, p.amount, p.payment_date,
    p.payment_method, p.reference, p.recorded_by, p.recorded_at
"""


class LedgerStore:
    """Ledger 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =========================================================================
    # 계정과목
    # =========================================================================

    async def get_account(self, company_id: str, code: str) -> Account | None:
        """계정 조회"""
        row = await self.db.fetchone(
            """
            SELECT company_id, code, name, account_type, normal_side, is_active
            FROM account
            WHERE company_id = ? AND code = ?
            """,
            (company_id, code),
        )
        return self._row_to_account(row) if row else None

    async def list_accounts(
        self,
        company_id: str,
        account_type: AccountType | str | None = None,
        active_only: bool = False,
    ) -> list[Account]:
        """계정 목록 조회 (코드 순)"""
        conditions = ["company_id = ?"]
        params: list[Any] = [company_id]

        if account_type is not None:
            conditions.append("account_type = ?")
            params.append(AccountType(account_type).value)
        if active_only:
            conditions.append("is_active = 1")

        rows = await self.db.fetchall(
            f"""
            SELECT company_id, code, name, account_type, normal_side, is_active
            FROM account
            WHERE {" AND ".join(conditions)}
            ORDER BY code
            """,
            tuple(params),
        )
        return [self._row_to_account(row) for row in rows]

    async def create_account(
        self,
        company_id: str,
        code: str,
        name: str,
        account_type: AccountType | str,
        normal_side: JournalSide | str | None = None,
    ) -> Account:
        """계정 생성

        normal_side 생략 시 계정 유형의 정상 잔액 방향 사용.
        """
        account_type = AccountType(account_type)
        side = JournalSide(normal_side) if normal_side else NORMAL_SIDE_BY_TYPE[account_type]

        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO account (company_id, code, name, account_type, normal_side)
                VALUES (?, ?, ?, ?, ?)
                """,
                (company_id, code, name, account_type.value, side.value),
            )

        logger.debug(f"Created account: {company_id}/{code}")
        return Account(
            company_id=company_id,
            code=code,
            name=name,
            account_type=account_type,
            normal_side=side,
        )

    # =========================================================================
    # 분개 규칙
    # =========================================================================

    async def get_posting_rules(
        self,
        company_id: str,
        invoice_type: InvoiceType | str,
    ) -> dict[PostingRole, str]:
        """세금계산서 구분별 역할 → 계정 코드"""
        rows = await self.db.fetchall(
            """
            SELECT role, account_code
            FROM posting_rule
            WHERE company_id = ? AND invoice_type = ?
            """,
            (company_id, InvoiceType(invoice_type).value),
        )
        return {PostingRole(role): account_code for role, account_code in rows}

    async def set_posting_rule(
        self,
        company_id: str,
        invoice_type: InvoiceType | str,
        role: PostingRole | str,
        account_code: str,
    ) -> None:
        """분개 규칙 설정 (있으면 교체)"""
        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO posting_rule (company_id, invoice_type, role, account_code)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (company_id, invoice_type, role)
                DO UPDATE SET account_code = excluded.account_code
                """,
                (
                    company_id,
                    InvoiceType(invoice_type).value,
                    PostingRole(role).value,
                    account_code,
                ),
            )

    # =========================================================================
    # 문서 (draft CRUD)
    # =========================================================================

    async def create_document(
        self,
        company_id: str,
        document_type: DocumentType | str,
        document_date: date,
        created_by: str,
        lines: list[DocumentLine] | None = None,
        counterparty: str | None = None,
        description: str | None = None,
        invoice_type: InvoiceType | str | None = None,
        untaxed_amount: Decimal | None = None,
        tax_amount: Decimal | None = None,
        total_amount: Decimal | None = None,
        account_code: str | None = None,
        created_at: datetime | None = None,
    ) -> Document:
        """draft 문서 생성

        번호는 회사/문서유형/월 단위로 YYYYMM + 4자리 일련번호.
        """
        document_type = DocumentType(document_type)
        document = Document(
            document_id=str(uuid4()),
            company_id=company_id,
            document_type=document_type,
            status=DocumentStatus.DRAFT,
            document_date=document_date,
            number="",
            created_by=created_by,
            created_at=created_at or now_utc(),
            lines=list(lines or []),
            counterparty=counterparty,
            description=description,
            invoice_type=InvoiceType(invoice_type) if invoice_type else None,
            untaxed_amount=untaxed_amount,
            tax_amount=tax_amount,
            total_amount=total_amount,
            account_code=account_code,
        )

        async with self.db.transaction():
            document.number = await self._next_number(
                company_id, document_type, document_date,
            )
            await self.db.execute(
                """
                INSERT INTO document (
                    document_id, company_id, document_type, status, document_date,
                    number, counterparty, description, created_by, created_at,
                    invoice_type, untaxed_amount, tax_amount, total_amount, account_code
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    document.document_id,
                    company_id,
                    document_type.value,
                    DocumentStatus.DRAFT.value,
                    format_date(document_date),
                    document.number,
                    counterparty,
                    description,
                    created_by,
                    document.created_at.isoformat(),
                    document.invoice_type.value if document.invoice_type else None,
                    _amount_or_none(untaxed_amount),
                    _amount_or_none(tax_amount),
                    _amount_or_none(total_amount),
                    account_code,
                ),
            )
            await self._insert_lines(document.document_id, document.lines)

        logger.info(
            "Draft document created",
            extra={
                "document_id": document.document_id,
                "document_type": document_type.value,
                "number": document.number,
            },
        )
        return document

    async def _next_number(
        self,
        company_id: str,
        document_type: DocumentType,
        document_date: date,
    ) -> str:
        """다음 문서 번호 (YYYYMM0001부터)

        일련번호는 숫자로 정렬 (9999 다음은 10000).
        """
        prefix = document_date.strftime("%Y%m")
        row = await self.db.fetchone(
            """
            SELECT number FROM document
            WHERE company_id = ? AND document_type = ? AND number LIKE ?
            ORDER BY CAST(substr(number, 7) AS INTEGER) DESC
            LIMIT 1
            """,
            (company_id, document_type.value, f"{prefix}%"),
        )

        next_seq = 1
        if row:
            next_seq = int(row[0][len(prefix):]) + 1
        return f"{prefix}{next_seq:04d}"

    async def _insert_lines(self, document_id: str, lines: list[DocumentLine]) -> None:
        for index, line in enumerate(lines):
            line.line_order = index
            await self.db.execute(
                """
                INSERT INTO document_line (
                    document_id, account_code, side, amount, description, line_order
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    document_id,
                    line.account_code,
                    JournalSide(line.side).value,
                    format_amount(line.amount),
                    line.description,
                    index,
                ),
            )

    async def get_document(self, document_id: str) -> Document | None:
        """문서 조회 (라인 포함)"""
        row = await self.db.fetchone(
            f"SELECT {DOCUMENT_COLUMNS} FROM document WHERE document_id = ?",
            (document_id,),
        )
        if not row:
            return None

        document = self._row_to_document(row)
        document.lines = await self._get_lines(document_id)
        return document

    async def _get_lines(self, document_id: str) -> list[DocumentLine]:
        rows = await self.db.fetchall(
            """
            SELECT account_code, side, amount, description, line_order
            FROM document_line
            WHERE document_id = ?
            ORDER BY line_order, line_id
            """,
            (document_id,),
        )
        return [
            DocumentLine(
                account_code=account_code,
                side=JournalSide(side),
                amount=parse_amount(amount),
                description=description,
                line_order=line_order,
            )
            for account_code, side, amount, description, line_order in rows
        ]

    async def list_documents(
        self,
        company_id: str,
        document_type: DocumentType | str | None = None,
        status: DocumentStatus | str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Document]:
        """문서 목록 조회 (일자/번호 역순, 라인 제외)"""
        conditions = ["company_id = ?"]
        params: list[Any] = [company_id]

        if document_type is not None:
            conditions.append("document_type = ?")
            params.append(DocumentType(document_type).value)
        if status is not None:
            conditions.append("status = ?")
            params.append(DocumentStatus(status).value)
        if start_date is not None:
            conditions.append("document_date >= ?")
            params.append(format_date(start_date))
        if end_date is not None:
            conditions.append("document_date <= ?")
            params.append(format_date(end_date))

        params.extend([limit, offset])
        rows = await self.db.fetchall(
            f"""
            SELECT {DOCUMENT_COLUMNS}
            FROM document
            WHERE {" AND ".join(conditions)}
            ORDER BY document_date DESC, CAST(substr(number, 7) AS INTEGER) DESC
            LIMIT ? OFFSET ?
            """,
            tuple(params),
        )
        return [self._row_to_document(row) for row in rows]

    async def replace_draft_lines(
        self,
        document_id: str,
        lines: list[DocumentLine],
    ) -> bool:
        """draft 문서 라인 교체

        Returns:
            교체 성공 여부 (draft가 아니면 False)
        """
        async with self.db.transaction():
            row = await self.db.fetchone(
                "SELECT status FROM document WHERE document_id = ?",
                (document_id,),
            )
            if not row or row[0] != DocumentStatus.DRAFT.value:
                return False

            await self.db.execute(
                "DELETE FROM document_line WHERE document_id = ?",
                (document_id,),
            )
            await self._insert_lines(document_id, lines)

        return True

    async def update_draft_document(
        self,
        document_id: str,
        document_date: date,
        lines: list[DocumentLine],
        counterparty: str | None = None,
        description: str | None = None,
        invoice_type: InvoiceType | str | None = None,
        untaxed_amount: Decimal | None = None,
        tax_amount: Decimal | None = None,
        total_amount: Decimal | None = None,
        account_code: str | None = None,
    ) -> Document | None:
        """draft 문서 헤더 + 라인 교체

        번호는 유지하되 문서 일자의 월이 바뀌면 새 월에서 다시 채번.

        Returns:
            갱신된 문서 (draft가 아니거나 없으면 None)
        """
        async with self.db.transaction():
            document = await self.get_document(document_id)
            if document is None or document.status != DocumentStatus.DRAFT:
                return None

            number = document.number
            if not number.startswith(document_date.strftime("%Y%m")):
                number = await self._next_number(
                    document.company_id, document.document_type, document_date,
                )

            cursor = await self.db.execute(
                """
                UPDATE document
                SET document_date = ?, number = ?, counterparty = ?, description = ?,
                    invoice_type = ?, untaxed_amount = ?, tax_amount = ?,
                    total_amount = ?, account_code = ?
                WHERE document_id = ? AND status = ?
                """,
                (
                    format_date(document_date),
                    number,
                    counterparty,
                    description,
                    InvoiceType(invoice_type).value if invoice_type else None,
                    _amount_or_none(untaxed_amount),
                    _amount_or_none(tax_amount),
                    _amount_or_none(total_amount),
                    account_code,
                    document_id,
                    DocumentStatus.DRAFT.value,
                ),
            )
            if cursor.rowcount != 1:
                return None

            await self.db.execute(
                "DELETE FROM document_line WHERE document_id = ?",
                (document_id,),
            )
            await self._insert_lines(document_id, lines)

        document.document_date = document_date
        document.number = number
        document.counterparty = counterparty
        document.description = description
        document.invoice_type = InvoiceType(invoice_type) if invoice_type else None
        document.untaxed_amount = untaxed_amount
        document.tax_amount = tax_amount
        document.total_amount = total_amount
        document.account_code = account_code
        document.lines = list(lines)

        logger.info(
            "Draft document updated",
            extra={"document_id": document_id, "number": number},
        )
        return document

    async def delete_draft_document(self, document_id: str) -> bool:
        """draft 문서 삭제 (라인은 CASCADE)

        Returns:
            삭제 성공 여부 (draft가 아니면 False)
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                "DELETE FROM document WHERE document_id = ? AND status = ?",
                (document_id, DocumentStatus.DRAFT.value),
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Draft document deleted", extra={"document_id": document_id})
        return deleted

    # =========================================================================
    # 상태 CAS
    # =========================================================================

    async def get_status(self, document_id: str) -> DocumentStatus | None:
        """현재 문서 상태 (없으면 None)"""
        row = await self.db.fetchone(
            "SELECT status FROM document WHERE document_id = ?",
            (document_id,),
        )
        return DocumentStatus(row[0]) if row else None

    async def mark_posted(
        self,
        document_id: str,
        posted_by: str,
        posted_at: datetime,
    ) -> bool:
        """draft → posted (현재 draft인 경우에만)

        Returns:
            상태 변경 여부 (다른 요청이 먼저 바꿨으면 False)
        """
        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                UPDATE document
                SET status = ?, posted_by = ?, posted_at = ?
                WHERE document_id = ? AND status = ?
                """,
                (
                    DocumentStatus.POSTED.value,
                    posted_by,
                    posted_at.isoformat(),
                    document_id,
                    DocumentStatus.DRAFT.value,
                ),
            )
        return cursor.rowcount == 1

    async def mark_voided(
        self,
        document_id: str,
        voided_by: str,
        voided_at: datetime,
        reason: str,
    ) -> bool:
        """posted → voided (현재 posted인 경우에만)"""
        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                UPDATE document
                SET status = ?, voided_by = ?, voided_at = ?, void_reason = ?
                WHERE document_id = ? AND status = ?
                """,
                (
                    DocumentStatus.VOIDED.value,
                    voided_by,
                    voided_at.isoformat(),
                    reason,
                    document_id,
                    DocumentStatus.POSTED.value,
                ),
            )
        return cursor.rowcount == 1

    # =========================================================================
    # 원장 분개
    # =========================================================================

    async def insert_entries(self, entries: list[LedgerEntry]) -> int:
        """원장 분개 INSERT

        Returns:
            INSERT 건수
        """
        async with self.db.transaction():
            await self.db.executemany(
                f"INSERT INTO ledger_entry ({ENTRY_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        entry.entry_id,
                        entry.company_id,
                        entry.source_document_id,
                        entry.source_document_type.value,
                        entry.account_code,
                        entry.side.value,
                        format_amount(entry.amount),
                        format_date(entry.entry_date),
                        entry.created_at.isoformat(),
                        1 if entry.is_reversal else 0,
                        entry.reverses_entry_id,
                        entry.line_order,
                        entry.memo,
                    )
                    for entry in entries
                ],
            )
        return len(entries)

    async def get_entries_for_document(
        self,
        document_id: str,
        include_reversals: bool = True,
    ) -> list[LedgerEntry]:
        """문서의 원장 분개 조회 (원본 먼저, 그다음 역분개)"""
        sql = f"SELECT {ENTRY_COLUMNS} FROM ledger_entry WHERE source_document_id = ?"
        if not include_reversals:
            sql += " AND is_reversal = 0"
        sql += " ORDER BY is_reversal, line_order, entry_id"

        rows = await self.db.fetchall(sql, (document_id,))
        return [self._row_to_entry(row) for row in rows]

    async def get_entries(
        self,
        company_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[LedgerEntry]:
        """기간 내 원장 분개 조회 (양 끝 포함)"""
        conditions = ["company_id = ?"]
        params: list[Any] = [company_id]

        if start_date is not None:
            conditions.append("entry_date >= ?")
            params.append(format_date(start_date))
        if end_date is not None:
            conditions.append("entry_date <= ?")
            params.append(format_date(end_date))

        rows = await self.db.fetchall(
            f"""
            SELECT {ENTRY_COLUMNS}
            FROM ledger_entry
            WHERE {" AND ".join(conditions)}
            ORDER BY entry_date, created_at, line_order
            """,
            tuple(params),
        )
        return [self._row_to_entry(row) for row in rows]

    async def count_entries(self, company_id: str | None = None) -> int:
        """원장 분개 건수"""
        if company_id is None:
            row = await self.db.fetchone("SELECT COUNT(*) AS cnt FROM ledger_entry")
        else:
            row = await self.db.fetchone(
                "SELECT COUNT(*) AS cnt FROM ledger_entry WHERE company_id = ?",
                (company_id,),
            )
        return row[0] if row else 0

    # =========================================================================
    # 세금계산서 결제
    # =========================================================================

    async def insert_payment(self, payment: InvoicePayment) -> None:
        """결제 기록 INSERT"""
        async with self.db.transaction():
            await self.db.execute(
                f"INSERT INTO invoice_payment ({PAYMENT_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    payment.payment_id,
                    payment.invoice_id,
                    payment.journal_document_id,
                    format_amount(payment.amount),
                    format_date(payment.payment_date),
                    PaymentMethod(payment.payment_method).value,
                    payment.reference,
                    payment.recorded_by,
                    payment.recorded_at.isoformat(),
                ),
            )

    async def list_payments(
        self,
        invoice_id: str,
        active_only: bool = False,
    ) -> list[InvoicePayment]:
        """세금계산서 결제 목록 (결제일 순)

        Args:
            invoice_id: 세금계산서 ID
            active_only: True면 전표가 posted인 결제만 (취소된 결제 제외)
        """
        sql = f"""
            SELECT {PAYMENT_COLUMNS_QUALIFIED}
            FROM invoice_payment AS p
            JOIN document AS d ON d.document_id = p.journal_document_id
            WHERE p.invoice_id = ?
        """
        params: list[Any] = [invoice_id]
        if active_only:
            sql += " AND d.status = ?"
            params.append(DocumentStatus.POSTED.value)
        sql += " ORDER BY p.payment_date, p.recorded_at, p.payment_id"

        rows = await self.db.fetchall(sql, tuple(params))
        return [self._row_to_payment(row) for row in rows]

    async def get_paid_amount(self, invoice_id: str) -> Decimal:
        """결제 합계 (취소된 결제 전표 제외)"""
        payments = await self.list_payments(invoice_id, active_only=True)
        return sum((payment.amount for payment in payments), Decimal("0"))

    # =========================================================================
    # 행 변환
    # =========================================================================

    def _row_to_account(self, row: tuple[Any, ...]) -> Account:
        """DB 행 → Account 변환"""
        company_id, code, name, account_type, normal_side, is_active = row
        return Account(
            company_id=company_id,
            code=code,
            name=name,
            account_type=AccountType(account_type),
            normal_side=JournalSide(normal_side),
            is_active=bool(is_active),
        )

    def _row_to_document(self, row: tuple[Any, ...]) -> Document:
        """DB 행 → Document 변환 (라인 제외)"""
        (
            document_id, company_id, document_type, status, document_date, number,
            counterparty, description, created_by, created_at,
            posted_by, posted_at, voided_by, voided_at, void_reason,
            invoice_type, untaxed_amount, tax_amount, total_amount, account_code,
        ) = row

        return Document(
            document_id=document_id,
            company_id=company_id,
            document_type=DocumentType(document_type),
            status=DocumentStatus(status),
            document_date=parse_date(document_date),
            number=number,
            created_by=created_by,
            created_at=datetime.fromisoformat(created_at),
            counterparty=counterparty,
            description=description,
            posted_by=posted_by,
            posted_at=datetime.fromisoformat(posted_at) if posted_at else None,
            voided_by=voided_by,
            voided_at=datetime.fromisoformat(voided_at) if voided_at else None,
            void_reason=void_reason,
            invoice_type=InvoiceType(invoice_type) if invoice_type else None,
            untaxed_amount=parse_amount(untaxed_amount) if untaxed_amount else None,
            tax_amount=parse_amount(tax_amount) if tax_amount else None,
            total_amount=parse_amount(total_amount) if total_amount else None,
            account_code=account_code,
        )

    def _row_to_entry(self, row: tuple[Any, ...]) -> LedgerEntry:
        """DB 행 → LedgerEntry 변환"""
        (
            entry_id, company_id, source_document_id, source_document_type,
            account_code, side, amount, entry_date, created_at,
            is_reversal, reverses_entry_id, line_order, memo,
        ) = row

        return LedgerEntry(
            entry_id=entry_id,
            company_id=company_id,
            source_document_id=source_document_id,
            source_document_type=DocumentType(source_document_type),
            account_code=account_code,
            side=JournalSide(side),
            amount=parse_amount(amount),
            entry_date=parse_date(entry_date),
            created_at=datetime.fromisoformat(created_at),
            is_reversal=bool(is_reversal),
            reverses_entry_id=reverses_entry_id,
            line_order=line_order,
            memo=memo,
        )

    def _row_to_payment(self, row: tuple[Any, ...]) -> InvoicePayment:
        (
            payment_id, invoice_id, journal_document_id, amount, payment_date,
            payment_method, reference, recorded_by, recorded_at,
        ) = row

        return InvoicePayment(
            payment_id=payment_id,
            invoice_id=invoice_id,
            journal_document_id=journal_document_id,
            amount=parse_amount(amount),
            payment_date=parse_date(payment_date),
            payment_method=PaymentMethod(payment_method),
            reference=reference,
            recorded_by=recorded_by,
            recorded_at=datetime.fromisoformat(recorded_at),
        )


def _amount_or_none(value: Decimal | None) -> str | None:
    return format_amount(value) if value is not None else None
