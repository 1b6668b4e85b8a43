"""
문서 서비스

세금계산서/전표 draft CRUD, 전기/취소, 세금계산서 결제.
모든 작업은 Authorizer로 권한 확인 후 수행.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import Authorizer, Permissions
from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.errors import (
    DocumentValidationError,
    ForbiddenError,
    InvalidStateTransitionError,
    NotFoundError,
)
from core.ledger.models import Document, DocumentLine
from core.ledger.payments import PaymentRecorder
from core.ledger.posting import PostingEngine, load_document
from core.ledger.reversal import ReversalEngine
from core.ledger.store import LedgerStore
from core.ledger.types import (
    DocumentStatus,
    DocumentType,
    InvoiceType,
    JournalSide,
    PaymentMethod,
)
from core.utils.money import has_valid_scale

logger = logging.getLogger(__name__)


def build_lines(raw_lines: list[Any]) -> list[DocumentLine]:
    """요청 라인 → DocumentLine 변환

    raw_lines 항목은 account_code, side, amount, description 속성을 가짐.
    """
    return [
        DocumentLine(
            account_code=raw.account_code,
            side=JournalSide(raw.side),
            amount=raw.amount,
            description=raw.description,
            line_order=index,
        )
        for index, raw in enumerate(raw_lines)
    ]


def _check_header_amount(value: Decimal | None, field: str) -> None:
    if value is None:
        return
    if value < 0:
        raise DocumentValidationError(f"{field} must not be negative: {value}", field=field)
    if not has_valid_scale(value):
        raise DocumentValidationError(f"{field} has too many decimal places: {value}", field=field)


class DocumentService:
    """문서 서비스

    Args:
        db: SQLite 어댑터 (쓰기 가능)
        authorizer: 권한 확인
        builder: 분개 생성기
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        authorizer: Authorizer,
        builder: LedgerEntryBuilder | None = None,
    ):
        self.db = db
        self.authorizer = authorizer
        self.builder = builder or LedgerEntryBuilder()
        self.store = LedgerStore(db)
        self.posting = PostingEngine(self.store, authorizer, self.builder)
        self.reversal = ReversalEngine(self.store, authorizer, self.builder)
        self.payments = PaymentRecorder(self.store, authorizer, self.builder)

    async def _require(self, user_id: str, permission: str) -> None:
        if not await self.authorizer.allows(user_id, permission):
            raise ForbiddenError(user_id, permission)

    async def _check_accounts(self, company_id: str, codes: list[str | None]) -> None:
        for code in codes:
            if code and await self.store.get_account(company_id, code) is None:
                raise NotFoundError("account", code)

    async def _validate_invoice(
        self,
        company_id: str,
        lines: list[DocumentLine],
        untaxed_amount: Decimal | None,
        tax_amount: Decimal | None,
        total_amount: Decimal | None,
        account_code: str | None,
    ) -> Decimal | None:
        """세금계산서 금액/계정 검증

        Returns:
            확정된 합계 (생략 시 공급가액 + 세액)
        """
        self.builder.validate_amounts(lines)
        _check_header_amount(untaxed_amount, "untaxed_amount")
        _check_header_amount(tax_amount, "tax_amount")
        _check_header_amount(total_amount, "total_amount")

        if untaxed_amount is not None:
            expected_total = untaxed_amount + (tax_amount or Decimal("0"))
            if total_amount is None:
                total_amount = expected_total
            elif total_amount != expected_total:
                raise DocumentValidationError(
                    f"total_amount {total_amount} != untaxed_amount + tax_amount {expected_total}",
                    field="total_amount",
                )

        self.builder.assert_matches_header(total_amount, lines)
        await self._check_accounts(
            company_id, [line.account_code for line in lines] + [account_code],
        )
        return total_amount

    # =========================================================================
    # 생성
    # =========================================================================

    async def create_journal(
        self,
        user_id: str,
        company_id: str,
        document_date: date,
        lines: list[DocumentLine],
        description: str | None = None,
        counterparty: str | None = None,
    ) -> dict[str, Any]:
        """일반 전표 draft 생성

        차대 균형은 전기 시 검증 (draft는 불균형 허용).
        """
        await self._require(user_id, Permissions.ACCOUNTING_WRITE)
        self.builder.validate_amounts(lines)
        await self._check_accounts(company_id, [line.account_code for line in lines])

        document = await self.store.create_document(
            company_id=company_id,
            document_type=DocumentType.JOURNAL,
            document_date=document_date,
            created_by=user_id,
            lines=lines,
            description=description,
            counterparty=counterparty,
            created_at=self.builder.now(),
        )
        return document.to_dict()

    async def create_invoice(
        self,
        user_id: str,
        company_id: str,
        document_date: date,
        invoice_type: InvoiceType,
        lines: list[DocumentLine] | None = None,
        counterparty: str | None = None,
        description: str | None = None,
        untaxed_amount: Decimal | None = None,
        tax_amount: Decimal | None = None,
        total_amount: Decimal | None = None,
        account_code: str | None = None,
    ) -> dict[str, Any]:
        """세금계산서 draft 생성

        합계 생략 시 공급가액 + 세액.
        합계가 주어지면 공급가액 + 세액과 일치해야 함.
        명시 라인이 있으면 차변 합계가 합계와 일치해야 함.
        """
        await self._require(user_id, Permissions.ACCOUNTING_WRITE)

        lines = lines or []
        total_amount = await self._validate_invoice(
            company_id, lines, untaxed_amount, tax_amount, total_amount, account_code,
        )

        document = await self.store.create_document(
            company_id=company_id,
            document_type=DocumentType.INVOICE,
            document_date=document_date,
            created_by=user_id,
            lines=lines,
            counterparty=counterparty,
            description=description,
            invoice_type=invoice_type,
            untaxed_amount=untaxed_amount,
            tax_amount=tax_amount,
            total_amount=total_amount,
            account_code=account_code,
            created_at=self.builder.now(),
        )
        return document.to_dict()

    # =========================================================================
    # 수정 (draft만)
    # =========================================================================

    async def _load_draft(self, document_type: DocumentType, document_id: str) -> Document:
        document = await load_document(self.store, document_id, document_type)
        if document.status != DocumentStatus.DRAFT:
            raise InvalidStateTransitionError(
                current=document.status.value,
                requested="updated",
                message=f"Only draft documents can be updated: {document.status.value}",
            )
        return document

    async def _save_draft(self, document_id: str, **fields: Any) -> dict[str, Any]:
        document = await self.store.update_draft_document(document_id, **fields)
        if document is None:
            current = await self.store.get_status(document_id)
            raise InvalidStateTransitionError(
                current=current.value if current else "deleted",
                requested="updated",
            )
        return document.to_dict()

    async def update_journal(
        self,
        user_id: str,
        document_id: str,
        document_date: date,
        lines: list[DocumentLine],
        description: str | None = None,
        counterparty: str | None = None,
    ) -> dict[str, Any]:
        """일반 전표 draft 수정 (헤더 + 라인 전체 교체)

        Raises:
            InvalidStateTransitionError: draft가 아닌 문서
        """
        await self._require(user_id, Permissions.ACCOUNTING_WRITE)

        async with self.db.transaction():
            document = await self._load_draft(DocumentType.JOURNAL, document_id)
            self.builder.validate_amounts(lines)
            await self._check_accounts(
                document.company_id, [line.account_code for line in lines],
            )
            return await self._save_draft(
                document_id,
                document_date=document_date,
                lines=lines,
                counterparty=counterparty,
                description=description,
            )

    async def update_invoice(
        self,
        user_id: str,
        document_id: str,
        document_date: date,
        invoice_type: InvoiceType,
        lines: list[DocumentLine] | None = None,
        counterparty: str | None = None,
        description: str | None = None,
        untaxed_amount: Decimal | None = None,
        tax_amount: Decimal | None = None,
        total_amount: Decimal | None = None,
        account_code: str | None = None,
    ) -> dict[str, Any]:
        """세금계산서 draft 수정 (생성과 같은 검증)

        Raises:
            InvalidStateTransitionError: draft가 아닌 문서
        """
        await self._require(user_id, Permissions.ACCOUNTING_WRITE)

        lines = lines or []
        async with self.db.transaction():
            document = await self._load_draft(DocumentType.INVOICE, document_id)
            total_amount = await self._validate_invoice(
                document.company_id, lines, untaxed_amount, tax_amount,
                total_amount, account_code,
            )
            return await self._save_draft(
                document_id,
                document_date=document_date,
                lines=lines,
                counterparty=counterparty,
                description=description,
                invoice_type=invoice_type,
                untaxed_amount=untaxed_amount,
                tax_amount=tax_amount,
                total_amount=total_amount,
                account_code=account_code,
            )

    # =========================================================================
    # 조회 / 삭제
    # =========================================================================

    async def get_document(
        self,
        user_id: str,
        document_type: DocumentType,
        document_id: str,
    ) -> dict[str, Any]:
        """문서 상세 조회"""
        await self._require(user_id, Permissions.ACCOUNTING_READ)
        document = await load_document(self.store, document_id, document_type)
        return document.to_dict()

    async def list_documents(
        self,
        user_id: str,
        document_type: DocumentType,
        company_id: str,
        status: DocumentStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> dict[str, Any]:
        """문서 목록 조회"""
        await self._require(user_id, Permissions.ACCOUNTING_READ)
        documents: list[Document] = await self.store.list_documents(
            company_id,
            document_type=document_type,
            status=status,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        )
        return {
            "items": [document.to_dict() for document in documents],
            "count": len(documents),
            "limit": limit,
            "offset": offset,
        }

    async def delete_draft(
        self,
        user_id: str,
        document_type: DocumentType,
        document_id: str,
    ) -> None:
        """draft 문서 삭제

        Raises:
            InvalidStateTransitionError: draft가 아닌 문서
        """
        await self._require(user_id, Permissions.ACCOUNTING_WRITE)

        async with self.db.transaction():
            document = await load_document(self.store, document_id, document_type)
            if document.status != DocumentStatus.DRAFT:
                raise InvalidStateTransitionError(
                    current=document.status.value,
                    requested="deleted",
                    message=f"Only draft documents can be deleted: {document.status.value}",
                )
            await self.store.delete_draft_document(document_id)

    # =========================================================================
    # 전기 / 취소
    # =========================================================================

    async def post(
        self,
        user_id: str,
        document_type: DocumentType,
        document_id: str,
    ) -> dict[str, Any]:
        """전기"""
        result = await self.posting.post(document_id, user_id, document_type)
        return {
            "document": result.document.to_dict(),
            "entries": [entry.to_dict() for entry in result.entries],
        }

    async def void(
        self,
        user_id: str,
        document_type: DocumentType,
        document_id: str,
        reason: str,
    ) -> dict[str, Any]:
        """취소 (역분개)"""
        result = await self.reversal.void(document_id, user_id, reason, document_type)
        return {
            "document": result.document.to_dict(),
            "reversal_entries": [entry.to_dict() for entry in result.reversal_entries],
        }

    # =========================================================================
    # 결제
    # =========================================================================

    async def record_payment(
        self,
        user_id: str,
        invoice_id: str,
        amount: Decimal,
        payment_date: date,
        payment_method: PaymentMethod,
        reference: str | None = None,
    ) -> dict[str, Any]:
        """세금계산서 결제 기록 (결제 전표 전기 포함)"""
        result = await self.payments.record(
            invoice_id, user_id, amount, payment_date, payment_method, reference,
        )
        return {
            "payment": result.payment.to_dict(),
            "journal": result.journal.document.to_dict(),
            "entries": [entry.to_dict() for entry in result.journal.entries],
            "summary": result.summary.to_dict(),
        }

    async def get_payments(self, user_id: str, invoice_id: str) -> dict[str, Any]:
        """세금계산서 결제 현황"""
        summary = await self.payments.summary(invoice_id, user_id)
        return summary.to_dict()
