"""
Payment Recorder

전기된 세금계산서에 대금 수납/지급을 기록.
결제마다 일반 전표를 만들어 같은 트랜잭션에서 전기:
- 매출(OUTPUT): 차변 현금 / 대변 매출채권
- 매입(INPUT): 차변 매입채무 / 대변 현금

결제 합계는 전표가 posted인 결제만 집계하므로
결제 전표를 취소하면 결제도 취소된 것으로 취급.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import uuid4

from core.auth.authorizer import Authorizer, Permissions
from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.errors import (
    DocumentValidationError,
    ForbiddenError,
    InvalidStateTransitionError,
)
from core.ledger.models import (
    Document,
    DocumentLine,
    InvoicePayment,
    PaymentSummary,
    RecordedPayment,
)
from core.ledger.posting import PostingEngine, load_document
from core.ledger.store import LedgerStore
from core.ledger.types import (
    DocumentStatus,
    DocumentType,
    InvoiceType,
    JournalSide,
    PaymentMethod,
    PostingRole,
)

logger = logging.getLogger(__name__)

# 세금계산서 구분별 결제 상대 계정 역할 (현금의 반대편)
SETTLEMENT_ROLE: dict[InvoiceType, PostingRole] = {
    InvoiceType.OUTPUT: PostingRole.RECEIVABLE,
    InvoiceType.INPUT: PostingRole.PAYABLE,
}


class PaymentRecorder:
    """세금계산서 결제 기록

    Args:
        store: Ledger 저장소
        authorizer: 권한 확인
        builder: 분개 생성기 (시계 포함)
    """

    def __init__(
        self,
        store: LedgerStore,
        authorizer: Authorizer,
        builder: LedgerEntryBuilder | None = None,
    ):
        self.store = store
        self.authorizer = authorizer
        self.builder = builder or LedgerEntryBuilder()
        self.posting = PostingEngine(store, authorizer, self.builder)

    async def record(
        self,
        invoice_id: str,
        acting_user_id: str,
        amount: Decimal,
        payment_date: date,
        payment_method: PaymentMethod | str = PaymentMethod.TRANSFER,
        reference: str | None = None,
    ) -> RecordedPayment:
        """결제 기록 + 결제 전표 전기

        Args:
            invoice_id: 세금계산서 ID
            acting_user_id: 요청 사용자
            amount: 결제 금액 (양수, 미결제 잔액 이하)
            payment_date: 결제일 (결제 전표 일자)
            payment_method: 결제 수단
            reference: 이체 번호 등 외부 참조

        Raises:
            NotFoundError: 세금계산서 없음
            ForbiddenError: invoices:pay 권한 없음
            InvalidStateTransitionError: posted가 아님
            DocumentValidationError: 금액 오류, 잔액 초과, 분개 규칙 없음
        """
        payment_method = PaymentMethod(payment_method)

        async with self.store.db.transaction():
            invoice = await load_document(self.store, invoice_id, DocumentType.INVOICE)

            permission = Permissions.INVOICES_PAY
            if not await self.authorizer.allows(acting_user_id, permission):
                logger.warning(
                    "Payment forbidden",
                    extra={"document_id": invoice_id, "user_id": acting_user_id},
                )
                raise ForbiddenError(acting_user_id, permission)

            if invoice.status != DocumentStatus.POSTED:
                raise InvalidStateTransitionError(
                    current=invoice.status.value,
                    requested="paid",
                    message=f"Payments require a posted invoice: {invoice.status.value}",
                )

            lines = await self._payment_lines(invoice, amount)
            self.builder.validate_amounts(lines)

            summary = await self._summary(invoice)
            if amount > summary.outstanding_amount:
                raise DocumentValidationError(
                    f"Payment {amount} exceeds outstanding amount {summary.outstanding_amount}",
                    field="amount",
                )

            journal = await self.store.create_document(
                company_id=invoice.company_id,
                document_type=DocumentType.JOURNAL,
                document_date=payment_date,
                created_by=acting_user_id,
                lines=lines,
                counterparty=invoice.counterparty,
                description=f"Payment for invoice {invoice.number}",
                created_at=self.builder.now(),
            )
            posted = await self.posting.post_document(journal, acting_user_id)

            payment = InvoicePayment(
                payment_id=str(uuid4()),
                invoice_id=invoice_id,
                journal_document_id=journal.document_id,
                amount=amount,
                payment_date=payment_date,
                payment_method=payment_method,
                recorded_by=acting_user_id,
                recorded_at=posted.document.posted_at,
                reference=reference,
            )
            await self.store.insert_payment(payment)

        summary.paid_amount += amount
        summary.payments.append(payment)

        logger.info(
            "Invoice payment recorded",
            extra={
                "document_id": invoice_id,
                "journal_document_id": journal.document_id,
                "user_id": acting_user_id,
                "payment_status": summary.payment_status.value,
            },
        )
        return RecordedPayment(payment=payment, journal=posted, summary=summary)

    async def summary(self, invoice_id: str, acting_user_id: str) -> PaymentSummary:
        """결제 현황 (합계, 미결제 잔액, 결제 목록)"""
        permission = Permissions.ACCOUNTING_READ
        if not await self.authorizer.allows(acting_user_id, permission):
            raise ForbiddenError(acting_user_id, permission)

        invoice = await load_document(self.store, invoice_id, DocumentType.INVOICE)
        return await self._summary(invoice)

    async def _summary(self, invoice: Document) -> PaymentSummary:
        payments = await self.store.list_payments(invoice.document_id, active_only=True)
        return PaymentSummary(
            invoice_id=invoice.document_id,
            total_amount=await self._invoice_total(invoice),
            paid_amount=sum((payment.amount for payment in payments), Decimal("0")),
            payments=payments,
        )

    async def _invoice_total(self, invoice: Document) -> Decimal:
        """청구 합계

        전기된 세금계산서는 원본 분개의 차변 합계, draft는 헤더 합계.
        """
        if invoice.status == DocumentStatus.DRAFT:
            return invoice.total_amount or Decimal("0")

        entries = await self.store.get_entries_for_document(
            invoice.document_id, include_reversals=False,
        )
        return sum(
            (entry.amount for entry in entries if entry.side == JournalSide.DEBIT),
            Decimal("0"),
        )

    async def _payment_lines(self, invoice: Document, amount: Decimal) -> list[DocumentLine]:
        """결제 전표 라인 (회사 분개 규칙의 현금/채권/채무 계정)"""
        if invoice.invoice_type is None:
            raise DocumentValidationError(
                "Invoice type is required to record payments", field="invoice_type",
            )

        rules = await self.store.get_posting_rules(invoice.company_id, invoice.invoice_type)
        settlement_role = SETTLEMENT_ROLE[invoice.invoice_type]
        for role in (PostingRole.CASH, settlement_role):
            if role not in rules:
                raise DocumentValidationError(
                    f"No posting rule for {invoice.invoice_type.value}/{role.value}",
                    field="posting_rule",
                )

        cash = DocumentLine(rules[PostingRole.CASH], JournalSide.DEBIT, amount)
        settlement = DocumentLine(rules[settlement_role], JournalSide.CREDIT, amount)
        if invoice.invoice_type == InvoiceType.INPUT:
            cash.side, settlement.side = JournalSide.CREDIT, JournalSide.DEBIT
            return [settlement, cash]
        return [cash, settlement]
