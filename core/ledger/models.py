"""
Ledger 레코드 정의

계정과목, 원천 문서(세금계산서/전표), 원장 분개 레코드.
금액은 항상 Decimal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from core.ledger.types import (
    AccountType,
    DocumentStatus,
    DocumentType,
    InvoiceType,
    JournalSide,
    PaymentMethod,
    PaymentStatus,
)
from core.utils.money import format_amount


@dataclass
class Account:
    """계정과목 (회사별 code 유일)"""

    company_id: str
    code: str
    name: str
    account_type: AccountType
    normal_side: JournalSide
    is_active: bool = True

    def signed(self, side: JournalSide, amount: Decimal) -> Decimal:
        """정상 잔액 방향 기준 부호 적용

        정상 방향과 같으면 +, 반대면 -.
        """
        return amount if side == self.normal_side else -amount


@dataclass
class DocumentLine:
    """문서 라인 (차변 또는 대변 한 줄)"""

    account_code: str
    side: JournalSide
    amount: Decimal
    description: str | None = None
    line_order: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_code": self.account_code,
            "side": self.side.value,
            "amount": format_amount(self.amount),
            "description": self.description,
            "line_order": self.line_order,
        }


@dataclass
class Document:
    """원천 문서 (세금계산서 또는 일반 전표)

    draft 상태에서만 수정 가능.
    세금계산서는 lines가 비어 있으면 헤더 금액(untaxed/tax/total)과
    회사별 분개 규칙으로 라인을 생성.
    """

    document_id: str
    company_id: str
    document_type: DocumentType
    status: DocumentStatus
    document_date: date
    number: str
    created_by: str
    created_at: datetime
    lines: list[DocumentLine] = field(default_factory=list)

    counterparty: str | None = None
    description: str | None = None

    # 상태 전이 스탬프
    posted_by: str | None = None
    posted_at: datetime | None = None
    voided_by: str | None = None
    voided_at: datetime | None = None
    void_reason: str | None = None

    # 세금계산서 전용
    invoice_type: InvoiceType | None = None
    untaxed_amount: Decimal | None = None
    tax_amount: Decimal | None = None
    total_amount: Decimal | None = None
    account_code: str | None = None

    @property
    def is_invoice(self) -> bool:
        return self.document_type == DocumentType.INVOICE

    def total_debit(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.side == JournalSide.DEBIT),
            Decimal("0"),
        )

    def total_credit(self) -> Decimal:
        return sum(
            (line.amount for line in self.lines if line.side == JournalSide.CREDIT),
            Decimal("0"),
        )

    def to_dict(self) -> dict[str, Any]:
        """API 응답용 dict (금액은 문자열)"""

        def _amount(value: Decimal | None) -> str | None:
            return format_amount(value) if value is not None else None

        def _ts(value: datetime | None) -> str | None:
            return value.isoformat() if value is not None else None

        return {
            "document_id": self.document_id,
            "company_id": self.company_id,
            "document_type": self.document_type.value,
            "status": self.status.value,
            "document_date": self.document_date.isoformat(),
            "number": self.number,
            "counterparty": self.counterparty,
            "description": self.description,
            "lines": [line.to_dict() for line in self.lines],
            "created_by": self.created_by,
            "created_at": _ts(self.created_at),
            "posted_by": self.posted_by,
            "posted_at": _ts(self.posted_at),
            "voided_by": self.voided_by,
            "voided_at": _ts(self.voided_at),
            "void_reason": self.void_reason,
            "invoice_type": self.invoice_type.value if self.invoice_type else None,
            "untaxed_amount": _amount(self.untaxed_amount),
            "tax_amount": _amount(self.tax_amount),
            "total_amount": _amount(self.total_amount),
            "account_code": self.account_code,
        }


@dataclass(frozen=True)
class LedgerEntry:
    """원장 분개 레코드

    INSERT 이후 절대 수정/삭제되지 않음.
    역분개는 is_reversal=True, reverses_entry_id=원본 entry_id.
    """

    entry_id: str
    company_id: str
    source_document_id: str
    source_document_type: DocumentType
    account_code: str
    side: JournalSide
    amount: Decimal
    entry_date: date
    created_at: datetime
    is_reversal: bool = False
    reverses_entry_id: str | None = None
    line_order: int = 0
    memo: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "company_id": self.company_id,
            "source_document_id": self.source_document_id,
            "source_document_type": self.source_document_type.value,
            "account_code": self.account_code,
            "side": self.side.value,
            "amount": format_amount(self.amount),
            "entry_date": self.entry_date.isoformat(),
            "created_at": self.created_at.isoformat(),
            "is_reversal": self.is_reversal,
            "reverses_entry_id": self.reverses_entry_id,
            "line_order": self.line_order,
            "memo": self.memo,
        }


@dataclass
class PostedDocument:
    """전기 결과"""

    document: Document
    entries: list[LedgerEntry]


@dataclass
class VoidedDocument:
    """취소 결과 (역분개 포함)"""

    document: Document
    reversal_entries: list[LedgerEntry]


@dataclass
class InvoicePayment:
    """세금계산서 결제 기록

    결제마다 현금 ↔ 채권/채무 전표(journal_document_id)를 전기.
    전표가 취소되면 결제 합계에서 제외.
    """

    payment_id: str
    invoice_id: str
    journal_document_id: str
    amount: Decimal
    payment_date: date
    payment_method: PaymentMethod
    recorded_by: str
    recorded_at: datetime
    reference: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "payment_id": self.payment_id,
            "invoice_id": self.invoice_id,
            "journal_document_id": self.journal_document_id,
            "amount": format_amount(self.amount),
            "payment_date": self.payment_date.isoformat(),
            "payment_method": self.payment_method.value,
            "reference": self.reference,
            "recorded_by": self.recorded_by,
            "recorded_at": self.recorded_at.isoformat(),
        }


@dataclass
class PaymentSummary:
    """세금계산서 결제 현황"""

    invoice_id: str
    total_amount: Decimal
    paid_amount: Decimal
    payments: list[InvoicePayment] = field(default_factory=list)

    @property
    def outstanding_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount

    @property
    def payment_status(self) -> PaymentStatus:
        if self.paid_amount <= 0:
            return PaymentStatus.UNPAID
        if self.paid_amount < self.total_amount:
            return PaymentStatus.PARTIAL
        return PaymentStatus.PAID

    def to_dict(self) -> dict[str, Any]:
        return {
            "invoice_id": self.invoice_id,
            "total_amount": format_amount(self.total_amount),
            "paid_amount": format_amount(self.paid_amount),
            "outstanding_amount": format_amount(self.outstanding_amount),
            "payment_status": self.payment_status.value,
            "payments": [payment.to_dict() for payment in self.payments],
        }


@dataclass
class RecordedPayment:
    """결제 기록 결과 (결제 + 전기된 전표 + 갱신된 현황)"""

    payment: InvoicePayment
    journal: PostedDocument
    summary: PaymentSummary
