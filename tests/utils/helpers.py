"""
테스트 헬퍼

문서 라인/전표 생성 축약 함수
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from core.ledger.models import Document, DocumentLine
from core.ledger.store import LedgerStore
from core.ledger.types import DocumentType, InvoiceType, JournalSide

COMPANY_ID = "acme"

# 테스트 기준 시각 (전기/취소 시각)
FIXED_NOW = datetime(2026, 4, 15, 9, 30, tzinfo=timezone.utc)


def line(account_code: str, side: str, amount: str) -> DocumentLine:
    """DocumentLine 축약 생성"""
    return DocumentLine(
        account_code=account_code,
        side=JournalSide(side),
        amount=Decimal(amount),
    )


async def create_journal(
    store: LedgerStore,
    lines: list[DocumentLine],
    document_date: date = date(2026, 3, 31),
    company_id: str = COMPANY_ID,
    created_by: str = "alice",
) -> Document:
    """draft 전표 생성"""
    return await store.create_document(
        company_id=company_id,
        document_type=DocumentType.JOURNAL,
        document_date=document_date,
        created_by=created_by,
        lines=lines,
    )


async def create_invoice(
    store: LedgerStore,
    invoice_type: InvoiceType,
    untaxed_amount: str,
    tax_amount: str | None = None,
    document_date: date = date(2026, 3, 31),
    account_code: str | None = None,
    lines: list[DocumentLine] | None = None,
) -> Document:
    """draft 세금계산서 생성 (합계 = 공급가액 + 세액)"""
    untaxed = Decimal(untaxed_amount)
    tax = Decimal(tax_amount) if tax_amount is not None else None
    return await store.create_document(
        company_id=COMPANY_ID,
        document_type=DocumentType.INVOICE,
        document_date=document_date,
        created_by="alice",
        lines=lines,
        invoice_type=invoice_type,
        untaxed_amount=untaxed,
        tax_amount=tax,
        total_amount=untaxed + (tax or Decimal("0")),
        account_code=account_code,
    )
