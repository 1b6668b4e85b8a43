"""
세금계산서 라우트

세금계산서 draft 생성/조회/수정/삭제, 전기/취소, 결제 API
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import Authorizer
from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.types import DocumentStatus, DocumentType
from web.dependencies import (
    get_authorizer,
    get_current_user,
    get_db,
    get_db_write,
    get_entry_builder,
)
from web.models.requests import (
    InvoiceCreateRequest,
    InvoiceUpdateRequest,
    PaymentRequest,
    VoidRequest,
)
from web.models.responses import (
    DocumentListResponse,
    DocumentResponse,
    PaymentSummaryResponse,
    PostedDocumentResponse,
    RecordedPaymentResponse,
    VoidedDocumentResponse,
)
from web.services.document_service import DocumentService, build_lines

router = APIRouter(prefix="/accounting/invoices", tags=["Invoices"])


@router.post("", response_model=DocumentResponse, status_code=201)
async def create_invoice(
    request: InvoiceCreateRequest,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """세금계산서 draft 생성

    lines를 생략하면 전기 시 헤더 금액과 회사 분개 규칙으로 라인 생성.
    """
    service = DocumentService(db, authorizer, builder)
    return await service.create_invoice(
        user_id=user_id,
        company_id=request.company_id,
        document_date=request.document_date,
        invoice_type=request.invoice_type,
        lines=build_lines(request.lines),
        counterparty=request.counterparty,
        description=request.description,
        untaxed_amount=request.untaxed_amount,
        tax_amount=request.tax_amount,
        total_amount=request.total_amount,
        account_code=request.account_code,
    )


@router.get("", response_model=DocumentListResponse)
async def list_invoices(
    company_id: str = Query(..., min_length=1),
    status: DocumentStatus | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """세금계산서 목록 (일자 역순)"""
    service = DocumentService(db, authorizer)
    return await service.list_documents(
        user_id, DocumentType.INVOICE, company_id,
        status=status, start_date=start_date, end_date=end_date,
        limit=limit, offset=offset,
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_invoice(
    document_id: str,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """세금계산서 상세"""
    service = DocumentService(db, authorizer)
    return await service.get_document(user_id, DocumentType.INVOICE, document_id)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_invoice(
    document_id: str,
    request: InvoiceUpdateRequest,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """draft 세금계산서 수정 (헤더 + 라인 전체 교체)"""
    service = DocumentService(db, authorizer, builder)
    return await service.update_invoice(
        user_id=user_id,
        document_id=document_id,
        document_date=request.document_date,
        invoice_type=request.invoice_type,
        lines=build_lines(request.lines),
        counterparty=request.counterparty,
        description=request.description,
        untaxed_amount=request.untaxed_amount,
        tax_amount=request.tax_amount,
        total_amount=request.total_amount,
        account_code=request.account_code,
    )


@router.delete("/{document_id}", status_code=204)
async def delete_invoice(
    document_id: str,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
) -> Response:
    """draft 세금계산서 삭제 (라인 포함)"""
    service = DocumentService(db, authorizer)
    await service.delete_draft(user_id, DocumentType.INVOICE, document_id)
    return Response(status_code=204)


@router.post("/{document_id}/post", response_model=PostedDocumentResponse)
async def post_invoice(
    document_id: str,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """세금계산서 전기 (draft → posted)

    원장 분개 INSERT와 상태 변경은 하나의 트랜잭션.
    """
    service = DocumentService(db, authorizer, builder)
    return await service.post(user_id, DocumentType.INVOICE, document_id)


@router.post("/{document_id}/void", response_model=VoidedDocumentResponse)
async def void_invoice(
    document_id: str,
    request: VoidRequest,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """세금계산서 취소 (posted → voided, 역분개)"""
    service = DocumentService(db, authorizer, builder)
    return await service.void(user_id, DocumentType.INVOICE, document_id, request.reason)


@router.post("/{document_id}/payments", response_model=RecordedPaymentResponse, status_code=201)
async def record_invoice_payment(
    document_id: str,
    request: PaymentRequest,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """결제 기록 (전기된 세금계산서만)

    결제 전표 생성/전기와 결제 기록은 하나의 트랜잭션.
    """
    service = DocumentService(db, authorizer, builder)
    return await service.record_payment(
        user_id=user_id,
        invoice_id=document_id,
        amount=request.amount,
        payment_date=request.payment_date,
        payment_method=request.payment_method,
        reference=request.reference,
    )


@router.get("/{document_id}/payments", response_model=PaymentSummaryResponse)
async def get_invoice_payments(
    document_id: str,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """결제 현황 (합계, 미결제 잔액, 결제 목록)"""
    service = DocumentService(db, authorizer)
    return await service.get_payments(user_id, document_id)
