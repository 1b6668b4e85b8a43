"""
일반 전표 라우트

전표 draft 생성/조회/수정/삭제 및 전기/취소 API
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
from web.models.requests import JournalCreateRequest, JournalUpdateRequest, VoidRequest
from web.models.responses import (
    DocumentListResponse,
    DocumentResponse,
    PostedDocumentResponse,
    VoidedDocumentResponse,
)
from web.services.document_service import DocumentService, build_lines

router = APIRouter(prefix="/accounting/journals", tags=["Journals"])


@router.post("", response_model=DocumentResponse, status_code=201)
async def create_journal(
    request: JournalCreateRequest,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """전표 draft 생성 (차대 균형은 전기 시 검증)"""
    service = DocumentService(db, authorizer, builder)
    return await service.create_journal(
        user_id=user_id,
        company_id=request.company_id,
        document_date=request.document_date,
        lines=build_lines(request.lines),
        description=request.description,
        counterparty=request.counterparty,
    )


@router.get("", response_model=DocumentListResponse)
async def list_journals(
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
    """전표 목록 (일자 역순)"""
    service = DocumentService(db, authorizer)
    return await service.list_documents(
        user_id, DocumentType.JOURNAL, company_id,
        status=status, start_date=start_date, end_date=end_date,
        limit=limit, offset=offset,
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_journal(
    document_id: str,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """전표 상세"""
    service = DocumentService(db, authorizer)
    return await service.get_document(user_id, DocumentType.JOURNAL, document_id)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_journal(
    document_id: str,
    request: JournalUpdateRequest,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """draft 전표 수정 (헤더 + 라인 전체 교체)"""
    service = DocumentService(db, authorizer, builder)
    return await service.update_journal(
        user_id=user_id,
        document_id=document_id,
        document_date=request.document_date,
        lines=build_lines(request.lines),
        description=request.description,
        counterparty=request.counterparty,
    )


@router.delete("/{document_id}", status_code=204)
async def delete_journal(
    document_id: str,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
) -> Response:
    """draft 전표 삭제 (라인 포함)"""
    service = DocumentService(db, authorizer)
    await service.delete_draft(user_id, DocumentType.JOURNAL, document_id)
    return Response(status_code=204)


@router.post("/{document_id}/post", response_model=PostedDocumentResponse)
async def post_journal(
    document_id: str,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """전표 전기 (draft → posted)"""
    service = DocumentService(db, authorizer, builder)
    return await service.post(user_id, DocumentType.JOURNAL, document_id)


@router.post("/{document_id}/void", response_model=VoidedDocumentResponse)
async def void_journal(
    document_id: str,
    request: VoidRequest,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
    builder: LedgerEntryBuilder = Depends(get_entry_builder),
):
    """전표 취소 (posted → voided, 역분개)"""
    service = DocumentService(db, authorizer, builder)
    return await service.void(user_id, DocumentType.JOURNAL, document_id, request.reason)
