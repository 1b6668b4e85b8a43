"""
Posting Engine

draft 문서를 원장에 전기.
검증 → 상태 CAS → 원장 INSERT를 하나의 트랜잭션으로 수행하여
부분 전기(분개만 기록 또는 상태만 변경)가 남지 않도록 보장.
"""

from __future__ import annotations

import logging

from core.auth.authorizer import Authorizer, Permissions
from core.domain.state_machines import DocumentStateMachine
from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.errors import (
    ConcurrencyConflictError,
    DocumentValidationError,
    ForbiddenError,
    InvalidStateTransitionError,
    NotFoundError,
)
from core.ledger.models import Document, DocumentLine, PostedDocument
from core.ledger.store import LedgerStore
from core.ledger.types import DocumentStatus, DocumentType

logger = logging.getLogger(__name__)


async def load_document(
    store: LedgerStore,
    document_id: str,
    document_type: DocumentType | None,
) -> Document:
    """문서 조회 (유형이 다르면 없는 것으로 취급)

    Raises:
        NotFoundError: 문서 없음 또는 유형 불일치
    """
    document = await store.get_document(document_id)
    if document is None:
        raise NotFoundError("document", document_id)
    if document_type is not None and document.document_type != document_type:
        raise NotFoundError(document_type.value, document_id)
    return document


class PostingEngine:
    """전기 엔진

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

    async def post(
        self,
        document_id: str,
        acting_user_id: str,
        document_type: DocumentType | None = None,
    ) -> PostedDocument:
        """문서 전기 (draft → posted)

        Args:
            document_id: 문서 ID
            acting_user_id: 요청 사용자
            document_type: 기대 문서 유형 (라우트별 구분)

        Returns:
            PostedDocument (갱신된 문서 + 생성된 원장 분개)

        Raises:
            NotFoundError: 문서/계정 없음
            ForbiddenError: 전기 권한 없음
            InvalidStateTransitionError: draft가 아님
            EmptyDocumentError: 라인 없음
            ImbalancedEntryError: 차대 불일치
            DocumentValidationError: 금액/계정 검증 실패, 명시 라인과 헤더 합계 불일치
            ConcurrencyConflictError: 다른 요청이 먼저 전기
        """
        async with self.store.db.transaction():
            document = await load_document(self.store, document_id, document_type)

            permission = Permissions.for_resource(document.document_type.resource, "post")
            if not await self.authorizer.allows(acting_user_id, permission):
                logger.warning(
                    "Posting forbidden",
                    extra={"document_id": document_id, "user_id": acting_user_id},
                )
                raise ForbiddenError(acting_user_id, permission)

            return await self.post_document(document, acting_user_id)

    async def post_document(self, document: Document, acting_user_id: str) -> PostedDocument:
        """조회된 문서 전기 (권한 확인 제외)

        권한은 호출자가 확인. 결제 전표처럼 다른 권한으로 생성된 문서에 사용.
        호출자의 트랜잭션 안에서 실행되면 그 트랜잭션에 합류.
        """
        document_id = document.document_id
        async with self.store.db.transaction():
            machine = DocumentStateMachine(document.status)
            try:
                machine.transition(DocumentStatus.POSTED)
            except InvalidStateTransitionError:
                logger.warning(
                    "Posting rejected",
                    extra={"document_id": document_id, "status": document.status.value},
                )
                raise

            lines = await self._resolve_lines(document)
            self.builder.validate_amounts(lines)
            self.builder.assert_balanced(document_id, lines)
            if document.document_type == DocumentType.INVOICE and document.lines:
                self.builder.assert_matches_header(document.total_amount, document.lines)

            posted_at = self.builder.now()
            if not await self.store.mark_posted(document_id, acting_user_id, posted_at):
                current = await self.store.get_status(document_id)
                raise ConcurrencyConflictError(
                    document_id,
                    expected=DocumentStatus.DRAFT.value,
                    requested=DocumentStatus.POSTED.value,
                    current=current.value if current else None,
                )

            entries = self.builder.build_posting_entries(document, lines, posted_at)
            await self.store.insert_entries(entries)

        document.status = DocumentStatus.POSTED
        document.posted_by = acting_user_id
        document.posted_at = posted_at
        if not document.lines:
            document.lines = lines

        logger.info(
            "Document posted",
            extra={
                "document_id": document_id,
                "document_type": document.document_type.value,
                "user_id": acting_user_id,
                "entries": len(entries),
            },
        )
        return PostedDocument(document=document, entries=entries)

    async def _resolve_lines(self, document: Document) -> list[DocumentLine]:
        """분개 라인 결정 + 계정 존재 확인"""
        rules = None
        if document.document_type == DocumentType.INVOICE and not document.lines:
            if document.invoice_type is not None:
                rules = await self.store.get_posting_rules(
                    document.company_id, document.invoice_type,
                )

        lines = self.builder.lines_for(document, rules)

        for line in lines:
            account = await self.store.get_account(document.company_id, line.account_code)
            if account is None:
                raise NotFoundError("account", line.account_code)
            if not account.is_active:
                raise DocumentValidationError(
                    f"Account is inactive: {line.account_code}",
                    field="account_code",
                )

        return lines
