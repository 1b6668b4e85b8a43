"""
Reversal/Void Engine

전기된 문서를 역분개로 취소.
원본 분개는 절대 수정/삭제하지 않고 차대를 뒤집은 분개만 추가.
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
)
from core.ledger.models import VoidedDocument
from core.ledger.posting import load_document
from core.ledger.store import LedgerStore
from core.ledger.types import DocumentStatus, DocumentType

logger = logging.getLogger(__name__)


class ReversalEngine:
    """취소 엔진

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

    async def void(
        self,
        document_id: str,
        acting_user_id: str,
        reason: str,
        document_type: DocumentType | None = None,
    ) -> VoidedDocument:
        """문서 취소 (posted → voided)

        원본 분개마다 역분개 1건 (차대 반전, 동일 금액, 취소 시점 일자).

        Raises:
            DocumentValidationError: 사유 없음
            NotFoundError: 문서 없음
            ForbiddenError: 취소 권한 없음
            InvalidStateTransitionError: posted가 아님
            DocumentValidationError: 결제가 남아 있는 세금계산서
            ConcurrencyConflictError: 다른 요청이 먼저 취소
        """
        reason = (reason or "").strip()
        if not reason:
            raise DocumentValidationError("Void reason is required", field="reason")

        async with self.store.db.transaction():
            document = await load_document(self.store, document_id, document_type)

            permission = Permissions.for_resource(document.document_type.resource, "void")
            if not await self.authorizer.allows(acting_user_id, permission):
                logger.warning(
                    "Void forbidden",
                    extra={"document_id": document_id, "user_id": acting_user_id},
                )
                raise ForbiddenError(acting_user_id, permission)

            machine = DocumentStateMachine(document.status)
            try:
                machine.transition(DocumentStatus.VOIDED)
            except InvalidStateTransitionError:
                logger.warning(
                    "Void rejected",
                    extra={"document_id": document_id, "status": document.status.value},
                )
                raise

            if document.document_type == DocumentType.INVOICE:
                paid_amount = await self.store.get_paid_amount(document_id)
                if paid_amount > 0:
                    raise DocumentValidationError(
                        f"Invoice has recorded payments of {paid_amount}; "
                        "void the payment journals first",
                        field="payments",
                    )

            voided_at = self.builder.now()
            if not await self.store.mark_voided(document_id, acting_user_id, voided_at, reason):
                current = await self.store.get_status(document_id)
                raise ConcurrencyConflictError(
                    document_id,
                    expected=DocumentStatus.POSTED.value,
                    requested=DocumentStatus.VOIDED.value,
                    current=current.value if current else None,
                )

            originals = await self.store.get_entries_for_document(
                document_id, include_reversals=False,
            )
            reversals = self.builder.build_reversal_entries(originals, voided_at)
            await self.store.insert_entries(reversals)

        document.status = DocumentStatus.VOIDED
        document.voided_by = acting_user_id
        document.voided_at = voided_at
        document.void_reason = reason

        logger.info(
            "Document voided",
            extra={
                "document_id": document_id,
                "document_type": document.document_type.value,
                "user_id": acting_user_id,
                "reversals": len(reversals),
            },
        )
        return VoidedDocument(document=document, reversal_entries=reversals)
