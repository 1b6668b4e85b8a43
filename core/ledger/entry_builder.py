"""
분개 생성기

원천 문서(세금계산서/전표)를 복식부기 원장 분개로 변환
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from core.ledger.errors import (
    DocumentValidationError,
    EmptyDocumentError,
    ImbalancedEntryError,
)
from core.ledger.models import Document, DocumentLine, LedgerEntry
from core.ledger.types import (
    INVOICE_POSTING_LAYOUT,
    OVERRIDABLE_ROLES,
    DocumentType,
    JournalSide,
    PostingRole,
)
from core.utils.money import has_valid_scale
from core.utils.timezone import ensure_utc, now_utc, utc_date

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def debit_total(lines: Iterable[DocumentLine]) -> Decimal:
    """차변 라인 합계"""
    return sum(
        (line.amount for line in lines if line.side == JournalSide.DEBIT),
        Decimal("0"),
    )


class LedgerEntryBuilder:
    """문서 → 원장 분개 변환

    Args:
        clock: 현재 시각 함수 (테스트에서 고정 시각 주입)
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or now_utc

    def now(self) -> datetime:
        """현재 UTC 시각"""
        return ensure_utc(self._clock())

    def lines_for(
        self,
        document: Document,
        rules: dict[PostingRole, str] | None = None,
    ) -> list[DocumentLine]:
        """분개할 라인 결정

        - 전표: 문서 라인 그대로
        - 세금계산서 + 명시 라인: 명시 라인 우선
        - 세금계산서 + 헤더 금액만: 분개 규칙으로 라인 생성

        Args:
            document: 원천 문서
            rules: 역할 → 계정 코드 (세금계산서 구분별)

        Returns:
            라인 목록 (line_order 순)
        """
        if document.lines or document.document_type == DocumentType.JOURNAL:
            return sorted(document.lines, key=lambda line: line.line_order)

        if document.invoice_type is None:
            raise DocumentValidationError(
                "Invoice type is required to derive posting lines",
                field="invoice_type",
            )

        rules = rules or {}
        derived: list[DocumentLine] = []
        for role, side, amount_field in INVOICE_POSTING_LAYOUT[document.invoice_type]:
            amount = getattr(document, amount_field)
            if amount is None or amount == 0:
                continue

            account_code = rules.get(role)
            if role in OVERRIDABLE_ROLES and document.account_code:
                account_code = document.account_code
            if not account_code:
                raise DocumentValidationError(
                    f"No posting rule for {document.invoice_type.value}/{role.value}",
                    field="posting_rule",
                )

            derived.append(DocumentLine(
                account_code=account_code,
                side=side,
                amount=amount,
                description=document.description,
                line_order=len(derived),
            ))

        return derived

    def validate_amounts(self, lines: Iterable[DocumentLine]) -> None:
        """라인 금액 검증 (양수, 소수 2자리 이내)

        Raises:
            DocumentValidationError: 0 이하이거나 자릿수 초과
        """
        for line in lines:
            if line.amount <= 0:
                raise DocumentValidationError(
                    f"Line amount must be positive: {line.account_code}={line.amount}",
                    field="amount",
                )
            if not has_valid_scale(line.amount):
                raise DocumentValidationError(
                    f"Line amount has too many decimal places: {line.amount}",
                    field="amount",
                )

    def assert_balanced(self, document_id: str, lines: list[DocumentLine]) -> None:
        """차대 균형 검증 (Decimal 정확 일치)

        Raises:
            EmptyDocumentError: 라인 없음
            ImbalancedEntryError: 차변 합계 != 대변 합계
        """
        if not lines:
            raise EmptyDocumentError(document_id)

        total_debit = debit_total(lines)
        total_credit = sum(
            (line.amount for line in lines if line.side == JournalSide.CREDIT),
            Decimal("0"),
        )
        if total_debit != total_credit:
            raise ImbalancedEntryError(total_debit, total_credit, document_id=document_id)

    def assert_matches_header(
        self,
        total_amount: Decimal | None,
        lines: Iterable[DocumentLine],
    ) -> None:
        """세금계산서 명시 라인의 차변 합계 = 헤더 합계 금액

        합계 금액이 없거나 라인이 없으면 검증 생략.

        Raises:
            DocumentValidationError: 차변 합계 != 합계 금액
        """
        lines = list(lines)
        if total_amount is None or not lines:
            return

        total_debit = debit_total(lines)
        if total_debit != total_amount:
            raise DocumentValidationError(
                f"Line debit total {total_debit} != total_amount {total_amount}",
                field="total_amount",
            )

    def build_posting_entries(
        self,
        document: Document,
        lines: list[DocumentLine],
        posted_at: datetime,
    ) -> list[LedgerEntry]:
        """전기 분개 생성 (라인당 1건, 문서 일자 기준)"""
        return [
            LedgerEntry(
                entry_id=str(uuid4()),
                company_id=document.company_id,
                source_document_id=document.document_id,
                source_document_type=document.document_type,
                account_code=line.account_code,
                side=line.side,
                amount=line.amount,
                entry_date=document.document_date,
                created_at=posted_at,
                is_reversal=False,
                line_order=index,
                memo=line.description,
            )
            for index, line in enumerate(lines)
        ]

    def build_reversal_entries(
        self,
        original_entries: list[LedgerEntry],
        voided_at: datetime,
    ) -> list[LedgerEntry]:
        """역분개 생성

        원본마다 차대 반전, 동일 금액, 취소 시점 일자.
        """
        entry_date = utc_date(voided_at)
        return [
            LedgerEntry(
                entry_id=str(uuid4()),
                company_id=original.company_id,
                source_document_id=original.source_document_id,
                source_document_type=original.source_document_type,
                account_code=original.account_code,
                side=original.side.opposite(),
                amount=original.amount,
                entry_date=entry_date,
                created_at=voided_at,
                is_reversal=True,
                reverses_entry_id=original.entry_id,
                line_order=original.line_order,
                memo=original.memo,
            )
            for original in original_entries
        ]
