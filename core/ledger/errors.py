"""
Ledger 도메인 예외

모든 도메인 예외는 error_code와 HTTP 상태 코드를 가지며,
API 경계(web/errors.py)에서 구조화된 JSON 응답으로 변환됨.
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """Ledger 도메인 예외 기본 클래스"""

    error_code: str = "ERR_LEDGER"
    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(LedgerError):
    """문서/계정 없음"""

    error_code = "ERR_NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: Any):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            f"{resource} not found: {resource_id}",
            details={"resource": resource, "id": resource_id},
        )


class InvalidStateTransitionError(LedgerError):
    """허용되지 않은 상태 전이 (현재 상태 / 요청 상태 포함)"""

    error_code = "ERR_INVALID_STATE"

    def __init__(self, current: str, requested: str, message: str | None = None):
        self.current = current
        self.requested = requested
        super().__init__(
            message or f"Cannot transition from {current} to {requested}",
            details={"current": current, "requested": requested},
        )


class ConcurrencyConflictError(InvalidStateTransitionError):
    """상태 CAS 경합 패배

    다른 요청이 먼저 상태를 변경함. 현재 상태를 다시 조회한 뒤 재시도해야 함.
    """

    error_code = "ERR_CONCURRENCY_CONFLICT"

    def __init__(
        self,
        document_id: str,
        expected: str,
        requested: str,
        current: str | None = None,
    ):
        self.document_id = document_id
        self.expected = expected
        current = current or "unknown"
        super().__init__(
            current=current,
            requested=requested,
            message=(
                f"Document {document_id} changed concurrently: "
                f"expected {expected} before {requested}, found {current}"
            ),
        )
        self.details["document_id"] = document_id
        self.details["expected"] = expected


class ImbalancedEntryError(LedgerError):
    """차변 합계 != 대변 합계"""

    error_code = "ERR_IMBALANCED"

    def __init__(self, total_debit: Decimal, total_credit: Decimal, document_id: str | None = None):
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.discrepancy = abs(total_debit - total_credit)
        super().__init__(
            f"Entry is not balanced: debit={total_debit} credit={total_credit} "
            f"discrepancy={self.discrepancy}",
            details={
                "document_id": document_id,
                "total_debit": f"{total_debit:f}",
                "total_credit": f"{total_credit:f}",
                "discrepancy": f"{self.discrepancy:f}",
            },
        )


class EmptyDocumentError(LedgerError):
    """분개할 라인이 없는 문서"""

    error_code = "ERR_EMPTY_DOCUMENT"

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(
            f"Document has no lines to post: {document_id}",
            details={"document_id": document_id},
        )


class DocumentValidationError(LedgerError):
    """입력값 검증 실패 (금액, 사유, 기간 등)"""

    error_code = "ERR_VALIDATION"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, details={"field": field} if field else None)


class ForbiddenError(LedgerError):
    """권한 없음"""

    error_code = "ERR_FORBIDDEN"
    status_code = 403

    def __init__(self, user_id: str, permission: str):
        self.user_id = user_id
        self.permission = permission
        super().__init__(
            f"User {user_id} lacks permission {permission}",
            details={"user_id": user_id, "permission": permission},
        )
