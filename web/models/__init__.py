"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    DocumentLineRequest,
    InvoiceCreateRequest,
    InvoiceUpdateRequest,
    JournalCreateRequest,
    JournalUpdateRequest,
    PaymentRequest,
    VoidRequest,
)
from web.models.responses import (
    AccountResponse,
    BalanceSheetResponse,
    BalancesResponse,
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
    HealthResponse,
    IncomeStatementResponse,
    InvoicePaymentResponse,
    LedgerEntryResponse,
    PaymentSummaryResponse,
    PostedDocumentResponse,
    RecordedPaymentResponse,
    TrialBalanceResponse,
    VoidedDocumentResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "DocumentLineRequest",
    "InvoiceCreateRequest",
    "InvoiceUpdateRequest",
    "JournalCreateRequest",
    "JournalUpdateRequest",
    "PaymentRequest",
    "VoidRequest",
    # Responses
    "AccountResponse",
    "BalanceSheetResponse",
    "BalancesResponse",
    "DocumentListResponse",
    "DocumentResponse",
    "ErrorResponse",
    "HealthResponse",
    "IncomeStatementResponse",
    "InvoicePaymentResponse",
    "LedgerEntryResponse",
    "PaymentSummaryResponse",
    "PostedDocumentResponse",
    "RecordedPaymentResponse",
    "TrialBalanceResponse",
    "VoidedDocumentResponse",
]
