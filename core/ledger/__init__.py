"""
복식부기 (Double-Entry Bookkeeping) 원장

세금계산서/전표를 불변 원장 분개로 전기하고,
취소는 역분개로만 처리하는 append-only 원장.

사용 예시:
```python
from core.ledger import LedgerStore, LedgerEntryBuilder
from core.ledger.posting import PostingEngine
from core.ledger.reversal import ReversalEngine

store = LedgerStore(db)
engine = PostingEngine(store, authorizer, LedgerEntryBuilder())

# 전기
posted = await engine.post(document_id, "user-1")

# 취소 (역분개)
voided = await ReversalEngine(store, authorizer).void(
    document_id, "user-1", "customer cancelled",
)
```

전기/취소/결제 엔진, 집계, 재무제표는 모듈 경로로 직접 import (core.domain 순환 참조 방지).
"""

from core.ledger.entry_builder import LedgerEntryBuilder
from core.ledger.errors import (
    ConcurrencyConflictError,
    DocumentValidationError,
    EmptyDocumentError,
    ForbiddenError,
    ImbalancedEntryError,
    InvalidStateTransitionError,
    LedgerError,
    NotFoundError,
)
from core.ledger.models import (
    Account,
    Document,
    DocumentLine,
    InvoicePayment,
    LedgerEntry,
    PaymentSummary,
    PostedDocument,
    RecordedPayment,
    VoidedDocument,
)
from core.ledger.schema import init_ledger_schema, seed_company
from core.ledger.store import LedgerStore
from core.ledger.types import (
    DEFAULT_CHART_OF_ACCOUNTS,
    DEFAULT_POSTING_RULES,
    NORMAL_SIDE_BY_TYPE,
    AccountType,
    DocumentStatus,
    DocumentType,
    InvoiceType,
    JournalSide,
    PaymentMethod,
    PaymentStatus,
    PostingRole,
)

__all__ = [
    # 핵심 클래스
    "LedgerStore",
    "LedgerEntryBuilder",
    "init_ledger_schema",
    "seed_company",
    # 레코드
    "Account",
    "Document",
    "DocumentLine",
    "LedgerEntry",
    "PostedDocument",
    "VoidedDocument",
    "InvoicePayment",
    "PaymentSummary",
    "RecordedPayment",
    # 예외
    "LedgerError",
    "NotFoundError",
    "InvalidStateTransitionError",
    "ConcurrencyConflictError",
    "ImbalancedEntryError",
    "EmptyDocumentError",
    "DocumentValidationError",
    "ForbiddenError",
    # Enum
    "AccountType",
    "DocumentStatus",
    "DocumentType",
    "InvoiceType",
    "JournalSide",
    "PaymentMethod",
    "PaymentStatus",
    "PostingRole",
    # 상수
    "DEFAULT_CHART_OF_ACCOUNTS",
    "DEFAULT_POSTING_RULES",
    "NORMAL_SIDE_BY_TYPE",
]
