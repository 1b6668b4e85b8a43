"""
복식부기 타입 정의

계정 유형, 차대 방향, 전표 상태 등 Ledger 시스템에서 사용하는 Enum 정의
"""

from enum import Enum


class AccountType(str, Enum):
    """계정 유형

    복식부기의 5대 계정 유형.
    str을 상속하여 JSON 직렬화 가능.
    """

    ASSET = "asset"  # 자산
    LIABILITY = "liability"  # 부채
    EQUITY = "equity"  # 자본
    REVENUE = "revenue"  # 수익
    EXPENSE = "expense"  # 비용


class JournalSide(str, Enum):
    """분개 방향 (차변/대변)"""

    DEBIT = "debit"  # 차변 (자산 증가, 비용 증가)
    CREDIT = "credit"  # 대변 (부채/자본/수익 증가)

    def opposite(self) -> "JournalSide":
        """반대 방향 (역분개용)"""
        if self is JournalSide.DEBIT:
            return JournalSide.CREDIT
        return JournalSide.DEBIT


class DocumentType(str, Enum):
    """원천 문서 유형"""

    INVOICE = "invoice"  # 발행/수취 세금계산서
    JOURNAL = "journal"  # 일반 전표

    @property
    def resource(self) -> str:
        """권한 리소스 이름 (invoices, journals)"""
        return f"{self.value}s"


class DocumentStatus(str, Enum):
    """문서 상태

    draft → posted → voided 순서로만 전이.
    """

    DRAFT = "draft"
    POSTED = "posted"
    VOIDED = "voided"


class InvoiceType(str, Enum):
    """세금계산서 구분"""

    OUTPUT = "OUTPUT"  # 매출 (발행)
    INPUT = "INPUT"  # 매입 (수취)


class PaymentMethod(str, Enum):
    """대금 결제 수단"""

    CASH = "cash"
    TRANSFER = "transfer"  # 계좌이체
    CHECK = "check"
    CREDIT_CARD = "credit_card"
    UNCLASSIFIED = "unclassified"


class PaymentStatus(str, Enum):
    """세금계산서 결제 상태 (기록된 결제 합계 기준)"""

    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class PostingRole(str, Enum):
    """세금계산서 분개 시 계정 역할

    회사별 posting_rule 테이블에서 역할 → 계정 코드를 매핑.
    """

    # 매출 (OUTPUT)
    RECEIVABLE = "receivable"  # 매출채권 (차변)
    REVENUE = "revenue"  # 매출 (대변)
    OUTPUT_TAX = "output_tax"  # 부가세 예수금 (대변)

    # 매입 (INPUT)
    EXPENSE = "expense"  # 비용 (차변)
    INPUT_TAX = "input_tax"  # 부가세 대급금 (차변)
    PAYABLE = "payable"  # 매입채무 (대변)

    # 대금 수납/지급 (OUTPUT, INPUT 공통)
    CASH = "cash"  # 현금/예금


# 계정 유형별 정상 잔액 방향
NORMAL_SIDE_BY_TYPE: dict[AccountType, JournalSide] = {
    AccountType.ASSET: JournalSide.DEBIT,
    AccountType.EXPENSE: JournalSide.DEBIT,
    AccountType.LIABILITY: JournalSide.CREDIT,
    AccountType.EQUITY: JournalSide.CREDIT,
    AccountType.REVENUE: JournalSide.CREDIT,
}


# 세금계산서 구분별 역할 → 방향
# (역할, 방향, 금액 필드)
INVOICE_POSTING_LAYOUT: dict[InvoiceType, list[tuple[PostingRole, JournalSide, str]]] = {
    InvoiceType.OUTPUT: [
        (PostingRole.RECEIVABLE, JournalSide.DEBIT, "total_amount"),
        (PostingRole.REVENUE, JournalSide.CREDIT, "untaxed_amount"),
        (PostingRole.OUTPUT_TAX, JournalSide.CREDIT, "tax_amount"),
    ],
    InvoiceType.INPUT: [
        (PostingRole.EXPENSE, JournalSide.DEBIT, "untaxed_amount"),
        (PostingRole.INPUT_TAX, JournalSide.DEBIT, "tax_amount"),
        (PostingRole.PAYABLE, JournalSide.CREDIT, "total_amount"),
    ],
}

# 세금계산서의 account_code로 덮어쓸 수 있는 역할
OVERRIDABLE_ROLES: set[PostingRole] = {PostingRole.REVENUE, PostingRole.EXPENSE}


# 기본 계정과목 (회사 생성 시 seed)
DEFAULT_CHART_OF_ACCOUNTS: list[tuple[str, str, str]] = [
    # (code, account_type, name)

    # ASSET
    ("1100", "asset", "Cash"),
    ("1200", "asset", "Accounts Receivable"),
    ("1300", "asset", "Input VAT"),
    ("1500", "asset", "Inventory"),

    # LIABILITY
    ("2100", "liability", "Accounts Payable"),
    ("2200", "liability", "Output VAT"),

    # EQUITY
    ("3100", "equity", "Share Capital"),
    ("3200", "equity", "Retained Earnings"),

    # REVENUE
    ("4100", "revenue", "Sales Revenue"),
    ("4900", "revenue", "Other Income"),

    # EXPENSE
    ("5100", "expense", "Cost of Goods Sold"),
    ("6100", "expense", "Operating Expenses"),
]


# 기본 분개 규칙 (회사 생성 시 seed)
DEFAULT_POSTING_RULES: list[tuple[str, str, str]] = [
    # (invoice_type, role, account_code)
    ("OUTPUT", "receivable", "1200"),
    ("OUTPUT", "revenue", "4100"),
    ("OUTPUT", "output_tax", "2200"),
    ("INPUT", "expense", "6100"),
    ("INPUT", "input_tax", "1300"),
    ("INPUT", "payable", "2100"),
    ("OUTPUT", "cash", "1100"),
    ("INPUT", "cash", "1100"),
]
