"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 정밀도 보존을 위해 문자열.
"""

from datetime import date

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    environment: str = Field(..., description="실행 환경")
    version: str = Field(..., description="API 버전")


class ErrorResponse(BaseModel):
    """에러 응답"""

    error_code: str = Field(..., description="에러 코드 (ERR_*)")
    message: str = Field(..., description="에러 메시지")
    details: dict = Field(default_factory=dict, description="상세 정보")


class DocumentLineResponse(BaseModel):
    """문서 라인 응답"""

    account_code: str = Field(..., description="계정 코드")
    side: str = Field(..., description="차대 방향")
    amount: str = Field(..., description="금액")
    description: str | None = Field(default=None, description="적요")
    line_order: int = Field(default=0, description="라인 순서")


class DocumentResponse(BaseModel):
    """문서 응답 (세금계산서/전표)"""

    document_id: str = Field(..., description="문서 ID")
    company_id: str = Field(..., description="회사 ID")
    document_type: str = Field(..., description="문서 유형 (invoice/journal)")
    status: str = Field(..., description="상태 (draft/posted/voided)")
    document_date: str = Field(..., description="문서 일자")
    number: str = Field(..., description="문서 번호 (YYYYMM####)")
    counterparty: str | None = Field(default=None, description="거래처")
    description: str | None = Field(default=None, description="적요")
    lines: list[DocumentLineResponse] = Field(default_factory=list, description="라인")
    created_by: str = Field(..., description="작성자")
    created_at: str = Field(..., description="작성 시각 (UTC)")
    posted_by: str | None = Field(default=None, description="전기자")
    posted_at: str | None = Field(default=None, description="전기 시각 (UTC)")
    voided_by: str | None = Field(default=None, description="취소자")
    voided_at: str | None = Field(default=None, description="취소 시각 (UTC)")
    void_reason: str | None = Field(default=None, description="취소 사유")
    invoice_type: str | None = Field(default=None, description="세금계산서 구분")
    untaxed_amount: str | None = Field(default=None, description="공급가액")
    tax_amount: str | None = Field(default=None, description="세액")
    total_amount: str | None = Field(default=None, description="합계")
    account_code: str | None = Field(default=None, description="수익/비용 계정")


class DocumentListResponse(BaseModel):
    """문서 목록 응답"""

    items: list[DocumentResponse] = Field(default_factory=list, description="문서 목록")
    count: int = Field(..., description="반환 건수")
    limit: int = Field(..., description="조회 제한")
    offset: int = Field(..., description="오프셋")


class LedgerEntryResponse(BaseModel):
    """원장 분개 응답"""

    entry_id: str = Field(..., description="분개 ID")
    company_id: str = Field(..., description="회사 ID")
    source_document_id: str = Field(..., description="원천 문서 ID")
    source_document_type: str = Field(..., description="원천 문서 유형")
    account_code: str = Field(..., description="계정 코드")
    side: str = Field(..., description="차대 방향")
    amount: str = Field(..., description="금액")
    entry_date: str = Field(..., description="분개 일자")
    created_at: str = Field(..., description="기록 시각 (UTC)")
    is_reversal: bool = Field(..., description="역분개 여부")
    reverses_entry_id: str | None = Field(default=None, description="역분개 대상 분개 ID")
    line_order: int = Field(default=0, description="라인 순서")
    memo: str | None = Field(default=None, description="메모")


class PostedDocumentResponse(BaseModel):
    """전기 결과 응답"""

    document: DocumentResponse = Field(..., description="전기된 문서")
    entries: list[LedgerEntryResponse] = Field(..., description="생성된 원장 분개")


class VoidedDocumentResponse(BaseModel):
    """취소 결과 응답"""

    document: DocumentResponse = Field(..., description="취소된 문서")
    reversal_entries: list[LedgerEntryResponse] = Field(..., description="역분개")


class InvoicePaymentResponse(BaseModel):
    """세금계산서 결제 기록"""

    payment_id: str = Field(..., description="결제 ID")
    invoice_id: str = Field(..., description="세금계산서 ID")
    journal_document_id: str = Field(..., description="결제 전표 ID")
    amount: str = Field(..., description="결제 금액")
    payment_date: str = Field(..., description="결제일")
    payment_method: str = Field(..., description="결제 수단")
    reference: str | None = Field(default=None, description="참조")
    recorded_by: str = Field(..., description="기록자")
    recorded_at: str = Field(..., description="기록 시각 (UTC)")


class PaymentSummaryResponse(BaseModel):
    """세금계산서 결제 현황"""

    invoice_id: str = Field(..., description="세금계산서 ID")
    total_amount: str = Field(..., description="청구 합계")
    paid_amount: str = Field(..., description="결제 합계 (취소된 결제 제외)")
    outstanding_amount: str = Field(..., description="미결제 잔액")
    payment_status: str = Field(..., description="결제 상태 (unpaid/partial/paid)")
    payments: list[InvoicePaymentResponse] = Field(default_factory=list, description="결제 목록")


class RecordedPaymentResponse(BaseModel):
    """결제 기록 결과"""

    payment: InvoicePaymentResponse = Field(..., description="결제 기록")
    journal: DocumentResponse = Field(..., description="전기된 결제 전표")
    entries: list[LedgerEntryResponse] = Field(..., description="결제 전표 원장 분개")
    summary: PaymentSummaryResponse = Field(..., description="갱신된 결제 현황")


class AccountResponse(BaseModel):
    """계정과목 응답"""

    company_id: str = Field(..., description="회사 ID")
    code: str = Field(..., description="계정 코드")
    name: str = Field(..., description="계정명")
    account_type: str = Field(..., description="계정 유형")
    normal_side: str = Field(..., description="정상 잔액 방향")
    is_active: bool = Field(default=True, description="활성 여부")


class ReportLineResponse(BaseModel):
    """재무제표 계정 행"""

    code: str = Field(..., description="계정 코드")
    name: str = Field(..., description="계정명")
    balance: str = Field(..., description="잔액")


class ReportSectionResponse(BaseModel):
    """재무제표 구분"""

    items: list[ReportLineResponse] = Field(default_factory=list, description="계정 행")
    total: str = Field(..., description="합계")


class BalanceSheetResponse(BaseModel):
    """재무상태표 응답"""

    company_id: str = Field(..., description="회사 ID")
    as_of_date: date = Field(..., description="기준일")
    assets: ReportSectionResponse = Field(..., description="자산")
    liabilities: ReportSectionResponse = Field(..., description="부채")
    equity: ReportSectionResponse = Field(..., description="자본 (당기순이익 제외)")
    current_earnings: str = Field(..., description="당기순이익 (수익 - 비용)")
    total_assets: str = Field(..., description="자산 합계")
    total_liabilities: str = Field(..., description="부채 합계")
    total_equity: str = Field(..., description="자본 합계 (당기순이익 포함)")
    discrepancy: str = Field(..., description="자산 - (부채 + 자본)")
    is_balanced: bool = Field(..., description="균형 여부")


class IncomeStatementResponse(BaseModel):
    """손익계산서 응답"""

    company_id: str = Field(..., description="회사 ID")
    start_date: date = Field(..., description="시작일")
    end_date: date = Field(..., description="종료일")
    revenue: ReportSectionResponse = Field(..., description="수익")
    expenses: ReportSectionResponse = Field(..., description="비용")
    total_revenue: str = Field(..., description="수익 합계")
    total_expenses: str = Field(..., description="비용 합계")
    net_income: str = Field(..., description="당기순이익")


class TrialBalanceRowResponse(BaseModel):
    """시산표 행"""

    account_code: str = Field(..., description="계정 코드")
    account_name: str = Field(..., description="계정명")
    account_type: str = Field(..., description="계정 유형")
    opening_debit: str = Field(..., description="기초 차변")
    opening_credit: str = Field(..., description="기초 대변")
    period_debit: str = Field(..., description="당기 차변")
    period_credit: str = Field(..., description="당기 대변")
    closing_debit: str = Field(..., description="기말 차변")
    closing_credit: str = Field(..., description="기말 대변")


class TrialBalanceResponse(BaseModel):
    """시산표 응답"""

    company_id: str = Field(..., description="회사 ID")
    start_date: date = Field(..., description="시작일")
    end_date: date = Field(..., description="종료일")
    rows: list[TrialBalanceRowResponse] = Field(default_factory=list, description="계정별 행")
    total_closing_debit: str = Field(..., description="기말 차변 합계")
    total_closing_credit: str = Field(..., description="기말 대변 합계")
    is_balanced: bool = Field(..., description="차대 일치 여부")


class BalancesResponse(BaseModel):
    """계정별 잔액 응답"""

    company_id: str = Field(..., description="회사 ID")
    as_of_date: date | None = Field(default=None, description="기준일")
    start_date: date | None = Field(default=None, description="시작일")
    end_date: date | None = Field(default=None, description="종료일")
    balances: dict[str, str] = Field(default_factory=dict, description="계정 코드 → 잔액")
