"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from core.ledger.types import AccountType, InvoiceType, JournalSide, PaymentMethod


class DocumentLineRequest(BaseModel):
    """문서 라인 요청"""

    account_code: str = Field(..., min_length=1, description="계정 코드")
    side: JournalSide = Field(..., description="차대 방향 (debit/credit)")
    amount: Decimal = Field(..., description="금액 (양수, 소수 2자리 이내)")
    description: str | None = Field(default=None, description="적요")


class JournalCreateRequest(BaseModel):
    """일반 전표 생성 요청 (draft)"""

    company_id: str = Field(..., min_length=1, description="회사 ID")
    document_date: date = Field(..., description="전표 일자 (YYYY-MM-DD)")
    description: str | None = Field(default=None, description="적요")
    counterparty: str | None = Field(default=None, description="거래처")
    lines: list[DocumentLineRequest] = Field(default_factory=list, description="분개 라인")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "company_id": "acme",
                    "document_date": "2026-03-31",
                    "description": "Office rent",
                    "lines": [
                        {"account_code": "6100", "side": "debit", "amount": "500.00"},
                        {"account_code": "1100", "side": "credit", "amount": "500.00"},
                    ],
                },
            ]
        }
    }


class InvoiceCreateRequest(BaseModel):
    """세금계산서 생성 요청 (draft)

    lines를 생략하면 전기 시 헤더 금액과 분개 규칙으로 라인 생성.
    total_amount를 생략하면 untaxed_amount + tax_amount.
    """

    company_id: str = Field(..., min_length=1, description="회사 ID")
    document_date: date = Field(..., description="발행 일자 (YYYY-MM-DD)")
    invoice_type: InvoiceType = Field(..., description="OUTPUT(매출) / INPUT(매입)")
    counterparty: str | None = Field(default=None, description="거래처")
    description: str | None = Field(default=None, description="적요")
    untaxed_amount: Decimal | None = Field(default=None, description="공급가액")
    tax_amount: Decimal | None = Field(default=None, description="세액")
    total_amount: Decimal | None = Field(default=None, description="합계")
    account_code: str | None = Field(default=None, description="수익/비용 계정 (분개 규칙 대신 사용)")
    lines: list[DocumentLineRequest] = Field(default_factory=list, description="명시 분개 라인")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "company_id": "acme",
                    "document_date": "2026-03-31",
                    "invoice_type": "OUTPUT",
                    "counterparty": "Globex",
                    "untaxed_amount": "1000.00",
                    "tax_amount": "100.00",
                },
                {
                    "company_id": "acme",
                    "document_date": "2026-03-31",
                    "invoice_type": "OUTPUT",
                    "lines": [
                        {"account_code": "1200", "side": "debit", "amount": "1000"},
                        {"account_code": "4100", "side": "credit", "amount": "1000"},
                    ],
                },
            ]
        }
    }


class JournalUpdateRequest(BaseModel):
    """일반 전표 수정 요청 (draft만, 라인 전체 교체)"""

    document_date: date = Field(..., description="전표 일자 (YYYY-MM-DD)")
    description: str | None = Field(default=None, description="적요")
    counterparty: str | None = Field(default=None, description="거래처")
    lines: list[DocumentLineRequest] = Field(default_factory=list, description="분개 라인")


class InvoiceUpdateRequest(BaseModel):
    """세금계산서 수정 요청 (draft만, 생성과 같은 검증)"""

    document_date: date = Field(..., description="발행 일자 (YYYY-MM-DD)")
    invoice_type: InvoiceType = Field(..., description="OUTPUT(매출) / INPUT(매입)")
    counterparty: str | None = Field(default=None, description="거래처")
    description: str | None = Field(default=None, description="적요")
    untaxed_amount: Decimal | None = Field(default=None, description="공급가액")
    tax_amount: Decimal | None = Field(default=None, description="세액")
    total_amount: Decimal | None = Field(default=None, description="합계")
    account_code: str | None = Field(default=None, description="수익/비용 계정 (분개 규칙 대신 사용)")
    lines: list[DocumentLineRequest] = Field(default_factory=list, description="명시 분개 라인")


class VoidRequest(BaseModel):
    """취소 요청"""

    reason: str = Field(..., min_length=1, description="취소 사유")

    model_config = {
        "json_schema_extra": {
            "examples": [{"reason": "customer cancelled"}]
        }
    }


class PaymentRequest(BaseModel):
    """세금계산서 결제 기록 요청"""

    amount: Decimal = Field(..., description="결제 금액 (양수, 미결제 잔액 이하)")
    payment_date: date = Field(..., description="결제일 (YYYY-MM-DD)")
    payment_method: PaymentMethod = Field(
        default=PaymentMethod.TRANSFER,
        description="결제 수단",
    )
    reference: str | None = Field(default=None, description="이체 번호 등 참조")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"amount": "500.00", "payment_date": "2026-04-10", "payment_method": "transfer"},
            ]
        }
    }


class AccountCreateRequest(BaseModel):
    """계정과목 생성 요청"""

    company_id: str = Field(..., min_length=1, description="회사 ID")
    code: str = Field(..., min_length=1, description="계정 코드 (회사 내 유일)")
    name: str = Field(..., min_length=1, description="계정명")
    account_type: AccountType = Field(..., description="계정 유형")
    normal_side: JournalSide | None = Field(
        default=None,
        description="정상 잔액 방향 (생략 시 유형 기본값)",
    )
