"""
재무제표 라우트

재무상태표, 손익계산서, 시산표, 계정별 잔액 조회 API
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import Authorizer
from web.dependencies import get_authorizer, get_current_user, get_db
from web.models.responses import (
    BalanceSheetResponse,
    BalancesResponse,
    IncomeStatementResponse,
    TrialBalanceResponse,
)
from web.services.report_service import ReportService

router = APIRouter(prefix="/accounting/reports", tags=["Reports"])


@router.get("/balance-sheet", response_model=BalanceSheetResponse)
async def get_balance_sheet(
    company_id: str = Query(..., min_length=1),
    as_of_date: date = Query(...),
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """재무상태표 (as_of_date 이하 전체 분개)

    불일치 시 is_balanced=false와 discrepancy를 그대로 반환.
    """
    service = ReportService(db, authorizer)
    return await service.balance_sheet(user_id, company_id, as_of_date)


@router.get("/income-statement", response_model=IncomeStatementResponse)
async def get_income_statement(
    company_id: str = Query(..., min_length=1),
    start_date: date = Query(...),
    end_date: date = Query(...),
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """손익계산서 (start_date ~ end_date, 양 끝 포함)"""
    service = ReportService(db, authorizer)
    return await service.income_statement(user_id, company_id, start_date, end_date)


@router.get("/trial-balance", response_model=TrialBalanceResponse)
async def get_trial_balance(
    company_id: str = Query(..., min_length=1),
    start_date: date = Query(...),
    end_date: date = Query(...),
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """시산표 (기초/당기/기말 차대 합계)"""
    service = ReportService(db, authorizer)
    return await service.trial_balance(user_id, company_id, start_date, end_date)


@router.get("/balances", response_model=BalancesResponse)
async def get_balances(
    company_id: str = Query(..., min_length=1),
    as_of_date: date | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """계정별 잔액 (as_of_date 또는 기간 중 하나)"""
    service = ReportService(db, authorizer)
    return await service.balances(
        user_id, company_id,
        as_of=as_of_date, start_date=start_date, end_date=end_date,
    )
