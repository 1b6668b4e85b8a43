"""
계정과목 라우트

계정과목 조회/생성 API
"""

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.auth.authorizer import Authorizer
from core.ledger.types import AccountType
from web.dependencies import get_authorizer, get_current_user, get_db, get_db_write
from web.models.requests import AccountCreateRequest
from web.models.responses import AccountResponse
from web.services.account_service import AccountService

router = APIRouter(prefix="/accounting/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    company_id: str = Query(..., min_length=1),
    account_type: AccountType | None = Query(default=None),
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """계정과목 목록 (코드 순)"""
    service = AccountService(db, authorizer)
    return await service.list_accounts(user_id, company_id, account_type)


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """계정과목 생성"""
    service = AccountService(db, authorizer)
    return await service.create_account(
        user_id,
        request.company_id,
        request.code,
        request.name,
        request.account_type,
        request.normal_side,
    )


@router.post("/seed", response_model=list[AccountResponse])
async def seed_accounts(
    company_id: str = Query(..., min_length=1),
    user_id: str = Depends(get_current_user),
    db: SQLiteAdapter = Depends(get_db_write),
    authorizer: Authorizer = Depends(get_authorizer),
):
    """회사 기본 계정과목 + 분개 규칙 생성 (이미 있으면 건너뜀)"""
    service = AccountService(db, authorizer)
    return await service.seed_defaults(user_id, company_id)
