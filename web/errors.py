"""
API 예외 처리

도메인 예외(LedgerError)를 {"error_code", "message", "details"} JSON으로 변환.
- 없음 → 404
- 상태 전이/검증 → 400
- 권한 → 403
- 그 외 → 500 (traceback 로깅)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from core.ledger.errors import LedgerError

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "ERR_BAD_REQUEST",
    401: "ERR_UNAUTHORIZED",
    403: "ERR_FORBIDDEN",
    404: "ERR_NOT_FOUND",
    405: "ERR_METHOD_NOT_ALLOWED",
    500: "ERR_INTERNAL",
}


def error_body(error_code: str, message: str, details: dict | None = None) -> dict:
    """표준 에러 응답 본문"""
    return {
        "error_code": error_code,
        "message": message,
        "details": jsonable_encoder(details or {}),
    }


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """도메인 예외 처리"""
    logger.info(
        f"{exc.error_code}: {exc.message}",
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.message, exc.details),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTPException 표준 포맷 변환 (라우트 없음 404 포함)"""
    error_code = HTTP_ERROR_CODES.get(exc.status_code, "ERR_UNKNOWN")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(error_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """요청 검증 실패 (Pydantic) → 400"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "ERR_VALIDATION",
            "Validation error",
            {"errors": exc.errors()},
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외 → 500

    트랜잭션이 롤백되므로 부분 원장 상태는 남지 않음.
    """
    logger.exception(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("ERR_INTERNAL", "An internal server error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """앱에 예외 핸들러 등록"""
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
