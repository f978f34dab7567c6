import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.errors import AggregateFailure, ReportCardError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str, errors=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message), errors=errors, latency_ms=0)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def add_error_handlers(app: FastAPI):
    # ✅ 서비스 도메인 예외 → 코드별 HTTP 상태
    @app.exception_handler(ReportCardError)
    async def report_card_error_handler(request: Request, exc: ReportCardError):
        errors = exc.errors if isinstance(exc, AggregateFailure) else None
        logger.info(f"{request.method} {request.url.path} → {exc.status_code} {exc.code}: {exc.message}")
        return _error_response(exc.status_code, exc.code, exc.message, errors)

    # ✅ 처리되지 않은 예외 → 500
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return _error_response(500, "INTERNAL_ERROR", str(exc))
