"""
전역 에러 핸들러
모든 예외를 실패 응답 형식 {success: false, code, error, details?, trace_id} 으로 변환
"""
import logging
import traceback
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from neis_record.core.constants import ErrorCodes, ErrorMessages
from neis_record.core.exceptions import AppException
from neis_record.core.settings import settings

logger = logging.getLogger(__name__)


def error_body(
    code: str,
    message: str,
    trace_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    content: Dict[str, Any] = {
        "success": False,
        "code": code,
        "error": message,
    }
    if details:
        content["details"] = details
    if trace_id:
        content["trace_id"] = trace_id
    return content


def _public_details(exc: AppException) -> Dict[str, Any]:
    # 원본 예외 문자열은 개발 환경에서만 노출
    details = dict(exc.details)
    if not settings.DEBUG:
        details.pop("original_error", None)
    return details


def _validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    errors = []
    for error in exc.errors():
        errors.append({
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })
    return errors


def setup_exception_handlers(app: FastAPI) -> None:
    """
    애플리케이션에 전역 예외 핸들러 등록

    Args:
        app: FastAPI 애플리케이션 인스턴스
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        trace_id = getattr(request.state, "trace_id", None)

        # 로깅 (4xx는 warning, 5xx는 error)
        log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(
            log_level,
            exc.code,
            extra={
                "trace_id": trace_id,
                "status_code": exc.status_code,
                "details": exc.details,
                "path": str(request.url.path),
                "method": request.method,
            }
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message, trace_id, _public_details(exc)),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """요청 본문 검증 실패 → 422 + errors 목록"""
        trace_id = getattr(request.state, "trace_id", None)
        errors = _validation_errors(exc)

        logger.warning(
            "validation_error",
            extra={
                "trace_id": trace_id,
                "path": str(request.url.path),
                "errors": errors,
            }
        )

        content = error_body(ErrorCodes.VALIDATION_FAILED, ErrorMessages.INVALID_INPUT, trace_id)
        content["errors"] = errors
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        trace_id = getattr(request.state, "trace_id", None)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(f"HTTP_{exc.status_code}", str(exc.detail), trace_id),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        예상치 못한 일반 예외 처리
        모든 처리되지 않은 예외를 잡아서 안전하게 응답
        """
        trace_id = getattr(request.state, "trace_id", None)

        logger.error(
            "unhandled_exception",
            extra={
                "trace_id": trace_id,
                "error_type": type(exc).__name__,
                "path": str(request.url.path),
                "method": request.method,
            },
            exc_info=True
        )

        details = None
        message = ErrorMessages.INTERNAL_ERROR
        # 개발 환경에서는 상세 정보 표시
        if settings.DEBUG:
            message = f"{type(exc).__name__}: {exc}"
            details = {"stack_trace": traceback.format_exc()}

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(ErrorCodes.INTERNAL_ERROR, message, trace_id, details),
        )
