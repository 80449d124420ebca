"""
커스텀 예외 클래스 정의
일관된 에러 처리를 위한 예외 계층 구조
"""
from typing import Any, Dict, List, Optional
from fastapi import status

from neis_record.core.constants import ErrorCodes, ErrorMessages


class AppException(Exception):
    """
    기본 애플리케이션 예외
    모든 커스텀 예외의 베이스 클래스
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """예외를 딕셔너리로 변환"""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# ===========================================
# 검증 관련 예외
# ===========================================

class ValidationError(AppException):
    """입력 검증 실패 예외"""

    def __init__(
        self,
        message: str = ErrorMessages.INVALID_INPUT,
        details: Optional[Dict[str, Any]] = None,
        code: str = ErrorCodes.VALIDATION_FAILED,
        status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=details
        )


class InsufficientInputError(ValidationError):
    """
    최소 입력 조건 미충족
    프롬프트를 만들기 전에 발생하며 재시도 대상이 아님
    """

    def __init__(
        self,
        message: str = ErrorMessages.TEACHER_NOTES_REQUIRED,
        missing: Optional[List[str]] = None,
        record_type: Optional[str] = None
    ):
        details: Dict[str, Any] = {"missing": list(missing or [])}
        if record_type:
            details["record_type"] = record_type

        super().__init__(
            message=message,
            details=details,
            code=ErrorCodes.INSUFFICIENT_INPUT,
            status_code=status.HTTP_400_BAD_REQUEST
        )


class ApiKeyError(AppException):
    """생성 API 키 누락/형식 오류"""

    def __init__(self, missing: bool = True):
        super().__init__(
            code=ErrorCodes.API_KEY_MISSING if missing else ErrorCodes.API_KEY_INVALID,
            message=ErrorMessages.API_KEY_MISSING if missing else ErrorMessages.API_KEY_INVALID,
            status_code=status.HTTP_400_BAD_REQUEST
        )


# ===========================================
# 리소스 관련 예외
# ===========================================

class NotFoundError(AppException):
    """리소스를 찾을 수 없음"""

    def __init__(
        self,
        resource: str,
        resource_id: Any,
        message: Optional[str] = None
    ):
        msg = message or f"{resource} {resource_id}을(를) 찾을 수 없습니다."
        super().__init__(
            code=f"{resource.upper()}_NOT_FOUND",
            message=msg,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": str(resource_id)}
        )


class KeywordNotFoundError(NotFoundError):
    """관찰 키워드를 찾을 수 없음"""

    def __init__(self, keyword_id: Any):
        super().__init__(
            resource="Keyword",
            resource_id=keyword_id,
            message=ErrorMessages.KEYWORD_NOT_FOUND
        )


class CatalogIntegrityError(AppException):
    """키워드 카탈로그 데이터 정합성 오류 (로드 시점에 검출)"""

    def __init__(self, problems: List[str]):
        super().__init__(
            code=ErrorCodes.CATALOG_INTEGRITY,
            message="관찰 키워드 카탈로그 데이터가 올바르지 않습니다.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"problems": problems}
        )


# ===========================================
# 외부 서비스 관련 예외
# ===========================================

class ExternalServiceError(AppException):
    """외부 서비스 호출 실패"""

    def __init__(
        self,
        service: str,
        message: str,
        original_error: Optional[Exception] = None,
        status_code: int = status.HTTP_502_BAD_GATEWAY
    ):
        msg = f"{service} 서비스 오류: {message}"
        details = {"service": service}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            code=ErrorCodes.EXTERNAL_SERVICE_ERROR,
            message=msg,
            status_code=status_code,
            details=details
        )


class LLMAPIError(ExternalServiceError):
    """LLM API 호출 실패"""

    def __init__(
        self,
        provider: str,
        message: str = "LLM API 요청에 실패했습니다.",
        original_error: Optional[Exception] = None,
        status_code: int = status.HTTP_502_BAD_GATEWAY
    ):
        super().__init__(
            service=f"LLM ({provider})",
            message=message,
            original_error=original_error,
            status_code=status_code
        )


class UpstreamError(LLMAPIError):
    """
    생성 모델 호출 실패 (HTTP 비정상 응답, 네트워크 오류, 타임아웃)

    upstream_status: 모델 API가 돌려준 HTTP 상태 (네트워크/타임아웃이면 None)
    """

    def __init__(
        self,
        upstream_status: Optional[int],
        detail: str,
        provider: str = "gemini",
        message: str = ErrorMessages.GENERATION_FAILED,
        original_error: Optional[Exception] = None,
        timeout: bool = False
    ):
        super().__init__(
            provider=provider,
            message=message,
            original_error=original_error,
            status_code=status.HTTP_504_GATEWAY_TIMEOUT if timeout else status.HTTP_502_BAD_GATEWAY
        )
        self.code = ErrorCodes.UPSTREAM_ERROR
        self.upstream_status = upstream_status
        self.detail = detail
        self.details["upstream_status"] = upstream_status
        self.details["detail"] = detail


class MalformedResponseError(LLMAPIError):
    """생성 모델 응답에 기대한 텍스트가 없음"""

    def __init__(self, detail: str, provider: str = "gemini"):
        super().__init__(
            provider=provider,
            message=ErrorMessages.MALFORMED_RESPONSE
        )
        self.code = ErrorCodes.MALFORMED_RESPONSE
        self.detail = detail
        self.details["detail"] = detail
