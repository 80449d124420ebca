"""
Core 모듈
설정, 상수, 예외 등 핵심 컴포넌트
"""
from neis_record.core.settings import settings, get_settings
from neis_record.core.constants import (
    RecordType,
    AchievementLevels,
    ErrorCodes,
    ErrorMessages,
    HTTPHeaders,
    Timeouts,
    ExportFormat
)
from neis_record.core.exceptions import (
    AppException,
    ValidationError,
    InsufficientInputError,
    ApiKeyError,
    NotFoundError,
    KeywordNotFoundError,
    CatalogIntegrityError,
    ExternalServiceError,
    LLMAPIError,
    UpstreamError,
    MalformedResponseError
)

__all__ = [
    # Settings
    "settings",
    "get_settings",

    # Constants
    "RecordType",
    "AchievementLevels",
    "ErrorCodes",
    "ErrorMessages",
    "HTTPHeaders",
    "Timeouts",
    "ExportFormat",

    # Exceptions
    "AppException",
    "ValidationError",
    "InsufficientInputError",
    "ApiKeyError",
    "NotFoundError",
    "KeywordNotFoundError",
    "CatalogIntegrityError",
    "ExternalServiceError",
    "LLMAPIError",
    "UpstreamError",
    "MalformedResponseError",
]
