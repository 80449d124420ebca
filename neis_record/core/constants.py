"""
상수 정의 모듈
매직 스트링을 상수로 관리하여 유지보수성 향상
"""
from enum import Enum


class RecordType(str, Enum):
    """생기부 기록 유형"""
    SUBJECT_PROGRESS = "교과학습발달상황"
    CREATIVE_ACTIVITY = "창의적 체험활동 누가기록"
    BEHAVIOR_SUMMARY = "행동특성 및 종합의견"

    @classmethod
    def _missing_(cls, value):
        # "행동특성및종합의견", "BehaviorSummary" 같은 표기도 허용
        if not isinstance(value, str):
            return None
        key = value.replace(" ", "").replace("_", "").lower()
        for member in cls:
            if key in (member.value.replace(" ", "").lower(), member.name.replace("_", "").lower()):
                return member
        # 화면에서 쓰는 축약 표기
        if key in ("창의적체험활동", "창체"):
            return cls.CREATIVE_ACTIVITY
        return None

    @property
    def requires_core_value(self) -> bool:
        return self is RecordType.BEHAVIOR_SUMMARY

    @property
    def requires_subject(self) -> bool:
        return self is RecordType.SUBJECT_PROGRESS


class AchievementLevels:
    """성취수준 (평가 결과 표기)"""
    EXCELLENT = "매우잘함"
    GOOD = "잘함"
    SATISFACTORY = "보통"
    NEEDS_IMPROVEMENT = "노력요함"

    ALL = [EXCELLENT, GOOD, SATISFACTORY, NEEDS_IMPROVEMENT]


class ErrorCodes:
    """에러 코드"""
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INSUFFICIENT_INPUT = "INSUFFICIENT_INPUT"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    API_KEY_MISSING = "API_KEY_MISSING"
    API_KEY_INVALID = "API_KEY_INVALID"
    CATALOG_INTEGRITY = "CATALOG_INTEGRITY"
    COMPLIANCE_VIOLATION = "COMPLIANCE_VIOLATION"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorMessages:
    """사용자 친화적 에러 메시지"""
    INVALID_INPUT = "입력값이 올바르지 않습니다."
    TEACHER_NOTES_REQUIRED = "교사 관찰 기록을 입력하거나 관찰 키워드를 선택해주세요."
    CORE_VALUE_REQUIRED = "행동특성 및 종합의견 작성 시 핵심 인성 요소를 하나 이상 선택해주세요."
    API_KEY_MISSING = "API 키가 설정되지 않았습니다. 설정에서 API 키를 등록해주세요."
    API_KEY_INVALID = "API 키 형식이 올바르지 않습니다. Gemini API 키를 확인해주세요."
    GENERATION_FAILED = "AI 생성 중 오류가 발생했습니다. API 키를 확인해주세요."
    GENERATION_TIMEOUT = "AI 응답 시간이 초과되었습니다. 잠시 후 다시 시도하세요."
    MALFORMED_RESPONSE = "AI가 적절한 응답을 생성하지 못했습니다."
    KEYWORD_NOT_FOUND = "요청한 관찰 키워드를 찾을 수 없습니다."
    INTERNAL_ERROR = "서버 오류가 발생했습니다. 관리자에게 문의하세요."


class HTTPHeaders:
    """HTTP 헤더 상수"""
    CONTENT_TYPE = "Content-Type"
    CONTENT_DISPOSITION = "Content-Disposition"
    JSON_CONTENT = "application/json"
    TEXT_CONTENT = "text/plain; charset=utf-8"
    NDJSON_CONTENT = "application/x-ndjson"


class Timeouts:
    """타임아웃 설정 (초)"""
    LLM_API = 30
    LLM_CONNECT = 10


class ExportFormat:
    """일괄 생성 결과 내보내기 형식"""
    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    FILENAME_DATE_FORMAT = "%Y-%m-%d"
    BLOCK_SEPARATOR = "---"
