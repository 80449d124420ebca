# neis_record/services/compliance_validator.py
"""
NEIS 규정 검증기
생성된 텍스트 1건을 규칙 순서대로 모두 검사하고 (중간에 멈추지 않음) ComplianceResult 로 돌려준다.

1. 학생 이름 포함 여부
2. 글자 수 (유니코드 코드포인트 기준)
3. 명사형 종결 (위반 문장이 여러 개여도 위반 1건, 해당 문장은 segments 로 첨부)
4. 핵심 인성 요소 괄호 표기 (행동특성 및 종합의견만)

금지어는 위반이 아닌 경고로만 보고한다.
"""
import logging
from enum import Enum
from typing import List, Optional

from neis_record.core.constants import RecordType
from neis_record.prompts.neis_rules import DEFAULT_NEIS_RULES, NeisRules
from neis_record.schemas.records import ComplianceResult, ViolationDetail

logger = logging.getLogger(__name__)


class ViolationKind(str, Enum):
    NAME_INCLUDED = "NAME_INCLUDED"
    LENGTH_EXCEEDED = "LENGTH_EXCEEDED"
    INVALID_ENDING = "INVALID_ENDING"
    MISSING_CORE_VALUE = "MISSING_CORE_VALUE"


class ComplianceValidator:
    def __init__(self, rules: NeisRules = DEFAULT_NEIS_RULES):
        self.rules = rules

    def check(
        self,
        text: str,
        student_name: Optional[str] = None,
        record_type: RecordType = RecordType.SUBJECT_PROGRESS,
    ) -> ComplianceResult:
        details: List[ViolationDetail] = []
        count = len(text)

        name = (student_name or "").strip()
        if name and name in text:
            details.append(ViolationDetail(
                kind=ViolationKind.NAME_INCLUDED.value,
                message="학생 이름이 포함되어 있습니다",
            ))

        if count > self.rules.max_length:
            details.append(ViolationDetail(
                kind=ViolationKind.LENGTH_EXCEEDED.value,
                message=f"{self.rules.max_length}자를 초과했습니다 (현재: {count}자)",
            ))

        bad_segments = [s for s in self.rules.split_sentences(text) if not self.rules.has_valid_ending(s)]
        if bad_segments:
            details.append(ViolationDetail(
                kind=ViolationKind.INVALID_ENDING.value,
                message="명사형 종결어미를 사용하지 않은 문장이 있습니다",
                segments=bad_segments,
            ))

        if record_type.requires_core_value and not self.rules.core_value_pattern.search(text):
            details.append(ViolationDetail(
                kind=ViolationKind.MISSING_CORE_VALUE.value,
                message="핵심 인성 요소가 괄호로 표시되지 않았습니다 (예: (배려))",
            ))

        warnings = [f"금지어 사용: {w}" for w in self.rules.prohibited_words if w in text]

        result = ComplianceResult(
            is_valid=not details,
            character_count=count,
            max_characters=self.rules.max_length,
            violations=tuple(d.kind for d in details),
            details=tuple(details),
            warnings=tuple(warnings),
        )
        if not result.is_valid:
            logger.info(
                "compliance_failed",
                extra={"record_type": record_type.value, "violations": list(result.violations), "chars": count},
            )
        return result
