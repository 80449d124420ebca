# neis_record/schemas/records.py
"""
생기부 생성 요청/응답 스키마
외부 JSON 은 camelCase(studentName), 평가계획처럼 DB 에서 그대로 넘어오는 값은 snake_case 도 허용.
"""
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from neis_record.core.constants import RecordType
from neis_record.schemas.observations import ObservationSession


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _coerce_record_type(v: Any):
    if isinstance(v, str):
        # "행동특성및종합의견" 같은 변형 표기 → ValueError 면 pydantic 이 422 로 변환
        return RecordType(v)
    return v


# ===========================================
# 평가계획 / 설문
# ===========================================

class AchievementStandard(CamelModel):
    code: Optional[str] = None
    content: str

    @model_validator(mode="before")
    @classmethod
    def _coerce_plain(cls, data: Any):
        # 성취기준을 문자열 배열로만 저장한 평가계획도 있음
        if isinstance(data, str):
            return {"content": data}
        return data


class CriterionLevel(CamelModel):
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def _coerce_plain(cls, data: Any):
        if isinstance(data, str):
            return {"description": data}
        return data


class EvaluationCriteria(CamelModel):
    excellent: Optional[CriterionLevel] = None
    good: Optional[CriterionLevel] = None
    satisfactory: Optional[CriterionLevel] = None
    needs_improvement: Optional[CriterionLevel] = None

    def is_empty(self) -> bool:
        return not any(
            level and level.description.strip()
            for level in (self.excellent, self.good, self.satisfactory, self.needs_improvement)
        )


class EvaluationContext(CamelModel):
    """평가계획 (외부에서 주어지며 읽기 전용)"""
    subject: Optional[str] = None
    grade: Optional[str] = None
    semester: Optional[str] = None
    unit: Optional[str] = None
    achievement_standards: List[AchievementStandard] = Field(default_factory=list)
    evaluation_criteria: Optional[EvaluationCriteria] = None
    learning_objectives: List[str] = Field(default_factory=list)

    @field_validator("grade", "semester", mode="before")
    @classmethod
    def _as_text(cls, v: Any):
        return str(v) if isinstance(v, int) else v


class EvaluationResult(CamelModel):
    """교사가 입력한 평가 항목별 결과"""
    evaluation_name: str
    result: str
    result_criteria: Optional[str] = None
    teacher_notes: Optional[str] = None
    evaluation_date: Optional[str] = None


class SurveyAnswer(CamelModel):
    question: str
    answer: Optional[str] = None
    core_value: Optional[str] = None


class SurveyAnswerSet(CamelModel):
    """학생 자기평가 응답 (없어도 생성 가능)"""
    subject: Optional[str] = None
    multiple_choice: List[SurveyAnswer] = Field(default_factory=list)
    short_answer: List[SurveyAnswer] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.multiple_choice and not self.short_answer

    def tagged_core_values(self) -> List[str]:
        return [
            a.core_value for a in (self.multiple_choice + self.short_answer)
            if a.core_value and a.core_value.strip()
        ]


class BehaviorCriteria(CamelModel):
    """행동특성 관찰 맥락"""
    observation_context: str = ""
    class_activities: str = ""
    special_events: str = ""
    selected_values: List[str] = Field(default_factory=list)


# ===========================================
# 생성 요청 (외부 인터페이스)
# ===========================================

class RecordGenerationRequest(CamelModel):
    """단일 학생 생성 요청 본문"""
    student_name: str = Field(min_length=1)
    class_name: str = ""
    record_type: RecordType = RecordType.SUBJECT_PROGRESS
    subject: Optional[str] = None
    teacher_notes: str = ""
    additional_context: str = ""
    evaluation_plans: List[EvaluationContext] = Field(default_factory=list)
    evaluation_results: List[EvaluationResult] = Field(default_factory=list)
    student_response: Optional[SurveyAnswerSet] = None
    observation_records: List[ObservationSession] = Field(default_factory=list)
    use_observation_records: bool = True
    behavior_criteria: Optional[BehaviorCriteria] = None
    api_key: Optional[str] = Field(default=None, repr=False)

    @field_validator("record_type", mode="before")
    @classmethod
    def _normalize_record_type(cls, v: Any):
        return _coerce_record_type(v)


class BatchStudent(CamelModel):
    """일괄 생성 대상 학생 (학생별 자료)"""
    student_name: str = Field(min_length=1)
    teacher_notes: str = ""
    student_response: Optional[SurveyAnswerSet] = None
    evaluation_results: List[EvaluationResult] = Field(default_factory=list)


class BatchGenerationRequest(CamelModel):
    """일괄 생성 요청: 교사 메모/평가계획은 공유, 관찰·설문은 학생별"""
    class_name: str = ""
    record_type: RecordType = RecordType.SUBJECT_PROGRESS
    subject: Optional[str] = None
    teacher_notes: str = ""
    additional_context: str = ""
    evaluation_plans: List[EvaluationContext] = Field(default_factory=list)
    observation_records: List[ObservationSession] = Field(default_factory=list)
    use_observation_records: bool = True
    behavior_criteria: Optional[BehaviorCriteria] = None
    students: List[BatchStudent] = Field(min_length=1)
    api_key: Optional[str] = Field(default=None, repr=False)

    @field_validator("record_type", mode="before")
    @classmethod
    def _normalize_record_type(cls, v: Any):
        return _coerce_record_type(v)

    def for_student(self, student: BatchStudent) -> RecordGenerationRequest:
        notes = "\n".join(n for n in (self.teacher_notes.strip(), student.teacher_notes.strip()) if n)
        return RecordGenerationRequest(
            student_name=student.student_name,
            class_name=self.class_name,
            record_type=self.record_type,
            subject=self.subject,
            teacher_notes=notes,
            additional_context=self.additional_context,
            evaluation_plans=self.evaluation_plans,
            evaluation_results=student.evaluation_results,
            student_response=student.student_response,
            observation_records=self.observation_records,
            use_observation_records=self.use_observation_records,
            behavior_criteria=self.behavior_criteria,
        )


# ===========================================
# 정규화된 생성 컨텍스트 (PromptComposer 입력)
# ===========================================

class GenerationRequest(BaseModel):
    """
    프롬프트 작성에 필요한 모든 입력을 합친 불변 컨텍스트
    student_name 은 검증(이름 포함 여부)에만 쓰이며 프롬프트에 출력되지 않는다.
    """
    model_config = ConfigDict(frozen=True)

    record_type: RecordType
    student_name: str
    class_name: str = ""
    subject: str = ""
    grade: Optional[str] = None
    semester: Optional[str] = None
    unit: Optional[str] = None
    achievement_standards: Tuple[AchievementStandard, ...] = ()
    evaluation_criteria: Optional[EvaluationCriteria] = None
    evaluation_results: Tuple[EvaluationResult, ...] = ()
    survey: Optional[SurveyAnswerSet] = None
    teacher_notes: str = ""
    additional_context: str = ""
    observation_clauses: Tuple[str, ...] = ()
    observation_summary: Tuple[str, ...] = ()
    observation_notes: Tuple[str, ...] = ()
    observation_warnings: Tuple[str, ...] = ()
    behavior_context: Optional[BehaviorCriteria] = None
    core_values: Tuple[str, ...] = ()


# ===========================================
# 검증 / 응답
# ===========================================

class ViolationDetail(BaseModel):
    kind: str
    message: str
    segments: List[str] = Field(default_factory=list)


class ComplianceResult(BaseModel):
    """생성 텍스트 1건의 NEIS 규정 검증 결과 (생성 후 변경하지 않음)"""
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    character_count: int
    max_characters: int
    violations: Tuple[str, ...] = ()
    details: Tuple[ViolationDetail, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def issues(self) -> List[str]:
        return [d.message for d in self.details]

    def to_response(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "characterCount": self.character_count,
            "maxCharacters": self.max_characters,
            "issues": self.issues,
            "violations": list(self.violations),
            "offendingSegments": [s for d in self.details for s in d.segments],
            "warnings": list(self.warnings),
        }


class StudentResult(BaseModel):
    """일괄 생성 결과 1건"""
    student: str
    status: Literal["success", "error"]
    content: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    validation: Optional[ComplianceResult] = None

    def to_response(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"studentName": self.student, "status": self.status, "success": self.status == "success"}
        if self.content is not None:
            data["content"] = self.content
        if self.error is not None:
            data["error"] = self.error
            data["errorCode"] = self.error_code
        if self.validation is not None:
            data["validation"] = self.validation.to_response()
        return data
