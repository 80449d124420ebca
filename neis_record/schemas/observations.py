# neis_record/schemas/observations.py
"""
관찰 기록 스키마
관찰 세션 저장 payload 는 snake_case 그대로 받는다 (students / students_data / students_observations 모두 허용).
"""
from datetime import date as date_type, datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class SelectedKeyword(BaseModel):
    """관찰 세션에서 학생에게 체크한 키워드"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    keyword_id: str = Field(min_length=1, validation_alias=AliasChoices("keyword_id", "keywordId", "id"))
    category_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("category_id", "categoryId"))
    intensity: Literal[1, 2, 3] = 2
    context: Optional[str] = None
    timestamp: Optional[datetime] = None

    @field_validator("intensity", mode="before")
    @classmethod
    def _default_intensity(cls, v: Any):
        # 저장 시 강도 누락은 보통(2)으로 본다
        return 2 if v in (None, "") else v

    @field_validator("timestamp")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class StudentObservation(BaseModel):
    """한 세션 안의 학생 한 명의 관찰 기록"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    student_name: str = Field(min_length=1, validation_alias=AliasChoices("student_name", "studentName"))
    student_number: Optional[int] = Field(default=None, validation_alias=AliasChoices("student_number", "studentNumber"))
    selected_keywords: List[SelectedKeyword] = Field(
        default_factory=list,
        validation_alias=AliasChoices("selected_keywords", "selectedKeywords"),
    )
    additional_notes: Optional[str] = Field(default=None, validation_alias=AliasChoices("additional_notes", "additionalNotes"))
    overall_rating: Optional[int] = Field(default=None, ge=1, le=5, validation_alias=AliasChoices("overall_rating", "overallRating"))

    @field_validator("selected_keywords", mode="before")
    @classmethod
    def _coerce_plain_ids(cls, v: Any):
        # 실시간 관찰 화면은 키워드 id 문자열 목록만 보내기도 함
        if isinstance(v, list):
            return [{"keyword_id": item} if isinstance(item, str) else item for item in v]
        return v


class ObservationSession(BaseModel):
    """관찰 세션 (저장 후 불변)"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Optional[str] = None
    class_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("class_id", "classId"))
    date: Optional[date_type] = Field(default=None, validation_alias=AliasChoices("date", "session_date", "sessionDate"))
    subject: Optional[str] = None
    lesson_topic: Optional[str] = Field(default=None, validation_alias=AliasChoices("lesson_topic", "lessonTopic"))
    students: List[StudentObservation] = Field(
        default_factory=list,
        validation_alias=AliasChoices("students", "students_data", "students_observations"),
    )

    @field_validator("date", mode="before")
    @classmethod
    def _date_only(cls, v: Any):
        # "2025-03-14T09:00:00Z" 같은 타임스탬프도 날짜만 취함
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        if isinstance(v, datetime):
            return v.date()
        return v

    def for_student(self, student_name: str) -> List[StudentObservation]:
        return [s for s in self.students if s.student_name == student_name]


class ObservationSessionPayload(BaseModel):
    """관찰 세션 저장 요청 (외부 저장소로 넘기기 전 검증)"""
    model_config = ConfigDict(populate_by_name=True)

    class_id: str = Field(min_length=1, validation_alias=AliasChoices("class_id", "classId"))
    session_date: date_type = Field(validation_alias=AliasChoices("session_date", "sessionDate", "date"))
    subject: Optional[str] = None
    lesson_topic: Optional[str] = Field(default=None, validation_alias=AliasChoices("lesson_topic", "lessonTopic"))
    students_observations: List[StudentObservation] = Field(
        validation_alias=AliasChoices("students_observations", "studentsObservations", "students"),
    )

    @model_validator(mode="after")
    def _at_least_one_student(self):
        if not self.students_observations:
            raise ValueError("students_observations must contain at least one student")
        return self

    def to_session(self) -> ObservationSession:
        return ObservationSession(
            class_id=self.class_id,
            date=self.session_date,
            subject=self.subject,
            lesson_topic=self.lesson_topic,
            students=self.students_observations,
        )

    def to_daily_observations(self) -> List[Dict[str, Any]]:
        """학생별 선택 키워드를 일상 관찰 행으로 펼침 (강도 기본값 2)"""
        rows: List[Dict[str, Any]] = []
        for student in self.students_observations:
            for kw in student.selected_keywords:
                rows.append({
                    "class_id": self.class_id,
                    "student_name": student.student_name,
                    "observation_date": self.session_date.isoformat(),
                    "category_id": kw.category_id,
                    "keyword_id": kw.keyword_id,
                    "intensity": kw.intensity or 2,
                    "context": kw.context,
                    "subject": self.subject,
                })
        return rows


class AggregatedObservation(BaseModel):
    """학생 한 명의 관찰 키워드를 문장 조각으로 변환한 결과"""
    student_name: str
    clauses: List[str] = Field(default_factory=list)
    combination_sentence: Optional[str] = None
    consumed_keyword_ids: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    summary_lines: List[str] = Field(default_factory=list)


class CategoryAnalysis(BaseModel):
    category_id: str
    category_name: str
    total_count: int = 0
    positive_ratio: float = 0.0
    strengths: List[str] = Field(default_factory=list)
    improvement_areas: List[str] = Field(default_factory=list)


class ObservationAnalysis(BaseModel):
    """관찰 누적 분석 (영역별 집계 + 자주 선택된 키워드)"""
    student_name: str
    period_start: Optional[date_type] = None
    period_end: Optional[date_type] = None
    total_selections: int = 0
    categories: List[CategoryAnalysis] = Field(default_factory=list)
    most_frequent_keywords: List[str] = Field(default_factory=list)
    recommended_focus: List[str] = Field(default_factory=list)
