# neis_record/services/input_assembler.py
"""
생성 입력 조립기
평가계획, 자기평가 설문, 교사 메모, 관찰 세션을 하나의 GenerationRequest 로 합친다.

선택 입력이 비어 있어도 실패하지 않으며, 최소 입력 조건을 어긴 경우에만
InsufficientInputError 를 던진다 (네트워크 호출 전).
"""
import logging
from typing import List, Optional, Sequence, Tuple

from neis_record.core.constants import ErrorMessages
from neis_record.core.exceptions import InsufficientInputError
from neis_record.prompts.neis_rules import DEFAULT_NEIS_RULES, NeisRules
from neis_record.schemas.observations import ObservationSession
from neis_record.schemas.records import (
    BehaviorCriteria,
    EvaluationContext,
    EvaluationCriteria,
    GenerationRequest,
    RecordGenerationRequest,
    SurveyAnswer,
    SurveyAnswerSet,
)
from neis_record.services.observation_aggregator import ObservationAggregator

logger = logging.getLogger(__name__)

ALL_SUBJECTS = "전과목"
NAME_PLACEHOLDER = "해당 학생"


def resolve_subject(
    plans: Sequence[EvaluationContext],
    survey: Optional[SurveyAnswerSet],
    manual_subject: Optional[str],
) -> str:
    """
    과목 결정 우선순위 (앞에서부터 비어 있지 않은 첫 값)
    평가계획 과목(여러 개면 ", " 연결) > 설문 자체 과목 > 수동 선택 과목 > "전과목"
    """
    plan_subjects: List[str] = []
    for plan in plans:
        s = (plan.subject or "").strip()
        if s and s not in plan_subjects:
            plan_subjects.append(s)
    if plan_subjects:
        return ", ".join(plan_subjects)

    if survey and survey.subject and survey.subject.strip():
        return survey.subject.strip()

    if manual_subject and manual_subject.strip():
        return manual_subject.strip()

    return ALL_SUBJECTS


class InputAssembler:
    def __init__(
        self,
        aggregator: Optional[ObservationAggregator] = None,
        rules: NeisRules = DEFAULT_NEIS_RULES,
    ):
        self.aggregator = aggregator or ObservationAggregator()
        self.rules = rules

    def assemble(self, body: RecordGenerationRequest) -> GenerationRequest:
        record_type = body.record_type
        name = body.student_name.strip()

        sessions = body.observation_records if body.use_observation_records else []
        clauses, summary, notes, warnings, selection_count = self._collect_observations(name, sessions)

        teacher_notes = body.teacher_notes.strip()
        if not teacher_notes and selection_count == 0:
            raise InsufficientInputError(
                message=ErrorMessages.TEACHER_NOTES_REQUIRED,
                missing=["teacherNotes", "observationRecords"],
                record_type=record_type.value,
            )

        core_values: Tuple[str, ...] = ()
        if record_type.requires_core_value:
            core_values = self._resolve_core_values(body.behavior_criteria, body.student_response)
            if not core_values:
                raise InsufficientInputError(
                    message=ErrorMessages.CORE_VALUE_REQUIRED,
                    missing=["behaviorCriteria.selectedValues"],
                    record_type=record_type.value,
                )

        plans = body.evaluation_plans
        primary_plan = plans[0] if plans else None

        if record_type.requires_subject:
            subject = resolve_subject(plans, body.student_response, body.subject)
        else:
            subject = (body.subject or "").strip()

        # 프롬프트에 출력되는 자유 입력은 모두 이름을 가린다
        redact = _Redactor(name)
        criteria = next(
            (p.evaluation_criteria for p in plans if p.evaluation_criteria and not p.evaluation_criteria.is_empty()),
            None,
        )
        request = GenerationRequest(
            record_type=record_type,
            student_name=name,
            class_name=redact(body.class_name.strip()),
            subject=redact(subject),
            grade=redact(primary_plan.grade) if primary_plan else None,
            semester=redact(primary_plan.semester) if primary_plan else None,
            unit=redact(primary_plan.unit) if primary_plan else None,
            achievement_standards=tuple(
                std.model_copy(update={"code": redact(std.code), "content": redact(std.content)})
                for plan in plans
                for std in plan.achievement_standards
            ),
            evaluation_criteria=self._redact_criteria(criteria, redact),
            evaluation_results=tuple(
                r.model_copy(update={
                    "evaluation_name": redact(r.evaluation_name),
                    "result_criteria": redact(r.result_criteria) if r.result_criteria else r.result_criteria,
                })
                for r in body.evaluation_results
            ),
            survey=self._redact_survey(body.student_response, redact),
            teacher_notes=redact(teacher_notes),
            additional_context=redact(body.additional_context.strip()),
            observation_clauses=tuple(redact(c) for c in clauses),
            observation_summary=tuple(redact(s) for s in summary),
            observation_notes=tuple(redact(n) for n in notes),
            observation_warnings=tuple(warnings),
            behavior_context=self._redact_behavior(body.behavior_criteria, redact),
            core_values=core_values,
        )

        logger.debug(
            "generation_input_assembled",
            extra={
                "record_type": record_type.value,
                "sessions": len(sessions),
                "selections": selection_count,
                "clauses": len(clauses),
                "warnings": len(warnings),
            },
        )
        return request

    # ------------------------------------------------------------------
    # 관찰 기록
    # ------------------------------------------------------------------
    def _collect_observations(
        self,
        student_name: str,
        sessions: Sequence[ObservationSession],
    ) -> Tuple[List[str], List[str], List[str], List[str], int]:
        """세션 날짜순으로 학생 본인의 관찰만 모아 문장 조각/요약/메모/경고를 반환"""
        clauses: List[str] = []
        summary: List[str] = []
        notes: List[str] = []
        warnings: List[str] = []
        selection_count = 0

        ordered = sorted(
            enumerate(sessions),
            key=lambda item: (item[1].date is None, item[1].date.isoformat() if item[1].date else "", item[0]),
        )
        for _, session in ordered:
            for obs in session.for_student(student_name):
                selection_count += len(obs.selected_keywords)
                aggregated = self.aggregator.aggregate(obs)
                _extend_unique(clauses, aggregated.clauses)
                _extend_unique(summary, aggregated.summary_lines)
                _extend_unique(warnings, aggregated.warnings)
                if obs.additional_notes and obs.additional_notes.strip():
                    _extend_unique(notes, [obs.additional_notes.strip()])

        return clauses, summary, notes, warnings, selection_count

    # ------------------------------------------------------------------
    # 핵심 인성 요소
    # ------------------------------------------------------------------
    def _resolve_core_values(
        self,
        criteria: Optional[BehaviorCriteria],
        survey: Optional[SurveyAnswerSet],
    ) -> Tuple[str, ...]:
        raw: List[str] = []
        if criteria:
            raw.extend(criteria.selected_values)
        if survey:
            raw.extend(survey.tagged_core_values())

        labels: List[str] = []
        for value in raw:
            label = self.rules.core_value_label(value)
            if label and label not in labels:
                labels.append(label)
        return tuple(labels)

    # ------------------------------------------------------------------
    # 이름 가림
    # ------------------------------------------------------------------
    @staticmethod
    def _redact_survey(survey: Optional[SurveyAnswerSet], redact: "_Redactor") -> Optional[SurveyAnswerSet]:
        if survey is None or survey.is_empty():
            return None

        def _answers(items: List[SurveyAnswer]) -> List[SurveyAnswer]:
            return [
                SurveyAnswer(
                    question=redact(a.question),
                    answer=redact(a.answer) if a.answer else a.answer,
                    core_value=a.core_value,
                )
                for a in items
            ]

        return SurveyAnswerSet(
            subject=survey.subject,
            multiple_choice=_answers(survey.multiple_choice),
            short_answer=_answers(survey.short_answer),
        )

    @staticmethod
    def _redact_criteria(
        criteria: Optional[EvaluationCriteria], redact: "_Redactor"
    ) -> Optional[EvaluationCriteria]:
        if criteria is None:
            return None
        update = {}
        for field in ("excellent", "good", "satisfactory", "needs_improvement"):
            level = getattr(criteria, field)
            if level is not None:
                update[field] = level.model_copy(update={"description": redact(level.description)})
        return criteria.model_copy(update=update)

    @staticmethod
    def _redact_behavior(criteria: Optional[BehaviorCriteria], redact: "_Redactor") -> Optional[BehaviorCriteria]:
        if criteria is None:
            return None
        return BehaviorCriteria(
            observation_context=redact(criteria.observation_context),
            class_activities=redact(criteria.class_activities),
            special_events=redact(criteria.special_events),
            selected_values=list(criteria.selected_values),
        )


class _Redactor:
    """자유 입력 텍스트 속 학생 이름을 일반 호칭으로 치환"""

    def __init__(self, name: str):
        self.name = name

    def __call__(self, text: Optional[str]) -> Optional[str]:
        if not self.name or not text:
            return text
        return text.replace(self.name, NAME_PLACEHOLDER)


def _extend_unique(target: List[str], items: Sequence[str]) -> None:
    for item in items:
        if item not in target:
            target.append(item)
