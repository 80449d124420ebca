# neis_record/services/prompt_composer.py
"""
생기부 프롬프트 조립기

GenerationRequest → 모델 지시문 문자열. 입출력 없는 순수 함수이며
같은 입력이면 항상 같은 문자열을 만든다. 비어 있는 섹션은 제목까지 생략한다.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from neis_record.core.constants import AchievementLevels, RecordType
from neis_record.prompts import record_templates as T
from neis_record.prompts.neis_rules import DEFAULT_NEIS_RULES, NeisRules
from neis_record.schemas.records import GenerationRequest, SurveyAnswerSet

logger = logging.getLogger(__name__)

POSITIVE_CHOICES = ("매우 그렇다", "그렇다", "잘 할 수 있다", "좋다")
MOTIVATION_KEYWORDS = ("재미있", "좋아", "열심히", "노력", "관심")


class SurveyAnalysis(BaseModel):
    achievement_level: str
    positive_ratio: float
    motivation_level: str


def analyze_survey_response(survey: Optional[SurveyAnswerSet]) -> Optional[SurveyAnalysis]:
    """
    객관식 긍정 응답 비율로 성취수준을 추정하고, 주관식 응답의 키워드로 학습 동기를 추정
    객관식 응답이 없으면 None
    """
    if survey is None or not survey.multiple_choice:
        return None

    answers = [(a.answer or "").strip() for a in survey.multiple_choice]
    positive = sum(1 for a in answers if a in POSITIVE_CHOICES)
    ratio = positive / len(answers)

    if ratio >= 0.8:
        level = AchievementLevels.EXCELLENT
    elif ratio >= 0.6:
        level = AchievementLevels.GOOD
    elif ratio >= 0.4:
        level = AchievementLevels.SATISFACTORY
    else:
        level = AchievementLevels.NEEDS_IMPROVEMENT

    motivated = any(
        k in (a.answer or "") for a in survey.short_answer for k in MOTIVATION_KEYWORDS
    )
    return SurveyAnalysis(
        achievement_level=level,
        positive_ratio=round(ratio, 2),
        motivation_level="high" if motivated else "medium",
    )


def _section(title: str, lines: List[str]) -> Optional[str]:
    body = [ln for ln in lines if ln]
    if not body:
        return None
    return f"[{title}]\n" + "\n".join(body)


class PromptComposer:
    def __init__(self, rules: NeisRules = DEFAULT_NEIS_RULES):
        self.rules = rules
        # 기록 유형별 분기는 이 표 한 곳에서만
        self._renderers: Dict[RecordType, Callable[[GenerationRequest], List[Optional[str]]]] = {
            RecordType.SUBJECT_PROGRESS: self._subject_sections,
            RecordType.CREATIVE_ACTIVITY: self._subject_sections,
            RecordType.BEHAVIOR_SUMMARY: self._behavior_sections,
        }

    def compose(self, request: GenerationRequest) -> str:
        sections = self._renderers[request.record_type](request)
        prompt = "\n\n".join(s for s in sections if s)
        logger.debug(
            "prompt_composed",
            extra={"record_type": request.record_type.value, "prompt_chars": len(prompt)},
        )
        return prompt

    # ------------------------------------------------------------------
    # 공통 섹션
    # ------------------------------------------------------------------
    def _rules_section(self, rules: List[str]) -> str:
        lines = [r.format(max_length=self.rules.max_length) for r in rules]
        lines.append(T.ENDING_RULE.format(endings=", ".join(self.rules.valid_endings)))
        lines.append(T.PROHIBITED_RULE.format(words="', '".join(self.rules.prohibited_words)))
        return _section("필수 규칙", [f"{i}. {line}" for i, line in enumerate(lines, 1)])

    def _survey_section(self, survey: Optional[SurveyAnswerSet], with_core_values: bool = False) -> Optional[str]:
        if survey is None:
            return None
        blocks = []
        for n, answer in enumerate(survey.multiple_choice + survey.short_answer, 1):
            lines = [f"Q{n}. {answer.question}"]
            if with_core_values and answer.core_value:
                label = self.rules.core_value_label(answer.core_value) or answer.core_value
                lines.append(f"[{label} 관련]")
            lines.append(f"A: {answer.answer or T.NO_ANSWER}")
            blocks.append("\n".join(lines))
        if not blocks:
            return None
        return "[학생 자기평가 응답]\n" + "\n\n".join(blocks)

    def _observation_sections(self, request: GenerationRequest) -> List[Optional[str]]:
        return [
            _section("관찰 기록 요약", list(request.observation_summary)),
            _section("관찰 기반 서술 문장", [f"- {c}" for c in request.observation_clauses]),
            _section("관찰 메모", [f"- {n}" for n in request.observation_notes]),
            _section("교사 관찰 내용", [request.teacher_notes]),
            _section("추가 맥락", [request.additional_context]),
        ]

    def _example_section(self, record_type: RecordType) -> str:
        return _section("작성 예시", [self.rules.format_for(record_type).example])

    # ------------------------------------------------------------------
    # 교과학습발달상황 / 창의적 체험활동
    # ------------------------------------------------------------------
    def _subject_sections(self, request: GenerationRequest) -> List[Optional[str]]:
        record_type = request.record_type
        is_subject = record_type is RecordType.SUBJECT_PROGRESS
        fmt = self.rules.format_for(record_type)

        info = _section("교과 정보" if is_subject else "기본 정보", [
            f"- 작성 항목: {record_type.value} ({fmt.description})",
            f"- 학급: {request.class_name}" if request.class_name else "",
            f"- 과목: {request.subject}" if request.subject else "",
            f"- 학년: {request.grade}" if request.grade else "",
            f"- 학기: {request.semester}" if request.semester else "",
            f"- 단원: {request.unit}" if request.unit else "",
        ])

        standards = _section("성취기준", [
            f"- {std.code}: {std.content}" if std.code else f"- {std.content}"
            for std in request.achievement_standards
        ])

        criteria = None
        if request.evaluation_criteria is not None:
            lines = []
            for field, label in T.CRITERIA_LABELS:
                level = getattr(request.evaluation_criteria, field)
                if level and level.description.strip():
                    lines.append(f"- {label}: {level.description.strip()}")
            criteria = _section("평가기준", lines)

        sections: List[Optional[str]] = [
            T.SUBJECT_OPENING.format(record_type=record_type.value),
            self._rules_section(T.SUBJECT_RULES),
            info,
            standards,
            criteria,
            self._results_section(request),
        ]
        if is_subject:
            sections.append(self._strategy_section(request))
            sections.append(self._subject_elements_section(request.subject))
        sections.append(self._survey_section(request.survey))
        sections.extend(self._observation_sections(request))
        sections.append(T.SUBJECT_GUIDANCE if is_subject else T.CREATIVE_GUIDANCE)
        sections.append(self._example_section(record_type))
        sections.append(T.SUBJECT_CLOSING.format(record_type=record_type.value))
        return sections

    def _results_section(self, request: GenerationRequest) -> Optional[str]:
        lines = []
        for result_label, title, default in T.RESULT_GROUPS:
            matched = [r for r in request.evaluation_results if r.result.strip() == result_label]
            if matched:
                items = ", ".join(f"{r.evaluation_name}({r.result_criteria or default})" for r in matched)
                lines.append(f"{title}: {items}")
        return _section("평가 결과 분석", lines)

    def _strategy_section(self, request: GenerationRequest) -> Optional[str]:
        analysis = analyze_survey_response(request.survey)
        if analysis is None:
            return None
        strategy = T.ACHIEVEMENT_STRATEGIES[analysis.achievement_level]
        motivation = "높음" if analysis.motivation_level == "high" else "보통"
        return _section(f"서술 전략 (자기평가 기준 {analysis.achievement_level} 수준)", [
            f"- 중점사항: {strategy['focus']}",
            f"- 어조: {strategy['tone']}",
            f"- 구조: {strategy['structure']}",
            f"- 비율: {strategy['ratio']}",
            f"- 학습 동기: {motivation}",
        ])

    @staticmethod
    def _subject_elements_section(subject: str) -> Optional[str]:
        lines = []
        for name in [s.strip() for s in subject.split(",")]:
            elements = T.SUBJECT_SPECIFIC_ELEMENTS.get(name)
            if not elements:
                continue
            lines.append(f"- {name} 핵심역량: {', '.join(elements['competencies'])}")
            lines.append(f"- {name} 관찰포인트: {', '.join(elements['observation_points'])}")
            lines.append(f"- {name} 연결어 예시: {', '.join(elements['connectives'])}")
        return _section("교과별 특화 요소", lines)

    # ------------------------------------------------------------------
    # 행동특성 및 종합의견
    # ------------------------------------------------------------------
    def _behavior_sections(self, request: GenerationRequest) -> List[Optional[str]]:
        record_type = request.record_type
        context_lines = []
        ctx = request.behavior_context
        if ctx is not None:
            context_lines += [
                f"- 주요 관찰 상황: {ctx.observation_context}" if ctx.observation_context.strip() else "",
                f"- 주요 학급 활동: {ctx.class_activities}" if ctx.class_activities.strip() else "",
                f"- 특별한 사건/프로그램: {ctx.special_events}" if ctx.special_events.strip() else "",
            ]
        if request.core_values:
            context_lines.append(f"- 선택된 핵심 인성 요소: {', '.join(request.core_values)}")

        sections: List[Optional[str]] = [
            T.BEHAVIOR_OPENING,
            self._rules_section(T.BEHAVIOR_RULES),
            _section("핵심 인성 요소", [f"- {label}" for label in self.rules.core_value_labels]),
            _section("관찰 맥락", context_lines),
            self._survey_section(request.survey, with_core_values=True),
        ]
        sections.extend(self._observation_sections(request))
        sections.append(T.BEHAVIOR_GUIDANCE)
        sections.append(self._example_section(record_type))
        sections.append(T.BEHAVIOR_CLOSING)
        return sections
