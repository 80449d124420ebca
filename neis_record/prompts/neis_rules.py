# neis_record/prompts/neis_rules.py
"""
NEIS 생활기록부 작성 규칙
프롬프트 작성(PromptComposer)과 결과 검증(ComplianceValidator)이 같은 규칙 값을 주입받아 사용한다.
"""
import re
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from neis_record.core.constants import RecordType


class RecordFormat(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    example: str


# 핵심 인성 요소 (내부 식별자, 표시 라벨)
CORE_VALUES: Tuple[Tuple[str, str], ...] = (
    ("care", "배려"),
    ("sharing", "나눔"),
    ("cooperation", "협력"),
    ("respect", "타인존중"),
    ("conflict", "갈등관리"),
    ("relationship", "관계지향성"),
    ("rules", "규칙준수"),
    ("learning", "자기주도학습"),
)

VALID_ENDINGS: Tuple[str, ...] = ("함", "임", "됨", "함.", "임.", "됨.", "있음", "있음.", "없음", "없음.")

PROHIBITED_WORDS: Tuple[str, ...] = ("뛰어난", "탁월한", "우수한", "최고의", "완벽한", "훌륭한")

RECORD_FORMATS: Dict[RecordType, RecordFormat] = {
    RecordType.SUBJECT_PROGRESS: RecordFormat(
        description="교과별 성취기준에 따른 학습 발달 상황",
        example="분수의 덧셈과 뺄셈 단원에서 통분의 원리를 정확히 이해하고 다양한 문제 상황에 적용하는 능력이 뛰어남",
    ),
    RecordType.CREATIVE_ACTIVITY: RecordFormat(
        description="자율·동아리·봉사·진로활동 관련 누가 기록",
        example="학급 환경미화 활동에 적극적으로 참여하며 창의적인 아이디어를 제시함",
    ),
    RecordType.BEHAVIOR_SUMMARY: RecordFormat(
        description="인성, 태도, 학습 습관 등 종합적인 관찰 내용",
        example=(
            "(배려) 특수반 친구를 도와주고 스스럼없이 친구로 지내면서 학습활동을 도와주었으며, "
            "학급 친구들의 고민을 해결해 주는 등 또래 상담자로 주 2회 활동함"
        ),
    ),
}


class NeisRules(BaseModel):
    """불변 규칙 값 객체"""
    model_config = ConfigDict(frozen=True)

    max_length: int = Field(default=500, gt=0)
    valid_endings: Tuple[str, ...] = VALID_ENDINGS
    sentence_delimiters: str = ".;"
    core_values: Tuple[Tuple[str, str], ...] = CORE_VALUES
    prohibited_words: Tuple[str, ...] = PROHIBITED_WORDS
    formats: Dict[RecordType, RecordFormat] = Field(default_factory=lambda: dict(RECORD_FORMATS))

    @property
    def core_value_labels(self) -> Tuple[str, ...]:
        return tuple(label for _, label in self.core_values)

    def core_value_label(self, value: str) -> Optional[str]:
        """식별자(care) 또는 라벨(배려)을 라벨로 정규화, 모르면 None"""
        v = (value or "").strip()
        for vid, label in self.core_values:
            if v in (vid, label):
                return label
        return None

    def format_for(self, record_type: RecordType) -> RecordFormat:
        return self.formats[record_type]

    def split_sentences(self, text: str) -> Tuple[str, ...]:
        pattern = "[" + re.escape(self.sentence_delimiters) + "]"
        return tuple(s.strip() for s in re.split(pattern, text) if s.strip())

    def has_valid_ending(self, segment: str) -> bool:
        return segment.strip().endswith(self.valid_endings)

    @property
    def core_value_pattern(self) -> "re.Pattern[str]":
        labels = "|".join(re.escape(label) for label in self.core_value_labels)
        return re.compile(r"[(（]\s*(" + labels + r")\s*[)）]")


DEFAULT_NEIS_RULES = NeisRules()
