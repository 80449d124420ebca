# neis_record/schemas/keywords.py
from typing import Literal, Optional, Tuple, Iterable
from pydantic import BaseModel, ConfigDict, Field

Positivity = Literal["positive", "neutral", "improvement"]


class ObservationKeyword(BaseModel):
    """카탈로그의 관찰 키워드 (불변)"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    category_id: str
    weight: int = Field(ge=1, le=5)
    frequency: int = Field(default=0, ge=0)
    positivity: Positivity
    auto_text_template: str = Field(min_length=1)
    description: Optional[str] = None


class ObservationCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    order: int
    color: str = "gray"
    keywords: Tuple[ObservationKeyword, ...] = ()


class KeywordCombination(BaseModel):
    """함께 선택되면 하나의 문장으로 대체되는 키워드 묶음"""
    model_config = ConfigDict(frozen=True)

    primary_keyword_id: str
    related_keyword_ids: Tuple[str, ...] = Field(min_length=1)
    auto_sentence: str = Field(min_length=1)

    def matches(self, selected_ids: Iterable[str]) -> bool:
        """primary 와 related 중 하나 이상이 모두 선택되었는지 (단순 포함 검사)"""
        selected = set(selected_ids)
        return self.primary_keyword_id in selected and any(
            rid in selected for rid in self.related_keyword_ids
        )

    def consumed_ids(self, selected_ids: Iterable[str]) -> Tuple[str, ...]:
        selected = set(selected_ids)
        related = tuple(rid for rid in self.related_keyword_ids if rid in selected)
        return (self.primary_keyword_id,) + related


class IntensityModifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    prefix: str = ""
    suffix: str = ""
