"""
관찰 키워드 카탈로그
영역별 키워드, 조합 패턴, 강도 표현, 맥락 연결어를 불변 레코드로 보관

로드 시점에 정합성을 한 번 검증하며 런타임에는 변경하지 않는다.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from neis_record.core.exceptions import CatalogIntegrityError, KeywordNotFoundError
from neis_record.data.observation_keywords import (
    CONTEXT_CONNECTORS,
    INTENSITY_MODIFIERS,
    KEYWORD_COMBINATIONS,
    OBSERVATION_CATEGORIES,
)
from neis_record.schemas.keywords import (
    IntensityModifier,
    KeywordCombination,
    ObservationCategory,
    ObservationKeyword,
)

logger = logging.getLogger(__name__)

DEFAULT_INTENSITY = 2
UNKNOWN_CATEGORY_ORDER = 10_000


class KeywordCatalog:
    """
    관찰 키워드 카탈로그

    - lookup(keyword_id): 키워드 조회 (없으면 None)
    - all_categories(): 표시 순서대로 정렬된 영역 목록
    - combinations: 조합 패턴 목록 (첫 번째 일치 우선)
    """

    def __init__(
        self,
        categories: Sequence[ObservationCategory],
        combinations: Sequence[KeywordCombination],
        intensity_modifiers: Mapping[int, IntensityModifier],
        context_connectors: Mapping[str, Tuple[str, ...]],
    ):
        self._categories: Tuple[ObservationCategory, ...] = tuple(
            sorted(categories, key=lambda c: c.order)
        )
        self._combinations: Tuple[KeywordCombination, ...] = tuple(combinations)
        self._modifiers: Dict[int, IntensityModifier] = dict(intensity_modifiers)
        self._connectors: Dict[str, Tuple[str, ...]] = {
            k: tuple(v) for k, v in context_connectors.items()
        }

        self._keywords: Dict[str, ObservationKeyword] = {}
        self._category_by_id: Dict[str, ObservationCategory] = {}
        self._validate_and_index()

    # ------------------------------------------------------------------
    # 생성
    # ------------------------------------------------------------------
    @classmethod
    def from_raw(
        cls,
        categories: Iterable[Dict[str, Any]] = OBSERVATION_CATEGORIES,
        combinations: Iterable[Dict[str, Any]] = KEYWORD_COMBINATIONS,
        intensity_modifiers: Mapping[int, Dict[str, Any]] = INTENSITY_MODIFIERS,
        context_connectors: Mapping[str, Sequence[str]] = CONTEXT_CONNECTORS,
    ) -> "KeywordCatalog":
        """
        원시 딕셔너리 데이터로부터 카탈로그 생성

        Raises:
            CatalogIntegrityError: 필드 형식 오류 또는 참조 무결성 위반
        """
        try:
            parsed_categories = []
            for raw in categories:
                keywords = [
                    ObservationKeyword(category_id=raw["id"], **kw)
                    for kw in raw.get("keywords", [])
                ]
                data = {k: v for k, v in raw.items() if k != "keywords"}
                parsed_categories.append(ObservationCategory(keywords=tuple(keywords), **data))

            parsed_combinations = [KeywordCombination(**c) for c in combinations]
            parsed_modifiers = {
                int(level): IntensityModifier(**m) for level, m in intensity_modifiers.items()
            }
        except (PydanticValidationError, KeyError, TypeError) as e:
            raise CatalogIntegrityError([f"invalid catalog record: {e}"])

        return cls(
            categories=parsed_categories,
            combinations=parsed_combinations,
            intensity_modifiers=parsed_modifiers,
            context_connectors={k: tuple(v) for k, v in context_connectors.items()},
        )

    def _validate_and_index(self) -> None:
        problems: List[str] = []

        orders = [c.order for c in self._categories]
        if len(orders) != len(set(orders)):
            problems.append("duplicate category order")

        for category in self._categories:
            if category.id in self._category_by_id:
                problems.append(f"duplicate category id: {category.id}")
            self._category_by_id[category.id] = category
            for kw in category.keywords:
                if kw.id in self._keywords:
                    problems.append(f"duplicate keyword id: {kw.id}")
                if kw.category_id != category.id:
                    problems.append(f"keyword {kw.id} category mismatch")
                self._keywords[kw.id] = kw

        for combo in self._combinations:
            for kid in (combo.primary_keyword_id,) + combo.related_keyword_ids:
                if kid not in self._keywords:
                    problems.append(
                        f"combination '{combo.primary_keyword_id}' references unknown keyword: {kid}"
                    )
            if combo.primary_keyword_id in combo.related_keyword_ids:
                problems.append(f"combination '{combo.primary_keyword_id}' lists itself as related")

        if set(self._modifiers) != {1, 2, 3}:
            problems.append(f"intensity modifiers must cover 1, 2, 3 (got {sorted(self._modifiers)})")

        if problems:
            logger.error("keyword_catalog_invalid", extra={"problems": problems})
            raise CatalogIntegrityError(problems)

        logger.debug(
            "keyword_catalog_loaded",
            extra={
                "categories": len(self._categories),
                "keywords": len(self._keywords),
                "combinations": len(self._combinations),
            },
        )

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def lookup(self, keyword_id: str) -> Optional[ObservationKeyword]:
        return self._keywords.get(keyword_id)

    def get_keyword(self, keyword_id: str) -> ObservationKeyword:
        """키워드 조회 (없으면 KeywordNotFoundError)"""
        kw = self.lookup(keyword_id)
        if kw is None:
            raise KeywordNotFoundError(keyword_id)
        return kw

    def get_category(self, category_id: str) -> Optional[ObservationCategory]:
        return self._category_by_id.get(category_id)

    def all_categories(self) -> List[ObservationCategory]:
        return list(self._categories)

    def category_order(self, category_id: str) -> int:
        category = self._category_by_id.get(category_id)
        return category.order if category else UNKNOWN_CATEGORY_ORDER

    @property
    def combinations(self) -> Tuple[KeywordCombination, ...]:
        return self._combinations

    def find_combination(self, selected_ids: Iterable[str]) -> Optional[KeywordCombination]:
        """선택된 키워드 집합에 처음 일치하는 조합 (부분 점수 없음)"""
        selected = set(selected_ids)
        for combo in self._combinations:
            if combo.matches(selected):
                return combo
        return None

    def intensity_modifier(self, intensity: Optional[int]) -> IntensityModifier:
        return self._modifiers.get(intensity or DEFAULT_INTENSITY, self._modifiers[DEFAULT_INTENSITY])

    @property
    def intensity_modifiers(self) -> Dict[int, IntensityModifier]:
        return dict(self._modifiers)

    def connectors(self, context_key: str) -> Tuple[str, ...]:
        return self._connectors.get(context_key, ())

    @property
    def context_connectors(self) -> Dict[str, Tuple[str, ...]]:
        return dict(self._connectors)

    def __len__(self) -> int:
        return len(self._keywords)

    def __contains__(self, keyword_id: object) -> bool:
        return keyword_id in self._keywords


# ===========================================
# 싱글톤
# ===========================================

_keyword_catalog: Optional[KeywordCatalog] = None


def get_keyword_catalog() -> KeywordCatalog:
    """KeywordCatalog 싱글톤 인스턴스 반환"""
    global _keyword_catalog
    if _keyword_catalog is None:
        _keyword_catalog = KeywordCatalog.from_raw()
    return _keyword_catalog
