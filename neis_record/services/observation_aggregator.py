# neis_record/services/observation_aggregator.py
from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from neis_record.schemas.keywords import ObservationKeyword
from neis_record.schemas.observations import (
    AggregatedObservation,
    CategoryAnalysis,
    ObservationAnalysis,
    ObservationSession,
    SelectedKeyword,
    StudentObservation,
)
from neis_record.services.keyword_catalog import KeywordCatalog, get_keyword_catalog

logger = logging.getLogger(__name__)

# timestamp 없는 선택은 같은 영역 안에서 뒤로 보냄
_LATEST = datetime.max.replace(tzinfo=timezone.utc)


class ObservationAggregator:
    """
    체크된 관찰 키워드 → 생기부 문장 조각 변환기

    1) 조합 패턴 우선: primary + related(1개 이상)가 모두 선택되면 조합 문장 하나로 대체
    2) 나머지 키워드는 강도(1/2/3) 수식어를 붙인 개별 문장 조각으로 변환
    3) 정렬: 영역 표시 순서 → 선택 시각
    카탈로그에 없는 키워드는 건너뛰고 경고만 남긴다.
    """

    def __init__(self, catalog: Optional[KeywordCatalog] = None):
        self.catalog = catalog or get_keyword_catalog()

    # ------------------------------------------------------------------
    # 문장 조각
    # ------------------------------------------------------------------
    def render_clause(self, selection: SelectedKeyword, keyword: ObservationKeyword) -> str:
        modifier = self.catalog.intensity_modifier(selection.intensity)

        connector = ""
        trailing = ""
        context = (selection.context or "").strip()
        if context:
            phrases = self.catalog.connectors(context)
            if phrases:
                connector = phrases[0]
            else:
                trailing = f"({context})"

        parts = [connector, modifier.prefix, keyword.auto_text_template, modifier.suffix, trailing]
        return " ".join(p for p in parts if p)

    def aggregate(self, observation: StudentObservation) -> AggregatedObservation:
        warnings: List[str] = []
        known: List[Tuple[int, SelectedKeyword, ObservationKeyword]] = []

        for idx, sel in enumerate(observation.selected_keywords):
            kw = self.catalog.lookup(sel.keyword_id)
            if kw is None:
                warnings.append(f"알 수 없는 관찰 키워드를 건너뜀: {sel.keyword_id}")
                logger.warning(
                    "unknown_observation_keyword",
                    extra={"keyword_id": sel.keyword_id, "category_id": sel.category_id},
                )
                continue
            known.append((idx, sel, kw))

        known.sort(key=lambda item: self._sort_key(item[0], item[1], item[2]))

        selected_ids = [kw.id for _, _, kw in known]
        combo = self.catalog.find_combination(selected_ids)
        consumed = set(combo.consumed_ids(selected_ids)) if combo else set()

        clauses: List[str] = []
        combo_emitted = False
        for _, sel, kw in known:
            if kw.id in consumed:
                # 조합 문장은 primary 키워드 자리에 한 번만
                if combo and kw.id == combo.primary_keyword_id and not combo_emitted:
                    clauses.append(combo.auto_sentence)
                    combo_emitted = True
                continue
            clauses.append(self.render_clause(sel, kw))

        return AggregatedObservation(
            student_name=observation.student_name,
            clauses=clauses,
            combination_sentence=combo.auto_sentence if combo else None,
            consumed_keyword_ids=sorted(consumed),
            warnings=warnings,
            summary_lines=self.summarize(observation.selected_keywords),
        )

    def _sort_key(self, idx: int, sel: SelectedKeyword, kw: ObservationKeyword):
        return (
            self.catalog.category_order(kw.category_id),
            sel.timestamp or _LATEST,
            idx,
        )

    # ------------------------------------------------------------------
    # 요약 / 분석
    # ------------------------------------------------------------------
    def summarize(self, selections: Sequence[SelectedKeyword]) -> List[str]:
        """
        "[학습태도] 매우 적극적 참여 (모둠 활동), 집중력 우수" 형태의 영역별 요약 줄
        """
        grouped: Dict[str, List[str]] = {}
        for sel in selections:
            kw = self.catalog.lookup(sel.keyword_id)
            if kw is None:
                continue
            label = self.catalog.intensity_modifier(sel.intensity).label
            context = f" ({sel.context.strip()})" if sel.context and sel.context.strip() else ""
            grouped.setdefault(kw.category_id, []).append(f"{label} {kw.text}{context}")

        lines = []
        for category_id in sorted(grouped, key=self.catalog.category_order):
            category = self.catalog.get_category(category_id)
            name = category.name if category else category_id
            lines.append(f"[{name}] {', '.join(grouped[category_id])}")
        return lines

    def analyze(
        self,
        student_name: str,
        sessions: Sequence[ObservationSession],
    ) -> ObservationAnalysis:
        """여러 세션에 걸친 학생 한 명의 영역별 관찰 통계"""
        selections: List[SelectedKeyword] = []
        dates = []
        for session in sessions:
            matched = session.for_student(student_name)
            if matched and session.date:
                dates.append(session.date)
            for obs in matched:
                selections.extend(obs.selected_keywords)

        per_category: Dict[str, List[ObservationKeyword]] = {}
        counter: Counter = Counter()
        for sel in selections:
            kw = self.catalog.lookup(sel.keyword_id)
            if kw is None:
                continue
            per_category.setdefault(kw.category_id, []).append(kw)
            counter[kw.id] += 1

        categories: List[CategoryAnalysis] = []
        focus: List[str] = []
        for category_id in sorted(per_category, key=self.catalog.category_order):
            kws = per_category[category_id]
            category = self.catalog.get_category(category_id)
            positive = [k for k in kws if k.positivity == "positive"]
            improvement = [k for k in kws if k.positivity == "improvement"]
            analysis = CategoryAnalysis(
                category_id=category_id,
                category_name=category.name if category else category_id,
                total_count=len(kws),
                positive_ratio=round(len(positive) / len(kws), 2),
                strengths=_unique_texts(positive),
                improvement_areas=_unique_texts(improvement),
            )
            categories.append(analysis)
            if analysis.improvement_areas:
                focus.append(analysis.category_name)

        most_frequent = [
            self.catalog.lookup(kid).text  # type: ignore[union-attr]
            for kid, _ in sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))[:3]
        ]

        return ObservationAnalysis(
            student_name=student_name,
            period_start=min(dates) if dates else None,
            period_end=max(dates) if dates else None,
            total_selections=sum(counter.values()),
            categories=categories,
            most_frequent_keywords=most_frequent,
            recommended_focus=focus,
        )


def _unique_texts(keywords: Sequence[ObservationKeyword]) -> List[str]:
    seen: List[str] = []
    for kw in keywords:
        if kw.text not in seen:
            seen.append(kw.text)
    return seen
