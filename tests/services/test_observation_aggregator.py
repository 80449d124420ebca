"""
ObservationAggregator 테스트
선택 키워드 → 문장 조각 변환, 조합 우선, 정렬, 알 수 없는 키워드 처리
"""
import pytest

from neis_record.schemas.observations import ObservationSession, StudentObservation
from neis_record.services.observation_aggregator import ObservationAggregator


@pytest.fixture
def aggregator() -> ObservationAggregator:
    return ObservationAggregator()


def _student(*selections, name="홍길동", **extra) -> StudentObservation:
    return StudentObservation(student_name=name, selected_keywords=list(selections), **extra)


class TestRenderClause:
    """강도별 문장 조각 테스트"""

    def test_intensity_levels(self, aggregator):
        obs = _student(
            {"keyword_id": "diligent", "intensity": 1},
        )
        assert aggregator.aggregate(obs).clauses == ["약간 성실한 태도로 경향을 보임"]

        obs = _student({"keyword_id": "diligent", "intensity": 2})
        assert aggregator.aggregate(obs).clauses == ["성실한 태도로 모습을 보임"]

        obs = _student({"keyword_id": "diligent", "intensity": 3})
        assert aggregator.aggregate(obs).clauses == ["매우 성실한 태도로 뛰어난 모습을 보임"]

    def test_missing_intensity_defaults_to_normal(self, aggregator):
        obs = _student({"keyword_id": "diligent", "intensity": None})
        assert aggregator.aggregate(obs).clauses == ["성실한 태도로 모습을 보임"]

    def test_known_context_uses_connector(self, aggregator):
        obs = _student({"keyword_id": "caring", "intensity": 2, "context": "group_work"})
        assert aggregator.aggregate(obs).clauses == ["모둠 활동에서 친구들을 배려하는 마음으로 모습을 보임"]

    def test_free_text_context_appended(self, aggregator):
        obs = _student({"keyword_id": "caring", "intensity": 2, "context": "점심시간"})
        assert aggregator.aggregate(obs).clauses == ["친구들을 배려하는 마음으로 모습을 보임 (점심시간)"]

    def test_plain_keyword_id_list(self, aggregator):
        """키워드 id 문자열 목록도 허용"""
        obs = StudentObservation(student_name="홍길동", selected_keywords=["diligent"])
        assert aggregator.aggregate(obs).clauses == ["성실한 태도로 모습을 보임"]


class TestCombinationPrecedence:
    """조합 문장 우선 테스트"""

    def test_exact_combination_replaces_individual_clauses(self, aggregator):
        obs = _student(
            {"keyword_id": "active_participation", "intensity": 2},
            {"keyword_id": "frequent_questions", "intensity": 2},
            {"keyword_id": "active_presentation", "intensity": 2},
            {"keyword_id": "collaborative", "intensity": 2},
        )
        result = aggregator.aggregate(obs)

        assert result.combination_sentence == "수업에 적극적으로 참여하며 친구들과 협력하여 활동함"
        assert result.clauses == ["수업에 적극적으로 참여하며 친구들과 협력하여 활동함"]
        assert not any("수업에 적극적으로 참여하며 모습을 보임" in c for c in result.clauses)

    def test_unconsumed_keywords_still_rendered(self, aggregator):
        obs = _student(
            {"keyword_id": "active_participation", "intensity": 2},
            {"keyword_id": "collaborative", "intensity": 2},
            {"keyword_id": "diligent", "intensity": 2},
        )
        result = aggregator.aggregate(obs)

        assert result.clauses == [
            "수업에 적극적으로 참여하며 친구들과 협력하여 활동함",
            "성실한 태도로 모습을 보임",
        ]
        assert result.consumed_keyword_ids == ["active_participation", "collaborative"]

    def test_no_combination(self, aggregator):
        obs = _student({"keyword_id": "active_participation", "intensity": 2})
        result = aggregator.aggregate(obs)
        assert result.combination_sentence is None
        assert result.clauses == ["수업에 적극적으로 참여하며 모습을 보임"]


class TestOrdering:
    """영역 순서 → 선택 시각 정렬 테스트"""

    def test_category_order_then_timestamp(self, aggregator):
        obs = _student(
            {"keyword_id": "diligent", "timestamp": "2024-04-01T09:00:00"},            # 성격특성(5)
            {"keyword_id": "caring", "timestamp": "2024-04-01T09:10:00"},              # 대인관계(2)
            {"keyword_id": "task_completion", "timestamp": "2024-04-01T09:30:00"},     # 학습태도(1)
            {"keyword_id": "high_concentration", "timestamp": "2024-04-01T09:20:00"},  # 학습태도(1)
        )
        clauses = aggregator.aggregate(obs).clauses

        assert clauses == [
            "높은 집중력을 보이며 모습을 보임",
            "주어진 과제를 성실히 수행하고 모습을 보임",
            "친구들을 배려하는 마음으로 모습을 보임",
            "성실한 태도로 모습을 보임",
        ]


class TestUnknownKeywords:
    """카탈로그에 없는 키워드 처리 테스트"""

    def test_unknown_keyword_skipped_with_warning(self, aggregator, capture_logs):
        obs = _student(
            {"keyword_id": "ghost_keyword"},
            {"keyword_id": "diligent"},
        )
        result = aggregator.aggregate(obs)

        assert result.clauses == ["성실한 태도로 모습을 보임"]
        assert result.warnings == ["알 수 없는 관찰 키워드를 건너뜀: ghost_keyword"]
        assert "unknown_observation_keyword" in capture_logs.get_messages()

    def test_only_unknown_keywords(self, aggregator):
        result = aggregator.aggregate(_student({"keyword_id": "ghost_keyword"}))
        assert result.clauses == []
        assert len(result.warnings) == 1


class TestSummaryAndAnalysis:
    """요약 줄 / 누적 분석 테스트"""

    def test_summary_lines_grouped_by_category(self, aggregator):
        obs = _student(
            {"keyword_id": "caring", "intensity": 1},
            {"keyword_id": "active_participation", "intensity": 3, "context": "발표"},
            {"keyword_id": "high_concentration", "intensity": 2},
        )
        assert aggregator.aggregate(obs).summary_lines == [
            "[학습태도] 매우 적극적 참여 (발표), 보통 집중력 우수",
            "[대인관계] 약간 배려심 많음",
        ]

    def test_analyze_across_sessions(self, aggregator):
        sessions = [
            ObservationSession(date="2024-04-01", students=[
                {"student_name": "홍길동", "selected_keywords": ["active_participation", "attention_needed"]},
            ]),
            ObservationSession(date="2024-04-08", students=[
                {"student_name": "홍길동", "selected_keywords": ["active_participation"]},
                {"student_name": "김철수", "selected_keywords": ["diligent"]},
            ]),
        ]
        analysis = aggregator.analyze("홍길동", sessions)

        assert analysis.total_selections == 3
        assert str(analysis.period_start) == "2024-04-01"
        assert str(analysis.period_end) == "2024-04-08"
        assert analysis.most_frequent_keywords[0] == "적극적 참여"

        attitude = analysis.categories[0]
        assert attitude.category_id == "learning_attitude"
        assert attitude.total_count == 3
        assert attitude.positive_ratio == 0.67
        assert attitude.strengths == ["적극적 참여"]
        assert attitude.improvement_areas == ["집중력 개선 필요"]
        assert analysis.recommended_focus == ["학습태도"]
