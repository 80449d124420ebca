# neis_record/routes/observations.py
from fastapi import APIRouter

from neis_record.schemas.observations import ObservationSessionPayload
from neis_record.services.observation_aggregator import ObservationAggregator

router = APIRouter(prefix="/api/observations", tags=["observations"])


@router.post("/sessions/preview")
def preview_session(payload: ObservationSessionPayload):
    """
    관찰 세션 저장 전 미리보기
    저장 형식 검증 + 일상 관찰 행 + 학생별 자동 문장/경고/분석
    (저장 자체는 외부 시스템 몫)
    """
    aggregator = ObservationAggregator()
    session = payload.to_session()

    students = []
    for obs in session.students:
        aggregated = aggregator.aggregate(obs)
        analysis = aggregator.analyze(obs.student_name, [session])
        students.append({
            "studentName": obs.student_name,
            "clauses": aggregated.clauses,
            "combinationSentence": aggregated.combination_sentence,
            "summary": aggregated.summary_lines,
            "warnings": aggregated.warnings,
            "analysis": analysis.model_dump(mode="json"),
        })

    return {
        "success": True,
        "dailyObservations": payload.to_daily_observations(),
        "students": students,
    }
