"""
BatchOrchestrator 테스트
학생별 실패 격리, 순서 보존, 학생 간 지연, 규정 위반 결과 처리
"""
import pytest

from neis_record.core.constants import ErrorCodes
from neis_record.core.exceptions import UpstreamError
from neis_record.schemas.records import BatchGenerationRequest
from neis_record.services.batch_orchestrator import BatchOrchestrator, BatchRun, FixedDelayThrottle
from neis_record.services.compliance_validator import ComplianceValidator

from conftest import FakeGenerationClient


@pytest.fixture
def batch(batch_request) -> BatchGenerationRequest:
    return BatchGenerationRequest.model_validate(batch_request)


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class TestBatchRun:
    """일괄 실행 결과 테스트"""

    def test_all_success(self, batch):
        client = FakeGenerationClient()
        run = BatchOrchestrator(client).run(batch)

        assert run.summary() == {"total": 3, "completed": 3, "failed": 0}
        assert [r.student for r in run.per_student_results] == ["홍길동", "김철수", "이영희"]
        assert all(r.validation.is_valid for r in run.per_student_results)
        assert len(client.prompts) == 3

    def test_partial_failure_isolated(self, batch):
        client = FakeGenerationClient([
            "수업에 성실히 참여함.",
            UpstreamError(upstream_status=429, detail="Resource has been exhausted"),
            "과제를 꼼꼼히 완성함.",
        ])
        run = BatchOrchestrator(client).run(batch)

        assert run.total == 3
        assert run.completed == 2
        assert run.failed == 1
        assert run.processed == 3

        first, second, third = run.per_student_results
        assert first.status == "success"
        assert second.status == "error"
        assert second.student == "김철수"
        assert second.error_code == ErrorCodes.UPSTREAM_ERROR
        assert second.content is None
        assert third.status == "success"
        assert third.content == "과제를 꼼꼼히 완성함."
        assert [r.student for r in run.succeeded] == ["홍길동", "이영희"]

    def test_insufficient_input_for_one_student(self, batch_request):
        batch_request["teacherNotes"] = ""
        batch_request["students"] = [
            {"studentName": "홍길동", "teacherNotes": "분수를 잘 이해함."},
            {"studentName": "김철수"},
        ]
        client = FakeGenerationClient()
        run = BatchOrchestrator(client).run(BatchGenerationRequest.model_validate(batch_request))

        assert run.per_student_results[0].status == "success"
        assert run.per_student_results[1].error_code == ErrorCodes.INSUFFICIENT_INPUT
        # 입력 부족 학생은 모델을 호출하지 않음
        assert len(client.prompts) == 1

    def test_shared_and_student_notes_merged(self, batch_request):
        batch_request["students"] = [{"studentName": "홍길동", "teacherNotes": "발표를 잘함."}]
        client = FakeGenerationClient()
        BatchOrchestrator(client).run(BatchGenerationRequest.model_validate(batch_request))

        assert "[교사 관찰 내용]\n수업 태도가 바름.\n발표를 잘함." in client.prompts[0]
        assert "홍길동" not in client.prompts[0]

    def test_non_compliant_text_reported_as_error(self, batch_request):
        batch_request["students"] = [{"studentName": "홍길동"}]
        client = FakeGenerationClient(["홍길동은 수학을 좋아합니다."])
        run = BatchOrchestrator(client).run(BatchGenerationRequest.model_validate(batch_request))

        result = run.per_student_results[0]
        assert result.status == "error"
        assert result.error_code == ErrorCodes.COMPLIANCE_VIOLATION
        assert result.content == "홍길동은 수학을 좋아합니다."
        assert result.error == "학생 이름이 포함되어 있습니다; 명사형 종결어미를 사용하지 않은 문장이 있습니다"
        assert result.validation.is_valid is False
        assert run.failed == 1

    def test_unexpected_client_error_does_not_stop_batch(self, batch_request, capture_logs):
        batch_request["students"] = [{"studentName": "홍길동"}, {"studentName": "김철수"}]
        client = FakeGenerationClient([RuntimeError("socket closed"), "과제를 꼼꼼히 완성함."])
        run = BatchOrchestrator(client).run(BatchGenerationRequest.model_validate(batch_request))

        assert [r.status for r in run.per_student_results] == ["error", "success"]
        assert run.per_student_results[0].error_code == ErrorCodes.INTERNAL_ERROR
        assert run.per_student_results[0].content is None
        assert run.summary() == {"total": 2, "completed": 1, "failed": 1}
        assert "batch_student_crashed" in capture_logs.get_messages()

    def test_validator_error_isolated(self, batch_request):
        class BrokenValidator:
            def __init__(self):
                self.calls = 0

            def check(self, text, student_name=None, record_type=None):
                self.calls += 1
                if self.calls == 1:
                    raise ValueError("broken rule set")
                return ComplianceValidator().check(text, student_name, record_type)

        batch_request["students"] = [{"studentName": "홍길동"}, {"studentName": "김철수"}]
        run = BatchOrchestrator(FakeGenerationClient(), validator=BrokenValidator()).run(
            BatchGenerationRequest.model_validate(batch_request)
        )

        assert [r.status for r in run.per_student_results] == ["error", "success"]

    def test_failure_logged(self, batch, capture_logs):
        client = FakeGenerationClient([UpstreamError(upstream_status=500, detail="boom")])
        BatchOrchestrator(client, trace_id="t-1").run(batch)

        messages = capture_logs.get_messages()
        assert "batch_started" in messages
        assert "batch_student_failed" in messages
        assert "batch_done" in messages


class TestThrottle:
    """학생 간 고정 지연 테스트"""

    def test_waits_between_students_only(self, batch):
        sleep = RecordingSleep()
        BatchOrchestrator(FakeGenerationClient(), throttle=FixedDelayThrottle(1.0, sleep=sleep)).run(batch)
        assert sleep.calls == [1.0, 1.0]

    def test_zero_delay_never_sleeps(self, batch):
        sleep = RecordingSleep()
        BatchOrchestrator(FakeGenerationClient(), throttle=FixedDelayThrottle(0, sleep=sleep)).run(batch)
        assert sleep.calls == []

    def test_wait_also_after_failure(self, batch):
        sleep = RecordingSleep()
        client = FakeGenerationClient([UpstreamError(upstream_status=500, detail="boom")])
        BatchOrchestrator(client, throttle=FixedDelayThrottle(0.5, sleep=sleep)).run(batch)
        assert len(sleep.calls) == 2

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            FixedDelayThrottle(-1)


class TestIterRun:
    """스트리밍 실행 테스트"""

    def test_stopping_early_skips_remaining_students(self, batch):
        client = FakeGenerationClient()
        run = BatchRun(total=3)
        iterator = BatchOrchestrator(client).iter_run(batch, run)

        first = next(iterator)
        iterator.close()

        assert first.student == "홍길동"
        assert len(client.prompts) == 1
        assert run.processed == 1

    def test_results_yielded_in_order(self, batch):
        results = list(BatchOrchestrator(FakeGenerationClient()).iter_run(batch))
        assert [r.student for r in results] == ["홍길동", "김철수", "이영희"]
