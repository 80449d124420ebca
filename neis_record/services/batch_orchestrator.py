# neis_record/services/batch_orchestrator.py
"""
일괄 생성 오케스트레이터

학생 순서대로 입력 조립 → 프롬프트 → 생성 → 검증을 한 명씩 순차 실행한다.
한 학생의 실패는 기록만 하고 다음 학생으로 넘어가며, 학생 사이에는 고정 지연(throttle)을 둔다.
"""
import logging
import time
from typing import Callable, Iterator, List, Optional

from pydantic import BaseModel, Field

from neis_record.core.constants import ErrorCodes, ErrorMessages
from neis_record.core.exceptions import AppException
from neis_record.core.logging import log_generation
from neis_record.core.settings import settings
from neis_record.schemas.records import BatchGenerationRequest, StudentResult
from neis_record.services.compliance_validator import ComplianceValidator
from neis_record.services.generation_client import GenerationClient
from neis_record.services.input_assembler import InputAssembler
from neis_record.services.prompt_composer import PromptComposer

logger = logging.getLogger(__name__)


class FixedDelayThrottle:
    """학생 사이 고정 지연 (업스트림 호출 제한 대응)"""

    def __init__(self, delay_s: float, sleep: Callable[[float], None] = time.sleep):
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        self.delay_s = delay_s
        self._sleep = sleep

    def wait(self) -> None:
        if self.delay_s > 0:
            self._sleep(self.delay_s)


def get_batch_throttle() -> FixedDelayThrottle:
    """FastAPI 의존성: 설정값(BATCH_DELAY_MS) 기반 학생 간 지연"""
    return FixedDelayThrottle(settings.batch_delay_s)


class BatchRun(BaseModel):
    """
    일괄 생성 진행 상태
    completed: 성공 건수 / failed: 실패 건수 (둘의 합 = 처리한 학생 수)
    """
    total: int
    completed: int = 0
    failed: int = 0
    per_student_results: List[StudentResult] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.completed + self.failed

    @property
    def succeeded(self) -> List[StudentResult]:
        return [r for r in self.per_student_results if r.status == "success"]

    def record(self, result: StudentResult) -> None:
        self.per_student_results.append(result)
        if result.status == "success":
            self.completed += 1
        else:
            self.failed += 1

    def summary(self) -> dict:
        return {"total": self.total, "completed": self.completed, "failed": self.failed}


class BatchOrchestrator:
    def __init__(
        self,
        client: GenerationClient,
        assembler: Optional[InputAssembler] = None,
        composer: Optional[PromptComposer] = None,
        validator: Optional[ComplianceValidator] = None,
        throttle: Optional[FixedDelayThrottle] = None,
        trace_id: Optional[str] = None,
    ):
        self.client = client
        self.assembler = assembler or InputAssembler()
        self.composer = composer or PromptComposer()
        self.validator = validator or ComplianceValidator()
        self.throttle = throttle or FixedDelayThrottle(0)
        self.trace_id = trace_id

    def iter_run(self, batch: BatchGenerationRequest, run: Optional[BatchRun] = None) -> Iterator[StudentResult]:
        """
        학생별 결과를 처리 순서대로 하나씩 내보낸다.
        소비자가 중간에 멈추면 이후 학생은 처리하지 않는다 (진행 중인 1건은 끝까지 수행).
        """
        run = run or BatchRun(total=len(batch.students))
        logger.info(
            "batch_started",
            extra={"trace_id": self.trace_id, "total": run.total, "record_type": batch.record_type.value},
        )

        for index, student in enumerate(batch.students):
            if index > 0:
                self.throttle.wait()
            result = self._process_one(batch, index)
            run.record(result)
            yield result

        logger.info("batch_done", extra={"trace_id": self.trace_id, **run.summary()})

    def run(self, batch: BatchGenerationRequest) -> BatchRun:
        run = BatchRun(total=len(batch.students))
        for _ in self.iter_run(batch, run):
            pass
        return run

    def _process_one(self, batch: BatchGenerationRequest, index: int) -> StudentResult:
        student = batch.students[index]
        name = student.student_name
        started = time.perf_counter()

        try:
            request = self.assembler.assemble(batch.for_student(student))
            prompt = self.composer.compose(request)
            content = self.client.generate(prompt)
            validation = self.validator.check(content, name, batch.record_type)
        except AppException as e:
            logger.warning(
                "batch_student_failed",
                extra={"trace_id": self.trace_id, "index": index, "student": name, "code": e.code},
            )
            self._log(batch, started, "error", error=e.code)
            return StudentResult(student=name, status="error", error=e.message, error_code=e.code)
        except Exception as e:
            # 예상하지 못한 오류도 해당 학생만 실패 처리하고 다음 학생 진행
            logger.exception(
                "batch_student_crashed",
                extra={"trace_id": self.trace_id, "index": index, "student": name, "error_type": type(e).__name__},
            )
            self._log(batch, started, "error", error=ErrorCodes.INTERNAL_ERROR)
            return StudentResult(
                student=name,
                status="error",
                error=ErrorMessages.INTERNAL_ERROR,
                error_code=ErrorCodes.INTERNAL_ERROR,
            )

        if not validation.is_valid:
            # 규정 위반 텍스트도 위반 목록과 함께 돌려줌 (내보내기 대상에서는 제외)
            self._log(batch, started, "invalid", character_count=validation.character_count)
            return StudentResult(
                student=name,
                status="error",
                content=content,
                error="; ".join(validation.issues),
                error_code=ErrorCodes.COMPLIANCE_VIOLATION,
                validation=validation,
            )

        self._log(batch, started, "success", character_count=validation.character_count)
        return StudentResult(student=name, status="success", content=content, validation=validation)

    def _log(self, batch: BatchGenerationRequest, started: float, result: str,
             character_count: Optional[int] = None, error: Optional[str] = None) -> None:
        log_generation(
            logger,
            trace_id=self.trace_id,
            record_type=batch.record_type.value,
            result=result,
            elapsed_ms=int((time.perf_counter() - started) * 1000),
            character_count=character_count,
            error=error,
        )
