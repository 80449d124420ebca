# neis_record/routes/records.py
"""
생기부 생성 API

- /prompt         : 프롬프트만 조립 (외부 호출 없음)
- /generate       : 학생 1명 생성 + 규정 검증
- /batch          : 여러 학생 순차 생성, 최종 집계 반환
- /batch/stream   : 같은 일괄 생성을 NDJSON 으로 학생별 스트리밍
- /batch/export   : 일괄 생성 후 텍스트 파일 다운로드
"""
import json
import logging
import time
from typing import Any, Dict, Iterator, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response, StreamingResponse

from neis_record.core.constants import HTTPHeaders
from neis_record.core.exceptions import AppException
from neis_record.core.logging import log_generation
from neis_record.schemas.records import BatchGenerationRequest, RecordGenerationRequest
from neis_record.services.batch_orchestrator import (
    BatchOrchestrator,
    BatchRun,
    FixedDelayThrottle,
    get_batch_throttle,
)
from neis_record.services.compliance_validator import ComplianceValidator
from neis_record.services.generation_client import ClientFactory, get_client_factory, resolve_api_key
from neis_record.services.input_assembler import InputAssembler
from neis_record.services.prompt_composer import PromptComposer
from neis_record.services.record_export import build_export_text, content_disposition, export_filename

router = APIRouter(prefix="/api/records", tags=["records"])
logger = logging.getLogger(__name__)

_assembler: Optional[InputAssembler] = None
_composer = PromptComposer()
_validator = ComplianceValidator()


def get_input_assembler() -> InputAssembler:
    """InputAssembler 싱글톤 (카탈로그 로드는 첫 요청 시점)"""
    global _assembler
    if _assembler is None:
        _assembler = InputAssembler()
    return _assembler


def _close(client: Any) -> None:
    close = getattr(client, "close", None)
    if callable(close):
        close()


def _batch_response(run: BatchRun) -> Dict[str, Any]:
    return {
        "success": True,
        **run.summary(),
        "results": [r.to_response() for r in run.per_student_results],
    }


@router.post("/prompt")
def compose_prompt(
    body: RecordGenerationRequest,
    assembler: InputAssembler = Depends(get_input_assembler),
):
    request = assembler.assemble(body)
    prompt = _composer.compose(request)
    return {
        "success": True,
        "recordType": request.record_type.value,
        "subject": request.subject,
        "prompt": prompt,
        "warnings": list(request.observation_warnings),
    }


@router.post("/generate")
def generate_record(
    body: RecordGenerationRequest,
    http_request: Request,
    assembler: InputAssembler = Depends(get_input_assembler),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    """
    단일 학생 생기부 생성
    규정 위반이어도 생성 텍스트는 validation(issues) 과 함께 그대로 돌려준다.
    """
    trace_id = getattr(http_request.state, "trace_id", None)
    started = time.perf_counter()

    # 입력 부족은 네트워크 호출 전에 실패
    request = assembler.assemble(body)
    prompt = _composer.compose(request)
    api_key = resolve_api_key(body.api_key)

    client = client_factory(api_key)
    try:
        content = client.generate(prompt)
    except AppException as e:
        log_generation(
            logger, trace_id, request.record_type.value, "error",
            int((time.perf_counter() - started) * 1000), error=e.code,
        )
        raise
    finally:
        _close(client)

    validation = _validator.check(content, request.student_name, request.record_type)
    log_generation(
        logger, trace_id, request.record_type.value,
        "success" if validation.is_valid else "invalid",
        int((time.perf_counter() - started) * 1000),
        character_count=validation.character_count,
    )

    data: Dict[str, Any] = {
        "success": True,
        "content": content,
        "validation": validation.to_response(),
    }
    if request.observation_warnings:
        data["warnings"] = list(request.observation_warnings)
    return data


def _orchestrator(
    batch: BatchGenerationRequest,
    http_request: Request,
    assembler: InputAssembler,
    client_factory: ClientFactory,
    throttle: FixedDelayThrottle,
) -> BatchOrchestrator:
    # API 키는 일괄 작업당 한 번만 확인
    client = client_factory(resolve_api_key(batch.api_key))
    return BatchOrchestrator(
        client=client,
        assembler=assembler,
        composer=_composer,
        validator=_validator,
        throttle=throttle,
        trace_id=getattr(http_request.state, "trace_id", None),
    )


@router.post("/batch")
def generate_batch(
    batch: BatchGenerationRequest,
    http_request: Request,
    assembler: InputAssembler = Depends(get_input_assembler),
    client_factory: ClientFactory = Depends(get_client_factory),
    throttle: FixedDelayThrottle = Depends(get_batch_throttle),
):
    orchestrator = _orchestrator(batch, http_request, assembler, client_factory, throttle)
    try:
        run = orchestrator.run(batch)
    finally:
        _close(orchestrator.client)
    return _batch_response(run)


@router.post("/batch/stream")
def stream_batch(
    batch: BatchGenerationRequest,
    http_request: Request,
    assembler: InputAssembler = Depends(get_input_assembler),
    client_factory: ClientFactory = Depends(get_client_factory),
    throttle: FixedDelayThrottle = Depends(get_batch_throttle),
):
    """
    학생 1명 처리가 끝날 때마다 한 줄씩 전송
    {"type": "result", "index": i, ...} ... {"type": "summary", total, completed, failed}
    """
    orchestrator = _orchestrator(batch, http_request, assembler, client_factory, throttle)
    run = BatchRun(total=len(batch.students))

    def _lines() -> Iterator[str]:
        try:
            for index, result in enumerate(orchestrator.iter_run(batch, run)):
                line = {"type": "result", "index": index, **result.to_response()}
                yield json.dumps(line, ensure_ascii=False) + "\n"
            yield json.dumps({"type": "summary", **run.summary()}, ensure_ascii=False) + "\n"
        finally:
            _close(orchestrator.client)

    return StreamingResponse(_lines(), media_type=HTTPHeaders.NDJSON_CONTENT)


@router.post("/batch/export")
def export_batch(
    batch: BatchGenerationRequest,
    http_request: Request,
    assembler: InputAssembler = Depends(get_input_assembler),
    client_factory: ClientFactory = Depends(get_client_factory),
    throttle: FixedDelayThrottle = Depends(get_batch_throttle),
):
    orchestrator = _orchestrator(batch, http_request, assembler, client_factory, throttle)
    try:
        run = orchestrator.run(batch)
    finally:
        _close(orchestrator.client)

    text = build_export_text(batch.class_name, batch.record_type, run.per_student_results)
    filename = export_filename(batch.class_name, batch.record_type)
    return Response(
        content=text.encode("utf-8"),
        media_type=HTTPHeaders.TEXT_CONTENT,
        headers={
            HTTPHeaders.CONTENT_DISPOSITION: content_disposition(filename),
            "X-Batch-Total": str(run.total),
            "X-Batch-Completed": str(run.completed),
            "X-Batch-Failed": str(run.failed),
        },
    )
