# neis_record/middleware/request_context.py
import logging
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# 수신은 두 가지 표기 모두 허용, 송신은 하이픈 소문자 i 로 통일
HDR_IN_LOWER = "x-request-id"
HDR_OUT = "X-Request-Id"  # 응답에 노출할 공식 표기

access_logger = logging.getLogger("neis_record.access")


def _get_req_id_from_headers(request: Request) -> Optional[str]:
    # Starlette 헤더 dict는 case-insensitive
    h = request.headers
    return h.get(HDR_OUT) or h.get(HDR_IN_LOWER)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """요청별 trace id 부여 + 접근 로그(request_done) 1건"""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()

        trace_id = _get_req_id_from_headers(request) or str(uuid.uuid4())
        request.state.trace_id = trace_id

        response: Optional[Response] = None
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            request.state.elapsed_ms = elapsed_ms

            if response is not None:
                response.headers[HDR_OUT] = trace_id

                # 브라우저에서 읽을 수 있도록 노출 (기존 값과 병합)
                expose = response.headers.get("Access-Control-Expose-Headers")
                if expose:
                    items = {h.strip() for h in expose.split(",")}
                    items.add(HDR_OUT)
                    response.headers["Access-Control-Expose-Headers"] = ", ".join(sorted(items))
                else:
                    response.headers["Access-Control-Expose-Headers"] = HDR_OUT

            access_logger.info(
                "request_done",
                extra={
                    "trace_id": trace_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": getattr(response, "status_code", 500),
                    "latency_ms": elapsed_ms,
                },
            )
