# neis_record/core/logging.py
import logging
import json
import sys
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger("neis_record")   # ✅ 패키지 루트 logger
logger.setLevel(logging.INFO)
# --- 민감정보 레드액션 ---
REDACT_PATTERNS = [
    re.compile(r"(Authorization:\s*)(Basic|Bearer)\s+[A-Za-z0-9\-\._~\+\/]+=*", re.IGNORECASE),
    # Gemini REST 호출은 쿼리스트링으로 키를 넘김
    re.compile(r"([?&]key=)[A-Za-z0-9\-_]+"),
    re.compile(r"()AIza[0-9A-Za-z\-_]{20,}"),
]

def _redact(text: str) -> str:
    if not isinstance(text, str):
        return text
    out = text
    for pat in REDACT_PATTERNS:
        out = pat.sub(r"\1***REDACTED***", out)
    return out

SAFE_ATTR_BLOCKLIST = {
    "args","asctime","created","exc_info","exc_text","filename",
    "funcName","levelname","levelno","lineno","module","msecs",
    "message","msg","name","pathname","process","processName",
    "relativeCreated","stack_info","thread","threadName","taskName",
}

class JsonFormatter(logging.Formatter):
    """
    표준 JSON 로그 포맷:
    {
      "ts": "2025-10-24T01:23:45.678Z",
      "ts_ms": 1698101025678,
      "level": "INFO",
      "logger": "neis_record.services.batch_orchestrator",
      "msg": "batch_done",
      "req_id": "...",
      "total": 25,
      "failed": 1,
      ... (extra)
    }
    """
    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "ts": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "ts_ms": int(now.timestamp() * 1000),
            "level": record.levelname,
            "logger": record.name,
        }

        msg = record.getMessage()
        payload["msg"] = _redact(msg)

        # extra 필드
        for k, v in record.__dict__.items():
            if k in SAFE_ATTR_BLOCKLIST:
                continue
            if k == "trace_id" and "req_id" not in payload:
                payload["req_id"] = v
            else:
                payload[k] = _redact(v) if isinstance(v, str) else v

        if record.exc_info:
            payload["exc_info"] = _redact(self.formatException(record.exc_info))

        try:
            return json.dumps(payload, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            safe = {k: (str(v) if not isinstance(v, (str, int, float, bool, type(None), dict, list)) else v)
                    for k, v in payload.items()}
            return json.dumps(safe, ensure_ascii=False, default=str)

def configure_logging(level: str = "INFO") -> None:
    """
    - 루트/uvicorn 로거를 모두 JSON 포맷으로 교체
    - 콘솔(stdout) 출력
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
    logger.setLevel(level.upper())

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.addHandler(handler)
        lg.propagate = False
        lg.setLevel(level.upper())

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

# 편의 함수: 생성 결과 로깅(라우터/오케스트레이터에서 호출)
def log_generation(
    log: logging.Logger,
    trace_id: Optional[str],
    record_type: str,
    result: str,
    elapsed_ms: int,
    character_count: Optional[int] = None,
    error: Optional[str] = None,
) -> None:
    log.info(
        "record_generation_done",
        extra={
            "trace_id": trace_id,
            "record_type": record_type,
            "result": result,
            "elapsed_ms": elapsed_ms,
            "character_count": character_count,
            "error": error,
        },
    )
