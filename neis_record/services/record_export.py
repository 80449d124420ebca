# neis_record/services/record_export.py
"""일괄 생성 결과 → 텍스트 파일 (UTF-8)"""
import re
from datetime import datetime
from typing import Iterable, Optional
from urllib.parse import quote

from neis_record.core.constants import ExportFormat, RecordType
from neis_record.schemas.records import StudentResult

_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\r\n]+')


def build_export_text(
    class_name: str,
    record_type: RecordType,
    results: Iterable[StudentResult],
    generated_at: Optional[datetime] = None,
) -> str:
    """
    [{학급} {기록유형}]
    생성일시: ...

    [학생]
    내용

    ---

    (성공한 학생만 포함)
    """
    generated_at = generated_at or datetime.now()
    out = f"[{class_name} {record_type.value}]\n"
    out += f"생성일시: {generated_at.strftime(ExportFormat.TIMESTAMP_FORMAT)}\n\n"
    for r in results:
        if r.status != "success" or not r.content:
            continue
        out += f"[{r.student}]\n"
        out += f"{r.content}\n\n"
        out += f"{ExportFormat.BLOCK_SEPARATOR}\n\n"
    return out


def export_filename(class_name: str, record_type: RecordType, generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or datetime.now()
    stem = f"{class_name}_{record_type.value}_{generated_at.strftime(ExportFormat.FILENAME_DATE_FORMAT)}"
    return _UNSAFE_FILENAME.sub("_", stem) + ".txt"


def content_disposition(filename: str) -> str:
    # 한글 파일명: ASCII 대체 이름 + RFC 5987 filename*
    fallback = filename.encode("ascii", "ignore").decode() or "records.txt"
    if fallback.startswith(("_", ".")):
        fallback = "records" + fallback
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
