"""
테스트 공통 설정 및 Fixtures
pytest의 conftest.py는 모든 테스트에서 공유되는 fixture를 정의
"""
import os
import sys
import copy
import pytest
from typing import Any, Callable, Dict, Generator, List, Optional

# 설정 모듈이 import 되기 전에 테스트 환경 지정 (BATCH_DELAY_MS=0)
os.environ["ENV"] = "test"
os.environ.pop("GEMINI_API_KEY", None)

# 프로젝트 루트를 path에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

VALID_API_KEY = "AIza" + "x" * 35


# ===========================================
# 환경 설정
# ===========================================

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """테스트 환경 설정"""
    os.environ["ENV"] = "test"
    yield


# ===========================================
# FastAPI 클라이언트
# ===========================================

@pytest.fixture(scope="module")
def app():
    """FastAPI 애플리케이션 인스턴스"""
    from neis_record.main import app as fastapi_app
    return fastapi_app


@pytest.fixture(scope="module")
def client(app) -> Generator:
    """테스트 클라이언트"""
    with TestClient(app) as test_client:
        yield test_client


# ===========================================
# 생성 클라이언트 Fake
# ===========================================

class FakeGenerationClient:
    """
    GeminiClient 대체
    replies 를 순서대로 돌려주며, 값이 Exception 이면 raise
    """

    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies = list(replies or [])
        self.prompts: List[str] = []
        self.closed = False

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else "수업에 성실히 참여함."
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def override_generation_client(app, fake_client):
    """
    get_client_factory 의존성 오버라이드
    생성 API 테스트 시 외부 호출 없이 fake_client 사용
    """
    from neis_record.services.generation_client import get_client_factory

    keys: List[str] = []

    def _factory(api_key: str) -> FakeGenerationClient:
        keys.append(api_key)
        return fake_client

    app.dependency_overrides[get_client_factory] = lambda: _factory
    fake_client.keys = keys
    yield fake_client
    app.dependency_overrides.clear()


# ===========================================
# 요청 샘플 Fixtures
# ===========================================

@pytest.fixture
def observation_session() -> Dict[str, Any]:
    """관찰 세션 1건 (학생 2명)"""
    return {
        "id": "session-1",
        "class_id": "class-1",
        "date": "2024-04-01",
        "subject": "수학",
        "lesson_topic": "분수의 덧셈",
        "students": [
            {
                "student_name": "홍길동",
                "selected_keywords": [
                    {"keyword_id": "active_participation", "category_id": "learning_attitude", "intensity": 3},
                    {"keyword_id": "caring", "category_id": "social_skills", "intensity": 2},
                ],
                "additional_notes": "발표를 자주 함",
            },
            {
                "student_name": "김철수",
                "selected_keywords": [
                    {"keyword_id": "high_concentration", "category_id": "learning_attitude", "intensity": 1},
                ],
            },
        ],
    }


@pytest.fixture
def subject_request() -> Dict[str, Any]:
    """교과학습발달상황 단일 생성 요청"""
    return {
        "studentName": "홍길동",
        "className": "3학년 2반",
        "recordType": "교과학습발달상황",
        "subject": "수학",
        "teacherNotes": "분수 개념을 정확히 이해함.",
        "apiKey": VALID_API_KEY,
    }


@pytest.fixture
def behavior_request() -> Dict[str, Any]:
    """행동특성 및 종합의견 단일 생성 요청"""
    return {
        "studentName": "홍길동",
        "className": "3학년 2반",
        "recordType": "행동특성 및 종합의견",
        "teacherNotes": "모둠 활동에서 친구를 잘 도움.",
        "behaviorCriteria": {
            "observationContext": "모둠 학습",
            "classActivities": "학급 회의",
            "specialEvents": "",
            "selectedValues": ["care", "cooperation"],
        },
        "apiKey": VALID_API_KEY,
    }


@pytest.fixture
def batch_request() -> Dict[str, Any]:
    """일괄 생성 요청 (학생 3명)"""
    return {
        "className": "3학년 2반",
        "recordType": "교과학습발달상황",
        "subject": "수학",
        "teacherNotes": "수업 태도가 바름.",
        "students": [
            {"studentName": "홍길동"},
            {"studentName": "김철수"},
            {"studentName": "이영희"},
        ],
        "apiKey": VALID_API_KEY,
    }


@pytest.fixture
def make_request() -> Callable[..., Any]:
    """RecordGenerationRequest 생성 헬퍼"""
    from neis_record.schemas.records import RecordGenerationRequest

    def _make(**overrides):
        data = {
            "studentName": "홍길동",
            "recordType": "교과학습발달상황",
            "teacherNotes": "분수 개념을 정확히 이해함.",
        }
        data.update(overrides)
        return RecordGenerationRequest.model_validate(copy.deepcopy(data))

    return _make


# ===========================================
# 유틸리티 Fixtures
# ===========================================

@pytest.fixture
def capture_logs():
    """로그 캡처"""
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

        def get_messages(self):
            return [r.getMessage() for r in self.records]

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)
    logger = logging.getLogger()
    logger.addHandler(handler)
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    yield handler
    logger.setLevel(previous)
    logger.removeHandler(handler)
