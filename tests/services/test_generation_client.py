"""
GeminiClient 테스트
httpx.MockTransport 로 모델 API 응답을 흉내냄
"""
import json

import httpx
import pytest

from neis_record.core.constants import ErrorCodes
from neis_record.core.exceptions import ApiKeyError, MalformedResponseError, UpstreamError
from neis_record.core.settings import settings
from neis_record.services.generation_client import (
    GeminiClient,
    GenerationConfig,
    extract_text,
    resolve_api_key,
)

from conftest import VALID_API_KEY


def _ok_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _client(handler, **kwargs) -> GeminiClient:
    return GeminiClient(
        api_key=VALID_API_KEY,
        model="gemini-test",
        api_base="https://example.test/v1beta/",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestRequestShape:
    """요청 형식 테스트"""

    def test_body_params_and_config(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_ok_body("성실함."))

        with _client(handler) as client:
            client.generate("프롬프트 본문")

        assert seen["url"].path == "/v1beta/models/gemini-test:generateContent"
        assert seen["url"].params["key"] == VALID_API_KEY
        assert seen["body"]["contents"] == [{"parts": [{"text": "프롬프트 본문"}]}]
        assert seen["body"]["generationConfig"] == {
            "temperature": 0.7,
            "topK": 32,
            "topP": 1.0,
            "maxOutputTokens": 2048,
        }

    def test_custom_config(self):
        config = GenerationConfig(temperature=0.2, max_output_tokens=512)
        payload = config.to_payload()
        assert payload["temperature"] == 0.2
        assert payload["maxOutputTokens"] == 512


class TestSuccess:
    """정상 응답 테스트"""

    def test_text_stripped(self):
        client = _client(lambda request: httpx.Response(200, json=_ok_body("\n  수업에 성실히 참여함.  \n")))
        assert client.generate("p") == "수업에 성실히 참여함."
        client.close()

    def test_extract_text_only_first_part(self):
        data = {"candidates": [{"content": {"parts": [{"text": "첫째"}, {"text": "둘째"}]}}]}
        assert extract_text(data) == "첫째"


class TestUpstreamFailures:
    """HTTP 오류 / 네트워크 오류 / 타임아웃"""

    def test_http_error_status_and_detail(self):
        client = _client(lambda request: httpx.Response(
            500, json={"error": {"code": 500, "message": "Internal error encountered."}}
        ))

        with pytest.raises(UpstreamError) as exc:
            client.generate("p")

        assert exc.value.code == ErrorCodes.UPSTREAM_ERROR
        assert exc.value.status_code == 502
        assert exc.value.upstream_status == 500
        assert exc.value.detail == "Internal error encountered."

    def test_http_error_plain_text_detail_truncated(self):
        client = _client(lambda request: httpx.Response(403, text="x" * 900))

        with pytest.raises(UpstreamError) as exc:
            client.generate("p")

        assert exc.value.upstream_status == 403
        assert len(exc.value.detail) == 500

    @pytest.mark.parametrize("body,detail", [
        ({"error": "quota exceeded"}, "quota exceeded"),
        ({"error": {"status": "RESOURCE_EXHAUSTED"}}, "RESOURCE_EXHAUSTED"),
    ])
    def test_http_error_with_unusual_body(self, body, detail):
        client = _client(lambda request: httpx.Response(429, json=body))

        with pytest.raises(UpstreamError) as exc:
            client.generate("p")

        assert exc.value.upstream_status == 429
        assert exc.value.detail == detail

    def test_http_error_with_list_body(self):
        client = _client(lambda request: httpx.Response(400, json=["unexpected", "list"]))

        with pytest.raises(UpstreamError) as exc:
            client.generate("p")

        assert "unexpected" in exc.value.detail

    def test_timeout_maps_to_gateway_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamError) as exc:
            _client(handler).generate("p")

        assert exc.value.status_code == 504
        assert exc.value.upstream_status is None
        assert exc.value.detail == "timeout"

    def test_connect_error(self, capture_logs):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError) as exc:
            _client(handler).generate("p")

        assert exc.value.upstream_status is None
        assert exc.value.detail.startswith("ConnectError")
        assert "gemini_request_error" in capture_logs.get_messages()


class TestMalformedResponses:
    """응답 envelope 이상"""

    def test_non_json_body(self):
        client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(MalformedResponseError) as exc:
            client.generate("p")
        assert exc.value.code == ErrorCodes.MALFORMED_RESPONSE

    @pytest.mark.parametrize("body", [
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [{"content": {"parts": [{"text": "   "}]}}]},
    ])
    def test_missing_or_empty_text(self, body):
        client = _client(lambda request: httpx.Response(200, json=body))
        with pytest.raises(MalformedResponseError):
            client.generate("p")

    def test_block_reason_in_detail(self):
        with pytest.raises(MalformedResponseError) as exc:
            extract_text({"promptFeedback": {"blockReason": "SAFETY"}})
        assert "blockReason=SAFETY" in exc.value.detail


class TestResolveApiKey:
    """API 키 결정"""

    def test_request_key_used_when_server_key_absent(self, monkeypatch):
        monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
        assert resolve_api_key(f"  {VALID_API_KEY} ") == VALID_API_KEY

    def test_server_key_takes_precedence(self, monkeypatch):
        server_key = "AIza" + "s" * 35
        monkeypatch.setattr(settings, "GEMINI_API_KEY", server_key)
        assert resolve_api_key(VALID_API_KEY) == server_key

    @pytest.mark.parametrize("key", [None, "", "   "])
    def test_missing(self, monkeypatch, key):
        monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
        with pytest.raises(ApiKeyError) as exc:
            resolve_api_key(key)
        assert exc.value.code == ErrorCodes.API_KEY_MISSING
        assert exc.value.status_code == 400

    def test_wrong_format(self, monkeypatch):
        monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
        with pytest.raises(ApiKeyError) as exc:
            resolve_api_key("sk-not-a-gemini-key")
        assert exc.value.code == ErrorCodes.API_KEY_INVALID
