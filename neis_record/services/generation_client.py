"""
생성 모델 클라이언트
Gemini REST(generateContent)를 httpx 로 호출하고 응답 텍스트만 돌려준다

- 고정 생성 설정(temperature/topK/topP/maxOutputTokens) 적용
- 비정상 HTTP 상태, 네트워크 오류, 타임아웃 → UpstreamError
- 응답 envelope 에 텍스트 없음 → MalformedResponseError
- 재시도 없음 (재생성은 호출자가 명시적으로)
"""
import logging
from typing import Any, Callable, Dict, Optional, Protocol

import httpx
from pydantic import BaseModel, ConfigDict

from neis_record.core.constants import ErrorMessages, HTTPHeaders, Timeouts
from neis_record.core.exceptions import ApiKeyError, MalformedResponseError, UpstreamError
from neis_record.core.settings import settings

logger = logging.getLogger(__name__)

API_KEY_PREFIX = "AIza"
_DETAIL_LIMIT = 500


class GenerationClient(Protocol):
    def generate(self, prompt: str) -> str: ...


class GenerationConfig(BaseModel):
    """모델 생성 설정 (요청마다 동일)"""
    model_config = ConfigDict(frozen=True)

    temperature: float = 0.7
    top_k: int = 32
    top_p: float = 1.0
    max_output_tokens: int = 2048

    @classmethod
    def from_settings(cls) -> "GenerationConfig":
        return cls(
            temperature=settings.LLM_TEMPERATURE,
            top_k=settings.LLM_TOP_K,
            top_p=settings.LLM_TOP_P,
            max_output_tokens=settings.LLM_MAX_TOKENS,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "topK": self.top_k,
            "topP": self.top_p,
            "maxOutputTokens": self.max_output_tokens,
        }


def resolve_api_key(request_key: Optional[str] = None) -> str:
    """
    서버 설정 키 우선, 없으면 요청 본문의 키 사용

    Raises:
        ApiKeyError: 키 누락 또는 Gemini 키 형식(AIza...) 아님
    """
    key = (settings.GEMINI_API_KEY or request_key or "").strip()
    if not key:
        raise ApiKeyError(missing=True)
    if not key.startswith(API_KEY_PREFIX):
        raise ApiKeyError(missing=False)
    return key


class GeminiClient:
    """
    Gemini generateContent 동기 클라이언트
    httpx.Client 기반 (transport 주입으로 테스트 가능)
    """

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        config: Optional[GenerationConfig] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model or settings.GEMINI_MODEL_NAME
        self.api_base = (api_base or settings.GEMINI_API_BASE).rstrip("/")
        self.config = config or GenerationConfig.from_settings()
        self.timeout = timeout or settings.LLM_TIMEOUT_S or Timeouts.LLM_API
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def _get_client(self) -> httpx.Client:
        """클라이언트 인스턴스 반환 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout, connect=Timeouts.LLM_CONNECT),
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """클라이언트 연결 종료"""
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def build_body(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.config.to_payload(),
        }

    def generate(self, prompt: str) -> str:
        """
        프롬프트 1건 생성

        Returns:
            앞뒤 공백을 제거한 생성 텍스트

        Raises:
            UpstreamError: HTTP 비정상 응답 / 네트워크 오류 / 타임아웃
            MalformedResponseError: 응답에 텍스트가 없음
        """
        client = self._get_client()
        try:
            response = client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.build_body(prompt),
                headers={HTTPHeaders.CONTENT_TYPE: HTTPHeaders.JSON_CONTENT},
            )
        except httpx.TimeoutException as e:
            logger.error("gemini_timeout", extra={"model": self.model, "timeout_s": self.timeout})
            raise UpstreamError(
                upstream_status=None,
                detail="timeout",
                provider=self.provider,
                message=ErrorMessages.GENERATION_TIMEOUT,
                original_error=e,
                timeout=True,
            )
        except httpx.RequestError as e:
            logger.error("gemini_request_error", extra={"model": self.model, "error_type": type(e).__name__})
            raise UpstreamError(
                upstream_status=None,
                detail=f"{type(e).__name__}: {e}",
                provider=self.provider,
                original_error=e,
            )

        if not response.is_success:
            detail = _error_detail(response)
            logger.error(
                "gemini_http_error",
                extra={"model": self.model, "status": response.status_code, "detail": detail},
            )
            raise UpstreamError(
                upstream_status=response.status_code,
                detail=detail,
                provider=self.provider,
            )

        try:
            data = response.json()
        except ValueError:
            raise MalformedResponseError("response body is not JSON", provider=self.provider)

        text = extract_text(data)
        logger.debug("gemini_generated", extra={"model": self.model, "chars": len(text)})
        return text


def extract_text(data: Any) -> str:
    """candidates[0].content.parts[0].text 추출"""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        reason = ""
        if isinstance(data, dict):
            feedback = data.get("promptFeedback") or {}
            reason = feedback.get("blockReason") or ""
        raise MalformedResponseError(
            "candidates[0].content.parts[0].text missing" + (f" (blockReason={reason})" if reason else "")
        )
    if not isinstance(text, str) or not text.strip():
        raise MalformedResponseError("empty text in response")
    return text.strip()


def _error_detail(response: httpx.Response) -> str:
    # {"error": {"message": ...}} 외의 형태({"error": "..."}, 배열, 본문 없음)도 허용, 절대 raise 하지 않음
    message = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            message = err.get("message") or err.get("status")
        elif err:
            message = err
    if message:
        return str(message)[:_DETAIL_LIMIT]
    try:
        text = response.text
    except (UnicodeDecodeError, LookupError):
        text = ""
    return (text or response.reason_phrase or "")[:_DETAIL_LIMIT]


ClientFactory = Callable[[str], GenerationClient]


def gemini_client_factory(api_key: str) -> GenerationClient:
    return GeminiClient(api_key=api_key)


def get_client_factory() -> ClientFactory:
    """FastAPI 의존성: API 키 → 생성 클라이언트 (테스트에서 override)"""
    return gemini_client_factory
