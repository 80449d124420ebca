"""
환경 설정 모듈
환경별 설정을 관리하고 유효성 검증 수행
"""
import os
from typing import Optional, List, Dict, Any
from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class BaseConfig(BaseSettings):
    """
    기본 설정 클래스
    모든 환경에서 공통으로 사용되는 설정
    """
    # ===========================================
    # 애플리케이션 설정
    # ===========================================
    SERVICE_NAME: str = Field(default="neis-record-service")
    ENV: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")
    DEBUG: bool = Field(default=False)

    # ===========================================
    # Gemini API 설정
    # ===========================================
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL_NAME: str = Field(default="gemini-2.0-flash-exp")
    GEMINI_API_BASE: str = Field(default="https://generativelanguage.googleapis.com/v1beta")

    # 생성 설정 (고정값: 검증 단계의 글자 수 예산과 맞물림)
    LLM_TIMEOUT_S: float = Field(default=30.0)
    LLM_TEMPERATURE: float = Field(default=0.7)
    LLM_TOP_K: int = Field(default=32)
    LLM_TOP_P: float = Field(default=1.0)
    LLM_MAX_TOKENS: int = Field(default=2048)

    # ===========================================
    # 일괄 생성 설정
    # ===========================================
    BATCH_DELAY_MS: int = Field(default=1000, ge=0)

    # ===========================================
    # CORS 설정
    # ===========================================
    CORS_ORIGINS: str = Field(default="http://localhost:3000")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper

    @field_validator("LLM_TEMPERATURE")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("LLM_TEMPERATURE must be between 0.0 and 2.0")
        return v

    @cached_property
    def cors_origins_list(self) -> List[str]:
        """CORS origins를 리스트로 반환"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @cached_property
    def is_development(self) -> bool:
        """개발 환경 여부"""
        return self.ENV.lower() in ("dev", "development", "local")

    @cached_property
    def is_production(self) -> bool:
        """운영 환경 여부"""
        return self.ENV.lower() in ("prod", "production")

    @property
    def batch_delay_s(self) -> float:
        return self.BATCH_DELAY_MS / 1000.0


class DevelopmentConfig(BaseConfig):
    """개발 환경 설정"""
    ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="DEBUG")


class StagingConfig(BaseConfig):
    """스테이징 환경 설정"""
    ENV: str = Field(default="staging")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")


class ProductionConfig(BaseConfig):
    """운영 환경 설정"""
    ENV: str = Field(default="production")
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="WARNING")


class TestConfig(BaseConfig):
    """테스트 환경 설정"""
    ENV: str = Field(default="test")
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="DEBUG")
    BATCH_DELAY_MS: int = Field(default=0)  # 테스트에서는 대기 없음


def get_settings() -> BaseConfig:
    """
    환경에 맞는 설정 객체 반환

    ENV 환경변수에 따라 적절한 설정 클래스를 선택
    """
    env = os.getenv("ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "dev": DevelopmentConfig,
        "local": DevelopmentConfig,
        "staging": StagingConfig,
        "stage": StagingConfig,
        "production": ProductionConfig,
        "prod": ProductionConfig,
        "test": TestConfig,
        "testing": TestConfig,
    }

    config_class = config_map.get(env, DevelopmentConfig)
    return config_class()


# 전역 설정 인스턴스
settings = get_settings()


# ===========================================
# 설정 검증 함수
# ===========================================

def validate_required_settings() -> List[str]:
    """
    필수 설정이 모두 있는지 검증

    요청 본문으로 API 키를 넘기는 운영 방식도 있으므로 누락은 경고만 남긴다.

    Returns:
        누락된 설정 목록
    """
    missing = []

    if not settings.GEMINI_API_KEY:
        missing.append("GEMINI_API_KEY")
    if settings.is_production and settings.DEBUG:
        missing.append("DEBUG=false")

    return missing


def settings_summary() -> Dict[str, Any]:
    """설정 요약 (민감 정보 제외)"""
    return {
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "log_level": settings.LOG_LEVEL,
        "model": settings.GEMINI_MODEL_NAME,
        "batch_delay_ms": settings.BATCH_DELAY_MS,
        "cors_origins": settings.cors_origins_list,
    }
