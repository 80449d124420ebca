"""
설정 모듈 테스트
ENV 별 설정 클래스 선택, 환경변수 오버라이드, 값 검증
"""
import importlib

import pytest
from pydantic import ValidationError

from neis_record.core.settings import BaseConfig, ProductionConfig, get_settings

# core 패키지의 `settings` 는 인스턴스이므로 모듈은 직접 가져옴
settings_module = importlib.import_module("neis_record.core.settings")


class TestSettingsSelection:
    """ENV 에 따른 설정 클래스 선택"""

    def test_test_profile(self, monkeypatch):
        monkeypatch.setenv("ENV", "test")
        config = get_settings()

        assert isinstance(config, settings_module.TestConfig)
        assert config.BATCH_DELAY_MS == 0
        assert config.batch_delay_s == 0.0

    def test_production_profile(self, monkeypatch):
        monkeypatch.setenv("ENV", "prod")
        config = get_settings()

        assert isinstance(config, ProductionConfig)
        assert config.is_production
        assert config.LOG_LEVEL == "WARNING"


class TestSettingsSource:
    """환경변수 / .env 설정"""

    def test_model_config(self):
        assert BaseConfig.model_config["env_file"] == ".env"
        assert BaseConfig.model_config["case_sensitive"] is True
        assert BaseConfig.model_config["extra"] == "ignore"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("BATCH_DELAY_MS", "250")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        config = BaseConfig()

        assert config.batch_delay_s == 0.25
        assert config.LOG_LEVEL == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")
        with pytest.raises(ValidationError):
            BaseConfig()
