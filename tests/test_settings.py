"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from src.config import AppSettings, GeminiSettings, get_settings, validate_all_settings


class TestGeminiSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_MAX_ATTEMPTS", raising=False)
        settings = GeminiSettings(_env_file=None)
        assert settings.api_key is None
        assert not settings.is_configured
        assert settings.max_attempts == 1

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        monkeypatch.setenv("GEMINI_MODEL_NAME", "gemini-pro")
        settings = GeminiSettings(_env_file=None)
        assert settings.api_key == "test-key"
        assert settings.model_name == "gemini-pro"
        assert settings.is_configured

    def test_blank_key_is_missing(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "   ")
        assert GeminiSettings(_env_file=None).api_key is None

    def test_attempts_are_bounded(self):
        with pytest.raises(ValidationError):
            GeminiSettings(_env_file=None, max_attempts=0)


class TestAppSettings:

    def test_defaults(self, app_settings):
        assert app_settings.max_receipt_size_bytes == 2 * 1024 * 1024
        assert app_settings.supported_formats_list == ["jpeg", "png", "webp", "gif", "bmp"]
        assert app_settings.currency == "EGP"
        assert app_settings.notice_seconds == 3
        assert app_settings.max_transaction_amount == 100000000.0

    def test_max_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, max_transaction_amount=0)

    def test_max_amount_from_environment(self, monkeypatch):
        monkeypatch.setenv("APP_MAX_TRANSACTION_AMOUNT", "5000")
        assert AppSettings(_env_file=None).max_transaction_amount == 5000.0

    def test_formats_list_is_normalized(self):
        settings = AppSettings(_env_file=None, supported_image_formats=" PNG, jpg ,,")
        assert settings.supported_formats_list == ["png", "jpg"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("APP_CURRENCY", "USD")
        monkeypatch.setenv("APP_SEED_SAMPLE_DATA", "false")
        settings = AppSettings(_env_file=None)
        assert settings.currency == "USD"
        assert settings.seed_sample_data is False


class TestValidateAllSettings:

    @pytest.fixture(autouse=True)
    def fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_missing_gemini_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "")
        status = validate_all_settings()
        assert status["gemini"] is False
        assert status["gemini_error"] == "GEMINI_API_KEY is not set"
        assert status["app"] is True

    def test_configured(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        status = validate_all_settings()
        assert status["gemini"] is True
        assert "gemini_error" not in status

    def test_bad_app_value(self, monkeypatch):
        monkeypatch.setenv("APP_NOTICE_SECONDS", "0")
        status = validate_all_settings()
        assert status["app"] is False
        assert "app_error" in status
