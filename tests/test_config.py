import pytest

from video_summary import config
from conftest import reset_config_caches


def test_gemini_config_defaults(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-test")

    reset_config_caches()
    cfg = config.get_gemini_config()
    assert cfg.api_key == "g-test"
    assert cfg.model_name == "gemini-2.5-flash"
    assert cfg.api_base == "https://generativelanguage.googleapis.com/v1beta"
    assert cfg.temperature == 0.3
    assert cfg.timeout_seconds == 60.0


def test_gemini_config_falls_back_to_google_api_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "legacy-key")

    reset_config_caches()
    assert config.get_gemini_config().api_key == "legacy-key"


def test_gemini_config_allows_missing_key():
    cfg = config.get_gemini_config()
    assert cfg.api_key is None
    assert config.describe_active_models() == {
        "text_llm": "gemini-2.5-flash",
        "credential_configured": False,
    }


def test_gemini_api_base_trailing_slash_is_trimmed(monkeypatch):
    monkeypatch.setenv("GEMINI_API_BASE", "https://proxy.example/v1beta/")

    reset_config_caches()
    assert config.get_gemini_config().api_base == "https://proxy.example/v1beta"


def test_invalid_timeout_raises(monkeypatch):
    monkeypatch.setenv("GEMINI_TIMEOUT_SECONDS", "soon")

    reset_config_caches()
    with pytest.raises(ValueError, match="GEMINI_TIMEOUT_SECONDS"):
        config.get_gemini_config()


def test_non_positive_timeout_raises(monkeypatch):
    monkeypatch.setenv("TRANSCRIPT_TIMEOUT_SECONDS", "0")

    reset_config_caches()
    with pytest.raises(ValueError, match="must be positive"):
        config.get_transcript_config()


def test_transcript_languages_parsed_from_comma_list(monkeypatch):
    monkeypatch.setenv("TRANSCRIPT_LANGUAGES", "en, de ,,fr")

    reset_config_caches()
    assert config.get_transcript_config().languages == ("en", "de", "fr")


def test_pipeline_config_defaults():
    cfg = config.get_pipeline_config()
    assert cfg.build_id == "video-summary-v2-2026-02-11"
    assert cfg.strip_code_fences is False
    assert cfg.log_level == "INFO"


def test_pipeline_config_reads_toggles(monkeypatch):
    monkeypatch.setenv("RECOVERY_STRIP_CODE_FENCES", "yes")
    monkeypatch.setenv("BUILD_ID", "build-42")

    reset_config_caches()
    cfg = config.get_pipeline_config()
    assert cfg.strip_code_fences is True
    assert cfg.build_id == "build-42"


def test_server_config_defaults():
    cfg = config.get_server_config()
    assert cfg.allowed_origins == ("https://lovable.dev",)
    assert cfg.allowed_origin_suffixes == (".lovable.app",)
    assert cfg.allow_client_api_key is False
    assert cfg.sentry_dsn is None
