import json

import pytest

from video_summary import config
from video_summary.config import GeminiConfig

CONFIG_ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_API_BASE",
    "GEMINI_TEMPERATURE",
    "GEMINI_TIMEOUT_SECONDS",
    "TRANSCRIPT_TIMEOUT_SECONDS",
    "TRANSCRIPT_LANGUAGES",
    "RECOVERY_STRIP_CODE_FENCES",
    "BUILD_ID",
    "CORS_ALLOWED_ORIGINS",
    "CORS_ALLOWED_ORIGIN_SUFFIXES",
    "ALLOW_CLIENT_API_KEY",
    "LOG_LEVEL",
    "SENTRY_DSN",
)


def reset_config_caches():
    config.get_gemini_config.cache_clear()
    config.get_transcript_config.cache_clear()
    config.get_pipeline_config.cache_clear()
    config.get_server_config.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config_caches()
    yield
    reset_config_caches()


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeSession:
    """Stands in for requests.Session; records every POST."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def gemini_envelope(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def make_gemini_config(api_key="server-key", **overrides):
    values = {
        "api_key": api_key,
        "api_base": "https://gemini.test/v1beta",
        "model_name": "gemini-2.5-flash",
        "temperature": 0.3,
        "timeout_seconds": 5.0,
    }
    values.update(overrides)
    return GeminiConfig(**values)


SAMPLE_RESULT = {
    "mode": "text",
    "transcript_summary": "A flash sale ad urging viewers to buy now.",
    "scene_descriptions": [{"t": "0-3", "visual": "UNKNOWN", "dialogue": "Buy now, limited offer!"}],
    "key_lines": ["Buy now, limited offer!"],
    "candidate_hooks": ["Limited offer"],
    "candidate_pains": ["Missing out"],
    "candidate_shows": ["Product close-up"],
    "ctas": ["Buy now"],
}


@pytest.fixture
def ok_session():
    return FakeSession(FakeResponse(200, gemini_envelope(json.dumps(SAMPLE_RESULT))))
