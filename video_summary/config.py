"""
Configuration helpers for the video summary service.

All environment variables are read here, once per process, into frozen
dataclasses. Tests call the getters' cache_clear() after changing the env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_BUILD_ID = "video-summary-v2-2026-02-11"
DEFAULT_CORS_ORIGINS = ("https://lovable.dev",)
DEFAULT_CORS_ORIGIN_SUFFIXES = (".lovable.app",)
TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class GeminiConfig:
    """Gemini generateContent credentials and request knobs."""

    api_key: Optional[str]
    api_base: str
    model_name: str
    temperature: float
    timeout_seconds: float


@dataclass(frozen=True)
class TranscriptConfig:
    """Caption provider settings."""

    timeout_seconds: float
    languages: Tuple[str, ...]


@dataclass(frozen=True)
class PipelineConfig:
    """Misc pipeline knobs."""

    log_level: str
    build_id: str
    strip_code_fences: bool


@dataclass(frozen=True)
class ServerConfig:
    """HTTP boundary settings (CORS, key pass-through, error reporting)."""

    allowed_origins: Tuple[str, ...]
    allowed_origin_suffixes: Tuple[str, ...]
    allow_client_api_key: bool
    sentry_dsn: Optional[str]


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Wrapper around os.getenv that trims whitespace."""
    value = os.getenv(name, default)
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or default


def _get_float_env(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a float, got '{raw}'.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def _get_bool_env(name: str, default: bool = False) -> bool:
    raw = _get_env(name)
    if raw is None:
        return default
    return raw.lower() in TRUTHY


def _get_list_env(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = _get_env(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@lru_cache(maxsize=1)
def get_gemini_config() -> GeminiConfig:
    """
    Return Gemini API configuration.

    The key is optional here; the generation client validates presence before
    its first network call so a missing key maps to a ConfigError.
    """
    temperature_raw = _get_env("GEMINI_TEMPERATURE")
    try:
        temperature = float(temperature_raw) if temperature_raw else 0.3
    except ValueError as exc:
        raise ValueError(f"GEMINI_TEMPERATURE must be a float, got '{temperature_raw}'.") from exc
    return GeminiConfig(
        api_key=_get_env("GEMINI_API_KEY") or _get_env("GOOGLE_API_KEY"),
        api_base=(_get_env("GEMINI_API_BASE") or DEFAULT_GEMINI_API_BASE).rstrip("/"),
        model_name=_get_env("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        temperature=temperature,
        timeout_seconds=_get_float_env("GEMINI_TIMEOUT_SECONDS", 60.0),
    )


@lru_cache(maxsize=1)
def get_transcript_config() -> TranscriptConfig:
    """Return caption fetch settings."""
    return TranscriptConfig(
        timeout_seconds=_get_float_env("TRANSCRIPT_TIMEOUT_SECONDS", 15.0),
        languages=_get_list_env("TRANSCRIPT_LANGUAGES", ("en",)) or ("en",),
    )


@lru_cache(maxsize=1)
def get_pipeline_config() -> PipelineConfig:
    """Return misc pipeline toggles."""
    return PipelineConfig(
        log_level=(_get_env("LOG_LEVEL") or "INFO").upper(),
        build_id=_get_env("BUILD_ID") or DEFAULT_BUILD_ID,
        strip_code_fences=_get_bool_env("RECOVERY_STRIP_CODE_FENCES"),
    )


@lru_cache(maxsize=1)
def get_server_config() -> ServerConfig:
    """Return HTTP boundary configuration."""
    return ServerConfig(
        allowed_origins=_get_list_env("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS),
        allowed_origin_suffixes=_get_list_env(
            "CORS_ALLOWED_ORIGIN_SUFFIXES", DEFAULT_CORS_ORIGIN_SUFFIXES
        ),
        allow_client_api_key=_get_bool_env("ALLOW_CLIENT_API_KEY"),
        sentry_dsn=_get_env("SENTRY_DSN"),
    )


def describe_active_models() -> dict:
    """Return a summary of the currently selected provider/model."""
    gemini_cfg = get_gemini_config()
    return {
        "text_llm": gemini_cfg.model_name,
        "credential_configured": bool(gemini_cfg.api_key),
    }


__all__ = [
    "GeminiConfig",
    "TranscriptConfig",
    "PipelineConfig",
    "ServerConfig",
    "get_gemini_config",
    "get_transcript_config",
    "get_pipeline_config",
    "get_server_config",
    "describe_active_models",
]
