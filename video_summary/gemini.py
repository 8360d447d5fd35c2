"""
Gemini generateContent client for the summary prompt.

One request per call, no retries. Failures come back as typed pipeline errors:
ConfigError before any network traffic when no key is available, UpstreamError
for non-2xx answers, timeouts and connection failures.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

from .config import GeminiConfig, get_gemini_config
from .pipeline.errors import ConfigError, UpstreamError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-goog-api-key"


def extract_first_text(envelope: Any) -> str:
    """
    Return the first text part of the first candidate, stripped.

    Any missing level of the envelope yields "" rather than an exception.
    """
    if not isinstance(envelope, dict):
        return ""
    candidates = envelope.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    for part in parts or []:
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            return part["text"].strip()
    return ""


class GeminiClient:
    """
    Thin wrapper over the Gemini REST endpoint.

    The config is injected at construction; the credential is checked by
    require_api_key() before the first request. Without an injected session
    every call goes through requests.post, so one client can be shared by
    concurrent requests.
    """

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or get_gemini_config()
        self.session = session

    @property
    def endpoint(self) -> str:
        return f"{self.config.api_base}/models/{self.config.model_name}:generateContent"

    def require_api_key(self, api_key: Optional[str] = None) -> str:
        """Return the effective key or raise ConfigError."""
        key = (api_key or "").strip() or self.config.api_key
        if not key:
            raise ConfigError("No Gemini API key configured (set GEMINI_API_KEY).")
        return key

    def _build_body(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "responseMimeType": "application/json",
            },
        }

    def generate(self, prompt: str, api_key: Optional[str] = None) -> str:
        """
        Send the prompt and return the raw model text.

        Args:
            prompt: Fully built analysis prompt.
            api_key: Optional pass-through key; defaults to the configured one.
        """
        key = self.require_api_key(api_key)

        logger.info("Calling %s for video summary", self.config.model_name)
        try:
            response = (self.session or requests).post(
                self.endpoint,
                headers={"Content-Type": "application/json", API_KEY_HEADER: key},
                json=self._build_body(prompt),
                timeout=self.config.timeout_seconds,
            )
        except requests.Timeout as exc:
            raise UpstreamError(
                f"Gemini request timed out after {self.config.timeout_seconds:.0f}s"
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"Gemini request failed: {exc}") from exc

        if not response.ok:
            logger.error(
                "Gemini returned HTTP %s: %s", response.status_code, response.text[:500]
            )
            raise UpstreamError(
                f"Gemini API error (HTTP {response.status_code})",
                upstream_status=response.status_code,
                body=response.text,
            )

        try:
            envelope = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise UpstreamError(
                "Gemini returned a non-JSON response envelope",
                upstream_status=response.status_code,
                body=response.text,
            ) from exc

        text = extract_first_text(envelope)
        if not text:
            logger.warning("Gemini response contained no text part")
        return text


__all__ = ["GeminiClient", "extract_first_text", "API_KEY_HEADER"]
