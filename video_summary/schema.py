"""
Request model for the video summary endpoint.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .pipeline.errors import ClientInputError


class AnalysisRequest(BaseModel):
    """Caller input: the ad URL plus optional pasted text."""

    ad_url: str = Field(min_length=1)
    fallback_caption: str = ""
    fallback_dialogue: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("ad_url", mode="before")
    @classmethod
    def _strip_url(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("fallback_caption", "fallback_dialogue", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        # Non-string fallbacks are treated as absent
        return value if isinstance(value, str) else ""


def parse_analysis_request(body: Any) -> AnalysisRequest:
    """
    Validate a decoded JSON body.

    Raises:
        ClientInputError: when ad_url is missing, blank or not a string.
    """
    if not isinstance(body, dict):
        body = {}
    try:
        return AnalysisRequest.model_validate(body)
    except ValidationError as exc:
        raise ClientInputError(f"Invalid request: {exc.error_count()} validation error(s)") from exc


__all__ = ["AnalysisRequest", "parse_analysis_request"]
