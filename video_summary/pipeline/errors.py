"""
Pipeline-specific exceptions.

Every terminal failure of a summary request is one of these kinds. Each kind
knows its HTTP status and renders its own response envelope, so the boundary
never has to inspect a raw exception:

- ClientInputError: missing/invalid ad_url (400)
- ConfigError: server credential missing (500)
- UpstreamError: generation service failed (502)
- MalformedOutputError: model output was not recoverable JSON (502)
- UnexpectedError: anything else (500)

TranscriptFetchError is the one non-terminal kind: the resolver downgrades it
to "no transcript" and it never reaches the caller.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    kind: str = "pipeline_error"
    status_code: int = 500
    public_message: str = "Server error"

    def __init__(self, message: str, stage_name: Optional[str] = None):
        self.stage_name = stage_name
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        """Render the JSON error envelope for this failure."""
        return {"error": self.public_message}


class ClientInputError(PipelineError):
    """The request body is missing or has an invalid ad_url."""

    kind = "client_input"
    status_code = 400
    public_message = "Missing ad_url"


class ConfigError(PipelineError):
    """Operator-fixable configuration problem (no credential)."""

    kind = "config"
    status_code = 500
    public_message = "Missing credential"


class TranscriptFetchError(PipelineError):
    """
    Caption fetch failed.

    Examples:
    - Network error or timeout
    - Captions disabled / none published
    - Video unavailable or geo-restricted
    """

    kind = "transcript_fetch"

    def __init__(self, message: str, reason: str = "fetch_failed", cause: Optional[Exception] = None):
        self.reason = reason
        self.cause = cause
        super().__init__(message, "SourceResolutionStage")


class UpstreamError(PipelineError):
    """The generation service answered with a failure (or not at all)."""

    kind = "upstream"
    status_code = 502
    public_message = "Upstream generation error"

    def __init__(
        self,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        body: str = "",
        stage_name: Optional[str] = "GenerationStage",
    ):
        self.upstream_status = upstream_status
        self.body = body
        super().__init__(message, stage_name)

    @property
    def details(self) -> str:
        return self.body or str(self)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.public_message, "details": self.details}


class MalformedOutputError(PipelineError):
    """No recovery strategy produced a JSON object from the model output."""

    kind = "malformed_output"
    status_code = 502
    public_message = "Invalid structured output"

    def __init__(self, raw_text: str, stage_name: Optional[str] = "RecoveryStage"):
        self.raw_text = raw_text
        super().__init__("Model output was not valid JSON.", stage_name)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.public_message, "raw": self.raw_text}


class UnexpectedError(PipelineError):
    """Wraps any fault that escaped a stage unclassified."""

    kind = "unexpected"
    status_code = 500
    public_message = "Server error"

    def __init__(self, message: str, stage_name: Optional[str] = None, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message, stage_name)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.public_message, "details": str(self)}
