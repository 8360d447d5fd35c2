"""
Response envelopes for the video summary endpoint.

One function per outcome; the HTTP layer and the CLI both render through here
so the JSON shape is identical everywhere.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .config import get_pipeline_config
from .pipeline.base import MODE_NEED_TEXT, MODE_TEXT, SummaryOutcome
from .pipeline.errors import PipelineError
from .prompts.ad_summary import RESULT_ARRAY_FIELDS


def _build_id(build_id: Optional[str]) -> str:
    return build_id or get_pipeline_config().build_id


def success_payload(result: Dict[str, Any], build_id: Optional[str] = None) -> Dict[str, Any]:
    """The recovered object as-is, tagged with mode and build id."""
    payload = dict(result)
    payload["mode"] = MODE_TEXT
    payload["build_id"] = _build_id(build_id)
    return payload


def need_text_payload(summary: str, build_id: Optional[str] = None) -> Dict[str, Any]:
    """Guidance envelope returned when no source text was available."""
    payload: Dict[str, Any] = {"mode": MODE_NEED_TEXT, "transcript_summary": summary}
    for field_name in RESULT_ARRAY_FIELDS:
        payload[field_name] = []
    payload["build_id"] = _build_id(build_id)
    return payload


def error_payload(error: PipelineError, build_id: Optional[str] = None) -> Dict[str, Any]:
    payload = error.to_payload()
    payload["build_id"] = _build_id(build_id)
    return payload


def outcome_payload(outcome: SummaryOutcome, build_id: Optional[str] = None) -> Dict[str, Any]:
    if outcome.mode == MODE_NEED_TEXT:
        return need_text_payload(outcome.need_text_summary or "", build_id)
    return success_payload(outcome.result, build_id)


__all__ = ["success_payload", "need_text_payload", "error_payload", "outcome_payload"]
