"""
Processing context for pipeline stages.

The SummaryContext is the per-request state passed through all stages. Each
stage reads its inputs from the context and writes its outputs back, which
keeps data flow explicit. A context is never shared between requests.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..schema import AnalysisRequest
    from ..transcripts import NeedsTextSignal, SourceText


def _new_request_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class SummaryContext:
    """
    Shared state passed through pipeline stages.

    Attributes:
        request: Validated caller input
        api_key: Optional pass-through key for the generation call
        request_id: Short id used to prefix log lines

        source: Resolved text and its origin (set by SourceResolutionStage)
        needs_text: Set instead of source when no text is usable
        prompt: Built analysis prompt (set by PromptBuildingStage)
        raw_output: Unprocessed model text (set by GenerationStage)
        result: Recovered JSON object (set by RecoveryStage)
    """

    request: "AnalysisRequest"
    api_key: Optional[str] = None
    request_id: str = field(default_factory=_new_request_id)

    # Stage 1: Source resolution outputs
    source: Optional["SourceText"] = None
    needs_text: Optional["NeedsTextSignal"] = None

    # Stage 2: Prompt outputs
    prompt: Optional[str] = None

    # Stage 3: Generation outputs
    raw_output: Optional[str] = None

    # Stage 4: Recovery outputs
    result: Optional[Dict[str, Any]] = None

    start_time: float = field(default_factory=time.time)

    # Stage tracking
    completed_stages: List[str] = field(default_factory=list)
    skipped_stages: List[str] = field(default_factory=list)
    failed_stages: List[str] = field(default_factory=list)

    def mark_stage_complete(self, stage_name: str) -> None:
        if stage_name not in self.completed_stages:
            self.completed_stages.append(stage_name)

    def mark_stage_skipped(self, stage_name: str) -> None:
        if stage_name not in self.skipped_stages:
            self.skipped_stages.append(stage_name)

    def mark_stage_failed(self, stage_name: str) -> None:
        if stage_name not in self.failed_stages:
            self.failed_stages.append(stage_name)

    def elapsed_time(self) -> float:
        """Get elapsed time since processing started."""
        return time.time() - self.start_time

    @property
    def source_origin(self) -> Optional[str]:
        return self.source.origin if self.source else None

    def to_summary(self) -> Dict[str, Any]:
        """Generate a summary of the processing context for logs."""
        return {
            "request_id": self.request_id,
            "elapsed_time": round(self.elapsed_time(), 2),
            "source_origin": self.source_origin,
            "needs_text": self.needs_text is not None,
            "completed_stages": self.completed_stages,
            "skipped_stages": self.skipped_stages,
            "failed_stages": self.failed_stages,
            "raw_output_chars": len(self.raw_output or ""),
        }
