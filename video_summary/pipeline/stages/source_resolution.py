"""
Stage 1: Source Resolution

Chooses the text the model will analyse: fetched captions when available,
otherwise the caller's caption or dialogue.
"""

from __future__ import annotations

import logging
from typing import Optional

from ...config import PipelineConfig, TranscriptConfig
from ...transcripts import (
    FetchFailed,
    NeedsTextSignal,
    TranscriptProvider,
    Unsupported,
    resolve_source_text,
)
from ..base import Stage
from ..context import SummaryContext

logger = logging.getLogger("video_summary.pipeline.source_resolution")


class SourceResolutionStage(Stage):
    """
    Stage 1: resolve SourceText.

    Responsibilities:
    - Attempt a caption fetch for supported platforms
    - Downgrade FetchFailed/Unsupported to fallback text
    - Set ctx.source, or ctx.needs_text when nothing usable exists

    Never raises for fetch problems.
    """

    name = "SourceResolutionStage"

    def __init__(
        self,
        provider: Optional[TranscriptProvider] = None,
        transcript_config: Optional[TranscriptConfig] = None,
    ):
        self.provider = provider
        self.transcript_config = transcript_config

    def should_run(self, ctx: SummaryContext, config: PipelineConfig) -> bool:
        return ctx.source is None and ctx.needs_text is None

    def execute(self, ctx: SummaryContext, config: PipelineConfig) -> SummaryContext:
        request = ctx.request
        resolved = resolve_source_text(
            request.ad_url,
            request.fallback_caption,
            request.fallback_dialogue,
            provider=self.provider,
            config=self.transcript_config,
        )

        outcome = resolved.fetch_outcome
        if isinstance(outcome, FetchFailed):
            logger.info(
                "[%s] Transcript unavailable (%s) %s",
                ctx.request_id, outcome.reason, outcome.message[:200],
            )
        elif isinstance(outcome, Unsupported):
            logger.debug("[%s] No caption provider for this URL", ctx.request_id)

        if isinstance(resolved, NeedsTextSignal):
            ctx.needs_text = resolved
            logger.info("[%s] No usable source text - asking caller for text", ctx.request_id)
            return ctx

        ctx.source = resolved
        logger.debug(
            "[%s] Source resolved: origin=%s, %d chars",
            ctx.request_id, resolved.origin, len(resolved.text),
        )
        return ctx
