"""
Stage 2: Prompt Building
"""

from __future__ import annotations

import logging

from ...config import PipelineConfig
from ...prompts import build_analysis_prompt
from ..base import Stage
from ..context import SummaryContext
from ..errors import UnexpectedError

logger = logging.getLogger("video_summary.pipeline.prompt_building")


class PromptBuildingStage(Stage):
    """Stage 2: embed the resolved text in the analysis prompt."""

    name = "PromptBuildingStage"

    def should_run(self, ctx: SummaryContext, config: PipelineConfig) -> bool:
        """Run only when there is source text and no prompt yet."""
        return ctx.source is not None and ctx.prompt is None

    def validate_inputs(self, ctx: SummaryContext) -> None:
        if ctx.source is None or not ctx.source.text.strip():
            raise UnexpectedError("source text is required (run SourceResolutionStage first)", self.name)

    def execute(self, ctx: SummaryContext, config: PipelineConfig) -> SummaryContext:
        ctx.prompt = build_analysis_prompt(ctx.source.text)
        logger.debug("[%s] Prompt built: %d chars", ctx.request_id, len(ctx.prompt))
        return ctx
