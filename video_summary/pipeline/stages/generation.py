"""
Stage 3: Generation

Sends the prompt to Gemini once and stores the raw text.
"""

from __future__ import annotations

import logging
from typing import Optional

from ...config import PipelineConfig
from ...gemini import GeminiClient
from ..base import Stage
from ..context import SummaryContext
from ..errors import UnexpectedError

logger = logging.getLogger("video_summary.pipeline.generation")


class GenerationStage(Stage):
    """
    Stage 3: call the generation service.

    Responsibilities:
    - Refuse to start the request when no credential exists (preflight)
    - Make exactly one generateContent call
    - Set ctx.raw_output (possibly "")

    Raises:
        ConfigError: no key available
        UpstreamError: non-2xx, timeout or connection failure
    """

    name = "GenerationStage"

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    def preflight(self, ctx: SummaryContext, config: PipelineConfig) -> None:
        self.client.require_api_key(ctx.api_key)

    def should_run(self, ctx: SummaryContext, config: PipelineConfig) -> bool:
        return ctx.prompt is not None and ctx.raw_output is None

    def validate_inputs(self, ctx: SummaryContext) -> None:
        if not ctx.prompt:
            raise UnexpectedError("prompt is required (run PromptBuildingStage first)", self.name)

    def execute(self, ctx: SummaryContext, config: PipelineConfig) -> SummaryContext:
        ctx.raw_output = self.client.generate(ctx.prompt, api_key=ctx.api_key)
        logger.debug("[%s] Model returned %d chars", ctx.request_id, len(ctx.raw_output))
        return ctx
