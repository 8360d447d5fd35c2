"""
Stage 4: Structured Result Recovery
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...config import PipelineConfig
from ...recovery import RecoveryStrategy, build_strategies, recover_structured_result
from ..base import Stage
from ..context import SummaryContext

logger = logging.getLogger("video_summary.pipeline.recovery")


class RecoveryStage(Stage):
    """
    Stage 4: parse raw model text into the result object.

    Raises:
        MalformedOutputError: no strategy produced a JSON object
    """

    name = "RecoveryStage"

    def __init__(self, strategies: Optional[Sequence[RecoveryStrategy]] = None):
        self.strategies = strategies

    def should_run(self, ctx: SummaryContext, config: PipelineConfig) -> bool:
        return ctx.raw_output is not None and ctx.result is None

    def execute(self, ctx: SummaryContext, config: PipelineConfig) -> SummaryContext:
        strategies = self.strategies or build_strategies(config.strip_code_fences)
        ctx.result = recover_structured_result(ctx.raw_output, strategies)
        logger.debug(
            "[%s] Recovered result with keys: %s",
            ctx.request_id, sorted(ctx.result.keys()),
        )
        return ctx
