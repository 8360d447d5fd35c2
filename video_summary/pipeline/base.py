"""
Base classes for pipeline architecture.

Provides the Stage base class and the VideoSummaryPipeline orchestrator.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..config import PipelineConfig, get_pipeline_config
from .context import SummaryContext
from .errors import PipelineError, UnexpectedError

if TYPE_CHECKING:
    from ..schema import AnalysisRequest

logger = logging.getLogger("video_summary.pipeline")

MODE_TEXT = "text"
MODE_NEED_TEXT = "need_text"


@dataclass
class SummaryOutcome:
    """
    Successful end of a request.

    Attributes:
        mode: "text" when the model produced a result, "need_text" when no
            source text was available and no model call was made
        result: Recovered JSON object (mode="text" only)
        summary: Context summary for logs
    """
    mode: str
    result: Dict[str, Any] = field(default_factory=dict)
    need_text_summary: Optional[str] = None
    summary: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_context(cls, ctx: SummaryContext) -> "SummaryOutcome":
        if ctx.needs_text is not None:
            return cls(
                mode=MODE_NEED_TEXT,
                need_text_summary=ctx.needs_text.summary,
                summary=ctx.to_summary(),
            )
        if ctx.result is None:
            raise UnexpectedError("Pipeline finished without a result", "VideoSummaryPipeline")
        return cls(mode=MODE_TEXT, result=ctx.result, summary=ctx.to_summary())


class Stage(ABC):
    """
    Base class for pipeline stages.

    Subclasses must implement:
    - name: Unique identifier for the stage
    - should_run(): Determine if stage should execute
    - execute(): Perform stage logic

    Optionally override:
    - preflight(): Checks that must pass before any stage runs
    - validate_inputs(): Validate required inputs exist
    - on_error(): Handle stage-specific errors
    """

    name: str = "BaseStage"

    def preflight(self, ctx: SummaryContext, config: PipelineConfig) -> None:
        """
        Run before the first stage executes.

        Raises:
            PipelineError: to abort the request before any I/O happens
        """

    @abstractmethod
    def should_run(self, ctx: SummaryContext, config: PipelineConfig) -> bool:
        """Return True if the stage should execute for this context."""

    @abstractmethod
    def execute(self, ctx: SummaryContext, config: PipelineConfig) -> SummaryContext:
        """
        Execute the stage logic.

        Returns:
            Updated processing context

        Raises:
            PipelineError: classified failure
        """

    def validate_inputs(self, ctx: SummaryContext) -> None:
        """Override to check for stage-specific requirements."""

    def on_error(self, ctx: SummaryContext, error: Exception) -> None:
        logger.warning(
            "[%s] %s failed: %s: %s",
            ctx.request_id, self.name, type(error).__name__, str(error)[:200],
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class VideoSummaryPipeline:
    """
    Runs the summary stages in order for one request.

    There is no retry: the first classified failure ends the request. Any
    exception that is not a PipelineError is wrapped in UnexpectedError so the
    boundary only ever sees classified errors.

    Usage:
        pipeline = VideoSummaryPipeline(stages=build_default_stages())
        outcome = pipeline.process(request)
    """

    def __init__(
        self,
        stages: List[Stage],
        config: Optional[PipelineConfig] = None,
    ):
        self.stages = stages
        self.config = config or get_pipeline_config()

        names = [s.name for s in stages]
        if len(names) != len(set(names)):
            raise ValueError("Stage names must be unique")

    def process(self, request: "AnalysisRequest", api_key: Optional[str] = None) -> SummaryOutcome:
        """
        Process one request through all stages.

        Raises:
            PipelineError: the single typed failure of this request
        """
        ctx = SummaryContext(request=request, api_key=api_key)
        logger.info("[%s] Summarising %s", ctx.request_id, request.ad_url)

        try:
            for stage in self.stages:
                stage.preflight(ctx, self.config)
            for stage in self.stages:
                ctx = self._run_stage(stage, ctx)
        except PipelineError as e:
            logger.error(
                "[%s] Pipeline failed at %s (%s): %s",
                ctx.request_id, e.stage_name, e.kind, str(e)[:200],
            )
            raise
        except Exception as e:
            logger.exception("[%s] Unexpected error outside a stage", ctx.request_id)
            raise UnexpectedError(str(e) or type(e).__name__, cause=e) from e

        outcome = SummaryOutcome.from_context(ctx)
        logger.info(
            "[%s] Finished in %.2fs - mode=%s, source=%s",
            ctx.request_id, ctx.elapsed_time(), outcome.mode, ctx.source_origin,
        )
        return outcome

    def _run_stage(self, stage: Stage, ctx: SummaryContext) -> SummaryContext:
        if not stage.should_run(ctx, self.config):
            ctx.mark_stage_skipped(stage.name)
            logger.debug("[%s] Skipping stage: %s", ctx.request_id, stage.name)
            return ctx

        try:
            stage.validate_inputs(ctx)
            logger.debug("[%s] Running stage: %s", ctx.request_id, stage.name)
            ctx = stage.execute(ctx, self.config)
        except PipelineError as e:
            stage.on_error(ctx, e)
            ctx.mark_stage_failed(stage.name)
            if e.stage_name is None:
                e.stage_name = stage.name
            raise
        except Exception as e:
            stage.on_error(ctx, e)
            ctx.mark_stage_failed(stage.name)
            logger.exception("[%s] Unexpected error in %s", ctx.request_id, stage.name)
            raise UnexpectedError(str(e) or type(e).__name__, stage.name, cause=e) from e

        ctx.mark_stage_complete(stage.name)
        return ctx
