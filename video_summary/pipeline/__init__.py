"""
Pipeline module for video summaries.

Provides a stage-based architecture: resolve source text, build the prompt,
call the model, recover the JSON result.
"""

from .base import Stage, SummaryOutcome, VideoSummaryPipeline, MODE_TEXT, MODE_NEED_TEXT
from .context import SummaryContext
from .errors import (
    PipelineError,
    ClientInputError,
    ConfigError,
    TranscriptFetchError,
    UpstreamError,
    MalformedOutputError,
    UnexpectedError,
)

__all__ = [
    # Core classes
    "Stage",
    "VideoSummaryPipeline",
    "SummaryOutcome",
    "SummaryContext",
    "MODE_TEXT",
    "MODE_NEED_TEXT",
    # Exceptions
    "PipelineError",
    "ClientInputError",
    "ConfigError",
    "TranscriptFetchError",
    "UpstreamError",
    "MalformedOutputError",
    "UnexpectedError",
]
