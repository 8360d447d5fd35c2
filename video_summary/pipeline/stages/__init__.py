"""
Pipeline stages for video summaries.

Stages are executed in order, with each stage reading from and writing to
the per-request SummaryContext.
"""

from typing import List, Optional

from ...gemini import GeminiClient
from ...transcripts import TranscriptProvider
from ..base import Stage
from .source_resolution import SourceResolutionStage
from .prompt_building import PromptBuildingStage
from .generation import GenerationStage
from .recovery import RecoveryStage

__all__ = [
    "SourceResolutionStage",
    "PromptBuildingStage",
    "GenerationStage",
    "RecoveryStage",
    "build_default_stages",
]


def build_default_stages(
    client: Optional[GeminiClient] = None,
    transcript_provider: Optional[TranscriptProvider] = None,
) -> List[Stage]:
    """Default stage order; a fresh list per pipeline."""
    return [
        SourceResolutionStage(provider=transcript_provider),
        PromptBuildingStage(),
        GenerationStage(client=client),
        RecoveryStage(),
    ]
