"""
Recover a JSON object from free-form model output.

Strategies run in order and the first one that yields a JSON object wins:

1. DirectParse: the trimmed text is one JSON value.
2. OuterBraces: the slice from the first "{" to the last "}" parses.

StripCodeFences can lead the chain when RECOVERY_STRIP_CODE_FENCES is set.

There is no bracket balancing and no streaming repair: text holding two
separate objects fails and surfaces as MalformedOutputError. A parsed object
is accepted as-is; nothing checks that the expected keys are present.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Sequence

from .pipeline.errors import MalformedOutputError

logger = logging.getLogger(__name__)

JSON_PARSE_FALLBACK = "JSON_PARSE_FALLBACK"


class RecoveryStrategy:
    """
    One way of turning text into a JSON object.

    attempt() returns the parsed object, or raises ValueError (json's
    JSONDecodeError included) when this strategy cannot recover anything.
    """

    name: str = "base"

    def attempt(self, text: str) -> Dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def _load_object(candidate: str) -> Dict[str, Any]:
        value = json.loads(candidate)
        if not isinstance(value, dict):
            raise ValueError(f"expected a JSON object, got {type(value).__name__}")
        return value

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class DirectParse(RecoveryStrategy):
    name = "direct"

    def attempt(self, text: str) -> Dict[str, Any]:
        return self._load_object(text)


class OuterBraces(RecoveryStrategy):
    name = "extract_object"

    def attempt(self, text: str) -> Dict[str, Any]:
        first = text.find("{")
        last = text.rfind("}")
        if first == -1 or last == -1 or last <= first:
            raise ValueError("no {...} span in text")
        return self._load_object(text[first:last + 1])


class StripCodeFences(RecoveryStrategy):
    """Parse the body of a single ```json fenced block."""

    name = "strip_fences"

    def attempt(self, text: str) -> Dict[str, Any]:
        if not text.startswith("```"):
            raise ValueError("text is not fenced")
        cleaned = text
        first_newline = cleaned.find("\n")
        if first_newline != -1:
            cleaned = cleaned[first_newline + 1:]
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3].rstrip()
        return self._load_object(cleaned)


DEFAULT_STRATEGIES: Sequence[RecoveryStrategy] = (DirectParse(), OuterBraces())


def build_strategies(strip_code_fences: bool = False) -> Sequence[RecoveryStrategy]:
    """Return the strategy chain, optionally led by fence stripping."""
    if strip_code_fences:
        return (StripCodeFences(), *DEFAULT_STRATEGIES)
    return DEFAULT_STRATEGIES


def recover_structured_result(
    raw_text: Optional[str],
    strategies: Optional[Sequence[RecoveryStrategy]] = None,
) -> Dict[str, Any]:
    """
    Parse model output into a JSON object.

    Raises:
        MalformedOutputError: carrying the untouched raw text, when every
            strategy fails.
    """
    raw = raw_text or ""
    trimmed = raw.strip()
    chain = strategies if strategies is not None else DEFAULT_STRATEGIES

    for index, strategy in enumerate(chain):
        try:
            parsed = strategy.attempt(trimmed)
        except ValueError as exc:
            logger.debug("Recovery strategy %s failed: %s", strategy.name, exc)
            continue
        if index > 0:
            logger.warning(
                "Extraction warning [%s]: JSON recovered with strategy=%s",
                JSON_PARSE_FALLBACK, strategy.name,
            )
        return parsed

    logger.error("Model output was not valid JSON. Raw (first 500 chars): %s", raw[:500])
    raise MalformedOutputError(raw)


__all__ = [
    "RecoveryStrategy",
    "DirectParse",
    "OuterBraces",
    "StripCodeFences",
    "DEFAULT_STRATEGIES",
    "build_strategies",
    "recover_structured_result",
]
