"""
Transcript source resolution for ad URLs.

Decides whether captions can be fetched for a URL (YouTube only), fetches them
through youtube-transcript-api, and falls back to caller-supplied caption or
dialogue text. Fetch failures never propagate: they come back as an explicit
FetchFailed outcome and the resolver decides what to do with them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

import requests
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

from .config import TranscriptConfig, get_transcript_config
from .pipeline.errors import TranscriptFetchError

logger = logging.getLogger(__name__)

YOUTUBE_HOST_REGEX = re.compile(
    r"^(?:https?://)?(?:[a-z0-9-]+\.)?(?:youtube\.com|youtu\.be|youtube-nocookie\.com)(?:[/?#:]|$)",
    re.IGNORECASE,
)

VIDEO_ID_PATTERNS = [
    re.compile(r"[?&]v=([A-Za-z0-9_-]{11})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
    re.compile(r"/(?:shorts|embed|live|v)/([A-Za-z0-9_-]{11})"),
]

NEED_TEXT_SUMMARY = (
    "No transcript could be extracted from this URL. For TikTok/Facebook/Xiaohongshu "
    "or music-only ads, please paste the caption or transcript into fallback_caption."
)

# Provider contract: video_id -> transcript text. Raises TranscriptFetchError.
TranscriptProvider = Callable[[str], str]


@dataclass(frozen=True)
class Fetched:
    """Captions were retrieved."""

    text: str


@dataclass(frozen=True)
class FetchFailed:
    """Platform is supported but the fetch did not produce captions."""

    reason: str
    message: str = ""


@dataclass(frozen=True)
class Unsupported:
    """No caption capability exists for this URL; nothing was attempted."""

    reason: str = "unsupported_platform"


FetchOutcome = Union[Fetched, FetchFailed, Unsupported]


@dataclass(frozen=True)
class SourceText:
    """The text handed to the model and where it came from."""

    text: str
    origin: str  # "transcript" | "caption" | "dialogue"
    fetch_outcome: FetchOutcome


@dataclass(frozen=True)
class NeedsTextSignal:
    """Normal terminal outcome: no usable text, the caller must paste some."""

    fetch_outcome: FetchOutcome
    summary: str = NEED_TEXT_SUMMARY


class _TimeoutSession(requests.Session):
    """requests.Session that applies a default timeout to every request."""

    def __init__(self, timeout: float):
        super().__init__()
        self._timeout = timeout

    def request(self, method, url, **kwargs):  # type: ignore[override]
        kwargs.setdefault("timeout", self._timeout)
        return super().request(method, url, **kwargs)


def is_supported_platform(url: str) -> bool:
    """Return True when captions can be fetched automatically for this URL."""
    return bool(YOUTUBE_HOST_REGEX.match(url.strip()))


def extract_video_id(url: str) -> Optional[str]:
    """Extract the 11-character YouTube video id, or None."""
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def _youtube_provider(config: TranscriptConfig) -> TranscriptProvider:
    def _fetch(video_id: str) -> str:
        with _TimeoutSession(config.timeout_seconds) as session:
            api = YouTubeTranscriptApi(http_client=session)
            try:
                try:
                    fetched = api.fetch(video_id, languages=list(config.languages))
                except NoTranscriptFound:
                    # Preferred languages missing; take whatever track exists
                    available = list(api.list(video_id))
                    if not available:
                        raise
                    fetched = available[0].fetch()
            except TranscriptsDisabled as exc:
                raise TranscriptFetchError(str(exc), reason="transcripts_disabled", cause=exc) from exc
            except NoTranscriptFound as exc:
                raise TranscriptFetchError(str(exc), reason="no_transcript", cause=exc) from exc
            except VideoUnavailable as exc:
                raise TranscriptFetchError(str(exc), reason="video_unavailable", cause=exc) from exc
            except CouldNotRetrieveTranscript as exc:
                raise TranscriptFetchError(str(exc), reason="not_retrievable", cause=exc) from exc
            except requests.Timeout as exc:
                raise TranscriptFetchError(str(exc), reason="timeout", cause=exc) from exc
            except requests.RequestException as exc:
                raise TranscriptFetchError(str(exc), reason="network_error", cause=exc) from exc
        return " ".join(snippet.text for snippet in fetched.snippets)

    return _fetch


def fetch_transcript(
    url: str,
    *,
    provider: Optional[TranscriptProvider] = None,
    config: Optional[TranscriptConfig] = None,
) -> FetchOutcome:
    """
    Attempt a caption fetch for the URL.

    Never raises: every failure is returned as FetchFailed.
    """
    if not is_supported_platform(url):
        return Unsupported()

    video_id = extract_video_id(url)
    if not video_id:
        return FetchFailed(reason="no_video_id", message=f"Cannot extract YouTube video id from {url!r}")

    fetch = provider or _youtube_provider(config or get_transcript_config())
    try:
        text = fetch(video_id)
    except TranscriptFetchError as exc:
        return FetchFailed(reason=exc.reason, message=str(exc))
    except Exception as exc:  # noqa: BLE001
        return FetchFailed(reason="unexpected_error", message=str(exc))

    if not text or not text.strip():
        return FetchFailed(reason="empty_transcript")
    return Fetched(text=text.strip())


def _first_non_empty(candidates: Sequence[tuple]) -> Optional[tuple]:
    for origin, value in candidates:
        if isinstance(value, str) and value.strip():
            return origin, value.strip()
    return None


def resolve_source_text(
    ad_url: str,
    fallback_caption: Optional[str] = None,
    fallback_dialogue: Optional[str] = None,
    *,
    provider: Optional[TranscriptProvider] = None,
    config: Optional[TranscriptConfig] = None,
) -> Union[SourceText, NeedsTextSignal]:
    """
    Decide which text the model will analyse.

    Precedence: fetched transcript > fallback_caption > fallback_dialogue.
    The first non-empty candidate wins; candidates are never concatenated.
    """
    outcome = fetch_transcript(ad_url, provider=provider, config=config)

    if isinstance(outcome, Fetched):
        return SourceText(text=outcome.text, origin="transcript", fetch_outcome=outcome)

    if isinstance(outcome, FetchFailed):
        logger.debug("Transcript fetch failed for %s: %s", ad_url, outcome.message[:200])

    chosen = _first_non_empty([("caption", fallback_caption), ("dialogue", fallback_dialogue)])
    if chosen is None:
        return NeedsTextSignal(fetch_outcome=outcome)

    origin, text = chosen
    return SourceText(text=text, origin=origin, fetch_outcome=outcome)


__all__ = [
    "Fetched",
    "FetchFailed",
    "Unsupported",
    "FetchOutcome",
    "SourceText",
    "NeedsTextSignal",
    "NEED_TEXT_SUMMARY",
    "is_supported_platform",
    "extract_video_id",
    "fetch_transcript",
    "resolve_source_text",
]
