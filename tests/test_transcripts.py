from types import SimpleNamespace
from unittest import mock

import pytest
import requests
from youtube_transcript_api import NoTranscriptFound, TranscriptsDisabled

from video_summary import transcripts
from video_summary.config import TranscriptConfig
from video_summary.pipeline.errors import TranscriptFetchError
from video_summary.transcripts import (
    Fetched,
    FetchFailed,
    NeedsTextSignal,
    SourceText,
    Unsupported,
)

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def _failing_provider(reason="transcripts_disabled"):
    def _fetch(video_id):
        raise TranscriptFetchError("captions off", reason=reason)
    return _fetch


@pytest.mark.parametrize(
    "url",
    [
        YOUTUBE_URL,
        "https://youtu.be/dQw4w9WgXcQ",
        "https://m.youtube.com/shorts/dQw4w9WgXcQ",
        "youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ",
    ],
)
def test_youtube_urls_are_supported(url):
    assert transcripts.is_supported_platform(url)
    assert transcripts.extract_video_id(url) == "dQw4w9WgXcQ"


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/clip",
        "https://www.tiktok.com/@brand/video/123",
        "https://notyoutube.com/watch?v=dQw4w9WgXcQ",
    ],
)
def test_other_urls_are_unsupported(url):
    assert not transcripts.is_supported_platform(url)


def test_unsupported_url_never_calls_provider():
    provider = mock.Mock()
    outcome = transcripts.fetch_transcript("https://example.com/clip", provider=provider)
    assert outcome == Unsupported()
    provider.assert_not_called()


def test_youtube_url_without_video_id_fails_without_fetch():
    provider = mock.Mock()
    outcome = transcripts.fetch_transcript("https://www.youtube.com/@somechannel", provider=provider)
    assert isinstance(outcome, FetchFailed)
    assert outcome.reason == "no_video_id"
    provider.assert_not_called()


def test_fetch_success_is_trimmed():
    outcome = transcripts.fetch_transcript(YOUTUBE_URL, provider=lambda vid: "  hello world \n")
    assert outcome == Fetched(text="hello world")


def test_fetch_error_becomes_fetch_failed():
    outcome = transcripts.fetch_transcript(YOUTUBE_URL, provider=_failing_provider("video_unavailable"))
    assert isinstance(outcome, FetchFailed)
    assert outcome.reason == "video_unavailable"


def test_unexpected_provider_error_is_contained():
    def _boom(video_id):
        raise RuntimeError("socket closed")

    outcome = transcripts.fetch_transcript(YOUTUBE_URL, provider=_boom)
    assert outcome == FetchFailed(reason="unexpected_error", message="socket closed")


def test_blank_transcript_is_a_failure():
    outcome = transcripts.fetch_transcript(YOUTUBE_URL, provider=lambda vid: "   ")
    assert outcome == FetchFailed(reason="empty_transcript")


def test_transcript_wins_over_fallbacks():
    resolved = transcripts.resolve_source_text(
        YOUTUBE_URL, "caption text", "dialogue text", provider=lambda vid: "spoken words"
    )
    assert isinstance(resolved, SourceText)
    assert resolved.text == "spoken words"
    assert resolved.origin == "transcript"


def test_failed_fetch_falls_back_to_caption():
    resolved = transcripts.resolve_source_text(
        YOUTUBE_URL, "caption text", "dialogue text", provider=_failing_provider()
    )
    assert resolved.text == "caption text"
    assert resolved.origin == "caption"
    assert isinstance(resolved.fetch_outcome, FetchFailed)


def test_blank_caption_falls_through_to_dialogue():
    resolved = transcripts.resolve_source_text("https://example.com/clip", "   ", " line one ")
    assert resolved.text == "line one"
    assert resolved.origin == "dialogue"
    assert resolved.fetch_outcome == Unsupported()


def test_fallbacks_are_never_concatenated():
    resolved = transcripts.resolve_source_text("https://example.com/clip", "caption", "dialogue")
    assert resolved.text == "caption"


def test_no_text_anywhere_needs_text():
    resolved = transcripts.resolve_source_text(YOUTUBE_URL, "", None, provider=_failing_provider())
    assert isinstance(resolved, NeedsTextSignal)
    assert "fallback_caption" in resolved.summary


class _FakeTranscriptApi:
    fetch_error = None

    def __init__(self, http_client=None):
        self.http_client = http_client

    def fetch(self, video_id, languages=None):
        if self.fetch_error is not None:
            raise self.fetch_error
        return SimpleNamespace(
            snippets=[SimpleNamespace(text="Buy now,"), SimpleNamespace(text="limited offer!")]
        )


def test_youtube_provider_joins_snippets_with_spaces(monkeypatch):
    monkeypatch.setattr(transcripts, "YouTubeTranscriptApi", _FakeTranscriptApi)
    fetch = transcripts._youtube_provider(TranscriptConfig(timeout_seconds=3.0, languages=("en",)))
    assert fetch("dQw4w9WgXcQ") == "Buy now, limited offer!"


def test_youtube_provider_maps_disabled_captions(monkeypatch):
    class _Disabled(_FakeTranscriptApi):
        fetch_error = TranscriptsDisabled("dQw4w9WgXcQ")

    monkeypatch.setattr(transcripts, "YouTubeTranscriptApi", _Disabled)
    fetch = transcripts._youtube_provider(TranscriptConfig(timeout_seconds=3.0, languages=("en",)))
    with pytest.raises(TranscriptFetchError) as excinfo:
        fetch("dQw4w9WgXcQ")
    assert excinfo.value.reason == "transcripts_disabled"


def test_youtube_provider_applies_timeout_and_maps_timeouts(monkeypatch):
    seen = {}

    def _timed_out(self, method, url, **kwargs):
        seen["timeout"] = kwargs.get("timeout")
        raise requests.Timeout("read timed out")

    monkeypatch.setattr(requests.Session, "request", _timed_out)
    fetch = transcripts._youtube_provider(TranscriptConfig(timeout_seconds=0.5, languages=("en",)))

    with pytest.raises(TranscriptFetchError) as excinfo:
        fetch("dQw4w9WgXcQ")
    assert excinfo.value.reason == "timeout"
    assert seen["timeout"] == 0.5


def test_transcript_timeout_is_a_fetch_failure(monkeypatch):
    monkeypatch.setattr(
        requests.Session, "request", mock.Mock(side_effect=requests.Timeout("read timed out"))
    )
    outcome = transcripts.fetch_transcript(
        YOUTUBE_URL, config=TranscriptConfig(timeout_seconds=0.5, languages=("en",))
    )
    assert isinstance(outcome, FetchFailed)
    assert outcome.reason == "timeout"


def test_youtube_provider_falls_back_to_first_available_track(monkeypatch):
    track = SimpleNamespace(fetch=lambda: SimpleNamespace(snippets=[SimpleNamespace(text="hola")]))

    class _OtherLanguageOnly(_FakeTranscriptApi):
        fetch_error = NoTranscriptFound("dQw4w9WgXcQ", ["en"], None)

        def list(self, video_id):
            return [track]

    monkeypatch.setattr(transcripts, "YouTubeTranscriptApi", _OtherLanguageOnly)
    fetch = transcripts._youtube_provider(TranscriptConfig(timeout_seconds=3.0, languages=("en",)))
    assert fetch("dQw4w9WgXcQ") == "hola"


def test_youtube_provider_closes_its_session(monkeypatch):
    close = mock.Mock()
    monkeypatch.setattr(transcripts._TimeoutSession, "close", close)
    monkeypatch.setattr(transcripts, "YouTubeTranscriptApi", _FakeTranscriptApi)

    fetch = transcripts._youtube_provider(TranscriptConfig(timeout_seconds=3.0, languages=("en",)))
    fetch("dQw4w9WgXcQ")

    close.assert_called_once_with()
