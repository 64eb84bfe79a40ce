from __future__ import annotations

from healthtranslate.app.diagnostics import hint_for_error, summarize_exception
from healthtranslate.errors import (
    AuthenticationMissing,
    CaptureError,
    CaptureUnavailable,
    MalformedReply,
    TranslationEndpointError,
    TranslationFailed,
)


def test_summarize_exception_picks_last_meaningful_line() -> None:
    detail = (
        "Traceback (most recent call last):\n"
        '  File "x.py", line 1, in <module>\n'
        "    boom()\n"
        "RuntimeError: failed to start worker"
    )
    assert summarize_exception(detail) == "RuntimeError: failed to start worker"


def test_summarize_exception_truncates_long_line() -> None:
    out = summarize_exception("ValueError: " + ("x" * 500), max_len=60)
    assert out.startswith("ValueError: ")
    assert out.endswith("...")
    assert len(out) <= 60


def test_summarize_exception_empty() -> None:
    assert summarize_exception("   ") == "Unknown error."


def test_hint_for_missing_key_unwraps_translation_failed() -> None:
    hint = hint_for_error(TranslationFailed(AuthenticationMissing()))
    assert "OPENROUTER_API_KEY" in hint


def test_hints_by_error_type() -> None:
    assert "JSON" in hint_for_error(MalformedReply("oops"))
    assert "rate limiting" in hint_for_error(TranslationEndpointError("RateLimitError: 429"))
    assert "network" in hint_for_error(TranslationEndpointError("APIConnectionError: Connection error."))
    assert "microphone" in hint_for_error(CaptureUnavailable()).lower()
    assert "Dictation stopped" in hint_for_error(CaptureError("no-speech"))


def test_hint_default() -> None:
    assert hint_for_error(RuntimeError("unknown")) == "Check logs for full traceback."
