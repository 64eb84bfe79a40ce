from __future__ import annotations

from healthtranslate.errors import (
    AuthenticationMissing,
    CaptureError,
    CaptureUnavailable,
    MalformedReply,
    TranslationEndpointError,
    TranslationFailed,
)


def summarize_exception(detail: str, *, max_len: int = 220) -> str:
    text = str(detail or "").strip()
    if not text:
        return "Unknown error."
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    for ln in reversed(lines):
        if ln.startswith(("File ", "^", "Traceback ")):
            continue
        out = ln
        break
    else:
        out = lines[-1]
    if len(out) > max_len:
        return out[: max_len - 3].rstrip() + "..."
    return out


def hint_for_error(err: BaseException) -> str:
    if isinstance(err, TranslationFailed):
        err = err.cause
    if isinstance(err, AuthenticationMissing):
        return f"Set {err.env_var} in the environment or a .env file, then translate again."
    if isinstance(err, MalformedReply):
        return "The model did not return the expected JSON. Press Translate to try again."
    if isinstance(err, TranslationEndpointError):
        s = str(err).lower()
        if "ratelimit" in s or "429" in s:
            return "The translation service is rate limiting requests. Wait a moment and retry."
        if "connection" in s or "timeout" in s:
            return "Could not reach the translation service. Check the network connection."
        return "The translation service returned an error. Check logs for details."
    if isinstance(err, CaptureUnavailable):
        return "No microphone was found. Type the text instead, or connect a microphone and restart."
    if isinstance(err, CaptureError):
        return "Dictation stopped. Check input device selection and app mic permissions."
    return "Check logs for full traceback."
