from __future__ import annotations


class HealthTranslateError(Exception):
    pass


class CaptureUnavailable(HealthTranslateError):
    def __init__(self, detail: str = "No speech capture capability in this environment.") -> None:
        super().__init__(detail)


class AlreadyRecording(HealthTranslateError):
    def __init__(self) -> None:
        super().__init__("A recording session is already active.")


class CaptureError(HealthTranslateError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Speech capture failed: {reason}")
        self.reason = reason


class TranslationEndpointError(HealthTranslateError):
    """Transport, auth or rate-limit failure talking to the completion endpoint."""


class AuthenticationMissing(TranslationEndpointError):
    def __init__(self, env_var: str = "OPENROUTER_API_KEY") -> None:
        super().__init__(f"{env_var} is not set.")
        self.env_var = env_var


class MalformedReply(HealthTranslateError):
    def __init__(self, raw_snippet: str) -> None:
        super().__init__(f"Completion reply is not a JSON object: {raw_snippet!r}")
        self.raw_snippet = raw_snippet


class StaleResponseDiscarded(HealthTranslateError):
    def __init__(self, seq: int, latest_seq: int) -> None:
        super().__init__(f"Reply for request #{seq} discarded; latest is #{latest_seq}.")
        self.seq = seq
        self.latest_seq = latest_seq


class TranslationFailed(HealthTranslateError):
    def __init__(self, cause: Exception) -> None:
        super().__init__(str(cause))
        self.cause = cause
