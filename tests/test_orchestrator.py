from __future__ import annotations

from healthtranslate.contracts import (
    Failed,
    RequestStatus,
    Succeeded,
    TranslationRequest,
    TranslationResult,
)
from healthtranslate.errors import MalformedReply, TranslationEndpointError, TranslationFailed
from healthtranslate.nlp.translator.base import Translator
from healthtranslate.nlp.translator.stub import StubTranslator
from healthtranslate.pipeline.orchestrator import OrchestratorState, TranslationOrchestrator, run_request
from healthtranslate.pipeline.recording import StopReason


class _Env:
    def __init__(self, dispatch, text: str = "") -> None:
        self.text = text
        self.results: list[TranslationResult] = []
        self.failures: list[TranslationFailed] = []
        self.orch = TranslationOrchestrator(
            dispatch,
            read_input=lambda: self.text,
            target_language_name=lambda: "Spanish",
            on_result=self.results.append,
            on_failed=self.failures.append,
        )


def _ok(corrected: str, translated: str) -> Succeeded:
    return Succeeded(TranslationResult(corrected_text=corrected, translated_text=translated))


def test_empty_or_whitespace_submit_is_silent_noop(dispatch) -> None:
    env = _Env(dispatch, text="   \n\t")
    assert env.orch.submit() is None
    assert dispatch.requests == []
    assert env.orch.state == OrchestratorState.IDLE
    assert env.orch.latest_seq == 0
    assert not env.orch.is_loading


def test_submit_carries_text_and_language_name(dispatch) -> None:
    env = _Env(dispatch, text="The patient has a feever")
    req = env.orch.submit()
    assert req is not None
    assert dispatch.requests == [req]
    assert req.seq == 1
    assert req.source_text == "The patient has a feever"
    assert req.target_language_name == "Spanish"
    assert req.status == RequestStatus.PENDING
    assert env.orch.is_loading


def test_success_stores_result_and_clears_pending(dispatch) -> None:
    env = _Env(dispatch, text="hello")
    req = env.orch.submit()
    status = env.orch.complete(req.seq, _ok("hello", "hola"))
    assert status == RequestStatus.SUCCEEDED
    assert req.status == RequestStatus.SUCCEEDED
    assert env.orch.result == TranslationResult("hello", "hola")
    assert env.results == [TranslationResult("hello", "hola")]
    assert not env.orch.is_loading
    assert env.orch.state == OrchestratorState.SUCCEEDED


def test_stale_reply_is_discarded(dispatch) -> None:
    env = _Env(dispatch, text="first")
    r1 = env.orch.submit()
    env.text = "second"
    r2 = env.orch.submit()
    assert (r1.seq, r2.seq) == (1, 2)
    assert r1.status == RequestStatus.DISCARDED

    assert env.orch.complete(2, _ok("second", "segundo")) == RequestStatus.SUCCEEDED
    assert env.orch.complete(1, _ok("first", "primero")) == RequestStatus.DISCARDED

    assert env.orch.result == TranslationResult("second", "segundo")
    assert env.results == [TranslationResult("second", "segundo")]
    assert env.orch.discarded == 1


def test_stale_failure_does_not_surface(dispatch) -> None:
    env = _Env(dispatch, text="first")
    env.orch.submit()
    env.orch.submit()
    assert env.orch.complete(1, Failed(TranslationEndpointError("boom"))) == RequestStatus.DISCARDED
    assert env.failures == []
    assert env.orch.is_loading


def test_failure_keeps_previous_result(dispatch) -> None:
    env = _Env(dispatch, text="hello")
    first = env.orch.submit()
    env.orch.complete(first.seq, _ok("hello", "hola"))

    second = env.orch.submit()
    status = env.orch.complete(second.seq, Failed(MalformedReply("not json at all")))

    assert status == RequestStatus.FAILED
    assert env.orch.state == OrchestratorState.FAILED
    assert env.orch.result == TranslationResult("hello", "hola")
    assert len(env.failures) == 1
    assert isinstance(env.failures[0].cause, MalformedReply)
    assert not env.orch.is_loading
    assert len(dispatch.requests) == 2


def test_empty_translation_is_no_update(dispatch) -> None:
    env = _Env(dispatch, text="hello")
    first = env.orch.submit()
    env.orch.complete(first.seq, _ok("hello", "hola"))
    second = env.orch.submit()
    assert env.orch.complete(second.seq, Succeeded(TranslationResult())) == RequestStatus.SUCCEEDED
    assert env.orch.result == TranslationResult("hello", "hola")
    assert env.results == [TranslationResult("hello", "hola")]


def test_recording_stop_observation_submits(dispatch) -> None:
    env = _Env(dispatch, text="dictated words")
    req = env.orch.observe_recording_stopped(StopReason.ENDED)
    assert req is not None and req.source_text == "dictated words"
    env.text = ""
    assert env.orch.observe_recording_stopped(StopReason.REQUESTED) is None
    assert len(dispatch.requests) == 1


class _RaisingTranslator(Translator):
    @property
    def name(self) -> str:
        return "raising"

    def translate(self, req: TranslationRequest):
        raise TranslationEndpointError("503 upstream")


def test_run_request_converts_endpoint_error() -> None:
    outcome = run_request(_RaisingTranslator(), TranslationRequest(1, "x", "Spanish"))
    assert isinstance(outcome, Failed)
    assert isinstance(outcome.cause, TranslationEndpointError)


def test_run_request_with_stub_normalizes_fenced_reply() -> None:
    outcome = run_request(StubTranslator(), TranslationRequest(1, "fever", "Spanish"))
    assert isinstance(outcome, Succeeded)
    assert outcome.result == TranslationResult("fever", "[Spanish] fever")
