from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from healthtranslate.contracts import (
    Failed,
    Outcome,
    RequestStatus,
    Succeeded,
    TranslationRequest,
    TranslationResult,
)
from healthtranslate.errors import StaleResponseDiscarded, TranslationEndpointError, TranslationFailed
from healthtranslate.nlp.normalizer import normalize_reply
from healthtranslate.nlp.translator.base import Translator
from healthtranslate.pipeline.recording import StopReason

logger = logging.getLogger(__name__)

Dispatch = Callable[[TranslationRequest], None]


class OrchestratorState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def run_request(translator: Translator, req: TranslationRequest) -> Outcome:
    """Blocking round trip: endpoint call, then reply normalization."""
    try:
        raw = translator.translate(req)
    except TranslationEndpointError as e:
        return Failed(e)
    return normalize_reply(raw)


class TranslationOrchestrator:
    """
    Owns the single in-flight translation request.

    submit() tags each request with a monotonically increasing sequence
    number and hands it to `dispatch`, which must eventually call
    complete(seq, outcome) on the controlling thread. A newer submission
    supersedes the pending one; its late reply is discarded.
    """

    def __init__(
        self,
        dispatch: Dispatch,
        *,
        read_input: Callable[[], str],
        target_language_name: Callable[[], str],
        on_result: Optional[Callable[[TranslationResult], None]] = None,
        on_failed: Optional[Callable[[TranslationFailed], None]] = None,
    ) -> None:
        self.dispatch = dispatch
        self.read_input = read_input
        self.target_language_name = target_language_name
        self.on_result = on_result
        self.on_failed = on_failed
        self.state = OrchestratorState.IDLE
        self.result: Optional[TranslationResult] = None
        self.pending: Optional[TranslationRequest] = None
        self.discarded = 0
        self._seq = 0

    @property
    def is_loading(self) -> bool:
        return self.pending is not None

    @property
    def latest_seq(self) -> int:
        return self._seq

    def observe_recording_stopped(self, reason: StopReason) -> Optional[TranslationRequest]:
        logger.debug("orchestrator_observed_stop", extra={"reason": reason.value})
        return self.submit()

    def submit(self) -> Optional[TranslationRequest]:
        text = self.read_input()
        if not text.strip():
            return None

        self._seq += 1
        req = TranslationRequest(
            seq=self._seq,
            source_text=text,
            target_language_name=self.target_language_name(),
        )
        if self.pending is not None:
            self.pending.status = RequestStatus.DISCARDED
            logger.info(
                "translation_superseded",
                extra={"seq": self.pending.seq, "by_seq": req.seq},
            )
        self.pending = req
        self.state = OrchestratorState.PENDING
        logger.info(
            "translation_submitted",
            extra={"seq": req.seq, "chars": len(text), "target": req.target_language_name},
        )
        self.dispatch(req)
        return req

    def complete(self, seq: int, outcome: Outcome) -> RequestStatus:
        if seq != self._seq or self.pending is None:
            self.discarded += 1
            stale = StaleResponseDiscarded(seq, self._seq)
            logger.info("translation_discarded_stale", extra={"seq": seq, "detail": str(stale)})
            return RequestStatus.DISCARDED

        req = self.pending
        self.pending = None

        if isinstance(outcome, Succeeded):
            req.status = RequestStatus.SUCCEEDED
            self.state = OrchestratorState.SUCCEEDED
            logger.info(
                "translation_succeeded",
                extra={"seq": seq, "chars": len(outcome.result.translated_text)},
            )
            # An empty translatedText means "no update".
            if outcome.result.translated_text:
                self.result = outcome.result
                if self.on_result is not None:
                    self.on_result(outcome.result)
            return req.status

        req.status = RequestStatus.FAILED
        self.state = OrchestratorState.FAILED
        logger.warning(
            "translation_failed",
            extra={"seq": seq, "cause": type(outcome.cause).__name__, "detail": str(outcome.cause)},
        )
        if self.on_failed is not None:
            self.on_failed(TranslationFailed(outcome.cause))
        return req.status
