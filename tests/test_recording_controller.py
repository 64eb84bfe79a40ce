from __future__ import annotations

import pytest

from healthtranslate.errors import AlreadyRecording, CaptureError, CaptureUnavailable
from healthtranslate.pipeline.accumulator import TranscriptAccumulator, compose_input
from healthtranslate.pipeline.recording import RecordingSessionController, RecordingState, StopReason


class _Box:
    def __init__(self, text: str = "") -> None:
        self.text = text


def _controller(capture, box: _Box, stops: list, errors: list) -> RecordingSessionController:
    def _write(text: str) -> None:
        box.text = text

    return RecordingSessionController(
        capture,
        read_input=lambda: box.text,
        write_input=_write,
        on_stopped=stops.append,
        on_capture_error=errors.append,
    )


def test_compose_input_single_space_and_empty_base() -> None:
    assert compose_input("", "hello") == "hello"
    assert compose_input("Before", "hello") == "Before hello"


def test_accumulator_replaces_rather_than_appends() -> None:
    acc = TranscriptAccumulator()
    acc.begin("Base")
    assert acc.replace("the") == "Base the"
    assert acc.replace("the patient") == "Base the patient"
    assert acc.session.live_transcript == "the patient"
    assert acc.session.base_text == "Base"


def test_start_configures_capture_and_snapshots_base(capture) -> None:
    box, stops, errors = _Box("Existing note."), [], []
    ctl = _controller(capture, box, stops, errors)

    ctl.start("en-GB")

    assert ctl.state == RecordingState.ACTIVE
    cfg = capture.configs[-1]
    assert (cfg.language, cfg.continuous, cfg.interim_results) == ("en-GB", True, True)
    assert ctl.accumulator.session.base_text == "Existing note."
    assert ctl.accumulator.session.live_transcript == ""


def test_displayed_input_tracks_every_snapshot(capture) -> None:
    box, stops, errors = _Box("Note:"), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.start("en-US")

    seen = []
    for snap in ["the", "the patient", "the patient has a feever"]:
        capture.listener.on_transcript(snap)
        seen.append(box.text)

    assert seen == ["Note: the", "Note: the patient", "Note: the patient has a feever"]


def test_empty_base_has_no_leading_space(capture) -> None:
    box, stops, errors = _Box(""), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.start("en-US")
    capture.listener.on_transcript("hello")
    assert box.text == "hello"


def test_stop_is_idempotent(capture) -> None:
    box, stops, errors = _Box(), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.start("en-US")

    for _ in range(3):
        ctl.stop()

    assert ctl.state == RecordingState.INACTIVE
    assert stops == [StopReason.REQUESTED]
    assert capture.stop_calls == 1


def test_stop_while_inactive_is_noop(capture) -> None:
    box, stops, errors = _Box(), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.stop()
    assert stops == []
    assert capture.stop_calls == 0


def test_start_while_active_is_rejected(capture) -> None:
    box, stops, errors = _Box(), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.start("en-US")
    with pytest.raises(AlreadyRecording):
        ctl.start("en-US")
    assert len(capture.listeners) == 1
    assert ctl.state == RecordingState.ACTIVE


def test_missing_capture_is_unavailable() -> None:
    box, stops, errors = _Box(), [], []
    ctl = _controller(None, box, stops, errors)
    assert ctl.state == RecordingState.UNAVAILABLE
    assert not ctl.available
    with pytest.raises(CaptureUnavailable):
        ctl.start("en-US")


def test_capture_error_ends_session_and_surfaces_reason(capture) -> None:
    box, stops, errors = _Box(), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.start("en-US")

    capture.listener.on_transcript("partial words")
    capture.listener.on_error("audio-capture")

    assert ctl.state == RecordingState.INACTIVE
    assert stops == [StopReason.ERROR]
    assert len(errors) == 1
    assert isinstance(errors[0], CaptureError)
    assert errors[0].reason == "audio-capture"
    assert box.text == "partial words"


def test_natural_end_is_not_an_error(capture) -> None:
    box, stops, errors = _Box(), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.start("en-US")
    capture.listener.on_end()
    assert ctl.state == RecordingState.INACTIVE
    assert stops == [StopReason.ENDED]
    assert errors == []


def test_events_from_settled_session_are_ignored(capture) -> None:
    box, stops, errors = _Box(), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.start("en-US")
    old = capture.listener
    ctl.stop()

    old.on_transcript("late words")
    old.on_end()
    old.on_error("late")
    assert box.text == ""
    assert stops == [StopReason.REQUESTED]
    assert errors == []

    ctl.start("en-US")
    old.on_transcript("still stale")
    assert box.text == ""
    capture.listener.on_transcript("fresh")
    assert box.text == "fresh"


def test_restart_takes_new_base_text(capture) -> None:
    box, stops, errors = _Box(), [], []
    ctl = _controller(capture, box, stops, errors)
    ctl.start("en-US")
    capture.listener.on_transcript("first part")
    ctl.stop()

    ctl.start("en-US")
    capture.listener.on_transcript("second part")
    assert box.text == "first part second part"


def test_refused_capture_start_leaves_controller_inactive(capture, monkeypatch) -> None:
    box, stops, errors = _Box("Note."), [], []
    ctl = _controller(capture, box, stops, errors)

    def _refuse(config, listener):
        raise CaptureError("previous session still stopping")

    monkeypatch.setattr(capture, "start", _refuse)
    with pytest.raises(CaptureError):
        ctl.start("en-US")
    assert ctl.state == RecordingState.INACTIVE
    assert not ctl.accumulator.session.is_active
    assert stops == []
    assert box.text == "Note."
