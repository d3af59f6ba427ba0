"""Tests for the keep-latest frame worker."""

from __future__ import annotations

import threading

from engine.proximity_engine import FrameResult, ProximityAlertEngine
from engine.worker import FrameWorker
from interaction.channels import LoggingBeepChannel, LoggingHapticChannel, LoggingSpeechChannel
from vision.detections import BoundingBox, Detection, DetectionFrame


def _frame(frame_id: int, detections: list[Detection] | None = None) -> DetectionFrame:
    return DetectionFrame(
        timestamp_ms=frame_id * 100,
        width=320,
        height=240,
        detections=detections or [],
        frame_id=frame_id,
    )


class _BlockingEngine:
    """Engine stand-in that holds the first frame until released."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()
        self.seen: list[int | None] = []

    def process_frame(self, frame: DetectionFrame) -> FrameResult:
        self.seen.append(frame.frame_id)
        self.started.set()
        self.release.wait(timeout=2.0)
        return FrameResult(timestamp_ms=frame.timestamp_ms, frame_id=frame.frame_id)


class _ExplodingEngine:
    def __init__(self) -> None:
        self.calls = 0

    def process_frame(self, frame: DetectionFrame) -> FrameResult:
        self.calls += 1
        if frame.frame_id == 1:
            raise RuntimeError("detector glitch")
        return FrameResult(timestamp_ms=frame.timestamp_ms, frame_id=frame.frame_id)


def test_pending_frame_is_replaced_by_newer_one() -> None:
    engine = _BlockingEngine()
    worker = FrameWorker(engine)
    worker.start()
    try:
        assert worker.submit(_frame(1)) is True
        assert engine.started.wait(timeout=2.0)

        assert worker.submit(_frame(2)) is True
        assert worker.submit(_frame(3)) is False

        engine.release.set()
        assert worker.wait_idle(timeout_s=2.0)
    finally:
        worker.stop()

    assert engine.seen == [1, 3]
    stats = worker.stats()
    assert stats.submitted == 3
    assert stats.processed == 2
    assert stats.dropped == 1
    assert worker.get_latest_result().frame_id == 3


def test_engine_failure_does_not_kill_worker() -> None:
    engine = _ExplodingEngine()
    worker = FrameWorker(engine)
    worker.start()
    try:
        worker.submit(_frame(1))
        assert worker.wait_idle(timeout_s=2.0)
        worker.submit(_frame(2))
        assert worker.wait_idle(timeout_s=2.0)
        assert worker.is_alive()
    finally:
        worker.stop()

    assert engine.calls == 2
    assert worker.get_latest_result().frame_id == 2
    assert not worker.is_alive()


def test_subscribers_receive_results_from_real_engine() -> None:
    speech = LoggingSpeechChannel()
    engine = ProximityAlertEngine(
        speech=speech,
        haptic=LoggingHapticChannel(),
        beep=LoggingBeepChannel(),
    )
    worker = FrameWorker(engine)
    received: list[FrameResult] = []

    def broken(result: FrameResult) -> None:
        raise ValueError("subscriber bug")

    worker.subscribe(broken)
    worker.subscribe(received.append)
    worker.start()
    try:
        person = Detection(label="person", score=0.9, box=BoundingBox(100, 50, 140, 200))
        worker.submit(_frame(1, [person]))
        assert worker.wait_idle(timeout_s=2.0)
    finally:
        worker.stop()

    assert len(received) == 1
    assert received[0].command.speech_text == "Person nearby ahead."
    assert speech.utterances == ["Person nearby ahead."]


def test_unsubscribed_handler_is_not_called() -> None:
    engine = _ExplodingEngine()
    worker = FrameWorker(engine)
    received: list[FrameResult] = []
    worker.subscribe(received.append)
    worker.unsubscribe(received.append)
    worker.start()
    try:
        worker.submit(_frame(2))
        assert worker.wait_idle(timeout_s=2.0)
    finally:
        worker.stop()

    assert received == []
