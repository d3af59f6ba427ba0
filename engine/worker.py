"""Single-thread frame worker with a keep-latest input slot."""

from __future__ import annotations

from dataclasses import dataclass
import threading
from typing import Callable

from core.logging import logger
from engine.proximity_engine import FrameResult, ProximityAlertEngine
from vision.detections import DetectionFrame

ResultHandler = Callable[[FrameResult], None]


@dataclass(frozen=True)
class WorkerStats:
    submitted: int
    processed: int
    dropped: int


class FrameWorker:
    """Feeds frames to an engine one at a time on a dedicated thread.

    Producers call ``submit()``; a frame that has not started processing is
    replaced by a newer one and counted as dropped, so at most one frame is
    pending and one is in flight.
    """

    def __init__(self, engine: ProximityAlertEngine, name: str = "proximity-frame-worker") -> None:
        self._engine = engine
        self._name = name
        self._cond = threading.Condition()
        self._pending: DetectionFrame | None = None
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._subscribers: set[ResultHandler] = set()
        self._latest_result: FrameResult | None = None
        self._submitted = 0
        self._processed = 0
        self._dropped = 0
        self._busy = False

    def start(self) -> None:
        """Start the worker thread (safe to call repeatedly)."""

        with self._cond:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stop.clear()
            self._thread = threading.Thread(target=self._loop, name=self._name, daemon=True)
            self._thread.start()
        logger.info("[WORKER] Started %s", self._name)

    def stop(self, timeout_s: float = 2.0) -> None:
        with self._cond:
            thread = self._thread
            self._stop.set()
            self._cond.notify_all()
        if thread is None:
            return
        thread.join(timeout=timeout_s)
        if thread.is_alive():
            logger.warning("[WORKER] %s did not stop within %.2fs", self._name, timeout_s)
            return
        with self._cond:
            self._thread = None
        logger.info(
            "[WORKER] Stopped %s (processed=%s dropped=%s)",
            self._name,
            self._processed,
            self._dropped,
        )

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def submit(self, frame: DetectionFrame) -> bool:
        """Queue ``frame``; returns False when it replaced an unprocessed frame."""

        with self._cond:
            self._submitted += 1
            replaced = self._pending is not None
            if replaced:
                self._dropped += 1
                logger.debug(
                    "[WORKER] Dropping frame %s in favor of %s",
                    self._pending.frame_id,
                    frame.frame_id,
                )
            self._pending = frame
            self._cond.notify_all()
        return not replaced

    def subscribe(self, handler: ResultHandler) -> None:
        with self._cond:
            self._subscribers.add(handler)

    def unsubscribe(self, handler: ResultHandler) -> None:
        with self._cond:
            self._subscribers.discard(handler)

    def get_latest_result(self) -> FrameResult | None:
        with self._cond:
            return self._latest_result

    def stats(self) -> WorkerStats:
        with self._cond:
            return WorkerStats(
                submitted=self._submitted,
                processed=self._processed,
                dropped=self._dropped,
            )

    def wait_idle(self, timeout_s: float | None = None) -> bool:
        """Block until no frame is pending or in flight."""

        with self._cond:
            return self._cond.wait_for(
                lambda: self._pending is None and not self._busy,
                timeout=timeout_s,
            )

    def _loop(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._pending is not None or self._stop.is_set())
                if self._stop.is_set():
                    return
                frame = self._pending
                self._pending = None
                self._busy = True

            result: FrameResult | None = None
            try:
                result = self._engine.process_frame(frame)
            except Exception:
                logger.exception("[WORKER] Frame %s failed", frame.frame_id)

            with self._cond:
                self._processed += 1
                if result is not None:
                    self._latest_result = result
                subscribers = list(self._subscribers)

            if result is not None:
                for handler in subscribers:
                    try:
                        handler(result)
                    except Exception:
                        logger.exception("[WORKER] Result subscriber failed")

            with self._cond:
                self._busy = False
                self._cond.notify_all()
