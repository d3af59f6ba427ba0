"""Per-frame proximity alert engine."""

from __future__ import annotations

from dataclasses import dataclass, field
import threading
from typing import Sequence

from alerts.dispatcher import AlertDispatcher
from alerts.models import DispatchCommand, DispatchResult, DispatchStatus, HazardAssessment
from alerts.prioritizer import select_hazard
from core.logging import logger
from engine.settings import EngineSettings
from interaction.channels import BeepChannel, HapticChannel, SpeechChannel
from vision.buckets import bucket_distance, bucket_horizontal
from vision.detections import ContextualDetection, Detection, DetectionFrame
from vision.distance import estimate_distance
from vision.filtering import filter_detections
from vision.matching import Match, match_detections
from vision.trend import classify_approach


@dataclass(frozen=True)
class EngineState:
    """Everything the engine remembers between frames."""

    previous_detections: tuple[ContextualDetection, ...] = ()
    last_alert_ms: int | None = None


@dataclass(frozen=True)
class FrameResult:
    """Outcome of processing one frame."""

    timestamp_ms: int
    assessments: tuple[HazardAssessment, ...] = ()
    selected: HazardAssessment | None = None
    dispatch: DispatchResult = field(
        default_factory=lambda: DispatchResult(status=DispatchStatus.NO_HAZARD)
    )
    frame_id: int | None = None

    @property
    def command(self) -> DispatchCommand | None:
        """The dispatched command, or ``None`` when nothing was issued."""

        if not self.dispatch.dispatched:
            return None
        return self.dispatch.command


class ProximityAlertEngine:
    """Turns per-frame detections into at most one alert.

    One engine serves one camera/detector pipeline. Frames must be fed in
    order; concurrent callers are serialized and the state swap after each
    frame happens in a single assignment.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        speech: SpeechChannel | None = None,
        haptic: HapticChannel | None = None,
        beep: BeepChannel | None = None,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._dispatcher = AlertDispatcher(
            self._settings.dispatch_config(), speech=speech, haptic=haptic, beep=beep
        )
        self._state = EngineState()
        self._lock = threading.Lock()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def dispatcher(self) -> AlertDispatcher:
        return self._dispatcher

    def apply_settings(self, settings: EngineSettings) -> None:
        """Swap settings between frames, keeping the frame history and cooldown."""

        with self._lock:
            self._settings = settings
            self._dispatcher.config = settings.dispatch_config()
        logger.info(
            "[ENGINE] Settings applied (min_score=%.2f cooldown=%sms mode=%s enabled=%s)",
            settings.min_score,
            settings.alert_cooldown_ms,
            settings.audio_mode,
            settings.assist_enabled,
        )

    def reset(self) -> None:
        with self._lock:
            self._state = EngineState()

    def process_frame(self, frame: DetectionFrame) -> FrameResult:
        return self.process(
            frame.detections,
            frame.width,
            frame.height,
            frame.timestamp_ms,
            frame_id=frame.frame_id,
        )

    def process(
        self,
        detections: Sequence[Detection],
        frame_width: int,
        frame_height: int,
        now_ms: int,
        *,
        frame_id: int | None = None,
    ) -> FrameResult:
        """Run filter, match, assess, prioritize and dispatch for one frame."""

        if frame_width <= 0 or frame_height <= 0:
            logger.warning(
                "[ENGINE] Dropping frame %s with invalid size %sx%s",
                frame_id,
                frame_width,
                frame_height,
            )
            return FrameResult(timestamp_ms=now_ms, frame_id=frame_id)

        with self._lock:
            settings = self._settings
            state = self._state

            kept = filter_detections(detections, settings.min_score)
            current = [
                ContextualDetection.from_detection(detection, frame_width, frame_height)
                for detection in kept
            ]
            matches = match_detections(current, state.previous_detections)
            assessments = tuple(
                self.assess(match, frame_width, frame_height, settings) for match in matches
            )
            selected = select_hazard(assessments)
            result = self._dispatcher.dispatch(selected, now_ms, state.last_alert_ms)

            last_alert_ms = now_ms if result.dispatched else state.last_alert_ms
            self._state = EngineState(
                previous_detections=tuple(current),
                last_alert_ms=last_alert_ms,
            )

        return FrameResult(
            timestamp_ms=now_ms,
            assessments=assessments,
            selected=selected,
            dispatch=result,
            frame_id=frame_id,
        )

    @staticmethod
    def assess(
        match: Match,
        frame_width: int,
        frame_height: int,
        settings: EngineSettings,
    ) -> HazardAssessment:
        detection = match.current
        distance_m = estimate_distance(
            detection.hazard_class,
            detection.box.height,
            frame_height,
            settings.focal_length_px,
        )
        distance_m *= settings.distance_scale
        return HazardAssessment(
            match=match,
            distance_m=distance_m,
            distance_bucket=bucket_distance(distance_m),
            horizontal_bucket=bucket_horizontal(detection.center[0], frame_width),
            approaching=classify_approach(match),
        )
