"""Hazard and dispatch payload definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from vision.buckets import DistanceBucket, HorizontalBucket
from vision.detections import ContextualDetection, HazardClass
from vision.matching import Match


@dataclass(frozen=True)
class HazardAssessment:
    """Per-detection hazard estimate for a single frame."""

    match: Match
    distance_m: float
    distance_bucket: DistanceBucket
    horizontal_bucket: HorizontalBucket
    approaching: bool

    @property
    def detection(self) -> ContextualDetection:
        return self.match.current

    @property
    def hazard_class(self) -> HazardClass:
        return self.match.current.hazard_class

    @property
    def area_fraction(self) -> float:
        return self.match.current.area_fraction


class HapticIntensity(str, Enum):
    """Vibration tier chosen by the decision table."""

    STRONG_DOUBLE = "strong_double"
    STRONG = "strong"
    LIGHT = "light"


@dataclass(frozen=True)
class HapticPattern:
    """Vibration waveform.

    ``timings_ms`` alternates on and off durations, starting with an on pulse.
    """

    timings_ms: tuple[int, ...]
    amplitude: int
    intensity: HapticIntensity

    @property
    def total_ms(self) -> int:
        return sum(self.timings_ms)


@dataclass(frozen=True)
class BeepPan:
    """Stereo gain pair for the directional beep."""

    left_gain: float
    right_gain: float


@dataclass(frozen=True)
class DispatchCommand:
    """Bundled speech, haptic and beep instruction for one selected hazard."""

    label: str
    speech_text: str
    haptic_pattern: HapticPattern
    beep_pan: BeepPan
    beep_volume: float
    urgency: int
    distance_m: float
    timestamp_ms: int

    def to_dict(self) -> dict[str, object]:
        return {
            "timestamp_ms": self.timestamp_ms,
            "label": self.label,
            "speech_text": self.speech_text,
            "haptic_pattern": {
                "timings_ms": list(self.haptic_pattern.timings_ms),
                "amplitude": self.haptic_pattern.amplitude,
                "intensity": self.haptic_pattern.intensity.value,
            },
            "beep_pan": [self.beep_pan.left_gain, self.beep_pan.right_gain],
            "beep_volume": self.beep_volume,
            "urgency": self.urgency,
            "distance_m": self.distance_m,
        }


class DispatchStatus(str, Enum):
    DISPATCHED = "dispatched"
    DISABLED = "disabled"
    COOLDOWN = "cooldown"
    NOT_QUALIFIED = "not_qualified"
    NO_HAZARD = "no_hazard"


@dataclass(frozen=True)
class ChannelOutcome:
    """Result of invoking one output channel."""

    channel: str
    ok: bool
    error: str | None = None
    fallback: bool = False


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    command: DispatchCommand | None = None
    outcomes: tuple[ChannelOutcome, ...] = field(default_factory=tuple)

    @property
    def dispatched(self) -> bool:
        return self.status is DispatchStatus.DISPATCHED
