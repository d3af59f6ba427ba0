"""Alert dispatch: decision table, cooldown gate and channel fan-out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from alerts.models import (
    ChannelOutcome,
    DispatchCommand,
    DispatchResult,
    DispatchStatus,
    HapticIntensity,
    HapticPattern,
    HazardAssessment,
)
from alerts.profiles import AlertProfile, beep_pan_for, profile_for
from core.logging import logger
from interaction.channels import BeepChannel, HapticChannel, SpeechChannel
from vision.buckets import DistanceBucket

AUDIO_MODES = ("both", "tts", "beep")

_URGENCY = {
    DistanceBucket.NEAR: 2,
    DistanceBucket.MEDIUM: 1,
    DistanceBucket.FAR: 0,
}


@dataclass(frozen=True)
class DispatchConfig:
    """Configuration values for alert dispatch."""

    assist_enabled: bool = True
    cooldown_ms: int = 1500
    audio_mode: str = "both"
    vibration_strength: int = 150
    far_min_area_fraction: float = 0.02
    fallback_utterance: str = "beep"


def in_cooldown(now_ms: int, last_alert_ms: int | None, cooldown_ms: int) -> bool:
    if last_alert_ms is None:
        return False
    return (now_ms - last_alert_ms) < cooldown_ms


def _speech_for(assessment: HazardAssessment, profile: AlertProfile) -> str:
    side = assessment.horizontal_bucket.value
    return profile.side_template.format(label=profile.spoken_label, side=side)


def decide(
    assessment: HazardAssessment, far_min_area_fraction: float = 0.02
) -> tuple[str, HapticIntensity] | None:
    """Apply the decision table; ``None`` means the hazard does not warrant an alert."""

    profile = profile_for(assessment.hazard_class)
    label = profile.spoken_label
    bucket = assessment.distance_bucket

    if assessment.approaching and bucket is DistanceBucket.NEAR:
        return profile.approaching_near_template.format(label=label), HapticIntensity.STRONG_DOUBLE
    if bucket is DistanceBucket.NEAR:
        return profile.near_template.format(label=label), HapticIntensity.STRONG
    if bucket is DistanceBucket.MEDIUM:
        return _speech_for(assessment, profile), HapticIntensity.LIGHT
    if assessment.area_fraction > far_min_area_fraction:
        return _speech_for(assessment, profile), HapticIntensity.LIGHT
    return None


def build_haptic_pattern(
    profile: AlertProfile, intensity: HapticIntensity, vibration_strength: int
) -> HapticPattern:
    """Class timings are fixed; the tier only changes amplitude."""

    timings = tuple(profile.vibration_ms)
    amplitude = int(vibration_strength)
    if intensity is HapticIntensity.LIGHT:
        amplitude = amplitude // 2
    return HapticPattern(timings_ms=timings, amplitude=amplitude, intensity=intensity)


def build_command(
    assessment: HazardAssessment, config: DispatchConfig, now_ms: int
) -> DispatchCommand | None:
    decision = decide(assessment, config.far_min_area_fraction)
    if decision is None:
        return None
    speech_text, intensity = decision
    profile = profile_for(assessment.hazard_class)
    urgency = _URGENCY[assessment.distance_bucket]
    return DispatchCommand(
        label=assessment.hazard_class.value,
        speech_text=speech_text,
        haptic_pattern=build_haptic_pattern(profile, intensity, config.vibration_strength),
        beep_pan=beep_pan_for(assessment.horizontal_bucket),
        beep_volume=0.5 + 0.25 * urgency,
        urgency=urgency,
        distance_m=assessment.distance_m,
        timestamp_ms=now_ms,
    )


class AlertDispatcher:
    """Turns the selected hazard into output channel calls.

    The dispatcher does not own the last-alert timestamp; the engine passes it
    in and records the new one when a result comes back ``DISPATCHED``.
    """

    def __init__(
        self,
        config: DispatchConfig | None = None,
        *,
        speech: SpeechChannel | None = None,
        haptic: HapticChannel | None = None,
        beep: BeepChannel | None = None,
    ) -> None:
        self.config = config or DispatchConfig()
        self.speech = speech
        self.haptic = haptic
        self.beep = beep

    def dispatch(
        self,
        assessment: HazardAssessment | None,
        now_ms: int,
        last_alert_ms: int | None = None,
    ) -> DispatchResult:
        config = self.config
        if not config.assist_enabled:
            return DispatchResult(status=DispatchStatus.DISABLED)
        if assessment is None:
            return DispatchResult(status=DispatchStatus.NO_HAZARD)

        command = build_command(assessment, config, now_ms)
        if command is None:
            logger.debug(
                "[DISPATCH] %s at %.1fm too small to alert",
                assessment.hazard_class.value,
                assessment.distance_m,
            )
            return DispatchResult(status=DispatchStatus.NOT_QUALIFIED)

        if in_cooldown(now_ms, last_alert_ms, config.cooldown_ms):
            logger.debug(
                "[DISPATCH] Suppressed '%s' (cooldown, %sms since last alert)",
                command.speech_text,
                now_ms - (last_alert_ms or 0),
            )
            return DispatchResult(status=DispatchStatus.COOLDOWN, command=command)

        outcomes = self._fire(command)
        logger.info(
            "[DISPATCH] %s (%s, %.2fm)",
            command.speech_text,
            command.haptic_pattern.intensity.value,
            command.distance_m,
        )
        return DispatchResult(
            status=DispatchStatus.DISPATCHED,
            command=command,
            outcomes=tuple(outcomes),
        )

    def _fire(self, command: DispatchCommand) -> list[ChannelOutcome]:
        mode = self.config.audio_mode
        outcomes: list[ChannelOutcome] = []

        if mode in ("both", "beep"):
            pan = command.beep_pan
            if self.beep is not None:
                outcomes.append(
                    self._invoke(
                        "beep",
                        lambda: self.beep.beep(pan.left_gain, pan.right_gain, command.beep_volume),
                    )
                )
            else:
                outcomes.append(self._beep_fallback())

        if mode in ("both", "tts"):
            if self.speech is not None:
                outcomes.append(self._invoke("speech", lambda: self.speech.speak(command.speech_text)))
            else:
                outcomes.append(self._unavailable("speech"))

        if self.haptic is not None:
            outcomes.append(self._invoke("haptic", lambda: self.haptic.vibrate(command.haptic_pattern)))
        else:
            outcomes.append(self._unavailable("haptic"))

        return outcomes

    def _beep_fallback(self) -> ChannelOutcome:
        if self.speech is None:
            return self._unavailable("beep")
        utterance = self.config.fallback_utterance
        outcome = self._invoke("beep", lambda: self.speech.speak(utterance))
        return ChannelOutcome(
            channel=outcome.channel,
            ok=outcome.ok,
            error=outcome.error,
            fallback=True,
        )

    @staticmethod
    def _invoke(channel: str, call: Callable[[], object]) -> ChannelOutcome:
        try:
            call()
        except Exception as exc:  # noqa: BLE001 - one channel must not block the others
            logger.exception("[DISPATCH] %s channel failed", channel)
            return ChannelOutcome(channel=channel, ok=False, error=str(exc) or type(exc).__name__)
        return ChannelOutcome(channel=channel, ok=True)

    @staticmethod
    def _unavailable(channel: str) -> ChannelOutcome:
        logger.warning("[DISPATCH] %s channel unavailable", channel)
        return ChannelOutcome(channel=channel, ok=False, error="unavailable")
