"""Tests for the alert decision table and channel fan-out."""

from __future__ import annotations

import pytest

from alerts.dispatcher import (
    AlertDispatcher,
    DispatchConfig,
    build_command,
    build_haptic_pattern,
    decide,
    in_cooldown,
)
from alerts.models import DispatchStatus, HapticIntensity, HazardAssessment
from alerts.profiles import profile_for
from interaction.channels import LoggingBeepChannel, LoggingHapticChannel, LoggingSpeechChannel
from vision.buckets import DistanceBucket, HorizontalBucket
from vision.detections import BoundingBox, ContextualDetection, Detection, HazardClass
from vision.distance import ASSUMED_HEIGHT_M, assumed_height_m
from vision.matching import Match


def _assessment(
    label: str = "person",
    distance_bucket: DistanceBucket = DistanceBucket.NEAR,
    horizontal_bucket: HorizontalBucket = HorizontalBucket.CENTER,
    approaching: bool = False,
    box: BoundingBox | None = None,
    distance_m: float = 2.0,
) -> HazardAssessment:
    box = box or BoundingBox(100, 50, 140, 200)
    current = ContextualDetection.from_detection(Detection(label=label, score=0.9, box=box), 320, 240)
    return HazardAssessment(
        match=Match(current=current),
        distance_m=distance_m,
        distance_bucket=distance_bucket,
        horizontal_bucket=horizontal_bucket,
        approaching=approaching,
    )


class FailingSpeech:
    def speak(self, text: str) -> None:
        raise RuntimeError("tts offline")


def _dispatcher(config: DispatchConfig | None = None, **channels: object) -> AlertDispatcher:
    defaults = {
        "speech": LoggingSpeechChannel(),
        "haptic": LoggingHapticChannel(),
        "beep": LoggingBeepChannel(),
    }
    defaults.update(channels)
    return AlertDispatcher(config, **defaults)


def test_cooldown_window() -> None:
    assert in_cooldown(1000, None, 1500) is False
    assert in_cooldown(1000, 0, 1500) is True
    assert in_cooldown(1500, 0, 1500) is False
    assert in_cooldown(10, 0, 0) is False


def test_approaching_near_uses_double_pulse() -> None:
    speech, intensity = decide(_assessment(approaching=True))
    assert speech == "Person approaching ahead. Take care."
    assert intensity is HapticIntensity.STRONG_DOUBLE


def test_near_static_is_strong() -> None:
    speech, intensity = decide(_assessment(label="motorcycle", horizontal_bucket=HorizontalBucket.LEFT))
    assert speech == "Motorcycle nearby ahead."
    assert intensity is HapticIntensity.STRONG


@pytest.mark.parametrize(
    ("bucket", "expected"),
    [
        (HorizontalBucket.LEFT, "Bicycle ahead on your left."),
        (HorizontalBucket.RIGHT, "Bicycle ahead on your right."),
        (HorizontalBucket.CENTER, "Bicycle ahead on your center."),
    ],
)
def test_medium_mentions_side(bucket: HorizontalBucket, expected: str) -> None:
    speech, intensity = decide(
        _assessment(label="bicycle", distance_bucket=DistanceBucket.MEDIUM, horizontal_bucket=bucket)
    )
    assert speech == expected
    assert intensity is HapticIntensity.LIGHT


def test_approaching_medium_is_not_escalated() -> None:
    speech, intensity = decide(
        _assessment(distance_bucket=DistanceBucket.MEDIUM, approaching=True)
    )
    assert speech == "Person ahead on your center."
    assert intensity is HapticIntensity.LIGHT


def test_far_large_box_alerts_lightly() -> None:
    # 40x150 in 320x240 covers 7.8% of the frame.
    decision = decide(_assessment(distance_bucket=DistanceBucket.FAR, distance_m=15.0))
    assert decision is not None
    assert decision[1] is HapticIntensity.LIGHT


def test_far_small_box_is_not_qualified() -> None:
    small = BoundingBox(10, 10, 20, 20)
    assessment = _assessment(distance_bucket=DistanceBucket.FAR, box=small, distance_m=20.0)

    assert decide(assessment) is None
    result = _dispatcher().dispatch(assessment, now_ms=0)
    assert result.status is DispatchStatus.NOT_QUALIFIED
    assert result.command is None


def test_haptic_patterns_follow_class_and_intensity() -> None:
    person = profile_for(HazardClass.PERSON)

    strong = build_haptic_pattern(person, HapticIntensity.STRONG, 150)
    assert strong.timings_ms == (100, 80, 100)
    assert strong.amplitude == 150

    double = build_haptic_pattern(person, HapticIntensity.STRONG_DOUBLE, 200)
    assert double.timings_ms == (100, 80, 100)
    assert double.amplitude == 200
    assert double.intensity is HapticIntensity.STRONG_DOUBLE

    bicycle = build_haptic_pattern(profile_for(HazardClass.BICYCLE), HapticIntensity.STRONG_DOUBLE, 150)
    assert bicycle.timings_ms == (120,)

    light = build_haptic_pattern(profile_for(HazardClass.MOTORCYCLE), HapticIntensity.LIGHT, 150)
    assert light.timings_ms == (300,)
    assert light.amplitude == 75


def test_command_carries_pan_and_urgency() -> None:
    command = build_command(
        _assessment(horizontal_bucket=HorizontalBucket.LEFT), DispatchConfig(), now_ms=42
    )
    assert command is not None
    assert (command.beep_pan.left_gain, command.beep_pan.right_gain) == (1.0, 0.2)
    assert command.urgency == 2
    assert command.beep_volume == pytest.approx(1.0)
    assert command.timestamp_ms == 42
    assert command.to_dict()["haptic_pattern"]["intensity"] == "strong"


def test_dispatch_fans_out_to_every_channel() -> None:
    speech = LoggingSpeechChannel()
    haptic = LoggingHapticChannel()
    beep = LoggingBeepChannel()
    dispatcher = AlertDispatcher(speech=speech, haptic=haptic, beep=beep)

    result = dispatcher.dispatch(_assessment(horizontal_bucket=HorizontalBucket.RIGHT), now_ms=0)

    assert result.dispatched
    assert speech.utterances == ["Person nearby ahead."]
    assert beep.beeps == [(0.2, 1.0, 1.0)]
    assert haptic.patterns[0].timings_ms == (100, 80, 100)
    assert [outcome.channel for outcome in result.outcomes] == ["beep", "speech", "haptic"]
    assert all(outcome.ok for outcome in result.outcomes)


def test_disabled_assist_emits_nothing() -> None:
    speech = LoggingSpeechChannel()
    dispatcher = _dispatcher(DispatchConfig(assist_enabled=False), speech=speech)

    result = dispatcher.dispatch(_assessment(approaching=True), now_ms=0)

    assert result.status is DispatchStatus.DISABLED
    assert speech.utterances == []


def test_no_hazard() -> None:
    assert _dispatcher().dispatch(None, now_ms=0).status is DispatchStatus.NO_HAZARD


def test_cooldown_suppresses_but_reports_command() -> None:
    speech = LoggingSpeechChannel()
    dispatcher = _dispatcher(speech=speech)

    result = dispatcher.dispatch(_assessment(), now_ms=1000, last_alert_ms=0)

    assert result.status is DispatchStatus.COOLDOWN
    assert result.command is not None
    assert not result.dispatched
    assert speech.utterances == []


def test_failing_channel_does_not_block_others() -> None:
    haptic = LoggingHapticChannel()
    beep = LoggingBeepChannel()
    dispatcher = AlertDispatcher(speech=FailingSpeech(), haptic=haptic, beep=beep)

    result = dispatcher.dispatch(_assessment(), now_ms=0)

    assert result.dispatched
    outcomes = {outcome.channel: outcome for outcome in result.outcomes}
    assert outcomes["speech"].ok is False
    assert outcomes["speech"].error == "tts offline"
    assert outcomes["beep"].ok and outcomes["haptic"].ok
    assert len(haptic.patterns) == 1
    assert len(beep.beeps) == 1


def test_missing_beep_channel_speaks_fallback() -> None:
    speech = LoggingSpeechChannel()
    dispatcher = AlertDispatcher(speech=speech, haptic=LoggingHapticChannel(), beep=None)

    result = dispatcher.dispatch(_assessment(), now_ms=0)

    assert speech.utterances == ["beep", "Person nearby ahead."]
    beep_outcome = result.outcomes[0]
    assert beep_outcome.channel == "beep"
    assert beep_outcome.fallback is True
    assert beep_outcome.ok is True


def test_missing_haptic_channel_is_reported() -> None:
    dispatcher = AlertDispatcher(speech=LoggingSpeechChannel(), beep=LoggingBeepChannel())

    result = dispatcher.dispatch(_assessment(), now_ms=0)

    assert result.dispatched
    haptic_outcome = result.outcomes[-1]
    assert haptic_outcome.channel == "haptic"
    assert haptic_outcome.ok is False
    assert haptic_outcome.error == "unavailable"


def test_tts_mode_skips_beep() -> None:
    speech = LoggingSpeechChannel()
    beep = LoggingBeepChannel()
    dispatcher = _dispatcher(DispatchConfig(audio_mode="tts"), speech=speech, beep=beep)

    dispatcher.dispatch(_assessment(), now_ms=0)

    assert speech.utterances == ["Person nearby ahead."]
    assert beep.beeps == []


def test_beep_mode_skips_speech() -> None:
    speech = LoggingSpeechChannel()
    beep = LoggingBeepChannel()
    haptic = LoggingHapticChannel()
    dispatcher = _dispatcher(DispatchConfig(audio_mode="beep"), speech=speech, beep=beep, haptic=haptic)

    result = dispatcher.dispatch(_assessment(), now_ms=0)

    assert speech.utterances == []
    assert len(beep.beeps) == 1
    assert len(haptic.patterns) == 1
    assert [outcome.channel for outcome in result.outcomes] == ["beep", "haptic"]


def test_far_large_box_in_center_uses_side_phrase() -> None:
    box = BoundingBox(150, 40, 230, 200)
    speech, _ = decide(
        _assessment(label="bicycle", distance_bucket=DistanceBucket.FAR, box=box, distance_m=12.0)
    )
    assert speech == "Bicycle ahead on your center."


def test_profiles_do_not_duplicate_assumed_heights() -> None:
    for hazard_class in HazardClass:
        profile = profile_for(hazard_class)
        assert not hasattr(profile, "assumed_height_m")
        assert assumed_height_m(hazard_class) == ASSUMED_HEIGHT_M.get(
            hazard_class, ASSUMED_HEIGHT_M[HazardClass.PERSON]
        )
