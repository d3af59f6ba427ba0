"""Self-test probe that runs a reference frame through a fresh engine."""

from __future__ import annotations

from diagnostics.models import DiagnosticResult, DiagnosticStatus
from engine.proximity_engine import ProximityAlertEngine
from engine.settings import EngineSettings
from interaction.channels import LoggingBeepChannel, LoggingHapticChannel, LoggingSpeechChannel
from vision.detections import BoundingBox, Detection

REFERENCE_WIDTH = 320
REFERENCE_HEIGHT = 240
REFERENCE_DETECTION = Detection(
    label="person",
    score=0.9,
    box=BoundingBox(left=100, top=50, right=140, bottom=200),
)
EXPECTED_SPEECH = "Person nearby ahead."
EXPECTED_PAN = (0.85, 0.85)


def probe() -> DiagnosticResult:
    """Check the engine produces the expected alert for a known frame."""

    name = "engine"
    speech = LoggingSpeechChannel()
    beep = LoggingBeepChannel()
    engine = ProximityAlertEngine(
        EngineSettings(),
        speech=speech,
        haptic=LoggingHapticChannel(),
        beep=beep,
    )
    result = engine.process([REFERENCE_DETECTION], REFERENCE_WIDTH, REFERENCE_HEIGHT, 0)
    command = result.command
    if command is None:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Reference frame produced no alert ({result.dispatch.status.value})",
        )
    pan = (command.beep_pan.left_gain, command.beep_pan.right_gain)
    if command.speech_text != EXPECTED_SPEECH or pan != EXPECTED_PAN:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Unexpected alert {command.speech_text!r} pan={pan}",
        )
    if speech.utterances != [EXPECTED_SPEECH] or len(beep.beeps) != 1:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.WARN,
            details="Alert computed but channel fan-out differed from expectation",
        )
    return DiagnosticResult(
        name=name,
        status=DiagnosticStatus.PASS,
        details=f"Reference alert '{command.speech_text}' at {command.distance_m:.2f}m",
    )
