"""Diagnostics routines for the beep output."""

from __future__ import annotations

from typing import Any, Mapping

from config import ConfigController
from core.logging import logger
from diagnostics.models import DiagnosticResult, DiagnosticStatus
from interaction.beep import BeepConfig
from interaction.utils import STEREO_CHANNELS, require_pyaudio, resolve_output_device_index


def probe(config: Mapping[str, Any] | None = None) -> DiagnosticResult:
    """Check that the configured beep output device can be opened.

    Args:
        config: Optional config mapping for offline testing.

    Returns:
        Diagnostic result indicating beep output readiness.
    """

    name = "beep_output"
    if config is None:
        config = ConfigController.get_instance().get_config()
    beep_config = BeepConfig.from_config(config)

    if not beep_config.enabled:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.WARN,
            details="Beep output disabled; alerts use the spoken fallback",
        )

    try:
        pyaudio = require_pyaudio()
    except RuntimeError as exc:
        return DiagnosticResult(name=name, status=DiagnosticStatus.FAIL, details=str(exc))

    try:
        audio = pyaudio.PyAudio()
        try:
            device_index = resolve_output_device_index(audio, beep_config.device_name)
            stream = audio.open(
                format=pyaudio.paInt16,
                channels=STEREO_CHANNELS,
                rate=beep_config.sample_rate,
                output=True,
                output_device_index=device_index,
                start=False,
            )
            stream.close()
        finally:
            audio.terminate()
    except Exception as exc:  # noqa: BLE001 - probe should not raise
        logger.warning("[BEEP] Output probe failed: %s", exc)
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Beep output probe failed: {exc}",
        )

    return DiagnosticResult(
        name=name,
        status=DiagnosticStatus.PASS,
        details=f"Beep output device: {beep_config.device_name or 'default'}",
    )
