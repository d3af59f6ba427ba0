"""Output channel interfaces and logging implementations."""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from alerts.models import HapticPattern
from core.logging import logger


@runtime_checkable
class SpeechChannel(Protocol):
    def speak(self, text: str) -> None: ...


@runtime_checkable
class HapticChannel(Protocol):
    def vibrate(self, pattern: HapticPattern) -> None: ...


@runtime_checkable
class BeepChannel(Protocol):
    def beep(self, left_gain: float, right_gain: float, volume: float = 1.0) -> None: ...


class LoggingSpeechChannel:
    """Speech channel that records and logs utterances."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.utterances: list[str] = []

    def speak(self, text: str) -> None:
        with self._lock:
            self.utterances.append(text)
        logger.info("[SPEECH] %s", text)


class LoggingHapticChannel:
    """Haptic channel that records and logs vibration requests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.patterns: list[HapticPattern] = []

    def vibrate(self, pattern: HapticPattern) -> None:
        with self._lock:
            self.patterns.append(pattern)
        logger.info(
            "[HAPTIC] %s timings=%s amplitude=%s",
            pattern.intensity.value,
            list(pattern.timings_ms),
            pattern.amplitude,
        )


class LoggingBeepChannel:
    """Beep channel that records and logs gain pairs."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.beeps: list[tuple[float, float, float]] = []

    def beep(self, left_gain: float, right_gain: float, volume: float = 1.0) -> None:
        with self._lock:
            self.beeps.append((left_gain, right_gain, volume))
        logger.info("[BEEP] left=%.2f right=%.2f volume=%.2f", left_gain, right_gain, volume)
