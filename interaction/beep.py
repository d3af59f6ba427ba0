"""Directional beep playback through PyAudio."""

from __future__ import annotations

from dataclasses import dataclass
import queue
import threading
from typing import Any, Mapping

import numpy as np

from core.logging import logger
from interaction.utils import STEREO_CHANNELS, require_pyaudio, resolve_output_device_index


@dataclass(frozen=True)
class BeepConfig:
    """Tone and device settings for the beep player."""

    enabled: bool = False
    device_name: str | None = None
    frequency_hz: float = 880.0
    duration_ms: int = 120
    sample_rate: int = 44100

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "BeepConfig":
        section = config.get("beep") if isinstance(config, Mapping) else None
        if not isinstance(section, Mapping):
            return cls()
        defaults = cls()
        return cls(
            enabled=bool(section.get("enabled", defaults.enabled)),
            device_name=section.get("device_name") or None,
            frequency_hz=float(section.get("frequency_hz", defaults.frequency_hz)),
            duration_ms=int(section.get("duration_ms", defaults.duration_ms)),
            sample_rate=int(section.get("sample_rate", defaults.sample_rate)),
        )


def synthesize_tone(
    left_gain: float,
    right_gain: float,
    volume: float,
    *,
    frequency_hz: float = 880.0,
    duration_ms: int = 120,
    sample_rate: int = 44100,
) -> bytes:
    """Return interleaved 16-bit stereo PCM for a short enveloped sine tone."""

    sample_count = max(1, int(sample_rate * duration_ms / 1000))
    t = np.arange(sample_count, dtype=np.float32) / float(sample_rate)
    tone = np.sin(2.0 * np.pi * float(frequency_hz) * t)

    # Short linear fade in/out to avoid clicks.
    fade = min(sample_count // 2, max(1, int(sample_rate * 0.005)))
    envelope = np.ones(sample_count, dtype=np.float32)
    if fade > 0:
        envelope[:fade] = np.linspace(0.0, 1.0, fade, dtype=np.float32)
        envelope[-fade:] = np.linspace(1.0, 0.0, fade, dtype=np.float32)
    tone *= envelope * float(np.clip(volume, 0.0, 1.0))

    stereo = np.empty((sample_count, STEREO_CHANNELS), dtype=np.float32)
    stereo[:, 0] = tone * float(np.clip(left_gain, 0.0, 1.0))
    stereo[:, 1] = tone * float(np.clip(right_gain, 0.0, 1.0))
    return (stereo * 32767.0).astype(np.int16).tobytes()


class StereoBeepPlayer:
    """Beep channel that plays panned tones on a background worker."""

    def __init__(self, config: BeepConfig | None = None) -> None:
        self.config = config or BeepConfig()
        pyaudio = require_pyaudio()
        self.p = pyaudio.PyAudio()
        try:
            device_index = resolve_output_device_index(self.p, self.config.device_name)
            self.stream = self.p.open(
                format=pyaudio.paInt16,
                channels=STEREO_CHANNELS,
                rate=self.config.sample_rate,
                output=True,
                output_device_index=device_index,
                start=True,
            )
        except Exception as exc:
            self.p.terminate()
            raise RuntimeError(
                f"Failed to open beep output device '{self.config.device_name or 'default'}'"
            ) from exc

        logger.info(
            "[BEEP] Output ready (device=%s rate=%s tone=%.0fHz/%sms)",
            self.config.device_name or "default",
            self.config.sample_rate,
            self.config.frequency_hz,
            self.config.duration_ms,
        )
        self._q: queue.Queue[bytes | None] = queue.Queue(maxsize=4)
        self._stop = threading.Event()
        self._t = threading.Thread(target=self._worker, name="beep-player", daemon=True)
        self._t.start()

    def beep(self, left_gain: float, right_gain: float, volume: float = 1.0) -> None:
        """Enqueue a panned tone; never blocks on the audio device."""

        pcm = synthesize_tone(
            left_gain,
            right_gain,
            volume,
            frequency_hz=self.config.frequency_hz,
            duration_ms=self.config.duration_ms,
            sample_rate=self.config.sample_rate,
        )
        try:
            self._q.put_nowait(pcm)
        except queue.Full:
            logger.warning("[BEEP] Queue full; dropping beep")

    def _worker(self) -> None:
        try:
            while not self._stop.is_set():
                try:
                    pcm = self._q.get(timeout=0.1)
                except queue.Empty:
                    continue
                if pcm is None:
                    break
                self.stream.write(pcm)
        except Exception:
            logger.exception("[BEEP] Output worker crashed")

    def close(self) -> None:
        self._stop.set()
        try:
            self._q.put_nowait(None)
        except queue.Full:
            pass
        self._t.join(timeout=1.0)
        try:
            self.stream.stop_stream()
            self.stream.close()
        finally:
            self.p.terminate()
