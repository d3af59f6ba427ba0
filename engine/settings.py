"""Engine settings loaded from the ``proximity`` config section."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from alerts.dispatcher import AUDIO_MODES, DispatchConfig
from vision.filtering import DEFAULT_MIN_SCORE


@dataclass(frozen=True)
class EngineSettings:
    """Validated runtime settings for one proximity alert engine."""

    min_score: float = DEFAULT_MIN_SCORE
    assist_enabled: bool = True
    alert_cooldown_ms: int = 1500
    focal_length_px: float | None = None
    distance_scale: float = 1.0
    audio_mode: str = "both"
    vibration_strength: int = 150
    far_min_area_fraction: float = 0.02
    beep_fallback_utterance: str = "beep"

    def __post_init__(self) -> None:
        if not (0.0 <= self.min_score <= 1.0):
            raise ValueError(f"min_score must be in [0, 1], got {self.min_score}")
        if self.alert_cooldown_ms < 0:
            raise ValueError(f"alert_cooldown_ms must be >= 0, got {self.alert_cooldown_ms}")
        if self.focal_length_px is not None and self.focal_length_px <= 0:
            raise ValueError(
                f"focal_length_px must be positive or null, got {self.focal_length_px}"
            )
        if self.distance_scale <= 0:
            raise ValueError(f"distance_scale must be > 0, got {self.distance_scale}")
        if self.audio_mode not in AUDIO_MODES:
            raise ValueError(
                f"audio_mode must be one of {', '.join(AUDIO_MODES)}, got {self.audio_mode!r}"
            )
        if not (0 <= self.vibration_strength <= 255):
            raise ValueError(
                f"vibration_strength must be in [0, 255], got {self.vibration_strength}"
            )
        if not (0.0 <= self.far_min_area_fraction <= 1.0):
            raise ValueError(
                f"far_min_area_fraction must be in [0, 1], got {self.far_min_area_fraction}"
            )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "EngineSettings":
        section = config.get("proximity") if isinstance(config, Mapping) else None
        if not isinstance(section, Mapping):
            return cls()
        defaults = cls()
        focal = section.get("focal_length_px")
        return cls(
            min_score=float(section.get("min_score", defaults.min_score)),
            assist_enabled=bool(section.get("assist_enabled", defaults.assist_enabled)),
            alert_cooldown_ms=int(section.get("alert_cooldown_ms", defaults.alert_cooldown_ms)),
            focal_length_px=float(focal) if focal is not None else None,
            distance_scale=float(section.get("distance_scale", defaults.distance_scale)),
            audio_mode=str(section.get("audio_mode", defaults.audio_mode)).lower(),
            vibration_strength=int(section.get("vibration_strength", defaults.vibration_strength)),
            far_min_area_fraction=float(
                section.get("far_min_area_fraction", defaults.far_min_area_fraction)
            ),
            beep_fallback_utterance=str(
                section.get("beep_fallback_utterance", defaults.beep_fallback_utterance)
            ),
        )

    def dispatch_config(self) -> DispatchConfig:
        return DispatchConfig(
            assist_enabled=self.assist_enabled,
            cooldown_ms=self.alert_cooldown_ms,
            audio_mode=self.audio_mode,
            vibration_strength=self.vibration_strength,
            far_min_area_fraction=self.far_min_area_fraction,
            fallback_utterance=self.beep_fallback_utterance,
        )
