"""Configuration controller for YAML-based settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

# Flat keys written by the original settings screen, mapped into ``proximity``.
_LEGACY_PROXIMITY_KEYS = {
    "scoreThreshold": "min_score",
    "distanceScale": "distance_scale",
    "vibrationStrength": "vibration_strength",
    "audioMode": "audio_mode",
}


@dataclass(frozen=True)
class ConfigPaths:
    """Filesystem paths for configuration files."""

    config_dir: Path
    config_file: Path
    override_file: Path


def load_config_files(config_file: Path, override_file: Path) -> dict[str, Any]:
    """Read the default config, deep-merge the override and fold in legacy keys."""

    with config_file.open("r", encoding="utf-8") as file:
        config = yaml.safe_load(file) or {}

    if override_file.exists():
        with override_file.open("r", encoding="utf-8") as file:
            override_config = yaml.safe_load(file) or {}
        if override_config:
            config = _deep_merge(config, override_config)

    return normalize_legacy_config(config)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def normalize_legacy_config(config: dict[str, Any]) -> dict[str, Any]:
    """Fold legacy flat preference keys into the ``proximity`` section."""

    normalized = dict(config)
    proximity_cfg = dict(normalized.get("proximity") or {})
    for legacy_key, key in _LEGACY_PROXIMITY_KEYS.items():
        if key not in proximity_cfg and legacy_key in normalized:
            proximity_cfg[key] = normalized[legacy_key]
    normalized["proximity"] = proximity_cfg
    return normalized


class ConfigController:
    """Singleton controller for loading and updating configuration."""

    _instance: "ConfigController | None" = None

    def __init__(self, config_file: str = "default.yaml", config_dir: Path | None = None) -> None:
        if ConfigController._instance is not None:
            raise RuntimeError("You cannot create another ConfigController class")

        config_dir = config_dir if config_dir is not None else Path("config")
        self.paths = ConfigPaths(
            config_dir=config_dir,
            config_file=config_dir / config_file,
            override_file=config_dir / "override.yaml",
        )
        self.config: dict[str, Any] = {}
        self.load_config()
        ConfigController._instance = self

    @classmethod
    def get_instance(cls) -> "ConfigController":
        """Return the singleton instance of the controller."""

        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_config(self) -> None:
        """Load configuration from default and override YAML files."""

        self.config = load_config_files(self.paths.config_file, self.paths.override_file)

    def reload(self) -> dict[str, Any]:
        """Re-read the configuration files and return the new config."""

        self.load_config()
        return self.get_config()

    def save_config(self, config: dict[str, Any]) -> None:
        """Persist configuration to override.yaml, archiving previous overrides."""

        if self.paths.override_file.exists():
            archive_index = 1
            archive_file = self._archive_path(archive_index)
            while archive_file.exists():
                archive_index += 1
                archive_file = self._archive_path(archive_index)
            self.paths.override_file.rename(archive_file)

        with self.paths.override_file.open("w", encoding="utf-8") as file:
            yaml.safe_dump(config, file)

    def get_config(self) -> dict[str, Any]:
        """Return the currently loaded configuration."""

        return dict(self.config)

    def set_config(self, config: dict[str, Any]) -> None:
        """Set and persist configuration values."""

        self.config = normalize_legacy_config(dict(config))
        self.save_config(self.config)

    def _archive_path(self, index: int) -> Path:
        return self.paths.config_dir / f"override_{index:04d}.yaml"
