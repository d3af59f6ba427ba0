"""Diagnostics routines for the configuration subsystem."""

from __future__ import annotations

from pathlib import Path

import yaml

from config.controller import load_config_files
from diagnostics.models import DiagnosticResult, DiagnosticStatus
from engine.settings import EngineSettings


def probe(base_dir: Path | None = None) -> DiagnosticResult:
    """Validate that config files parse and yield valid engine settings.

    Args:
        base_dir: Optional base directory for offline testing.

    Returns:
        Diagnostic result indicating config readiness.
    """

    name = "config"
    root_dir = base_dir if base_dir is not None else Path.cwd()
    config_dir = root_dir / "config"
    default_config = config_dir / "default.yaml"
    override_config = config_dir / "override.yaml"

    if not default_config.exists():
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Missing default config at {default_config}",
        )

    try:
        config = load_config_files(default_config, override_config)
        settings = EngineSettings.from_config(config)
    except (OSError, yaml.YAMLError) as exc:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Config unreadable: {exc}",
        )
    except (AttributeError, TypeError, ValueError) as exc:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Invalid proximity settings: {exc}",
        )

    return DiagnosticResult(
        name=name,
        status=DiagnosticStatus.PASS,
        details=(
            f"Config readable at {config_dir} "
            f"(min_score={settings.min_score:.2f}, cooldown={settings.alert_cooldown_ms}ms)"
        ),
    )
