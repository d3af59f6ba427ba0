"""Command-line entry point for the proximity assist runtime."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any, TextIO

from config import ConfigController
from core.logging import configure_logging, enable_file_logging, logger
from engine import EngineSettings, ProximityAlertEngine
from engine.replay import ReplayFormatError, iter_frames
from interaction.channels import LoggingHapticChannel, LoggingSpeechChannel


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Raw command-line arguments.

    Returns:
        Parsed arguments namespace.
    """

    parser = argparse.ArgumentParser(
        description="Turn object detections into prioritized proximity alerts."
    )
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Run diagnostics probes and exit.",
    )
    parser.add_argument(
        "--replay",
        type=str,
        help="JSON-lines file of detection frames to replay ('-' for stdin).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Override the configured logging level.",
    )
    return parser.parse_args(argv)


def build_beep_channel(config: dict[str, Any]) -> Any:
    from interaction.beep import BeepConfig, StereoBeepPlayer

    beep_config = BeepConfig.from_config(config)
    if not beep_config.enabled:
        return None
    try:
        return StereoBeepPlayer(beep_config)
    except RuntimeError as exc:
        logger.warning("Beep output unavailable: %s", exc)
        return None


def replay(engine: ProximityAlertEngine, source: TextIO, out: TextIO) -> int:
    """Feed every frame from ``source`` through ``engine``; print dispatched commands."""

    dispatched = 0
    for frame in iter_frames(source):
        result = engine.process_frame(frame)
        command = result.command
        if command is None:
            continue
        dispatched += 1
        out.write(json.dumps(command.to_dict()) + "\n")
        out.flush()
    return dispatched


def run_diagnostics_report() -> int:
    from config.diagnostics import probe as config_probe
    from diagnostics.runner import format_results, has_failures, run_diagnostics
    from engine.diagnostics import probe as engine_probe
    from interaction.diagnostics import probe as beep_probe

    results = run_diagnostics([config_probe, engine_probe, beep_probe])
    print(format_results(results))
    return 1 if has_failures(results) else 0


def main(argv: list[str] | None = None) -> int:
    """Application entry point.

    Args:
        argv: Optional list of command-line arguments.

    Returns:
        Process exit code.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = parse_args(argv)
    config = ConfigController.get_instance().get_config()
    configure_logging(args.log_level or config.get("logging_level", "INFO"))
    if config.get("file_logging_enabled", False):
        log_file_path = Path(config.get("log_file", "logs/proximity_assist.log"))
        enable_file_logging(log_file_path)
        logger.info("Writing logs to %s", log_file_path)

    if args.diagnostics:
        return run_diagnostics_report()

    if not args.replay:
        logger.error("Nothing to do: pass --replay FILE or --diagnostics")
        return 2

    try:
        settings = EngineSettings.from_config(config)
    except ValueError as exc:
        logger.error("Invalid proximity settings: %s", exc)
        return 1

    beep = build_beep_channel(config)
    engine = ProximityAlertEngine(
        settings,
        speech=LoggingSpeechChannel(),
        haptic=LoggingHapticChannel(),
        beep=beep,
    )

    try:
        if args.replay == "-":
            dispatched = replay(engine, sys.stdin, sys.stdout)
        else:
            with open(args.replay, "r", encoding="utf-8") as source:
                dispatched = replay(engine, source, sys.stdout)
    except (OSError, ReplayFormatError) as exc:
        logger.error("Replay failed: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Replay interrupted by user")
        return 130
    finally:
        if beep is not None:
            beep.close()

    logger.info("Replay finished: %s alerts dispatched", dispatched)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
