"""Proximity alert engine package."""

from engine.proximity_engine import EngineState, FrameResult, ProximityAlertEngine
from engine.settings import EngineSettings
from engine.worker import FrameWorker, WorkerStats

__all__ = [
    "EngineSettings",
    "EngineState",
    "FrameResult",
    "FrameWorker",
    "ProximityAlertEngine",
    "WorkerStats",
]
