"""Single-step approach detection from box area growth."""

from __future__ import annotations

from vision.matching import Match

APPROACH_GROWTH_THRESHOLD = 0.10


def area_increase(match: Match) -> float | None:
    """Relative pixel-area growth since the previous frame, or ``None`` if unmatched."""

    if match.previous is None:
        return None
    previous_area = match.previous.area_px
    return (match.current.area_px - previous_area) / max(previous_area, 1.0)


def classify_approach(match: Match, threshold: float = APPROACH_GROWTH_THRESHOLD) -> bool:
    """Return True when the matched box grew by more than ``threshold``."""

    growth = area_increase(match)
    if growth is None:
        return False
    return growth > threshold
