"""Frame-to-frame association by nearest box center.

The matcher is greedy and non-exclusive: every current detection independently
picks the closest previous detection of its class, so one previous detection
can be the match for several current ones. There is no distance cutoff and no
identity survives beyond the one-frame lookback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from vision.detections import ContextualDetection


@dataclass(frozen=True)
class Match:
    """A current detection paired with its nearest same-class predecessor."""

    current: ContextualDetection
    previous: ContextualDetection | None = None

    @property
    def is_new(self) -> bool:
        return self.previous is None


def squared_center_distance(a: ContextualDetection, b: ContextualDetection) -> float:
    dx = a.center[0] - b.center[0]
    dy = a.center[1] - b.center[1]
    return dx * dx + dy * dy


def match_detections(
    current: Sequence[ContextualDetection],
    previous: Sequence[ContextualDetection],
) -> list[Match]:
    """Pair each current detection with the nearest previous one of the same class.

    Ties keep the first previous detection encountered.
    """

    matches: list[Match] = []
    for detection in current:
        best: ContextualDetection | None = None
        best_dist = 0.0
        for candidate in previous:
            if candidate.hazard_class is not detection.hazard_class:
                continue
            dist = squared_center_distance(detection, candidate)
            if best is None or dist < best_dist:
                best = candidate
                best_dist = dist
        matches.append(Match(current=detection, previous=best))
    return matches
