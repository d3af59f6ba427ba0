"""Coarse distance and horizontal-position buckets."""

from __future__ import annotations

from enum import Enum

NEAR_LIMIT_M = 4.0
MEDIUM_LIMIT_M = 10.0
LEFT_LIMIT = 0.33
RIGHT_LIMIT = 0.66


class DistanceBucket(str, Enum):
    NEAR = "near"
    MEDIUM = "medium"
    FAR = "far"


class HorizontalBucket(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def bucket_distance(meters: float) -> DistanceBucket:
    """Boundaries belong to the farther bucket: exactly 4.0 m is MEDIUM."""

    if meters < NEAR_LIMIT_M:
        return DistanceBucket.NEAR
    if meters < MEDIUM_LIMIT_M:
        return DistanceBucket.MEDIUM
    return DistanceBucket.FAR


def bucket_horizontal(center_x: float, frame_width: float) -> HorizontalBucket:
    if frame_width <= 0:
        return HorizontalBucket.CENTER
    normalized = float(center_x) / float(frame_width)
    if normalized < LEFT_LIMIT:
        return HorizontalBucket.LEFT
    if normalized > RIGHT_LIMIT:
        return HorizontalBucket.RIGHT
    return HorizontalBucket.CENTER
