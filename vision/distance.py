"""Monocular distance estimation from apparent box height.

With a known focal length the pinhole relation
``distance = assumed_height * focal_length / box_height`` is used. Without one,
the estimate falls back to ``1.8 / max(box_height / frame_height, 0.01)``. The
fallback is an uncalibrated approximation: it does not model camera optics and
only guarantees that a taller box never reads as farther away.
"""

from __future__ import annotations

import math

from vision.detections import HazardClass

ASSUMED_HEIGHT_M: dict[HazardClass, float] = {
    HazardClass.PERSON: 1.7,
    HazardClass.BICYCLE: 1.1,
    HazardClass.MOTORCYCLE: 1.2,
}

FALLBACK_SCALE_M = 1.8
MIN_HEIGHT_FRACTION = 0.01


def assumed_height_m(label: HazardClass | str) -> float:
    """Return the assumed physical height for ``label`` (person height if unknown)."""

    hazard_class = label if isinstance(label, HazardClass) else HazardClass.from_label(label)
    return ASSUMED_HEIGHT_M.get(hazard_class, ASSUMED_HEIGHT_M[HazardClass.PERSON])


def estimate_distance(
    label: HazardClass | str,
    box_height_px: float,
    frame_height_px: float,
    focal_length_px: float | None = None,
) -> float:
    """Estimate the distance in meters to an object; ``math.inf`` when unknowable."""

    if box_height_px <= 0:
        return math.inf

    if focal_length_px is not None and focal_length_px > 0:
        return (assumed_height_m(label) * float(focal_length_px)) / float(box_height_px)

    if frame_height_px <= 0:
        return math.inf
    frac = max(float(box_height_px) / float(frame_height_px), MIN_HEIGHT_FRACTION)
    return FALLBACK_SCALE_M / frac
