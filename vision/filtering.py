"""Detection filter that keeps hazard classes above a confidence floor."""

from __future__ import annotations

import math
from typing import Iterable

from vision.detections import RECOGNIZED_CLASSES, Detection

DEFAULT_MIN_SCORE = 0.35


def filter_detections(
    raw_detections: Iterable[Detection], min_score: float = DEFAULT_MIN_SCORE
) -> list[Detection]:
    """Return detections of a recognized class whose score is at least ``min_score``.

    Degenerate boxes and non-finite scores are dropped as well. Input order is
    preserved and duplicates are kept as independent detections.
    """

    kept: list[Detection] = []
    for detection in raw_detections:
        if detection.hazard_class not in RECOGNIZED_CLASSES:
            continue
        score = float(detection.score)
        if not math.isfinite(score) or score < min_score:
            continue
        if detection.box.is_degenerate():
            continue
        kept.append(detection)
    return kept
