"""Hazard ranking.

Hazards are ordered by current distance, then by approach state. Projected
time-to-contact is not considered: a far, fast-closing object still ranks
behind a nearer static one.
"""

from __future__ import annotations

from typing import Iterable

from alerts.models import HazardAssessment


def hazard_sort_key(assessment: HazardAssessment) -> tuple[float, int]:
    return (assessment.distance_m, 0 if assessment.approaching else 1)


def rank_hazards(assessments: Iterable[HazardAssessment]) -> list[HazardAssessment]:
    """Return assessments most urgent first; equal keys keep input order."""

    return sorted(assessments, key=hazard_sort_key)


def select_hazard(assessments: Iterable[HazardAssessment]) -> HazardAssessment | None:
    ranked = rank_hazards(assessments)
    if not ranked:
        return None
    return ranked[0]
