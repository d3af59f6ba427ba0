"""Tests for monocular distance estimation."""

from __future__ import annotations

import math

import pytest

from vision.detections import HazardClass
from vision.distance import assumed_height_m, estimate_distance


@pytest.mark.parametrize("label", ["person", "bicycle", "motorcycle", "unknown-thing"])
@pytest.mark.parametrize("frame_height", [1, 240, 1080])
def test_zero_or_negative_box_height_is_infinitely_far(label: str, frame_height: int) -> None:
    assert estimate_distance(label, 0, frame_height) == math.inf
    assert estimate_distance(label, -5, frame_height) == math.inf
    assert estimate_distance(label, 0, frame_height, focal_length_px=600.0) == math.inf


@pytest.mark.parametrize("focal", [None, 500.0])
@pytest.mark.parametrize("label", list(HazardClass))
def test_distance_is_non_increasing_in_box_height(label: HazardClass, focal: float | None) -> None:
    distances = [estimate_distance(label, h, 240, focal) for h in range(1, 400)]
    assert all(later <= earlier for earlier, later in zip(distances, distances[1:]))


def test_fallback_matches_reference_value() -> None:
    assert estimate_distance("person", 150, 240) == pytest.approx(2.88)


def test_fallback_floors_tiny_boxes() -> None:
    assert estimate_distance("person", 1, 1000) == pytest.approx(180.0)


def test_pinhole_uses_class_height() -> None:
    assert estimate_distance(HazardClass.PERSON, 100, 240, 500.0) == pytest.approx(8.5)
    assert estimate_distance(HazardClass.BICYCLE, 110, 240, 500.0) == pytest.approx(5.0)
    assert estimate_distance(HazardClass.MOTORCYCLE, 120, 240, 500.0) == pytest.approx(5.0)


def test_unknown_label_uses_person_height() -> None:
    assert assumed_height_m("dog") == assumed_height_m(HazardClass.PERSON) == 1.7
    assert estimate_distance("dog", 100, 240, 500.0) == pytest.approx(8.5)


def test_non_positive_focal_length_falls_back_to_heuristic() -> None:
    assert estimate_distance("person", 150, 240, 0.0) == pytest.approx(2.88)
