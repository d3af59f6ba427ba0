"""Detection schemas for the proximity alert pipeline.

Bounding boxes are expressed in pixel coordinates of the image the detector ran
against, as ``(left, top, right, bottom)`` with ``right > left`` and
``bottom > top`` for any box the engine accepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HazardClass(str, Enum):
    """Object classes the engine reasons about."""

    PERSON = "person"
    BICYCLE = "bicycle"
    MOTORCYCLE = "motorcycle"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: str | None) -> "HazardClass":
        """Map a raw detector label onto a hazard class."""

        normalized = normalize_label(label)
        for member in cls:
            if member is not cls.UNKNOWN and member.value == normalized:
                return member
        return cls.UNKNOWN

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


RECOGNIZED_CLASSES: frozenset[HazardClass] = frozenset(
    {HazardClass.PERSON, HazardClass.BICYCLE, HazardClass.MOTORCYCLE}
)


def normalize_label(label: str | None) -> str:
    if label is None:
        return ""
    return str(label).strip().lower()


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned pixel box."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    @property
    def center(self) -> tuple[float, float]:
        return ((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)

    def is_degenerate(self) -> bool:
        return self.right <= self.left or self.bottom <= self.top


@dataclass(frozen=True)
class Detection:
    """Single object reported by the external detector for one frame."""

    label: str
    score: float
    box: BoundingBox

    @property
    def hazard_class(self) -> HazardClass:
        return HazardClass.from_label(self.label)


@dataclass(frozen=True)
class DetectionFrame:
    """Detector output for one processed image."""

    timestamp_ms: int
    width: int
    height: int
    detections: list[Detection]
    frame_id: int | None = None


@dataclass(frozen=True)
class ContextualDetection:
    """A detection enriched with frame-relative geometry."""

    detection: Detection
    hazard_class: HazardClass
    center: tuple[float, float]
    area_px: float
    area_fraction: float

    @classmethod
    def from_detection(
        cls, detection: Detection, frame_width: int, frame_height: int
    ) -> "ContextualDetection":
        """Derive geometry for ``detection``; the box must not be degenerate."""

        if detection.box.is_degenerate():
            raise ValueError(f"Degenerate bounding box: {detection.box}")
        frame_area = float(frame_width) * float(frame_height)
        if frame_area <= 0.0:
            raise ValueError(f"Invalid frame size {frame_width}x{frame_height}")
        area_px = detection.box.area
        return cls(
            detection=detection,
            hazard_class=detection.hazard_class,
            center=detection.box.center,
            area_px=area_px,
            area_fraction=min(1.0, area_px / frame_area),
        )

    @property
    def label(self) -> str:
        return self.hazard_class.value

    @property
    def box(self) -> BoundingBox:
        return self.detection.box
