"""Per-class alert constants."""

from __future__ import annotations

from dataclasses import dataclass

from alerts.models import BeepPan
from vision.buckets import HorizontalBucket
from vision.detections import HazardClass

APPROACHING_NEAR_TEMPLATE = "{label} approaching ahead. Take care."
NEAR_TEMPLATE = "{label} nearby ahead."
SIDE_TEMPLATE = "{label} ahead on your {side}."


@dataclass(frozen=True)
class AlertProfile:
    """Constant alert data for one hazard class.

    Assumed physical heights live with the distance estimator in
    ``vision.distance.ASSUMED_HEIGHT_M``.
    """

    hazard_class: HazardClass
    vibration_ms: tuple[int, ...]
    approaching_near_template: str = APPROACHING_NEAR_TEMPLATE
    near_template: str = NEAR_TEMPLATE
    side_template: str = SIDE_TEMPLATE

    @property
    def spoken_label(self) -> str:
        return self.hazard_class.display_name


ALERT_PROFILES: dict[HazardClass, AlertProfile] = {
    HazardClass.PERSON: AlertProfile(
        hazard_class=HazardClass.PERSON,
        vibration_ms=(100, 80, 100),
    ),
    HazardClass.MOTORCYCLE: AlertProfile(
        hazard_class=HazardClass.MOTORCYCLE,
        vibration_ms=(300,),
    ),
    HazardClass.BICYCLE: AlertProfile(
        hazard_class=HazardClass.BICYCLE,
        vibration_ms=(120,),
    ),
}

DEFAULT_PROFILE = AlertProfile(hazard_class=HazardClass.UNKNOWN, vibration_ms=(80,))

BEEP_PANS: dict[HorizontalBucket, BeepPan] = {
    HorizontalBucket.LEFT: BeepPan(left_gain=1.0, right_gain=0.2),
    HorizontalBucket.RIGHT: BeepPan(left_gain=0.2, right_gain=1.0),
    HorizontalBucket.CENTER: BeepPan(left_gain=0.85, right_gain=0.85),
}


def profile_for(hazard_class: HazardClass) -> AlertProfile:
    return ALERT_PROFILES.get(hazard_class, DEFAULT_PROFILE)


def beep_pan_for(bucket: HorizontalBucket) -> BeepPan:
    return BEEP_PANS[bucket]
