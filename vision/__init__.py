"""Vision package exports."""

from vision.buckets import DistanceBucket, HorizontalBucket, bucket_distance, bucket_horizontal
from vision.detections import (
    BoundingBox,
    ContextualDetection,
    Detection,
    DetectionFrame,
    HazardClass,
)
from vision.distance import estimate_distance
from vision.filtering import filter_detections
from vision.matching import Match, match_detections
from vision.trend import classify_approach

__all__ = [
    "BoundingBox",
    "ContextualDetection",
    "Detection",
    "DetectionFrame",
    "DistanceBucket",
    "HazardClass",
    "HorizontalBucket",
    "Match",
    "bucket_distance",
    "bucket_horizontal",
    "classify_approach",
    "estimate_distance",
    "filter_detections",
    "match_detections",
]
