"""JSON-lines detection replay reader.

Each non-empty line is one frame::

    {"timestamp_ms": 0, "width": 320, "height": 240,
     "detections": [{"label": "person", "score": 0.9, "box": [100, 50, 140, 200]}]}
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Iterator

from vision.detections import BoundingBox, Detection, DetectionFrame


class ReplayFormatError(ValueError):
    """Raised when a replay line cannot be turned into a frame."""


def parse_detection(payload: dict[str, Any]) -> Detection:
    box = payload["box"]
    if isinstance(box, dict):
        left, top, right, bottom = box["left"], box["top"], box["right"], box["bottom"]
    else:
        left, top, right, bottom = box
    return Detection(
        label=str(payload["label"]),
        score=float(payload["score"]),
        box=BoundingBox(float(left), float(top), float(right), float(bottom)),
    )


def parse_frame(payload: dict[str, Any], frame_id: int | None = None) -> DetectionFrame:
    return DetectionFrame(
        timestamp_ms=int(payload["timestamp_ms"]),
        width=int(payload["width"]),
        height=int(payload["height"]),
        detections=[parse_detection(item) for item in payload.get("detections") or []],
        frame_id=payload.get("frame_id", frame_id),
    )


def iter_frames(lines: Iterable[str]) -> Iterator[DetectionFrame]:
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
            if not isinstance(payload, dict):
                raise TypeError("frame must be a JSON object")
            yield parse_frame(payload, frame_id=line_number)
        except (KeyError, TypeError, ValueError) as exc:
            raise ReplayFormatError(f"Invalid frame on line {line_number}: {exc}") from exc
