"""Audio device helpers."""

from __future__ import annotations

import importlib
import importlib.util
from typing import Any


STEREO_CHANNELS = 2


def require_pyaudio() -> Any:
    """Import PyAudio or raise ``RuntimeError`` when it is not installed."""

    if importlib.util.find_spec("pyaudio") is None:
        raise RuntimeError("PyAudio is required for beep output")
    return importlib.import_module("pyaudio")


def resolve_output_device_index(audio: object, device_name: str | None) -> int | None:
    """Resolve an output device index by exact name; ``None`` selects the default device."""

    if not device_name:
        return None

    get_count = getattr(audio, "get_device_count")
    get_info = getattr(audio, "get_device_info_by_index")
    for i in range(get_count()):
        info = get_info(i)
        if info.get("maxOutputChannels", 0) <= 0:
            continue
        if info.get("name") == device_name:
            return int(info.get("index", i))

    raise RuntimeError(f"Audio output device named '{device_name}' not found")
