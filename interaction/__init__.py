"""Output channel package utilities."""

__all__ = [
    "LoggingBeepChannel",
    "LoggingHapticChannel",
    "LoggingSpeechChannel",
    "StereoBeepPlayer",
]


def __getattr__(name: str):
    if name == "StereoBeepPlayer":
        from interaction.beep import StereoBeepPlayer

        return StereoBeepPlayer
    if name in ("LoggingBeepChannel", "LoggingHapticChannel", "LoggingSpeechChannel"):
        from interaction import channels

        return getattr(channels, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
