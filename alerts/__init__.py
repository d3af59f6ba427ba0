"""Alert selection and dispatch package."""

__all__ = ["AlertDispatcher", "DispatchConfig", "select_hazard"]


def __getattr__(name: str):
    if name in ("AlertDispatcher", "DispatchConfig"):
        from alerts import dispatcher

        return getattr(dispatcher, name)
    if name == "select_hazard":
        from alerts.prioritizer import select_hazard

        return select_hazard
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
