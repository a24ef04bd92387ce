# utils/timeframe.py
_UNITS = (
    ("w", 7 * 24 * 60 * 60),
    ("d", 24 * 60 * 60),
    ("h", 60 * 60),
    ("m", 60),
)


def interval_label(seconds: int) -> str:
    """
    Render a poll interval as a short timeframe key ('1m', '4h', '1d', ...).
    Falls back to plain seconds when the interval is not a whole unit.
    """
    if seconds <= 0:
        raise ValueError(f"interval must be positive, got {seconds}")
    for suffix, size in _UNITS:
        if seconds % size == 0:
            return f"{seconds // size}{suffix}"
    return f"{seconds}s"
