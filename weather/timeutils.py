from __future__ import annotations

from zoneinfo import ZoneInfo


def get_zone(tz_str: str) -> ZoneInfo:
    """Return a ZoneInfo instance or raise for invalid input."""

    try:
        return ZoneInfo(tz_str)
    except Exception as exc:  # pragma: no cover - zoneinfo raised
        raise ValueError(f"Invalid timezone: {tz_str}") from exc
