"""UTC timestamps in the same shape as JavaScript's Date.toISOString()."""

from datetime import datetime, timezone
from typing import Callable


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(moment: datetime) -> str:
    """2024-05-01T12:30:00.123Z"""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_now(now: Callable[[], datetime] = utc_now) -> str:
    return isoformat(now())
