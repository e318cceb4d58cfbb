"""
Helper Functions
================

Common utility functions used across the application.
"""

import json
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from app.config import settings


def utc_now() -> datetime:
    """Get current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


def local_today(now: Optional[datetime] = None, tz: Optional[ZoneInfo] = None) -> date:
    """The current calendar day in the application timezone."""
    tz = tz or settings.timezone
    now = now or utc_now()
    return now.astimezone(tz).date()


def day_bounds(day: date, tz: Optional[ZoneInfo] = None) -> tuple[datetime, datetime]:
    """
    Half-open ``[start, end)`` UTC interval covering ``day`` in the
    application timezone.
    """
    tz = tz or settings.timezone
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def today_bounds(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """``day_bounds`` for the current day."""
    return day_bounds(local_today(now))


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round with halves going up (``2.5 -> 3``, ``50.5 -> 51``), unlike
    the built-in ``round``.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def parse_json_text(raw: Optional[str]) -> dict[str, Any]:
    """
    Decode a JSON object stored in a text column.

    Empty, malformed, or non-object values decode to ``{}``.
    """
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return value if isinstance(value, dict) else {}
