"""
Utilities Module
================

Helper functions and utility classes.
"""

from app.utils.helpers import (
    day_bounds,
    local_today,
    parse_json_text,
    round_half_up,
    today_bounds,
    utc_now,
)

__all__ = [
    "day_bounds",
    "local_today",
    "parse_json_text",
    "round_half_up",
    "today_bounds",
    "utc_now",
]
