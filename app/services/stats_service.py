"""
Mood Statistics
===============

Derived figures over mood ratings: the dashboard stress level, the
visualization summary, and the Monday-first week view.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Sequence

from app.config import settings
from app.models.mood import MAX_MOOD_RATING, Mood
from app.utils.helpers import round_half_up

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

MOOD_EMOJIS = {
    5: "😊",
    4: "🙂",
    3: "😐",
    2: "😰",
    1: "😢",
}
DEFAULT_MOOD_EMOJI = "😐"


def calculate_stress_level(ratings: Sequence[int]) -> int:
    """
    Stress percentage from mood ratings: ``(1 - mean / 5) * 100``,
    rounded half up. No ratings means no stress reading (0).
    """
    if not ratings:
        return 0
    mean = sum(ratings) / len(ratings)
    return int(round_half_up((1 - mean / MAX_MOOD_RATING) * 100))


def calculate_mood_stats(ratings: Sequence[int]) -> dict[str, Any]:
    if not ratings:
        return {
            "highest": 0,
            "lowest": 0,
            "average": 0,
            "healthScore": 0,
            "totalEntries": 0,
        }

    average = sum(ratings) / len(ratings)
    return {
        "highest": max(ratings),
        "lowest": min(ratings),
        "average": round_half_up(average, 1),
        "healthScore": int(round_half_up(average / MAX_MOOD_RATING * 100)),
        "totalEntries": len(ratings),
    }


def mood_emoji(rating: Optional[int]) -> str:
    return MOOD_EMOJIS.get(rating, DEFAULT_MOOD_EMOJI)


def build_week_view(moods: Iterable[Mood], today: date) -> list[dict[str, Any]]:
    """
    One slot per day of the current Monday-to-Sunday week holding the
    first mood logged that day.
    """
    tz = settings.timezone
    monday = today - timedelta(days=today.weekday())

    first_by_day: dict[date, int] = {}
    for mood in moods:
        day = mood.mood_at.astimezone(tz).date()
        first_by_day.setdefault(day, mood.mood_rating)

    week = []
    for offset, label in enumerate(WEEKDAY_LABELS):
        rating = first_by_day.get(monday + timedelta(days=offset))
        week.append({
            "day": label,
            "mood": rating,
            "emoji": mood_emoji(rating),
        })
    return week


def period_start(period: str, now: datetime) -> datetime:
    """
    Start of the visualization window: seven days back for ``weekly``,
    one calendar month back otherwise (clamped to the month's last day).
    """
    if period == "weekly":
        return now - timedelta(days=7)

    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)
