"""
Mood Statistics Tests
=====================

Stress level, visualization summary, week view, and window starts.
"""

import uuid
from datetime import date, datetime, timezone

import pytest

from app.models.mood import Mood
from app.services.stats_service import (
    build_week_view,
    calculate_mood_stats,
    calculate_stress_level,
    mood_emoji,
    period_start,
)
from app.utils.helpers import round_half_up


def _mood(rating: int, at: datetime) -> Mood:
    return Mood(id=uuid.uuid4(), user_id=uuid.uuid4(), mood_rating=rating, mood_at=at)


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(2.5, 3), (50.5, 51), (49.4, 49), (0.0, 0)])
    def test_integers(self, value, expected):
        assert round_half_up(value) == expected

    def test_one_decimal(self):
        assert round_half_up(3.25, 1) == 3.3
        assert round_half_up(3.333, 1) == 3.3


class TestStressLevel:
    def test_no_ratings(self):
        assert calculate_stress_level([]) == 0

    def test_all_fives_is_zero_stress(self):
        assert calculate_stress_level([5, 5, 5]) == 0

    def test_all_ones(self):
        assert calculate_stress_level([1]) == 80

    def test_half_rounds_up(self):
        # mean 2.75 -> 45% stress; mean 3.5 -> 30%
        assert calculate_stress_level([2, 3, 3, 3]) == 45
        assert calculate_stress_level([3, 4]) == 30

    def test_rounding_of_fraction(self):
        # mean 11/3 -> 26.67%
        assert calculate_stress_level([3, 4, 4]) == 27


class TestMoodStats:
    def test_empty(self):
        assert calculate_mood_stats([]) == {
            "highest": 0,
            "lowest": 0,
            "average": 0,
            "healthScore": 0,
            "totalEntries": 0,
        }

    def test_summary(self):
        stats = calculate_mood_stats([3, 4, 4])
        assert stats["highest"] == 4
        assert stats["lowest"] == 3
        assert stats["average"] == 3.7
        assert stats["healthScore"] == 73
        assert stats["totalEntries"] == 3


class TestWeekView:
    def test_monday_first_with_first_mood_per_day(self):
        # Wednesday
        today = date(2026, 3, 11)
        moods = [
            _mood(2, datetime(2026, 3, 9, 8, 0, tzinfo=timezone.utc)),
            _mood(5, datetime(2026, 3, 9, 20, 0, tzinfo=timezone.utc)),
            _mood(4, datetime(2026, 3, 11, 9, 0, tzinfo=timezone.utc)),
            # previous week
            _mood(1, datetime(2026, 3, 8, 9, 0, tzinfo=timezone.utc)),
        ]

        week = build_week_view(moods, today)

        assert [d["day"] for d in week] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert week[0] == {"day": "Mon", "mood": 2, "emoji": "😰"}
        assert week[1] == {"day": "Tue", "mood": None, "emoji": "😐"}
        assert week[2]["mood"] == 4
        assert all(d["mood"] is None for d in week[3:])

    @pytest.mark.parametrize("rating,emoji", [(5, "😊"), (4, "🙂"), (3, "😐"), (2, "😰"), (1, "😢"), (None, "😐")])
    def test_emoji_map(self, rating, emoji):
        assert mood_emoji(rating) == emoji


class TestPeriodStart:
    def test_weekly(self):
        now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert period_start("weekly", now) == datetime(2026, 3, 3, 12, 0, tzinfo=timezone.utc)

    def test_monthly(self):
        now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert period_start("monthly", now) == datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc)

    def test_monthly_clamps_to_month_end(self):
        now = datetime(2026, 3, 31, 6, 0, tzinfo=timezone.utc)
        assert period_start("monthly", now) == datetime(2026, 2, 28, 6, 0, tzinfo=timezone.utc)

    def test_monthly_across_year(self):
        now = datetime(2026, 1, 15, tzinfo=timezone.utc)
        assert period_start("monthly", now) == datetime(2025, 12, 15, tzinfo=timezone.utc)
