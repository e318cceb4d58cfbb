"""
Relaxation Suggestion Tests
===========================

Activity selection by mood and saving chosen activities.
"""

import json
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from app.core.errors import ErrorCodes, ValidationError
from app.models.mood import Mood
from app.services.relaxation_service import (
    NO_MOOD_MESSAGE,
    RELAXATION_ACTIVITIES,
    RelaxationActivity,
    RelaxationService,
    mood_message,
    select_activities,
)

USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def _ids(activities):
    return [a.id for a in activities]


class TestSelectActivities:
    def test_catalog_has_nine_entries(self):
        assert len(RELAXATION_ACTIVITIES) == 9

    def test_low_mood(self):
        assert _ids(select_activities(1)) == ["deep-breathing", "gentle-stretching", "comfort-music"]

    def test_neutral_mood(self):
        assert _ids(select_activities(3)) == ["nature-walk", "reading", "mindful-tea", "yoga-flow"]

    def test_high_mood(self):
        assert _ids(select_activities(5)) == ["running-jogging", "yoga-flow", "creative-writing"]

    def test_falls_back_to_neutral_when_nothing_matches(self):
        catalog = [
            RelaxationActivity("a", "A", "", "", "calm", 1, 1),
            RelaxationActivity("b", "B", "", "", "calm", 2, 4),
        ]
        assert _ids(select_activities(5, catalog)) == ["b"]

    def test_to_dict_uses_camel_case_ranges(self):
        data = RELAXATION_ACTIVITIES[0].to_dict()
        assert data["minMood"] == 1
        assert data["maxMood"] == 2
        assert "min_mood" not in data


class TestMoodMessage:
    @pytest.mark.parametrize("rating", [1, 2])
    def test_tough_time(self, rating):
        assert "tough time" in mood_message(rating)

    def test_balance(self):
        assert "balance" in mood_message(3)

    @pytest.mark.parametrize("rating", [4, 5])
    def test_positive(self, rating):
        assert "positive" in mood_message(rating)


class TestRelaxationService:
    @pytest.mark.asyncio
    async def test_suggestions_without_mood_today(self, db):
        service = RelaxationService(db)
        with patch.object(service.moods, "get_today_mood", AsyncMock(return_value=None)):
            result = await service.get_suggestions(USER_ID, NOW)

        assert result == {
            "activities": [],
            "moodRating": None,
            "message": NO_MOOD_MESSAGE,
            "hasLoggedMoodToday": False,
        }

    @pytest.mark.asyncio
    async def test_suggestions_with_mood_today(self, db):
        service = RelaxationService(db)
        mood = Mood(id=uuid.uuid4(), user_id=USER_ID, mood_rating=2, mood_at=NOW)
        with patch.object(service.moods, "get_today_mood", AsyncMock(return_value=mood)):
            result = await service.get_suggestions(USER_ID, NOW)

        assert result["hasLoggedMoodToday"] is True
        assert result["moodRating"] == 2
        assert [a["id"] for a in result["activities"]] == [
            "deep-breathing", "gentle-stretching", "comfort-music", "nature-walk", "reading",
        ]

    @pytest.mark.asyncio
    async def test_save_requires_selection(self, db):
        with pytest.raises(ValidationError) as exc_info:
            await RelaxationService(db).save_selected_activities(USER_ID, [])
        assert exc_info.value.code == ErrorCodes.RELAX_NO_SELECTION
        assert exc_info.value.message == "Please select at least 1 activity"

    @pytest.mark.asyncio
    async def test_save_requires_a_recent_mood(self, db):
        service = RelaxationService(db)
        with patch.object(service.moods, "get_latest", AsyncMock(return_value=None)):
            with pytest.raises(ValidationError) as exc_info:
                await service.save_selected_activities(USER_ID, ["reading"])
        assert exc_info.value.message == "No recent mood found"

    @pytest.mark.asyncio
    async def test_save_rejects_only_unknown_ids(self, db):
        service = RelaxationService(db)
        mood = Mood(id=uuid.uuid4(), user_id=USER_ID, mood_rating=3, mood_at=NOW)
        with patch.object(service.moods, "get_latest", AsyncMock(return_value=mood)):
            with pytest.raises(ValidationError) as exc_info:
                await service.save_selected_activities(USER_ID, ["skydiving"])
        assert exc_info.value.message == "No valid activities found"

    @pytest.mark.asyncio
    async def test_save_links_rows_to_latest_mood(self, db):
        service = RelaxationService(db)
        mood = Mood(id=uuid.uuid4(), user_id=USER_ID, mood_rating=3, mood_at=NOW)
        with patch.object(service.moods, "get_latest", AsyncMock(return_value=mood)):
            rows = await service.save_selected_activities(
                USER_ID, ["reading", "skydiving", "yoga-flow"], NOW,
            )

        assert len(rows) == 2
        assert all(row.mood_id == mood.id for row in rows)
        assert [json.loads(row.activity_suggestion)["id"] for row in rows] == ["reading", "yoga-flow"]
        db.add_all.assert_called_once_with(rows)
        db.flush.assert_awaited_once()
