"""
Service Layer Tests
===================

Mood, goal, journal and account services against a mocked session.
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import ErrorCodes, NotFoundError, ValidationError
from app.models.goal import Goal
from app.models.journal import JournalEntry
from app.models.mood import Mood
from app.models.user import User
from app.services.account_service import AccountService
from app.services.goal_service import GoalService
from app.services.journal_service import JournalService
from app.services.mood_service import MoodService, validate_mood_rating

from tests.conftest import db_result

USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


class TestValidateMoodRating:
    @pytest.mark.parametrize("value,expected", [("1", 1), ("5", 5), (" 3 ", 3), (4, 4)])
    def test_valid(self, value, expected):
        assert validate_mood_rating(value) == expected

    @pytest.mark.parametrize("value", [None, "", "0", "6", "abc", "2.5"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_mood_rating(value)
        assert exc_info.value.message == "Invalid mood rating. Must be between 1 and 5."
        assert exc_info.value.status_code == 400


class TestMoodService:
    @pytest.mark.asyncio
    async def test_first_mood_of_the_day_inserts(self, db):
        service = MoodService(db)
        with patch.object(service, "get_today_mood", AsyncMock(return_value=None)):
            mood, created = await service.save_mood(USER_ID, 4, NOW)

        assert created is True
        assert mood.mood_rating == 4
        assert mood.mood_at == NOW
        db.add.assert_called_once_with(mood)

    @pytest.mark.asyncio
    async def test_second_mood_updates_todays_row(self, db):
        existing = Mood(id=uuid.uuid4(), user_id=USER_ID, mood_rating=2, mood_at=NOW)
        service = MoodService(db)
        with patch.object(service, "get_today_mood", AsyncMock(return_value=existing)):
            mood, created = await service.save_mood(USER_ID, 5, NOW)

        assert created is False
        assert mood is existing
        assert existing.mood_rating == 5
        assert existing.updated_at == NOW
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_latest_empty(self, db):
        db.execute.return_value = db_result(items=[])
        assert await MoodService(db).get_latest(USER_ID) is None


class TestGoalService:
    @pytest.mark.asyncio
    async def test_create_trims_and_defaults_progress(self, db):
        goal = await GoalService(db).create_goal(USER_ID, "  Walk  ", " Indefinite ")

        assert goal.name == "Walk"
        assert goal.target == "Indefinite"
        assert goal.progress == "Not Started"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,target,message", [
        ("", "daily", "Goal name is required"),
        ("Walk", "   ", "Frequency is required"),
    ])
    async def test_create_validation(self, db, name, target, message):
        with pytest.raises(ValidationError) as exc_info:
            await GoalService(db).create_goal(USER_ID, name, target)
        assert exc_info.value.message == message
        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_unknown_goal_is_404(self, db):
        db.execute.return_value = db_result(first=None)
        with pytest.raises(NotFoundError) as exc_info:
            await GoalService(db).update_goal(uuid.uuid4(), USER_ID, "Walk", "daily")
        assert exc_info.value.code == ErrorCodes.GOAL_NOT_FOUND

    @pytest.mark.asyncio
    async def test_complete_marks_completed(self, db):
        goal = Goal(id=uuid.uuid4(), user_id=USER_ID, name="Walk", target="daily", progress="In Progress")
        db.execute.return_value = db_result(first=goal)

        result = await GoalService(db).complete_goal(goal.id, USER_ID, NOW)

        assert result.progress == "Completed"
        assert result.updated_at == NOW

    @pytest.mark.asyncio
    async def test_delete_missing_goal_is_404(self, db):
        db.execute.return_value = db_result(rowcount=0)
        with pytest.raises(NotFoundError):
            await GoalService(db).delete_goal(uuid.uuid4(), USER_ID)

    @pytest.mark.asyncio
    async def test_goals_for_day(self, db):
        goals = [
            Goal(id=uuid.uuid4(), user_id=USER_ID, name="a", target="Indefinite", progress="Not Started"),
            Goal(id=uuid.uuid4(), user_id=USER_ID, name="b", target="2026-03-11", progress="Not Started"),
            Goal(id=uuid.uuid4(), user_id=USER_ID, name="c", target="daily", progress="Not Started"),
        ]
        db.execute.return_value = db_result(items=goals)

        result = await GoalService(db).get_goals_for_day(USER_ID, NOW.date())

        assert [g.name for g in result] == ["a", "c"]


class TestJournalService:
    @pytest.mark.asyncio
    async def test_create_dates_entry_today_and_nulls_blank_content(self, db):
        entry = await JournalService(db).create_entry(USER_ID, " Monday ", "   ", NOW)

        assert entry.title == "Monday"
        assert entry.content is None
        assert entry.date_created == NOW.date()

    @pytest.mark.asyncio
    async def test_create_requires_title(self, db):
        with pytest.raises(ValidationError) as exc_info:
            await JournalService(db).create_entry(USER_ID, "", "text")
        assert exc_info.value.message == "Title is required"

    @pytest.mark.asyncio
    async def test_update_sets_updated_at(self, db):
        entry = JournalEntry(id=uuid.uuid4(), user_id=USER_ID, title="Old", content="x", date_created=NOW.date())
        db.execute.return_value = db_result(first=entry)

        result = await JournalService(db).update_entry(entry.id, USER_ID, "New", "body", NOW)

        assert result.title == "New"
        assert result.content == "body"
        assert result.updated_at == NOW

    @pytest.mark.asyncio
    async def test_missing_entry_is_404(self, db):
        db.execute.return_value = db_result(first=None)
        with pytest.raises(NotFoundError):
            await JournalService(db).get_entry_by_id(uuid.uuid4(), USER_ID)


class TestAccountService:
    @pytest.mark.asyncio
    async def test_display_names_default_when_missing(self, db):
        db.execute.return_value = db_result(first=None)
        assert await AccountService(db).get_display_names(USER_ID) == {
            "username": "User",
            "full_name": None,
        }

    @pytest.mark.asyncio
    async def test_display_names_default_on_database_error(self, db):
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
        names = await AccountService(db).get_display_names(USER_ID)
        assert names["username"] == "User"

    @pytest.mark.asyncio
    async def test_display_names_from_profile(self, db):
        profile = User(id=USER_ID, email="sam@example.com", username="sam", full_name="Sam Lee")
        db.execute.return_value = db_result(first=profile)
        assert await AccountService(db).get_display_names(USER_ID) == {
            "username": "sam",
            "full_name": "Sam Lee",
        }

    @pytest.mark.asyncio
    async def test_update_profile_creates_missing_row(self, db):
        db.execute.return_value = db_result(first=None)

        profile = await AccountService(db).update_profile(
            USER_ID, "sam@example.com", " Sam ", "", "555", now=NOW,
        )

        assert profile.full_name == "Sam"
        assert profile.username is None
        assert profile.phone_number == "555"
        db.add.assert_called_once_with(profile)
