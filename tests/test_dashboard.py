"""
Dashboard and Account Aggregate Tests
=====================================

``DashboardService.get_dashboard``, ``AccountService.export_user_data``
and the email lookup, against the mocked session. Queries run in a
fixed order, so ``execute`` is fed one result per query.
"""

import json
import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.security import AuthUser
from app.models.article import Article
from app.models.goal import Goal
from app.models.journal import JournalEntry
from app.models.mood import Mood
from app.models.physical_health import PhysicalHealth
from app.models.relaxation import RelaxationSuggestion
from app.models.user import User
from app.services.account_service import AccountService
from app.services.dashboard_service import DashboardService

from tests.conftest import USER_EMAIL, USER_ID, db_result

NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


def _mood(rating: int, days_ago: int) -> Mood:
    return Mood(id=uuid.uuid4(), user_id=USER_ID, mood_rating=rating, mood_at=NOW - timedelta(days=days_ago))


def _health_log() -> PhysicalHealth:
    return PhysicalHealth(
        id=uuid.uuid4(),
        user_id=USER_ID,
        complaints=json.dumps({"weight": 70.5, "sleep_hours": 7, "step_counts": 8000}),
        health_id="health_1773135000000",
    )


class TestGetDashboard:
    @pytest.mark.asyncio
    async def test_assembles_overview(self, db):
        weekly = [_mood(2, 5), _mood(4, 3), _mood(3, 1)]
        article = Article(id=uuid.uuid4(), title="Breathing basics", content="Slow down.")
        suggestion = RelaxationSuggestion(
            id=uuid.uuid4(),
            user_id=USER_ID,
            activity_suggestion=json.dumps({"id": 1, "title": "Deep Breathing"}),
        )
        db.execute.side_effect = [
            db_result(items=[weekly[-1]]),
            db_result(items=weekly),
            db_result(first=_health_log()),
            db_result(items=[article]),
            db_result(items=[suggestion]),
            db_result(scalar=4),
        ]

        user = AuthUser(id=USER_ID, email=USER_EMAIL)
        data = await DashboardService(db).get_dashboard(user, now=NOW)

        assert data["user"] == {"id": str(USER_ID), "email": USER_EMAIL}
        assert data["latestMood"]["mood_rating"] == 3
        assert [m["mood_rating"] for m in data["weeklyMoods"]] == [2, 4, 3]
        # mean 3 -> (1 - 3/5) * 100
        assert data["stressLevel"] == 40
        assert data["physicalHealth"]["complaints"] == {"weight": 70.5, "sleep_hours": 7, "step_counts": 8000}
        assert data["articles"] == [{"id": str(article.id), "title": "Breathing basics"}]
        assert data["suggestions"][0]["activity_suggestion"] == {"id": 1, "title": "Deep Breathing"}
        assert data["goalsCount"] == 4

    @pytest.mark.asyncio
    async def test_new_user(self, db):
        db.execute.side_effect = [
            db_result(),
            db_result(),
            db_result(),
            db_result(),
            db_result(),
            db_result(scalar=None),
        ]

        data = await DashboardService(db).get_dashboard(AuthUser(id=USER_ID), now=NOW)

        assert data["latestMood"] is None
        assert data["weeklyMoods"] == []
        assert data["physicalHealth"] is None
        assert data["stressLevel"] == 0
        assert data["goalsCount"] == 0


class TestExportUserData:
    @pytest.mark.asyncio
    async def test_every_section(self, db):
        profile = User(id=USER_ID, email=USER_EMAIL, username="sam", full_name="Sam Lee")
        goal = Goal(id=uuid.uuid4(), user_id=USER_ID, name="Walk", target="Daily", progress="Not Started")
        entry = JournalEntry(id=uuid.uuid4(), user_id=USER_ID, title="Monday", date_created=date(2026, 3, 9))
        mood = _mood(5, 0)
        db.execute.side_effect = [
            db_result(first=profile),
            db_result(items=[goal]),
            db_result(items=[entry]),
            db_result(items=[mood]),
            db_result(items=[_health_log()]),
        ]

        data = await AccountService(db).export_user_data(USER_ID, now=NOW)

        assert data["userData"]["username"] == "sam"
        assert data["userData"]["id"] == str(USER_ID)
        assert [g["name"] for g in data["goals"]] == ["Walk"]
        assert data["journals"][0]["date_created"] == "2026-03-09"
        assert data["moods"][0]["mood_rating"] == 5
        assert data["physicalHealth"][0]["complaints"]["step_counts"] == 8000
        assert data["exportedAt"] == NOW.isoformat()

    @pytest.mark.asyncio
    async def test_missing_profile(self, db):
        db.execute.side_effect = [db_result() for _ in range(5)]

        data = await AccountService(db).export_user_data(USER_ID, now=NOW)

        assert data["userData"] is None
        assert data["goals"] == data["journals"] == data["moods"] == data["physicalHealth"] == []


class TestEmailLookup:
    @pytest.mark.asyncio
    async def test_matches_exactly_ignoring_case(self, db):
        await AccountService(db).email_exists("  John_Doe@X.com ")

        stmt = db.execute.await_args.args[0]
        sql = str(stmt.compile(compile_kwargs={"literal_binds": True}))
        assert "lower(users.email) = 'john_doe@x.com'" in sql
        assert "LIKE" not in sql.upper()
