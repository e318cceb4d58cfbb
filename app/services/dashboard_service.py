"""
Dashboard Service
=================

Assembles the dashboard overview from the individual data services.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import AuthUser
from app.services.article_service import ArticleService
from app.services.goal_service import GoalService
from app.services.mood_service import MoodService
from app.services.physical_health_service import PhysicalHealthService, serialize_log
from app.services.relaxation_service import RelaxationService, serialize_suggestion
from app.services.stats_service import calculate_stress_level
from app.utils.helpers import utc_now

WEEKLY_WINDOW_DAYS = 7
DASHBOARD_ARTICLES = 2
DASHBOARD_SUGGESTIONS = 2


class DashboardService:
    """Service for the dashboard overview."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_dashboard(
        self,
        user: AuthUser,
        now: Optional[datetime] = None,
    ) -> dict[str, Any]:
        now = now or utc_now()
        moods = MoodService(self.db)

        latest_mood = await moods.get_latest(user.id)
        weekly_moods = await moods.get_moods_since(user.id, now - timedelta(days=WEEKLY_WINDOW_DAYS))
        physical_health = await PhysicalHealthService(self.db).get_latest(user.id)
        articles = await ArticleService(self.db).get_articles(limit=DASHBOARD_ARTICLES)
        suggestions = await RelaxationService(self.db).get_recent(user.id, limit=DASHBOARD_SUGGESTIONS)
        goals_count = await GoalService(self.db).count(user.id)

        return {
            "user": {"id": str(user.id), "email": user.email},
            "latestMood": latest_mood.to_dict() if latest_mood else None,
            "weeklyMoods": [mood.to_dict() for mood in weekly_moods],
            "physicalHealth": serialize_log(physical_health),
            "articles": [{"id": str(a.id), "title": a.title} for a in articles],
            "suggestions": [serialize_suggestion(s) for s in suggestions],
            "stressLevel": calculate_stress_level([m.mood_rating for m in weekly_moods]),
            "goalsCount": goals_count,
        }
