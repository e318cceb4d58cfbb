"""
Relaxation Service
==================

Suggests relaxation activities matching today's mood and records the
ones the user picks.

Each catalog activity declares an inclusive ``[min_mood, max_mood]``
range; an activity is suggested when today's rating falls inside it.
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Iterable, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ErrorCodes, ValidationError
from app.models.relaxation import RelaxationSuggestion
from app.services.mood_service import MoodService
from app.utils.helpers import parse_json_text, utc_now

logger = logging.getLogger(__name__)

NEUTRAL_MOOD = 3
NO_MOOD_MESSAGE = "Seems like your mood its not enough!"


@dataclass(frozen=True)
class RelaxationActivity:
    id: str
    title: str
    description: str
    image: str
    category: str
    min_mood: int
    max_mood: int

    def matches(self, rating: int) -> bool:
        return self.min_mood <= rating <= self.max_mood

    def to_dict(self) -> dict[str, Any]:
        """Catalog snapshot in the shape stored in ``activity_suggestion``."""
        data = asdict(self)
        data["minMood"] = data.pop("min_mood")
        data["maxMood"] = data.pop("max_mood")
        return data


RELAXATION_ACTIVITIES: tuple[RelaxationActivity, ...] = (
    # Low mood (1-2): gentle, comforting
    RelaxationActivity(
        id="deep-breathing",
        title="Deep Breathing",
        description=(
            "When you are feeling low or overwhelmed, deep breathing can help ground you. "
            "Try the 4-7-8 technique: Inhale for 4 seconds, hold for 7, and exhale for 8. "
            "It calms the nervous system immediately."
        ),
        image="https://images.unsplash.com/photo-1506126613408-eca07ce68773?w=800&h=600&fit=crop",
        category="mindfulness",
        min_mood=1,
        max_mood=2,
    ),
    RelaxationActivity(
        id="gentle-stretching",
        title="Gentle Stretching",
        description=(
            "Release tension stored in your body with slow, gentle stretches. No need for a "
            "full workout, just move your neck, shoulders, and back to let go of physical stress."
        ),
        image="https://images.unsplash.com/photo-1571019614242-c5c5dee9f50b?w=800&h=600&fit=crop",
        category="movement",
        min_mood=1,
        max_mood=2,
    ),
    RelaxationActivity(
        id="comfort-music",
        title="Calming Music",
        description=(
            "Listen to slow, ambient, or classical music. Sound therapy can lower cortisol "
            "levels and provide a sense of safety and comfort when things feel heavy."
        ),
        image="https://images.unsplash.com/photo-1511671782779-c97d3d27a1d4?w=800&h=600&fit=crop",
        category="leisure",
        min_mood=1,
        max_mood=2,
    ),
    # Neutral mood (3): balanced, engaging but not intense
    RelaxationActivity(
        id="nature-walk",
        title="Nature Walk",
        description=(
            "A walk in nature helps clear the mind and provides a fresh perspective. The fresh "
            "air and natural surroundings can gently lift your spirits without demanding too "
            "much energy."
        ),
        image="https://images.unsplash.com/photo-1441974231531-c6227db76b6e?w=800&h=600&fit=crop",
        category="nature",
        min_mood=2,
        max_mood=4,
    ),
    RelaxationActivity(
        id="reading",
        title="Reading",
        description=(
            "Reading helps relax the mind, reduce stress, and improve focus by allowing your "
            "brain to slow down and shift away from daily pressure. Aim to read for at least "
            "20–30 minutes."
        ),
        image="https://images.unsplash.com/photo-1507842217343-583bb7270b66?w=800&h=600&fit=crop",
        category="leisure",
        min_mood=2,
        max_mood=4,
    ),
    RelaxationActivity(
        id="mindful-tea",
        title="Mindful Tea/Coffee",
        description=(
            "Prepare a warm beverage and focus entirely on the experience: the warmth of the "
            "cup, the aroma, and the taste. A simple grounding ritual for a balanced day."
        ),
        image="https://images.unsplash.com/photo-1544787219-7f47ccb76574?w=800&h=600&fit=crop",
        category="mindfulness",
        min_mood=3,
        max_mood=4,
    ),
    # High mood (4-5): active, creative, energetic
    RelaxationActivity(
        id="running-jogging",
        title="Running / Jogging",
        description=(
            "Channel your good energy into physical movement. Running releases endorphins "
            "that enhance your already positive state and strengthens your body."
        ),
        image="https://images.unsplash.com/photo-1476480862126-209bfaa8edc8?w=800&h=600&fit=crop",
        category="exercise",
        min_mood=4,
        max_mood=5,
    ),
    RelaxationActivity(
        id="yoga-flow",
        title="Vinyasa Yoga",
        description=(
            "A more active yoga flow to build strength and flexibility. Perfect when you feel "
            "capable and want to challenge your body while maintaining mental focus."
        ),
        image="https://images.unsplash.com/photo-1544367567-0f2fcb009e0b?w=800&h=600&fit=crop",
        category="movement",
        min_mood=3,
        max_mood=5,
    ),
    RelaxationActivity(
        id="creative-writing",
        title="Creative Writing",
        description=(
            "Use your positive headspace to create. Write a story, a poem, or journal about "
            "your success. Creativity flows best when you are feeling good."
        ),
        image="https://images.unsplash.com/photo-1455390582262-044cdead277a?w=800&h=600&fit=crop",
        category="creativity",
        min_mood=4,
        max_mood=5,
    ),
)

ACTIVITIES_BY_ID = {activity.id: activity for activity in RELAXATION_ACTIVITIES}


def select_activities(
    rating: int,
    catalog: Iterable[RelaxationActivity] = RELAXATION_ACTIVITIES,
) -> list[RelaxationActivity]:
    """
    Activities whose mood range contains ``rating``.

    Falls back to the neutral-range activities when nothing matches.
    """
    catalog = list(catalog)
    selected = [activity for activity in catalog if activity.matches(rating)]
    if selected:
        return selected
    return [activity for activity in catalog if activity.matches(NEUTRAL_MOOD)]


def mood_message(rating: int) -> str:
    if rating <= 2:
        return "It looks like you're having a tough time. Here are some gentle ways to take care of yourself."
    if rating == 3:
        return "You're feeling okay. Here are some activities to maintain your balance."
    return "You're feeling great! Here are some ways to channel that positive energy."


def serialize_suggestion(row: RelaxationSuggestion) -> dict[str, Any]:
    """Row dict with the activity snapshot decoded."""
    data = row.to_dict()
    data["activity_suggestion"] = parse_json_text(row.activity_suggestion)
    return data


class RelaxationService:
    """Service for relaxation suggestions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.moods = MoodService(db)

    async def get_suggestions(
        self,
        user_id: uuid.UUID,
        now: Optional[datetime] = None,
    ) -> dict[str, Any]:
        """Suggestions for today's mood, or an empty state if none is logged."""
        today_mood = await self.moods.get_today_mood(user_id, now)

        if today_mood is None:
            return {
                "activities": [],
                "moodRating": None,
                "message": NO_MOOD_MESSAGE,
                "hasLoggedMoodToday": False,
            }

        rating = today_mood.mood_rating
        return {
            "activities": [a.to_dict() for a in select_activities(rating)],
            "moodRating": rating,
            "message": mood_message(rating),
            "hasLoggedMoodToday": True,
        }

    async def save_selected_activities(
        self,
        user_id: uuid.UUID,
        activity_ids: Optional[list[str]],
        now: Optional[datetime] = None,
    ) -> list[RelaxationSuggestion]:
        """
        Store the chosen activities against the user's most recent mood.

        Unknown ids are ignored as long as at least one id is known.
        """
        if not activity_ids:
            raise ValidationError(
                message="Please select at least 1 activity",
                field="activity_ids",
                code=ErrorCodes.RELAX_NO_SELECTION,
            )

        recent_mood = await self.moods.get_latest(user_id)
        if recent_mood is None:
            raise ValidationError(
                message="No recent mood found",
                code=ErrorCodes.RELAX_NO_RECENT_MOOD,
            )

        wanted = set(activity_ids)
        selected = [a for a in RELAXATION_ACTIVITIES if a.id in wanted]
        if not selected:
            raise ValidationError(
                message="No valid activities found",
                field="activity_ids",
                code=ErrorCodes.RELAX_UNKNOWN_ACTIVITY,
            )

        now = now or utc_now()
        rows = [
            RelaxationSuggestion(
                user_id=user_id,
                mood_id=recent_mood.id,
                activity_suggestion=json.dumps(activity.to_dict()),
                created_at=now,
            )
            for activity in selected
        ]
        self.db.add_all(rows)
        await self.db.flush()

        logger.info("Saved %d relaxation activities for user %s", len(rows), user_id)
        return rows

    async def get_recent(self, user_id: uuid.UUID, limit: int = 2) -> list[RelaxationSuggestion]:
        stmt = (
            select(RelaxationSuggestion)
            .where(RelaxationSuggestion.user_id == user_id)
            .order_by(RelaxationSuggestion.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
