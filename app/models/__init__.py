"""
Database Models
===============

SQLAlchemy ORM models for all database entities.

All models are imported here to ensure they are registered
with SQLAlchemy's metadata for migrations and relationships.
"""

from app.models.user import User
from app.models.mood import Mood, MIN_MOOD_RATING, MAX_MOOD_RATING
from app.models.goal import Goal, GoalProgress, INDEFINITE_TARGET
from app.models.journal import JournalEntry
from app.models.physical_health import PhysicalHealth
from app.models.article import Article
from app.models.relaxation import RelaxationSuggestion

__all__ = [
    # User
    "User",
    # Mood
    "Mood",
    "MIN_MOOD_RATING",
    "MAX_MOOD_RATING",
    # Goal
    "Goal",
    "GoalProgress",
    "INDEFINITE_TARGET",
    # Journal
    "JournalEntry",
    # Physical health
    "PhysicalHealth",
    # Articles
    "Article",
    # Relaxation
    "RelaxationSuggestion",
]
