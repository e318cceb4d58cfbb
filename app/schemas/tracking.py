"""
Tracking Schemas
================

Response schemas for moods, goals, journal entries, physical health
logs, and articles. Field names match the hosted table columns.
"""

from datetime import date, datetime
from typing import Any, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field


class MoodOut(BaseModel):
    """A stored mood rating."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    mood_rating: int
    mood_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MoodSaveResult(BaseModel):
    mood: MoodOut
    created: bool


class GoalOut(BaseModel):
    """A goal plus its display label and day-view membership."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    target: str
    progress: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status_label: Optional[str] = None


class GoalGroups(BaseModel):
    """Goals split for the "all goals" view."""

    active: list[GoalOut] = Field(default_factory=list)
    overdue: list[GoalOut] = Field(default_factory=list)
    completed: list[GoalOut] = Field(default_factory=list)


class JournalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    content: Optional[str] = None
    date_created: date
    updated_at: Optional[datetime] = None


class PhysicalHealthOut(BaseModel):
    """A physical-health log with its measurements decoded."""

    id: uuid.UUID
    user_id: uuid.UUID
    complaints: dict[str, Any] = Field(default_factory=dict)
    health_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PhysicalHealthToday(BaseModel):
    loggedToday: bool
    todayData: Optional[dict[str, Any]] = None


class ArticleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    content: Optional[str] = None
    url: Optional[str] = None
    date_published: Optional[datetime] = None
