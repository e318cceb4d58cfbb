"""
Wellbeing Schemas
=================

Schemas for relaxation suggestions, the dashboard, and the mood
visualization page.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ActivityOut(BaseModel):
    """A relaxation activity from the catalog."""

    id: str
    title: str
    description: str
    image: str
    category: str
    minMood: int
    maxMood: int


class RelaxationSuggestionsOut(BaseModel):
    activities: list[ActivityOut] = Field(default_factory=list)
    moodRating: Optional[int] = None
    message: str
    hasLoggedMoodToday: bool


class ActivitySelection(BaseModel):
    """Request for saving chosen relaxation activities."""

    activity_ids: list[str] = Field(default_factory=list)


class ActivitySaveResult(BaseModel):
    count: int
    message: str


class DashboardOut(BaseModel):
    user: dict[str, Any]
    latestMood: Optional[dict[str, Any]] = None
    weeklyMoods: list[dict[str, Any]] = Field(default_factory=list)
    physicalHealth: Optional[dict[str, Any]] = None
    articles: list[dict[str, Any]] = Field(default_factory=list)
    suggestions: list[dict[str, Any]] = Field(default_factory=list)
    stressLevel: int
    goalsCount: int


class MoodStats(BaseModel):
    highest: int
    lowest: int
    average: float
    healthScore: int
    totalEntries: int


class WeekdayMood(BaseModel):
    day: str
    mood: Optional[int] = None
    emoji: str


class VisualizationOut(BaseModel):
    period: str
    data: list[dict[str, Any]] = Field(default_factory=list)
    stats: MoodStats
    weeklyMoods: list[WeekdayMood]
