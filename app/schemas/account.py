"""
Account Schemas
===============

Schemas for the settings page and profile lookups.
"""

from typing import Any, Optional

from pydantic import BaseModel


class DisplayNames(BaseModel):
    username: str
    full_name: Optional[str] = None


class AccountOut(BaseModel):
    """Auth identity merged with the profile row."""

    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AccountStats(BaseModel):
    goalsCount: int
    journalsCount: int
    moodsCount: int


class UserDataExport(BaseModel):
    userData: Optional[dict[str, Any]] = None
    goals: list[dict[str, Any]]
    journals: list[dict[str, Any]]
    moods: list[dict[str, Any]]
    physicalHealth: list[dict[str, Any]]
    exportedAt: str


class ErrorPage(BaseModel):
    reason: str
    title: str
    message: str
