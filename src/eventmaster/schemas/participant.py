"""
eventmaster.schemas.participant

Pydantic schemas for event participants.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class SourceOfDiscovery(str, Enum):
    """Maps to participants.source_of_discovery column."""

    SOCIAL_MEDIA = "social_media"
    FRIENDS = "friends"
    FOUND_MYSELF = "found_myself"


class Participant(BaseModel):
    """A registration for an event, real or synthetic."""

    id: str | None = Field(default=None, description="Assigned at creation.")
    full_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    date_of_birth: datetime
    source_of_discovery: SourceOfDiscovery
    event_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RegistrationsPerDay(BaseModel):
    """Number of participants registered on a given day."""

    day: date
    count: int = Field(..., ge=0)
