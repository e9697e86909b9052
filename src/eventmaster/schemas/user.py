"""
eventmaster.schemas.user

Pydantic schema for platform users.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """
    Platform user.

    Credential handling lives outside this package; the feed system user is
    stored without a password.
    """

    id: str | None = Field(default=None, description="Assigned at creation.")
    email: str = Field(..., min_length=3, description="Unique email address.")
    created_at: datetime | None = None
    updated_at: datetime | None = None
