"""
eventmaster.schemas.event

Pydantic schemas for persisted events and their images.
Used for repository I/O and API serialization.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


class Image(BaseModel):
    """An image row. The link is treated as a reuse key by feed enrichment."""

    id: str | None = Field(default=None, description="Assigned at creation.")
    link: str = Field(..., min_length=1, description="Image URL.")
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class Event(BaseModel):
    """
    Internal event record.

    Locally-created events carry an empty ``external_id``. Events imported
    from a feed provider carry the provider's identifier and ``is_external``.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str | None = Field(default=None, description="Assigned at creation.")
    title: str = ""
    description: str = ""
    organizer: str = ""
    event_date: datetime | None = Field(
        default=None,
        description="Null only before mapping resolves it.",
    )
    latitude: float = 0.0
    longitude: float = 0.0
    user_id: str | None = Field(default=None, description="Owning user reference.")
    location: str = ""

    external_id: str = Field(default="", description="Feed provider identifier.")
    external_url: str = ""
    event_type: str = ""
    is_external: bool = False

    images: list[Image] = Field(default_factory=list)

    created_at: datetime | None = None
    updated_at: datetime | None = None


class EventListResponse(BaseModel):
    """Paginated event listing."""

    events: list[Event]
    total_count: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
