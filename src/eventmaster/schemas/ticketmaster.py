"""
eventmaster.schemas.ticketmaster

Pydantic models for the Ticketmaster Discovery API event payload.

Only the fields the ingestion pipeline reads are modelled; everything else in
the provider response is ignored. Missing nested objects default to empty
instances and explicit JSON nulls fall back to the field default, so mapping
code can read through them without None checks.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        # The API sends explicit nulls for absent values; required fields stay required
        if v is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return v


class NamedRef(_ProviderModel):
    name: str = ""


class TicketmasterImage(_ProviderModel):
    url: str = ""
    width: int = 0
    height: int = 0


class VenueLocation(_ProviderModel):
    # The Discovery API sends coordinates as strings
    latitude: str | float | None = None
    longitude: str | float | None = None


class TicketmasterVenue(_ProviderModel):
    name: str = ""
    city: NamedRef = Field(default_factory=NamedRef)
    country: NamedRef = Field(default_factory=NamedRef)
    location: VenueLocation = Field(default_factory=VenueLocation)


class TicketmasterAttraction(_ProviderModel):
    images: list[TicketmasterImage] = Field(default_factory=list)


class EventEmbedded(_ProviderModel):
    venues: list[TicketmasterVenue] = Field(default_factory=list)
    attractions: list[TicketmasterAttraction] = Field(default_factory=list)


class StartDate(_ProviderModel):
    date_time: str = Field(default="", alias="dateTime")
    local_date: str = Field(default="", alias="localDate")
    local_time: str = Field(default="", alias="localTime")


class EventStatus(_ProviderModel):
    code: str = ""


class EventDates(_ProviderModel):
    start: StartDate = Field(default_factory=StartDate)
    status: EventStatus = Field(default_factory=EventStatus)


class Classification(_ProviderModel):
    segment: NamedRef = Field(default_factory=NamedRef)
    genre: NamedRef = Field(default_factory=NamedRef)
    sub_genre: NamedRef = Field(default_factory=NamedRef, alias="subGenre")


class TicketmasterEvent(_ProviderModel):
    """One event as returned by ``/discovery/v2/events.json``."""

    id: str = Field(..., min_length=1)
    name: str = ""
    url: str = ""
    type: str = ""
    description: str = ""
    images: list[TicketmasterImage] = Field(default_factory=list)
    embedded: EventEmbedded = Field(default_factory=EventEmbedded, alias="_embedded")
    dates: EventDates = Field(default_factory=EventDates)
    classifications: list[Classification] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("event id must not be blank")
        return v

    @property
    def primary_venue(self) -> TicketmasterVenue | None:
        return self.embedded.venues[0] if self.embedded.venues else None
