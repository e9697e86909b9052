"""
Field Mapper for Ticketmaster events.

Maps a validated ``TicketmasterEvent`` onto the internal ``Event`` shape.
Mapping is pure and never raises: every field has a fallback, so the output
is always a usable event.

Rules:
- event date: RFC3339 ``dateTime`` -> ``localDate`` + ``localTime`` in the
  process time zone (date only if no time) -> current time
- location/organizer from the first venue; organizer defaults to the provider
- description synthesized from classification, dates, status and venue
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from datetime import datetime

from eventmaster.schemas.event import Event
from eventmaster.schemas.ticketmaster import TicketmasterEvent

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Ticketmaster"
UNKNOWN = "Unknown"
LINE_BREAK = "<br />"

LOCAL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
LOCAL_DATE_FORMAT = "%Y-%m-%d"

# date "T" time, optional fraction, then Z or a numeric offset
RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str) -> datetime | None:
    """Parse a strict RFC3339 timestamp (``T`` separator, offset required)."""
    value = value.strip() if value else ""
    if not RFC3339_RE.match(value):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def parse_local(local_date: str, local_time: str) -> datetime | None:
    """Combine provider local date/time and attach the process time zone."""
    if not local_date:
        return None
    if local_time:
        value, fmt = f"{local_date} {local_time}", LOCAL_DATETIME_FORMAT
    else:
        value, fmt = local_date, LOCAL_DATE_FORMAT
    try:
        # astimezone() on a naive value interprets it as local time
        return datetime.strptime(value, fmt).astimezone()
    except ValueError:
        return None


def parse_coordinate(value: str | float | None) -> float:
    """Parse a latitude/longitude, returning 0 when it is missing or invalid."""
    if value is None or value == "":
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def generate_event_description(event: TicketmasterEvent) -> str:
    """
    Build the HTML-ish description stored on imported events.

    Format (the venue line is only present when the first venue has a name)::

        **Event Type:** {segment} - {genre} ({subGenre})<br />
        **Date and Time:** {localDate} at {localTime}<br />
        **Event Status:** {status}<br />
        **Venue:** {venue}, {city}, {country}
    """
    event_type = UNKNOWN
    if event.classifications:
        c = event.classifications[0]
        segment = c.segment.name or UNKNOWN
        genre = c.genre.name or UNKNOWN
        sub_genre = c.sub_genre.name or UNKNOWN
        event_type = f"{segment} - {genre} ({sub_genre})"

    start = event.dates.start
    local_date = start.local_date or "Unknown Date"
    local_time = start.local_time or "Unknown Time"
    status = event.dates.status.code or UNKNOWN

    parts = [
        f"**Event Type:** {event_type}{LINE_BREAK}",
        f"**Date and Time:** {local_date} at {local_time}{LINE_BREAK}",
        f"**Event Status:** {status}{LINE_BREAK}",
    ]

    venue = event.primary_venue
    if venue is not None and venue.name:
        parts.append(
            f"**Venue:** {venue.name}, {venue.city.name}, {venue.country.name}"
        )

    return "".join(parts)


class TicketmasterEventMapper:
    """
    Map Ticketmaster events to internal events.

    Args:
        clock: Returns the current time; used as the last date fallback.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or (lambda: datetime.now().astimezone())

    def resolve_event_date(self, event: TicketmasterEvent) -> datetime:
        start = event.dates.start
        resolved = parse_rfc3339(start.date_time)
        if resolved is None:
            resolved = parse_local(start.local_date, start.local_time)
        if resolved is None:
            logger.debug(f"No usable start date for event {event.id}, using now")
            resolved = self.clock()
        return resolved

    def map(self, event: TicketmasterEvent) -> Event:
        """
        Transform one provider event.

        Image links and the owning user are not set here; the orchestrator
        and enrichment steps fill those in.
        """
        mapped = Event(
            title=event.name,
            description=generate_event_description(event),
            event_type=event.type,
            external_url=event.url,
            external_id=event.id,
            is_external=True,
            event_date=self.resolve_event_date(event),
        )

        venue = event.primary_venue
        if venue is not None:
            mapped.location = f"{venue.name}, {venue.city.name}, {venue.country.name}"
            mapped.latitude = parse_coordinate(venue.location.latitude)
            mapped.longitude = parse_coordinate(venue.location.longitude)
            if venue.name:
                mapped.organizer = venue.name

        if not mapped.organizer:
            mapped.organizer = PROVIDER_NAME

        return mapped
