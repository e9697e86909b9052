"""
Ticketmaster Discovery API client.

Issues the single events listing request used by ingestion and turns the
response into validated ``TicketmasterEvent`` models. No retries happen here;
a failed run is retried by the next scheduler tick.
"""

from __future__ import annotations

import logging
import re

import httpx
from pydantic import ValidationError

from eventmaster.configs.settings import Settings
from eventmaster.schemas.ticketmaster import TicketmasterEvent

from ..errors import ConfigurationError, DecodeError, TransportError, UpstreamError

logger = logging.getLogger(__name__)

EVENTS_PATH = "/discovery/v2/events.json"

_APIKEY_RE = re.compile(r"(apikey=)[^&]+")


def redact_api_key(url: str) -> str:
    """Mask the apikey query parameter so URLs are safe to log."""
    return _APIKEY_RE.sub(r"\1***", url)


class TicketmasterClient:
    """
    Fetch events from the Ticketmaster Discovery API.

    Args:
        settings: Application settings holding the key, base URL, page size,
            country filter and timeout.
        client: Optional pre-built ``httpx.AsyncClient`` (tests inject one
            backed by ``httpx.MockTransport``).
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.TICKETMASTER_BASE_URL,
                headers={"Accept": "application/json"},
                timeout=self.settings.TICKETMASTER_TIMEOUT_SECONDS,
            )
        return self._client

    def _api_key(self) -> str:
        key = self.settings.TICKETMASTER_API_KEY
        value = key.get_secret_value().strip() if key is not None else ""
        if not value:
            raise ConfigurationError("Ticketmaster API key not configured")
        return value

    def build_params(self) -> dict[str, str | int]:
        """Query parameters for the events listing, API key included."""
        return {
            "countryCode": self.settings.TICKETMASTER_COUNTRY_CODE,
            "size": self.settings.TICKETMASTER_PAGE_SIZE,
            "apikey": self._api_key(),
        }

    async def fetch(self) -> list[TicketmasterEvent]:
        """
        Fetch one page of provider events.

        Returns:
            Provider events in response order. Items that fail validation
            (not an object, missing or blank id) are dropped with a warning.

        Raises:
            ConfigurationError: no API key configured (checked before any I/O).
            TransportError: the request could not be completed.
            UpstreamError: non-2xx response.
            DecodeError: body is not JSON or not the expected envelope.
        """
        params = self.build_params()
        client = self._get_client()
        url = httpx.URL(self.settings.TICKETMASTER_BASE_URL + EVENTS_PATH, params=params)

        logger.info(f"Ticketmaster fetch started: url={redact_api_key(str(url))}")

        try:
            response = await client.get(url)
        except httpx.RequestError as e:
            raise TransportError(
                f"error fetching events from Ticketmaster: {e.__class__.__name__}: {e}"
            ) from e

        if not response.is_success:
            raise UpstreamError(response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"error parsing JSON response: {e}") from e

        return self.parse_events(payload)

    @staticmethod
    def parse_events(payload: object) -> list[TicketmasterEvent]:
        """Extract and validate ``_embedded.events`` from a decoded response."""
        if not isinstance(payload, dict):
            raise DecodeError("unexpected response shape: top-level value is not an object")

        # No results: the API omits _embedded entirely
        embedded = payload.get("_embedded") or {}
        if not isinstance(embedded, dict):
            raise DecodeError("unexpected response shape: _embedded is not an object")
        raw_events = embedded.get("events") or []
        if not isinstance(raw_events, list):
            raise DecodeError("unexpected response shape: _embedded.events is not a list")

        events: list[TicketmasterEvent] = []
        for index, raw in enumerate(raw_events):
            try:
                events.append(TicketmasterEvent.model_validate(raw))
            except ValidationError as e:
                raw_id = raw.get("id") if isinstance(raw, dict) else None
                logger.warning(
                    f"Dropping malformed Ticketmaster event at index {index} "
                    f"(id={raw_id!r}): {e.error_count()} validation error(s)"
                )
        return events

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
