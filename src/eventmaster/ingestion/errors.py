"""Error taxonomy for feed ingestion."""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for ingestion failures."""


class ConfigurationError(IngestionError):
    """The pipeline is missing configuration it needs to run (e.g. API key)."""


class TransportError(IngestionError):
    """The feed provider could not be reached."""


class UpstreamError(IngestionError):
    """The feed provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"unexpected status code: {status_code}")


class DecodeError(IngestionError):
    """The feed provider response could not be decoded."""


class PerItemError(IngestionError):
    """
    Failure while handling a single provider event.

    Never raised out of a run; collected on the run result instead.
    """

    def __init__(self, external_id: str, stage: str, cause: BaseException | str):
        self.external_id = external_id
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed for event {external_id}: {cause}")
