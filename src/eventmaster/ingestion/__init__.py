"""
Ticketmaster feed ingestion.

Fetch, deduplicate, map, persist and enrich provider events, once on demand
or on a fixed schedule.
"""

from .errors import (
    ConfigurationError,
    DecodeError,
    IngestionError,
    PerItemError,
    TransportError,
    UpstreamError,
)
from .orchestrator import IngestionRunResult, TicketmasterIngestionService
from .scheduler import IngestionScheduler, SchedulerState

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "IngestionError",
    "IngestionRunResult",
    "IngestionScheduler",
    "PerItemError",
    "SchedulerState",
    "TicketmasterIngestionService",
    "TransportError",
    "UpstreamError",
]
