"""
Deduplication of provider events against persisted events.

Events are matched on the provider's external ID only. A failed lookup is
treated as "not found": the item is attempted, and the unique index on
``events.external_id`` rejects a real duplicate at insert time.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from eventmaster.repositories.base import EventRepository

logger = logging.getLogger(__name__)


class EventDeduplicator(ABC):
    """Abstract base for existence checks."""

    @abstractmethod
    def exists(self, external_id: str) -> bool:
        """Return True if an event with this external ID is already stored."""
        pass


class ExternalIDDeduplicator(EventDeduplicator):
    """Repository-backed external ID lookup."""

    def __init__(self, event_repo: EventRepository):
        self.event_repo = event_repo

    def exists(self, external_id: str) -> bool:
        try:
            return self.event_repo.find_by_external_id(external_id) is not None
        except Exception as e:
            logger.warning(
                f"Dedup lookup failed for external_id={external_id}, "
                f"treating as new: {e}"
            )
            return False
