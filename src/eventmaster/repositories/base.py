"""
Repository contracts.

The ingestion pipeline and the API only talk to storage through these
abstract classes; PostgreSQL implementations live in ``postgres.py`` and
tests provide in-memory ones.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from eventmaster.schemas.event import Event, Image
from eventmaster.schemas.participant import Participant, RegistrationsPerDay
from eventmaster.schemas.user import User

SORTABLE_FIELDS = {
    "eventDate": "event_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
}


class RepositoryError(Exception):
    """Raised when a storage operation fails."""


class DuplicateExternalIDError(RepositoryError):
    """An event with the same external ID already exists."""

    def __init__(self, external_id: str):
        self.external_id = external_id
        super().__init__(f"event with external_id {external_id!r} already exists")


class EventRepository(ABC):
    """Persistence contract for events."""

    @abstractmethod
    def create(self, event: Event) -> Event:
        """
        Insert an event and return it with ``id`` and timestamps assigned.

        Raises ``DuplicateExternalIDError`` when a non-empty external ID is
        already taken.
        """

    @abstractmethod
    def find_by_id(self, event_id: str) -> Event | None:
        """Return the event with its images, or None."""

    @abstractmethod
    def find_by_external_id(self, external_id: str) -> Event | None:
        """Return the event carrying this provider identifier, or None."""

    @abstractmethod
    def find_paginated(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "eventDate",
        sort_order: str = "ASC",
    ) -> tuple[list[Event], int]:
        """Return one page of events and the total count."""


class ImageRepository(ABC):
    """Persistence contract for images."""

    @abstractmethod
    def find_by_link(self, link: str) -> Image | None:
        pass

    @abstractmethod
    def create(self, image: Image) -> Image:
        pass

    @abstractmethod
    def attach_to_event(self, event_id: str, image_ids: list[str]) -> None:
        """Add rows to the event/image association; existing pairs are kept."""

    @abstractmethod
    def find_by_event_id(self, event_id: str) -> list[Image]:
        pass


class ParticipantRepository(ABC):
    """Persistence contract for participants."""

    @abstractmethod
    def create_in_batches(
        self, participants: list[Participant], batch_size: int
    ) -> list[Participant]:
        """Insert all participants in one transaction, ``batch_size`` rows per statement."""

    @abstractmethod
    def find_by_event_id(self, event_id: str) -> list[Participant]:
        pass

    @abstractmethod
    def count_by_event_id(self, event_id: str) -> int:
        pass

    @abstractmethod
    def registrations_per_day(self, event_id: str) -> list[RegistrationsPerDay]:
        pass


class UserRepository(ABC):
    """Persistence contract for users."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        pass

    @abstractmethod
    def create(self, user: User) -> User:
        pass
