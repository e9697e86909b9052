"""Synthetic participant generation for imported events."""

from __future__ import annotations

import random
from datetime import UTC, datetime

from eventmaster.schemas.participant import Participant, SourceOfDiscovery

FIRST_NAMES = (
    "Alex", "Taylor", "Jordan", "Morgan", "Casey",
    "Riley", "Quinn", "Jamie", "Avery", "Parker",
)
LAST_NAMES = (
    "Smith", "Johnson", "Williams", "Brown", "Jones",
    "Miller", "Davis", "Garcia", "Rodriguez", "Wilson",
)

# Half-open: birth years 1975..2004
BIRTH_YEAR_RANGE = (1975, 2005)
DISCOVERY_SOURCES = tuple(SourceOfDiscovery)


class ParticipantGenerator:
    """
    Build fake participants from fixed name pools.

    All randomness comes from the ``rng`` passed in, so a seeded
    ``random.Random`` gives reproducible output.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def full_name(self) -> str:
        return f"{self.rng.choice(FIRST_NAMES)} {self.rng.choice(LAST_NAMES)}"

    @staticmethod
    def email_for(full_name: str, event_id: str, index: int) -> str:
        """``first.last+{event_id[:8]}-{index}@example.com``"""
        local = full_name.lower().replace(" ", ".")
        return f"{local}+{event_id[:8]}-{index}@example.com"

    def date_of_birth(self) -> datetime:
        year = self.rng.randrange(*BIRTH_YEAR_RANGE)
        month = self.rng.randint(1, 12)
        # Days capped at 28 so every month is valid
        day = self.rng.randint(1, 28)
        return datetime(year, month, day, tzinfo=UTC)

    def generate(self, event_id: str, count: int) -> list[Participant]:
        if not event_id:
            raise ValueError("event_id is required")
        participants = []
        for index in range(max(count, 0)):
            name = self.full_name()
            participants.append(
                Participant(
                    full_name=name,
                    email=self.email_for(name, event_id, index),
                    date_of_birth=self.date_of_birth(),
                    source_of_discovery=self.rng.choice(DISCOVERY_SOURCES),
                    event_id=event_id,
                )
            )
        return participants
