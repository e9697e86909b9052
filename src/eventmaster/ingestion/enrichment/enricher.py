"""
Post-creation enrichment of imported events.

Two independent, best-effort steps run for every newly created event:
image attachment and synthetic participant generation. A failure in one
is recorded and logged; it neither rolls back the event nor blocks the
other step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from eventmaster.repositories.base import ImageRepository, ParticipantRepository
from eventmaster.schemas.event import Event, Image
from eventmaster.schemas.ticketmaster import TicketmasterEvent

from ..errors import PerItemError
from .images import ImageService, collect_image_links
from .participants import ParticipantGenerator

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentOutcome:
    """What enrichment did for one event."""

    images: list[Image] = field(default_factory=list)
    participants_created: int = 0
    errors: list[PerItemError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class EventEnricher:
    """Attach images and create fake participants for a created event."""

    def __init__(
        self,
        image_repo: ImageRepository,
        participant_repo: ParticipantRepository,
        generator: ParticipantGenerator | None = None,
        participant_count: int = 2,
        batch_size: int = 50,
    ):
        self.image_repo = image_repo
        self.image_service = ImageService(image_repo)
        self.participant_repo = participant_repo
        self.generator = generator or ParticipantGenerator()
        self.participant_count = participant_count
        self.batch_size = batch_size

    def enrich(
        self,
        provider_event: TicketmasterEvent,
        event: Event,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> EnrichmentOutcome:
        """Run both steps for ``event``, which must already have an id."""
        log = log or logger
        outcome = EnrichmentOutcome()

        try:
            outcome.images = self.attach_images(provider_event, event)
        except Exception as e:
            log.warning(
                f"Ticketmaster image attachment failed: id={provider_event.id} err={e}",
                extra={"external_id": provider_event.id, "stage": "images"},
            )
            outcome.errors.append(PerItemError(provider_event.id, "images", e))

        try:
            outcome.participants_created = self.create_participants(event)
        except Exception as e:
            log.warning(
                f"Ticketmaster participant generation failed: id={provider_event.id} err={e}",
                extra={"external_id": provider_event.id, "stage": "participants"},
            )
            outcome.errors.append(PerItemError(provider_event.id, "participants", e))

        return outcome

    def attach_images(self, provider_event: TicketmasterEvent, event: Event) -> list[Image]:
        links = collect_image_links(provider_event)
        if not links:
            return []
        images = self.image_service.create_images_with_links(links)
        image_ids = [img.id for img in images if img.id]
        if image_ids:
            self.image_repo.attach_to_event(event.id, image_ids)
        event.images = images
        return images

    def create_participants(self, event: Event) -> int:
        if self.participant_count <= 0:
            return 0
        participants = self.generator.generate(event.id, self.participant_count)
        created = self.participant_repo.create_in_batches(participants, self.batch_size)
        return len(created)
