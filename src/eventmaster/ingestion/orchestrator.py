"""
Ticketmaster ingestion orchestrator.

Drives one fetch cycle: fetch -> for each provider event: dedup -> map ->
persist -> enrich. Only failures before the per-item loop (configuration,
transport, upstream status, decoding) propagate to the caller; anything that
goes wrong for a single event is logged, recorded on the run result, and the
batch moves on.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from eventmaster.configs.logging import with_context
from eventmaster.configs.settings import Settings
from eventmaster.repositories.base import (
    DuplicateExternalIDError,
    EventRepository,
    ImageRepository,
    ParticipantRepository,
)
from eventmaster.repositories.database import Database
from eventmaster.repositories.postgres import (
    PostgresEventRepository,
    PostgresImageRepository,
    PostgresParticipantRepository,
)
from eventmaster.schemas.ticketmaster import TicketmasterEvent

from .adapters.ticketmaster import TicketmasterClient
from .deduplication import EventDeduplicator, ExternalIDDeduplicator
from .enrichment.enricher import EventEnricher
from .enrichment.participants import ParticipantGenerator
from .errors import PerItemError
from .normalization.field_mapper import TicketmasterEventMapper

logger = logging.getLogger(__name__)

SOURCE_NAME = "ticketmaster"


class ItemOutcome(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class IngestionRunResult:
    """Aggregate outcome of one fetch cycle."""

    run_id: str
    started_at: datetime
    ended_at: datetime | None = None
    total: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[PerItemError] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Calculate execution duration."""
        if self.ended_at is None:
            return 0.0
        return (self.ended_at - self.started_at).total_seconds()

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_seconds": self.duration_seconds,
            "total": self.total,
            "created": self.created,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": [str(e) for e in self.errors],
        }


class TicketmasterIngestionService:
    """
    Fetch Ticketmaster events and save the new ones.

    Repository handles are shared with the rest of the process; the service
    never opens or closes storage itself.
    """

    def __init__(
        self,
        client: TicketmasterClient,
        event_repo: EventRepository,
        enricher: EventEnricher,
        mapper: TicketmasterEventMapper | None = None,
        deduplicator: EventDeduplicator | None = None,
        system_user_id: str | None = None,
    ):
        self.client = client
        self.event_repo = event_repo
        self.enricher = enricher
        self.mapper = mapper or TicketmasterEventMapper()
        self.deduplicator = deduplicator or ExternalIDDeduplicator(event_repo)
        self.system_user_id = system_user_id

    async def fetch_and_save_events(self) -> IngestionRunResult:
        """
        Run one full ingestion cycle.

        Raises:
            IngestionError: configuration, transport, upstream or decode
                failure before any event was processed.
        """
        result = IngestionRunResult(
            run_id=uuid.uuid4().hex[:12], started_at=datetime.now(UTC)
        )
        log = with_context(logger, run_id=result.run_id, source=SOURCE_NAME)

        events = await self.client.fetch()
        result.total = len(events)

        if not events:
            result.ended_at = datetime.now(UTC)
            log.info("Ticketmaster fetch completed: no events returned")
            return result

        # Repository calls are blocking psycopg2 I/O
        await asyncio.to_thread(self._process_batch, events, result, log)

        result.ended_at = datetime.now(UTC)
        log.info(
            f"Ticketmaster fetch completed: total={result.total} new={result.created} "
            f"skipped={result.skipped} failed={result.failed} "
            f"duration={result.duration_seconds:.2f}s"
        )
        return result

    def _process_batch(
        self,
        events: list[TicketmasterEvent],
        result: IngestionRunResult,
        log: logging.LoggerAdapter,
    ) -> None:
        for provider_event in events:
            try:
                outcome = self._process_one(provider_event, result, log)
            except Exception as e:
                # Anything not already classified is a persistence-stage failure
                log.exception(
                    f"Unexpected error for Ticketmaster event {provider_event.id}: {e}",
                    extra={"external_id": provider_event.id},
                )
                result.errors.append(PerItemError(provider_event.id, "persist", e))
                outcome = ItemOutcome.FAILED

            if outcome is ItemOutcome.CREATED:
                result.created += 1
            elif outcome is ItemOutcome.SKIPPED:
                result.skipped += 1
            else:
                result.failed += 1

    def _process_one(
        self,
        provider_event: TicketmasterEvent,
        result: IngestionRunResult,
        log: logging.LoggerAdapter,
    ) -> ItemOutcome:
        external_id = provider_event.id

        if self.deduplicator.exists(external_id):
            log.debug(f"Skipping existing event external_id={external_id}")
            return ItemOutcome.SKIPPED

        try:
            event = self.mapper.map(provider_event)
        except Exception as e:
            log.error(
                f"Ticketmaster event mapping failed: id={external_id} err={e}",
                extra={"external_id": external_id, "stage": "map"},
            )
            result.errors.append(PerItemError(external_id, "map", e))
            return ItemOutcome.FAILED

        if self.system_user_id:
            event.user_id = self.system_user_id

        try:
            created = self.event_repo.create(event)
        except DuplicateExternalIDError:
            log.info(f"Event external_id={external_id} was created concurrently, skipping")
            return ItemOutcome.SKIPPED
        except Exception as e:
            log.error(
                f"Ticketmaster event save failed: id={external_id} err={e}",
                extra={"external_id": external_id, "stage": "persist"},
            )
            result.errors.append(PerItemError(external_id, "persist", e))
            return ItemOutcome.FAILED

        enrichment = self.enricher.enrich(provider_event, created, log)
        result.errors.extend(enrichment.errors)
        return ItemOutcome.CREATED

    async def close(self) -> None:
        await self.client.close()


def build_ingestion_service(
    settings: Settings,
    database: Database,
    system_user_id: str | None = None,
) -> TicketmasterIngestionService:
    """Wire the ingestion service onto PostgreSQL repositories."""
    event_repo = PostgresEventRepository(database)
    return create_ingestion_service(
        settings,
        event_repo=event_repo,
        image_repo=PostgresImageRepository(database),
        participant_repo=PostgresParticipantRepository(database),
        system_user_id=system_user_id,
    )


def create_ingestion_service(
    settings: Settings,
    *,
    event_repo: EventRepository,
    image_repo: ImageRepository,
    participant_repo: ParticipantRepository,
    system_user_id: str | None = None,
    client: TicketmasterClient | None = None,
) -> TicketmasterIngestionService:
    """Build the service from settings and arbitrary repository implementations."""
    enricher = EventEnricher(
        image_repo,
        participant_repo,
        generator=ParticipantGenerator(random.Random(settings.RANDOM_SEED)),
        participant_count=settings.FAKE_PARTICIPANTS_PER_EVENT,
        batch_size=settings.PARTICIPANT_BATCH_SIZE,
    )
    return TicketmasterIngestionService(
        client=client or TicketmasterClient(settings),
        event_repo=event_repo,
        enricher=enricher,
        system_user_id=system_user_id,
    )
