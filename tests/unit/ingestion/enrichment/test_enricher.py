"""
Unit tests for EventEnricher.

Both enrichment steps are best-effort and independent of each other.
"""

import random

import pytest

from eventmaster.ingestion.enrichment.enricher import EventEnricher
from eventmaster.ingestion.enrichment.participants import ParticipantGenerator
from eventmaster.schemas.event import Event


@pytest.fixture
def enricher(image_repo, participant_repo):
    return EventEnricher(
        image_repo,
        participant_repo,
        generator=ParticipantGenerator(random.Random(0)),
        participant_count=2,
        batch_size=50,
    )


@pytest.fixture
def created_event(event_repo):
    return event_repo.create(Event(title="Test Concert", external_id="tm-1", is_external=True))


class TestEventEnricher:
    """Tests for EventEnricher.enrich."""

    def test_attaches_images_and_participants(
        self, enricher, created_event, make_tm_event, image_repo, participant_repo
    ):
        """Should attach the selected image and create two participants in one batch."""
        outcome = enricher.enrich(make_tm_event(id="tm-1"), created_event)

        assert outcome.ok
        assert [i.link for i in outcome.images] == ["https://img.example.com/a1-large.jpg"]
        assert len(image_repo.find_by_event_id(created_event.id)) == 1
        assert outcome.participants_created == 2
        assert participant_repo.batch_calls == [(2, 50)]
        assert participant_repo.count_by_event_id(created_event.id) == 2

    def test_image_failure_does_not_block_participants(
        self, enricher, created_event, make_tm_event, image_repo, participant_repo
    ):
        """Should record the image failure and still create participants."""
        image_repo.fail_attach = True

        outcome = enricher.enrich(make_tm_event(id="tm-1"), created_event)

        assert [e.stage for e in outcome.errors] == ["images"]
        assert outcome.participants_created == 2

    def test_participant_failure_does_not_block_images(
        self, enricher, created_event, make_tm_event, image_repo, participant_repo
    ):
        """Should record the participant failure and keep attached images."""
        participant_repo.fail = True

        outcome = enricher.enrich(make_tm_event(id="tm-1"), created_event)

        assert [e.stage for e in outcome.errors] == ["participants"]
        assert outcome.errors[0].external_id == "tm-1"
        assert len(image_repo.find_by_event_id(created_event.id)) == 1

    def test_no_participants_when_disabled(
        self, image_repo, participant_repo, created_event, make_tm_event
    ):
        """Should skip participant creation when the count is zero."""
        enricher = EventEnricher(image_repo, participant_repo, participant_count=0)
        outcome = enricher.enrich(make_tm_event(id="tm-1"), created_event)
        assert outcome.participants_created == 0
        assert participant_repo.batch_calls == []

    def test_no_images_available(self, enricher, created_event, make_tm_event, image_repo):
        """Should attach nothing when the payload has no images."""
        outcome = enricher.enrich(
            make_tm_event(id="tm-1", _embedded={}, images=[]), created_event
        )
        assert outcome.images == []
        assert image_repo.links == {}
