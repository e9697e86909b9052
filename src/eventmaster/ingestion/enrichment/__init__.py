from .enricher import EnrichmentOutcome, EventEnricher
from .images import ImageService, collect_image_links
from .participants import ParticipantGenerator

__all__ = [
    "EnrichmentOutcome",
    "EventEnricher",
    "ImageService",
    "ParticipantGenerator",
    "collect_image_links",
]
