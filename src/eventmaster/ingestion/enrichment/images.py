"""Image link selection and create-or-reuse persistence."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from eventmaster.repositories.base import ImageRepository
from eventmaster.schemas.event import Image
from eventmaster.schemas.ticketmaster import TicketmasterEvent, TicketmasterImage

logger = logging.getLogger(__name__)


def _tallest(images: Iterable[TicketmasterImage]) -> TicketmasterImage | None:
    best: TicketmasterImage | None = None
    for candidate in images:
        # Ties keep the first image seen
        if best is None or candidate.height > best.height:
            best = candidate
    return best


def collect_image_links(event: TicketmasterEvent) -> list[str]:
    """
    Pick image URLs for a provider event.

    One URL per attraction (its tallest image). When no attraction yields an
    image, fall back to the tallest event-level image. URLs are unique and
    keep first-seen order.
    """
    links: list[str] = []
    seen: set[str] = set()

    def add(url: str) -> None:
        if url and url not in seen:
            seen.add(url)
            links.append(url)

    for attraction in event.embedded.attractions:
        best = _tallest(attraction.images)
        if best is not None:
            add(best.url)

    if not links:
        best = _tallest(event.images)
        if best is not None:
            add(best.url)

    return links


class ImageService:
    """Register images by external link without downloading them."""

    def __init__(self, image_repo: ImageRepository):
        self.image_repo = image_repo

    def create_images_with_links(self, links: list[str]) -> list[Image]:
        """
        Return one image per link, reusing rows that already carry the link.

        A link whose lookup or insert fails is skipped; the rest still go
        through.
        """
        images: list[Image] = []
        for link in links:
            if not link:
                continue
            try:
                existing = self.image_repo.find_by_link(link)
            except Exception as e:
                logger.warning(f"Image lookup failed for {link}: {e}")
                existing = None
            if existing is not None:
                images.append(existing)
                continue

            try:
                images.append(self.image_repo.create(Image(link=link)))
            except Exception as e:
                logger.warning(f"Image create failed for {link}: {e}")
        return images
