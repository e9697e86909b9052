"""Provisioning of the user that owns imported events."""

from __future__ import annotations

import logging

from eventmaster.repositories.base import UserRepository
from eventmaster.schemas.user import User

logger = logging.getLogger(__name__)


def ensure_system_user(user_repo: UserRepository, email: str) -> str:
    """Return the id of the system user with ``email``, creating it if absent."""
    existing = user_repo.find_by_email(email)
    if existing is not None:
        return existing.id

    created = user_repo.create(User(email=email))
    logger.info(f"Created system user {email} ({created.id})")
    return created.id
