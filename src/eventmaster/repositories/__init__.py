from .base import (
    DuplicateExternalIDError,
    EventRepository,
    ImageRepository,
    ParticipantRepository,
    RepositoryError,
    UserRepository,
)

__all__ = [
    "DuplicateExternalIDError",
    "EventRepository",
    "ImageRepository",
    "ParticipantRepository",
    "RepositoryError",
    "UserRepository",
]
