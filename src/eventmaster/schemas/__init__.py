from .event import Event, EventListResponse, Image
from .participant import Participant, RegistrationsPerDay, SourceOfDiscovery
from .user import User

__all__ = [
    "Event",
    "EventListResponse",
    "Image",
    "Participant",
    "RegistrationsPerDay",
    "SourceOfDiscovery",
    "User",
]
