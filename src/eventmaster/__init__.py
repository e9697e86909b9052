"""Eventmaster: events platform backend with Ticketmaster feed ingestion."""

__version__ = "0.1.0"
