from .ticketmaster import TicketmasterClient

__all__ = ["TicketmasterClient"]
