from .field_mapper import TicketmasterEventMapper, generate_event_description

__all__ = ["TicketmasterEventMapper", "generate_event_description"]
