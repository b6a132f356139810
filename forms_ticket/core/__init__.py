"""Core package initialization."""

from forms_ticket.core.algorithms import EncryptionMethod, ValidationMethod
from forms_ticket.core.constants import (
    DEFAULT_COOKIE_PATH,
    DEFAULT_TICKET_VERSION,
    FOOTER_BYTE,
    MAX_TICKET_LENGTH,
    MAX_TICKS,
    SERIALIZED_FORMAT_VERSION,
    SPACER_BYTE,
)
from forms_ticket.core.ticket import (
    Ticket,
    datetime_to_ticks,
    ticks_to_datetime,
    utc_now,
)

__all__ = [
    # Constants
    "DEFAULT_COOKIE_PATH",
    "DEFAULT_TICKET_VERSION",
    "FOOTER_BYTE",
    "MAX_TICKET_LENGTH",
    "MAX_TICKS",
    "SERIALIZED_FORMAT_VERSION",
    "SPACER_BYTE",
    # Algorithm enums
    "EncryptionMethod",
    "ValidationMethod",
    # Ticket model
    "Ticket",
    "datetime_to_ticks",
    "ticks_to_datetime",
    "utc_now",
]
