"""Forms authentication ticket codec.

Reads and writes the encrypted authentication tickets issued by the
ASP.NET forms authentication module, byte-for-byte compatible with the
legacy format.

Examples
--------
>>> from datetime import timedelta
>>> from forms_ticket import Ticket, TicketCodec
>>> codec = TicketCodec(decryption_key_hex, validation_key_hex)
>>> token = codec.encrypt(Ticket.issue("alice", timedelta(minutes=30)))
>>> codec.decrypt(token).name
'alice'
"""

from forms_ticket.core import EncryptionMethod, Ticket, ValidationMethod
from forms_ticket.crypto import (
    ConfigurationError,
    InputValidationError,
    IntegrityError,
    InvalidTicketError,
    TicketError,
    TicketFormatError,
)
from forms_ticket.codec import TicketCodec

__version__ = "1.0.0"

__all__ = [
    "Ticket",
    "TicketCodec",
    "EncryptionMethod",
    "ValidationMethod",
    "TicketError",
    "InputValidationError",
    "IntegrityError",
    "TicketFormatError",
    "ConfigurationError",
    "InvalidTicketError",
]
