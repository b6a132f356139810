"""Exceptions raised by the ticket codec.

Internal stages raise the specific subclass; ``TicketCodec.decrypt``
collapses every decode-path failure into ``InvalidTicketError`` so callers
cannot tell a bad tag from bad hex or a bad layout.
"""


class TicketError(Exception):
    """Base exception for all ticket codec failures."""


class InputValidationError(TicketError):
    """Raised when transport input is empty, oversized or not hex."""


class IntegrityError(TicketError):
    """Raised when a keyed-hash tag does not match or decryption fails."""


class TicketFormatError(TicketError):
    """Raised when a serialized ticket violates the binary layout."""


class ConfigurationError(TicketError):
    """Raised when key material or algorithm settings are missing or invalid."""


class InvalidTicketError(TicketError):
    """Uniform rejection of an encrypted ticket string."""
