"""Binary serialization of authentication tickets.

Layout (little-endian, no padding):

==========  ===============  ===========================================
Offset      Field            Encoding
==========  ===============  ===========================================
0           format version   1 byte, always 0x01
1           ticket version   1 byte, low byte of Ticket.version
2           issue date       int64 UTC ticks
10          spacer           1 byte, always 0xFE
11          expiration date  int64 UTC ticks
19          persistent flag  1 byte, 0 or 1
20          name             7-bit code unit count + UTF-16LE code units
...         user data        same as name
...         cookie path      same as name
last        footer           1 byte, always 0xFF
==========  ===============  ===========================================

The spacer and footer were chosen by the legacy format to break
compatibility with older ticket formats on purpose. The payload produced
here is neither signed nor encrypted.
"""

from typing import Optional

from forms_ticket.core.constants import (
    FOOTER_BYTE,
    MSG_MALFORMED_TICKET,
    SERIALIZED_FORMAT_VERSION,
    SPACER_BYTE,
    SPACER_OFFSET,
)
from forms_ticket.core.ticket import Ticket
from forms_ticket.crypto.exceptions import TicketFormatError
from forms_ticket.serialization.binary import BinaryReader, BinaryWriter


def serialize(ticket: Ticket) -> bytes:
    """Turn a ticket into its serialized payload.

    Parameters
    ----------
    ticket : Ticket
        Ticket to serialize.

    Returns
    -------
    bytes
        Unsigned, unencrypted payload.

    Raises
    ------
    TypeError
        If ``ticket`` is not a Ticket or one of its string fields is not a str.
    """
    if not isinstance(ticket, Ticket):
        raise TypeError(f"Expected Ticket, got {type(ticket).__name__}")

    writer = BinaryWriter()
    writer.write_byte(SERIALIZED_FORMAT_VERSION)
    writer.write_byte(ticket.version)
    writer.write_int64(ticket.issue_date_ticks)

    assert writer.position == SPACER_OFFSET
    writer.write_byte(SPACER_BYTE)

    writer.write_int64(ticket.expiration_ticks)
    writer.write_bool(ticket.is_persistent)
    writer.write_binary_string(ticket.name)
    writer.write_binary_string(ticket.user_data)
    writer.write_binary_string(ticket.cookie_path)
    writer.write_byte(FOOTER_BYTE)
    return writer.getvalue()


def deserialize(data: bytes, length: Optional[int] = None) -> Ticket:
    """Rebuild a ticket from its serialized payload.

    Parameters
    ----------
    data : bytes
        Buffer starting with the payload. It may carry trailing bytes
        (such as a tag) as long as ``length`` marks where the payload ends.
    length : int, optional
        Payload length. Defaults to ``len(data)``.

    Returns
    -------
    Ticket
        The decoded ticket. Expiration is not checked.

    Raises
    ------
    TicketFormatError
        On any layout violation. The message never reveals which check
        failed.
    """
    if length is None:
        length = len(data)

    reader = BinaryReader(data)
    try:
        if reader.read_byte() != SERIALIZED_FORMAT_VERSION:
            raise TicketFormatError(MSG_MALFORMED_TICKET)

        version = reader.read_byte()
        issue_ticks = reader.read_int64()

        if reader.read_byte() != SPACER_BYTE:
            raise TicketFormatError(MSG_MALFORMED_TICKET)

        expiration_ticks = reader.read_int64()

        persistent_flag = reader.read_byte()
        if persistent_flag not in (0, 1):
            raise TicketFormatError(MSG_MALFORMED_TICKET)

        name = reader.read_binary_string()
        user_data = reader.read_binary_string()
        cookie_path = reader.read_binary_string()

        if reader.read_byte() != FOOTER_BYTE:
            raise TicketFormatError(MSG_MALFORMED_TICKET)

        # The caller tells us where the payload ends; a tag may follow it.
        if reader.position != length:
            raise TicketFormatError(MSG_MALFORMED_TICKET)

        return Ticket(
            version=version,
            name=name,
            issue_date_ticks=issue_ticks,
            expiration_ticks=expiration_ticks,
            is_persistent=persistent_flag == 1,
            user_data=user_data,
            cookie_path=cookie_path,
        )
    except (TypeError, ValueError) as e:
        # Out-of-range ticks surface here from Ticket validation.
        raise TicketFormatError(MSG_MALFORMED_TICKET) from e
