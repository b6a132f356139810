"""Little-endian binary reader and writer for the ticket layout.

Strings are written as a 7-bit encoded *code unit* count followed by the
raw UTF-16LE code units. Encoding goes through the ``surrogatepass``
error handler, so a lone surrogate such as ``"\\ud800"`` survives the round
trip unchanged instead of being rejected by the strict codec.

Notes
-----
7-bit encoded integers store 7 value bits per byte, least significant group
first; the high bit of each byte flags that another byte follows.
"""

import struct

from forms_ticket.core.constants import MAX_7BIT_INT_BYTES, MSG_MALFORMED_TICKET
from forms_ticket.crypto.exceptions import TicketFormatError

_INT64 = struct.Struct("<q")
_INT32_MAX = 0x7FFFFFFF


def encode_7bit_int(value: int) -> bytes:
    """Encode a non-negative integer as a 7-bit variable-length integer.

    Parameters
    ----------
    value : int
        Value in the unsigned 32-bit range.

    Returns
    -------
    bytes
        Encoded bytes (1 to 5).

    Raises
    ------
    ValueError
        If value is negative or does not fit in 32 bits.

    Examples
    --------
    >>> encode_7bit_int(300).hex()
    'ac02'
    """
    if value < 0 or value > 0xFFFFFFFF:
        raise ValueError(f"7-bit encoded value out of range: {value}")

    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_code_units(value: str) -> bytes:
    """Return the UTF-16LE code units of ``value``, lone surrogates included."""
    return value.encode("utf-16-le", "surrogatepass")


def decode_code_units(data: bytes) -> str:
    """Inverse of ``encode_code_units``."""
    return data.decode("utf-16-le", "surrogatepass")


class BinaryWriter:
    """Append-only little-endian writer."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def position(self) -> int:
        """Return the number of bytes written so far."""
        return len(self._buffer)

    def write_byte(self, value: int) -> None:
        self._buffer.append(value & 0xFF)

    def write_bool(self, value: bool) -> None:
        self._buffer.append(1 if value else 0)

    def write_int64(self, value: int) -> None:
        self._buffer.extend(_INT64.pack(value))

    def write_7bit_int(self, value: int) -> None:
        self._buffer.extend(encode_7bit_int(value))

    def write_binary_string(self, value: str) -> None:
        """Write a code-unit count followed by the UTF-16LE code units.

        Parameters
        ----------
        value : str
            String to write. Characters outside the BMP count as two units.

        Raises
        ------
        TypeError
            If value is not a string.
        """
        if not isinstance(value, str):
            raise TypeError(f"Expected str, got {type(value).__name__}")
        units = encode_code_units(value)
        self.write_7bit_int(len(units) // 2)
        self._buffer.extend(units)

    def getvalue(self) -> bytes:
        """Return a copy of the written bytes."""
        return bytes(self._buffer)


class BinaryReader:
    """Little-endian reader over an in-memory buffer.

    Every read past the end of the buffer raises ``TicketFormatError``.

    Parameters
    ----------
    data : bytes
        Buffer to read from, starting at offset 0.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        """Return the current read offset."""
        return self._pos

    def read_bytes(self, count: int) -> bytes:
        if count < 0 or self._pos + count > len(self._data):
            raise TicketFormatError(MSG_MALFORMED_TICKET)
        chunk = self._data[self._pos:self._pos + count]
        self._pos += count
        return chunk

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_int64(self) -> int:
        return _INT64.unpack(self.read_bytes(8))[0]

    def read_7bit_int(self) -> int:
        """Read a 7-bit encoded integer.

        Returns
        -------
        int
            Decoded value in the signed 32-bit range.

        Raises
        ------
        TicketFormatError
            If the encoding runs past five bytes or the value is negative
            as a signed 32-bit integer.
        """
        value = 0
        for i in range(MAX_7BIT_INT_BYTES):
            b = self.read_byte()
            value |= (b & 0x7F) << (7 * i)
            if not b & 0x80:
                if value > _INT32_MAX:
                    raise TicketFormatError(MSG_MALFORMED_TICKET)
                return value
        raise TicketFormatError(MSG_MALFORMED_TICKET)

    def read_binary_string(self) -> str:
        """Read a string written by ``BinaryWriter.write_binary_string``."""
        count = self.read_7bit_int()
        units = self.read_bytes(count * 2)
        try:
            return decode_code_units(units)
        except UnicodeDecodeError as e:
            raise TicketFormatError(MSG_MALFORMED_TICKET) from e
