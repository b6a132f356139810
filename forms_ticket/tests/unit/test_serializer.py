"""Unit tests for ticket serialization.

This module provides tests for:
- 7-bit encoded integers and code-unit strings (binary.py)
- The fixed ticket layout (serializer.py)
- Uniform rejection of malformed payloads
"""

import struct

import pytest

from forms_ticket.core.constants import MSG_MALFORMED_TICKET
from forms_ticket.core.ticket import Ticket
from forms_ticket.crypto.exceptions import TicketFormatError
from forms_ticket.serialization.binary import (
    BinaryReader,
    BinaryWriter,
    decode_code_units,
    encode_7bit_int,
    encode_code_units,
)
from forms_ticket.serialization.serializer import deserialize, serialize

KNOWN_PAYLOAD_HEX = (
    "010287f61080c115dc08fe872af3b0c515dc08010561006c006900630065000b72006f"
    "006c00650073003d00610064006d0069006e00012f00ff"
)


@pytest.fixture
def known_ticket() -> Ticket:
    """Ticket matching KNOWN_PAYLOAD_HEX."""
    return Ticket(
        version=2,
        name="alice",
        issue_date_ticks=638409168001234567,
        expiration_ticks=638409186001234567,
        is_persistent=True,
        user_data="roles=admin",
        cookie_path="/",
    )


# =============================================================================
# Binary primitives (binary.py)
# =============================================================================


class TestSevenBitInt:
    """Test suite for 7-bit encoded integers."""

    @pytest.mark.parametrize(
        "value, encoded",
        [
            (0, "00"),
            (1, "01"),
            (127, "7f"),
            (128, "8001"),
            (300, "ac02"),
            (16383, "ff7f"),
            (16384, "808001"),
            (0x7FFFFFFF, "ffffffff07"),
        ],
    )
    def test_known_encodings(self, value, encoded):
        """Test encodings against hand-computed values."""
        assert encode_7bit_int(value).hex() == encoded
        assert BinaryReader(bytes.fromhex(encoded)).read_7bit_int() == value

    def test_negative_rejected(self):
        """Test that negative values cannot be encoded."""
        with pytest.raises(ValueError):
            encode_7bit_int(-1)

    def test_six_byte_encoding_rejected(self):
        """Test that more than five groups is malformed."""
        with pytest.raises(TicketFormatError):
            BinaryReader(b"\x80\x80\x80\x80\x80\x01").read_7bit_int()

    def test_value_above_int32_rejected(self):
        """Test that values that would be negative as int32 are malformed."""
        with pytest.raises(TicketFormatError):
            BinaryReader(encode_7bit_int(0x80000000)).read_7bit_int()

    def test_truncated_rejected(self):
        """Test that a continuation bit at end of data is malformed."""
        with pytest.raises(TicketFormatError):
            BinaryReader(b"\x80").read_7bit_int()


class TestCodeUnits:
    """Test suite for surrogate-safe UTF-16 code units."""

    def test_ascii(self):
        """Test that ASCII maps to one unit per character."""
        assert encode_code_units("ab") == b"a\x00b\x00"

    def test_lone_high_surrogate(self):
        """Test that a lone high surrogate round-trips."""
        units = encode_code_units("\ud800")
        assert units == b"\x00\xd8"
        assert decode_code_units(units) == "\ud800"

    def test_lone_low_surrogate(self):
        """Test that a lone low surrogate round-trips."""
        assert decode_code_units(encode_code_units("x\udfffy")) == "x\udfffy"

    def test_reversed_pair(self):
        """Test that a low surrogate followed by a high one stays unpaired."""
        value = "\udc00\ud800"
        assert decode_code_units(encode_code_units(value)) == value

    def test_astral_character_is_two_units(self):
        """Test that characters outside the BMP become surrogate pairs."""
        units = encode_code_units("\U0001F600")
        assert units == b"\x3d\xd8\x00\xde"
        assert decode_code_units(units) == "\U0001F600"

    def test_writer_counts_code_units(self):
        """Test that the length prefix counts units, not characters or bytes."""
        writer = BinaryWriter()
        writer.write_binary_string("a\U0001F600")
        assert writer.getvalue()[0] == 3

    def test_writer_rejects_non_string(self):
        """Test that None is a caller error."""
        with pytest.raises(TypeError):
            BinaryWriter().write_binary_string(None)

    def test_reader_truncated_string(self):
        """Test that a count longer than the data is malformed."""
        with pytest.raises(TicketFormatError):
            BinaryReader(b"\x05a\x00b\x00").read_binary_string()


class TestReaderWriter:
    """Test suite for fixed-width fields."""

    def test_int64_little_endian(self):
        """Test int64 byte order."""
        writer = BinaryWriter()
        writer.write_int64(0x0102030405060708)
        assert writer.getvalue() == bytes.fromhex("0807060504030201")

    def test_int64_signed(self):
        """Test that int64 fields are signed."""
        reader = BinaryReader(struct.pack("<q", -5))
        assert reader.read_int64() == -5

    def test_byte_truncated_to_low_byte(self):
        """Test that write_byte keeps only the low byte."""
        writer = BinaryWriter()
        writer.write_byte(0x1FF)
        writer.write_byte(-1)
        assert writer.getvalue() == b"\xff\xff"

    def test_read_past_end(self):
        """Test that reading past the end is malformed."""
        reader = BinaryReader(b"\x01")
        reader.read_byte()
        with pytest.raises(TicketFormatError):
            reader.read_byte()

    def test_position_tracking(self):
        """Test that positions advance with each read and write."""
        writer = BinaryWriter()
        writer.write_byte(1)
        writer.write_int64(2)
        assert writer.position == 9

        reader = BinaryReader(writer.getvalue())
        reader.read_byte()
        assert reader.position == 1


# =============================================================================
# Ticket layout (serializer.py)
# =============================================================================


class TestSerialize:
    """Test suite for the encode direction."""

    def test_known_layout(self, known_ticket):
        """Test the exact bytes of a known ticket."""
        assert serialize(known_ticket).hex() == KNOWN_PAYLOAD_HEX

    def test_fixed_offsets(self, known_ticket):
        """Test markers at their fixed offsets."""
        payload = serialize(known_ticket)
        assert payload[0] == 0x01
        assert payload[1] == 2
        assert struct.unpack_from("<q", payload, 2)[0] == known_ticket.issue_date_ticks
        assert payload[10] == 0xFE
        assert struct.unpack_from("<q", payload, 11)[0] == known_ticket.expiration_ticks
        assert payload[19] == 1
        assert payload[-1] == 0xFF

    def test_version_truncated_to_byte(self):
        """Test that versions above 255 keep only their low byte."""
        ticket = Ticket(
            version=0x1234,
            name="a",
            issue_date_ticks=0,
            expiration_ticks=0,
        )
        assert serialize(ticket)[1] == 0x34
        assert deserialize(serialize(ticket)).version == 0x34

    def test_empty_strings(self):
        """Test that empty strings are written as a zero count."""
        ticket = Ticket(version=1, name="", issue_date_ticks=1, expiration_ticks=2,
                        user_data="", cookie_path="")
        payload = serialize(ticket)
        assert payload[20:] == b"\x00\x00\x00\xff"

    def test_not_a_ticket(self):
        """Test that None is a caller error."""
        with pytest.raises(TypeError):
            serialize(None)

    def test_non_string_field(self):
        """Test that a non-string field is a caller error."""
        ticket = Ticket(version=1, name=None, issue_date_ticks=0, expiration_ticks=0)
        with pytest.raises(TypeError):
            serialize(ticket)


class TestDeserialize:
    """Test suite for the decode direction."""

    def test_known_layout(self, known_ticket):
        """Test decoding known bytes."""
        assert deserialize(bytes.fromhex(KNOWN_PAYLOAD_HEX)) == known_ticket

    def test_roundtrip_preserves_ticks(self):
        """Test that sub-microsecond ticks survive."""
        ticket = Ticket(version=3, name="n", issue_date_ticks=638409168001234567,
                        expiration_ticks=638409168001234569)
        assert deserialize(serialize(ticket)) == ticket

    def test_lone_surrogate_user_data(self):
        """Test that a lone high surrogate in user data round-trips."""
        ticket = Ticket(version=1, name="bob", issue_date_ticks=0,
                        expiration_ticks=0, user_data="\ud800")
        restored = deserialize(serialize(ticket))
        assert restored.user_data == "\ud800"
        assert encode_code_units(restored.user_data) == b"\x00\xd8"

    def test_long_strings(self):
        """Test strings whose length needs a multi-byte prefix."""
        ticket = Ticket(version=1, name="x" * 200, issue_date_ticks=0,
                        expiration_ticks=0, user_data="é" * 20000)
        payload = serialize(ticket)
        assert payload[20:22] == bytes.fromhex("c801")
        assert deserialize(payload) == ticket

    def test_payload_length_with_trailing_tag(self, known_ticket):
        """Test that a trailing tag is ignored when the length is given."""
        payload = serialize(known_ticket)
        assert deserialize(payload + b"\x00" * 20, len(payload)) == known_ticket

    def test_trailing_bytes_rejected(self, known_ticket):
        """Test that leftover bytes after the footer are malformed."""
        with pytest.raises(TicketFormatError):
            deserialize(serialize(known_ticket) + b"\x00")

    def test_length_shorter_than_payload_rejected(self, known_ticket):
        """Test that a declared length before the footer is malformed."""
        payload = serialize(known_ticket)
        with pytest.raises(TicketFormatError):
            deserialize(payload, len(payload) - 1)

    @pytest.mark.parametrize(
        "offset, value",
        [
            (0, 0x00),  # format version
            (0, 0x02),
            (10, 0x00),  # spacer
            (10, 0xFF),
            (19, 0x02),  # persistence flag
            (19, 0xFF),
            (-1, 0x00),  # footer
            (-1, 0xFE),
        ],
    )
    def test_corrupted_marker_rejected(self, known_ticket, offset, value):
        """Test that each fixed marker is enforced."""
        payload = bytearray(serialize(known_ticket))
        payload[offset] = value
        with pytest.raises(TicketFormatError):
            deserialize(bytes(payload))

    @pytest.mark.parametrize("cut", [0, 1, 5, 10, 15, 20, 25, 40])
    def test_truncated_rejected(self, known_ticket, cut):
        """Test that every truncation is malformed."""
        payload = serialize(known_ticket)
        with pytest.raises(TicketFormatError):
            deserialize(payload[:cut])

    def test_negative_ticks_rejected(self, known_ticket):
        """Test that ticks outside the legacy date range are malformed."""
        payload = bytearray(serialize(known_ticket))
        payload[2:10] = struct.pack("<q", -1)
        with pytest.raises(TicketFormatError):
            deserialize(bytes(payload))

    def test_ticks_above_max_rejected(self, known_ticket):
        """Test that ticks past 9999-12-31 are malformed."""
        payload = bytearray(serialize(known_ticket))
        payload[11:19] = struct.pack("<q", 3155378976000000000)
        with pytest.raises(TicketFormatError):
            deserialize(bytes(payload))

    def test_uniform_message(self, known_ticket):
        """Test that different failures carry the same message."""
        payload = serialize(known_ticket)
        messages = set()
        for bad in (payload[:-1], b"\x02" + payload[1:], payload + b"\x00"):
            with pytest.raises(TicketFormatError) as excinfo:
                deserialize(bad)
            messages.add(str(excinfo.value))
        assert messages == {MSG_MALFORMED_TICKET}
