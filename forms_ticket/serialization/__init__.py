"""Binary ticket serialization."""

from forms_ticket.serialization.binary import (
    BinaryReader,
    BinaryWriter,
    decode_code_units,
    encode_7bit_int,
    encode_code_units,
)
from forms_ticket.serialization.serializer import deserialize, serialize

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "encode_7bit_int",
    "encode_code_units",
    "decode_code_units",
    "serialize",
    "deserialize",
]
