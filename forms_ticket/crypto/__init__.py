"""Cryptographic envelope for forms authentication tickets.

Modules
-------
exceptions
    Exception hierarchy shared by every codec stage.
keyed_hash
    HMAC tags, tag verification and deterministic IV derivation.
symmetric
    TripleDES and AES wrappers (CBC, PKCS#7, zero cipher IV).
envelope
    Sign-encrypt-sign protocol.

Classes
-------
Envelope
    Seals and opens serialized ticket payloads.
KeyedHash
    HMAC capability with one subclass per hash family.
SymmetricCipher
    Block cipher capability with one subclass per algorithm.
"""

from forms_ticket.crypto.exceptions import (
    ConfigurationError,
    InputValidationError,
    IntegrityError,
    InvalidTicketError,
    TicketError,
    TicketFormatError,
)
from forms_ticket.crypto.keyed_hash import (
    KeyedHash,
    Sha1KeyedHash,
    Sha256KeyedHash,
    Sha384KeyedHash,
    Sha512KeyedHash,
    create_keyed_hash,
)
from forms_ticket.crypto.symmetric import (
    AESCipher,
    SymmetricCipher,
    TripleDESCipher,
    create_cipher,
    roundup_bits_to_bytes,
)
from forms_ticket.crypto.envelope import Envelope

__all__ = [
    # Exceptions
    "TicketError",
    "InputValidationError",
    "IntegrityError",
    "TicketFormatError",
    "ConfigurationError",
    "InvalidTicketError",
    # Keyed hashes
    "KeyedHash",
    "Sha1KeyedHash",
    "Sha256KeyedHash",
    "Sha384KeyedHash",
    "Sha512KeyedHash",
    "create_keyed_hash",
    # Ciphers
    "SymmetricCipher",
    "TripleDESCipher",
    "AESCipher",
    "create_cipher",
    "roundup_bits_to_bytes",
    # Envelope
    "Envelope",
]
