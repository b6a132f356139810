"""Shared fixtures for the ticket codec tests."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

from forms_ticket.codec import TicketCodec
from forms_ticket.core.algorithms import EncryptionMethod, ValidationMethod
from forms_ticket.core.ticket import Ticket
from forms_ticket.crypto.envelope import Envelope
from forms_ticket.crypto.keyed_hash import create_keyed_hash
from forms_ticket.crypto.symmetric import create_cipher

DATA_DIR = Path(__file__).parent / "data"

DECRYPTION_KEY_HEX = "0123456789ABCDEFFEDCBA98765432100011223344556677"
VALIDATION_KEY_HEX = "A1B2C3D4E5F60718293A4B5C6D7E8F90" * 4
AES_KEY_HEX = "00112233445566778899AABBCCDDEEFF102132435465768798A9BACBDCEDFE0F"


@pytest.fixture
def decryption_key() -> bytes:
    """Raw 192-bit TripleDES key."""
    return bytes.fromhex(DECRYPTION_KEY_HEX)


@pytest.fixture
def validation_key() -> bytes:
    """Raw 64-byte HMAC key."""
    return bytes.fromhex(VALIDATION_KEY_HEX)


@pytest.fixture
def aes_key() -> bytes:
    """Raw 256-bit AES key."""
    return bytes.fromhex(AES_KEY_HEX)


@pytest.fixture
def codec() -> TicketCodec:
    """Codec with the legacy default algorithms (TripleDES + SHA1)."""
    return TicketCodec(DECRYPTION_KEY_HEX, VALIDATION_KEY_HEX)


@pytest.fixture
def aes_codec() -> TicketCodec:
    """Codec using AES-256 and HMAC-SHA256."""
    return TicketCodec(
        AES_KEY_HEX,
        VALIDATION_KEY_HEX,
        encryption_method=EncryptionMethod.AES,
        validation_method=ValidationMethod.SHA256,
    )


@pytest.fixture
def envelope(decryption_key, validation_key) -> Envelope:
    """Envelope with the legacy default algorithms."""
    return Envelope(
        create_keyed_hash(validation_key, ValidationMethod.SHA1),
        create_cipher(decryption_key, EncryptionMethod.TRIPLE_DES),
    )


@pytest.fixture
def issue_time() -> datetime:
    """Fixed issue time used across tests."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_ticket(issue_time) -> Ticket:
    """Typical persistent ticket with user data."""
    return Ticket.create(
        version=2,
        name="alice",
        issue_date=issue_time,
        expiration=issue_time + timedelta(minutes=30),
        is_persistent=True,
        user_data="roles=admin",
        cookie_path="/",
    )


@pytest.fixture(scope="session")
def legacy_vectors() -> dict:
    """Fixed vectors in the legacy wire format."""
    with open(DATA_DIR / "legacy_vectors.yaml", "r") as f:
        return yaml.safe_load(f)
