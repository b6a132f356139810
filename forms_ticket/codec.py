"""Public entry points for encrypting and decrypting tickets.

Encode path:  Ticket -> serialize -> sign -> encrypt -> sign -> hex
Decode path:  hex -> verify -> decrypt -> verify -> deserialize -> Ticket

Every decode-path failure (bad transport string, tag mismatch, padding
error, layout violation) is reported as the same ``InvalidTicketError`` so
a caller probing the codec cannot tell the stages apart. Encode-path
failures are caller mistakes and keep their specific exception.
"""

import binascii
from typing import Any, Mapping, Union

from forms_ticket.configs import codec_settings
from forms_ticket.core.algorithms import EncryptionMethod, ValidationMethod
from forms_ticket.core.constants import MAX_TICKET_LENGTH, MSG_INVALID_TICKET
from forms_ticket.core.ticket import Ticket
from forms_ticket.crypto.envelope import Envelope
from forms_ticket.crypto.exceptions import (
    ConfigurationError,
    InputValidationError,
    InvalidTicketError,
    TicketError,
)
from forms_ticket.crypto.keyed_hash import create_keyed_hash
from forms_ticket.crypto.symmetric import create_cipher
from forms_ticket.serialization.serializer import deserialize, serialize
from forms_ticket.utils.logging import get_logger

logger = get_logger(__name__)


def binary_to_hex(data: bytes) -> str:
    """Encode bytes as uppercase hex."""
    return binascii.hexlify(data).decode("ascii").upper()


def hex_to_binary(text: str) -> bytes:
    """Decode a hex string (case-insensitive).

    Parameters
    ----------
    text : str
        Hex digits only; whitespace and separators are rejected.

    Returns
    -------
    bytes
        Decoded bytes.

    Raises
    ------
    InputValidationError
        If the string has odd length or contains a non-hex character.
    """
    try:
        return binascii.unhexlify(text)
    except (TypeError, ValueError) as e:
        raise InputValidationError("Not a hex string") from e


def _key_from_hex(value: Union[str, bytes], label: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        key = bytes(value)
    elif isinstance(value, str):
        try:
            key = hex_to_binary(value.strip())
        except InputValidationError as e:
            raise ConfigurationError(f"{label} is not a valid hex string") from e
    else:
        raise ConfigurationError(f"{label} is missing")

    if not key:
        raise ConfigurationError(f"{label} cannot be empty")
    return key


class TicketCodec:
    """Encrypts and decrypts forms authentication tickets.

    Parameters
    ----------
    decryption_key : str or bytes
        Cipher key as a hex string (or raw bytes).
    validation_key : str or bytes
        HMAC key as a hex string (or raw bytes).
    encryption_method : EncryptionMethod or str, optional
        Cipher algorithm. Default is TripleDES.
    validation_method : ValidationMethod or str, optional
        Hash family. Default is SHA1.

    Raises
    ------
    ConfigurationError
        If key material is missing, not hex, or of the wrong size, or an
        algorithm name is not recognised.

    Notes
    -----
    The codec holds no per-call state; one instance can serve many threads.

    Examples
    --------
    >>> codec = TicketCodec(decryption_key_hex, validation_key_hex)
    >>> token = codec.encrypt(ticket)
    >>> codec.decrypt(token) == ticket
    True
    """

    def __init__(
        self,
        decryption_key: Union[str, bytes],
        validation_key: Union[str, bytes],
        encryption_method: Union[EncryptionMethod, str] = EncryptionMethod.TRIPLE_DES,
        validation_method: Union[ValidationMethod, str] = ValidationMethod.SHA1,
    ) -> None:
        try:
            self._encryption_method = EncryptionMethod.parse(encryption_method)
            self._validation_method = ValidationMethod.parse(validation_method)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        keyed_hash = create_keyed_hash(
            _key_from_hex(validation_key, "validation_key"), self._validation_method
        )
        cipher = create_cipher(
            _key_from_hex(decryption_key, "decryption_key"), self._encryption_method
        )
        self._envelope = Envelope(keyed_hash, cipher)

        logger.info(
            "Ticket codec configured: encryption=%s (%d-bit key), validation=%s",
            self._encryption_method.value,
            cipher.key_size,
            self._validation_method.value,
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TicketCodec":
        """Build a codec from a configuration mapping.

        Parameters
        ----------
        config : Mapping[str, Any]
            Configuration as returned by ``forms_ticket.configs.load_profile``
            or ``load_config_file``.

        Returns
        -------
        TicketCodec
            Configured codec.
        """
        settings = codec_settings(config)
        return cls(
            settings.decryption_key,
            settings.validation_key,
            encryption_method=settings.encryption_method,
            validation_method=settings.validation_method,
        )

    @property
    def encryption_method(self) -> EncryptionMethod:
        """Return the configured cipher algorithm."""
        return self._encryption_method

    @property
    def validation_method(self) -> ValidationMethod:
        """Return the configured hash family."""
        return self._validation_method

    @property
    def envelope(self) -> Envelope:
        """Return the underlying envelope."""
        return self._envelope

    def seal(self, payload: bytes) -> bytes:
        """Wrap a raw payload in the signed and encrypted envelope."""
        return self._envelope.seal(payload)

    def unseal(self, blob: bytes) -> bytes:
        """Unwrap an envelope produced by ``seal``.

        Raises
        ------
        IntegrityError
            If either tag does not match or decryption fails.
        """
        return self._envelope.open(blob)

    def encrypt(self, ticket: Ticket) -> str:
        """Produce the hex cookie value for a ticket.

        Parameters
        ----------
        ticket : Ticket
            Ticket to protect.

        Returns
        -------
        str
            Uppercase hex string.

        Raises
        ------
        TypeError
            If ``ticket`` is None or not a Ticket.
        """
        if ticket is None:
            raise TypeError("ticket cannot be None")
        payload = serialize(ticket)
        return binary_to_hex(self._envelope.seal(payload))

    def decrypt(self, encrypted_ticket: str) -> Ticket:
        """Recover a ticket from its hex cookie value.

        Parameters
        ----------
        encrypted_ticket : str
            Hex string produced by ``encrypt`` (any letter case).

        Returns
        -------
        Ticket
            The decoded ticket. Expiration is not checked.

        Raises
        ------
        InvalidTicketError
            For every kind of rejection, without saying which check failed.
        """
        try:
            blob = self._parse_transport(encrypted_ticket)
            payload = self._envelope.open(blob)
            return deserialize(payload)
        except TicketError as e:
            logger.debug("Ticket rejected at %s", type(e).__name__)
            raise InvalidTicketError(MSG_INVALID_TICKET) from None

    @staticmethod
    def _parse_transport(encrypted_ticket: str) -> bytes:
        if not isinstance(encrypted_ticket, str) or not encrypted_ticket:
            raise InputValidationError("Ticket string is empty")
        if len(encrypted_ticket) > MAX_TICKET_LENGTH:
            raise InputValidationError("Ticket string is too long")
        if len(encrypted_ticket) % 2 != 0:
            raise InputValidationError("Ticket string has odd length")
        return hex_to_binary(encrypted_ticket)
