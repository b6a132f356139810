"""Keyed hash primitives for ticket signing.

Implements the HMAC capability shared by both signing layers of the
envelope and by the deterministic IV derivation.

The legacy format never uses a random IV. The IV region that is encrypted
in front of the signed payload is instead derived from the payload itself:

1. h_1 = HMAC(k, data)
2. h_(n+1) = HMAC(k, h_n)
3. IV = (h_1 || h_2 || ...)[:length]

Decoders discard the IV region without checking it, so only encoders that
must reproduce legacy output byte-for-byte depend on this derivation.
"""

import hashlib
import hmac
from typing import Dict, Type

from forms_ticket.core.algorithms import ValidationMethod
from forms_ticket.crypto.exceptions import ConfigurationError, IntegrityError


class KeyedHash:
    """HMAC over a fixed validation key.

    Subclasses only pick the underlying hash function; the tag, IV
    derivation and verification contract is shared.

    Parameters
    ----------
    validation_key : bytes
        HMAC key material. Must not be empty.

    Attributes
    ----------
    hash_size : int
        Tag length H in bytes.
    block_size : int
        Block size of the underlying hash in bytes.

    Notes
    -----
    Every call builds a fresh HMAC context, so one instance can be shared
    between threads.
    """

    hash_size: int = 0
    block_size: int = 0
    digestmod = None

    def __init__(self, validation_key: bytes) -> None:
        if not validation_key:
            raise ConfigurationError("Validation key cannot be empty")
        self._key = bytes(validation_key)

    def tag(self, data: bytes) -> bytes:
        """Compute the HMAC tag of ``data``.

        Parameters
        ----------
        data : bytes
            Data to authenticate.

        Returns
        -------
        bytes
            Tag of exactly ``hash_size`` bytes.
        """
        return hmac.new(self._key, data, self.digestmod).digest()

    def derive_iv(self, data: bytes, length: int) -> bytes:
        """Derive a deterministic IV of ``length`` bytes from ``data``.

        Parameters
        ----------
        data : bytes
            Buffer the IV is derived from (the signed payload).
        length : int
            Requested IV length in bytes.

        Returns
        -------
        bytes
            IV bytes. Identical inputs always give identical output.
        """
        if length < 0:
            raise ValueError(f"IV length must be non-negative, got {length}")

        iv = bytearray()
        digest = data
        while len(iv) < length:
            digest = self.tag(digest)
            iv.extend(digest[: length - len(iv)])
        return bytes(iv)

    def check_tag(self, buffer: bytes, index: int) -> bool:
        """Check the tag stored at ``buffer[index:index + hash_size]``.

        The tag is recomputed over ``buffer[:index]`` and compared in
        constant time.

        Parameters
        ----------
        buffer : bytes
            Data followed by its tag (and possibly more bytes).
        index : int
            Offset at which the tag starts.

        Returns
        -------
        bool
            True if the stored tag matches.
        """
        if index < 0 or index + self.hash_size > len(buffer):
            return False
        expected = self.tag(buffer[:index])
        return hmac.compare_digest(expected, buffer[index:index + self.hash_size])

    def verify_and_strip(self, buffer: bytes) -> bytes:
        """Verify the trailing tag of ``buffer`` and return the data before it.

        Parameters
        ----------
        buffer : bytes
            Data with its tag appended.

        Returns
        -------
        bytes
            ``buffer`` without its trailing tag.

        Raises
        ------
        IntegrityError
            If the buffer is shorter than a tag or the tag does not match.
        """
        index = len(buffer) - self.hash_size
        if not self.check_tag(buffer, index):
            raise IntegrityError("Signature verification failed")
        return bytes(buffer[:index])


class Sha1KeyedHash(KeyedHash):
    """HMAC-SHA1, the legacy default (H = 20)."""

    hash_size = 20
    block_size = 64
    digestmod = hashlib.sha1


class Sha256KeyedHash(KeyedHash):
    """HMAC-SHA256 (H = 32)."""

    hash_size = 32
    block_size = 64
    digestmod = hashlib.sha256


class Sha384KeyedHash(KeyedHash):
    """HMAC-SHA384 (H = 48)."""

    hash_size = 48
    block_size = 128
    digestmod = hashlib.sha384


class Sha512KeyedHash(KeyedHash):
    """HMAC-SHA512 (H = 64)."""

    hash_size = 64
    block_size = 128
    digestmod = hashlib.sha512


_KEYED_HASHES: Dict[ValidationMethod, Type[KeyedHash]] = {
    ValidationMethod.SHA1: Sha1KeyedHash,
    ValidationMethod.SHA256: Sha256KeyedHash,
    ValidationMethod.SHA384: Sha384KeyedHash,
    ValidationMethod.SHA512: Sha512KeyedHash,
}


def create_keyed_hash(
    validation_key: bytes,
    method: ValidationMethod = ValidationMethod.SHA1,
) -> KeyedHash:
    """Create the KeyedHash variant for a validation method.

    Parameters
    ----------
    validation_key : bytes
        HMAC key material.
    method : ValidationMethod, optional
        Hash family. Default is SHA1.

    Returns
    -------
    KeyedHash
        Configured keyed hash.

    Raises
    ------
    ConfigurationError
        If the key is empty or the method is unsupported.
    """
    try:
        keyed_hash_cls = _KEYED_HASHES[ValidationMethod.parse(method)]
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    return keyed_hash_cls(validation_key)
