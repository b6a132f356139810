"""Sign-encrypt-sign envelope around a serialized ticket.

Seal:
1. signed = payload || tag(payload)
2. iv = derive_iv(signed, iv_length)
3. ciphertext = encrypt(iv || signed)
4. blob = ciphertext || tag(ciphertext)

Open runs the exact inverse and fails closed at every step. The outer tag
lets tampered ciphertext be rejected before any decryption; the inner tag
catches a tampered plaintext after decryption.
"""

from forms_ticket.crypto.exceptions import IntegrityError
from forms_ticket.crypto.keyed_hash import KeyedHash
from forms_ticket.crypto.symmetric import SymmetricCipher
from forms_ticket.utils.logging import get_logger

logger = get_logger(__name__)


class Envelope:
    """Orchestrates the double-signed encryption of ticket payloads.

    Parameters
    ----------
    keyed_hash : KeyedHash
        Signs both layers and derives the IV region.
    cipher : SymmetricCipher
        Encrypts the IV region and the signed payload.

    Examples
    --------
    >>> envelope = Envelope(create_keyed_hash(vkey), create_cipher(dkey))
    >>> blob = envelope.seal(payload)
    >>> envelope.open(blob) == payload
    True
    """

    def __init__(self, keyed_hash: KeyedHash, cipher: SymmetricCipher) -> None:
        self._hash = keyed_hash
        self._cipher = cipher

    @property
    def keyed_hash(self) -> KeyedHash:
        """Return the keyed hash used for both signing layers."""
        return self._hash

    @property
    def cipher(self) -> SymmetricCipher:
        """Return the symmetric cipher."""
        return self._cipher

    def sign(self, data: bytes) -> bytes:
        """Return ``data`` with its tag appended."""
        return bytes(data) + self._hash.tag(data)

    def encrypt(self, signed_payload: bytes) -> bytes:
        """Encrypt a signed payload behind its derived IV region.

        Parameters
        ----------
        signed_payload : bytes
            Payload with its inner tag appended.

        Returns
        -------
        bytes
            Ciphertext (not yet signed).
        """
        iv = self._hash.derive_iv(signed_payload, self._cipher.iv_length)
        return self._cipher.encrypt(iv + signed_payload)

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt ciphertext and discard the leading IV region.

        Parameters
        ----------
        ciphertext : bytes
            Ciphertext with the outer tag already stripped.

        Returns
        -------
        bytes
            Signed payload (payload plus inner tag).

        Raises
        ------
        IntegrityError
            If decryption fails or the plaintext is shorter than the IV region.
        """
        decrypted = self._cipher.decrypt(ciphertext)
        iv_length = self._cipher.iv_length
        if len(decrypted) < iv_length:
            raise IntegrityError(
                f"Unexpected IV region length: {iv_length}. Total: {len(decrypted)}"
            )
        return decrypted[iv_length:]

    def seal(self, payload: bytes) -> bytes:
        """Sign, encrypt and sign again.

        Parameters
        ----------
        payload : bytes
            Serialized ticket.

        Returns
        -------
        bytes
            ``ciphertext || outer_tag``.
        """
        ciphertext = self.encrypt(self.sign(payload))
        return self.sign(ciphertext)

    def open(self, blob: bytes) -> bytes:
        """Verify, decrypt and verify again.

        Parameters
        ----------
        blob : bytes
            Output of ``seal``.

        Returns
        -------
        bytes
            The unwrapped payload.

        Raises
        ------
        IntegrityError
            If either tag does not match or decryption fails.
        """
        ciphertext = self._hash.verify_and_strip(blob)
        signed_payload = self.decrypt(ciphertext)
        try:
            return self._hash.verify_and_strip(signed_payload)
        except IntegrityError:
            logger.debug("Inner signature mismatch after successful decryption")
            raise
