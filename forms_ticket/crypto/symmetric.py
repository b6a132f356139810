"""Block cipher wrappers for the encrypted ticket region.

Both variants run CBC with PKCS#7 padding and an all-zero cipher IV. The
per-ticket IV material is carried inside the plaintext (see envelope.py),
which is why the cipher-level IV can stay constant.

Reference:
- cryptography.hazmat Cipher/modes/padding API
"""

from typing import Dict, Tuple, Type

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from forms_ticket.core.algorithms import EncryptionMethod
from forms_ticket.crypto.exceptions import ConfigurationError, IntegrityError


def roundup_bits_to_bytes(num_bits: int) -> int:
    """Convert a bit count to whole bytes, rounding up.

    Parameters
    ----------
    num_bits : int
        Number of bits. Negative values map to 0.

    Returns
    -------
    int
        Number of bytes needed to hold ``num_bits``.
    """
    if num_bits < 0:
        return 0
    return (num_bits + 7) // 8


class SymmetricCipher:
    """Block cipher configured with a fixed key.

    Parameters
    ----------
    key : bytes
        Raw key material, used verbatim.

    Attributes
    ----------
    block_size : int
        Cipher block size in bytes.
    key_size : int
        Key size in bits.

    Raises
    ------
    ConfigurationError
        If the key length is not valid for the algorithm.
    """

    block_size: int = 0
    key_lengths: Tuple[int, ...] = ()
    name: str = ""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) not in self.key_lengths:
            raise ConfigurationError(
                f"{self.name} key must be one of {self.key_lengths} bytes, "
                f"got {len(key)}"
            )
        self._key = key

    @property
    def key_size(self) -> int:
        """Return the key size in bits."""
        return len(self._key) * 8

    @property
    def iv_length(self) -> int:
        """Return the length of the IV region carried in the plaintext."""
        return roundup_bits_to_bytes(self.key_size)

    def _algorithm(self):
        raise NotImplementedError

    def _cipher(self) -> Cipher:
        return Cipher(self._algorithm(), modes.CBC(bytes(self.block_size)))

    def encrypt(self, plaintext: bytes) -> bytes:
        """Pad and encrypt ``plaintext``.

        Parameters
        ----------
        plaintext : bytes
            Data to encrypt.

        Returns
        -------
        bytes
            Ciphertext, a whole number of blocks.
        """
        padder = padding.PKCS7(self.block_size * 8).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = self._cipher().encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt ``ciphertext`` and remove its padding.

        Parameters
        ----------
        ciphertext : bytes
            Data produced by ``encrypt``.

        Returns
        -------
        bytes
            Recovered plaintext.

        Raises
        ------
        IntegrityError
            If the ciphertext is not block aligned or the padding is invalid.
        """
        if not ciphertext or len(ciphertext) % self.block_size != 0:
            raise IntegrityError("Ciphertext length is not a multiple of the block size")

        decryptor = self._cipher().decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(self.block_size * 8).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            raise IntegrityError("Decryption failed") from e


def _is_weak_triple_des_key(key: bytes) -> bool:
    # Parity bits are ignored when comparing sub-keys.
    masked = bytes(b & 0xFE for b in key)
    first, second, third = masked[:8], masked[8:16], masked[16:24]
    if len(key) == 16:
        return first == second
    return first == second or second == third


class TripleDESCipher(SymmetricCipher):
    """Triple-DES (EDE) with a 128- or 192-bit key, the legacy default."""

    block_size = 8
    key_lengths = (16, 24)
    name = "TripleDES"

    def __init__(self, key: bytes) -> None:
        super().__init__(key)
        if _is_weak_triple_des_key(self._key):
            raise ConfigurationError("Specified key is a known weak key for TripleDES")

    def _algorithm(self):
        return TripleDES(self._key)


class AESCipher(SymmetricCipher):
    """AES with a 128-, 192- or 256-bit key."""

    block_size = 16
    key_lengths = (16, 24, 32)
    name = "AES"

    def _algorithm(self):
        return algorithms.AES(self._key)


_CIPHERS: Dict[EncryptionMethod, Type[SymmetricCipher]] = {
    EncryptionMethod.TRIPLE_DES: TripleDESCipher,
    EncryptionMethod.AES: AESCipher,
}


def create_cipher(
    key: bytes,
    method: EncryptionMethod = EncryptionMethod.TRIPLE_DES,
) -> SymmetricCipher:
    """Create the cipher variant for an encryption method.

    Parameters
    ----------
    key : bytes
        Raw decryption key material.
    method : EncryptionMethod, optional
        Cipher algorithm. Default is TripleDES.

    Returns
    -------
    SymmetricCipher
        Configured cipher.

    Raises
    ------
    ConfigurationError
        If the method is unsupported or the key is invalid for it.
    """
    try:
        cipher_cls = _CIPHERS[EncryptionMethod.parse(method)]
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    return cipher_cls(key)
