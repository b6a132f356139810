"""Algorithm selection enums.

The names accepted by ``parse`` follow the values found in legacy
machine-key configuration (``decryption="3DES"``, ``validation="HMACSHA256"``).
"""

from enum import Enum
from typing import Union


class EncryptionMethod(Enum):
    """Block cipher used for the encrypted region of a ticket."""

    TRIPLE_DES = "TripleDES"
    AES = "AES"

    @classmethod
    def parse(cls, value: Union[str, "EncryptionMethod"]) -> "EncryptionMethod":
        """Resolve a configuration value to an EncryptionMethod.

        Parameters
        ----------
        value : str or EncryptionMethod
            Name such as ``"TripleDES"``, ``"3DES"`` or ``"AES"``
            (case-insensitive).

        Returns
        -------
        EncryptionMethod
            Matching member.

        Raises
        ------
        ValueError
            If the name is not recognised.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("-", "").replace("_", "")
        aliases = {
            "TRIPLEDES": cls.TRIPLE_DES,
            "3DES": cls.TRIPLE_DES,
            "DESEDE": cls.TRIPLE_DES,
            "AES": cls.AES,
        }
        if key not in aliases:
            raise ValueError(f"Unsupported encryption method: {value!r}")
        return aliases[key]


class ValidationMethod(Enum):
    """Hash family used for HMAC tags and IV derivation."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"

    @classmethod
    def parse(cls, value: Union[str, "ValidationMethod"]) -> "ValidationMethod":
        """Resolve a configuration value to a ValidationMethod.

        ``HMACSHA256``-style names are accepted as aliases.

        Raises
        ------
        ValueError
            If the name is not recognised.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace("-", "").replace("_", "")
        if key.startswith("HMAC"):
            key = key[len("HMAC"):]
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unsupported validation method: {value!r}")
