"""Encryption at rest for stored payloads."""

import logging
from abc import ABC, abstractmethod

from nacl.exceptions import CryptoError
from nacl.secret import SecretBox

from .exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

KEY_SIZE = SecretBox.KEY_SIZE


class PayloadWrapper(ABC):
    """Turns plaintext into the bytes written to the object store and back."""

    @abstractmethod
    def encode(self, plaintext: bytes) -> bytes:
        """Transform plaintext into a storable payload."""
        pass

    @abstractmethod
    def decode(self, payload: bytes) -> bytes:
        """Recover plaintext from a stored payload."""
        pass


class CleartextWrapper(PayloadWrapper):
    """Stores payloads as-is."""

    def encode(self, plaintext: bytes) -> bytes:
        return bytes(plaintext)

    def decode(self, payload: bytes) -> bytes:
        return bytes(payload)


class SecretBoxWrapper(PayloadWrapper):
    """Authenticated symmetric encryption with NaCl secretbox.

    Each payload is a fresh random 24-byte nonce followed by the
    XSalsa20-Poly1305 ciphertext of the plaintext.

    Args:
        key: Exactly 32 bytes of key material
    """

    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            raise ConfigurationError(f"encryption key must have exactly {KEY_SIZE} bytes")
        self._box = SecretBox(bytes(key))

    def encode(self, plaintext: bytes) -> bytes:
        return bytes(self._box.encrypt(bytes(plaintext)))

    def decode(self, payload: bytes) -> bytes:
        try:
            return self._box.decrypt(bytes(payload))
        except CryptoError as e:
            raise AuthenticationError(
                "encrypted payload failed authentication; wrong key or altered data"
            ) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key=<redacted>)"


def select_wrapper(key: bytes | None) -> PayloadWrapper:
    """Pick the payload wrapper for a configured encryption key.

    No key selects clear text storage, a 32-byte key selects secretbox
    encryption, and any other length is a configuration error. Nothing here
    touches the network.

    Raises:
        ConfigurationError: If the key is not exactly 32 bytes long
    """
    if not key:
        logger.info("Clear text certificate storage active")
        return CleartextWrapper()
    if len(key) != KEY_SIZE:
        raise ConfigurationError(f"encryption key must have exactly {KEY_SIZE} bytes")
    logger.info("Encrypted certificate storage active")
    return SecretBoxWrapper(key)
