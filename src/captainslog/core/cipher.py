"""AES-256-CBC encryption of text into ``<ivHex>:<cipherHex>`` blobs.

There is no MAC. Tampering with the last ciphertext block usually breaks the
padding and is reported as CryptoError, but changes to earlier blocks or to
the IV decrypt "successfully" to altered plaintext.
"""

import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from captainslog.core.kdf import KEY_LENGTH, derive_key

IV_LENGTH = 16
BLOCK_SIZE_BITS = algorithms.AES.block_size
SEPARATOR = ":"


class CipherError(Exception):
    """Base error for blob encryption and decryption failures."""


class FormatError(CipherError):
    """Raised when a blob does not have the ``<ivHex>:<cipherHex>`` shape."""


class CryptoError(CipherError):
    """Raised when a well-formed blob cannot be decrypted."""


def encrypt(plaintext: str, key: bytes) -> str:
    """
    Encrypt text under a fresh random IV.

    Args:
        plaintext: Text to encrypt (UTF-8 encoded before padding)
        key: 32-byte AES key

    Returns:
        Blob of the form ``<ivHex>:<cipherHex>``
    """
    iv = os.urandom(IV_LENGTH)
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return f"{iv.hex()}{SEPARATOR}{ciphertext.hex()}"


def decrypt_bytes(blob: str, key: bytes) -> bytes:
    """
    Decrypt a blob produced by encrypt() without decoding the result.

    Args:
        blob: ``<ivHex>:<cipherHex>`` text; surrounding whitespace is ignored
        key: 32-byte AES key

    Returns:
        The unpadded plaintext bytes

    Raises:
        FormatError: Separator missing, a half empty, or IV not 32 characters
        CryptoError: Bad hex, truncated ciphertext, or bad padding (tampering
            or wrong key)
    """
    iv_hex, separator, cipher_hex = blob.strip().partition(SEPARATOR)
    if not separator or not iv_hex or not cipher_hex:
        raise FormatError("Invalid encrypted text format: expected <iv>:<ciphertext>")
    if len(iv_hex) != IV_LENGTH * 2:
        raise FormatError(
            f"Invalid encrypted text format: IV must be {IV_LENGTH * 2} hex "
            f"characters, got {len(iv_hex)}"
        )

    try:
        iv = bytes.fromhex(iv_hex)
        ciphertext = bytes.fromhex(cipher_hex)
    except ValueError as e:
        raise CryptoError(f"Invalid hex in encrypted text: {e}") from e

    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise CryptoError(f"Decryption failed (wrong key or tampered data): {e}") from e


def decrypt(blob: str, key: bytes) -> str:
    """
    Decrypt a blob produced by encrypt().

    Raises:
        FormatError: See decrypt_bytes()
        CryptoError: See decrypt_bytes(), or the plaintext is not UTF-8
    """
    data = decrypt_bytes(blob, key)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CryptoError("Decrypted data is not valid UTF-8 (wrong key?)") from e


class CipherEngine:
    """Encrypts and decrypts blobs with one derived key."""

    def __init__(self, key: bytes):
        """
        Initialize the engine.

        Args:
            key: 32-byte AES key, usually from derive_key()
        """
        if len(key) != KEY_LENGTH:
            raise ValueError(f"Key must be {KEY_LENGTH} bytes, got {len(key)}")
        self._key = key

    @classmethod
    def from_passphrase(cls, passphrase: str) -> "CipherEngine":
        """Derive the key once and build an engine around it."""
        return cls(derive_key(passphrase))

    def encrypt(self, plaintext: str) -> str:
        return encrypt(plaintext, self._key)

    def decrypt(self, blob: str) -> str:
        return decrypt(blob, self._key)

    def __repr__(self) -> str:
        return "CipherEngine(key=<redacted>)"
