"""Passphrase to key stretching."""

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

KEY_LENGTH = 32

# Fixed for every installation, so equal passphrases give equal keys.
# Changing any of these makes existing logs undecryptable.
FIXED_SALT = b"salt"
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1


def derive_key(passphrase: str, salt: bytes = FIXED_SALT) -> bytes:
    """
    Derive a 32-byte AES key from a passphrase with scrypt.

    Args:
        passphrase: User secret; an empty string is accepted
        salt: Salt bytes (defaults to the fixed salt the log format uses)

    Returns:
        KEY_LENGTH bytes, identical for identical inputs
    """
    kdf = Scrypt(salt=salt, length=KEY_LENGTH, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
    return kdf.derive(passphrase.encode("utf-8"))
