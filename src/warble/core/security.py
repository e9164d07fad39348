"""Password hashing helpers.

The core only ever hashes credentials; verifying them belongs to whatever
authentication layer sits in front of the API.
"""
from __future__ import annotations

import bcrypt

from warble.core.settings import settings

# bcrypt ignores everything past this many bytes of input.
BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash of ``password``.

    Args:
        password: Plaintext password supplied at registration or update time.
        rounds: Optional cost factor override; defaults to ``BCRYPT_ROUNDS``.

    Returns:
        The encoded hash as a text string suitable for storage.
    """
    secret = password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(secret, salt).decode("utf-8")
