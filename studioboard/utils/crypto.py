"""
Crypto utilities — bcrypt password hashing.

Hashes are salted per call, so two hashes of the same password differ;
always compare through `verify_password`.
"""

import bcrypt

BCRYPT_ROUNDS = 10


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password with bcrypt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str | None) -> bool:
    """Verify a plain-text password against its bcrypt hash.

    An empty or malformed hash, or a non-string password, never verifies.
    """
    if not password_hash or not isinstance(plain_password, str):
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )
    except ValueError:
        return False
