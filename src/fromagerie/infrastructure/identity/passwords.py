"""bcrypt password hashing for the file-backed identity provider."""

from __future__ import annotations

import bcrypt

_ROUNDS = 12


def hash_password(password: str, rounds: int = _ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """True when *password* matches; a malformed hash never matches."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
