"""
Wallit Users — Password Hashing
================================

What:  bcrypt hashing and verification for stored passwords.
How:   Every hash gets a fresh salt, so identical passwords produce different
       stored values. Verification uses bcrypt's constant-time comparison.

bcrypt only reads the first 72 bytes of its input; callers reject longer
passwords before hashing (see UserService.create_user).
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return the salted bcrypt hash of `password` at cost factor `rounds`."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    Returns False instead of raising when the stored value is not a bcrypt
    hash or the password exceeds bcrypt's input limit.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError as e:
        logger.warning("Password verification failed: %s", e)
        return False
