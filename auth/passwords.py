"""One-way password hashing with bcrypt.

Plaintext passwords are never stored or logged; only the bcrypt hash string
is persisted. Verification uses bcrypt's constant-time comparison.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only considers the first 72 bytes of input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted, adaptive password hashing."""

    def __init__(self, rounds: int = 12):
        if rounds < 10:
            raise ValueError("bcrypt rounds must be at least 10")
        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a password. Two calls with the same input give different hashes.

        Raises:
            ValueError: If the password exceeds bcrypt's 72-byte input limit.
        """
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    def verify(self, plaintext: str, hash_string: str) -> bool:
        """Check a password against a stored hash. Never raises; mismatches are False."""
        if not plaintext or not hash_string:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hash_string.encode("ascii"))
        except (ValueError, UnicodeEncodeError):
            logger.warning("Password verification against malformed hash or oversized input")
            return False
