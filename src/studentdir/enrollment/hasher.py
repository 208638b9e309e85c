"""Credential hashing with bcrypt."""

from __future__ import annotations

import bcrypt

from studentdir.enrollment.exceptions import HashingError

DEFAULT_ROUNDS = 12
MIN_ROUNDS = 4
MAX_ROUNDS = 31

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class CredentialHasher:
    """Salted, slow one-way hashing of passwords."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        """Initialize the hasher.

        Args:
            rounds: bcrypt work factor (log2 of iterations), 4-31.

        Raises:
            ValueError: If rounds is out of range.
        """
        if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
            raise ValueError(f"bcrypt rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}")
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh random salt.

        Raises:
            HashingError: If the password is too long or bcrypt rejects it.
        """
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise HashingError(f"Password exceeds {MAX_PASSWORD_BYTES} bytes")
        try:
            return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode("ascii")
        except (ValueError, TypeError) as e:
            raise HashingError("Password hashing failed") from e

    def verify(self, plaintext: str, digest: str) -> bool:
        """Constant-time check of a password against a bcrypt digest.

        Returns:
            True if the password matches. Non-matching passwords return False.

        Raises:
            HashingError: If the digest is malformed.
        """
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            # Could never have been hashed, so it can't match
            return False
        try:
            return bcrypt.checkpw(encoded, digest.encode("ascii"))
        except (ValueError, TypeError) as e:
            raise HashingError("Stored password digest is malformed") from e
