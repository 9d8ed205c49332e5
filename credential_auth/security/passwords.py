"""Salted one-way password hashing backed by bcrypt."""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10


class PasswordHasher:
    """Hash and verify passwords with a fixed bcrypt cost factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds
        self._dummy_hash = self.hash("placeholder-password-0")

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, plaintext: str) -> str:
        """Return a salted bcrypt digest for ``plaintext``."""
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        """Return ``True`` when ``plaintext`` matches ``digest``.

        A malformed digest is treated as a mismatch.
        """
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))
        except ValueError:
            return False

    def burn(self, plaintext: str) -> None:
        """Spend one verification's worth of CPU against a throwaway digest.

        Used when no account matched, so a missed lookup costs as much as a
        wrong password.
        """
        self.verify(plaintext, self._dummy_hash)
