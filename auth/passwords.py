"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug probe
builds a password longer than 72 bytes, which bcrypt 4.x rejects outright.

Digests embed algorithm, cost and salt ("$2b$12$<salt><hash>"), so nothing
besides the digest string has to be stored.

Timing: verify() never returns faster for a malformed digest than for a wrong
password. Both paths spend exactly one bcrypt computation. burn() gives the
login flow the same cost when the email is unknown.
"""

from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger("contactlist.auth.passwords")

# bcrypt only reads the first 72 bytes. Truncate explicitly so hash and verify
# agree and bcrypt 4.1+ does not raise on long input.
_MAX_PASSWORD_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_MAX_PASSWORD_BYTES]


class PasswordHasher:
    """Salted one-way hashing with a configurable bcrypt cost factor.

    Usage:
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        digest = hasher.hash("s3cret!")
        hasher.verify("s3cret!", digest)   # True
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        # Computed once so the first unknown-email login is not measurably
        # slower than later ones.
        self._dummy_hash: bytes = bcrypt.hashpw(b"contactlist_timing_dummy", bcrypt.gensalt(rounds=rounds))

    def hash(self, plain: str) -> str:
        """Return a bcrypt digest of plain with a fresh random salt."""
        return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str | None) -> bool:
        """Return True if plain matches hashed. Never raises.

        A malformed or missing digest fails closed after running bcrypt
        against the dummy digest.
        """
        try:
            return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            logger.warning("Malformed password digest encountered during verification")
            self.burn(plain)
            return False

    def burn(self, plain: str) -> None:
        """Spend one verification's worth of CPU and discard the result."""
        bcrypt.checkpw(_encode(plain), self._dummy_hash)
