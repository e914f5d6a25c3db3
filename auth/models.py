"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and services do
the work. The authenticated-caller view of a user is core.models.Identity,
which deliberately has no password field.

Layer rule: no imports from api/ or contacts/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is the login key. It is compared case-sensitively; the API layer
    normalizes the domain part before it reaches the store.

    hashed_password is a bcrypt digest. The plaintext never reaches this class.
    id is None before the record is written to the database.
    """

    name: str
    email: str
    hashed_password: str | None = None
    id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
