"""
auth/service.py -- Registration and login flows.

AuthService ties the Credential Store, Password Hasher and Token Issuer
together. Route handlers call register() and login() and never touch the
three collaborators individually.

Both operations are synchronous and CPU-heavy (one bcrypt computation each).
They are called from plain `def` route handlers, which FastAPI runs in its
worker threadpool, so a hash in progress does not stall other requests.

Security:
  login() always runs bcrypt exactly once, whether or not the email exists,
  and fails with the same InvalidCredentialsError in both cases. Response
  content and timing do not reveal which emails have accounts.

Layer rule: no imports from api/ or contacts/.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from auth.models import User
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.errors import ConflictError, InvalidCredentialsError

logger = logging.getLogger("contactlist.auth")


@dataclass(frozen=True)
class AuthResult:
    """A user plus a freshly issued bearer token for them."""

    user: User
    token: str


class AuthService:
    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenIssuer) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and return it with a token for immediate use.

        Raises ConflictError if the email is taken. The existing account is
        left untouched.
        """
        if self.store.get_by_email(email) is not None:
            logger.info("Registration rejected: email already registered")
            raise ConflictError("User already exists.")
        user = self.store.create_user(
            User(name=name, email=email, hashed_password=self.hasher.hash(password))
        )
        logger.info("User registered (id=%s)", user.id)
        return AuthResult(user=user, token=self.tokens.issue(user.id))

    def authenticate(self, email: str, password: str) -> User:
        """Return the user for a correct email/password pair.

        Raises InvalidCredentialsError otherwise. For an unknown email bcrypt
        still runs against the hasher's dummy digest.
        """
        user = self.store.get_by_email(email)
        if user is None:
            self.hasher.burn(password)
            raise InvalidCredentialsError()
        if not self.hasher.verify(password, user.hashed_password):
            raise InvalidCredentialsError()
        return user

    def login(self, email: str, password: str) -> AuthResult:
        try:
            user = self.authenticate(email, password)
        except InvalidCredentialsError:
            logger.info("Login failed")
            raise
        logger.info("Login succeeded (id=%s)", user.id)
        return AuthResult(user=user, token=self.tokens.issue(user.id))
