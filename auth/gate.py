"""
auth/gate.py -- The auth gate interceptor.

Runs first in the protected pipeline (see core/pipeline.py). Given a
RequestContext it either:
  - returns Proceed(context) with context.identity set, or
  - returns Reject(UnauthenticatedError()).

Rejection cases, all answered with the same generic 401:
  1. No Authorization header.
  2. A scheme other than "Bearer", or an empty token.
  3. A token that fails verification (bad signature, expired, malformed).
  4. A valid token whose user has since been deleted.

The specific reason is logged at INFO for operators and never sent to the
client. Case 4 matters: a handler must never run with a null identity.

Layer rule: no imports from api/ or contacts/.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.errors import UnauthenticatedError
from core.models import RequestContext
from core.pipeline import Outcome, Proceed, Reject

logger = logging.getLogger("contactlist.auth.gate")

_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an "Authorization: Bearer <token>" value, or None.

    The scheme is matched case-insensitively; surrounding whitespace is ignored.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != _SCHEME:
        return None
    token = token.strip()
    return token or None


class AuthGate:
    """Verify the bearer token and attach the caller's Identity to the context."""

    def __init__(self, tokens: TokenIssuer, store: UserStore) -> None:
        self.tokens = tokens
        self.store = store

    def __call__(self, context: RequestContext) -> Outcome:
        token = extract_bearer_token(context.authorization)
        if token is None:
            return self._reject(context, "missing or non-bearer Authorization header")

        user_id = self.tokens.verify(token)
        if user_id is None:
            return self._reject(context, "token failed verification")

        identity = self.store.get_identity(user_id)
        if identity is None:
            return self._reject(context, "token subject no longer exists")

        return Proceed(replace(context, identity=identity))

    @staticmethod
    def _reject(context: RequestContext, reason: str) -> Reject:
        logger.info("Auth rejected %s %s from %s: %s", context.method, context.path, context.client_ip, reason)
        return Reject(UnauthenticatedError())
