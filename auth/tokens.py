"""
auth/tokens.py -- Bearer token issuing and verification.

Security design decisions:
  JWT: python-jose with HS256. A token carries the user id as its subject
       claim plus iat/exp. Nothing else about the user is embedded, so a
       rename or email change never leaves stale data in live tokens.

  Verification returns None on any failure. The caller cannot tell a forged
       token from an expired one; the reason is logged server-side only. That
       keeps the 401 response free of anything an attacker could use as an
       oracle while probing signatures.

  python-jose checks the signature before it looks at any claim, so a token
       with a valid-looking exp but a bad signature is rejected as invalid,
       not as expired.

  Revocation: none. A valid, unexpired token is honoured until it expires,
       even after a password change. There is no server-side token state.

The signing secret is passed in by the caller (create_app builds the issuer
from Settings). This module never reads configuration on its own.

Layer rule: no imports from api/ or contacts/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

logger = logging.getLogger("contactlist.auth.tokens")

_ALGORITHM = "HS256"


class TokenIssuer:
    """Issue and verify signed, time-limited bearer tokens.

    Usage:
        issuer = TokenIssuer(settings.secret_key, expire_days=30)
        token = issuer.issue(user.id)
        issuer.verify(token)  # -> user.id, or None
    """

    def __init__(self, secret_key: str, expire_days: int = 30) -> None:
        self._secret_key = secret_key
        self.expire_days = expire_days

    def issue(self, user_id: str, now: datetime | None = None) -> str:
        """Encode a signed JWT for user_id, valid for expire_days from now.

        now is injectable so tests can mint tokens that are already expired.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> str | None:
        """Return the user id embedded in token, or None if it is not acceptable."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except ExpiredSignatureError:
            logger.info("Token rejected: expired")
            return None
        except JWTError as exc:
            logger.info("Token rejected: %s", exc)
            return None
        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            logger.info("Token rejected: missing subject")
            return None
        return user_id
