"""
auth/ownership.py -- Record-level authorization.

The only rule in this system: the identity that created a record is the only
one that may read, change or delete it.

Callers resolve the record first and report NotFoundError for a missing id,
then call authorize_owner(). Existence is therefore checked before ownership,
and a non-owner learns nothing beyond a generic 403.

Layer rule: no imports from api/ or contacts/.
"""

from __future__ import annotations

import logging

from core.errors import ForbiddenError
from core.models import Identity

logger = logging.getLogger("contactlist.auth.ownership")


def is_owner(owner_id: object, identity: Identity) -> bool:
    """Compare a stored owner reference with the caller, as strings.

    Owner ids may arrive as str, int or UUID depending on the backend;
    normalizing both sides avoids a false mismatch on representation alone.
    """
    return owner_id is not None and str(owner_id) == str(identity.user_id)


def authorize_owner(owner_id: object, identity: Identity, resource: str = "resource") -> None:
    """Raise ForbiddenError unless identity owns the record.

    resource only appears in the server-side log line.
    """
    if not is_owner(owner_id, identity):
        logger.info("Ownership check failed: user %s on %s", identity.user_id, resource)
        raise ForbiddenError()
