from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as resolved by the auth gate.

    Carries no credential material. Built only from a verified token plus a
    fresh Credential Store lookup -- never from anything the client sent in a
    body or query string.
    """

    user_id: str
    name: str
    email: str


@dataclass
class RequestContext:
    """Per-request state threaded through the interceptor pipeline.

    identity stays None until the auth gate fills it in. Handlers behind a
    protected pipeline can rely on it being set.
    """

    method: str
    path: str
    client_ip: str
    authorization: Optional[str] = None
    identity: Optional[Identity] = None
