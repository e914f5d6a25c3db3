"""
api/limiter.py -- Login throttling on top of a slowapi Limiter.

The throttle is an interceptor in the login pipeline (see core/pipeline.py),
not a @limiter.limit() decorator. A route decorator only takes effect when it
sits in the right place in the decorator stack; an interceptor that the
pipeline always runs cannot be mis-ordered out of existence.

One LoginThrottle is built per application in api/main.py, so every request
to that app shares the same counter store. Counters are keyed by client IP and
use a moving window: 10 attempts in any 15 minute span by default
(LOGIN_RATE_LIMIT). Every attempt counts, successful or not.

Storage defaults to in-process memory. Set RATE_LIMIT_STORAGE_URI (e.g.
redis://localhost:6379) when running more than one worker.
"""

from __future__ import annotations

import logging
import math
import time

from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from core.errors import RateLimitedError
from core.models import RequestContext
from core.pipeline import Outcome, Proceed, Reject

logger = logging.getLogger("contactlist.api.limiter")

_SCOPE = "login"


class LoginThrottle:
    """Reject login attempts from an address that has used up its window."""

    def __init__(self, rate: str = "10/15 minutes", storage_uri: str = "memory://") -> None:
        self.limit = parse(rate)
        self.limiter = Limiter(
            key_func=get_remote_address,
            storage_uri=storage_uri,
            strategy="moving-window",
        )

    def __call__(self, context: RequestContext) -> Outcome:
        if self.limiter.limiter.hit(self.limit, _SCOPE, context.client_ip):
            return Proceed(context)
        retry_after = self.retry_after(context.client_ip)
        logger.warning("Login throttled for %s (retry in %ds)", context.client_ip, retry_after)
        return Reject(RateLimitedError(retry_after=retry_after))

    def retry_after(self, client_ip: str) -> int:
        """Seconds until the oldest attempt in the window for client_ip expires."""
        stats = self.limiter.limiter.get_window_stats(self.limit, _SCOPE, client_ip)
        return max(1, math.ceil(stats.reset_time - time.time()))

    def reset(self) -> None:
        """Clear every counter."""
        self.limiter.reset()
