"""
core/pipeline.py -- Ordered request interceptor pipeline.

Each interceptor looks at the RequestContext and returns one of two outcomes:
  Proceed(context) -- continue, possibly with an enriched context
  Reject(error)    -- stop here; error becomes the single response

Pipeline.run() walks the interceptors in order. The first Reject raises its
error, so no later interceptor and no route handler ever runs. There is no
"call next" continuation to forget or to call twice.

No FastAPI imports here. auth/dependencies.py adapts a Starlette Request into a
RequestContext and runs the pipelines that api/main.py builds.
"""

from dataclasses import dataclass, replace
from typing import Callable, Union

from core.errors import ContactListError
from core.models import RequestContext


@dataclass(frozen=True)
class Proceed:
    context: RequestContext


@dataclass(frozen=True)
class Reject:
    error: ContactListError


Outcome = Union[Proceed, Reject]
Interceptor = Callable[[RequestContext], Outcome]


class Pipeline:
    """An ordered, immutable chain of interceptors."""

    def __init__(self, *interceptors: Interceptor) -> None:
        self.interceptors: tuple[Interceptor, ...] = interceptors

    def run(self, context: RequestContext) -> RequestContext:
        """Run every interceptor in order and return the final context.

        Raises the error of the first Reject. The caller's context object is
        never mutated; each stage works on a copy.
        """
        current = replace(context)
        for interceptor in self.interceptors:
            outcome = interceptor(current)
            if isinstance(outcome, Reject):
                raise outcome.error
            current = outcome.context
        return current
