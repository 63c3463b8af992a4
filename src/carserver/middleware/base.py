"""
=============================================================================
MIDDLEWARE PIPELINE
=============================================================================

Wraps the router's dispatch function with cross-cutting behavior.

    pipeline.add(LoggingMiddleware())      # first added = outermost
    handler = pipeline.wrap(router.dispatch)

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   request ──► LoggingMiddleware ──► router.dispatch ──► handler     │
    │                                                          │           │
    │   response ◄── LoggingMiddleware ◄───────────────────────┘           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import ParsedRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# The next middleware, or the final dispatch function
NextHandler = Callable[[ParsedRequest], HTTPResponse]


class Middleware(ABC):
    """
    Base class for middleware.

    Subclasses implement __call__ and must call ``next(request)`` to
    continue the chain:

        class Timing(Middleware):
            def __call__(self, request, next):
                start = time.time()
                response = next(request)
                logger.info(f"took {time.time() - start:.3f}s")
                return response
    """

    @abstractmethod
    def __call__(self, request: ParsedRequest, next: NextHandler) -> HTTPResponse:
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """Ordered list of middleware wrapped around a final handler."""

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append middleware. Returns self for chaining."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the handler chain.

        Given [MW1, MW2] and handler, the result calls
        MW1 → MW2 → handler. We wrap in reverse so the first-added
        middleware ends up outermost.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler,
    ) -> NextHandler:
        def wrapped(request: ParsedRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)
