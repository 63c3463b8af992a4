"""
=============================================================================
PREFIX ROUTER
=============================================================================

Maps (method, path prefix) to a handler and turns every handler outcome
into a response.

=============================================================================
ROUTING TABLE
=============================================================================

Routes are tried in the order they were registered; the first route whose
method matches and whose prefix starts the path wins:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      CAR ROUTES (in priority order)                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   POST    /cars     → create_car                                    │
    │   GET     /cars/    → get_car        (id present)                   │
    │   GET     /cars     → list_cars      (no trailing id)               │
    │   PUT     /cars/    → update_car                                    │
    │   DELETE  /cars/    → delete_car                                    │
    │   (none)            → 404 "404 not found"                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

This is PREFIX matching, not exact matching. "GET /cars/12/extra" reaches
get_car with id 12 and "GET /carsXYZ" reaches list_cars. The order above
is what keeps "/cars/" ahead of "/cars" for GET.

=============================================================================
ERROR FUNNEL
=============================================================================

dispatch() never raises. Whatever the handler throws is mapped here:

    NotFound              → 404 "Car not found"
    anything else         → 500 "Internal error"   (logged)

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging
import re

from ..exceptions import MalformedRequest, NotFound, StoreError
from .request import ParsedRequest
from .response import HTTPResponse, internal_error, not_found


logger = logging.getLogger(__name__)


# Handler: takes a parsed request, returns a response
Handler = Callable[[ParsedRequest], HTTPResponse]

# Ids are stored in a 32-bit integer column
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1

_ID_PATTERN = re.compile(r"-?[0-9]+")


# =============================================================================
# PATH EXTRACTION
# =============================================================================

def extract_id(path: str) -> str:
    """
    Pull the id segment out of a ``/cars/{id}`` path.

        "/cars/12"            → "12"
        "/cars/12/extra"      → "12"
        "/cars/12 HTTP/1.1"   → "12"
        "/cars"               → ""

    Returns:
        The segment after ``cars/``, cut at the first whitespace, or ""
        when there is no such segment.
    """
    segments = path.split("/")
    if len(segments) < 3:
        return ""
    words = segments[2].split()
    return words[0] if words else ""


def parse_id(path: str) -> int:
    """
    Extract the car id from a path as an integer.

    Only ASCII digits with an optional leading "-" are accepted, within
    the 32-bit range of the id column. "1_0", "+5" and non-ASCII digits
    are rejected even though int() would take them.

    Raises:
        MalformedRequest: If the id is empty, not a number, or out of
            range. There is no fallback id.
    """
    raw_id = extract_id(path)
    if not _ID_PATTERN.fullmatch(raw_id):
        raise MalformedRequest(f"Invalid car id: {raw_id!r}")

    car_id = int(raw_id)
    if not ID_MIN <= car_id <= ID_MAX:
        raise MalformedRequest(f"Car id out of range: {raw_id}")
    return car_id


# =============================================================================
# ROUTER
# =============================================================================

@dataclass
class Route:
    """A handler bound to a method and a path prefix."""

    method: str
    prefix: str
    handler: Handler
    name: Optional[str] = None

    def matches(self, method: str, path: str) -> bool:
        return method == self.method and path.startswith(self.prefix)


class Router:
    """
    First-match prefix router.

        router = Router()
        router.add_route("GET", "/cars/", get_car)
        router.add_route("GET", "/cars", list_cars)

        response = router.dispatch(parsed_request)
    """

    def __init__(self):
        self._routes: List[Route] = []

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    def add_route(
        self,
        method: str,
        prefix: str,
        handler: Handler,
        name: Optional[str] = None,
    ) -> Route:
        """
        Register a route. Registration order is match priority.

        Args:
            method: Request method to match ("GET", "POST", ...).
            prefix: Path prefix the request path must start with.
            handler: Function called with the parsed request.
            name: Optional name, used in logs.
        """
        route = Route(
            method=method.upper(),
            prefix=prefix,
            handler=handler,
            name=name or getattr(handler, "__name__", None),
        )
        self._routes.append(route)
        return route

    def match(self, method: str, path: str) -> Optional[Route]:
        """Return the first route matching method and path, or None."""
        for route in self._routes:
            if route.matches(method, path):
                return route
        return None

    def dispatch(self, request: ParsedRequest) -> HTTPResponse:
        """
        Run the matching handler and normalize its outcome.

        Never raises: NotFound becomes 404, every other failure becomes
        the generic 500.
        """
        route = self.match(request.method, request.path)
        if route is None:
            return not_found()

        try:
            return route.handler(request)
        except NotFound as e:
            logger.debug(f"{route.name}: {e}")
            return not_found("Car not found")
        except MalformedRequest as e:
            logger.warning(f"{route.name}: malformed request: {e}")
            return internal_error()
        except StoreError as e:
            logger.error(f"{route.name}: store error: {e}")
            return internal_error()
        except Exception as e:
            logger.exception(f"{route.name}: handler error: {e}")
            return internal_error()

    def print_routes(self):
        """Log the routing table, highest priority first."""
        for route in self._routes:
            logger.info(f"  {route.method:<7} {route.prefix:<10} → {route.name}")
