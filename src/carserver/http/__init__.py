"""
=============================================================================
WIRE CODEC AND ROUTING
=============================================================================

Everything between the raw bytes on the socket and the store:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   bytes ──► RequestParser ──► ParsedRequest(method, path, body)     │
    │                                       │                              │
    │                                       ▼                              │
    │                               Router.dispatch()                      │
    │                                       │                              │
    │                                       ▼                              │
    │   bytes ◄── HTTPResponse.to_bytes() ◄─ HTTPResponse(status, body)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    request.py       Request line and body extraction
    response.py      Fixed-preamble response encoding
    router.py        Prefix routing, id extraction, error funnel
    status_codes.py  The three statuses the service uses

=============================================================================
"""

from .request import ParsedRequest, RequestParser, parse_request
from .response import (
    HTTPResponse,
    encode,
    ok,                 # 200 OK
    not_found,          # 404 NOT FOUND
    internal_error,     # 500 INTERNAL ERROR
)
from .router import Router, Route, extract_id, parse_id
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "ParsedRequest",
    "RequestParser",
    "parse_request",

    # Response encoding
    "HTTPResponse",
    "encode",
    "ok",
    "not_found",
    "internal_error",

    # Routing
    "Router",
    "Route",
    "extract_id",
    "parse_id",

    # Status codes
    "HTTPStatus",
]
