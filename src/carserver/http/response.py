"""
=============================================================================
RESPONSE ENCODER
=============================================================================

Turns a (status, body) pair into the bytes written back to the client.

=============================================================================
RESPONSE FORMAT
=============================================================================

Every response is one of three fixed preambles followed by the payload:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        FIXED PREAMBLES                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   200   HTTP/1.1 200 OK\r\n                                         │
    │         Content-Type: application/json\r\n                          │
    │         \r\n                                                         │
    │                                                                      │
    │   404   HTTP/1.1 404 NOT FOUND\r\n                                  │
    │         \r\n                                                         │
    │                                                                      │
    │   500   HTTP/1.1 500 INTERNAL ERROR\r\n                             │
    │         \r\n                                                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The payload is JSON for reads and plain text for confirmations and errors.
No Content-Length is computed: the server closes the connection after each
response, and the client reads until EOF.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Union
import json

from .status_codes import HTTPStatus


def _preamble(status: HTTPStatus, headers: str = "") -> str:
    return f"HTTP/1.1 {status.value} {status.phrase}\r\n{headers}\r\n"


PREAMBLES = {
    HTTPStatus.OK: _preamble(HTTPStatus.OK, "Content-Type: application/json\r\n"),
    HTTPStatus.NOT_FOUND: _preamble(HTTPStatus.NOT_FOUND),
    HTTPStatus.INTERNAL_ERROR: _preamble(HTTPStatus.INTERNAL_ERROR),
}


@dataclass
class HTTPResponse:
    """
    A response waiting to be written to the socket.

        Handler returns          to_bytes()              Socket sends
        HTTPResponse    ─────►   preamble + body ─────►   raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    body: str = ""

    @property
    def preamble(self) -> str:
        """Status line and fixed headers, including the blank line."""
        return PREAMBLES[self.status]

    def to_bytes(self) -> bytes:
        """Serialize the response for socket.sendall()."""
        return encode(self.status, self.body)


def encode(status: HTTPStatus, body: Union[str, bytes] = "") -> bytes:
    """
    Encode a status and body into raw response bytes.

    Args:
        status: One of the three supported statuses.
        body: Payload text (or bytes, written as-is).

    Returns:
        Preamble followed by the body.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    return PREAMBLES[HTTPStatus(status)].encode("utf-8") + body


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(data: Any = "") -> HTTPResponse:
    """
    200 OK.

    Strings are sent as-is; anything else is serialized as strict JSON
    (NaN and Infinity raise ValueError).

        ok("Car created")       → HTTP/1.1 200 OK ... Car created
        ok({"id": 1, ...})      → HTTP/1.1 200 OK ... {"id": 1, ...}
    """
    if isinstance(data, str):
        return HTTPResponse(HTTPStatus.OK, data)
    return HTTPResponse(HTTPStatus.OK, json.dumps(data, separators=(",", ":"), allow_nan=False))


def not_found(message: str = "404 not found") -> HTTPResponse:
    """404 NOT FOUND with a plain-text message."""
    return HTTPResponse(HTTPStatus.NOT_FOUND, message)


def internal_error(message: str = "Internal error") -> HTTPResponse:
    """500 INTERNAL ERROR with a plain-text message."""
    return HTTPResponse(HTTPStatus.INTERNAL_ERROR, message)
