"""
=============================================================================
REQUEST PARSER
=============================================================================

Turns the raw bytes read from a client socket into a ParsedRequest.

=============================================================================
WHAT WE ACTUALLY LOOK AT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     REQUEST AS THE PARSER SEES IT                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   POST /cars HTTP/1.1\r\n          ◄── request line                 │
    │   ─┬── ──┬── ────┬───                                               │
    │    │     │       └── ignored                                        │
    │    │     └── path                                                   │
    │    └── method                                                       │
    │                                                                      │
    │   Host: localhost:6001\r\n         ◄── headers: ignored             │
    │   Content-Type: application/json\r\n                                │
    │   \r\n                             ◄── first blank line             │
    │   {"brand": "Toyota", ...}         ◄── body: everything after it    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no Content-Length handling. The connection hands us one bounded
buffer and the body is whatever follows the first blank line in it. A
request larger than the buffer is silently truncated.

=============================================================================
"""

from dataclasses import dataclass

from ..exceptions import MalformedRequest


# Header/body separators, tried in order
_SEPARATORS = ("\r\n\r\n", "\n\n")


@dataclass
class ParsedRequest:
    """
    The method/path/body triple the router works with.

    Attributes:
        method: Request method, as sent ("GET", "POST", ...).
        path:   Request target, as sent ("/cars/12").
        body:   Text after the first blank line, or "" if there is none.
        client_address: (ip, port) of the peer, for logging.
    """

    method: str
    path: str
    body: str = ""
    client_address: tuple[str, int] = ("", 0)


class RequestParser:
    """
    Parses raw request bytes into ParsedRequest objects.

    Parsing never looks beyond the request line and the first blank line:

        1. Decode as UTF-8 (invalid bytes are replaced, never fatal)
        2. Split the first line on whitespace → method, path
        3. Take everything after the first blank line → body
    """

    def parse(self, data: bytes, client_address: tuple[str, int] = ("", 0)) -> ParsedRequest:
        """
        Parse raw bytes into a ParsedRequest.

        Args:
            data: Bytes read from the socket.
            client_address: Peer address, copied onto the request.

        Returns:
            The parsed request.

        Raises:
            MalformedRequest: If the request line has no method and path.
        """
        text = data.decode("utf-8", errors="replace")

        request_line = text.split("\n", 1)[0]
        parts = request_line.split()
        if len(parts) < 2:
            raise MalformedRequest(f"Invalid request line: {request_line!r}")

        method, path = parts[0], parts[1]

        return ParsedRequest(
            method=method,
            path=path,
            body=self._extract_body(text),
            client_address=client_address,
        )

    def _extract_body(self, text: str) -> str:
        for separator in _SEPARATORS:
            _, found, body = text.partition(separator)
            if found:
                return body
        return ""


def parse_request(data: bytes, client_address: tuple[str, int] = ("", 0)) -> ParsedRequest:
    """Parse a request with a default parser."""
    return RequestParser().parse(data, client_address)
