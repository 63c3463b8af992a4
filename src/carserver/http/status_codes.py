"""
=============================================================================
RESPONSE STATUS CODES
=============================================================================

The service answers with exactly three statuses:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK              - operation succeeded                     │
    │  404   │ NOT FOUND       - no such route, or no such car           │
    │  500   │ INTERNAL ERROR  - everything else                         │
    └────────┴───────────────────────────────────────────────────────────┘

Reason phrases are upper-case on the wire: "NOT FOUND", not "Not Found".

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    Status codes used by the service.

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'NOT FOUND'
    """

    OK = 200
    NOT_FOUND = 404
    INTERNAL_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase used on the status line."""
        return _PHRASES[self]


_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "NOT FOUND",
    HTTPStatus.INTERNAL_ERROR: "INTERNAL ERROR",
}
