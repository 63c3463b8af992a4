"""
=============================================================================
ERROR KINDS
=============================================================================

Every failure the request pipeline knows about is one of these exceptions.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        EXCEPTION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   CarServerError                                                     │
    │   ├── MalformedRequest        bad request line, id or body   → 500  │
    │   └── StoreError                                                     │
    │       ├── NotFound            zero rows for the target id    → 404  │
    │       ├── StoreUnavailable    could not connect to the store → 500  │
    │       └── StoreOperationFailed query/execute failed          → 500  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only NotFound has its own response. The dispatcher collapses everything
else into the generic internal error, including client mistakes such as
malformed JSON.

=============================================================================
"""


class CarServerError(Exception):
    """Base class for all carserver errors."""


class MalformedRequest(CarServerError):
    """
    Raised when a request cannot be understood.

    Covers an unparseable request line, an empty or non-numeric car id,
    and a body that does not decode into a Car.
    """


class StoreError(CarServerError):
    """Base class for failures reported by the store gateway."""


class NotFound(StoreError):
    """The targeted car id matched no row."""

    def __init__(self, car_id: int):
        super().__init__(f"Car {car_id} not found")
        self.car_id = car_id


class StoreUnavailable(StoreError):
    """A connection to the store could not be opened."""


class StoreOperationFailed(StoreError):
    """A statement failed after the connection was opened."""
