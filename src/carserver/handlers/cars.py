"""
=============================================================================
CAR HANDLERS
=============================================================================

The five route handlers for the car resource. Each one parses what it
needs from the request (id, body), makes exactly one store call, and
returns a response:

    ┌───────────────┬──────────────────────┬──────────────────────────────┐
    │ Handler       │ Store call           │ Success response             │
    ├───────────────┼──────────────────────┼──────────────────────────────┤
    │ create_car    │ store.create(car)    │ 200 "Car created"            │
    │ get_car       │ store.get_one(id)    │ 200 {"id": ..., ...}         │
    │ list_cars     │ store.get_all()      │ 200 [{"id": ..., ...}, ...]  │
    │ update_car    │ store.update(id,car) │ 200 "Car updated"            │
    │ delete_car    │ store.delete(id)     │ 200 "Car deleted"            │
    └───────────────┴──────────────────────┴──────────────────────────────┘

Handlers raise instead of building error responses. The router turns
NotFound into 404 and everything else into 500.

=============================================================================
"""

import logging

from ..exceptions import NotFound
from ..http.request import ParsedRequest
from ..http.response import HTTPResponse, ok
from ..http.router import Router, parse_id
from ..store.gateway import CarStore
from ..store.models import Car


logger = logging.getLogger(__name__)


class CarHandlers:
    """
    Route handlers bound to a CarStore.

    Usage:
        handlers = CarHandlers(store)
        handlers.register(router)
    """

    def __init__(self, store: CarStore):
        self.store = store

    def register(self, router: Router) -> Router:
        """
        Register the car routes on a router.

        Order matters: the router is first-match, and "GET /cars/" must be
        tried before "GET /cars".
        """
        router.add_route("POST", "/cars", self.create_car)
        router.add_route("GET", "/cars/", self.get_car)
        router.add_route("GET", "/cars", self.list_cars)
        router.add_route("PUT", "/cars/", self.update_car)
        router.add_route("DELETE", "/cars/", self.delete_car)
        return router

    def create_car(self, request: ParsedRequest) -> HTTPResponse:
        car = Car.from_json(request.body)
        car_id = self.store.create(car)
        logger.info(f"Created car {car_id}: {car.brand} {car.model}")
        return ok("Car created")

    def get_car(self, request: ParsedRequest) -> HTTPResponse:
        car = self.store.get_one(parse_id(request.path))
        return ok(car.to_dict())

    def list_cars(self, request: ParsedRequest) -> HTTPResponse:
        return ok([car.to_dict() for car in self.store.get_all()])

    def update_car(self, request: ParsedRequest) -> HTTPResponse:
        """
        Overwrite a car.

        Answers "Car updated" even when the id matched nothing.
        """
        car_id = parse_id(request.path)
        car = Car.from_json(request.body)
        self.store.update(car_id, car)
        return ok("Car updated")

    def delete_car(self, request: ParsedRequest) -> HTTPResponse:
        car_id = parse_id(request.path)
        if self.store.delete(car_id) == 0:
            raise NotFound(car_id)
        logger.info(f"Deleted car {car_id}")
        return ok("Car deleted")
