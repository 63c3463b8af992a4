"""
=============================================================================
CAR SERVER
=============================================================================

Assembles the request pipeline and runs it.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.read_request()      one recv(), up to 1024 bytes       │
    │        │                                                             │
    │        ▼                                                             │
    │   RequestParser.parse()          method, path, body                 │
    │        │        └── MalformedRequest ──► 500                         │
    │        ▼                                                             │
    │   LoggingMiddleware                                                  │
    │        │                                                             │
    │        ▼                                                             │
    │   Router.dispatch() ──► CarHandlers ──► CarStore (one connection)    │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.send_response()     fixed preamble + body              │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.close()                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import logging
from typing import Callable, Optional

from .config import ServerConfig
from .core.connection import Connection
from .core.socket_server import SocketServer
from .exceptions import MalformedRequest, StoreError
from .handlers.cars import CarHandlers
from .http.request import ParsedRequest, RequestParser
from .http.response import HTTPResponse, internal_error
from .http.router import Router
from .middleware.base import MiddlewarePipeline
from .middleware.logging import LoggingMiddleware
from .store.gateway import CarStore


logger = logging.getLogger(__name__)


class CarServer:
    """
    The car CRUD service.

    Usage:
        config = ServerConfig.from_env()
        server = CarServer(config)
        server.run()                   # Blocks until SIGINT/SIGTERM

    A store can be passed in directly (tests use a temporary SQLite file):

        server = CarServer(config, store=CarStore.from_url("sqlite:///t.db"))
    """

    def __init__(self, config: ServerConfig, store: Optional[CarStore] = None):
        self.config = config
        self.config.validate()

        self.store = store or CarStore.from_url(config.database_url)

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()

        self._router = Router()
        CarHandlers(self.store).register(self._router)

        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))

        self._handler: Optional[Callable[[ParsedRequest], HTTPResponse]] = None

    @property
    def router(self) -> Router:
        return self._router

    @property
    def socket_server(self) -> SocketServer:
        return self._socket_server

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def setup_database(self) -> bool:
        """
        Create the cars table if needed.

        A failure is logged and reported, never raised: the listener
        starts either way.
        """
        try:
            self.store.ensure_schema()
        except StoreError as e:
            logger.error(f"Database setup failed: {e}")
            return False
        logger.info("Database setup successful")
        return True

    def run(self, setup_logging: bool = True):
        """
        Set up the schema and serve connections until shutdown.

        Args:
            setup_logging: Configure the root logger from config.
        """
        if setup_logging:
            self._setup_logging()

        self.setup_database()

        self._handler = self._middleware.wrap(self._router.dispatch)
        self._router.print_routes()

        self._socket_server.start(self._handle_connection)

    def shutdown(self):
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("carserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Serve one connection start to finish: read, dispatch, write, close."""
        with conn:
            try:
                data = conn.read_request()
            except OSError as e:
                logger.error(f"[{conn.id}] Unable to read stream: {e}")
                return

            if not data:
                logger.debug(f"[{conn.id}] Client closed without sending a request")
                return

            response = self.handle_request(data, conn.address)
            conn.send_response(response.to_bytes())

    def handle_request(self, data: bytes, client_address: tuple[str, int] = ("", 0)) -> HTTPResponse:
        """
        Turn raw request bytes into a response. Never raises.

        Exposed separately from the socket loop so the whole pipeline can
        be exercised without a network.
        """
        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.dispatch)

        try:
            request = self._parser.parse(data, client_address)
        except MalformedRequest as e:
            logger.warning(f"Malformed request from {client_address[0] or '-'}: {e}")
            return internal_error()

        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"Unhandled error for {request.method} {request.path}: {e}")
            return internal_error()
