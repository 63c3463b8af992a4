"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Generator, List, Optional

import pytest

from carserver import CarServer, ServerConfig
from carserver.store import Car, CarStore


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """
    SQLite file URL in a temporary directory.

    A file rather than :memory: because every store operation opens its
    own connection, and each in-memory connection would see an empty
    database.
    """
    return f"sqlite:///{tmp_path / 'cars.db'}"


@pytest.fixture
def store(database_url: str) -> CarStore:
    """A CarStore with the cars table already created."""
    car_store = CarStore.from_url(database_url)
    car_store.ensure_schema()
    return car_store


@pytest.fixture
def corolla() -> Car:
    return Car(brand="Toyota", model="Corolla", year=2020, price=18000.0)


@pytest.fixture
def civic() -> Car:
    return Car(brand="Honda", model="Civic", year=2018, price=15500.5)


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample POST /cars request with a JSON body."""
    body = b'{"brand":"Toyota","model":"Corolla","year":2020,"price":18000.0}'
    return (
        b"POST /cars HTTP/1.1\r\n"
        b"Host: localhost:6001\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def sample_get_request() -> bytes:
    return (
        b"GET /cars/1 HTTP/1.1\r\n"
        b"Host: localhost:6001\r\n"
        b"User-Agent: pytest\r\n"
        b"\r\n"
    )


@pytest.fixture
def config(database_url: str) -> ServerConfig:
    """Test configuration: localhost, OS-assigned port."""
    return ServerConfig(
        database_url=database_url,
        host="127.0.0.1",
        port=0,
        log_level="WARNING",
    )


def send_request(port: int, data: bytes) -> bytes:
    """Send raw bytes to the server and read the response until EOF."""
    with socket.create_connection(("127.0.0.1", port), timeout=5.0) as sock:
        sock.sendall(data)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class RunningServer:
    """A CarServer running its accept loop in a background thread."""

    def __init__(self, server: CarServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.socket_server.address[1]

    def start(self):
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"setup_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.socket_server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes) -> bytes:
        return send_request(self.port, data)


@pytest.fixture
def server_factory() -> Generator[Callable[..., RunningServer], None, None]:
    """
    Start servers with a custom config or store; all are stopped after
    the test.
    """
    started: List[RunningServer] = []

    def start(config: ServerConfig, store: Optional[CarStore] = None) -> RunningServer:
        test_srv = RunningServer(CarServer(config, store=store))
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield start

    for test_srv in started:
        test_srv.stop()


@pytest.fixture
def running_server(config: ServerConfig, server_factory) -> RunningServer:
    """Start a server on a free port and stop it after the test."""
    return server_factory(config)
