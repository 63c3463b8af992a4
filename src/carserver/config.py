"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the car server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m carserver --port 7000                           │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── DATABASE_URL=postgresql://... python -m carserver         │
    │                                                                      │
    │   3. A .env file in the working directory (python-dotenv)           │
    │                                                                      │
    │   4. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only DATABASE_URL is required. Everything else has a default, and the
listening port is the fixed 6001 unless overridden.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 6001

# Upper bound on bytes read per connection. Anything past it is dropped.
DEFAULT_BUFFER_SIZE = 1024

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the car server.

    Development:
        ServerConfig(
            database_url="sqlite:///cars.db",
            host="127.0.0.1",
            log_level="DEBUG",
        )

    Production:
        ServerConfig(
            database_url="postgresql://cars:secret@db/cars",
            host="0.0.0.0",
            log_level="INFO",
        )
    """

    # ─────────────────────────────────────────────────────────────────────
    # STORE
    # ─────────────────────────────────────────────────────────────────────

    database_url: str = ""
    """
    SQLAlchemy URL of the relational store.
    "postgres://" URLs are accepted and rewritten to "postgresql://".
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    """Port 0 asks the OS for a free port (used by tests)."""

    backlog: int = 128
    """Maximum number of connections queued while one is being served."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    """Bytes read from each connection, in a single recv()."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    @classmethod
    def from_env(cls, database_url: Optional[str] = None) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        DATABASE_URL           Store URL (required)
        CARSERVER_HOST         Bind address (default: 0.0.0.0)
        CARSERVER_PORT         Listening port (default: 6001)
        CARSERVER_LOG_LEVEL    Logging level (default: INFO)
        CARSERVER_LOG_FORMAT   Access log format (default: text)

        A .env file in the working directory is loaded first; variables
        already set in the environment win over it. An explicit
        database_url argument wins over both.

        =====================================================================

        Raises:
            ValueError: If DATABASE_URL is not set.
        """
        load_dotenv(find_dotenv(usecwd=True))

        database_url = database_url or os.getenv("DATABASE_URL")
        if not database_url:
            raise ValueError("DATABASE_URL is not set. Did you create the .env file?")

        return cls(
            database_url=database_url,
            host=os.getenv("CARSERVER_HOST", DEFAULT_HOST),
            port=int(os.getenv("CARSERVER_PORT", str(DEFAULT_PORT))),
            log_level=os.getenv("CARSERVER_LOG_LEVEL", "INFO"),
            log_format=os.getenv("CARSERVER_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values at startup.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not self.database_url:
            raise ValueError("database_url must be set")

        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")
