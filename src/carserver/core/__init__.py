"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking layer under the request pipeline:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Creates the TCP listening socket, binds, listens                  │
    │  • Accepts ONE connection at a time                                  │
    │  • Hands it to the HTTP layer and waits for it to finish             │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • Wraps the client socket                                           │
    │  • One bounded read, one write, close                                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
]
