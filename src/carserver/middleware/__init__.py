"""
Middleware wrapped around the router.

    base.py     Middleware ABC and MiddlewarePipeline
    logging.py  LoggingMiddleware: one access log line per request
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "LoggingMiddleware",
    "RequestLog",
]
