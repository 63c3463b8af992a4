"""
Request handlers.

    cars.py   CarHandlers: create, get, list, update, delete
"""

from .cars import CarHandlers

__all__ = ["CarHandlers"]
