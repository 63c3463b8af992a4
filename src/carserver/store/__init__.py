"""
Persistence for the car resource.

    models.py   Car model and request body decoding
    gateway.py  CarStore: one store connection per CRUD call
"""

from .models import Car
from .gateway import CarStore, cars, create_store_engine, normalize_database_url

__all__ = [
    "Car",
    "CarStore",
    "cars",
    "create_store_engine",
    "normalize_database_url",
]
