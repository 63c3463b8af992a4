"""
Unit tests for the CarStore gateway, against a temporary SQLite file.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from carserver.exceptions import NotFound, StoreOperationFailed, StoreUnavailable
from carserver.store.gateway import CarStore, normalize_database_url
from carserver.store.models import Car


def same_fields(a: Car, b: Car) -> bool:
    return (a.brand, a.model, a.year, a.price) == (b.brand, b.model, b.year, b.price)


class TestSchema:

    def test_ensure_schema_is_idempotent(self, store: CarStore, corolla: Car):
        car_id = store.create(corolla)

        store.ensure_schema()
        store.ensure_schema()

        assert store.get_one(car_id).brand == "Toyota"

    def test_operations_fail_without_schema(self, database_url: str, corolla: Car):
        bare = CarStore.from_url(database_url)

        with pytest.raises(StoreOperationFailed):
            bare.create(corolla)
        with pytest.raises(StoreOperationFailed):
            bare.get_all()

    def test_engine_does_not_pool(self, store: CarStore):
        assert isinstance(store.engine.pool, NullPool)


class TestCreateAndGet:

    def test_round_trip(self, store: CarStore, corolla: Car):
        car_id = store.create(corolla)
        fetched = store.get_one(car_id)

        assert fetched.id == car_id
        assert same_fields(fetched, corolla)

    def test_store_assigns_distinct_ids(self, store: CarStore, corolla: Car, civic: Car):
        first = store.create(corolla)
        second = store.create(civic)

        assert first != second

    def test_id_on_input_is_ignored(self, store: CarStore):
        car_id = store.create(Car(id=500, brand="Kia", model="Rio", year=2012, price=4000.0))

        assert car_id != 500
        with pytest.raises(NotFound):
            store.get_one(500)

    def test_get_missing(self, store: CarStore):
        with pytest.raises(NotFound) as exc_info:
            store.get_one(12345)

        assert exc_info.value.car_id == 12345


class TestGetAll:

    def test_empty(self, store: CarStore):
        assert store.get_all() == []

    def test_returns_every_row(self, store: CarStore, corolla: Car, civic: Car):
        ids = {store.create(corolla), store.create(civic)}

        cars = store.get_all()

        assert len(cars) == 2
        assert {car.id for car in cars} == ids
        assert {car.brand for car in cars} == {"Toyota", "Honda"}


class TestUpdate:

    def test_update_present(self, store: CarStore, corolla: Car, civic: Car):
        car_id = store.create(corolla)

        store.update(car_id, civic)

        fetched = store.get_one(car_id)
        assert fetched.id == car_id
        assert same_fields(fetched, civic)

    def test_update_absent_is_silent(self, store: CarStore, corolla: Car):
        store.update(999, corolla)

        assert store.get_all() == []


class TestDelete:

    def test_delete_present(self, store: CarStore, corolla: Car, civic: Car):
        car_id = store.create(corolla)
        other_id = store.create(civic)

        assert store.delete(car_id) == 1
        assert [car.id for car in store.get_all()] == [other_id]

    def test_delete_absent(self, store: CarStore, corolla: Car):
        car_id = store.create(corolla)

        assert store.delete(car_id + 100) == 0
        assert len(store.get_all()) == 1


class TestFailures:

    def test_unreachable_store(self, tmp_path, corolla: Car):
        # SQLite cannot open a database inside a directory that does not exist
        url = f"sqlite:///{tmp_path / 'missing' / 'cars.db'}"
        unreachable = CarStore(create_engine(url, poolclass=NullPool))

        with pytest.raises(StoreUnavailable):
            unreachable.get_all()
        with pytest.raises(StoreUnavailable):
            unreachable.ensure_schema()


class TestNormalizeUrl:

    def test_postgres_scheme(self):
        assert normalize_database_url("postgres://u:p@h/db") == "postgresql://u:p@h/db"

    def test_other_schemes_untouched(self):
        assert normalize_database_url("postgresql://u:p@h/db") == "postgresql://u:p@h/db"
        assert normalize_database_url("sqlite:///cars.db") == "sqlite:///cars.db"
