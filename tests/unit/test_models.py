"""
Unit tests for the Car entity.
"""

import pytest

from carserver.exceptions import MalformedRequest
from carserver.store.models import Car


class TestCarFromJson:

    def test_decode(self):
        car = Car.from_json('{"brand":"Toyota","model":"Corolla","year":2020,"price":18000.0}')

        assert car == Car(brand="Toyota", model="Corolla", year=2020, price=18000.0)
        assert car.id is None

    def test_id_in_body_is_ignored(self):
        car = Car.from_json('{"id":99,"brand":"Ford","model":"Focus","year":2015,"price":7000}')

        assert car.id is None

    def test_integer_price_is_widened(self):
        car = Car.from_json('{"brand":"Ford","model":"Focus","year":2015,"price":7000}')

        assert car.price == 7000.0
        assert isinstance(car.price, float)

    def test_unknown_keys_ignored(self):
        car = Car.from_json(
            '{"brand":"Ford","model":"Focus","year":2015,"price":1.0,"color":"red"}'
        )

        assert car.brand == "Ford"

    @pytest.mark.parametrize("body", [
        "",
        "not json",
        '{"brand":"Toyota"',
        "[1, 2, 3]",
        '"Toyota"',
        '{"model":"Corolla","year":2020,"price":1.0}',
        '{"brand":"Toyota","model":"Corolla","price":1.0}',
        '{"brand":"Toyota","model":"Corolla","year":"2020","price":1.0}',
        '{"brand":"Toyota","model":"Corolla","year":2020.5,"price":1.0}',
        '{"brand":"Toyota","model":"Corolla","year":true,"price":1.0}',
        '{"brand":"Toyota","model":"Corolla","year":2020,"price":"cheap"}',
        '{"brand":"Toyota","model":"Corolla","year":2020,"price":null}',
        '{"brand":"Toyota","model":"Corolla","year":2020,"price":Infinity}',
        '{"brand":"Toyota","model":"Corolla","year":2020,"price":-Infinity}',
        '{"brand":"Toyota","model":"Corolla","year":2020,"price":NaN}',
        '{"brand":"Toyota","model":"Corolla","year":2020,"price":true}',
        '{"id":"x","brand":"Toyota","model":"Corolla","year":2020,"price":1.0}',
        '{"brand":7,"model":"Corolla","year":2020,"price":1.0}',
    ])
    def test_malformed_bodies(self, body: str):
        with pytest.raises(MalformedRequest):
            Car.from_json(body)


class TestCarToDict:

    def test_key_order_matches_columns(self):
        car = Car(id=3, brand="Honda", model="Civic", year=2018, price=15500.5)

        assert list(car.to_dict()) == ["id", "brand", "model", "year", "price"]
        assert car.to_dict() == {
            "id": 3,
            "brand": "Honda",
            "model": "Civic",
            "year": 2018,
            "price": 15500.5,
        }
