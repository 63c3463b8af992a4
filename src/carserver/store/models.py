"""
Car entity and request body decoding.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError

from ..exceptions import MalformedRequest


class Car(BaseModel):
    """
    A vehicle row.

    ``id`` is assigned by the store. It is always set on cars read back
    from the store and is ignored when a car arrives in a request body.

    Field rules for request bodies:

        brand, model   JSON strings
        year           JSON integer (no floats, strings or booleans)
        price          finite JSON number, integers widened to float
    """

    id: Optional[int] = None
    brand: StrictStr
    model: StrictStr
    year: StrictInt
    price: float = Field(strict=True, allow_inf_nan=False)

    @classmethod
    def from_json(cls, body: str) -> "Car":
        """
        Decode a request body into a Car.

        Unknown keys are ignored. An ``id`` in the body must still be an
        integer, but its value is dropped.

        Raises:
            MalformedRequest: If the body is not a JSON object or a field
                is missing, has the wrong type, or is NaN/Infinity.
        """
        try:
            car = cls.model_validate_json(body)
        except ValidationError as e:
            raise MalformedRequest(f"Invalid car body: {e.error_count()} error(s)") from e
        return car.model_copy(update={"id": None})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with ``id`` first, matching the store's column order."""
        return self.model_dump()
