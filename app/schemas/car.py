from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# Brands accepted by the remote car API, in picker order
VALID_BRANDS: tuple[str, ...] = (
    "Toyota", "Honda", "Ford", "Chevrolet", "Nissan", "BMW", "Mercedes-Benz",
    "Volkswagen", "Audi", "Hyundai", "Kia", "Subaru", "Lexus", "Mazda",
    "Tesla", "Jeep", "Porsche", "Volvo", "Jaguar", "Land Rover", "Mitsubishi",
    "Ferrari", "Lamborghini",
)

# Every field a user can edit; `id` is server-assigned
CAR_FIELDS: tuple[str, ...] = ("brand", "model", "fuelUse", "owner", "dayOfCommission", "electric")


# ─── Wire models ──────────────────────────────────────────────────────────────
class CarBase(BaseModel):
    brand:           str
    model:           str
    fuelUse:         float
    owner:           str
    dayOfCommission: date
    electric:        bool = False


class CarCreateRequest(CarBase):
    """POST body: a car without its id."""

    @field_validator("brand", "model", "owner")
    @classmethod
    def check_not_blank(cls, v):
        if not v: raise ValueError("Field cannot be empty")
        return v


class CarOut(CarBase):
    """A car as stored by the API, also used as the PUT body."""
    id: int


# ─── Form candidate ───────────────────────────────────────────────────────────
def _today() -> str:
    return date.today().isoformat()


class CarFormData(BaseModel):
    """
    Raw, possibly invalid values of the create/edit form.

    Nothing here is validated: an empty brand, a NaN fuel use or a date that
    does not parse are all representable so that `validate_car` can report
    them field by field.
    """
    brand:           str             = ""
    model:           str             = ""
    fuelUse:         Optional[float] = 0
    owner:           str             = ""
    dayOfCommission: str             = Field(default_factory=_today)
    electric:        bool            = False

    @classmethod
    def from_car(cls, car: CarBase) -> "CarFormData":
        """Seed a form from a stored car, dropping its id."""
        return cls(
            brand=car.brand,
            model=car.model,
            fuelUse=car.fuelUse,
            owner=car.owner,
            dayOfCommission=car.dayOfCommission.isoformat(),
            electric=car.electric,
        )

    def to_create_request(self) -> CarCreateRequest:
        return CarCreateRequest(**self.model_dump())

    def to_car(self, car_id: int) -> CarOut:
        return CarOut(id=car_id, **self.model_dump())
