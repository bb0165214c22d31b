import math
import re
from datetime import date
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from app.schemas.car import VALID_BRANDS

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")

# Values an HTML checkbox may post when ticked
CHECKED_VALUES = frozenset({"on", "true", "1", "yes"})


def as_flag(value: Any) -> bool:
    """Read a yes/no value. Strings count only when they spell a ticked checkbox."""
    if isinstance(value, str):
        return value.strip().lower() in CHECKED_VALUES
    return bool(value)


def _as_number(value: Any) -> Optional[float]:
    """
    Read a fuel-use value the way a number input would.

    Returns None for anything that is not a finite number: missing values,
    booleans, NaN and strings that do not parse.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


def _is_calendar_date(value: str) -> bool:
    if not _ISO_DATE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _check_brand(brand: str) -> Optional[str]:
    if not brand:
        return "Brand is required"
    if brand not in VALID_BRANDS:
        return "Invalid car brand"
    return None


def _check_model(model: str) -> Optional[str]:
    if not model:
        return "Model is required"
    return None


def _check_fuel_use(fuel_use: Any, electric: bool) -> Optional[str]:
    number = _as_number(fuel_use)
    if electric:
        if number != 0:
            return "Fuel use must be 0 for electric cars"
        return None
    if number is None:
        return "Fuel use value is required"
    if number <= 0:
        return "Fuel use must be greater than 0 for non-electric cars"
    return None


def _check_owner(owner: str) -> Optional[str]:
    if not owner:
        return "Owner is required"
    # a space with text on both sides, i.e. at least two name parts
    if " " not in owner.strip():
        return "Owner name must contain at least one space"
    return None


def _check_day_of_commission(value: Any) -> Optional[str]:
    if value is None or value == "":
        return "Commission date is required"
    if isinstance(value, date):
        return None
    if not isinstance(value, str) or not _is_calendar_date(value):
        return "Please enter a valid date"
    return None


def validate_car(candidate: BaseModel | Mapping[str, Any]) -> dict[str, str]:
    """
    Check a car candidate and return a field -> message map.

    Every field is checked independently, so one call reports all problems at
    once. An empty map means the candidate is valid. The candidate may be a
    `CarFormData`, any pydantic model with the car fields, or a plain dict;
    it is never modified.

    Usage:
        errors = validate_car({"brand": "Yugo", "model": "45", ...})
        if errors:
            ...
    """
    data = candidate.model_dump() if isinstance(candidate, BaseModel) else dict(candidate)

    checks = {
        "brand":           _check_brand(str(data.get("brand") or "")),
        "model":           _check_model(str(data.get("model") or "")),
        "fuelUse":         _check_fuel_use(data.get("fuelUse"), as_flag(data.get("electric"))),
        "owner":           _check_owner(str(data.get("owner") or "")),
        "dayOfCommission": _check_day_of_commission(data.get("dayOfCommission")),
    }
    return {field: message for field, message in checks.items() if message}


def is_valid_car(candidate: BaseModel | Mapping[str, Any]) -> bool:
    return not validate_car(candidate)
