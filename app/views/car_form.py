import enum
import logging
import math
from typing import Any, Callable, Mapping, Optional

from app.schemas.car import CAR_FIELDS, CarFormData
from app.services.car_service import CarService
from app.utils.exceptions import ApiError
from app.utils.validation import as_flag, validate_car
from app.views.base import Navigate, View, list_url

logger = logging.getLogger(__name__)


class FormState(str, enum.Enum):
    LOADING    = "loading"
    READY      = "ready"
    SUBMITTING = "submitting"


def _parse_number(value: Any) -> float:
    """Number-input semantics: anything unreadable becomes NaN."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return math.nan


class CarFormView(View):
    """
    Create/edit form for a single car.

    With a `car_id` the form is in edit mode and loads the car on mount.
    Field errors stay hidden until the first submit attempt; after that every
    change re-validates the whole form. On success or cancel the form calls
    `on_success` when hosted in an overlay, otherwise it navigates back to
    the list.
    """

    def __init__(
        self,
        service: CarService,
        scope: str,
        car_id: Optional[str] = None,
        on_success: Optional[Callable[[], None]] = None,
        navigate: Optional[Navigate] = None,
    ):
        super().__init__(navigate)
        self.service = service
        self.scope = scope
        self.car_id = car_id
        self.on_success = on_success

        self.data = CarFormData()
        self.state = FormState.LOADING if self.is_edit else FormState.READY
        self.error: Optional[str] = None
        self.errors: dict[str, str] = {}
        self.attempted = False
        self.brand_needs_focus = False

    @property
    def is_edit(self) -> bool:
        return bool(self.car_id)

    # ─── Lifecycle ────────────────────────────────────────────────────────────
    def mount(self) -> None:
        super().mount()
        if self.is_edit:
            self.load()

    def load(self) -> None:
        token = self._begin_load()
        self.state = FormState.LOADING
        try:
            car = self.service.get_car(self.scope, self.car_id)
        except ApiError as e:
            if self._is_current(token):
                self.error = e.message or "Failed to load car details"
                self.state = FormState.READY
            return

        if not self._is_current(token):
            return
        if car is None:
            self.error = "Car not found"
        else:
            self.data = CarFormData.from_car(car)
        self.state = FormState.READY

    # ─── Field changes ────────────────────────────────────────────────────────
    def change(self, name: str, value: Any) -> None:
        if name not in CAR_FIELDS:
            raise ValueError(f"Unknown car field: {name}")

        if name == "electric":
            updates = {"electric": as_flag(value)}
            # an electric car burns no fuel
            if updates["electric"]:
                updates["fuelUse"] = 0
        elif name == "fuelUse":
            updates = {"fuelUse": _parse_number(value)}
        else:
            updates = {name: "" if value is None else str(value)}

        self.data = self.data.model_copy(update=updates)
        if self.attempted:
            self.validate()

    def apply_form(self, fields: Mapping[str, Any]) -> None:
        """
        Apply a posted HTML form.

        Text fields are applied when present. The electric checkbox is only
        posted when ticked, so its absence means False; the fuel input is
        disabled (and absent) for electric cars.
        """
        for name in ("brand", "model", "owner", "dayOfCommission", "fuelUse"):
            if name in fields:
                self.change(name, fields[name])

        electric = as_flag(fields.get("electric"))
        if electric != self.data.electric:
            self.change("electric", electric)

    def validate(self) -> bool:
        self.errors = validate_car(self.data)
        self.brand_needs_focus = self.errors.get("brand") == "Brand is required"
        return not self.errors

    # ─── Actions ──────────────────────────────────────────────────────────────
    def submit(self) -> bool:
        """Validate and save. Returns True when the car was saved."""
        self.attempted = True
        if not self.validate():
            return False

        numeric_id = None
        if self.is_edit:
            try:
                numeric_id = int(self.car_id)
            except ValueError:
                self.error = f"Invalid car id: {self.car_id}"
                return False

        self.state = FormState.SUBMITTING
        self.error = None
        token = self._begin_load()
        try:
            if self.is_edit:
                self.service.update_car(self.scope, self.data.to_car(numeric_id))
            else:
                self.service.create_car(self.scope, self.data.to_create_request())
        except ApiError as e:
            logger.info(f"Saving car for {self.scope} failed: {e.message}")
            if self._is_current(token):
                self.error = e.message or "Failed to save car"
                self.state = FormState.READY
            return False

        if not self._is_current(token):
            return False
        self._finish()
        return True

    def cancel(self) -> None:
        self.data = CarFormData()
        self.errors = {}
        self._finish()

    def _finish(self) -> None:
        if self.on_success:
            self.on_success()
        else:
            self._go(list_url(self.scope))
