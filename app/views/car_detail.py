import enum
from typing import Callable, Optional

from app.schemas.car import CarOut
from app.services.car_service import CarService
from app.utils.exceptions import ApiError
from app.views.base import Navigate, PageState, View, list_url
from app.views.modal import ConfirmationModal


class DetailState(str, enum.Enum):
    LOADING   = "loading"
    ERROR     = "error"
    NOT_FOUND = "not_found"
    READY     = "ready"


class CarDetailView(View):
    """Read-only view of one car with a confirmed delete."""

    def __init__(
        self,
        service: CarService,
        scope: str,
        car_id: str,
        on_deleted: Optional[Callable[[], None]] = None,
        navigate: Optional[Navigate] = None,
        page: Optional[PageState] = None,
    ):
        super().__init__(navigate)
        self.service = service
        self.scope = scope
        self.car_id = car_id
        self.on_deleted = on_deleted
        self.page = page or PageState()

        self.car: Optional[CarOut] = None
        self.loading = True
        self.error: Optional[str] = None
        self.delete_modal = ConfirmationModal(
            "Delete Car",
            "Are you sure you want to delete this car? This action cannot be undone.",
            on_confirm=self.confirm_delete,
            confirm_text="Yes, Delete",
            cancel_text="Cancel",
            page=self.page,
        )

    @property
    def in_modal(self) -> bool:
        return self.on_deleted is not None

    @property
    def state(self) -> DetailState:
        if self.loading:
            return DetailState.LOADING
        if self.error:
            return DetailState.ERROR
        if self.car is None:
            return DetailState.NOT_FOUND
        return DetailState.READY

    def mount(self) -> None:
        super().mount()
        if self.car_id and self.scope:
            self.load()

    def load(self) -> None:
        token = self._begin_load()
        self.loading = True
        self.error = None
        try:
            car = self.service.get_car(self.scope, self.car_id)
        except ApiError as e:
            if self._is_current(token):
                self.error = e.message or "Failed to load car details"
                self.loading = False
            return
        if self._is_current(token):
            self.car = car
            self.loading = False

    # ─── Delete ───────────────────────────────────────────────────────────────
    def request_delete(self) -> None:
        if self.car is not None:
            self.delete_modal.message = (
                f"Are you sure you want to delete the {self.car.brand} {self.car.model}? "
                "This action cannot be undone."
            )
        self.delete_modal.open()

    def confirm_delete(self) -> None:
        try:
            self.service.delete_car(self.scope, self.car_id)
        except ApiError as e:
            self.error = e.message or "Failed to delete car"
            return

        if self.on_deleted:
            self.on_deleted()
        else:
            self._go(list_url(self.scope))
