import enum
import logging
from typing import Optional

from app.schemas.car import CarOut
from app.services.car_service import CarService
from app.utils.exceptions import ApiError
from app.views.base import Navigate, PageState, View
from app.views.car_detail import CarDetailView
from app.views.car_form import CarFormView
from app.views.modal import ConfirmationModal, Modal

logger = logging.getLogger(__name__)


class ListState(str, enum.Enum):
    LOADING = "loading"
    ERROR   = "error"
    EMPTY   = "empty"
    READY   = "ready"


class CarListView(View):
    """
    All cars of one Neptun code, with overlays for view/edit/create.

    The list is fetched on mount and whenever the scope changes. Deleting
    drops the row locally; a completed edit or create re-fetches. Closing an
    overlay by itself never touches the rows.
    """

    def __init__(
        self,
        service: CarService,
        scope: str,
        navigate: Optional[Navigate] = None,
        page: Optional[PageState] = None,
    ):
        super().__init__(navigate)
        self.service = service
        self.scope = scope
        self.page = page or PageState()

        self.cars: list[CarOut] = []
        self.loading = True
        self.error: Optional[str] = None

        self.selected_car_id: Optional[str] = None
        self.car_to_delete: Optional[int] = None
        self.detail: Optional[CarDetailView] = None
        self.form: Optional[CarFormView] = None

        self.view_modal = Modal("Car Details", on_close=self._drop_detail, page=self.page)
        self.edit_modal = Modal("Edit Car", on_close=self._drop_form, page=self.page)
        self.create_modal = Modal("Add New Car", on_close=self._drop_form, page=self.page)
        self.delete_modal = ConfirmationModal(
            "Delete Car",
            "Are you sure you want to delete this car? This action cannot be undone.",
            on_confirm=self.confirm_delete,
            confirm_text="Delete",
            page=self.page,
        )

    @property
    def state(self) -> ListState:
        if self.loading:
            return ListState.LOADING
        if self.error:
            return ListState.ERROR
        if not self.cars:
            return ListState.EMPTY
        return ListState.READY

    # ─── Lifecycle ────────────────────────────────────────────────────────────
    def mount(self) -> None:
        super().mount()
        if self.scope:
            self.load()

    def unmount(self) -> None:
        self.close_overlays()
        super().unmount()

    def set_scope(self, scope: str) -> None:
        if scope == self.scope:
            return
        self.close_overlays()
        self.scope = scope
        self.cars = []
        self.error = None
        # results still in flight belong to the old scope
        self._begin_load()
        self.loading = bool(scope)
        if self.mounted and scope:
            self.load()

    def load(self) -> None:
        token = self._begin_load()
        self.loading = True
        self.error = None
        try:
            cars = self.service.list_cars(self.scope)
        except ApiError as e:
            if self._is_current(token):
                self.error = e.message or "Failed to load cars"
                self.loading = False
            return
        if self._is_current(token):
            self.cars = cars
            self.loading = False

    def refresh(self) -> None:
        """Re-fetch after a change; a failure keeps the rows on screen."""
        token = self._begin_load()
        try:
            cars = self.service.list_cars(self.scope)
        except ApiError as e:
            logger.warning(f"Failed to refresh cars for {self.scope}: {e.message}")
            return
        if self._is_current(token):
            self.cars = cars

    # ─── Delete ───────────────────────────────────────────────────────────────
    def request_delete(self, car_id: int) -> None:
        self.car_to_delete = car_id
        self.delete_modal.open()

    def confirm_delete(self) -> None:
        if self.car_to_delete is None:
            return
        car_id = self.car_to_delete
        try:
            self.service.delete_car(self.scope, car_id)
            self.cars = [car for car in self.cars if car.id != car_id]
        except ApiError as e:
            self.error = e.message or "Failed to delete car"
        finally:
            self.car_to_delete = None

    # ─── Overlays ─────────────────────────────────────────────────────────────
    def open_view(self, car_id: int | str) -> CarDetailView:
        self.selected_car_id = str(car_id)
        self._drop_detail()
        self.detail = CarDetailView(
            self.service, self.scope, self.selected_car_id,
            on_deleted=self._handle_car_deleted,
            navigate=self.navigate,
            page=self.page,
        )
        self.view_modal.open()
        self.detail.mount()
        return self.detail

    def open_edit(self, car_id: int | str) -> CarFormView:
        self.selected_car_id = str(car_id)
        return self._open_form(self.edit_modal, self.selected_car_id)

    def open_create(self) -> CarFormView:
        return self._open_form(self.create_modal, None)

    def show_form(self, form: CarFormView) -> None:
        """Put a form that was filled elsewhere into the edit or create overlay."""
        self._drop_form()
        form.on_success = self.handle_car_updated
        self.form = form
        (self.edit_modal if form.is_edit else self.create_modal).open()

    def show_detail(self, detail: CarDetailView) -> None:
        """Put an already loaded detail view into the view overlay."""
        self._drop_detail()
        detail.on_deleted = self._handle_car_deleted
        self.selected_car_id = detail.car_id
        self.detail = detail
        self.view_modal.open()

    def close_overlays(self) -> None:
        for modal in (self.view_modal, self.edit_modal, self.create_modal, self.delete_modal):
            modal.close()

    def handle_car_updated(self) -> None:
        self.refresh()
        self.edit_modal.close()
        self.create_modal.close()

    def _handle_car_deleted(self) -> None:
        self.refresh()
        self.view_modal.close()

    def _open_form(self, modal: Modal, car_id: Optional[str]) -> CarFormView:
        self._drop_form()
        self.form = CarFormView(
            self.service, self.scope, car_id,
            on_success=self.handle_car_updated,
            navigate=self.navigate,
        )
        modal.open()
        self.form.mount()
        return self.form

    def _drop_detail(self) -> None:
        if self.detail is not None:
            self.detail.unmount()
            self.detail = None

    def _drop_form(self) -> None:
        if self.form is not None:
            self.form.unmount()
            self.form = None
