from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from app.dependencies import get_car_service
from app.pages.cars import render_home
from app.services.car_service import CarService
from app.views.car_list import CarListView

router = APIRouter()


@router.get("/", response_class=HTMLResponse, summary="Neptun code entry and car list")
def home(
    neptun:  Optional[str]  = Query(None),
    view:    Optional[int]  = Query(None, description="Open the detail overlay for this car"),
    edit:    Optional[int]  = Query(None, description="Open the edit overlay for this car"),
    create:  bool           = Query(False, description="Open the new-car overlay"),
    delete:  Optional[int]  = Query(None, description="Ask to confirm deleting this car"),
    confirm: bool           = Query(False, description="With `view`: ask to confirm deleting it"),
    service: CarService     = Depends(get_car_service),
):
    scope = (neptun or "").strip()
    if not scope:
        return HTMLResponse(render_home(None))

    car_list = CarListView(service, scope)
    car_list.mount()

    if view is not None:
        detail = car_list.open_view(view)
        if confirm:
            detail.request_delete()
    elif edit is not None:
        car_list.open_edit(edit)
    elif create:
        car_list.open_create()
    elif delete is not None:
        car_list.request_delete(delete)

    return HTMLResponse(render_home(scope, car_list))
