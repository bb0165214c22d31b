from fastapi import APIRouter, Depends, Form, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from app.dependencies import Navigator, car_form_fields, get_car_service, require_scope
from app.pages.cars import render_detail_page, render_form_page, render_home
from app.services.car_service import CarService
from app.views.car_detail import CarDetailView
from app.views.car_form import CarFormView
from app.views.car_list import CarListView

router = APIRouter(prefix="/cars")


def _respond(nav: Navigator, html: str):
    if nav.url:
        return RedirectResponse(nav.url, status_code=303)
    return HTMLResponse(html)


def _save_form(form: CarFormView, nav: Navigator, action: str, fields: dict[str, str], embedded: bool):
    """
    Run a posted car form. A save or a cancel ends in a 303 to the list, so
    the address bar never holds a POST address. A failed save is shown again,
    on the list inside its overlay when it was posted from there.
    """
    form.mount()
    if action == "cancel":
        form.cancel()
    else:
        form.apply_form(fields)
        form.submit()

    if nav.url or not embedded:
        return _respond(nav, render_form_page(form))

    car_list = CarListView(form.service, form.scope, navigate=nav)
    car_list.mount()
    car_list.show_form(form)
    return HTMLResponse(render_home(form.scope, car_list))


# ─── Standalone pages ─────────────────────────────────────────────────────────
@router.get("/new", response_class=HTMLResponse, summary="New car page")
def new_car_page(
    scope:   str        = Depends(require_scope),
    service: CarService = Depends(get_car_service),
):
    form = CarFormView(service, scope)
    form.mount()
    return HTMLResponse(render_form_page(form))


@router.get("/edit/{car_id}", response_class=HTMLResponse, summary="Edit car page")
def edit_car_page(
    car_id:  str,
    scope:   str        = Depends(require_scope),
    service: CarService = Depends(get_car_service),
):
    form = CarFormView(service, scope, car_id)
    form.mount()
    return HTMLResponse(render_form_page(form))


@router.get("/{car_id}", response_class=HTMLResponse, summary="Car detail page")
def car_detail_page(
    car_id:  str,
    confirm: bool       = Query(False, description="Ask to confirm deleting the car"),
    scope:   str        = Depends(require_scope),
    service: CarService = Depends(get_car_service),
):
    detail = CarDetailView(service, scope, car_id)
    detail.mount()
    if confirm:
        detail.request_delete()
    return HTMLResponse(render_detail_page(detail))


# ─── Mutations ────────────────────────────────────────────────────────────────
@router.post("", response_class=HTMLResponse, summary="Create car")
def create_car(
    fields:   dict[str, str] = Depends(car_form_fields),
    action:   str            = Form("save"),
    embedded: bool           = Form(False),
    scope:    str            = Depends(require_scope),
    service:  CarService     = Depends(get_car_service),
):
    nav = Navigator()
    form = CarFormView(service, scope, navigate=nav)
    return _save_form(form, nav, action, fields, embedded)


@router.post("/{car_id}", response_class=HTMLResponse, summary="Update car")
def update_car(
    car_id:   str,
    fields:   dict[str, str] = Depends(car_form_fields),
    action:   str            = Form("save"),
    embedded: bool           = Form(False),
    scope:    str            = Depends(require_scope),
    service:  CarService     = Depends(get_car_service),
):
    nav = Navigator()
    form = CarFormView(service, scope, car_id, navigate=nav)
    return _save_form(form, nav, action, fields, embedded)


@router.post("/{car_id}/delete", response_class=HTMLResponse, summary="Delete car (confirmed)")
def delete_car(
    car_id:   int,
    origin:   str            = Form("list", description="list | detail"),
    embedded: bool           = Form(False),
    scope:    str            = Depends(require_scope),
    service:  CarService     = Depends(get_car_service),
):
    nav = Navigator()

    if origin == "detail":
        detail = CarDetailView(service, scope, str(car_id), navigate=nav)
        detail.mount()
        detail.request_delete()
        detail.delete_modal.confirm()
        if nav.url or not embedded:
            return _respond(nav, render_detail_page(detail))
        # failed from the view overlay: show the error inside it
        car_list = CarListView(service, scope, navigate=nav)
        car_list.mount()
        car_list.show_detail(detail)
        return HTMLResponse(render_home(scope, car_list))

    # The page holds no rows of its own, so they are fetched before the
    # DELETE. The row is then dropped from that copy with no second fetch.
    car_list = CarListView(service, scope, navigate=nav)
    car_list.mount()
    car_list.request_delete(car_id)
    car_list.delete_modal.confirm()
    return HTMLResponse(render_home(scope, car_list))
