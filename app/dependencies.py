from typing import Optional

from fastapi import Form, Query

from app.services.car_service import CarService, car_service
from app.utils.exceptions import ScopeMissingException


# ─── Car API client ───────────────────────────────────────────────────────────
def get_car_service() -> CarService:
    """
    FastAPI dependency returning the shared API client.
    Tests replace it through `app.dependency_overrides`.
    """
    return car_service


# ─── Neptun code ──────────────────────────────────────────────────────────────
def require_scope(neptun: Optional[str] = Query(None)) -> str:
    """The `neptun` query param of a car page; 400 when missing."""
    scope = (neptun or "").strip()
    if not scope:
        raise ScopeMissingException()
    return scope


# ─── Posted car form ──────────────────────────────────────────────────────────
def car_form_fields(
    brand:           str           = Form(""),
    model:           str           = Form(""),
    fuelUse:         Optional[str] = Form(None),
    owner:           str           = Form(""),
    dayOfCommission: str           = Form(""),
    electric:        Optional[str] = Form(None),
) -> dict[str, str]:
    """
    Collect the car form as posted by the browser.

    A disabled fuel input and an unticked checkbox are not posted at all, so
    those keys are left out rather than defaulted.
    """
    fields = {"brand": brand, "model": model, "owner": owner, "dayOfCommission": dayOfCommission}
    if fuelUse is not None:
        fields["fuelUse"] = fuelUse
    if electric is not None:
        fields["electric"] = electric
    return fields


# ─── Navigation ───────────────────────────────────────────────────────────────
class Navigator:
    """
    Records where a view asked to navigate.

    Usage:
        nav = Navigator()
        form = CarFormView(service, scope, navigate=nav)
        ...
        if nav.url:
            return RedirectResponse(nav.url, status_code=303)
    """

    def __init__(self):
        self.url: Optional[str] = None

    def __call__(self, url: str) -> None:
        self.url = url
