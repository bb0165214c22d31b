import math
from typing import Optional

from app.schemas.car import VALID_BRANDS, CarOut
from app.views.car_detail import CarDetailView, DetailState
from app.views.car_form import CarFormView, FormState
from app.views.car_list import CarListView, ListState
from app.pages.layout import (
    esc, url, render_page, render_button, render_modal, render_confirmation,
)


def _fuel(value: Optional[float]) -> str:
    if value is None or math.isnan(value):
        return ""
    return f"{value:g}"


# ─── Scope entry + list ───────────────────────────────────────────────────────
def render_home(scope: Optional[str], car_list: Optional[CarListView] = None) -> str:
    entry = f"""
<div class="card">
    <h2>Enter Your Neptun Code</h2>
    <form class="scope-form" method="get" action="/">
        <input type="text" name="neptun" value="{esc(scope)}" placeholder="Enter Neptun code (e.g., ABC123)" required>
        {render_button("Submit", type="submit")}
    </form>
</div>"""

    if car_list is None:
        content = '<div class="card center"><p class="muted">Please enter your Neptun code to view and manage cars.</p></div>'
        return render_page("Car Manager", f"<h1>Car Manager</h1>{entry}{content}")

    body = f"<h1>Car Manager</h1>{entry}{render_car_list(car_list)}"
    return render_page("Cars", body, scroll_locked=car_list.page.scroll_locked)


def render_car_list(car_list: CarListView) -> str:
    state = car_list.state
    if state == ListState.LOADING:
        return '<div class="card center"><p>Loading cars...</p></div>'
    if state == ListState.ERROR:
        return f'<div class="alert">{esc(car_list.error)}</div>'

    scope = car_list.scope
    header = f"""
<div class="card">
    <div style="display:flex;justify-content:space-between;align-items:center;margin-bottom:14px">
        <h2>Cars for {esc(scope)}</h2>
        {render_button("Add New Car", href=url("/", neptun=scope, create=1))}
    </div>"""

    if state == ListState.EMPTY:
        table = '<p class="muted center">No cars found.</p>'
    else:
        rows = "".join(_render_row(scope, car) for car in car_list.cars)
        table = f"""
    <table>
        <thead><tr><th>Brand</th><th>Model</th><th>Owner</th><th>Fuel use</th><th>Commissioned</th><th>Electric</th><th></th></tr></thead>
        <tbody>{rows}</tbody>
    </table>"""

    return header + table + "</div>" + _render_list_overlays(car_list)


def _render_row(scope: str, car: CarOut) -> str:
    return f"""
        <tr data-car-id="{car.id}">
            <td>{esc(car.brand)}</td>
            <td>{esc(car.model)}</td>
            <td>{esc(car.owner)}</td>
            <td>{esc(_fuel(car.fuelUse))}</td>
            <td>{esc(car.dayOfCommission.isoformat())}</td>
            <td>{"Yes" if car.electric else "No"}</td>
            <td class="actions">
                <a href="{esc(url('/', neptun=scope, view=car.id))}" aria-label="View car details">View</a>
                <a href="{esc(url('/', neptun=scope, edit=car.id))}" aria-label="Edit car">Edit</a>
                <a href="{esc(url('/', neptun=scope, delete=car.id))}" aria-label="Delete car">Delete</a>
            </td>
        </tr>"""


def _render_list_overlays(car_list: CarListView) -> str:
    parts = []
    if car_list.detail is not None:
        parts.append(render_modal(car_list.view_modal, render_detail(car_list.detail)))
        parts.append(_render_detail_confirmation(car_list.detail, embedded=True))
    if car_list.form is not None:
        modal = car_list.edit_modal if car_list.form.is_edit else car_list.create_modal
        parts.append(render_modal(modal, render_form(car_list.form, embedded=True)))
    if car_list.car_to_delete is not None:
        parts.append(render_confirmation(
            car_list.delete_modal,
            url(f"/cars/{car_list.car_to_delete}/delete", neptun=car_list.scope),
            {"origin": "list"},
        ))
    return "".join(parts)


# ─── Detail ───────────────────────────────────────────────────────────────────
def render_detail(detail: CarDetailView) -> str:
    state = detail.state
    if state == DetailState.LOADING:
        return '<p class="center">Loading car details...</p>'
    if state == DetailState.ERROR:
        return f'<div class="alert">{esc(detail.error)}</div>'
    if state == DetailState.NOT_FOUND:
        return '<p class="center">Car not found</p>'

    car = detail.car
    scope = detail.scope
    if detail.in_modal:
        delete_href = url("/", neptun=scope, view=car.id, confirm=1)
        buttons = render_button("Delete", "danger", href=delete_href)
    else:
        buttons = (
            render_button("Back to List", href=url("/", neptun=scope))
            + render_button("Edit", "secondary", href=url(f"/cars/edit/{car.id}", neptun=scope))
            + render_button("Delete", "danger", href=url(f"/cars/{car.id}", neptun=scope, confirm=1))
        )
    return f"""
<h2>{esc(car.brand)} {esc(car.model)}</h2>
<dl class="detail-grid">
    <div><dt>Owner</dt><dd>{esc(car.owner)}</dd></div>
    <div><dt>Commission date</dt><dd>{esc(car.dayOfCommission.isoformat())}</dd></div>
    <div><dt>Fuel use</dt><dd>{esc(_fuel(car.fuelUse))} L/100km</dd></div>
    <div><dt>Type</dt><dd>{"Electric" if car.electric else "Fuel"}</dd></div>
</dl>
<div class="btn-row">{buttons}</div>"""


def _render_detail_confirmation(detail: CarDetailView, embedded: bool) -> str:
    hidden = {"origin": "detail"}
    if embedded:
        hidden["embedded"] = "1"
    return render_confirmation(
        detail.delete_modal,
        url(f"/cars/{detail.car_id}/delete", neptun=detail.scope),
        hidden,
    )


def render_detail_page(detail: CarDetailView) -> str:
    body = (
        f'<h1>Car Details</h1><div class="card">{render_detail(detail)}</div>'
        + _render_detail_confirmation(detail, embedded=False)
    )
    return render_page("Car Details", body, scroll_locked=detail.page.scroll_locked)


# ─── Form ─────────────────────────────────────────────────────────────────────
def _field(form: CarFormView, name: str, label: str, control: str) -> str:
    message = form.errors.get(name)
    invalid = " invalid" if message else ""
    error = f'<p class="field-error">{esc(message)}</p>' if message else ""
    return f'<div class="field{invalid}"><label for="{name}">{label}</label>{control}{error}</div>'


def render_form(form: CarFormView, embedded: bool = False) -> str:
    if form.state == FormState.LOADING:
        return '<p class="center">Loading...</p>'

    data = form.data
    action = url(f"/cars/{form.car_id}" if form.is_edit else "/cars", neptun=form.scope)
    alert = f'<div class="alert">{esc(form.error)}</div>' if form.error else ""

    focus = " data-focus" if form.brand_needs_focus else ""
    options = '<option value="">Select a brand</option>' + "".join(
        f'<option value="{esc(b)}"{" selected" if b == data.brand else ""}>{esc(b)}</option>'
        for b in VALID_BRANDS
    )
    brand = f'<select id="brand" name="brand"{focus}>{options}</select>'
    model = f'<input type="text" id="model" name="model" value="{esc(data.model)}">'
    electric = (
        f'<input type="checkbox" id="electric" name="electric" value="on"'
        f'{" checked" if data.electric else ""}> <label for="electric">Electric Car</label>'
    )
    fuel = (
        f'<input type="number" step="any" id="fuelUse" name="fuelUse" value="{esc(_fuel(data.fuelUse))}"'
        f'{" disabled" if data.electric else ""}>'
    )
    fuel_label = "Fuel Use (L/100km) *" + (
        ' <span class="muted">(Must be 0 for electric cars)</span>' if data.electric else ""
    )
    owner = f'<input type="text" id="owner" name="owner" value="{esc(data.owner)}">'
    day = f'<input type="date" id="dayOfCommission" name="dayOfCommission" value="{esc(data.dayOfCommission)}">'
    hidden = '<input type="hidden" name="embedded" value="1">' if embedded else ""
    submit_label = "Update Car" if form.is_edit else "Add Car"
    if form.state == FormState.SUBMITTING:
        submit_label = "Saving..."

    return f"""
{alert}
<form method="post" action="{esc(action)}" novalidate>
    {hidden}
    {_field(form, "brand", "Brand *", brand)}
    {_field(form, "model", "Model *", model)}
    <div class="field">{electric}</div>
    {_field(form, "fuelUse", fuel_label, fuel)}
    {_field(form, "owner", "Owner *", owner)}
    {_field(form, "dayOfCommission", "Commission Date *", day)}
    <div class="btn-row">
        {render_button("Cancel", "secondary", type="submit", name="action", value="cancel", formnovalidate="")}
        {render_button(submit_label, type="submit", name="action", value="save")}
    </div>
</form>"""


def render_form_page(form: CarFormView) -> str:
    title = "Edit Car" if form.is_edit else "Add New Car"
    body = f'<h1>{title}</h1><div class="card">{render_form(form)}</div>'
    return render_page(title, body)


# ─── Errors ───────────────────────────────────────────────────────────────────
def render_error_page(status_code: int, message: str, code: Optional[str] = None) -> str:
    code_line = f'<p class="muted">{esc(code)} ({status_code})</p>' if code else ""
    body = f"""
<div class="card center">
    <div class="alert">{esc(message)}</div>
    {code_line}
    <p style="margin-top:14px"><a href="/">Go to Home Page</a></p>
</div>"""
    return render_page("Error", body)
