from html import escape
from typing import Optional
from urllib.parse import urlencode

from app.config import settings
from app.views.modal import ConfirmationModal, Modal


def esc(value) -> str:
    return escape("" if value is None else str(value), quote=True)


def url(path: str, **params) -> str:
    """Build an address, skipping params that are None."""
    query = {k: v for k, v in params.items() if v is not None}
    return f"{path}?{urlencode(query)}" if query else path


_STYLE = """
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: #f5f5f5; color: #333; }
        body.scroll-locked { overflow: hidden; }
        .container { max-width: 960px; margin: 20px auto; padding: 0 15px; }
        h1 { font-size: 28px; text-align: center; margin-bottom: 24px; }
        h2 { font-size: 20px; margin-bottom: 14px; }
        .card { background: white; border-radius: 10px; padding: 20px; margin-bottom: 20px; box-shadow: 0 5px 0 0 #e5e7eb; }
        .center { text-align: center; }
        .muted { color: #6b7280; }
        .alert { padding: 12px; border-radius: 6px; margin-bottom: 14px; background: #fee2e2; border: 1px solid #f87171; color: #b91c1c; }
        .btn { display: inline-block; padding: 8px 16px; border: none; border-radius: 6px; cursor: pointer; font-size: 14px; text-decoration: none; color: white; }
        .btn-primary { background: #FFC1DA; box-shadow: 0 4px 0 0 #FF90BB; }
        .btn-primary:hover { background: #FF90BB; }
        .btn-secondary { background: #6b7280; box-shadow: 0 4px 0 0 #374151; }
        .btn-danger { background: #ef4444; box-shadow: 0 4px 0 0 #dc2626; }
        .btn-row { display: flex; gap: 12px; justify-content: flex-end; margin-top: 16px; }
        .scope-form { display: flex; gap: 8px; }
        .scope-form input { flex: 1; }
        input[type=text], input[type=number], input[type=date], select { width: 100%; padding: 8px; border: 1px solid #d1d5db; border-radius: 6px; box-shadow: 0 4px 0 0 #d1d5db; }
        .field { margin-bottom: 16px; }
        .field label { display: block; margin-bottom: 4px; color: #374151; }
        .field.invalid input, .field.invalid select { border-color: #ef4444; }
        .field-error { color: #ef4444; font-size: 13px; margin-top: 4px; }
        table { width: 100%; border-collapse: collapse; }
        th, td { text-align: left; padding: 10px; border-bottom: 1px solid #f0f0f0; }
        th { font-size: 12px; text-transform: uppercase; color: #6b7280; }
        .actions a, .actions button { margin-right: 6px; }
        .detail-grid { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; }
        .detail-grid dt { font-size: 12px; color: #6b7280; text-transform: uppercase; }
        .modal { position: fixed; inset: 0; z-index: 50; display: none; align-items: center; justify-content: center; padding: 16px; background: rgba(107,114,128,0.4); }
        .modal.open { display: flex; }
        .modal-panel { background: white; border-radius: 10px; width: 100%; max-width: 640px; max-height: 90vh; overflow: auto; box-shadow: 0 8px 0 0 #e5e7eb; }
        .modal-panel.small { max-width: 440px; }
        .modal-header { display: flex; justify-content: space-between; align-items: center; padding: 14px 18px; border-bottom: 1px solid #e5e7eb; }
        .modal-close { background: none; border: none; font-size: 22px; cursor: pointer; color: #6b7280; }
        .modal-body { padding: 20px; }
"""

# Escape, backdrop click and the close button hide the overlay; the panel
# swallows its own clicks. The body stays locked while any overlay is open.
_SCRIPT = """
    (function () {
        function syncScroll() {
            var anyOpen = document.querySelector('.modal.open') !== null;
            document.body.classList.toggle('scroll-locked', anyOpen);
        }
        function closeModal(modal) {
            modal.classList.remove('open');
            syncScroll();
        }
        document.querySelectorAll('.modal').forEach(function (modal) {
            modal.addEventListener('click', function () { closeModal(modal); });
            var panel = modal.querySelector('.modal-panel');
            if (panel) {
                panel.addEventListener('click', function (e) { e.stopPropagation(); });
            }
            modal.querySelectorAll('[data-close]').forEach(function (btn) {
                btn.addEventListener('click', function (e) { e.preventDefault(); closeModal(modal); });
            });
        });
        document.addEventListener('keydown', function (e) {
            if (e.key !== 'Escape') { return; }
            var open = document.querySelectorAll('.modal.open');
            if (open.length) { closeModal(open[open.length - 1]); }
        });
        var electric = document.getElementById('electric');
        var fuel = document.getElementById('fuelUse');
        if (electric && fuel) {
            electric.addEventListener('change', function () {
                if (electric.checked) { fuel.value = 0; }
                fuel.disabled = electric.checked;
            });
        }
        var focus = document.querySelector('[data-focus]');
        if (focus) { focus.focus(); }
        syncScroll();
    })();
"""


def render_page(title: str, body: str, scroll_locked: bool = False) -> str:
    body_class = ' class="scroll-locked"' if scroll_locked else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{esc(title)} · {esc(settings.APP_NAME)}</title>
    <style>{_STYLE}</style>
</head>
<body{body_class}>
<div class="container">
{body}
</div>
<script>{_SCRIPT}</script>
</body>
</html>"""


def render_button(label: str, variant: str = "primary", href: Optional[str] = None, **attrs) -> str:
    if href is None:
        attrs.setdefault("type", "button")
    extra = "".join(f' {k.replace("_", "-")}="{esc(v)}"' for k, v in attrs.items() if v is not None)
    if href is not None:
        return f'<a class="btn btn-{variant}" href="{esc(href)}"{extra}>{esc(label)}</a>'
    return f'<button class="btn btn-{variant}"{extra}>{esc(label)}</button>'


def render_modal(modal: Modal, content: str, small: bool = False) -> str:
    if not modal.is_open:
        return ""
    size = " small" if small else ""
    return f"""
<div class="modal open" role="dialog" aria-modal="true" aria-label="{esc(modal.title)}">
    <div class="modal-panel{size}">
        <div class="modal-header">
            <h3>{esc(modal.title)}</h3>
            <button class="modal-close" data-close aria-label="Close modal">&times;</button>
        </div>
        <div class="modal-body">{content}</div>
    </div>
</div>"""


def render_confirmation(modal: ConfirmationModal, action: str, hidden: dict[str, str]) -> str:
    """Confirmation overlay whose confirm button posts to `action`."""
    fields = "".join(
        f'<input type="hidden" name="{esc(k)}" value="{esc(v)}">' for k, v in hidden.items()
    )
    content = f"""
        <p class="muted">{esc(modal.message)}</p>
        <form method="post" action="{esc(action)}">
            {fields}
            <div class="btn-row">
                {render_button(modal.cancel_text, "secondary", data_close="")}
                {render_button(modal.confirm_text, "danger", type="submit")}
            </div>
        </form>"""
    return render_modal(modal, content, small=True)
