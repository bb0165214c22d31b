from typing import Callable, Optional

from app.views.base import PageState


class Modal:
    """
    A dismissible overlay.

    Closed until `open()` is called. While open it holds a scroll lock on its
    page. Escape and a click on the backdrop close it; a click inside the
    panel does not reach the backdrop.
    """

    def __init__(
        self,
        title: str,
        on_close: Optional[Callable[[], None]] = None,
        page: Optional[PageState] = None,
    ):
        self.title = title
        self.on_close = on_close
        self.page = page or PageState()
        self.is_open = False

    def open(self) -> None:
        if self.is_open:
            return
        self.is_open = True
        self.page.lock_scroll()

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self.page.unlock_scroll()
        if self.on_close:
            self.on_close()

    def handle_key(self, key: str) -> bool:
        """Returns True when the key closed the modal."""
        if self.is_open and key == "Escape":
            self.close()
            return True
        return False

    def click_backdrop(self) -> None:
        self.close()

    def click_panel(self) -> None:
        # panel clicks stop at the panel
        return None


class ConfirmationModal(Modal):
    """Modal asking the user to confirm an action before it runs."""

    def __init__(
        self,
        title: str,
        message: str,
        on_confirm: Callable[[], None],
        confirm_text: str = "Yes",
        cancel_text: str = "Cancel",
        on_close: Optional[Callable[[], None]] = None,
        page: Optional[PageState] = None,
    ):
        super().__init__(title, on_close=on_close, page=page)
        self.message = message
        self.on_confirm = on_confirm
        self.confirm_text = confirm_text
        self.cancel_text = cancel_text

    def confirm(self) -> None:
        """Run the action, then close whatever the action did."""
        try:
            self.on_confirm()
        finally:
            self.close()

    def cancel(self) -> None:
        self.close()
