import logging
from typing import Callable, Optional
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

# Receives the address to go to, e.g. "/?neptun=ABC123"
Navigate = Callable[[str], None]


def list_url(scope: str) -> str:
    """Address of the car list for a Neptun code."""
    return "/?" + urlencode({"neptun": scope})


class PageState:
    """
    State of the page hosting the views.

    `scroll_locked` mirrors the body scroll lock an open overlay puts on the
    page. Overlays lock and unlock it through `lock_scroll`/`unlock_scroll`.
    """

    def __init__(self):
        self._locks = 0

    @property
    def scroll_locked(self) -> bool:
        return self._locks > 0

    def lock_scroll(self) -> None:
        self._locks += 1

    def unlock_scroll(self) -> None:
        self._locks = max(self._locks - 1, 0)


class View:
    """
    Base class of every controller with a mounted lifetime.

    Each load takes a token from `_begin_load()`. Unmounting, or starting a
    newer load, makes older tokens stale, and `_is_current(token)` lets the
    caller drop a result that arrives for a view that is gone.
    """

    def __init__(self, navigate: Optional[Navigate] = None):
        self.navigate = navigate
        self.mounted = False
        self._token = 0

    def mount(self) -> None:
        self.mounted = True

    def unmount(self) -> None:
        self.mounted = False
        self._token += 1

    def _begin_load(self) -> int:
        self._token += 1
        return self._token

    def _is_current(self, token: int) -> bool:
        if self.mounted and token == self._token:
            return True
        logger.debug(f"{type(self).__name__}: dropping stale result (token {token}, now {self._token})")
        return False

    def _go(self, url: str) -> None:
        if self.navigate is None:
            logger.warning(f"{type(self).__name__}: no navigator, staying put instead of going to {url}")
            return
        self.navigate(url)
