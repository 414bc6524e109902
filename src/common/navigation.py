from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


class Page(str, Enum):
    AUTH = "index"
    DASHBOARD = "dashboard"


Listener = Callable[[Page], None]


class Navigator:
    """
    Two-page navigation surface with full-page redirect semantics.

    A redirect only records the target and notifies the listener; the listener
    (the console shell) builds a fresh controller for the new page, so nothing
    carries over from the previous one.
    """

    def __init__(self, initial: Page = Page.AUTH, *, listener: Optional[Listener] = None) -> None:
        self._current = initial
        self._listener = listener
        self.history: List[Page] = [initial]

    @property
    def current(self) -> Page:
        return self._current

    def set_listener(self, listener: Optional[Listener]) -> None:
        self._listener = listener

    def redirect(self, page: Page) -> None:
        logger.info("redirect -> %s", page.value)
        self._current = page
        self.history.append(page)
        if self._listener is not None:
            self._listener(page)


__all__ = ["Navigator", "Page"]
