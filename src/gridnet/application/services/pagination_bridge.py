"""Two-way link between the orchestrator and a pagination widget.

The widget reports clicks through :meth:`PaginationBridge.request_page`;
results flow back through :meth:`PaginationBridge.apply_snapshot`, which only
updates state and never turns into another page request.
"""

from __future__ import annotations

import logging
from typing import Callable

from gridnet.config import DEFAULT_ITEMS_PER_PAGE, INITIAL_ITEM_COUNT
from gridnet.domain.models import PaginationSnapshot
from gridnet.gui.viewmodels.signal import ObservableProperty, Signal

LOGGER = logging.getLogger(__name__)


class PaginationBridge:
    def __init__(self, items_per_page: int = DEFAULT_ITEMS_PER_PAGE) -> None:
        if items_per_page <= 0:
            raise ValueError("items_per_page must be > 0")

        # Observable widget state
        self.items_per_page = ObservableProperty(items_per_page)
        self.total_count = ObservableProperty(INITIAL_ITEM_COUNT)
        self.current_page = ObservableProperty(1)

        # Signals
        self.page_requested = Signal()  # emits (page: int)

    # -- properties --------------------------------------------------------

    @property
    def total_pages(self) -> int:
        per_page = self.items_per_page.value
        total = self.total_count.value
        if per_page <= 0 or total <= 0:
            return 0
        return (total + per_page - 1) // per_page

    @property
    def has_more(self) -> bool:
        return self.current_page.value * self.items_per_page.value < self.total_count.value

    # -- public API --------------------------------------------------------

    def apply_snapshot(self, snapshot: PaginationSnapshot, items_per_page: int | None = None) -> None:
        """Show the page and total count reported by a read response."""
        if items_per_page is not None:
            self.items_per_page.value = items_per_page
        self.total_count.value = snapshot.total_count
        self.current_page.value = snapshot.page
        LOGGER.debug("Pagination now page %d of %d", snapshot.page, self.total_pages)

    def on_page_requested(self, handler: Callable[[int], None]) -> None:
        self.page_requested.connect(handler)

    def request_page(self, page: int) -> None:
        """Called by the widget when the user picks *page*."""
        if page < 1:
            raise ValueError("page must be >= 1")
        self.page_requested.emit(page)

    def dispose(self) -> None:
        self.page_requested.clear()
