"""GridNetViewModel — the network add-on as a grid host sees it.

Builds the orchestrator and its bridges from a :class:`NetConfig`, listens
for server-side sort requests on the event bus, and exposes the operations a
grid widget or application calls: form submit, page reads, reload,
mutations, form data and the request lifecycle hooks.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, Callable, Mapping, Optional

from gridnet.application.interfaces import IPrompter, IRowStore, ITransport
from gridnet.application.services.confirmation_gate import ConfirmationGate
from gridnet.application.services.history_bridge import HistoryBridge, to_query_string
from gridnet.application.services.pagination_bridge import PaginationBridge
from gridnet.application.services.request_orchestrator import Invoker, RequestOrchestrator
from gridnet.domain.models import MutationOptions, RequestKind
from gridnet.errors.handler import ErrorHandler
from gridnet.events.bus import EventBus
from gridnet.events.grid_events import SortChangedEvent
from gridnet.events.pipeline import EventPipeline, Observer, Stage
from gridnet.gui.viewmodels.base import BaseViewModel
from gridnet.gui.viewmodels.signal import ObservableProperty
from gridnet.settings.loader import NetConfig


class GridNetViewModel(BaseViewModel):
    """Network add-on ViewModel — pure Python, no Qt dependency.

    With ``issue_initial_read`` set in the configuration the first page is
    requested from a freshly captured form as soon as the view-model exists,
    provided a read endpoint is configured.

    Signals and observable properties fire on whichever thread completes a
    request.  Transports that settle on worker threads need an ``invoke``
    that runs on the owner thread, such as
    :class:`gridnet.gui.ui.invoker.QtMainThreadInvoker` under Qt or the
    host's own event-loop hook elsewhere.
    """

    def __init__(
        self,
        config: NetConfig,
        row_store: IRowStore,
        transport: ITransport,
        prompter: IPrompter,
        event_bus: Optional[EventBus] = None,
        invoke: Optional[Invoker] = None,
    ) -> None:
        super().__init__()
        self._config = config
        self._row_store = row_store
        self._transport = transport
        self._logger = logging.getLogger(__name__)

        self.event_bus = event_bus or EventBus()
        self.pipeline = EventPipeline()
        self.pagination = PaginationBridge(config.items_per_page)
        self.history = HistoryBridge() if config.enable_history else None

        self.error_handler = ErrorHandler(self._logger, self.event_bus)
        self.error_handler.register_ui_callback(lambda message, severity: prompter.alert(message))

        self.orchestrator = RequestOrchestrator(
            config,
            row_store,
            transport,
            ConfirmationGate(prompter, config.locale),
            pipeline=self.pipeline,
            event_bus=self.event_bus,
            error_handler=self.error_handler,
            pagination=self.pagination,
            history=self.history,
            invoke=invoke,
        )

        # Observable properties
        self.loading = ObservableProperty(False)
        self.orchestrator.lock_changed.connect(self._on_lock_changed)

        self.subscribe_event(self.event_bus, SortChangedEvent, self.orchestrator.on_sort_changed)

        if config.issue_initial_read:
            if config.endpoint(RequestKind.READ):
                self.orchestrator.initiate_read(1, reuse_last_form_data=False)
            else:
                self._logger.warning("Initial read skipped: no read endpoint configured")

    @property
    def start_number(self) -> int:
        """Row number the grid shows next to the first row of the page."""
        return self.orchestrator.state.start_number

    # -- reads -------------------------------------------------------------

    def submit_form(self) -> Optional[Future]:
        """Search with the form as it is now, starting at page 1."""
        return self.orchestrator.initiate_read(1, reuse_last_form_data=False)

    def read_page(self, page: int) -> Optional[Future]:
        """Read *page* with the form values of the last search."""
        return self.orchestrator.initiate_read(page, reuse_last_form_data=True)

    def reload(self) -> Optional[Future]:
        return self.orchestrator.reload()

    def restore(self, location: str) -> Optional[Future]:
        """Re-run the read a history location describes (e.g. a bookmark).

        The form shows the restored search values; paging and sort order come
        from the location, never from what the form held before.
        """
        read = HistoryBridge.restore_read(location)
        self.set_form_data(read.form_data)
        return self.orchestrator.restore_read(read)

    # -- writes ------------------------------------------------------------

    def request(
        self,
        kind: RequestKind | str,
        on_success: Optional[Callable[[Any], None]] = None,
        **options: Any,
    ) -> Optional[Future]:
        """Send a mutation; *options* are the fields of :class:`MutationOptions`."""
        return self.orchestrator.submit_mutation(kind, MutationOptions(**options), on_success)

    # -- form & hooks ------------------------------------------------------

    def set_form_data(self, data: Mapping[str, Any]) -> None:
        self._row_store.apply_form_snapshot(data)

    def on(self, stage: Stage | str, observer: Observer) -> Observer:
        return self.pipeline.on(stage, observer)

    def off(self, stage: Stage | str, observer: Observer) -> None:
        self.pipeline.off(stage, observer)

    def download_url(self, all_rows: bool = False) -> Optional[str]:
        """Download endpoint carrying the parameters of the last read."""
        url = self._config.endpoint("download_all" if all_rows else "download")
        if not url:
            return None
        params = self.orchestrator.last_read_params
        if not params:
            return url
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{to_query_string(params)}"

    def dispose(self) -> None:
        super().dispose()
        self.orchestrator.dispose()
        self.pagination.dispose()
        self.pipeline.clear()
        self._transport.close()

    # -- internal ----------------------------------------------------------

    def _on_lock_changed(self, locked: bool) -> None:
        self.loading.value = locked
