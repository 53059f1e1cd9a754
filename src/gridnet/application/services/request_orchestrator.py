"""RequestOrchestrator — every read and write between a grid and its service.

Reads are single-flight: while one is outstanding the orchestrator is
*locked* and further reads are ignored.  Mutations are never held back by the
lock.  Each request runs through the :class:`EventPipeline` stages::

    beforeRequest -> [transport] -> response -> successResponse
                                             -> failResponse
                                             -> errorResponse

Transport calls return futures; their completion is handed to ``invoke`` so
a host can run response processing on its own thread (inline by default).
Nothing reconciles responses that arrive out of order: a mutation settling
while a read is outstanding also releases the read lock, and overlapping
mutations are the caller's responsibility.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional

from gridnet.application.interfaces import IRowStore, ITransport
from gridnet.application.services.confirmation_gate import (
    TRANSPORT_FAILURE_NOTICE,
    ConfirmationGate,
)
from gridnet.application.services.history_bridge import HistoryBridge, ReadLocation
from gridnet.application.services.pagination_bridge import PaginationBridge
from gridnet.application.services.payload_builder import PayloadBuilder
from gridnet.config import (
    CONTENTS_FIELD,
    DATA_FIELD,
    DEFAULT_LOCALE,
    MESSAGE_FIELD,
    PAGE_PARAM,
    PAGINATION_FIELD,
    PER_PAGE_PARAM,
    READ_METHOD,
    SORT_ASCENDING_PARAM,
    SORT_COLUMN_PARAM,
)
from gridnet.domain.models import (
    MutationOptions,
    OrchestratorState,
    PaginationSnapshot,
    RequestDescriptor,
    RequestKind,
    RequestOutcome,
    SortSpec,
    TransportResponse,
)
from gridnet.errors import BusinessFailure, InvalidRequestKind, TransportError
from gridnet.errors.handler import ErrorHandler, ErrorSeverity
from gridnet.events.bus import EventBus
from gridnet.events.grid_events import RowsFetchedEvent, SortChangedEvent
from gridnet.events.pipeline import EventContext, EventPipeline, Stage
from gridnet.gui.viewmodels.signal import Signal
from gridnet.settings.loader import NetConfig

LOGGER = logging.getLogger(__name__)

Invoker = Callable[[Callable[[], None]], None]
SuccessCallback = Callable[[Any], None]


def _invoke_inline(func: Callable[[], None]) -> None:
    func()


class RequestOrchestrator:
    def __init__(
        self,
        config: NetConfig,
        row_store: IRowStore,
        transport: ITransport,
        confirmation_gate: ConfirmationGate,
        *,
        pipeline: Optional[EventPipeline] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
        pagination: Optional[PaginationBridge] = None,
        history: Optional[HistoryBridge] = None,
        invoke: Optional[Invoker] = None,
    ) -> None:
        self._config = config
        self._row_store = row_store
        self._transport = transport
        self._gate = confirmation_gate
        self._pipeline = pipeline or EventPipeline()
        self._bus = event_bus or EventBus()
        self._errors = error_handler or ErrorHandler(LOGGER, self._bus)
        self._pagination = pagination
        self._history = history
        self._invoke = invoke or _invoke_inline
        self._payload_builder = PayloadBuilder(row_store)

        self._state = OrchestratorState(items_per_page=config.items_per_page)

        # Signals
        self.lock_changed = Signal()  # emits (locked: bool)

        if self._pagination is not None:
            self._pagination.on_page_requested(self._on_page_requested)

    # -- properties --------------------------------------------------------

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def locked(self) -> bool:
        return self._state.locked

    @property
    def current_page(self) -> int:
        return self._state.current_page

    @property
    def last_read_params(self) -> Optional[Dict[str, Any]]:
        params = self._state.last_read_params
        return dict(params) if params is not None else None

    @property
    def pipeline(self) -> EventPipeline:
        return self._pipeline

    # -- reads -------------------------------------------------------------

    def initiate_read(
        self,
        page: Optional[int] = None,
        reuse_last_form_data: bool = True,
        sort: Optional[SortSpec] = None,
    ) -> Optional[Future]:
        """Fetch *page* (default 1) with the stored or a fresh form snapshot.

        Returns ``None`` when nothing was sent (a read is already in flight,
        or a ``beforeRequest`` observer stopped it), otherwise a future that
        resolves with the :class:`RequestOutcome` once the response has been
        processed.
        """
        if self._state.locked:
            LOGGER.debug("Read ignored: another read is in flight")
            return None
        url = self._endpoint_for(RequestKind.READ)
        params = self._read_params(page, reuse_last_form_data, sort)
        return self._issue_read(url, params, record_history=True)

    def reload(self) -> Optional[Future]:
        """Re-issue the last read exactly as it was sent."""
        if self._state.last_read_params is None:
            LOGGER.debug("Reload ignored: no read issued yet")
            return None
        if self._state.locked:
            LOGGER.debug("Reload ignored: another read is in flight")
            return None
        url = self._endpoint_for(RequestKind.READ)
        return self._issue_read(url, dict(self._state.last_read_params), record_history=False)

    def restore_read(self, location: ReadLocation) -> Optional[Future]:
        """Replay a recorded read with its own form values, page and sort.

        The current form is neither captured nor merged in, so the request
        carries exactly what *location* holds plus the configured page size.
        """
        if self._state.locked:
            LOGGER.debug("Restore ignored: another read is in flight")
            return None
        url = self._endpoint_for(RequestKind.READ)
        params = self._paged(location.form_data, location.page, location.sort)
        return self._issue_read(url, params, record_history=True)

    def on_sort_changed(self, event: SortChangedEvent) -> Optional[Future]:
        """Refetch page 1 in the new order when the service has to sort."""
        if not event.is_require_fetch:
            return None
        sort = SortSpec(event.column_name, event.is_ascending)
        return self.initiate_read(page=1, reuse_last_form_data=True, sort=sort)

    # -- writes ------------------------------------------------------------

    def submit_mutation(
        self,
        kind: RequestKind | str,
        options: Optional[MutationOptions] = None,
        on_success: Optional[SuccessCallback] = None,
    ) -> Optional[Future]:
        """Send a create/update/delete/modify request.

        Returns ``None`` when the user declined (or there was nothing to
        confirm) or a ``beforeRequest`` observer stopped the request.
        """
        kind = RequestKind.parse(kind)
        options = options or MutationOptions()
        if not kind.is_mutation:
            raise InvalidRequestKind(kind, "Reads are issued with initiate_read()")
        url = options.url or self._endpoint_for(kind)

        payload = self._payload_builder.build(kind, options, self._state.pending_form_snapshot)
        if not options.skip_confirmation and not self._gate.confirm(kind, payload.affected_count):
            LOGGER.info("%s request not confirmed (%d rows)", kind.value, payload.affected_count)
            return None

        descriptor = RequestDescriptor(
            kind=kind,
            url=url,
            method=options.method,
            body=payload.body,
            skip_confirmation=options.skip_confirmation,
            include_row_data=options.include_row_data,
            only_modified_rows=options.only_modified_rows,
            only_checked_rows=options.only_checked_rows,
        )
        if self._before_request(descriptor).stopped:
            return None
        return self._send(descriptor, on_success)

    # -- completion --------------------------------------------------------

    def complete_request(
        self,
        descriptor: RequestDescriptor,
        outcome: RequestOutcome,
        on_success: Optional[SuccessCallback] = None,
    ) -> EventContext:
        """Process a settled transport call; returns the response context."""
        self._set_locked(False)

        body = outcome.body
        context = self._pipeline.dispatch(Stage.RESPONSE, {
            "http_status": outcome.http_status,
            "kind": descriptor.kind.value,
            "request_params": descriptor.body,
            "response_body": body,
        })
        if context.stopped:
            return context

        if outcome.is_transport_failure:
            self._handle_transport_failure(descriptor, outcome, context)
            return context

        if outcome.response.is_success:
            self._pipeline.dispatch(Stage.SUCCESS_RESPONSE, context)
            if context.stopped:
                return context
            data = body.get(DATA_FIELD) or {}
            if descriptor.kind is RequestKind.READ:
                self._apply_read_result(data)
            if on_success is not None:
                on_success(data)
            return context

        self._pipeline.dispatch(Stage.FAIL_RESPONSE, context)
        if context.stopped:
            return context
        message = body.get(MESSAGE_FIELD) if body else None
        if message:
            self._errors.handle(
                BusinessFailure(message),
                ErrorSeverity.ERROR,
                context=self._error_context(descriptor, outcome),
                message=str(message),
            )
        else:
            LOGGER.warning("%s request to %s failed without a message", descriptor.kind.value, descriptor.url)
        return context

    def dispose(self) -> None:
        if self._pagination is not None:
            try:
                self._pagination.page_requested.disconnect(self._on_page_requested)
            except ValueError:
                pass
        self.lock_changed.clear()

    # -- internal ----------------------------------------------------------

    def _endpoint_for(self, kind: RequestKind) -> str:
        url = self._config.endpoint(kind)
        if not url:
            raise InvalidRequestKind(kind)
        return url

    def _read_params(
        self,
        page: Optional[int],
        reuse_last_form_data: bool,
        sort: Optional[SortSpec],
    ) -> Dict[str, Any]:
        snapshot = self._state.pending_form_snapshot
        if reuse_last_form_data and snapshot is not None:
            return self._paged(snapshot, page, sort)
        return self._paged(self._row_store.capture_form_snapshot(), page, sort)

    def _paged(self, form_data: Mapping[str, Any], page: Optional[int], sort: Optional[SortSpec]) -> Dict[str, Any]:
        params = dict(form_data)
        params[PAGE_PARAM] = page if page is not None else 1
        params[PER_PAGE_PARAM] = self._state.items_per_page
        self._apply_sort(params, sort)
        return params

    @staticmethod
    def _apply_sort(params: Dict[str, Any], sort: Optional[SortSpec]) -> None:
        if sort is None:
            return
        if sort.is_row_key:
            params.pop(SORT_COLUMN_PARAM, None)
            params.pop(SORT_ASCENDING_PARAM, None)
        else:
            params[SORT_COLUMN_PARAM] = sort.column_name
            params[SORT_ASCENDING_PARAM] = sort.ascending

    def _issue_read(self, url: str, params: Dict[str, Any], record_history: bool) -> Optional[Future]:
        descriptor = RequestDescriptor(
            kind=RequestKind.READ,
            url=url,
            method=READ_METHOD,
            body=params,
            skip_confirmation=True,
            include_row_data=False,
        )
        if self._before_request(descriptor).stopped:
            return None

        state = self._state
        state.last_read_params = dict(params)
        state.pending_form_snapshot = dict(params)
        state.current_page = max(1, int(params.get(PAGE_PARAM) or state.current_page))
        self._set_locked(True)

        self._row_store.reset_transient_state()
        self._row_store.set_sort_state(params.get(SORT_COLUMN_PARAM), params.get(SORT_ASCENDING_PARAM))
        if record_history and self._history is not None and self._config.enable_history:
            self._history.record(params)
        return self._send(descriptor, None)

    def _before_request(self, descriptor: RequestDescriptor) -> EventContext:
        return self._pipeline.dispatch(Stage.BEFORE_REQUEST, {
            "kind": descriptor.kind.value,
            "url": descriptor.url,
            "method": descriptor.method,
            "request_params": descriptor.body,
        })

    def _send(self, descriptor: RequestDescriptor, on_success: Optional[SuccessCallback]) -> Future:
        settled: Future = Future()
        settled.set_running_or_notify_cancel()

        LOGGER.info("Sending %s request: %s %s", descriptor.kind.value, descriptor.method, descriptor.url)
        try:
            future = self._transport.send(descriptor.url, descriptor.method, descriptor.body_dict())
        except TransportError as exc:
            future = Future()
            future.set_exception(exc)
        except Exception:
            if descriptor.kind is RequestKind.READ:
                self._set_locked(False)
            raise

        future.add_done_callback(
            lambda done: self._invoke(partial(self._on_transport_done, descriptor, on_success, settled, done))
        )
        return settled

    def _on_transport_done(
        self,
        descriptor: RequestDescriptor,
        on_success: Optional[SuccessCallback],
        settled: Future,
        future: Future,
    ) -> None:
        outcome = self._outcome_of(future)
        try:
            self.complete_request(descriptor, outcome, on_success)
        except Exception as exc:
            LOGGER.error("Processing the %s response failed: %s", descriptor.kind.value, exc)
            settled.set_exception(exc)
        else:
            settled.set_result(outcome)

    @staticmethod
    def _outcome_of(future: Future) -> RequestOutcome:
        if future.cancelled():
            return RequestOutcome(error=TransportError("Request aborted", aborted=True))
        exc = future.exception()
        if isinstance(exc, TransportError):
            return RequestOutcome(error=exc)
        if exc is not None:
            return RequestOutcome(error=TransportError(str(exc) or exc.__class__.__name__))
        result = future.result()
        if isinstance(result, TransportResponse):
            return RequestOutcome(response=result)
        try:
            status, body = result
        except (TypeError, ValueError):
            return RequestOutcome(error=TransportError(f"Malformed transport result: {result!r}"))
        return RequestOutcome(response=TransportResponse(status=status, body=body))

    def _handle_transport_failure(
        self,
        descriptor: RequestDescriptor,
        outcome: RequestOutcome,
        context: EventContext,
    ) -> None:
        self._pipeline.dispatch(Stage.ERROR_RESPONSE, context)
        if context.stopped:
            return
        error = outcome.error
        if error.aborted:
            LOGGER.info("%s request to %s aborted", descriptor.kind.value, descriptor.url)
            return
        notice = TRANSPORT_FAILURE_NOTICE.get(self._config.locale, TRANSPORT_FAILURE_NOTICE[DEFAULT_LOCALE])
        self._errors.handle(
            error,
            ErrorSeverity.ERROR,
            context=self._error_context(descriptor, outcome),
            message=notice,
        )

    def _apply_read_result(self, data: Any) -> None:
        if not isinstance(data, Mapping):
            LOGGER.warning("Read response carried no data object")
            data = {}
        rows = list(data.get(CONTENTS_FIELD) or [])
        self._row_store.apply_fetched_rows(rows)

        total = len(rows)
        pagination = data.get(PAGINATION_FIELD)
        if pagination:
            snapshot = PaginationSnapshot.from_response(pagination)
            self._state.current_page = max(1, snapshot.page)
            total = snapshot.total_count
            if self._pagination is not None:
                self._pagination.apply_snapshot(snapshot, self._state.items_per_page)

        LOGGER.debug("Applied %d fetched row(s), page %d", len(rows), self._state.current_page)
        self._bus.publish(RowsFetchedEvent(
            row_count=len(rows),
            page=self._state.current_page,
            total_count=total,
        ))

    def _on_page_requested(self, page: int) -> None:
        if page != self._state.current_page:
            self.initiate_read(page, reuse_last_form_data=True)

    def _set_locked(self, locked: bool) -> None:
        if self._state.locked == locked:
            return
        self._state.locked = locked
        LOGGER.debug("Orchestrator %s", "locked" if locked else "unlocked")
        self.lock_changed.emit(locked)

    @staticmethod
    def _error_context(descriptor: RequestDescriptor, outcome: RequestOutcome) -> dict:
        return {
            "kind": descriptor.kind.value,
            "url": descriptor.url,
            "http_status": outcome.http_status,
        }
