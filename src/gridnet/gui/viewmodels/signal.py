"""Pure Python signals for view-model state — no Qt dependency.

``Signal`` is the observer hook used between gridnet components and the
host widget; ``ObservableProperty`` wraps a value and reports changes.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal:
    """Ordered list of handlers called on :meth:`emit`.

    Thread-safe: handler mutations and the snapshot taken by :meth:`emit` are
    guarded by a lock.  Handlers themselves run on the emitting thread.
    A handler that raises is logged and skipped; later handlers still run.
    Code that needs failures to propagate (the request pipeline) does not go
    through ``Signal``.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> Callable:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal handler %r failed: %s", handler, exc)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty(Generic[T]):
    """Value holder that emits ``changed(new_value, old_value)`` on change."""

    def __init__(self, initial_value: T = None) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if self._value != new_value:
            old_value = self._value
            self._value = new_value
            self.changed.emit(new_value, old_value)
