"""Run response processing on the thread that owns the grid."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, Signal, Slot


class QtMainThreadInvoker(QObject):
    """Callable that queues work onto this object's thread.

    Pass an instance as ``invoke`` to the orchestrator: transport futures
    complete on worker threads, and emitting ``_queued`` from there delivers
    the callable through the owning thread's event loop.  Emitting from the
    owning thread itself still goes through the queue, so the behaviour does
    not depend on where a future happens to settle.
    """

    _queued = Signal(object)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._queued.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def __call__(self, func: Callable[[], None]) -> None:
        self._queued.emit(func)

    @Slot(object)
    def _run(self, func: Callable[[], None]) -> None:
        func()
