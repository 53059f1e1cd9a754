"""Stoppable, staged event pipeline for the request lifecycle.

Every request passes through fixed stages::

    beforeRequest -> response -> (successResponse | failResponse | errorResponse)

Observers registered for a stage all receive the same :class:`EventContext`.
Calling :meth:`EventContext.stop` latches the context: observers registered
after the stopping one are skipped and the code that dispatched the stage
abandons the rest of its work for that request.

The stop flag is the only thing observers may change.  Payloads are frozen
copies (nested mappings become read-only mappings and lists become tuples),
so nothing an observer holds is shared with the request being processed.
An observer that raises propagates straight to the caller that triggered the
dispatch; there is no isolation between observers here (compare
:class:`gridnet.events.bus.EventBus`).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

LOGGER = logging.getLogger(__name__)


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of mapping and list structures in *value*."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


class Stage(str, Enum):
    BEFORE_REQUEST = "beforeRequest"
    RESPONSE = "response"
    SUCCESS_RESPONSE = "successResponse"
    FAIL_RESPONSE = "failResponse"
    ERROR_RESPONSE = "errorResponse"

    @classmethod
    def parse(cls, value: "Stage | str") -> "Stage":
        if isinstance(value, cls):
            return value
        for stage in cls:
            if value in (stage.value, stage.name, stage.name.lower()):
                return stage
        raise ValueError(f"Unknown pipeline stage: {value!r}")


class EventContext:
    """Payload plus one-way stop latch shared by the observers of a dispatch."""

    __slots__ = ("_payload", "_stopped", "_stage")

    def __init__(self, payload: Optional[Mapping[str, Any]] = None) -> None:
        self._payload = freeze(payload or {})
        self._stopped = False
        self._stage: Optional[Stage] = None

    @property
    def payload(self) -> Mapping[str, Any]:
        return self._payload

    @property
    def stage(self) -> Optional[Stage]:
        """The stage currently (or most recently) dispatching this context."""
        return self._stage

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        self._stopped = True

    def is_stopped(self) -> bool:
        return self._stopped

    def __getitem__(self, key: str) -> Any:
        return self._payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self._payload.get(key, default)

    def __repr__(self) -> str:
        stage = self._stage.value if self._stage else None
        return f"EventContext(stage={stage!r}, stopped={self._stopped}, payload={dict(self._payload)!r})"


Observer = Callable[[EventContext], Any]


class EventPipeline:
    """Registry of observers per :class:`Stage`."""

    def __init__(self) -> None:
        self._observers: Dict[Stage, List[Observer]] = defaultdict(list)

    def on(self, stage: Stage | str, observer: Observer) -> Observer:
        """Register *observer* for *stage*; returns it for decorator use."""
        self._observers[Stage.parse(stage)].append(observer)
        return observer

    def off(self, stage: Stage | str, observer: Observer) -> None:
        """Remove *observer* from *stage*. Raises ``ValueError`` if absent."""
        self._observers[Stage.parse(stage)].remove(observer)

    def observer_count(self, stage: Stage | str) -> int:
        return len(self._observers[Stage.parse(stage)])

    def clear(self) -> None:
        self._observers.clear()

    def dispatch(
        self,
        stage: Stage | str,
        context: EventContext | Mapping[str, Any] | None = None,
    ) -> EventContext:
        """Run the observers of *stage* in registration order.

        *context* may be an existing context, to continue a dispatch chain, or
        a plain mapping that becomes the payload of a fresh one.  Dispatching
        an already stopped context runs no observers at all.
        """
        stage = Stage.parse(stage)
        if not isinstance(context, EventContext):
            context = EventContext(context)
        context._stage = stage

        for observer in list(self._observers[stage]):
            if context.stopped:
                break
            observer(context)

        if context.stopped:
            LOGGER.debug("Pipeline stopped at %s", stage.value)
        return context
