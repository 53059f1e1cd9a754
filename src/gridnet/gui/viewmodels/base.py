"""BaseViewModel — tracks bus subscriptions so ``dispose()`` can drop them."""

from __future__ import annotations

from typing import Callable, Type

from gridnet.events.bus import EventBus, Subscription


class BaseViewModel:
    def __init__(self) -> None:
        self._subscriptions: list[tuple[EventBus, Subscription]] = []
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
    ) -> Subscription:
        """Subscribe to an event type and track the subscription."""
        sub = event_bus.subscribe(event_type, handler)
        self._subscriptions.append((event_bus, sub))
        return sub

    def dispose(self) -> None:
        """Unsubscribe everything this view-model subscribed to."""
        for bus, sub in self._subscriptions:
            bus.unsubscribe(sub)
        self._subscriptions.clear()
        self._disposed = True
