"""Tests for BaseViewModel — pure Python, no Qt dependency."""

from dataclasses import dataclass

from gridnet.events.bus import Event, EventBus
from gridnet.gui.viewmodels.base import BaseViewModel


@dataclass(kw_only=True)
class _FakeEvent(Event):
    payload: str = ""


class TestBaseViewModel:
    def test_subscribe_event_receives_events(self):
        bus = EventBus()
        vm = BaseViewModel()
        received = []

        vm.subscribe_event(bus, _FakeEvent, lambda e: received.append(e.payload))
        bus.publish(_FakeEvent(payload="hello"))

        assert received == ["hello"]

    def test_dispose_cancels_subscriptions(self):
        bus = EventBus()
        vm = BaseViewModel()
        received = []

        vm.subscribe_event(bus, _FakeEvent, lambda e: received.append(e.payload))
        bus.publish(_FakeEvent(payload="before"))
        vm.dispose()
        bus.publish(_FakeEvent(payload="after"))

        assert received == ["before"]
        assert vm.disposed is True

    def test_dispose_clears_subscription_list(self):
        bus = EventBus()
        vm = BaseViewModel()
        vm.subscribe_event(bus, _FakeEvent, lambda e: None)
        assert len(vm._subscriptions) == 1

        vm.dispose()
        assert len(vm._subscriptions) == 0

    def test_dispose_only_touches_own_subscriptions(self):
        bus = EventBus()
        vm = BaseViewModel()
        outside = []
        bus.subscribe(_FakeEvent, lambda e: outside.append(e.payload))
        vm.subscribe_event(bus, _FakeEvent, lambda e: None)

        vm.dispose()
        bus.publish(_FakeEvent(payload="kept"))

        assert outside == ["kept"]
