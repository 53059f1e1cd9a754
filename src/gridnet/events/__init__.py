from .bus import Event, EventBus, Subscription
from .grid_events import RowsFetchedEvent, SortChangedEvent
from .pipeline import EventContext, EventPipeline, Stage

__all__ = [
    "Event",
    "EventBus",
    "EventContext",
    "EventPipeline",
    "RowsFetchedEvent",
    "SortChangedEvent",
    "Stage",
    "Subscription",
]
