from dataclasses import dataclass

from .bus import Event


@dataclass(kw_only=True)
class SortChangedEvent(Event):
    """Published by the row store whenever the grid's sort order changes.

    ``is_require_fetch`` is set when the new order can only be produced by the
    remote service (server-side sorting); local re-sorts leave it ``False``.
    """
    column_name: str
    is_ascending: bool = True
    is_require_fetch: bool = False


@dataclass(kw_only=True)
class RowsFetchedEvent(Event):
    row_count: int = 0
    page: int = 1
    total_count: int = 0
