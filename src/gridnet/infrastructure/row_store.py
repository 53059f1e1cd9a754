"""In-memory row store with change tracking.

Keeps the rows of the current page together with a copy of what the service
last sent, so the created/updated/deleted sets can be derived at any time.
Used headless (CLI, tests) and as the reference for host implementations.
"""

from __future__ import annotations

import itertools
import logging
from copy import deepcopy
from typing import Any, Dict, Iterable, List, Mapping, Optional

from gridnet.application.interfaces import IRowStore
from gridnet.config import ROW_KEY_COLUMN
from gridnet.domain.models import ModifiedRowSets, Row
from gridnet.events.bus import EventBus
from gridnet.events.grid_events import SortChangedEvent

LOGGER = logging.getLogger(__name__)


class InMemoryRowStore(IRowStore):
    def __init__(
        self,
        rows: Optional[Iterable[Mapping[str, Any]]] = None,
        *,
        form_data: Optional[Mapping[str, Any]] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._bus = event_bus
        self._keys = itertools.count()
        self._rows: List[Row] = []
        self._original: Dict[int, Row] = {}
        self._deleted: List[tuple[Row, bool]] = []
        self._checked: set[int] = set()
        self._form: Dict[str, Any] = dict(form_data or {})

        # Transient view state
        self.focused_key: Optional[int] = None
        self.reset_count = 0
        self.sort_column: Optional[str] = None
        self.sort_ascending: Optional[bool] = None

        if rows is not None:
            self.apply_fetched_rows(list(rows))

    # -- IRowStore ---------------------------------------------------------

    def reset_transient_state(self) -> None:
        self.focused_key = None
        self.reset_count += 1

    def apply_fetched_rows(self, rows: List[Row]) -> None:
        self._keys = itertools.count()
        self._rows = [self._keyed(row) for row in rows]
        self._original = {row[ROW_KEY_COLUMN]: deepcopy(row) for row in self._rows}
        self._deleted.clear()
        self._checked.clear()
        LOGGER.debug("Row store now holds %d fetched row(s)", len(self._rows))

    def get_modified_row_sets(self, only_checked: bool) -> ModifiedRowSets:
        sets = ModifiedRowSets()
        for row in self._rows:
            key = row[ROW_KEY_COLUMN]
            if only_checked and key not in self._checked:
                continue
            original = self._original.get(key)
            if original is None:
                sets.created.append(deepcopy(row))
            elif original != row:
                sets.updated.append(deepcopy(row))
        for row, was_checked in self._deleted:
            if only_checked and not was_checked:
                continue
            sets.deleted.append(deepcopy(row))
        return sets

    def get_all_rows(self, only_checked: bool) -> List[Row]:
        return [
            deepcopy(row)
            for row in self._rows
            if not only_checked or row[ROW_KEY_COLUMN] in self._checked
        ]

    def capture_form_snapshot(self) -> Dict[str, Any]:
        return dict(self._form)

    def apply_form_snapshot(self, data: Mapping[str, Any]) -> None:
        self._form.update(data)

    def set_sort_state(self, column_name: Optional[str], ascending: Optional[bool]) -> None:
        self.sort_column = column_name
        self.sort_ascending = ascending

    # -- editing -----------------------------------------------------------

    @property
    def rows(self) -> List[Row]:
        return [deepcopy(row) for row in self._rows]

    def append_row(self, row: Mapping[str, Any], checked: bool = False) -> int:
        keyed = self._keyed(row)
        self._rows.append(keyed)
        key = keyed[ROW_KEY_COLUMN]
        if checked:
            self._checked.add(key)
        return key

    def set_value(self, row_key: int, column: str, value: Any) -> None:
        if column == ROW_KEY_COLUMN:
            raise ValueError("The row key cannot be edited")
        self._row(row_key)[column] = value

    def remove_row(self, row_key: int) -> None:
        row = self._row(row_key)
        self._rows.remove(row)
        was_checked = row_key in self._checked
        self._checked.discard(row_key)
        # Rows created locally vanish without a trace.
        original = self._original.pop(row_key, None)
        if original is not None:
            self._deleted.append((original, was_checked))

    def check(self, row_key: int, checked: bool = True) -> None:
        self._row(row_key)
        if checked:
            self._checked.add(row_key)
        else:
            self._checked.discard(row_key)

    def check_all(self, checked: bool = True) -> None:
        if checked:
            self._checked = {row[ROW_KEY_COLUMN] for row in self._rows}
        else:
            self._checked.clear()

    def sort(self, column_name: str, ascending: bool = True, require_fetch: bool = False) -> None:
        """Re-order the rows, or ask the service to when *require_fetch*."""
        if not require_fetch:
            self._rows.sort(
                key=lambda row: (row.get(column_name) is None, row.get(column_name)),
                reverse=not ascending,
            )
            self.set_sort_state(column_name, ascending)
        if self._bus is not None:
            self._bus.publish(SortChangedEvent(
                column_name=column_name,
                is_ascending=ascending,
                is_require_fetch=require_fetch,
            ))

    # -- internal ----------------------------------------------------------

    def _keyed(self, row: Mapping[str, Any]) -> Row:
        keyed = {key: value for key, value in row.items() if key != ROW_KEY_COLUMN}
        keyed[ROW_KEY_COLUMN] = next(self._keys)
        return keyed

    def _row(self, row_key: int) -> Row:
        for row in self._rows:
            if row[ROW_KEY_COLUMN] == row_key:
                return row
        raise KeyError(row_key)
