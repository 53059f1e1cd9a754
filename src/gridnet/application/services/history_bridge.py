"""HistoryBridge — bookmarkable record of issued reads.

Every read the orchestrator issues is recorded as a ``read/<query>``
location.  Moving through the history only announces the location on
:attr:`HistoryBridge.navigated`; it never re-issues a request by itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qsl, urlencode

from gridnet.config import (
    HISTORY_READ_PREFIX,
    PAGE_PARAM,
    PER_PAGE_PARAM,
    SORT_ASCENDING_PARAM,
    SORT_COLUMN_PARAM,
)
from gridnet.domain.models import SortSpec
from gridnet.gui.viewmodels.signal import Signal

LOGGER = logging.getLogger(__name__)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def to_query_string(params: Mapping[str, Any]) -> str:
    """Serialise *params* into a URL-safe query string, keeping key order."""
    pairs = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_value(item)) for item in value)
        else:
            pairs.append((key, _query_value(value)))
    return urlencode(pairs)


def from_query_string(query: str) -> Dict[str, Any]:
    """Parse a query string back into parameters; repeated keys become lists."""
    params: Dict[str, Any] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key in params:
            existing = params[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                params[key] = [existing, value]
        else:
            params[key] = value
    return params


@dataclass(frozen=True)
class ReadLocation:
    """A recorded read split back into search form, page and sort order."""

    form_data: Dict[str, Any] = field(default_factory=dict)
    page: int = 1
    per_page: Optional[int] = None
    sort: Optional[SortSpec] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ReadLocation":
        form_data = dict(params)
        page = _int_param(form_data.pop(PAGE_PARAM, None)) or 1
        per_page = _int_param(form_data.pop(PER_PAGE_PARAM, None))
        column = form_data.pop(SORT_COLUMN_PARAM, None)
        ascending = form_data.pop(SORT_ASCENDING_PARAM, True)
        sort = None
        if column:
            sort = SortSpec(str(column), _bool_param(ascending))
        return cls(form_data=form_data, page=max(1, page), per_page=per_page, sort=sort)


def _int_param(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Not an integer: {value!r}") from None


def _bool_param(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ("false", "0", "")


class HistoryBridge:
    def __init__(self) -> None:
        self.navigated = Signal()  # emits (location: str, params: dict)
        self._entries: list[str] = []
        self._cursor = -1

    def record(self, params: Mapping[str, Any]) -> str:
        """Push a location for *params* without triggering any request."""
        location = HISTORY_READ_PREFIX + to_query_string(params)
        if self.current_location == location:
            return location
        # Recording after going back drops the forward entries.
        del self._entries[self._cursor + 1:]
        self._entries.append(location)
        self._cursor = len(self._entries) - 1
        LOGGER.debug("History recorded %s", location)
        return location

    @staticmethod
    def restore(location: str) -> Dict[str, Any]:
        """Return the read parameters encoded in *location*."""
        if not location.startswith(HISTORY_READ_PREFIX):
            raise ValueError(f"Not a read location: {location!r}")
        return from_query_string(location[len(HISTORY_READ_PREFIX):])

    @classmethod
    def restore_read(cls, location: str) -> ReadLocation:
        """Like :meth:`restore`, with paging and sort decoded to their types."""
        return ReadLocation.from_params(cls.restore(location))

    def go_back(self) -> bool:
        """Step back one entry. Returns ``True`` if navigation occurred."""
        if self._cursor > 0:
            self._cursor -= 1
            self._announce()
            return True
        return False

    def go_forward(self) -> bool:
        if self._cursor < len(self._entries) - 1:
            self._cursor += 1
            self._announce()
            return True
        return False

    @property
    def current_location(self) -> Optional[str]:
        if self._cursor >= 0:
            return self._entries[self._cursor]
        return None

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def can_go_back(self) -> bool:
        return self._cursor > 0

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = -1

    def _announce(self) -> None:
        location = self._entries[self._cursor]
        self.navigated.emit(location, self.restore(location))
