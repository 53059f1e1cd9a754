from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, Dict, List, Mapping, Optional

from gridnet.domain.models import ModifiedRowSets, Row, TransportResponse


class IRowStore(ABC):
    """The grid's row data and its search form, as seen by the network layer."""

    @abstractmethod
    def reset_transient_state(self) -> None:
        """Drop per-fetch view state (scroll anchors, focus, editing) before a read."""
        pass

    @abstractmethod
    def apply_fetched_rows(self, rows: List[Row]) -> None:
        """Replace the rows with a fresh result set and mark it as unmodified."""
        pass

    @abstractmethod
    def get_modified_row_sets(self, only_checked: bool) -> ModifiedRowSets:
        pass

    @abstractmethod
    def get_all_rows(self, only_checked: bool) -> List[Row]:
        pass

    @abstractmethod
    def capture_form_snapshot(self) -> Dict[str, Any]:
        """Return the current values of the search form."""
        pass

    @abstractmethod
    def apply_form_snapshot(self, data: Mapping[str, Any]) -> None:
        """Write *data* into the search form."""
        pass

    def set_sort_state(self, column_name: Optional[str], ascending: Optional[bool]) -> None:
        """Mirror the sort order a read was issued with (optional)."""
        return None


class ITransport(ABC):
    """Delivers a request to the remote service.

    The returned future resolves with a :class:`TransportResponse` or fails
    with :class:`gridnet.errors.TransportError`.  A cancelled future counts
    as an aborted call.
    """

    @abstractmethod
    def send(self, url: str, method: str, body: Mapping[str, Any]) -> "Future[TransportResponse]":
        pass

    def close(self) -> None:
        return None


class IPrompter(ABC):
    """Blocking user dialogs."""

    @abstractmethod
    def ask(self, message: str) -> bool:
        """Ask a yes/no question and return the answer."""
        pass

    @abstractmethod
    def inform(self, message: str) -> None:
        pass

    @abstractmethod
    def alert(self, message: str) -> None:
        """Show a failure notice."""
        pass
