import sys
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from gridnet.application.interfaces import IPrompter, ITransport  # noqa: E402
from gridnet.application.services.confirmation_gate import ConfirmationGate  # noqa: E402
from gridnet.application.services.history_bridge import HistoryBridge  # noqa: E402
from gridnet.application.services.pagination_bridge import PaginationBridge  # noqa: E402
from gridnet.application.services.request_orchestrator import RequestOrchestrator  # noqa: E402
from gridnet.domain.models import TransportResponse  # noqa: E402
from gridnet.errors import TransportError  # noqa: E402
from gridnet.events.bus import EventBus  # noqa: E402
from gridnet.events.pipeline import EventPipeline  # noqa: E402
from gridnet.infrastructure.row_store import InMemoryRowStore  # noqa: E402
from gridnet.settings import config_from_mapping  # noqa: E402

API = {
    "read": "/api/read",
    "create": "/api/create",
    "update": "/api/update",
    "delete": "/api/delete",
    "modify": "/api/modify",
    "download": "/api/download",
}


class FakeTransport(ITransport):
    """Transport whose calls stay pending until the test settles them."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.futures: List[Future] = []
        self.closed = False

    def send(self, url: str, method: str, body: Mapping[str, Any]) -> Future:
        self.calls.append({"url": url, "method": method, "body": dict(body)})
        future: Future = Future()
        self.futures.append(future)
        return future

    def close(self) -> None:
        self.closed = True

    @property
    def last_call(self) -> Dict[str, Any]:
        return self.calls[-1]

    def respond(self, body: Optional[Mapping[str, Any]], status: int = 200, index: int = -1) -> None:
        self.futures[index].set_result(TransportResponse(status=status, body=body))

    def fail(self, message: str = "boom", *, status: Optional[int] = 500, aborted: bool = False, index: int = -1) -> None:
        self.futures[index].set_exception(TransportError(message, status=status, aborted=aborted))


class RecordingPrompter(IPrompter):
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.questions: List[str] = []
        self.notices: List[str] = []
        self.alerts: List[str] = []

    def ask(self, message: str) -> bool:
        self.questions.append(message)
        return self.answer

    def inform(self, message: str) -> None:
        self.notices.append(message)

    def alert(self, message: str) -> None:
        self.alerts.append(message)


def read_response(rows, page: int = 1, total: Optional[int] = None) -> Dict[str, Any]:
    return {
        "result": True,
        "data": {
            "contents": rows,
            "pagination": {"page": page, "totalCount": len(rows) if total is None else total},
        },
    }


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def prompter() -> RecordingPrompter:
    return RecordingPrompter()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def row_store(bus) -> InMemoryRowStore:
    return InMemoryRowStore(form_data={"query": "apple"}, event_bus=bus)


@pytest.fixture
def net_config():
    return config_from_mapping({"api": API, "items_per_page": 20, "issue_initial_read": False})


@pytest.fixture
def make_orchestrator(net_config, row_store, transport, prompter, bus):
    def _make(config=None, **kwargs) -> RequestOrchestrator:
        kwargs.setdefault("pipeline", EventPipeline())
        kwargs.setdefault("event_bus", bus)
        kwargs.setdefault("pagination", PaginationBridge(net_config.items_per_page))
        kwargs.setdefault("history", HistoryBridge())
        cfg = config or net_config
        return RequestOrchestrator(
            cfg,
            row_store,
            transport,
            ConfirmationGate(prompter, cfg.locale),
            **kwargs,
        )

    return _make
