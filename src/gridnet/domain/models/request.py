"""Per-request value types: what is sent, and what came back."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from gridnet.config import DEFAULT_METHOD, RESULT_FIELD
from gridnet.errors import TransportError

from .core import RequestKind

_METHODS = ("GET", "POST")


@dataclass(frozen=True)
class MutationOptions:
    """Caller options for create/update/delete/modify requests."""

    url: Optional[str] = None
    method: str = DEFAULT_METHOD
    include_row_data: bool = True
    only_modified_rows: bool = True
    only_checked_rows: bool = True
    skip_confirmation: bool = False


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of one transport call."""

    kind: RequestKind
    url: str
    method: str = DEFAULT_METHOD
    body: Mapping[str, Any] = field(default_factory=dict)
    skip_confirmation: bool = False
    include_row_data: bool = True
    only_modified_rows: bool = True
    only_checked_rows: bool = True

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in _METHODS:
            raise ValueError(f"Unsupported request method: {self.method!r}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "body", MappingProxyType(dict(self.body)))

    def body_dict(self) -> dict[str, Any]:
        """Return a mutable copy of the body for the transport."""
        return dict(self.body)


@dataclass(frozen=True)
class TransportResponse:
    status: int
    body: Optional[Mapping[str, Any]] = None

    @property
    def is_success(self) -> bool:
        """Business-level success: the service answered ``result: true``."""
        return isinstance(self.body, Mapping) and self.body.get(RESULT_FIELD) is True


@dataclass(frozen=True)
class RequestOutcome:
    """Settled result of a transport call: a response or a transport error."""

    response: Optional[TransportResponse] = None
    error: Optional[TransportError] = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("RequestOutcome needs exactly one of response or error")

    @property
    def http_status(self) -> Optional[int]:
        if self.response is not None:
            return self.response.status
        return self.error.status

    @property
    def body(self) -> Optional[Mapping[str, Any]]:
        return self.response.body if self.response is not None else None

    @property
    def is_transport_failure(self) -> bool:
        return self.error is not None
