from .core import (
    KIND_PROFILES,
    KindProfile,
    ModifiedRowSets,
    PaginationSnapshot,
    RequestKind,
    Row,
    SortSpec,
)
from .request import MutationOptions, RequestDescriptor, RequestOutcome, TransportResponse
from .state import OrchestratorState

__all__ = [
    "KIND_PROFILES",
    "KindProfile",
    "ModifiedRowSets",
    "MutationOptions",
    "OrchestratorState",
    "PaginationSnapshot",
    "RequestDescriptor",
    "RequestKind",
    "RequestOutcome",
    "Row",
    "SortSpec",
    "TransportResponse",
]
