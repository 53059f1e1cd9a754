"""Core value types shared by every gridnet component."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple

from gridnet.config import (
    CREATED_LIST_KEY,
    DELETED_LIST_KEY,
    PAGINATION_PAGE_FIELD,
    PAGINATION_TOTAL_FIELD,
    ROW_KEY_COLUMN,
    UPDATED_LIST_KEY,
)
from gridnet.errors import InvalidRequestKind

Row = Dict[str, Any]


class RequestKind(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MODIFY = "modify"

    @classmethod
    def parse(cls, value: "RequestKind | str") -> "RequestKind":
        """Accept enum members, ``"create"`` or the legacy ``"createData"``."""
        if isinstance(value, cls):
            return value
        text = str(value)
        if text.endswith("Data"):
            text = text[: -len("Data")]
        try:
            return cls(text.lower())
        except ValueError:
            raise InvalidRequestKind(value, f"Unknown request kind: {value!r}") from None

    @property
    def is_mutation(self) -> bool:
        return self is not RequestKind.READ

    @property
    def profile(self) -> "KindProfile":
        return KIND_PROFILES[self]


@dataclass(frozen=True)
class KindProfile:
    """Static behaviour attached to a :class:`RequestKind`.

    ``list_keys`` names the modified-row sets a mutation of this kind sends,
    in wire order; ``action`` selects the confirmation wording.
    """

    endpoint_key: str
    list_keys: Tuple[str, ...]
    action: str


KIND_PROFILES: Mapping[RequestKind, KindProfile] = {
    RequestKind.READ: KindProfile("read", (), "read"),
    RequestKind.CREATE: KindProfile("create", (CREATED_LIST_KEY,), "create"),
    RequestKind.UPDATE: KindProfile("update", (UPDATED_LIST_KEY,), "update"),
    RequestKind.DELETE: KindProfile("delete", (DELETED_LIST_KEY,), "delete"),
    RequestKind.MODIFY: KindProfile(
        "modify",
        (CREATED_LIST_KEY, UPDATED_LIST_KEY, DELETED_LIST_KEY),
        "modify",
    ),
}


@dataclass(frozen=True)
class SortSpec:
    column_name: str
    ascending: bool = True

    @property
    def is_row_key(self) -> bool:
        return self.column_name == ROW_KEY_COLUMN


@dataclass(frozen=True)
class PaginationSnapshot:
    page: int
    total_count: int

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "PaginationSnapshot":
        return cls(
            page=int(data.get(PAGINATION_PAGE_FIELD, 1)),
            total_count=int(data.get(PAGINATION_TOTAL_FIELD, 0)),
        )


@dataclass
class ModifiedRowSets:
    """Rows changed since the last fetch, split into disjoint sets."""

    created: List[Row] = field(default_factory=list)
    updated: List[Row] = field(default_factory=list)
    deleted: List[Row] = field(default_factory=list)

    def by_list_key(self) -> Dict[str, List[Row]]:
        return {
            CREATED_LIST_KEY: self.created,
            UPDATED_LIST_KEY: self.updated,
            DELETED_LIST_KEY: self.deleted,
        }

    @property
    def is_empty(self) -> bool:
        return not (self.created or self.updated or self.deleted)
