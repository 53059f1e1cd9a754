"""Shape request bodies for mutating requests.

The body always starts from the form snapshot of the last read, so the
service sees the same search context the rows were fetched under.  Row data
is then added according to the request kind:

* delta mode (``only_modified_rows``) sends the created/updated/deleted sets
  that belong to the kind, each JSON-encoded under its own key and only when
  non-empty;
* full mode sends the entire row list under ``rowList`` as-is.

Either mode may be narrowed to checked rows.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from gridnet.application.interfaces import IRowStore
from gridnet.config import ROW_LIST_KEY
from gridnet.domain.models import MutationOptions, RequestKind, Row

LOGGER = logging.getLogger(__name__)


@dataclass
class PayloadResult:
    body: Dict[str, Any] = field(default_factory=dict)
    affected_count: int = 0


def encode_rows(rows: List[Row]) -> str:
    """Serialise *rows* the way the service expects list parameters."""
    return json.dumps(rows, ensure_ascii=False, separators=(",", ":"), default=str)


class PayloadBuilder:
    def __init__(self, row_store: IRowStore) -> None:
        self._row_store = row_store

    def build(
        self,
        kind: RequestKind,
        options: MutationOptions,
        form_snapshot: Optional[Mapping[str, Any]] = None,
    ) -> PayloadResult:
        kind = RequestKind.parse(kind)
        result = PayloadResult(body=dict(form_snapshot or {}))

        if not options.include_row_data:
            return result

        if options.only_modified_rows:
            row_sets = self._row_store.get_modified_row_sets(options.only_checked_rows)
            available = row_sets.by_list_key()
            for key in kind.profile.list_keys:
                rows = available[key]
                if rows:
                    result.body[key] = encode_rows(rows)
                    result.affected_count += len(rows)
        else:
            rows = list(self._row_store.get_all_rows(options.only_checked_rows))
            result.body[ROW_LIST_KEY] = rows
            result.affected_count = len(rows)

        LOGGER.debug(
            "Built %s payload: %d row(s), keys=%s",
            kind.value, result.affected_count, sorted(result.body),
        )
        return result
