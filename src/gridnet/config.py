"""Default configuration values and wire-format names for gridnet."""

from __future__ import annotations

from typing import Final

DEFAULT_ITEMS_PER_PAGE: Final[int] = 500
DEFAULT_METHOD: Final[str] = "POST"
READ_METHOD: Final[str] = "POST"
DEFAULT_LOCALE: Final[str] = "en"

# Column that carries the grid's own row identity.  Sorting on it means
# "no explicit order", so the sort parameters are dropped from the request.
ROW_KEY_COLUMN: Final[str] = "rowKey"

# ---------------------------------------------------------------------------
# Request parameter names understood by the remote service
# ---------------------------------------------------------------------------

PAGE_PARAM: Final[str] = "page"
PER_PAGE_PARAM: Final[str] = "perPage"
SORT_COLUMN_PARAM: Final[str] = "sortColumn"
SORT_ASCENDING_PARAM: Final[str] = "sortAscending"

CREATED_LIST_KEY: Final[str] = "createList"
UPDATED_LIST_KEY: Final[str] = "updateList"
DELETED_LIST_KEY: Final[str] = "deleteList"
ROW_LIST_KEY: Final[str] = "rowList"

# ---------------------------------------------------------------------------
# Response field names
# ---------------------------------------------------------------------------

RESULT_FIELD: Final[str] = "result"
MESSAGE_FIELD: Final[str] = "message"
DATA_FIELD: Final[str] = "data"
CONTENTS_FIELD: Final[str] = "contents"
PAGINATION_FIELD: Final[str] = "pagination"
PAGINATION_PAGE_FIELD: Final[str] = "page"
PAGINATION_TOTAL_FIELD: Final[str] = "totalCount"

# Location prefix recorded in the navigation history for reads.
HISTORY_READ_PREFIX: Final[str] = "read/"

# Pagination widgets start out with a single (empty) item until the first
# response reports the real total.
INITIAL_ITEM_COUNT: Final[int] = 1
