from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from gridnet.config import DEFAULT_ITEMS_PER_PAGE


@dataclass
class OrchestratorState:
    """Mutable request state owned by exactly one orchestrator."""

    current_page: int = 1
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE
    locked: bool = False
    last_read_params: Optional[Dict[str, Any]] = None
    pending_form_snapshot: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        if self.current_page < 1:
            raise ValueError("current_page must be >= 1")
        if self.items_per_page <= 0:
            raise ValueError("items_per_page must be > 0")

    @property
    def start_number(self) -> int:
        """1-based ordinal of the first row shown on the current page."""
        return (self.current_page - 1) * self.items_per_page + 1
