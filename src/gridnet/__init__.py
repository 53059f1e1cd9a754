"""Network request orchestration for embeddable data grids."""

from __future__ import annotations

__version__ = "0.3.0"
