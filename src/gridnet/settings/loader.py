"""Turn validated configuration data into a :class:`NetConfig`."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from jsonschema import ValidationError

from ..domain.models import RequestKind
from ..errors import ConfigurationLoadError, ConfigurationValidationError
from .schema import merge_with_defaults


@dataclass(frozen=True)
class TransportSettings:
    base_url: Optional[str] = None
    timeout: float = 30.0
    headers: Mapping[str, str] = field(default_factory=dict)
    max_workers: int = 2


@dataclass(frozen=True)
class NetConfig:
    endpoints: Mapping[str, str]
    items_per_page: int
    issue_initial_read: bool = True
    enable_history: bool = True
    locale: str = "en"
    transport: TransportSettings = field(default_factory=TransportSettings)

    def endpoint(self, kind: RequestKind | str) -> Optional[str]:
        """URL configured for *kind*, or ``None`` when it is blank."""
        if isinstance(kind, RequestKind):
            key = kind.profile.endpoint_key
        else:
            key = kind
        return self.endpoints.get(key) or None


def config_from_mapping(data: Mapping[str, Any] | None) -> NetConfig:
    """Validate *data* (partial is fine) and build a :class:`NetConfig`."""

    try:
        merged = merge_with_defaults(dict(data) if data else None)
    except ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise ConfigurationValidationError(f"{location}: {exc.message}") from exc

    transport = merged["transport"]
    return NetConfig(
        endpoints={key: value or "" for key, value in merged["api"].items()},
        items_per_page=merged["items_per_page"],
        issue_initial_read=merged["issue_initial_read"],
        enable_history=merged["enable_history"],
        locale=merged["locale"],
        transport=TransportSettings(
            base_url=transport.get("base_url"),
            timeout=float(transport["timeout"]),
            headers=dict(transport.get("headers") or {}),
            max_workers=transport["max_workers"],
        ),
    )


def load_config(path: Path) -> NetConfig:
    """Read a JSON configuration file."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationLoadError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationLoadError(f"{path}: top-level value must be an object")
    return config_from_mapping(payload)
