"""Schema helpers for the grid network configuration."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import DEFAULT_ITEMS_PER_PAGE, DEFAULT_LOCALE

_ENDPOINT = {"type": ["string", "null"]}

CONFIG_SCHEMA: dict[str, Any] = {
    "$id": "gridnet/config.schema.json",
    "type": "object",
    "required": ["schema", "api", "items_per_page"],
    "properties": {
        "schema": {"const": "gridnet/config@1"},
        "api": {
            "type": "object",
            "properties": {
                "read": _ENDPOINT,
                "create": _ENDPOINT,
                "update": _ENDPOINT,
                "delete": _ENDPOINT,
                "modify": _ENDPOINT,
                "download": _ENDPOINT,
                "download_all": _ENDPOINT,
            },
            "additionalProperties": False,
        },
        "items_per_page": {"type": "integer", "minimum": 1},
        "issue_initial_read": {"type": "boolean"},
        "enable_history": {"type": "boolean"},
        "locale": {"type": "string", "enum": ["en", "ko"]},
        "transport": {
            "type": "object",
            "properties": {
                "base_url": {"type": ["string", "null"]},
                "timeout": {"type": "number", "exclusiveMinimum": 0},
                "headers": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                },
                "max_workers": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}

DEFAULT_CONFIG: dict[str, Any] = {
    "schema": "gridnet/config@1",
    "api": {
        "read": "",
        "create": "",
        "update": "",
        "delete": "",
        "modify": "",
        "download": "",
        "download_all": "",
    },
    "items_per_page": DEFAULT_ITEMS_PER_PAGE,
    "issue_initial_read": True,
    "enable_history": True,
    "locale": DEFAULT_LOCALE,
    "transport": {
        "base_url": None,
        "timeout": 30.0,
        "headers": {},
        "max_workers": 2,
    },
}

# Keys the original add-on used; accepted so existing option blocks load.
_LEGACY_KEYS: dict[str, str] = {
    "perPage": "items_per_page",
    "initialRequest": "issue_initial_read",
    "enableAjaxHistory": "enable_history",
}
_LEGACY_API_KEYS: dict[str, str] = {
    "readData": "read",
    "createData": "create",
    "updateData": "update",
    "deleteData": "delete",
    "modifyData": "modify",
    "downloadData": "download",
    "downloadAllData": "download_all",
}

_validator = Draft202012Validator(CONFIG_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_CONFIG` and validate the result."""

    merged = deepcopy(DEFAULT_CONFIG)
    if data:
        for key, value in data.items():
            key = _LEGACY_KEYS.get(key, key)
            if key in ("api", "transport") and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    if key == "api":
                        sub_key = _LEGACY_API_KEYS.get(sub_key, sub_key)
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_config(data: dict[str, Any]) -> None:
    """Validate *data* against the configuration schema."""

    _validator.validate(data)


__all__ = ["CONFIG_SCHEMA", "DEFAULT_CONFIG", "merge_with_defaults", "validate_config"]
