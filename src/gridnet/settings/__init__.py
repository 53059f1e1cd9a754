from .loader import NetConfig, TransportSettings, config_from_mapping, load_config
from .schema import CONFIG_SCHEMA, DEFAULT_CONFIG, merge_with_defaults, validate_config

__all__ = [
    "CONFIG_SCHEMA",
    "DEFAULT_CONFIG",
    "NetConfig",
    "TransportSettings",
    "config_from_mapping",
    "load_config",
    "merge_with_defaults",
    "validate_config",
]
