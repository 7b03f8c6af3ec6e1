"""Public configuration API for GroupQuery."""

from __future__ import annotations

from GroupQuery.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from GroupQuery.config.directory import DirectoryConfig
from GroupQuery.config.index import IndexConfig
from GroupQuery.config.runtime import RuntimeConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "RuntimeConfig",
    "IndexConfig",
    "DirectoryConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
