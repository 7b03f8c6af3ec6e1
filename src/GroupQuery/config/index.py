"""Index domain configuration: which group index schema version is active."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from GroupQuery.config.common import expect_int, get_optional_value, get_section
from GroupQuery.index.schema import SCHEMA_VERSIONS, GroupSchema, get_schema, latest_schema


@dataclass(frozen=True, slots=True)
class IndexConfig:
    """Store the validated index schema version."""

    schema_version: int

    def schema(self) -> GroupSchema:
        return get_schema(self.schema_version)


def load_index(raw: Mapping[str, Any]) -> IndexConfig:
    """Load index config; ``index.schema_version`` defaults to the latest version."""
    section = get_section(raw, "index", required=False)
    version = get_optional_value(section, "schema_version", latest_schema().version)
    return IndexConfig(schema_version=expect_int(version, "index.schema_version"))


def check_index(config: IndexConfig) -> None:
    """Validate index constraints.

    Raises:
        ValueError: If the schema version is unknown.
    """
    if config.schema_version not in SCHEMA_VERSIONS:
        raise ValueError(f"index.schema_version must be one of {sorted(SCHEMA_VERSIONS)}")
