"""Group index schema versions.

Deployments run different index versions during a rolling upgrade. The query
builder consults the active schema before offering operators that need a
field added in a later version.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class GroupField(str, Enum):
    """Fields a group index may expose."""

    ID = "id"
    UUID = "uuid"
    OWNER_UUID = "owner_uuid"
    NAME = "name"
    NAME_PART = "name_part"
    DESCRIPTION = "description"
    IS_VISIBLE_TO_ALL = "is_visible_to_all"
    CREATED_ON = "created_on"
    MEMBER = "member"
    SUBGROUP = "subgroup"
    REF_STATE = "ref_state"


class IndexSchema(Protocol):
    """Read-only view of an index schema."""

    version: int

    def has_field(self, field: GroupField) -> bool:
        """Return True if the index stores ``field``."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class GroupSchema:
    """Concrete group index schema: a version number and its field set."""

    version: int
    fields: frozenset[GroupField]

    def has_field(self, field: GroupField) -> bool:
        return field in self.fields

    def extend(self, version: int, *added: GroupField) -> GroupSchema:
        """Return the next schema version with ``added`` fields."""
        if version <= self.version:
            raise ValueError(f"Schema version must increase: {version} <= {self.version}")
        return GroupSchema(version=version, fields=self.fields | frozenset(added))


_V2 = GroupSchema(
    version=2,
    fields=frozenset(
        {
            GroupField.ID,
            GroupField.UUID,
            GroupField.OWNER_UUID,
            GroupField.NAME,
            GroupField.NAME_PART,
            GroupField.DESCRIPTION,
            GroupField.IS_VISIBLE_TO_ALL,
        }
    ),
)
_V3 = _V2.extend(3, GroupField.CREATED_ON)
_V4 = _V3.extend(4, GroupField.MEMBER, GroupField.SUBGROUP)
_V5 = _V4.extend(5, GroupField.REF_STATE)

SCHEMA_VERSIONS: dict[int, GroupSchema] = {schema.version: schema for schema in (_V2, _V3, _V4, _V5)}


def get_schema(version: int) -> GroupSchema:
    """Look up a known schema version.

    Raises:
        ValueError: If ``version`` is not a known schema version.
    """
    schema = SCHEMA_VERSIONS.get(version)
    if schema is None:
        raise ValueError(f"Unknown group index schema version: {version}")
    return schema


def latest_schema() -> GroupSchema:
    return SCHEMA_VERSIONS[max(SCHEMA_VERSIONS)]
