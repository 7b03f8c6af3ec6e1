"""Predicate tree over the Group entity.

Leaf predicates always carry validated, resolved parameters: account ids
instead of names, group UUIDs instead of group names. The tree is handed to
the index executor as-is.

Every node renders back to query syntax via ``str()`` and to a plain mapping
via ``to_dict()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Union

from GroupQuery.core.errors import ErrorKind, QueryParseError


FIELD_UUID = "uuid"
FIELD_DESCRIPTION = "description"
FIELD_INNAME = "inname"
FIELD_NAME = "name"
FIELD_IS = "is"
FIELD_MEMBER = "member"
FIELD_SUBGROUP = "subgroup"
FIELD_LIMIT = "limit"

_SUBSTRING_FIELDS = frozenset({FIELD_INNAME, FIELD_DESCRIPTION})


def _quote(value: str) -> str:
    if value and not any(ch.isspace() or ch in '()":' for ch in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True, slots=True)
class FieldPredicate:
    """Equality (uuid, name) or substring (inname, description) match on a field."""

    field: str
    value: str

    @property
    def substring(self) -> bool:
        return self.field in _SUBSTRING_FIELDS

    def children(self) -> tuple[Predicate, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "field",
            "field": self.field,
            "match": "substring" if self.substring else "exact",
            "value": self.value,
        }

    def __str__(self) -> str:
        return f"{self.field}:{_quote(self.value)}"


@dataclass(frozen=True, slots=True)
class MemberPredicate:
    """Matches groups that directly contain the account."""

    account_id: int

    def children(self) -> tuple[Predicate, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": "member", "account_id": self.account_id}

    def __str__(self) -> str:
        return f"{FIELD_MEMBER}:{self.account_id}"


@dataclass(frozen=True, slots=True)
class SubgroupPredicate:
    """Matches groups that directly include the group with this UUID."""

    group_uuid: str

    def children(self) -> tuple[Predicate, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": "subgroup", "group_uuid": self.group_uuid}

    def __str__(self) -> str:
        return f"{FIELD_SUBGROUP}:{_quote(self.group_uuid)}"


@dataclass(frozen=True, slots=True)
class VisibleToAllPredicate:
    def children(self) -> tuple[Predicate, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": "is", "value": "visibletoall"}

    def __str__(self) -> str:
        return f"{FIELD_IS}:visibletoall"


@dataclass(frozen=True, slots=True)
class LimitPredicate:
    """Caps the number of groups the executor returns."""

    limit: int

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise QueryParseError(f"limit must be positive: {self.limit}", kind=ErrorKind.MALFORMED_VALUE)

    def children(self) -> tuple[Predicate, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": "limit", "limit": self.limit}

    def __str__(self) -> str:
        return f"{FIELD_LIMIT}:{self.limit}"


@dataclass(frozen=True, slots=True)
class AndPredicate:
    operands: tuple[Predicate, ...]

    def __post_init__(self) -> None:
        if not self.operands:
            raise ValueError("AND requires at least one operand")

    def children(self) -> tuple[Predicate, ...]:
        return self.operands

    def to_dict(self) -> dict[str, Any]:
        return {"type": "and", "children": [child.to_dict() for child in self.operands]}

    def __str__(self) -> str:
        return "(" + " AND ".join(str(child) for child in self.operands) + ")"


@dataclass(frozen=True, slots=True)
class OrPredicate:
    operands: tuple[Predicate, ...]

    def __post_init__(self) -> None:
        if not self.operands:
            raise ValueError("OR requires at least one operand")

    def children(self) -> tuple[Predicate, ...]:
        return self.operands

    def to_dict(self) -> dict[str, Any]:
        return {"type": "or", "children": [child.to_dict() for child in self.operands]}

    def __str__(self) -> str:
        return "(" + " OR ".join(str(child) for child in self.operands) + ")"


@dataclass(frozen=True, slots=True)
class NotPredicate:
    operand: Predicate

    def children(self) -> tuple[Predicate, ...]:
        return (self.operand,)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "not", "child": self.operand.to_dict()}

    def __str__(self) -> str:
        return f"-{self.operand}"


Predicate = Union[
    FieldPredicate,
    MemberPredicate,
    SubgroupPredicate,
    VisibleToAllPredicate,
    LimitPredicate,
    AndPredicate,
    OrPredicate,
    NotPredicate,
]


def or_(*operands: Predicate) -> Predicate:
    """Combine operands with OR; a single operand is returned unchanged."""
    if len(operands) == 1:
        return operands[0]
    return OrPredicate(tuple(operands))


def and_(*operands: Predicate) -> Predicate:
    """Combine operands with AND; a single operand is returned unchanged."""
    if len(operands) == 1:
        return operands[0]
    return AndPredicate(tuple(operands))


def walk(predicate: Predicate) -> Iterator[Predicate]:
    """Yield ``predicate`` and all of its descendants, depth first."""
    yield predicate
    for child in predicate.children():
        yield from walk(child)


def effective_limit(predicate: Predicate) -> int | None:
    """Return the smallest limit found anywhere in the tree, or None."""
    limits = [node.limit for node in walk(predicate) if isinstance(node, LimitPredicate)]
    return min(limits) if limits else None
