from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True, slots=True)
class Account:
    """User account known to the directory.

    Attributes:
        id: Numeric account id, the canonical identifier used in predicates.
        username: Login name, unique when present.
        full_name: Display name; several accounts may share it.
        email: Preferred email address.
        active: Inactive accounts are never returned by reference resolution.
    """

    id: int
    username: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    active: bool = True


@dataclass(frozen=True, slots=True)
class GroupReference:
    """Lightweight (uuid, name) pair returned by group suggestions."""

    uuid: str
    name: str


@dataclass(frozen=True, slots=True)
class Group:
    """Access-control group as stored in the directory.

    Attributes:
        uuid: Stable group UUID, the canonical identifier used in predicates.
        name: Unique group name.
        description: Free-text description.
        owner_uuid: UUID of the owning group.
        visible_to_all: Whether every user may see the group.
        members: Account ids of direct members.
        subgroups: UUIDs of directly included groups.
    """

    uuid: str
    name: str
    description: Optional[str] = None
    owner_uuid: Optional[str] = None
    visible_to_all: bool = False
    members: Sequence[int] = ()
    subgroups: Sequence[str] = ()

    def reference(self) -> GroupReference:
        return GroupReference(uuid=self.uuid, name=self.name)
