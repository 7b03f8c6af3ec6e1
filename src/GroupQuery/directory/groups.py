"""Group lookup: UUID cache and name suggestions."""

from __future__ import annotations

import threading
from typing import Protocol

from GroupQuery.core.models import Group, GroupReference
from GroupQuery.directory.store import DirectoryStore


class GroupLookup(Protocol):
    """Protocol for exact group lookup by UUID."""

    def get(self, uuid: str) -> Group | None:
        """Return the group with ``uuid`` if it exists."""
        raise NotImplementedError


class GroupSuggester(Protocol):
    """Protocol for fuzzy group lookup by name."""

    def suggest(self, name: str) -> list[GroupReference]:
        """Return candidate groups for a partial name."""
        raise NotImplementedError


class GroupCache:
    """UUID-keyed view over the directory's groups, built once on first use."""

    def __init__(self, store: DirectoryStore) -> None:
        self.store = store
        self._lock = threading.Lock()
        self._by_uuid: dict[str, Group] | None = None

    def get(self, uuid: str) -> Group | None:
        return self._index().get(uuid)

    def _index(self) -> dict[str, Group]:
        if self._by_uuid is None:
            with self._lock:
                if self._by_uuid is None:
                    self._by_uuid = {group.uuid: group for group in self.store.groups()}
        return self._by_uuid


class GroupBackend:
    """Name-based group suggestions from the directory."""

    def __init__(self, store: DirectoryStore, *, max_suggestions: int = 10) -> None:
        self.store = store
        self.max_suggestions = max_suggestions

    def suggest(self, name: str) -> list[GroupReference]:
        """Return groups whose name starts with ``name`` (case-insensitive), by name."""
        prefix = name.strip().casefold()
        if not prefix:
            return []
        matches = sorted(
            (group for group in self.store.groups() if group.name.casefold().startswith(prefix)),
            key=lambda group: group.name.casefold(),
        )
        return [group.reference() for group in matches[: self.max_suggestions]]


def find_best_suggestion(backend: GroupSuggester, name: str) -> GroupReference | None:
    """Pick one group for a user-typed name or UUID.

    A single suggestion wins outright. Among several, only an exact match on
    name (case-insensitive) or UUID is accepted; otherwise the reference is
    ambiguous and None is returned.
    """
    suggestions = backend.suggest(name)
    if len(suggestions) == 1:
        return suggestions[0]
    for ref in suggestions:
        if _is_exact_suggestion(ref, name):
            return ref
    return None


def _is_exact_suggestion(ref: GroupReference, name: str) -> bool:
    return ref.name.casefold() == name.casefold() or ref.uuid == name
