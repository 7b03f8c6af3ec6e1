"""Directory layer for GroupQuery.

Reference resolvers that turn account and group references typed by users
into the canonical ids the index understands.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from GroupQuery.directory.accounts import AccountLookup, AccountResolver
from GroupQuery.directory.groups import (
    GroupBackend,
    GroupCache,
    GroupLookup,
    GroupSuggester,
    find_best_suggestion,
)
from GroupQuery.directory.store import DirectoryStore, DirectoryUnavailableError
from GroupQuery.utils.log import log

if TYPE_CHECKING:
    from GroupQuery.config import AppConfig


def create_directory(config: AppConfig) -> DirectoryStore:
    """Create the directory store configured in ``directory.path``.

    Args:
        config: Application configuration.

    Returns:
        A lazily loading DirectoryStore.
    """
    path = Path(config.directory.path)
    log.debug("Directory store configured: %s", path)
    return DirectoryStore(path)


__all__ = [
    "AccountLookup",
    "AccountResolver",
    "DirectoryStore",
    "DirectoryUnavailableError",
    "GroupBackend",
    "GroupCache",
    "GroupLookup",
    "GroupSuggester",
    "create_directory",
    "find_best_suggestion",
]
