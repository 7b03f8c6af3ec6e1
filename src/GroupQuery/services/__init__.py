"""Service layer for GroupQuery.

Wires the configured index schema and directory into a query builder.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from GroupQuery.directory import AccountResolver, DirectoryStore, GroupBackend, GroupCache, create_directory
from GroupQuery.query.builder import GroupQueryBuilder, QueryArguments
from GroupQuery.services.query import GroupQueryService
from GroupQuery.utils.log import log

if TYPE_CHECKING:
    from GroupQuery.config import AppConfig


def create_query_builder(config: AppConfig, store: DirectoryStore | None = None) -> GroupQueryBuilder:
    """Create a query builder for the configured schema and directory.

    Args:
        config: Application configuration.
        store: Optional directory store; built from ``config.directory`` if omitted.

    Returns:
        GroupQueryBuilder sharing one set of read-only collaborators.
    """
    directory = store if store is not None else create_directory(config)
    schema = config.index.schema()
    log.debug("Group index schema version: %d", schema.version)
    args = QueryArguments(
        schema=schema,
        group_cache=GroupCache(directory),
        group_backend=GroupBackend(directory),
        account_resolver=AccountResolver(directory),
    )
    return GroupQueryBuilder(args)


def create_query_service(config: AppConfig, store: DirectoryStore | None = None) -> GroupQueryService:
    return GroupQueryService(builder=create_query_builder(config, store))


__all__ = [
    "GroupQueryService",
    "create_query_builder",
    "create_query_service",
]
