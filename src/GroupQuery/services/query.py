"""Query service: compile query strings for the index executor."""

from __future__ import annotations

from dataclasses import dataclass

from GroupQuery.core.errors import QueryFailure
from GroupQuery.core.predicates import Predicate, effective_limit
from GroupQuery.query.builder import GroupQueryBuilder
from GroupQuery.query.parser import QueryParser
from GroupQuery.utils.log import log


@dataclass(slots=True)
class GroupQueryService:
    """Application service compiling group queries.

    Each call builds a fresh predicate tree; the builder and its collaborators
    are shared read-only, so one service may serve concurrent callers.
    """

    builder: GroupQueryBuilder

    def compile(self, query: str) -> Predicate | QueryFailure:
        """Compile ``query`` into a predicate tree.

        Args:
            query: Raw query string typed by the user.

        Returns:
            The predicate tree, or the QueryFailure that aborted compilation.
        """
        log.debug("Compiling query: %r", query)
        result = QueryParser(self.builder).parse(query)
        if isinstance(result, QueryFailure):
            log.warning("Query rejected (%s): %s", result.kind.value, result.message)
            return result
        log.info("Compiled query: %s limit=%s", result, effective_limit(result))
        return result

    def operator_support(self) -> dict[str, bool]:
        """Return each registered operator and whether the index schema supports it."""
        return {operator: self.builder.is_available(operator) for operator in self.builder.operators()}
