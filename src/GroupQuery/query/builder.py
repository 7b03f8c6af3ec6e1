"""Group query builder.

Turns one ``field:value`` pair, or one bare search term, into a predicate
over groups. Operators are looked up in a registry built once per builder;
operators that need index fields added in later schema versions are gated on
the active schema before any reference is resolved.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Final

from GroupQuery.core.errors import ErrorKind, QueryFailure, QueryParseError
from GroupQuery.core.predicates import (
    FIELD_DESCRIPTION,
    FIELD_INNAME,
    FIELD_IS,
    FIELD_LIMIT,
    FIELD_MEMBER,
    FIELD_NAME,
    FIELD_SUBGROUP,
    FIELD_UUID,
    FieldPredicate,
    LimitPredicate,
    MemberPredicate,
    Predicate,
    SubgroupPredicate,
    VisibleToAllPredicate,
    or_,
)
from GroupQuery.directory.accounts import AccountLookup
from GroupQuery.directory.groups import GroupLookup, GroupSuggester, find_best_suggestion
from GroupQuery.directory.store import DirectoryUnavailableError
from GroupQuery.index.schema import GroupField, IndexSchema
from GroupQuery.utils.log import log

# Deprecated keyword, kept so that old saved queries get a clear error.
FIELD_OWNER: Final[str] = "owner"

_RESERVED_OPERATORS: Final[frozenset[str]] = frozenset({FIELD_OWNER})
_REQUIRED_FIELDS: Final[dict[str, GroupField]] = {
    FIELD_MEMBER: GroupField.MEMBER,
    FIELD_SUBGROUP: GroupField.SUBGROUP,
}
_RE_INT: Final[re.Pattern[str]] = re.compile(r"-?[0-9]+")
_INT32_MIN: Final[int] = -(2**31)
_INT32_MAX: Final[int] = 2**31 - 1

Handler = Callable[[str], Predicate]


@dataclass(frozen=True, slots=True)
class QueryArguments:
    """Collaborators shared read-only by every handler call.

    Attributes:
        schema: Active group index schema.
        group_cache: Exact group lookup by UUID.
        group_backend: Fuzzy group lookup by name.
        account_resolver: Account reference resolution.
    """

    schema: IndexSchema
    group_cache: GroupLookup
    group_backend: GroupSuggester
    account_resolver: AccountLookup


class GroupQueryBuilder:
    """Build group predicates from operator keywords and bare terms."""

    def __init__(self, args: QueryArguments) -> None:
        self.args = args
        self._operators: dict[str, Handler] = {
            FIELD_UUID: self.uuid,
            FIELD_DESCRIPTION: self.description,
            FIELD_INNAME: self.inname,
            FIELD_NAME: self.name,
            FIELD_IS: self.is_,
            FIELD_MEMBER: self.member,
            FIELD_SUBGROUP: self.subgroup,
            FIELD_LIMIT: self.limit,
        }

    def operators(self) -> tuple[str, ...]:
        """Return registered operator keywords in registration order."""
        return tuple(self._operators)

    def supports(self, field: GroupField) -> bool:
        """Return True if the active index schema exposes ``field``."""
        return self.args.schema.has_field(field)

    def is_available(self, keyword: str) -> bool:
        """Return True if ``keyword`` is registered and usable with the active schema."""
        if keyword not in self._operators:
            return False
        field = _REQUIRED_FIELDS.get(keyword)
        return field is None or self.supports(field)

    # Result-returning entry points.

    def dispatch(self, keyword: str, value: str | None) -> Predicate | QueryFailure:
        """Build the predicate for ``keyword:value``.

        Args:
            keyword: Lowercased operator keyword.
            value: Raw operator value, possibly empty.

        Returns:
            The predicate, or a QueryFailure describing why it cannot be built.
        """
        try:
            return self.build_operator(keyword, value)
        except QueryParseError as error:
            log.debug("Operator %s:%r failed: %s", keyword, value, error.message)
            return error.to_failure()

    def default_field(self, term: str | None) -> Predicate | QueryFailure:
        """Build the predicate for a bare search term."""
        try:
            return self.build_default_field(term)
        except QueryParseError as error:
            return error.to_failure()

    # Raising entry points, used by the grammar parser.

    def build_operator(self, keyword: str, value: str | None) -> Predicate:
        if keyword in _RESERVED_OPERATORS:
            raise QueryParseError(
                f"'{keyword}' operator is reserved and not supported",
                kind=ErrorKind.RESERVED_OPERATOR,
            )
        handler = self._operators.get(keyword)
        if handler is None:
            raise QueryParseError(f"Unsupported operator {keyword}", kind=ErrorKind.UNKNOWN_OPERATOR)
        log.debug("Dispatching operator %s:%r", keyword, value)
        return handler(value if value is not None else "")

    def build_default_field(self, term: str | None) -> Predicate:
        """Match ``term`` against uuid, name, and name part, plus description when non-empty."""
        query = term if term is not None else ""
        predicates = [self.uuid(query), self.name(query), self.inname(query)]
        if query:
            predicates.append(self.description(query))
        return or_(*predicates)

    # Operators.

    def uuid(self, uuid: str) -> Predicate:
        return FieldPredicate(FIELD_UUID, uuid)

    def description(self, description: str | None) -> Predicate:
        if not description:
            raise QueryParseError("description operator requires a value")
        return FieldPredicate(FIELD_DESCRIPTION, description)

    def inname(self, name_part: str) -> Predicate:
        if not name_part:
            return self.name(name_part)
        return FieldPredicate(FIELD_INNAME, name_part)

    def name(self, name: str) -> Predicate:
        return FieldPredicate(FIELD_NAME, name)

    def is_(self, value: str) -> Predicate:
        if value.lower() == "visibletoall":
            return VisibleToAllPredicate()
        raise QueryParseError("Invalid query")

    def member(self, query: str) -> Predicate:
        if not self.supports(GroupField.MEMBER):
            raise _unsupported_operator(FIELD_MEMBER)
        accounts = self._parse_account(query)
        return or_(*(MemberPredicate(account_id) for account_id in sorted(accounts)))

    def subgroup(self, query: str) -> Predicate:
        if not self.supports(GroupField.SUBGROUP):
            raise _unsupported_operator(FIELD_SUBGROUP)
        return SubgroupPredicate(self._parse_group(query))

    def limit(self, query: str) -> Predicate:
        limit = _try_parse_int(query)
        if limit is None:
            raise QueryParseError(f"Invalid limit: {query}")
        return LimitPredicate(limit)

    # Reference resolution.

    def _parse_account(self, name_or_email: str) -> set[int]:
        try:
            found = self.args.account_resolver.find_all(name_or_email)
        except (DirectoryUnavailableError, OSError) as error:
            raise _resolver_unavailable("account", error) from error
        if not found:
            raise QueryParseError(f"User {name_or_email} not found", kind=ErrorKind.NOT_FOUND)
        return set(found)

    def _parse_group(self, group_name_or_uuid: str) -> str:
        try:
            group = self.args.group_cache.get(group_name_or_uuid)
            if group is not None:
                return group.uuid
            reference = find_best_suggestion(self.args.group_backend, group_name_or_uuid)
        except (DirectoryUnavailableError, OSError) as error:
            raise _resolver_unavailable("group", error) from error
        if reference is None:
            raise QueryParseError(f"Group {group_name_or_uuid} not found", kind=ErrorKind.NOT_FOUND)
        log.debug("Group %r resolved by suggestion to %s", group_name_or_uuid, reference.uuid)
        return reference.uuid


def _unsupported_operator(operator: str) -> QueryParseError:
    return QueryParseError(
        f"'{operator}' operator is not supported by group index version",
        kind=ErrorKind.UNSUPPORTED_OPERATOR,
    )


def _resolver_unavailable(what: str, error: Exception) -> QueryParseError:
    log.warning("%s lookup unavailable: %s", what.capitalize(), error)
    return QueryParseError(f"Cannot resolve {what}: {error}", kind=ErrorKind.RESOLVER_UNAVAILABLE)


def _try_parse_int(value: str | None) -> int | None:
    """Parse a base-10 32-bit integer, returning None on any malformed input."""
    if value is None or not _RE_INT.fullmatch(value):
        return None
    parsed = int(value)
    if parsed < _INT32_MIN or parsed > _INT32_MAX:
        return None
    return parsed
