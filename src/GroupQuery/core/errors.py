"""Query compilation error model.

Handlers and the grammar parser raise ``QueryParseError``. The public entry
points (``GroupQueryBuilder.dispatch``/``default_field`` and
``QueryParser.parse``) catch it and hand back a ``QueryFailure`` value, so
callers branch on the result instead of unwinding.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Category of a query compilation failure."""

    MALFORMED_VALUE = "malformed_value"
    SYNTAX = "syntax"
    UNKNOWN_OPERATOR = "unknown_operator"
    RESERVED_OPERATOR = "reserved_operator"
    UNSUPPORTED_OPERATOR = "unsupported_operator"
    NOT_FOUND = "not_found"
    RESOLVER_UNAVAILABLE = "resolver_unavailable"


class QueryParseError(Exception):
    """Raised when a query (or one operator in it) cannot be compiled."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.MALFORMED_VALUE) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    def to_failure(self) -> QueryFailure:
        return QueryFailure(kind=self.kind, message=self.message)


@dataclass(frozen=True, slots=True)
class QueryFailure:
    """Typed compilation failure returned in place of a predicate.

    Attributes:
        kind: Failure category. ``UNSUPPORTED_OPERATOR`` means the index
            schema is too old, ``RESOLVER_UNAVAILABLE`` means a lookup
            service could not be reached, and the remaining kinds describe
            bad user input.
        message: Human-readable message, safe to show to the user.
    """

    kind: ErrorKind
    message: str

    def raise_error(self) -> None:
        """Re-raise this failure as ``QueryParseError``."""
        raise QueryParseError(self.message, kind=self.kind)

    def __str__(self) -> str:
        return self.message
