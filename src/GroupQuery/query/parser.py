"""Query string grammar.

Grammar (whitespace between operands means AND)::

    or      := and ("OR" and)*
    and     := not (["AND"] not)*
    not     := ("NOT" | "-") not | primary
    primary := "(" or ")" | FIELD ":" VALUE | TERM

VALUE and TERM are bare words or double-quoted strings with ``\\"`` escapes.
Field names are lowercased and handed to the builder; bare terms go to the
builder's default field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from GroupQuery.core.errors import ErrorKind, QueryFailure, QueryParseError
from GroupQuery.core.predicates import NotPredicate, Predicate, and_, or_
from GroupQuery.query.builder import GroupQueryBuilder
from GroupQuery.utils.log import log

_RE_FIELD = re.compile(r"^([A-Za-z_]+):(.*)$", re.DOTALL)
_WORD_BREAK = frozenset('()"')


class TokenType(Enum):
    LPAREN = "("
    RPAREN = ")"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    FIELD = "FIELD"
    TERM = "TERM"


@dataclass(frozen=True, slots=True)
class Token:
    type: TokenType
    value: str = ""
    field: str = ""
    position: int = 0


def _syntax_error(message: str) -> QueryParseError:
    return QueryParseError(message, kind=ErrorKind.SYNTAX)


def _read_quoted(text: str, start: int) -> tuple[str, int]:
    """Read a quoted string starting at the opening quote; return (value, next index)."""
    chars: list[str] = []
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            chars.append(text[i + 1])
            i += 2
            continue
        if ch == '"':
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    raise _syntax_error(f"Unterminated quoted string at position {start}")


def _read_word(text: str, start: int) -> tuple[str, int]:
    i = start
    while i < len(text) and not text[i].isspace() and text[i] not in _WORD_BREAK:
        i += 1
    return text[start:i], i


def tokenize(text: str) -> list[Token]:
    """Split a query string into tokens.

    Raises:
        QueryParseError: On unterminated quotes or unsupported value syntax.
    """
    tokens: list[Token] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if ch == "(":
            tokens.append(Token(TokenType.LPAREN, position=i))
            i += 1
            continue
        if ch == ")":
            tokens.append(Token(TokenType.RPAREN, position=i))
            i += 1
            continue
        if ch == '"':
            value, end = _read_quoted(text, i)
            tokens.append(Token(TokenType.TERM, value=value, position=i))
            i = end
            continue
        if ch == "-" and i + 1 < len(text) and not text[i + 1].isspace():
            tokens.append(Token(TokenType.NOT, position=i))
            i += 1
            continue

        word, end = _read_word(text, i)
        match = _RE_FIELD.match(word)
        if match:
            field, value = match.group(1).lower(), match.group(2)
            if not value and end < len(text) and text[end] == '"':
                value, end = _read_quoted(text, end)
            elif not value and end < len(text) and text[end] == "(":
                raise _syntax_error(f"Grouped values are not supported for {field} at position {i}")
            tokens.append(Token(TokenType.FIELD, value=value, field=field, position=i))
        elif word in ("AND", "OR", "NOT"):
            tokens.append(Token(TokenType(word), position=i))
        else:
            tokens.append(Token(TokenType.TERM, value=word, position=i))
        i = end
    return tokens


class QueryParser:
    """Compile query strings into group predicates via a ``GroupQueryBuilder``."""

    def __init__(self, builder: GroupQueryBuilder) -> None:
        self.builder = builder

    def parse(self, query: str) -> Predicate | QueryFailure:
        """Compile ``query``; the first failure aborts the whole query.

        Returns:
            The predicate tree, or a QueryFailure.
        """
        try:
            return self.parse_predicate(query)
        except QueryParseError as error:
            log.debug("Query %r failed: %s", query, error.message)
            return error.to_failure()

    def parse_predicate(self, query: str) -> Predicate:
        tokens = tokenize(query or "")
        if not tokens:
            raise _syntax_error("query is empty")
        return _Parser(tokens, self.builder).run()


class _Parser:
    def __init__(self, tokens: list[Token], builder: GroupQueryBuilder) -> None:
        self.tokens = tokens
        self.builder = builder
        self.pos = 0

    def run(self) -> Predicate:
        predicate = self._or()
        token = self._peek()
        if token is not None:
            raise _syntax_error(f"Unexpected '{token.value or token.type.value}' at position {token.position}")
        return predicate

    def _peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _at(self, token_type: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.type is token_type

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise _syntax_error("Unexpected end of query")
        self.pos += 1
        return token

    def _or(self) -> Predicate:
        operands = [self._and()]
        while self._at(TokenType.OR):
            self.pos += 1
            operands.append(self._and())
        return or_(*operands)

    def _and(self) -> Predicate:
        operands = [self._not()]
        while self._peek() is not None and not self._at(TokenType.OR) and not self._at(TokenType.RPAREN):
            if self._at(TokenType.AND):
                self.pos += 1
            operands.append(self._not())
        return and_(*operands)

    def _not(self) -> Predicate:
        token = self._peek()
        if token is not None and token.type is TokenType.NOT:
            self.pos += 1
            return NotPredicate(self._not())
        return self._primary()

    def _primary(self) -> Predicate:
        token = self._next()
        if token.type is TokenType.LPAREN:
            predicate = self._or()
            closing = self._peek()
            if closing is None or closing.type is not TokenType.RPAREN:
                raise _syntax_error(f"Missing ')' for '(' at position {token.position}")
            self.pos += 1
            return predicate
        if token.type is TokenType.FIELD:
            return self.builder.build_operator(token.field, token.value)
        if token.type is TokenType.TERM:
            return self.builder.build_default_field(token.value)
        raise _syntax_error(f"Unexpected '{token.type.value}' at position {token.position}")
