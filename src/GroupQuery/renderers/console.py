"""Console text rendering of compiled queries."""

from __future__ import annotations

from GroupQuery.core.errors import QueryFailure
from GroupQuery.core.predicates import AndPredicate, NotPredicate, OrPredicate, Predicate, effective_limit


def _tree_lines(predicate: Predicate, depth: int) -> list[str]:
    indent = "  " * depth
    if isinstance(predicate, (AndPredicate, OrPredicate)):
        label = "AND" if isinstance(predicate, AndPredicate) else "OR"
        lines = [f"{indent}{label}"]
        for child in predicate.operands:
            lines.extend(_tree_lines(child, depth + 1))
        return lines
    if isinstance(predicate, NotPredicate):
        return [f"{indent}NOT", *_tree_lines(predicate.operand, depth + 1)]
    return [f"{indent}{predicate}"]


def render_text(result: Predicate | QueryFailure) -> str:
    """Render a compiled query (or its failure) as a human-readable block.

    Args:
        result: Output of ``QueryParser.parse``.

    Returns:
        Query string form, an indented tree, and the effective limit.
    """
    if isinstance(result, QueryFailure):
        return f"Error ({result.kind.value}): {result.message}"

    limit = effective_limit(result)
    lines = [f"Query: {result}", "Tree:"]
    lines.extend(_tree_lines(result, 1))
    lines.append(f"Limit: {limit if limit is not None else '-'}")
    return "\n".join(lines)
