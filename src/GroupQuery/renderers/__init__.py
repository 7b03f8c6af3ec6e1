"""Output renderers for compiled queries (console text, JSON)."""

from __future__ import annotations

from GroupQuery.core.errors import QueryFailure
from GroupQuery.core.predicates import Predicate
from GroupQuery.renderers.console import render_text
from GroupQuery.renderers.json import dumps, render_json

OUTPUT_FORMATS = ("text", "json")


def render(result: Predicate | QueryFailure, *, output_format: str, query: str | None = None) -> str:
    """Render ``result`` in one of ``OUTPUT_FORMATS``.

    Raises:
        ValueError: If ``output_format`` is unknown.
    """
    if output_format == "text":
        return render_text(result)
    if output_format == "json":
        return dumps(render_json(result, query=query))
    raise ValueError(f"Unsupported output format: {output_format}")


__all__ = ["OUTPUT_FORMATS", "render", "render_json", "render_text"]
