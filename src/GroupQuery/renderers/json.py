"""JSON rendering of compiled queries."""

from __future__ import annotations

import json
from typing import Any

from GroupQuery.core.errors import QueryFailure
from GroupQuery.core.predicates import Predicate, effective_limit


def render_json(result: Predicate | QueryFailure, *, query: str | None = None) -> dict[str, Any]:
    """Render a compiled query into a JSON-serializable mapping.

    Args:
        result: Output of ``QueryParser.parse``.
        query: Original query string, echoed back when given.

    Returns:
        ``{"ok": true, "predicate": ..., "limit": ...}`` on success, or
        ``{"ok": false, "error": {"kind": ..., "message": ...}}``.
    """
    payload: dict[str, Any] = {}
    if query is not None:
        payload["query"] = query
    if isinstance(result, QueryFailure):
        payload["ok"] = False
        payload["error"] = {"kind": result.kind.value, "message": result.message}
        return payload
    payload["ok"] = True
    payload["expression"] = str(result)
    payload["predicate"] = result.to_dict()
    payload["limit"] = effective_limit(result)
    return payload


def dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)
