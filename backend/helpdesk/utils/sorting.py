from __future__ import annotations
from typing import Dict, Optional
from helpdesk.errors import ValidationError

def apply_multi_sort(query, sort_expr: Optional[str], allowed: Dict, default_clauses, tie_breaker):
    """Order a query by a comma-separated sort expression.

    Each token names a key of ``allowed`` and may be prefixed with '-' for
    descending order. Without an expression ``default_clauses`` apply.
    ``tie_breaker`` is always appended so pages are deterministic.
    """
    if not sort_expr:
        return query.order_by(*default_clauses, tie_breaker)
    clauses = []
    for raw in sort_expr.split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        col = allowed.get(key)
        if col is None:
            raise ValidationError(f'Invalid sort field {key}')
        clauses.append(col.desc() if desc else col.asc())
    clauses.append(tie_breaker)
    return query.order_by(*clauses)
