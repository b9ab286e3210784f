from __future__ import annotations
from typing import Any, Dict, List
from flask import request
from helpdesk.schemas import parse_payload


def query_args(schema_cls, **overrides):
    """Validate the request's query string against ``schema_cls``.

    ``overrides`` replace caller-supplied values (e.g. scoping a customer to
    their own tickets) before validation.
    """
    params: Dict[str, Any] = request.args.to_dict()
    params.update({k: v for k, v in overrides.items() if v is not None})
    return parse_payload(schema_cls, params)


def build_list_payload(rows: List[dict], total: int, limit: int, offset: int):
    return {
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }
