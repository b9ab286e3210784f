from __future__ import annotations
"""Request body helpers shared by the blueprints.

Schema validation happens in ``helpdesk.schemas``; this only guarantees the
body is a JSON object so routes can merge path parameters into it.
"""
from typing import Any, Dict
from flask import request
from helpdesk.errors import ValidationError


def json_body() -> Dict[str, Any]:
    """Return a copy of the JSON object body, ``{}`` when absent or unparsable.

    Arrays, strings and other non-object bodies raise a 400 ValidationError.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('request body must be a JSON object')
    return dict(data)


__all__ = ['json_body']
