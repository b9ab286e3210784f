"""Typed failures raised by the helpdesk services.

Each error knows the HTTP status it maps to and renders into the same
``{"error": {"status", "title", "detail"}}`` shape the application's
unified error handler uses for werkzeug HTTP exceptions.
"""
from __future__ import annotations
from typing import Any, Dict, Optional


class HelpdeskError(Exception):
    status_code = 500
    title = 'Internal Server Error'

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> Dict[str, Any]:
        return {
            'error': {
                'status': self.status_code,
                'title': self.title,
                'detail': self.detail,
            }
        }


class NotFoundError(HelpdeskError):
    """Referenced entity (ticket, user, comment, attachment) does not exist."""
    status_code = 404
    title = 'Not Found'

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f'{entity} with id {entity_id} not found')
        self.entity = entity
        self.entity_id = entity_id


class InvalidRoleError(HelpdeskError):
    """Referenced user exists but does not hold the role the operation needs."""
    status_code = 400
    title = 'Invalid Role'

    def __init__(self, entity: str, entity_id: Any, expected_role: str):
        super().__init__(f'{entity} with id {entity_id} is not a {expected_role}')
        self.entity = entity
        self.entity_id = entity_id
        self.expected_role = expected_role


class ConstraintViolationError(HelpdeskError):
    status_code = 409
    title = 'Conflict'


class ValidationError(HelpdeskError):
    status_code = 400
    title = 'Bad Request'

    def __init__(self, detail: str, errors: Optional[list] = None):
        super().__init__(detail)
        self.errors = errors or []

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.errors:
            payload['error']['fields'] = self.errors
        return payload


__all__ = [
    'HelpdeskError', 'NotFoundError', 'InvalidRoleError',
    'ConstraintViolationError', 'ValidationError',
]
