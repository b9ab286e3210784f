from __future__ import annotations
from flask import abort
from flask_jwt_extended import get_jwt, get_jwt_identity
from helpdesk.constants.enums import STAFF_ROLES
from helpdesk.models.user import User
from helpdesk.models.ticket import Ticket


def current_role() -> str:
    claims = get_jwt()
    return claims.get('role', '')


def current_user_id() -> int:
    # Identity stored as string, cast back to int for DB lookups
    return int(get_jwt_identity())


def has_role(*roles: str) -> bool:
    return current_role() in roles


def is_staff() -> bool:
    return has_role(*STAFF_ROLES)


def build_claims(user: User):
    return {'role': user.role, 'name': user.name}


def assert_ticket_access(ticket: Ticket):
    """Staff may touch any ticket; customers only the tickets they raised."""
    if is_staff():
        return
    if ticket.customer_id != current_user_id():
        abort(403, description='Ticket access denied')


def assert_self_or_staff(user_id: int):
    if is_staff():
        return
    if user_id != current_user_id():
        abort(403, description='Record ownership required')
