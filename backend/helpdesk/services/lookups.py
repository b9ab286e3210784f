from __future__ import annotations
from typing import Optional
from sqlalchemy import select
from helpdesk.errors import NotFoundError, InvalidRoleError
from helpdesk.models.user import User
from helpdesk.models.ticket import Ticket


def require_user(session, user_id: int, role: Optional[str] = None, entity: str = 'User') -> User:
    """Load a user or raise NotFoundError; with ``role`` also enforce the user's role."""
    user = session.execute(select(User).where(User.id==user_id)).scalar_one_or_none()
    if not user:
        raise NotFoundError(entity, user_id)
    if role is not None and user.role != role:
        raise InvalidRoleError(entity, user_id, role)
    return user


def require_ticket(session, ticket_id: int) -> Ticket:
    ticket = session.execute(select(Ticket).where(Ticket.id==ticket_id)).scalar_one_or_none()
    if not ticket:
        raise NotFoundError('Ticket', ticket_id)
    return ticket


__all__ = ['require_user', 'require_ticket']
