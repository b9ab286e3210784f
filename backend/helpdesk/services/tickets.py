"""Ticket lifecycle: creation, partial updates, agent assignment and reads.

Every write follows the same shape: existence/role checks against the
session, one mutation, one commit. Transaction isolation is left to the
database; concurrent updates to a ticket are last-write-wins.
"""
from __future__ import annotations
import logging
from typing import List, Optional, Tuple
from sqlalchemy import select
from helpdesk import get_db
from helpdesk.models.user import User, utcnow
from helpdesk.models.ticket import Ticket
from helpdesk.schemas import TicketCreate, TicketUpdate, TicketQuery
from helpdesk.services.lookups import require_user, require_ticket
from helpdesk.utils.sorting import apply_multi_sort

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    'created_at': Ticket.created_at,
    'updated_at': Ticket.updated_at,
    'status': Ticket.status,
    'id': Ticket.id,
}


def create_ticket(payload: TicketCreate) -> Ticket:
    session = get_db()
    require_user(session, payload.customer_id, role=User.ROLE_CUSTOMER, entity='Customer')
    rfo = payload.rfo_details.model_dump(mode='json', exclude_unset=True) if payload.rfo_details is not None else None
    t = Ticket(
        subject=payload.subject,
        description=payload.description,
        category=payload.category.value,
        priority=payload.priority.value,
        status=Ticket.STATUS_OPEN,
        customer_id=payload.customer_id,
        assigned_agent_id=None,
        rfo_details=rfo,
        resolved_at=None,
    )
    session.add(t)
    session.commit()
    logger.info('Created ticket %s for customer %s', t.id, t.customer_id)
    return t


def update_ticket(payload: TicketUpdate) -> Ticket:
    """Apply only the fields present in the payload.

    An explicit null ``assigned_agent_id`` unassigns the ticket. Setting the
    status to resolved stamps ``resolved_at``; moving away from resolved
    leaves the stamp in place.
    """
    session = get_db()
    t = require_ticket(session, payload.id)
    changes = payload.changes()
    agent_id = changes.get('assigned_agent_id')
    if agent_id is not None:
        require_user(session, agent_id, role=User.ROLE_AGENT, entity='Agent')
    for key, value in changes.items():
        setattr(t, key, value)
    now = utcnow()
    if changes.get('status') == Ticket.STATUS_RESOLVED:
        t.resolved_at = now
    t.updated_at = now
    session.commit()
    logger.info('Updated ticket %s fields=%s', t.id, sorted(changes))
    return t


def assign_ticket(ticket_id: int, agent_id: int) -> Ticket:
    """Assign an agent; an open ticket moves to in_progress, other statuses are kept."""
    session = get_db()
    require_user(session, agent_id, role=User.ROLE_AGENT, entity='Agent')
    t = require_ticket(session, ticket_id)
    previous = t.status
    t.assigned_agent_id = agent_id
    if t.status == Ticket.STATUS_OPEN:
        t.status = Ticket.STATUS_IN_PROGRESS
    t.updated_at = utcnow()
    session.commit()
    logger.info('Assigned ticket %s to agent %s (%s -> %s)', t.id, agent_id, previous, t.status)
    return t


def get_ticket_by_id(ticket_id: int) -> Optional[Ticket]:
    session = get_db()
    return session.execute(select(Ticket).where(Ticket.id==ticket_id)).scalar_one_or_none()


def get_tickets(query: TicketQuery) -> Tuple[List[Ticket], int]:
    session = get_db()
    q = session.query(Ticket)
    if query.customer_id is not None:
        q = q.filter(Ticket.customer_id==query.customer_id)
    if query.assigned_agent_id is not None:
        q = q.filter(Ticket.assigned_agent_id==query.assigned_agent_id)
    if query.status is not None:
        q = q.filter(Ticket.status==query.status.value)
    if query.category is not None:
        q = q.filter(Ticket.category==query.category.value)
    if query.priority is not None:
        q = q.filter(Ticket.priority==query.priority.value)
    total = q.count()
    q = apply_multi_sort(q, query.sort, SORTABLE_FIELDS, [Ticket.created_at.desc()], Ticket.id.desc())
    rows = q.offset(query.offset).limit(query.limit).all()
    return rows, total


__all__ = ['create_ticket', 'update_ticket', 'assign_ticket', 'get_ticket_by_id', 'get_tickets']
