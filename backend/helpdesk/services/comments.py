from __future__ import annotations
import logging
from typing import List
from sqlalchemy import select
from helpdesk import get_db
from helpdesk.errors import NotFoundError
from helpdesk.models.user import utcnow
from helpdesk.models.comment import Comment
from helpdesk.schemas import CommentCreate, CommentUpdate
from helpdesk.services.lookups import require_user, require_ticket

logger = logging.getLogger(__name__)


def create_comment(payload: CommentCreate) -> Comment:
    session = get_db()
    t = require_ticket(session, payload.ticket_id)
    require_user(session, payload.user_id)
    c = Comment(
        ticket_id=payload.ticket_id,
        user_id=payload.user_id,
        content=payload.content,
        is_internal=payload.is_internal,
    )
    session.add(c)
    # Comments count as ticket activity
    t.updated_at = utcnow()
    session.commit()
    logger.info('Comment %s added to ticket %s (internal=%s)', c.id, c.ticket_id, c.is_internal)
    return c


def update_comment(payload: CommentUpdate) -> Comment:
    session = get_db()
    c = session.execute(select(Comment).where(Comment.id==payload.id)).scalar_one_or_none()
    if not c:
        raise NotFoundError('Comment', payload.id)
    changes = payload.changes()
    if not changes:
        return c
    for key, value in changes.items():
        setattr(c, key, value)
    session.commit()
    return c


def get_ticket_comments(ticket_id: int, include_internal: bool = False) -> List[Comment]:
    """Comments for a ticket, oldest first. Internal notes only when asked for.

    Deciding who may ask for internal notes is up to the caller.
    """
    session = get_db()
    stmt = select(Comment).where(Comment.ticket_id==ticket_id)
    if not include_internal:
        stmt = stmt.where(Comment.is_internal.is_(False))
    stmt = stmt.order_by(Comment.created_at.asc(), Comment.id.asc())
    return list(session.execute(stmt).scalars())


__all__ = ['create_comment', 'update_comment', 'get_ticket_comments']
