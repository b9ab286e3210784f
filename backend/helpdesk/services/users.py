from __future__ import annotations
import logging
from typing import List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from helpdesk import get_db
from helpdesk.errors import ConstraintViolationError
from helpdesk.models.user import User, utcnow
from helpdesk.schemas import UserCreate, UserUpdate, UserQuery
from helpdesk.services.lookups import require_user

logger = logging.getLogger(__name__)


def _commit_unique(session, email: str):
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConstraintViolationError(f'User with email {email} already exists') from e


def create_user(payload: UserCreate) -> User:
    session = get_db()
    u = User(name=payload.name, email=payload.email, role=payload.role.value, password_hash='')
    u.set_password(payload.password)
    session.add(u)
    _commit_unique(session, payload.email)
    logger.info('Created %s user %s', u.role, u.id)
    return u


def update_user(payload: UserUpdate) -> User:
    session = get_db()
    u = require_user(session, payload.id)
    changes = payload.changes()
    for key, value in changes.items():
        setattr(u, key, value)
    u.updated_at = utcnow()
    _commit_unique(session, changes.get('email', u.email))
    return u


def get_user_by_id(user_id: int) -> Optional[User]:
    session = get_db()
    return session.execute(select(User).where(User.id==user_id)).scalar_one_or_none()


def get_users(query: UserQuery) -> Tuple[List[User], int]:
    session = get_db()
    q = session.query(User)
    if query.role is not None:
        q = q.filter(User.role==query.role.value)
    total = q.count()
    rows = q.order_by(User.id.asc()).offset(query.offset).limit(query.limit).all()
    return rows, total


def login_user(email: str, password: str) -> Optional[User]:
    """Return the user for valid credentials, None otherwise."""
    session = get_db()
    u = session.execute(select(User).where(User.email==email)).scalar_one_or_none()
    if not u or not u.verify_password(password):
        return None
    return u


__all__ = ['create_user', 'update_user', 'get_user_by_id', 'get_users', 'login_user']
