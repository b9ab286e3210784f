from __future__ import annotations
from flask import Blueprint, abort
from sqlalchemy import select
from helpdesk import get_db
from helpdesk.constants.enums import UserRole
from helpdesk.decorators.auth import require_roles
from helpdesk.errors import NotFoundError
from helpdesk.models.comment import Comment
from helpdesk.schemas import parse_payload, CommentUpdate
from helpdesk.services import comments as comment_svc
from helpdesk.services.policy import has_role, current_user_id
from helpdesk.utils.serialization import comment_json
from helpdesk.utils.validation import json_body

comments_bp = Blueprint('comments', __name__)


@comments_bp.patch('/<int:comment_id>')
@require_roles()
def update_comment(comment_id: int):
    session = get_db()
    c = session.execute(select(Comment).where(Comment.id==comment_id)).scalar_one_or_none()
    if not c:
        raise NotFoundError('Comment', comment_id)
    # only the author or an admin may edit a comment
    if c.user_id != current_user_id() and not has_role(UserRole.ADMIN.value):
        abort(403, description='Only the author or an admin may edit this comment')
    payload = parse_payload(CommentUpdate, {**json_body(), 'id': comment_id})
    return comment_json(comment_svc.update_comment(payload))
