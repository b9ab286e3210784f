"""Attachment metadata. The files themselves live on disk under UPLOAD_FOLDER;
the database row is the authoritative record.
"""
from __future__ import annotations
import logging
import os
from typing import List, Optional
from flask import current_app, has_app_context
from sqlalchemy import select
from helpdesk import get_db
from helpdesk.models.attachment import Attachment
from helpdesk.schemas import AttachmentCreate
from helpdesk.services.lookups import require_user, require_ticket

logger = logging.getLogger(__name__)


def create_attachment(payload: AttachmentCreate) -> Attachment:
    session = get_db()
    require_ticket(session, payload.ticket_id)
    require_user(session, payload.uploaded_by)
    a = Attachment(
        ticket_id=payload.ticket_id,
        filename=payload.filename,
        file_path=payload.file_path,
        file_size=payload.file_size,
        mime_type=payload.mime_type,
        uploaded_by=payload.uploaded_by,
    )
    session.add(a)
    session.commit()
    return a


def get_ticket_attachments(ticket_id: int) -> List[Attachment]:
    session = get_db()
    require_ticket(session, ticket_id)
    stmt = (
        select(Attachment)
        .where(Attachment.ticket_id==ticket_id)
        .order_by(Attachment.created_at.asc(), Attachment.id.asc())
    )
    return list(session.execute(stmt).scalars())


def delete_attachment(attachment_id: int) -> bool:
    """Delete the row, then the stored file on a best-effort basis.

    Returns False when no such attachment exists. File removal problems are
    logged and never undo the row deletion.
    """
    session = get_db()
    a = session.execute(select(Attachment).where(Attachment.id==attachment_id)).scalar_one_or_none()
    if not a:
        return False
    file_path = a.file_path
    session.delete(a)
    session.commit()
    logger.info('Deleted attachment %s (ticket %s)', attachment_id, a.ticket_id)
    _remove_stored_file(attachment_id, file_path)
    return True


def resolve_storage_path(file_path: str) -> Optional[str]:
    """Real path of a stored file, or None when it is blank or escapes UPLOAD_FOLDER.

    Relative paths are taken from UPLOAD_FOLDER; symlinks and ``..`` segments
    are resolved before the containment check.
    """
    if not file_path or not file_path.strip() or not has_app_context():
        return None
    root = os.path.realpath(current_app.config['UPLOAD_FOLDER'])
    path = os.path.realpath(os.path.join(root, file_path.strip()))
    if path == root or os.path.commonpath([root, path]) != root:
        return None
    return path


def _remove_stored_file(attachment_id: int, file_path: str):
    path = resolve_storage_path(file_path)
    if path is None:
        logger.warning('Attachment %s path %r is empty or outside the upload folder; file left in place',
                       attachment_id, file_path)
        return
    try:
        os.remove(path)
    except OSError as e:
        logger.warning('Could not remove file %s for attachment %s: %s', path, attachment_id, e)


__all__ = ['create_attachment', 'get_ticket_attachments', 'delete_attachment', 'resolve_storage_path']
