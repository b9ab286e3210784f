from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from helpdesk.models.user import User
from helpdesk.models.ticket import Ticket
from helpdesk.models.comment import Comment
from helpdesk.models.attachment import Attachment


def iso(dt: Optional[datetime]) -> Optional[str]:
    """UTC ISO-8601 with a Z suffix; naive values (SQLite) are taken as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def user_json(u: User):
    # password_hash never leaves the service layer
    return {
        'id': u.id,
        'name': u.name,
        'email': u.email,
        'role': u.role,
        'created_at': iso(u.created_at),
        'updated_at': iso(u.updated_at),
    }


def ticket_json(t: Ticket):
    return {
        'id': t.id,
        'subject': t.subject,
        'description': t.description,
        'category': t.category,
        'priority': t.priority,
        'status': t.status,
        'customer_id': t.customer_id,
        'assigned_agent_id': t.assigned_agent_id,
        'rfo_details': t.rfo_details,
        'created_at': iso(t.created_at),
        'updated_at': iso(t.updated_at),
        'resolved_at': iso(t.resolved_at),
    }


def comment_json(c: Comment):
    return {
        'id': c.id,
        'ticket_id': c.ticket_id,
        'user_id': c.user_id,
        'content': c.content,
        'is_internal': c.is_internal,
        'created_at': iso(c.created_at),
    }


def attachment_json(a: Attachment):
    return {
        'id': a.id,
        'ticket_id': a.ticket_id,
        'filename': a.filename,
        'file_path': a.file_path,
        'file_size': a.file_size,
        'mime_type': a.mime_type,
        'uploaded_by': a.uploaded_by,
        'created_at': iso(a.created_at),
    }


__all__ = ['iso', 'user_json', 'ticket_json', 'comment_json', 'attachment_json']
