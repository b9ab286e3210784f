from __future__ import annotations
from flask import Blueprint, request, abort
from helpdesk.constants.enums import STAFF_ROLES
from helpdesk.decorators.auth import require_roles
from helpdesk.errors import NotFoundError
from helpdesk.schemas import (
    parse_payload, TicketCreate, TicketUpdate, TicketAssign, TicketQuery, CommentCreate, AttachmentCreate,
)
from helpdesk.services import tickets as ticket_svc
from helpdesk.services import comments as comment_svc
from helpdesk.services import attachments as attachment_svc
from helpdesk.services.policy import is_staff, current_user_id, assert_ticket_access
from helpdesk.utils.listing import query_args, build_list_payload
from helpdesk.utils.validation import json_body
from helpdesk.utils.serialization import ticket_json, comment_json, attachment_json

tickets_bp = Blueprint('tickets', __name__)


def _load_ticket(ticket_id: int):
    t = ticket_svc.get_ticket_by_id(ticket_id)
    if not t:
        raise NotFoundError('Ticket', ticket_id)
    assert_ticket_access(t)
    return t


@tickets_bp.get('')
@require_roles()
def list_tickets():
    # customers only ever see the tickets they raised
    scope = None if is_staff() else current_user_id()
    query = query_args(TicketQuery, customer_id=scope)
    rows, total = ticket_svc.get_tickets(query)
    return build_list_payload([ticket_json(t) for t in rows], total, query.limit, query.offset)


@tickets_bp.post('')
@require_roles()
def create_ticket():
    data = json_body()
    data.setdefault('customer_id', current_user_id())
    payload = parse_payload(TicketCreate, data)
    if not is_staff() and payload.customer_id != current_user_id():
        abort(403, description='Customers may only raise tickets for themselves')
    t = ticket_svc.create_ticket(payload)
    return ticket_json(t), 201


@tickets_bp.get('/<int:ticket_id>')
@require_roles()
def get_ticket(ticket_id: int):
    return ticket_json(_load_ticket(ticket_id))


@tickets_bp.patch('/<int:ticket_id>')
@require_roles(*STAFF_ROLES)
def update_ticket(ticket_id: int):
    payload = parse_payload(TicketUpdate, {**json_body(), 'id': ticket_id})
    return ticket_json(ticket_svc.update_ticket(payload))


@tickets_bp.post('/<int:ticket_id>/assign')
@require_roles(*STAFF_ROLES)
def assign_ticket(ticket_id: int):
    data = parse_payload(TicketAssign, json_body())
    return ticket_json(ticket_svc.assign_ticket(ticket_id, data.agent_id))


# --- Comments ---

@tickets_bp.get('/<int:ticket_id>/comments')
@require_roles()
def list_comments(ticket_id: int):
    _load_ticket(ticket_id)
    # the internal-notes flag is only honored for staff
    include_internal = request.args.get('include_internal') == 'true' and is_staff()
    rows = comment_svc.get_ticket_comments(ticket_id, include_internal)
    return {'data': [comment_json(c) for c in rows]}


@tickets_bp.post('/<int:ticket_id>/comments')
@require_roles()
def create_comment(ticket_id: int):
    _load_ticket(ticket_id)
    data = {**json_body(), 'ticket_id': ticket_id, 'user_id': current_user_id()}
    payload = parse_payload(CommentCreate, data)
    if payload.is_internal and not is_staff():
        abort(403, description='Only staff may add internal comments')
    return comment_json(comment_svc.create_comment(payload)), 201


# --- Attachments ---

@tickets_bp.get('/<int:ticket_id>/attachments')
@require_roles()
def list_attachments(ticket_id: int):
    _load_ticket(ticket_id)
    rows = attachment_svc.get_ticket_attachments(ticket_id)
    return {'data': [attachment_json(a) for a in rows]}


@tickets_bp.post('/<int:ticket_id>/attachments')
@require_roles()
def create_attachment(ticket_id: int):
    _load_ticket(ticket_id)
    data = {**json_body(), 'ticket_id': ticket_id, 'uploaded_by': current_user_id()}
    a = attachment_svc.create_attachment(parse_payload(AttachmentCreate, data))
    return attachment_json(a), 201
