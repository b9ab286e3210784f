from __future__ import annotations
from flask import Blueprint
from helpdesk.constants.enums import STAFF_ROLES
from helpdesk.decorators.auth import require_roles
from helpdesk.services import attachments as attachment_svc

attachments_bp = Blueprint('attachments', __name__)


@attachments_bp.delete('/<int:attachment_id>')
@require_roles(*STAFF_ROLES)
def delete_attachment(attachment_id: int):
    # A missing attachment is reported as deleted=False, not as an error
    return {'deleted': attachment_svc.delete_attachment(attachment_id)}
