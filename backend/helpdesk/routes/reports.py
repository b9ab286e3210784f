from __future__ import annotations
from flask import Blueprint
from helpdesk.constants.enums import STAFF_ROLES
from helpdesk.decorators.auth import require_roles
from helpdesk.schemas import StatsQuery
from helpdesk.services.stats import get_ticket_stats
from helpdesk.utils.listing import query_args

rpt_bp = Blueprint('reports', __name__)


@rpt_bp.get('/tickets/stats')
@require_roles(*STAFF_ROLES)
def ticket_stats():
    """Dashboard counts across all tickets or one agent's assignments."""
    query = query_args(StatsQuery)
    return get_ticket_stats(query.agent_id)
