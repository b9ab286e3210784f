from __future__ import annotations
from typing import Any, Dict, Optional
from sqlalchemy import func
from helpdesk import get_db
from helpdesk.models.ticket import Ticket


def get_ticket_stats(agent_id: Optional[int] = None) -> Dict[str, Any]:
    """Grouped ticket counts, optionally limited to one agent's assignments.

    Status buckets are always present; category and priority maps only carry
    keys with at least one ticket. Unknown agents simply match nothing.
    """
    session = get_db()

    def grouped(column):
        q = session.query(column, func.count(Ticket.id))
        if agent_id is not None:
            q = q.filter(Ticket.assigned_agent_id==agent_id)
        return {key: int(count) for key, count in q.group_by(column).all()}

    by_status = grouped(Ticket.status)
    stats: Dict[str, Any] = {'total': sum(by_status.values())}
    for status in Ticket.ALL_STATUSES:
        stats[status] = by_status.get(status, 0)
    stats['by_category'] = grouped(Ticket.category)
    stats['by_priority'] = grouped(Ticket.priority)
    return stats


__all__ = ['get_ticket_stats']
