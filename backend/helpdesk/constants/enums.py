"""Central enum definitions shared by models, schemas and the API.

Values are persisted as plain strings; never rename a value silently, add a
new one and migrate existing rows instead.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, List


class UserRole(str, Enum):
    CUSTOMER = 'customer'
    AGENT = 'agent'
    ADMIN = 'admin'


class TicketCategory(str, Enum):
    NETWORK_OUTAGE = 'network_outage'
    BILLING_ISSUE = 'billing_issue'
    TECHNICAL_SUPPORT = 'technical_support'
    SERVICE_UPGRADE = 'service_upgrade'
    RFO = 'rfo'


class TicketPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    URGENT = 'urgent'


class TicketStatus(str, Enum):
    OPEN = 'open'
    IN_PROGRESS = 'in_progress'
    ON_HOLD = 'on_hold'
    RESOLVED = 'resolved'
    CLOSED = 'closed'


class OutageType(str, Enum):
    PLANNED = 'planned'
    UNPLANNED = 'unplanned'


# Roles allowed to see internal comments and manage tickets
STAFF_ROLES = (UserRole.AGENT.value, UserRole.ADMIN.value)


def enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


def all_enumerations() -> Dict[str, List[str]]:
    """Dropdown values exposed to API clients."""
    return {
        'roles': enum_values(UserRole),
        'categories': enum_values(TicketCategory),
        'priorities': enum_values(TicketPriority),
        'statuses': enum_values(TicketStatus),
        'outage_types': enum_values(OutageType),
    }


__all__ = [
    'UserRole', 'TicketCategory', 'TicketPriority', 'TicketStatus', 'OutageType',
    'STAFF_ROLES', 'enum_values', 'all_enumerations',
]
