import pytest
from datetime import datetime, timezone
from helpdesk.errors import NotFoundError, InvalidRoleError, ValidationError
from helpdesk.models.ticket import Ticket
from helpdesk.schemas import parse_payload, TicketCreate, TicketUpdate
from helpdesk.services.tickets import create_ticket, update_ticket, assign_ticket, get_ticket_by_id
from tests.test_utils_seed import ensure_customer, ensure_agent, ensure_admin, create_ticket_row


def _create_payload(customer_id, **overrides):
    data = {
        'subject': 'Network down',
        'description': 'No connectivity since this morning',
        'category': 'network_outage',
        'priority': 'high',
        'customer_id': customer_id,
    }
    data.update(overrides)
    return parse_payload(TicketCreate, data)


def _update(ticket_id, **fields):
    return update_ticket(parse_payload(TicketUpdate, {'id': ticket_id, **fields}))


def test_create_ticket_starts_open_and_unassigned(app_context):
    customer = ensure_customer()
    t = create_ticket(_create_payload(customer.id))
    assert t.id is not None
    assert t.status == 'open'
    assert t.assigned_agent_id is None
    assert t.resolved_at is None
    assert t.rfo_details is None
    assert t.created_at is not None and t.updated_at is not None


def test_create_ticket_rejects_non_customer(app_context):
    agent = ensure_agent()
    with pytest.raises(InvalidRoleError) as exc:
        create_ticket(_create_payload(agent.id))
    assert str(agent.id) in exc.value.detail


def test_create_ticket_unknown_customer(app_context):
    with pytest.raises(NotFoundError) as exc:
        create_ticket(_create_payload(9999))
    assert '9999' in exc.value.detail


def test_rfo_details_kept_for_any_category(app_context):
    customer = ensure_customer()
    rfo = {'outage_type': 'unplanned', 'affected_areas': ['North'], 'root_cause': 'Fiber cut'}
    t = create_ticket(_create_payload(customer.id, category='billing_issue', rfo_details=rfo))
    assert t.rfo_details == rfo
    assert t.category == 'billing_issue'


def test_update_changes_only_supplied_fields(app_context):
    customer = ensure_customer()
    t = create_ticket(_create_payload(customer.id))
    updated = _update(t.id, priority='urgent')
    assert updated.priority == 'urgent'
    assert updated.subject == 'Network down'
    assert updated.category == 'network_outage'
    assert updated.status == 'open'


def test_update_refreshes_updated_at(app_context):
    customer = ensure_customer()
    t = create_ticket_row(customer)
    old = datetime(2020, 1, 1, tzinfo=timezone.utc)
    t.updated_at = old
    updated = _update(t.id, subject='Still down')
    assert updated.updated_at > old


def test_resolved_status_sets_resolved_at(app_context):
    customer = ensure_customer()
    t = create_ticket(_create_payload(customer.id))
    resolved = _update(t.id, status='resolved')
    assert resolved.resolved_at is not None
    stamp = resolved.resolved_at
    # other field updates leave the stamp alone
    again = _update(t.id, description='Root cause found')
    assert again.resolved_at == stamp


def test_resolved_at_not_cleared_when_reopened(app_context):
    customer = ensure_customer()
    t = create_ticket(_create_payload(customer.id))
    _update(t.id, status='resolved')
    reopened = _update(t.id, status='open')
    assert reopened.status == 'open'
    assert reopened.resolved_at is not None


def test_non_resolved_status_leaves_resolved_at_null(app_context):
    customer = ensure_customer()
    t = create_ticket(_create_payload(customer.id))
    held = _update(t.id, status='on_hold')
    assert held.resolved_at is None


def test_update_assigns_and_unassigns_agent(app_context):
    customer = ensure_customer()
    agent = ensure_agent()
    t = create_ticket(_create_payload(customer.id))
    assigned = _update(t.id, assigned_agent_id=agent.id)
    assert assigned.assigned_agent_id == agent.id
    # assignment through update does not move the status
    assert assigned.status == 'open'
    unassigned = _update(t.id, assigned_agent_id=None)
    assert unassigned.assigned_agent_id is None


def test_update_rejects_non_agent_assignee(app_context):
    customer = ensure_customer()
    admin = ensure_admin()
    t = create_ticket(_create_payload(customer.id))
    with pytest.raises(InvalidRoleError):
        _update(t.id, assigned_agent_id=admin.id)
    with pytest.raises(NotFoundError):
        _update(t.id, assigned_agent_id=4242)
    assert get_ticket_by_id(t.id).assigned_agent_id is None


def test_update_missing_ticket(app_context):
    with pytest.raises(NotFoundError):
        _update(777, subject='Nope')


def test_update_explicit_null_rfo_details_clears_it(app_context):
    customer = ensure_customer()
    t = create_ticket(_create_payload(customer.id, category='rfo', rfo_details={'outage_type': 'planned'}))
    cleared = _update(t.id, rfo_details=None)
    assert cleared.rfo_details is None


def test_update_rejects_null_for_required_field(app_context):
    with pytest.raises(ValidationError):
        parse_payload(TicketUpdate, {'id': 1, 'subject': None})


def test_assign_open_ticket_moves_to_in_progress(app_context):
    customer = ensure_customer()
    agent = ensure_agent()
    t = create_ticket(_create_payload(customer.id))
    assigned = assign_ticket(t.id, agent.id)
    assert assigned.status == 'in_progress'
    assert assigned.assigned_agent_id == agent.id


@pytest.mark.parametrize('status', ['in_progress', 'on_hold', 'resolved', 'closed'])
def test_assign_keeps_non_open_status(app_context, status):
    customer = ensure_customer()
    agent = ensure_agent()
    t = create_ticket_row(customer, status=status)
    assigned = assign_ticket(t.id, agent.id)
    assert assigned.status == status
    assert assigned.assigned_agent_id == agent.id


def test_assign_rejects_non_agent(app_context):
    customer = ensure_customer()
    t = create_ticket_row(customer)
    with pytest.raises(InvalidRoleError):
        assign_ticket(t.id, customer.id)
    assert get_ticket_by_id(t.id).status == Ticket.STATUS_OPEN


def test_assign_missing_agent_or_ticket(app_context):
    customer = ensure_customer()
    agent = ensure_agent()
    t = create_ticket_row(customer)
    with pytest.raises(NotFoundError) as exc:
        assign_ticket(t.id, 31337)
    assert exc.value.entity == 'Agent'
    with pytest.raises(NotFoundError) as exc:
        assign_ticket(31337, agent.id)
    assert exc.value.entity == 'Ticket'
