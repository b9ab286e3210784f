import logging
import os
import pytest
from helpdesk import get_db
from helpdesk.errors import NotFoundError
from helpdesk.models.attachment import Attachment
from helpdesk.schemas import parse_payload, AttachmentCreate
from helpdesk.services.attachments import (
    create_attachment, delete_attachment, get_ticket_attachments, resolve_storage_path,
)
from tests.test_utils_seed import ensure_customer, create_ticket_row


def _attach(ticket_id, user_id, file_path, filename='router.log'):
    return create_attachment(parse_payload(AttachmentCreate, {
        'ticket_id': ticket_id,
        'filename': filename,
        'file_path': file_path,
        'file_size': 2048,
        'mime_type': 'text/plain',
        'uploaded_by': user_id,
    }))


def test_create_and_list_attachments(app_context):
    customer = ensure_customer()
    t = create_ticket_row(customer)
    first = _attach(t.id, customer.id, 'a.log', filename='a.log')
    second = _attach(t.id, customer.id, 'b.log', filename='b.log')
    rows = get_ticket_attachments(t.id)
    assert [a.id for a in rows] == [first.id, second.id]
    assert rows[0].file_size == 2048
    assert rows[0].mime_type == 'text/plain'


def test_create_attachment_missing_references(app_context):
    customer = ensure_customer()
    t = create_ticket_row(customer)
    with pytest.raises(NotFoundError):
        _attach(999, customer.id, 'x.log')
    with pytest.raises(NotFoundError):
        _attach(t.id, 999, 'x.log')


def test_list_attachments_missing_ticket(app_context):
    with pytest.raises(NotFoundError):
        get_ticket_attachments(999)


def test_delete_missing_attachment_returns_false(app_context):
    assert delete_attachment(999) is False


def test_delete_removes_row_and_file(app_context):
    folder = app_context.config['UPLOAD_FOLDER']
    customer = ensure_customer()
    t = create_ticket_row(customer)
    stored = os.path.join(folder, 'speedtest.png')
    with open(stored, 'wb') as fh:
        fh.write(b'png')
    a = _attach(t.id, customer.id, stored)
    assert delete_attachment(a.id) is True
    assert not os.path.exists(stored)
    assert get_db().query(Attachment).filter_by(id=a.id).one_or_none() is None


def test_delete_resolves_relative_paths_against_upload_folder(app_context):
    folder = app_context.config['UPLOAD_FOLDER']
    os.makedirs(os.path.join(folder, 'tickets'), exist_ok=True)
    customer = ensure_customer()
    t = create_ticket_row(customer)
    with open(os.path.join(folder, 'tickets', 'modem.txt'), 'w') as fh:
        fh.write('modem')
    a = _attach(t.id, customer.id, 'tickets/modem.txt')
    assert delete_attachment(a.id) is True
    assert not os.path.exists(os.path.join(folder, 'tickets', 'modem.txt'))


@pytest.mark.parametrize('file_path', ['', '   ', 'ghost.bin', '/nonexistent/dir/missing.bin'])
def test_delete_succeeds_when_file_cannot_be_removed(app_context, caplog, file_path):
    customer = ensure_customer()
    t = create_ticket_row(customer)
    a = _attach(t.id, customer.id, file_path)
    with caplog.at_level(logging.WARNING, logger='helpdesk.services.attachments'):
        assert delete_attachment(a.id) is True
    assert get_db().query(Attachment).filter_by(id=a.id).one_or_none() is None
    assert any(r.levelno == logging.WARNING for r in caplog.records)
    assert get_ticket_attachments(t.id) == []


def test_delete_never_touches_files_outside_upload_folder(app_context, caplog, tmp_path):
    folder = app_context.config['UPLOAD_FOLDER']
    customer = ensure_customer()
    t = create_ticket_row(customer)
    outside = tmp_path / 'dev.db'
    outside.write_bytes(b'sqlite')
    escaping = os.path.relpath(str(outside), folder)
    assert escaping.startswith('..')
    absolute = _attach(t.id, customer.id, str(outside))
    relative = _attach(t.id, customer.id, escaping)
    with caplog.at_level(logging.WARNING, logger='helpdesk.services.attachments'):
        assert delete_attachment(absolute.id) is True
        assert delete_attachment(relative.id) is True
    assert outside.exists()
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 2
    assert get_ticket_attachments(t.id) == []


def test_resolve_storage_path_stays_inside_upload_folder(app_context):
    root = os.path.realpath(app_context.config['UPLOAD_FOLDER'])
    assert resolve_storage_path('a/b.log') == os.path.join(root, 'a', 'b.log')
    assert resolve_storage_path(os.path.join(root, 'c.log')) == os.path.join(root, 'c.log')
    assert resolve_storage_path('../c.log') is None
    assert resolve_storage_path('a/../../c.log') is None
    assert resolve_storage_path('/etc/passwd') is None
    assert resolve_storage_path('.') is None
    assert resolve_storage_path('  ') is None
