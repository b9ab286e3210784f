import os, sys, pytest
# Ensure backend directory is on path so 'helpdesk' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from helpdesk import create_app, get_db
from helpdesk.models.user import Base
# Import all model modules to ensure tables are registered before create_all
import helpdesk.models.ticket  # noqa: F401
import helpdesk.models.comment  # noqa: F401
import helpdesk.models.attachment  # noqa: F401

@pytest.fixture(scope='session', autouse=True)
def app_instance(tmp_path_factory):
    upload_dir = tmp_path_factory.mktemp('uploads')
    app = create_app({
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'UPLOAD_FOLDER': str(upload_dir),
        'TESTING': True,
    })
    # After app and blueprints are registered, ensure all tables exist
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app

@pytest.fixture(autouse=True)
def clean_tables(app_instance):
    yield
    session = get_db()
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    # drop identity-map leftovers so reused primary keys load fresh rows
    session.expunge_all()

@pytest.fixture()
def app_context(app_instance):
    with app_instance.app_context():
        yield app_instance

@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()
