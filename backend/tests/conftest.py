import os
import sys
import pytest
from flask.testing import FlaskClient

# Ensure the backend root (containing the `wordplay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordplay import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4


class FreshContextClient(FlaskClient):
    """Give every request its own app context (and ``g``), as a real server does,
    instead of reusing the fixture's long-lived one."""

    def open(self, *args, **kwargs):
        with self.application.app_context():
            return super().open(*args, **kwargs)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    application.test_client_class = FreshContextClient
    with application.app_context():
        # Ensure models are imported so tables are created
        import wordplay.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def auth_client(client):
    """Test client with a freshly registered, logged-in user."""
    res = client.post('/api/register', json={'username': 'alice', 'password': 'secret123'})
    assert res.status_code == 201
    return client


@pytest.fixture()
def sio_client(flask_app, client):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=client,
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
