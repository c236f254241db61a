import os
import random
import sys
import pytest

# Ensure the backend root (containing the `gamenight` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from gamenight import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ROOM_TTL_SEC = 7200
    SESSION_TTL_SEC = 7200
    HEARTBEAT_TTL_SEC = 300
    ACTION_ID_TTL_SEC = 3600
    DISCONNECT_TIMEOUT_SEC = 15
    BOT_REPLACEMENT_TIMEOUT_SEC = 60
    MAX_ADVANCEMENT_STEPS = 50
    ROUND2_ALL_PASS_POLICY = 'stick'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import gamenight.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app, client):
    # shares the HTTP client's cookie jar so the login session reaches the socket
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=client,
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def published(monkeypatch):
    """Capture ``(channel, event, message)`` for everything the services publish."""
    from gamenight.services import events
    sent = []

    def record(channel, event, message):
        sent.append((channel, event, message))
        return True

    monkeypatch.setattr(events, 'publish', record)
    return sent


def make_players(count, bots=()):
    """Plain player dicts for engine-level tests; ``bots`` lists bot seat indexes."""
    return [
        {
            'id': f'p{i}',
            'name': f'Player {i}',
            'is_bot': i in bots,
            'is_connected': True,
            'joined_at': float(i),
            'score': 0,
        }
        for i in range(count)
    ]
