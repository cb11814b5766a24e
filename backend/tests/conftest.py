import os
import sys
import pytest

# Ensure the backend root (containing the `guessgame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from guessgame import create_app, get_session_manager, socketio
from guessgame.config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    # Keeps leftover timer threads short-lived; expiry tests shorten it further
    ROUND_DURATION_SEC = 2
    STATIC_DIR = ''
    SOCKETIO_NAMESPACE = '/'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application
    get_session_manager(application).shutdown()


@pytest.fixture()
def manager(flask_app):
    return get_session_manager(flask_app)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Factory for connected Socket.IO test clients.

    Each returned client carries ``user_id``, the connection id the server
    announced in its ``connected`` event.
    """
    opened = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        received = test_client.get_received()
        hello = [pkt for pkt in received if pkt['name'] == 'connected']
        test_client.user_id = hello[0]['args'][0]['id']
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


def named(received, name):
    """Payloads of the received packets called ``name``, oldest first."""
    return [pkt['args'][0] if pkt['args'] else None for pkt in received if pkt['name'] == name]
