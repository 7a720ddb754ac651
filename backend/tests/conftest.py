import os
import random
import sys

import pytest

# Ensure the backend root (containing the `drawphone` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from drawphone.game.store import RoomStore
from drawphone.realtime.coordinator import Coordinator
from drawphone.server import create_app


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    HOST = '127.0.0.1'
    PORT = 0
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'WARNING'
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = 'threading'
    PING_TIMEOUT_SEC = 30
    PING_INTERVAL_SEC = 10
    MAX_HTTP_BUFFER_SIZE = 1_000_000
    DEFAULT_MAX_ROUNDS = 3
    MIN_PLAYERS = 2
    ROOM_CODE_LENGTH = 4
    NICKNAME_MAX_LENGTH = 16
    REQUIRE_HOST_READY = True


class RecordingTransport:
    """In-memory stand-in for the Socket.IO transport."""

    def __init__(self):
        self.sent = []
        self.groups = {}
        self.connections = set()

    def send(self, sid, event, data=None):
        self.sent.append(('unicast', sid, event, data))

    def send_to_group(self, group, event, data=None, skip_sid=None):
        self.sent.append(('group', group, event, data))

    def broadcast(self, event, data=None):
        self.sent.append(('broadcast', None, event, data))

    def join_group(self, sid, group):
        self.groups.setdefault(group, set()).add(sid)

    def leave_group(self, sid, group):
        self.groups.get(group, set()).discard(sid)

    def add_connection(self, sid):
        self.connections.add(sid)

    def remove_connection(self, sid):
        self.connections.discard(sid)

    def events(self, name, kind=None, target=None):
        return [
            data for (k, t, e, data) in self.sent
            if e == name and (kind is None or k == kind) and (target is None or t == target)
        ]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def store():
    return RoomStore(rng=random.Random(1234))


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def coordinator(store, transport):
    return Coordinator(store, transport)


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app, socketio):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for c in clients:
        try:
            if c.is_connected():
                c.disconnect()
        except Exception:
            pass
