import heapq
import os
import random
import sys

import pytest

# Ensure the backend root (containing the `teadraw` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from teadraw.game.clock import TimerHandle
from teadraw.game.leaderboard import Leaderboard
from teadraw.game.models import GameSettings
from teadraw.game.session import GameSession


class FakeTime:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now


class FakeScheduler:
    """Runs deferred callbacks only when the test advances fake time."""

    def __init__(self, clock):
        self.clock = clock
        self._pending = []
        self._seq = 0

    def call_later(self, delay, callback, *args):
        handle = TimerHandle()
        self._seq += 1
        heapq.heappush(self._pending, (self.clock.now + delay, self._seq, handle, callback, args))
        return handle

    def advance(self, seconds):
        target = self.clock.now + seconds
        while self._pending and self._pending[0][0] <= target:
            due, _, handle, callback, args = heapq.heappop(self._pending)
            self.clock.now = max(self.clock.now, due)
            if not handle.cancelled:
                callback(*args)
        self.clock.now = target

    def pending(self):
        return [entry for entry in self._pending if not entry[2].cancelled]


class RecordingGateway:
    def __init__(self):
        self.sent = []

    def to_room(self, room_id, event, payload, skip_sid=None):
        self.sent.append({'kind': 'room', 'to': room_id, 'event': event, 'payload': payload, 'skip': skip_sid})

    def to_player(self, player_id, event, payload):
        self.sent.append({'kind': 'player', 'to': player_id, 'event': event, 'payload': payload, 'skip': None})

    def events(self, name):
        return [m for m in self.sent if m['event'] == name]

    def payloads(self, name):
        return [m['payload'] for m in self.events(name)]

    def last(self, name):
        found = self.events(name)
        return found[-1]['payload'] if found else None

    def clear(self):
        self.sent = []


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ORIGINS = '*'
    SOCKETIO_ASYNC_MODE = 'threading'
    DEFAULT_ROOM_ID = 'default-room'
    ROUND_DURATION_SEC = 30
    REVEAL_DURATION_SEC = 6
    MAX_ROUNDS = 10
    TICK_INTERVAL_SEC = 1.0
    LEADERBOARD_TOP_N = 10
    RESET_SCORES_ON_RESTART = False


@pytest.fixture()
def fake_time():
    return FakeTime()


@pytest.fixture()
def scheduler(fake_time):
    return FakeScheduler(fake_time)


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def leaderboard():
    return Leaderboard(top_n=10)


@pytest.fixture()
def make_session(gateway, scheduler, leaderboard, fake_time):
    def _make(words=('Watermelon',), room_id='default-room', **settings):
        return GameSession(
            room_id,
            gateway,
            scheduler,
            leaderboard,
            GameSettings(**settings),
            words=list(words),
            rng=random.Random(7),
            time_fn=fake_time,
        )

    return _make


@pytest.fixture()
def session(make_session):
    return make_session()


@pytest.fixture()
def app_and_socketio(fake_time):
    from teadraw.server import create_app

    application, socketio = create_app(TestConfig, scheduler=FakeScheduler(fake_time))
    return application, socketio


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(app_and_socketio):
    application, socketio = app_and_socketio
    clients = []

    def _connect():
        test_client = socketio.test_client(application, flask_test_client=application.test_client())
        clients.append(test_client)
        return test_client

    yield _connect

    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
