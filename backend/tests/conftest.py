import os
import sys
import pytest

# Ensure the backend root (containing the `gameshow` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from werkzeug.security import generate_password_hash

from gameshow import create_app, socketio
from gameshow.actions import parse_action
from gameshow.services.games import GameEngine, Notifier, SessionStore, StageTimers, VenueRegistry

ADMIN_PASSWORD = 'letmein'
CHEAP_HASH = 'pbkdf2:sha256:1000'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ADMIN_PASSWORD = ADMIN_PASSWORD
    ADMIN_PASSWORD_HASH_METHOD = CHEAP_HASH
    ROLL_DURATION_SEC = 3
    QUESTION_DURATION_SEC = 60
    RESULTS_DURATION_SEC = 5
    DISCONNECT_GRACE_SEC = 30
    SCORE_INCREMENT = 10
    DICE_FACES = 6
    VENUES = [
        {'id': 'main-hall', 'name': 'Main Hall', 'capacity': 3},
        {'id': 'annex', 'name': 'Annex', 'capacity': 2},
    ]
    VENUE_CAPACITY = 25
    DEFAULT_VENUE_ID = 'main-hall'
    CORS_ORIGINS = ['*']
    LOG_LEVEL = 'INFO'


class FakeTaskRunner:
    """Stands in for socketio.start_background_task: tasks queue up and
    run only when the test says so, with sleeps skipped."""

    def __init__(self):
        self.queue = []
        self.slept = []

    def start(self, fn, *args, **kwargs):
        self.queue.append((fn, args, kwargs))

    def sleep(self, seconds):
        self.slept.append(seconds)

    def run_pending(self):
        batch, self.queue = self.queue, []
        for fn, args, kwargs in batch:
            fn(*args, **kwargs)
        return len(batch)


class RecordingNotifier(Notifier):
    def __init__(self):
        super().__init__()
        self.inbox = {}
        self.broadcasts = []

    def emit_to(self, connection_id, event, payload=None):
        self.inbox.setdefault(connection_id, []).append((event, payload))

    def broadcast(self, venue_id, event, payload):
        self.broadcasts.append((venue_id, event, payload))
        for (vid, _pid), cid in list(self._by_player.items()):
            if vid == venue_id:
                self.emit_to(cid, event, payload)

    def events(self, connection_id, name=None):
        received = self.inbox.get(connection_id, [])
        return [payload for event, payload in received if name is None or event == name]

    def last_state(self, connection_id):
        states = self.events(connection_id, 'gameState')
        return states[-1] if states else None

    def clear(self):
        self.inbox.clear()
        self.broadcasts.clear()


@pytest.fixture()
def runner():
    return FakeTaskRunner()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def engine(runner, notifier):
    config = {k: getattr(TestConfig, k) for k in dir(TestConfig) if k.isupper()}
    venues = VenueRegistry(config['VENUES'], default_capacity=config['VENUE_CAPACITY'])
    store = SessionStore(
        venues.ids(),
        admin_password_hash=generate_password_hash(ADMIN_PASSWORD, method=CHEAP_HASH),
        capacities={v.id: v.capacity for v in venues.all()},
    )
    timers = StageTimers(runner.start, runner.sleep)
    return GameEngine(store, venues, timers, notifier, config=config)


@pytest.fixture()
def act(engine):
    def _act(connection_id, event, payload=None):
        return engine.dispatch(connection_id, parse_action(event, payload))
    return _act


@pytest.fixture()
def flask_app(runner):
    application = create_app(
        TestConfig,
        timers=StageTimers(runner.start, runner.sleep),
    )
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        if test_client.is_connected():
            test_client.disconnect()


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()
