import json
import os
import random
import sys
import pytest

# Ensure the backend root (containing the `battleship` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from battleship import create_app, socketio
from battleship.models import GameStatus
from battleship.server import GameServer


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    WS_NAMESPACE = '/ws'
    ALLOWED_ORIGINS = ['http://localhost']
    FRONT_DIR = 'front'
    SEED_PLAYERS = ''
    STRICT_SHIP_LENGTH = False
    LOG_LEVEL = 'DEBUG'


# x, y, direction (True = vertical), length, type. Ships sit on rows 0, 2
# and 4 only, leaving rows 5-9 open water.
FLEET_LAYOUT = [
    (0, 0, False, 4, 'huge'),
    (5, 0, False, 3, 'large'),
    (0, 2, False, 3, 'large'),
    (4, 2, False, 2, 'medium'),
    (7, 2, False, 2, 'medium'),
    (0, 4, False, 2, 'medium'),
    (3, 4, False, 1, 'small'),
    (5, 4, False, 1, 'small'),
    (7, 4, False, 1, 'small'),
    (9, 4, False, 1, 'small'),
]


def ship_dict(x, y, direction, length, ship_type):
    return {'position': {'x': x, 'y': y}, 'direction': direction, 'length': length, 'type': ship_type}


def make_fleet(layout=FLEET_LAYOUT):
    return [ship_dict(*entry) for entry in layout]


def fleet_cells(layout=FLEET_LAYOUT):
    cells = []
    for x, y, direction, length, _ in layout:
        for i in range(length):
            cells.append((x, y + i) if direction else (x + i, y))
    return cells


def envelope(message_type, data=None, message_id=0):
    return json.dumps({'type': message_type, 'data': json.dumps(data or {}), 'id': message_id})


class Outbox:
    """Transport that records every envelope instead of sending it."""

    def __init__(self):
        self.sent = []

    def __call__(self, sid, raw):
        message = json.loads(raw)
        self.sent.append((sid, message['type'], json.loads(message['data'])))

    def to(self, sid, message_type=None):
        return [data for s, t, data in self.sent if s == sid and (message_type is None or t == message_type)]

    def types_to(self, sid):
        return [t for s, t, _ in self.sent if s == sid]

    def clear(self):
        self.sent.clear()


class Table:
    """Drives a GameServer the way two connected clients would."""

    def __init__(self, server, outbox):
        self.server = server
        self.outbox = outbox

    def connect(self, *sids):
        for sid in sids:
            self.server.connect(sid)

    def send(self, sid, message_type, data=None, message_id=0):
        self.server.handle_message(sid, envelope(message_type, data, message_id))

    def register(self, sid, name, password='secret'):
        self.send(sid, 'reg', {'name': name, 'password': password})
        return self.outbox.to(sid, 'reg')[-1]

    def pair(self, first='a', second='b'):
        """Register two players, seat them in one room and return the game."""
        self.connect(first, second)
        self.register(first, first)
        self.register(second, second)
        self.send(first, 'create_room')
        room_id = self.server.rooms.joinable_rooms()[0].room_id
        self.send(second, 'add_user_to_room', {'indexRoom': room_id})
        created = self.outbox.to(first, 'create_game')[-1]
        return self.server.sessions.get(created['idGame'])

    def start(self, first='a', second='b'):
        """Pair two players and submit the standard fleet for both."""
        game = self.pair(first, second)
        for sid, player in zip((first, second), game.players):
            self.send(sid, 'add_ships', {
                'gameId': game.game_id,
                'indexPlayer': player.id_player,
                'ships': make_fleet(),
            })
        assert game.status is GameStatus.PLAYING
        return game


@pytest.fixture()
def outbox():
    return Outbox()


@pytest.fixture()
def server(outbox):
    return GameServer(outbox, rng=random.Random(1234))


@pytest.fixture()
def table(server, outbox):
    return Table(server, outbox)


@pytest.fixture()
def fleet():
    return make_fleet()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()
