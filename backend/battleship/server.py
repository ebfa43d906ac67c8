"""The state-owning game server.

All directory, room and game state lives behind ``GameServer``. Requests are
processed one at a time under a single lock, and each one runs to completion
(every resulting send included) before the next is accepted.
"""

import logging
import random
import threading
from typing import Optional

from .errors import GameError, NotRegistered
from .notifications import ConnectionRegistry, Notifier
from .protocol import (
    ADD_SHIPS,
    ADD_USER_TO_ROOM,
    ATTACK,
    CREATE_ROOM,
    RANDOM_ATTACK,
    REG,
    UPDATE_ROOM,
    UPDATE_WINNERS,
    ProtocolError,
    decode_message,
)
from .services.players import PlayerDirectory
from .services.rooms import RoomMatchmaker
from .services.sessions import GameSessions

logger = logging.getLogger(__name__)


class GameServer:
    def __init__(self, transport, rng: Optional[random.Random] = None, strict_ship_length=False):
        self._lock = threading.Lock()
        self.registry = ConnectionRegistry()
        self.notifier = Notifier(self.registry, transport)
        self.directory = PlayerDirectory(self.notifier)
        self.sessions = GameSessions(self.notifier, self.directory, rng=rng, strict_length=strict_ship_length)
        self.rooms = RoomMatchmaker(self.notifier, self.sessions)
        self.sessions.matchmaker = self.rooms
        self._handlers = {
            REG: self._handle_reg,
            CREATE_ROOM: self._handle_create_room,
            ADD_USER_TO_ROOM: self._handle_add_user_to_room,
            ADD_SHIPS: self._handle_add_ships,
            ATTACK: self._handle_attack,
            RANDOM_ATTACK: self._handle_random_attack,
        }

    def seed_players(self, accounts: str) -> None:
        """Pre-register ``name:password`` pairs separated by commas."""
        for entry in (accounts or '').split(','):
            name, sep, password = entry.strip().partition(':')
            if not (name and sep and password):
                continue
            self.directory.seed(name, password)
            logger.info(f"[seed] name={name}")

    # ---- Connection lifecycle ----

    def connect(self, sid: str) -> None:
        with self._lock:
            self.registry.connect(sid)
            logger.info(f"[connect] sid={sid}")
            self.notifier.send(sid, UPDATE_ROOM, [room.to_dict() for room in self.rooms.joinable_rooms()])
            self.notifier.send(sid, UPDATE_WINNERS, self.directory.winners())

    def disconnect(self, sid: str) -> None:
        # Games are left untouched; the departed player simply stops
        # receiving events.
        with self._lock:
            player_index = self.registry.disconnect(sid)
        logger.info(f"[disconnect] sid={sid} player={player_index}")

    # ---- Requests ----

    def handle_message(self, sid: str, raw) -> None:
        try:
            envelope = decode_message(raw)
        except ProtocolError as exc:
            logger.warning(f"[drop] sid={sid} malformed envelope: {exc}")
            return

        handler = self._handlers.get(envelope.type)
        if handler is None:
            logger.warning(f"[drop] sid={sid} unknown message type={envelope.type}")
            return

        logger.debug(f"[recv] sid={sid} type={envelope.type} data={envelope.data}")
        with self._lock:
            try:
                handler(sid, envelope.data, envelope.id)
            except GameError as exc:
                logger.info(f"[reject] sid={sid} type={envelope.type} error={exc.error_text}")
                self.notifier.send(sid, envelope.type, self._error_payload(envelope, exc), envelope.id)
            except Exception:
                logger.exception(f"[error] sid={sid} type={envelope.type} unhandled failure")

    @staticmethod
    def _error_payload(envelope, exc: GameError):
        payload = exc.to_dict()
        if envelope.type == REG:
            name = envelope.data.get('name')
            payload = {'name': name if isinstance(name, str) else '', 'index': '', **payload}
        return payload

    def _current_player(self, sid):
        index = self.registry.player_for(sid)
        player = self.directory.get(index) if index else None
        if not player:
            raise NotRegistered()
        return player

    def _handle_reg(self, sid, data, message_id):
        player, created = self.directory.register_or_login(data.get('name'), data.get('password'))
        self.registry.bind(sid, player.index)
        self.notifier.send(sid, REG, {**player.to_dict(), 'error': False, 'errorText': ''}, message_id)
        if created:
            self.directory.broadcast_winners()

    def _handle_create_room(self, sid, data, message_id):
        self.rooms.create_room(self._current_player(sid))

    def _handle_add_user_to_room(self, sid, data, message_id):
        self.rooms.add_user_to_room(self._current_player(sid), data.get('indexRoom'))

    def _handle_add_ships(self, sid, data, message_id):
        self.sessions.submit_fleet(data.get('gameId'), data.get('indexPlayer'), data.get('ships'), origin_sid=sid)

    def _handle_attack(self, sid, data, message_id):
        self.sessions.attack(data.get('gameId'), data.get('indexPlayer'), data.get('x'), data.get('y'))

    def _handle_random_attack(self, sid, data, message_id):
        self.sessions.random_attack(data.get('gameId'), data.get('indexPlayer'))
