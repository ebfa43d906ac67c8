"""Connection registry and event fan-out.

The registry maps every live connection (Socket.IO sid) to the player index
bound to it by a successful ``reg``. Routing to a player scans those
bindings, so a player logged in from two connections receives events on
both.
"""

import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional

from .protocol import encode_message

logger = logging.getLogger(__name__)

Transport = Callable[[str, str], None]


class ConnectionRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._bindings: Dict[str, Optional[str]] = {}

    def connect(self, sid: str) -> None:
        with self._lock:
            self._bindings.setdefault(sid, None)

    def disconnect(self, sid: str) -> Optional[str]:
        with self._lock:
            return self._bindings.pop(sid, None)

    def bind(self, sid: str, player_index: str) -> None:
        with self._lock:
            self._bindings[sid] = player_index

    def player_for(self, sid: str) -> Optional[str]:
        with self._lock:
            return self._bindings.get(sid)

    def is_connected(self, sid: str) -> bool:
        with self._lock:
            return sid in self._bindings

    def sids(self) -> List[str]:
        with self._lock:
            return list(self._bindings)

    def sids_for(self, player_indexes: Iterable[str]) -> List[str]:
        wanted = set(player_indexes)
        with self._lock:
            return [sid for sid, index in self._bindings.items() if index is not None and index in wanted]


class Notifier:
    """Sends envelopes to connections through a transport callable.

    A failing send only affects that connection: it is logged and the
    fan-out carries on.
    """

    def __init__(self, registry: ConnectionRegistry, transport: Transport):
        self.registry = registry
        self.transport = transport

    def send(self, sid: str, message_type: str, payload, message_id: int = 0) -> None:
        raw = encode_message(message_type, payload, message_id)
        self._deliver(sid, raw, message_type)

    def send_to_players(self, player_indexes: Iterable[str], message_type: str, payload) -> None:
        raw = encode_message(message_type, payload)
        for sid in self.registry.sids_for(player_indexes):
            self._deliver(sid, raw, message_type)

    def send_to_player(self, player_index: str, message_type: str, payload) -> None:
        self.send_to_players([player_index], message_type, payload)

    def send_to_game(self, game, message_type: str, payload) -> None:
        self.send_to_players(game.player_indexes(), message_type, payload)

    def broadcast(self, message_type: str, payload) -> None:
        raw = encode_message(message_type, payload)
        sids = self.registry.sids()
        for sid in sids:
            self._deliver(sid, raw, message_type)
        logger.debug(f"[broadcast] type={message_type} connections={len(sids)}")

    def _deliver(self, sid: str, raw: str, message_type: str) -> None:
        if not self.registry.is_connected(sid):
            logger.debug(f"[send-skip] sid={sid} type={message_type} connection gone")
            return
        try:
            self.transport(sid, raw)
        except Exception as exc:
            logger.warning(f"[send-failed] sid={sid} type={message_type} error={exc}")
            return
        logger.debug(f"[send] sid={sid} message={raw}")
