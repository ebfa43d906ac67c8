from flask import request
from battleship import socketio
from battleship.server import GameServer


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def make_transport(namespace: str):
    """Deliver an encoded envelope to a single connection."""
    def _send(sid: str, raw: str) -> None:
        socketio.send(raw, to=sid, namespace=namespace)
    return _send


def register_socketio_handlers(game_server: GameServer, namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers.

    Every envelope travels as the payload of a ``message`` event; the game
    server decodes it and routes it by type.
    """
    def handle_connect(auth=None):
        game_server.connect(_get_sid())

    def handle_disconnect(*_args):
        game_server.disconnect(_get_sid())

    def handle_message(data):
        game_server.handle_message(_get_sid(), data)

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('message', handle_message, namespace=namespace)
