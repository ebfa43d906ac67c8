"""Wire envelope shared by both directions.

Every message is ``{"type": str, "data": str, "id": int}`` where ``data`` is
itself a JSON document encoded as a string. Clients depend on the double
encoding, so it is kept on the way out and expected on the way in.
"""

from dataclasses import dataclass, field
from typing import Any, Dict
import json

# Inbound request types
REG = 'reg'
CREATE_ROOM = 'create_room'
ADD_USER_TO_ROOM = 'add_user_to_room'
ADD_SHIPS = 'add_ships'
ATTACK = 'attack'
RANDOM_ATTACK = 'randomAttack'

# Outbound event types
UPDATE_ROOM = 'update_room'
UPDATE_WINNERS = 'update_winners'
CREATE_GAME = 'create_game'
START_GAME = 'start_game'
TURN = 'turn'
FINISH = 'finish'


class ProtocolError(ValueError):
    """Raised for envelopes that cannot be decoded; these are dropped."""


@dataclass
class Envelope:
    type: str
    data: Any = field(default_factory=dict)
    id: int = 0

    def encode(self) -> str:
        return json.dumps({'type': self.type, 'data': json.dumps(self.data), 'id': self.id})


def encode_message(message_type: str, payload: Any, message_id: int = 0) -> str:
    return Envelope(message_type, payload, message_id).encode()


def decode_message(raw) -> Envelope:
    """Decode an inbound envelope.

    ``raw`` may be the JSON text (str/bytes) or an already-decoded dict, as
    Socket.IO clients are free to send either. An empty ``data`` string is
    treated as an empty object.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode('utf-8', errors='replace')
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise ProtocolError(f'envelope is not valid JSON: {exc}') from exc
    if not isinstance(raw, dict):
        raise ProtocolError('envelope must be a JSON object')

    message_type = raw.get('type')
    if not isinstance(message_type, str) or not message_type:
        raise ProtocolError('envelope type is missing')

    data = raw.get('data')
    if data is None or data == '':
        payload: Dict[str, Any] = {}
    elif isinstance(data, str):
        try:
            payload = json.loads(data)
        except ValueError as exc:
            raise ProtocolError(f'envelope data is not valid JSON: {exc}') from exc
    else:
        payload = data
    if not isinstance(payload, dict):
        raise ProtocolError('envelope data must decode to an object')

    message_id = raw.get('id', 0)
    if not isinstance(message_id, int) or isinstance(message_id, bool):
        message_id = 0
    return Envelope(message_type, payload, message_id)
