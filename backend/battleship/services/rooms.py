import logging
from typing import Dict, List, Optional

from battleship.errors import AlreadyInAnotherRoom, AlreadyInRoom, RoomFull, RoomNotFound
from battleship.models import Room, RoomUser
from battleship.protocol import UPDATE_ROOM

logger = logging.getLogger(__name__)


class RoomMatchmaker:
    """Pending two-player rooms.

    A room lives until its second player joins; at that point it is removed
    and handed to the game sessions to spawn a game.
    """

    def __init__(self, notifier, sessions):
        self.notifier = notifier
        self.sessions = sessions
        self._rooms: Dict[str, Room] = {}

    def room_of(self, player_index) -> Optional[Room]:
        for room in self._rooms.values():
            if room.has_player(player_index):
                return room
        return None

    def get(self, room_id) -> Optional[Room]:
        return self._rooms.get(room_id)

    def joinable_rooms(self) -> List[Room]:
        return [room for room in self._rooms.values() if len(room.room_users) == 1]

    def create_room(self, player) -> Room:
        if self.room_of(player.index):
            raise AlreadyInRoom()
        room = Room(room_users=[RoomUser(name=player.name, index=player.index)])
        while room.room_id in self._rooms:
            room = Room(room_users=room.room_users)
        self._rooms[room.room_id] = room
        logger.info(f"[room-create] room={room.room_id} player={player.name}")
        self.broadcast_rooms()
        return room

    def add_user_to_room(self, player, room_id) -> Room:
        room = self._rooms.get(room_id)
        if not room:
            raise RoomNotFound()
        if room.is_full:
            raise RoomFull()
        current = self.room_of(player.index)
        if current and current.room_id != room.room_id:
            raise AlreadyInAnotherRoom()

        if not room.has_player(player.index):
            room.room_users.append(RoomUser(name=player.name, index=player.index))
            logger.info(f"[room-join] room={room.room_id} player={player.name}")

        if room.is_full:
            del self._rooms[room.room_id]
            logger.info(f"[room-full] room={room.room_id} spawning game")
            self.sessions.create_game(room)
        self.broadcast_rooms()
        return room

    def clear(self) -> None:
        """Return the matchmaking pool to empty."""
        dropped = len(self._rooms)
        self._rooms.clear()
        logger.info(f"[room-reset] dropped={dropped}")
        self.broadcast_rooms()

    def broadcast_rooms(self) -> None:
        self.notifier.broadcast(UPDATE_ROOM, [room.to_dict() for room in self.joinable_rooms()])
