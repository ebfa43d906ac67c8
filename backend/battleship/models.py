from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import uuid

BOARD_SIZE = 10

SHIP_LENGTHS = {
    'small': 1,
    'medium': 2,
    'large': 3,
    'huge': 4,
}

# Number of ships of each type a fleet must contain
REQUIRED_FLEET = {
    'small': 4,
    'medium': 3,
    'large': 2,
    'huge': 1,
}


def generate_id():
    """Generate a process-unique identifier for players, rooms and games."""
    return uuid.uuid4().hex


class Cell(str, Enum):
    EMPTY = 'empty'
    SHIP = 'ship'
    HIT = 'hit'
    MISS = 'miss'


class GameStatus(str, Enum):
    WAITING = 'waiting'
    PLAYING = 'playing'
    FINISHED = 'finished'


class AttackStatus(str, Enum):
    MISS = 'miss'
    SHOT = 'shot'
    KILLED = 'killed'


def empty_board():
    return [[Cell.EMPTY for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]


def in_bounds(x, y):
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


@dataclass
class Player:
    name: str
    password: str
    index: str = field(default_factory=generate_id)
    wins: int = 0

    def to_dict(self):
        return {'name': self.name, 'index': self.index}


@dataclass
class RoomUser:
    name: str
    index: str

    def to_dict(self):
        return {'name': self.name, 'index': self.index}


@dataclass
class Room:
    room_id: str = field(default_factory=generate_id)
    room_users: List[RoomUser] = field(default_factory=list)

    def has_player(self, index):
        return any(user.index == index for user in self.room_users)

    @property
    def is_full(self):
        return len(self.room_users) >= 2

    def to_dict(self):
        return {
            'roomId': self.room_id,
            'roomUsers': [user.to_dict() for user in self.room_users],
        }


@dataclass(frozen=True)
class Ship:
    x: int
    y: int
    direction: bool  # True: vertical (grows along y), False: horizontal
    length: int
    type: str

    @classmethod
    def from_dict(cls, data):
        """Build a ship from its wire form.

        Raises ``ValueError`` when the entry is malformed; the caller maps
        that onto a fleet rejection.
        """
        if not isinstance(data, dict):
            raise ValueError('ship must be an object')
        position = data.get('position')
        if not isinstance(position, dict):
            raise ValueError('ship position is required')
        x, y = position.get('x'), position.get('y')
        length = data.get('length')
        direction = data.get('direction')
        ship_type = data.get('type')
        for value in (x, y, length):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError('ship coordinates and length must be integers')
        if not isinstance(direction, bool):
            raise ValueError('ship direction must be a boolean')
        if not isinstance(ship_type, str):
            raise ValueError('ship type must be a string')
        if length < 1:
            raise ValueError('ship length must be positive')
        return cls(x=x, y=y, direction=direction, length=length, type=ship_type)

    def to_dict(self):
        return {
            'position': {'x': self.x, 'y': self.y},
            'direction': self.direction,
            'length': self.length,
            'type': self.type,
        }


@dataclass
class GamePlayer:
    id_player: str
    player_index: str
    ships: List[Ship] = field(default_factory=list)
    board: List[List[Cell]] = field(default_factory=empty_board)
    ready: bool = False

    def cell(self, x, y):
        return self.board[y][x]

    def has_ships_afloat(self):
        return any(cell is Cell.SHIP for row in self.board for cell in row)

    def open_cells(self):
        """Cells an opponent may still fire at (neither hit nor miss)."""
        return [
            (x, y)
            for y in range(BOARD_SIZE)
            for x in range(BOARD_SIZE)
            if self.board[y][x] in (Cell.EMPTY, Cell.SHIP)
        ]

    def ships_to_dict(self):
        return [ship.to_dict() for ship in self.ships]


@dataclass
class Game:
    players: List[GamePlayer]
    game_id: str = field(default_factory=generate_id)
    current_player: int = 0
    status: GameStatus = GameStatus.WAITING

    def find_player(self, id_player) -> Optional[int]:
        for position, player in enumerate(self.players):
            if player.id_player == id_player:
                return position
        return None

    @property
    def turn_player(self):
        return self.players[self.current_player]

    def opponent_of(self, position):
        return self.players[1 - position]

    def player_indexes(self):
        return [player.player_index for player in self.players]
