"""Game sessions: fleet submission, turns and attack resolution.

A game moves ``waiting`` -> ``playing`` -> ``finished``. Its two players are
addressed by session-scoped ids handed out in ``create_game``; those ids are
regenerated for every game and never reveal the directory index.
"""

import logging
import random
from typing import Dict, Optional

from battleship.errors import (
    AlreadyAttacked,
    GameAlreadyStarted,
    GameNotFound,
    InvalidFleet,
    NoAvailableCells,
    NotPlaying,
    NotYourTurn,
    OutOfBounds,
    PlayerNotInGame,
)
from battleship.models import (
    AttackStatus,
    Cell,
    Game,
    GamePlayer,
    GameStatus,
    Ship,
    empty_board,
    generate_id,
    in_bounds,
)
from battleship.protocol import ATTACK, CREATE_GAME, FINISH, START_GAME, TURN
from .fleet import ring_cells, ship_cells, validate_fleet

logger = logging.getLogger(__name__)


class GameSessions:
    def __init__(self, notifier, directory, rng: Optional[random.Random] = None, strict_length=False):
        self.notifier = notifier
        self.directory = directory
        self.rng = rng or random.Random()
        self.strict_length = strict_length
        # Set by the game server; cleared whenever a game finishes
        self.matchmaker = None
        self._games: Dict[str, Game] = {}
        self._session_ids = set()

    def get(self, game_id) -> Optional[Game]:
        return self._games.get(game_id)

    def _new_session_id(self):
        session_id = generate_id()
        while session_id in self._session_ids:
            session_id = generate_id()
        self._session_ids.add(session_id)
        return session_id

    def create_game(self, room) -> Game:
        players = [
            GamePlayer(id_player=self._new_session_id(), player_index=user.index)
            for user in room.room_users
        ]
        game = Game(players=players)
        while game.game_id in self._games:
            game = Game(players=players)
        self._games[game.game_id] = game
        logger.info(f"[game-create] game={game.game_id} room={room.room_id}")

        for player in game.players:
            self.notifier.send_to_player(player.player_index, CREATE_GAME, {
                'idGame': game.game_id,
                'idPlayer': player.id_player,
            })
        return game

    def _lookup(self, game_id, id_player):
        game = self._games.get(game_id)
        if not game:
            raise GameNotFound()
        position = game.find_player(id_player)
        if position is None:
            raise PlayerNotInGame()
        return game, position

    # ---- Fleet placement ----

    def submit_fleet(self, game_id, id_player, ships_data, origin_sid=None) -> Game:
        game, position = self._lookup(game_id, id_player)
        if game.status is not GameStatus.WAITING:
            raise GameAlreadyStarted()

        if not isinstance(ships_data, list):
            raise InvalidFleet()
        try:
            ships = [Ship.from_dict(item) for item in ships_data]
        except ValueError as exc:
            logger.info(f"[fleet-reject] game={game_id} player={id_player} reason={exc}")
            raise InvalidFleet() from exc
        if not validate_fleet(ships, strict_length=self.strict_length):
            logger.info(f"[fleet-reject] game={game_id} player={id_player} reason=placement")
            raise InvalidFleet()

        player = game.players[position]
        player.ships = ships
        player.board = empty_board()
        for ship in ships:
            for x, y in ship_cells(ship):
                player.board[y][x] = Cell.SHIP
        player.ready = True
        logger.info(f"[fleet-ready] game={game_id} player={id_player}")

        if all(p.ready for p in game.players):
            self._start(game)
        elif origin_sid is not None:
            self.notifier.send(origin_sid, START_GAME, {
                'ships': player.ships_to_dict(),
                'currentPlayerIndex': player.id_player,
            })
        return game

    def _start(self, game: Game) -> None:
        game.current_player = self.rng.choice([0, 1])
        game.status = GameStatus.PLAYING
        first = game.turn_player.id_player
        logger.info(f"[game-start] game={game.game_id} first={first}")

        for player in game.players:
            self.notifier.send_to_player(player.player_index, START_GAME, {
                'ships': player.ships_to_dict(),
                'currentPlayerIndex': first,
            })
            self.notifier.send_to_player(player.player_index, TURN, {'currentPlayer': first})

    # ---- Attacks ----

    def _attacker(self, game_id, id_player):
        game = self._games.get(game_id)
        if not game:
            raise GameNotFound()
        if game.status is not GameStatus.PLAYING:
            raise NotPlaying()
        position = game.find_player(id_player)
        if position is None:
            raise PlayerNotInGame()
        if game.current_player != position:
            raise NotYourTurn()
        return game, position

    def attack(self, game_id, id_player, x, y) -> AttackStatus:
        game, position = self._attacker(game_id, id_player)
        for value in (x, y):
            if not isinstance(value, int) or isinstance(value, bool):
                raise OutOfBounds()
        if not in_bounds(x, y):
            raise OutOfBounds()
        if game.opponent_of(position).cell(x, y) in (Cell.HIT, Cell.MISS):
            raise AlreadyAttacked()
        return self._resolve(game, position, x, y)

    def random_attack(self, game_id, id_player) -> AttackStatus:
        game, position = self._attacker(game_id, id_player)
        candidates = game.opponent_of(position).open_cells()
        if not candidates:
            raise NoAvailableCells()
        x, y = self.rng.choice(candidates)
        return self._resolve(game, position, x, y)

    def _resolve(self, game: Game, position: int, x: int, y: int) -> AttackStatus:
        attacker = game.players[position]
        defender = game.opponent_of(position)

        if defender.cell(x, y) is not Cell.SHIP:
            defender.board[y][x] = Cell.MISS
            self._announce_attack(game, attacker, x, y, AttackStatus.MISS)
            game.current_player = 1 - position
            self._announce_turn(game)
            return AttackStatus.MISS

        defender.board[y][x] = Cell.HIT
        ship = self._ship_at(defender, x, y)
        if any(defender.cell(cx, cy) is not Cell.HIT for cx, cy in ship_cells(ship)):
            self._announce_attack(game, attacker, x, y, AttackStatus.SHOT)
            self._announce_turn(game)
            return AttackStatus.SHOT

        for rx, ry in ring_cells(ship):
            if defender.cell(rx, ry) is Cell.EMPTY:
                defender.board[ry][rx] = Cell.MISS
        self._announce_attack(game, attacker, x, y, AttackStatus.KILLED)

        if defender.has_ships_afloat():
            self._announce_turn(game)
        else:
            self._finish(game, attacker)
        return AttackStatus.KILLED

    @staticmethod
    def _ship_at(player: GamePlayer, x, y) -> Ship:
        for ship in player.ships:
            if (x, y) in ship_cells(ship):
                return ship
        # Ship cells are only ever written from player.ships
        raise LookupError(f'no ship covers ({x}, {y})')

    def _finish(self, game: Game, winner: GamePlayer) -> None:
        game.status = GameStatus.FINISHED
        logger.info(f"[game-finish] game={game.game_id} winner={winner.id_player}")
        self.notifier.send_to_game(game, FINISH, {'winPlayer': winner.id_player})
        self.directory.record_win(winner.player_index)
        if self.matchmaker is not None:
            self.matchmaker.clear()

    def _announce_attack(self, game, attacker, x, y, status: AttackStatus) -> None:
        self.notifier.send_to_game(game, ATTACK, {
            'position': {'x': x, 'y': y},
            'currentPlayer': attacker.id_player,
            'status': status.value,
        })

    def _announce_turn(self, game) -> None:
        self.notifier.send_to_game(game, TURN, {'currentPlayer': game.turn_player.id_player})
