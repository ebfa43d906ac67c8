import logging
from typing import Dict, List, Optional, Tuple

from battleship.errors import IncorrectCredentials, InvalidCredentialsFormat
from battleship.models import Player
from battleship.protocol import UPDATE_WINNERS

logger = logging.getLogger(__name__)


class PlayerDirectory:
    """Registered players, keyed by name, with their win counters."""

    def __init__(self, notifier):
        self.notifier = notifier
        self._by_name: Dict[str, Player] = {}
        self._by_index: Dict[str, Player] = {}

    def register_or_login(self, name, password) -> Tuple[Player, bool]:
        """Log in ``name`` or create it on first sight.

        Returns the player and whether it was just created; the caller
        replies to the connection first and then calls
        ``broadcast_winners`` for new players. Passwords are compared as-is.
        """
        if not isinstance(name, str) or not name or not isinstance(password, str) or not password:
            raise InvalidCredentialsFormat()

        existing = self._by_name.get(name)
        if existing:
            if existing.password != password:
                logger.info(f"[login-denied] name={name}")
                raise IncorrectCredentials()
            logger.info(f"[login] name={name} index={existing.index}")
            return existing, False

        player = self._add(name, password)
        logger.info(f"[register] name={name} index={player.index}")
        return player, True

    def seed(self, name, password) -> Player:
        """Register an account at startup without notifying anyone."""
        return self._by_name.get(name) or self._add(name, password)

    def _add(self, name, password) -> Player:
        player = Player(name=name, password=password)
        while player.index in self._by_index:
            player = Player(name=name, password=password)
        self._by_name[name] = player
        self._by_index[player.index] = player
        return player

    def get(self, index) -> Optional[Player]:
        return self._by_index.get(index)

    def find_by_name(self, name) -> Optional[Player]:
        return self._by_name.get(name)

    def record_win(self, index) -> None:
        player = self._by_index.get(index)
        if not player:
            logger.warning(f"[win-skip] unknown player index={index}")
            return
        player.wins += 1
        logger.info(f"[win] name={player.name} wins={player.wins}")
        self.broadcast_winners()

    def winners(self) -> List[dict]:
        ranked = sorted(
            (p for p in self._by_name.values() if p.wins > 0),
            key=lambda p: p.wins,
            reverse=True,
        )
        return [{'name': p.name, 'wins': p.wins} for p in ranked]

    def broadcast_winners(self) -> None:
        self.notifier.broadcast(UPDATE_WINNERS, self.winners())
