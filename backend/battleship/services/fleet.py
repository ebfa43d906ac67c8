"""Fleet placement rules.

A fleet is accepted only as a whole: exact ship counts per type, every ship
on the board, and no two ships touching, not even diagonally.
"""

from collections import Counter
from typing import Iterable, List, Tuple

from battleship.models import BOARD_SIZE, REQUIRED_FLEET, SHIP_LENGTHS, Ship, in_bounds

Coord = Tuple[int, int]


def ship_cells(ship: Ship) -> List[Coord]:
    """Cells occupied by ``ship`` as ``(x, y)`` pairs."""
    if ship.direction:
        return [(ship.x, ship.y + i) for i in range(ship.length)]
    return [(ship.x + i, ship.y) for i in range(ship.length)]


def ring_cells(ship: Ship) -> List[Coord]:
    """In-bounds cells of the one-cell ring around ``ship``."""
    footprint = set(ship_cells(ship))
    if ship.direction:
        width, height = 1, ship.length
    else:
        width, height = ship.length, 1
    ring = []
    for y in range(ship.y - 1, ship.y + height + 1):
        for x in range(ship.x - 1, ship.x + width + 1):
            if in_bounds(x, y) and (x, y) not in footprint:
                ring.append((x, y))
    return ring


def has_required_counts(ships: Iterable[Ship]) -> bool:
    return Counter(ship.type for ship in ships) == Counter(REQUIRED_FLEET)


def fits_on_board(ship: Ship) -> bool:
    # Checked from the anchor and the far end so no cells are listed
    # for a ship longer than the board
    start = ship.y if ship.direction else ship.x
    return in_bounds(ship.x, ship.y) and start + ship.length <= BOARD_SIZE


def validate_fleet(ships: List[Ship], strict_length: bool = False) -> bool:
    if not has_required_counts(ships):
        return False
    if strict_length and any(ship.length != SHIP_LENGTHS[ship.type] for ship in ships):
        return False
    if not all(fits_on_board(ship) for ship in ships):
        return False

    occupied = [[False] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    for ship in ships:
        # Footprint plus ring must be clear of every ship placed so far
        for x, y in ship_cells(ship) + ring_cells(ship):
            if occupied[y][x]:
                return False
        for x, y in ship_cells(ship):
            occupied[y][x] = True
    return True
