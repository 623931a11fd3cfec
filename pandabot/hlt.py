"""Board, cell and game state model shared by every bot variant.

Coordinates use standard math conventions: (0, 0) is the bottom left cell,
x grows to the right and y grows upward. Every lookup wraps around the
edges of the map.
"""
from collections import namedtuple
import itertools
import numbers

import numpy as np

# ==============================================================================
# Constants
# ==============================================================================
UP, DOWN, LEFT, RIGHT, STILL = range(5)
CARDINALS = (LEFT, RIGHT, UP, DOWN)  # Scan order used by the heuristics
DIRECTIONS = CARDINALS + (STILL,)

PLAYER, UNOWNED, ENEMY = range(3)
OWNER_NAMES = ("PLAYER", "UNOWNED", "ENEMY")

MAX_STRENGTH = 255

# ==============================================================================
# Exceptions
# ==============================================================================


class HaliteError(Exception):
    pass


class InvalidCellError(HaliteError, ValueError):
    pass


class InvalidBoardError(HaliteError, ValueError):
    pass


class NotPlayerCellError(HaliteError):
    pass


# ==============================================================================
# Helpers
# ==============================================================================


def wrap(x, bound):
    # Python's modulo already lands in [0, bound) for negative x of any magnitude.
    return x % bound


def get_offset(direction):
    return ((0, 1), (0, -1), (-1, 0), (1, 0), (0, 0))[direction]


def roll_xy(M, x, y):
    return np.roll(np.roll(M, x, 0), y, 1)


def window_sum(M, radius):
    # Sum of M over the (2r+1) x (2r+1) toroidal window centered on each cell.
    total = np.zeros_like(M)
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            total += roll_xy(M, -dx, -dy)
    return total


def _frozen(array):
    array.flags.writeable = False
    return array


# ==============================================================================
# Model
# ==============================================================================


class Board:

    def __init__(self, production):
        try:
            production_map = np.array(production)
        except ValueError:
            raise InvalidBoardError("production must be a width x height grid")
        if production_map.ndim != 2 or production_map.size == 0:
            raise InvalidBoardError("production must be a non-empty width x height grid, got shape {0}".format(production_map.shape))
        if not np.issubdtype(production_map.dtype, np.integer):
            raise InvalidBoardError("production values must be integers, got {0}".format(production_map.dtype))
        if np.any(production_map < 0):
            raise InvalidBoardError("production values must be non-negative")
        self.w, self.h = production_map.shape
        self.production_map = _frozen(production_map.astype(int))

    @property
    def width(self):
        return self.w

    @property
    def height(self):
        return self.h

    def production(self, x, y):
        return int(self.production_map[x % self.w, y % self.h])

    def __repr__(self):
        return "Board({0}x{1})".format(self.w, self.h)


class Cell(namedtuple("Cell", "owner strength enemy_id")):
    # owner is one of PLAYER, UNOWNED, ENEMY. enemy_id is set only for ENEMY cells.
    __slots__ = ()

    def __new__(cls, owner, strength, enemy_id=None):
        if owner not in (PLAYER, UNOWNED, ENEMY):
            raise InvalidCellError("unknown owner {0!r}".format(owner))
        # numpy integer types register as numbers.Integral.
        if not isinstance(strength, numbers.Integral):
            raise InvalidCellError("strength must be an integer, got {0!r}".format(strength))
        if not 0 <= strength <= MAX_STRENGTH:
            raise InvalidCellError("strength {0} outside 0..{1}".format(strength, MAX_STRENGTH))
        if owner == ENEMY and enemy_id is None:
            raise InvalidCellError("enemy cell without an enemy id")
        if owner == ENEMY and not isinstance(enemy_id, numbers.Integral):
            raise InvalidCellError("enemy id must be an integer, got {0!r}".format(enemy_id))
        if owner != ENEMY and enemy_id is not None:
            raise InvalidCellError("{0} cell carries enemy id {1}".format(OWNER_NAMES[owner], enemy_id))
        return super(Cell, cls).__new__(cls, owner, int(strength), enemy_id)

    @classmethod
    def player(cls, strength):
        return cls(PLAYER, strength)

    @classmethod
    def unowned(cls, strength):
        return cls(UNOWNED, strength)

    @classmethod
    def enemy(cls, enemy_id, strength):
        return cls(ENEMY, strength, enemy_id)

    @property
    def is_player(self):
        return self.owner == PLAYER

    @property
    def is_unowned(self):
        return self.owner == UNOWNED

    @property
    def is_enemy(self):
        return self.owner == ENEMY


Move = namedtuple("Move", "x y direction")


class GameState:
    """One turn's snapshot of the map.

    ``cells`` is a width x height grid indexed ``[x][y]``. The state is never
    mutated; a new one is built every turn.
    """

    def __init__(self, board, cells):
        self.board = board
        self.w, self.h = board.w, board.h

        grid = np.empty((self.w, self.h), dtype=object)
        try:
            rows = [list(column) for column in cells]
        except TypeError:
            raise InvalidBoardError("cells must be a width x height grid")
        if len(rows) != self.w or any(len(column) != self.h for column in rows):
            raise InvalidBoardError("cells do not match the {0}x{1} board".format(self.w, self.h))
        for x, column in enumerate(rows):
            for y, cell in enumerate(column):
                if not isinstance(cell, Cell):
                    raise InvalidCellError("({0}, {1}) is not a Cell: {2!r}".format(x, y, cell))
                grid[x, y] = cell
        self.cells = _frozen(grid)

        owners = np.array([[c.owner for c in column] for column in rows], dtype=int)
        self.strength_map = _frozen(np.array([[c.strength for c in column] for column in rows], dtype=int))
        self.owned_map = _frozen(owners == PLAYER)
        self.unowned_map = _frozen(owners == UNOWNED)
        self.enemy_map = _frozen(owners == ENEMY)

    def __iter__(self):
        # Column-major: x outer, y inner. The decision engine depends on this order.
        return itertools.product(range(self.w), range(self.h))

    def cell(self, x, y):
        return self.cells[x % self.w, y % self.h]

    def production(self, x, y):
        return self.board.production(x, y)

    def neighbors(self, x, y):
        # (direction, cell) pairs in LEFT, RIGHT, UP, DOWN order.
        return [(d, self.get_target(x, y, d)) for d in CARDINALS]

    def get_target(self, x, y, direction):
        dx, dy = get_offset(direction)
        return self.cell(x + dx, y + dy)

    def get_coord(self, x, y, direction):
        dx, dy = get_offset(direction)
        return ((x + dx) % self.w, (y + dy) % self.h)

    def player_cells(self):
        return [(x, y) for x, y in self if self.cells[x, y].owner == PLAYER]

    def count(self, owner):
        return sum(1 for c in self.cells.flat if c.owner == owner)
