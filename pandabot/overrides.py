"""Order overrides layered on top of a heuristic.

A filter sees the heuristic's proposed direction for one cell and may replace
it. Filters run in sequence and the first one that returns a direction wins.
Before each turn the chain calls ``prepare`` on every filter; whatever it
returns (usually an auxiliary distance field) is handed back to that filter
for every cell of the turn.
"""
import logging
import random

import numpy as np

from pandabot.config import Config
from pandabot.distance import DistanceField
from pandabot.hlt import Cell, DOWN, GameState, LEFT, RIGHT, STILL, UNOWNED, UP, CARDINALS, window_sum

logger = logging.getLogger(__name__)

# The letters "GG", 24 cells wide and 7 tall. GLYPH[i][j] is column i, row j
# counted from the bottom. 1 marks a cell left unowned.
GLYPH = (
    (1, 1, 1, 1, 1, 1, 1),
    (1, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 1, 0, 0, 1),
    (1, 0, 0, 1, 0, 0, 1),
    (1, 0, 0, 1, 0, 0, 1),
    (1, 0, 0, 1, 0, 0, 1),
    (1, 1, 1, 1, 0, 0, 1),
    (0, 0, 0, 0, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0),
    (1, 1, 1, 1, 1, 1, 1),
    (1, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 0, 0, 0, 1),
    (1, 0, 0, 1, 0, 0, 1),
    (1, 0, 0, 1, 0, 0, 1),
    (1, 0, 0, 1, 0, 0, 1),
    (1, 0, 0, 1, 0, 0, 1),
    (1, 1, 1, 1, 0, 0, 1),
)
GLYPH_W = len(GLYPH)
GLYPH_H = len(GLYPH[0])


class OverrideFilter:

    def prepare(self, game_state):
        return None

    def __call__(self, direction, x, y, game_state, aux_distance):
        raise NotImplementedError


class OverrideChain:

    def __init__(self, filters=()):
        self.filters = list(filters)
        self.aux = [None] * len(self.filters)

    def __len__(self):
        return len(self.filters)

    def prepare(self, game_state):
        self.aux = [f.prepare(game_state) for f in self.filters]

    def apply(self, direction, x, y, game_state):
        for f, aux in zip(self.filters, self.aux):
            override = f(direction, x, y, game_state, aux)
            if override is not None:
                return override
        return direction


class ProtectedCellFilter(OverrideFilter):
    """Never attack the 3x3 block around one well guarded enemy cell.

    Keeps an opponent alive so the game runs to the turn limit. The cell is
    picked once, on the first turn the filter sees, and only on large maps
    with an enemy present.
    """

    def __init__(self, config=None):
        self.config = config if config is not None else Config()
        self.initialized = False
        self.safe_cell = None

    def prepare(self, game_state):
        if not self.initialized:
            self.initialized = True
            self.safe_cell = self.find_safe_cell(game_state)
            logger.debug("Protected cell: {0}".format(self.safe_cell))
        return None

    def find_safe_cell(self, game_state):
        if game_state.w * game_state.h < self.config.protected_min_area:
            return None

        enemy_id = None
        for x, y in game_state:
            c = game_state.cells[x, y]
            if c.is_enemy:
                enemy_id = c.enemy_id
        if enemy_id is None:
            return None

        guarded = np.array([[1 if c.is_enemy and c.enemy_id == enemy_id else 0 for c in column] for column in game_state.cells], dtype=int)
        safety = window_sum(guarded, self.config.safety_scan_radius)
        # argmax scans x outer, y inner and keeps the first maximum.
        x, y = np.unravel_index(np.argmax(safety), safety.shape)
        return (int(x), int(y))

    def __call__(self, direction, x, y, game_state, aux_distance):
        if self.safe_cell is None or direction == STILL:
            return None
        tx, ty = game_state.get_coord(x, y, direction)
        sx, sy = self.safe_cell
        r = self.config.protected_radius
        for a in range(sx - r, sx + r + 1):
            for b in range(sy - r, sy + r + 1):
                if (tx, ty) == (a % game_state.w, b % game_state.h):
                    return STILL
        return None


class PatternFilter(OverrideFilter):
    """Steer captured territory so the unowned cells spell out GLYPH.

    Only kicks in once the board is mostly captured. The placement is chosen
    on the first turn and avoids the protected cell when one is given. The
    glyph is placed without wrapping around the map edges.
    """

    def __init__(self, rng=None, config=None, protected=None):
        self.rng = rng if rng is not None else random.Random()
        self.config = config if config is not None else Config()
        self.protected = protected
        self.initialized = False
        self.origin = None
        self.active = False

    def prepare(self, game_state):
        if not self.initialized:
            self.initialized = True
            self.origin = self.find_origin(game_state)
            logger.debug("Pattern origin: {0}".format(self.origin))
        self.active = is_board_mostly_captured(game_state, self.config)
        if self.origin is None or not self.active:
            return None
        return self.create_pattern_distance(game_state)

    def find_origin(self, game_state):
        if self.protected is not None:
            if self.protected.safe_cell is None:
                return None
            sx, sy = self.protected.safe_cell
        else:
            sx, sy = None, None

        owned = game_state.owned_map.astype(int)
        best, best_score = None, None
        for i in range(2, game_state.w):
            for j in range(2, game_state.h):
                if i + GLYPH_W > game_state.w or j + GLYPH_H > game_state.h:
                    continue
                if sx is not None and not (i >= sx + 2 or i + GLYPH_W - 1 <= sx - 2 or j >= sy + 2 or j + GLYPH_H - 1 <= sy - 2):
                    continue
                score = np.sum(owned[i:i + GLYPH_W, j:j + GLYPH_H])
                around = np.take(owned, range(i - 5, i + GLYPH_W + 5), axis=0, mode='wrap')
                around = np.take(around, range(j - 5, j + GLYPH_H + 5), axis=1, mode='wrap')
                score += np.sum(around)
                if best_score is None or best_score < score:
                    best, best_score = (i, j), score
        return best

    def create_pattern_distance(self, game_state):
        ox, oy = self.origin
        cells = [[Cell.player(1) for y in range(game_state.h)] for x in range(game_state.w)]
        for i in range(GLYPH_W):
            for j in range(GLYPH_H):
                if GLYPH[i][j] == 1:
                    cells[ox + i][oy + j] = Cell.unowned(1)
        return DistanceField(GameState(game_state.board, cells), self.config.aggregate_radius)

    def __call__(self, direction, x, y, game_state, aux_distance):
        if self.origin is None or not self.active:
            return None
        ox, oy = self.origin
        right_edge, top_edge = ox + GLYPH_W, oy + GLYPH_H

        if ox <= x < right_edge and oy <= y < top_edge:
            if aux_distance.distance(x, y) == 0:
                return STILL
            distances = dict((d, aux_distance.distance(*game_state.get_coord(x, y, d))) for d in CARDINALS)
            min_distance = min(distances.values())
            return self.rng.choice([d for d in CARDINALS if distances[d] == min_distance])

        # First ring outside the glyph clears out, second ring holds the line.
        in_rows = oy - 1 <= y < top_edge + 1
        in_columns = ox - 1 <= x < right_edge + 1
        if x == ox - 1 and in_rows:
            return LEFT
        if x == right_edge and in_rows:
            return RIGHT
        if y == oy - 1 and in_columns:
            return DOWN
        if y == top_edge and in_columns:
            return UP
        if (x == ox - 2 or x == right_edge + 1) and in_rows:
            return STILL
        if (y == oy - 2 or y == top_edge + 1) and in_columns:
            return STILL
        return None


def is_board_mostly_captured(game_state, config=None):
    config = config if config is not None else Config()
    return game_state.count(UNOWNED) < config.mostly_captured_unowned
