"""Shared test fixtures and helpers."""

import random

import numpy as np
import pytest

from pandabot.distance import DistanceField
from pandabot.hlt import Board, Cell, GameState, STILL
from pandabot.projector import StrengthProjector


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


# --- Helper functions ---


def make_state(w, h, fill=None, cells=None, production=1, productions=None):
    """Build a GameState where every cell is ``fill`` unless listed in ``cells``.

    ``cells`` and ``productions`` map (x, y) to a Cell or a production value.
    """
    fill = fill if fill is not None else Cell.player(2)
    grid = [[fill for y in range(h)] for x in range(w)]
    for (x, y), c in (cells or {}).items():
        grid[x][y] = c
    prod = [[production for y in range(h)] for x in range(w)]
    for (x, y), p in (productions or {}).items():
        prod[x][y] = p
    return GameState(Board(prod), grid)


def decide(heuristic, state, x, y, projector=None):
    field = DistanceField(state)
    if projector is None:
        projector = StrengthProjector(state.w, state.h)
    return heuristic.get_move(x, y, state, field, projector)


def simulate(state, moves):
    """Play the player's moves forward one turn, ignoring combat.

    Strength sent into a cell the player does not own is dropped.
    """
    arrivals = np.zeros((state.w, state.h), dtype=int)
    for m in moves:
        tx, ty = state.get_coord(m.x, m.y, m.direction)
        arrivals[tx, ty] += state.cell(m.x, m.y).strength
        if m.direction == STILL:
            arrivals[tx, ty] += state.production(m.x, m.y)
    grid = []
    for x in range(state.w):
        column = []
        for y in range(state.h):
            c = state.cells[x, y]
            column.append(Cell.player(min(arrivals[x, y], 255)) if c.is_player else c)
        grid.append(column)
    return GameState(state.board, grid)


class FixedProjector:
    """Projector stand-in returning preset values."""

    def __init__(self, values):
        self.values = values

    def project(self, x, y):
        return self.values.get((x, y))

    def project_or_zero(self, x, y):
        return self.values.get((x, y), 0)
