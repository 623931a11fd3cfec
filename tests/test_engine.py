import logging

import pytest

from conftest import make_state, simulate
from pandabot.config import ConfigError
from pandabot.engine import DecisionEngine, build_engine
from pandabot.heuristics import Heuristic, PandaHeuristic
from pandabot.hlt import Cell, DOWN, LEFT, Move, RIGHT, STILL, UP
from pandabot.overrides import OverrideChain, OverrideFilter, PatternFilter, ProtectedCellFilter


class AlwaysRight(Heuristic):
    """Moves every cell right and records what the projector held for the cell itself."""

    def __init__(self):
        super(AlwaysRight, self).__init__()
        self.seen = []

    def get_move(self, x, y, game_state, distance_field, projector):
        self.seen.append(((x, y), projector.project(x, y)))
        return RIGHT


class Freeze(OverrideFilter):

    def __init__(self):
        self.prepared = 0

    def prepare(self, game_state):
        self.prepared += 1
        return "aux"

    def __call__(self, direction, x, y, game_state, aux_distance):
        assert aux_distance == "aux"
        return STILL


@pytest.fixture
def siege():
    # A lone enemy in the middle of our territory.
    return make_state(7, 7, fill=Cell.player(20), cells={(3, 3): Cell.enemy(2, 20)})


def direction_at(moves, x, y):
    return dict(((m.x, m.y), m.direction) for m in moves)[(x, y)]


class TestDecisionEngine:

    def test_one_move_per_player_cell_in_column_order(self):
        state = make_state(3, 2, cells={(1, 0): Cell.unowned(4), (2, 1): Cell.enemy(3, 4)})
        moves = DecisionEngine(PandaHeuristic()).get_moves(state)
        assert [(m.x, m.y) for m in moves] == [(0, 0), (0, 1), (1, 1), (2, 0)]

    def test_no_player_cells_no_moves(self):
        state = make_state(3, 3, fill=Cell.unowned(1))
        assert DecisionEngine(PandaHeuristic()).get_moves(state) == []

    def test_projector_sees_earlier_moves(self):
        state = make_state(3, 1, cells={(0, 0): Cell.player(7), (1, 0): Cell.player(9), (2, 0): Cell.player(11)})
        heuristic = AlwaysRight()
        moves = DecisionEngine(heuristic).get_moves(state)
        assert moves == [Move(0, 0, RIGHT), Move(1, 0, RIGHT), Move(2, 0, RIGHT)]
        assert heuristic.seen == [((0, 0), None), ((1, 0), 7), ((2, 0), 9)]

    def test_projector_is_fresh_every_turn(self):
        state = make_state(2, 1, cells={(0, 0): Cell.player(7), (1, 0): Cell.player(9)})
        heuristic = AlwaysRight()
        engine = DecisionEngine(heuristic)
        engine.get_moves(state)
        engine.get_moves(state)
        assert heuristic.seen == [((0, 0), None), ((1, 0), 7)] * 2

    def test_overrides_replace_heuristic_moves(self):
        freeze = Freeze()
        engine = DecisionEngine(AlwaysRight(), OverrideChain([freeze]))
        moves = engine.get_moves(make_state(3, 3))
        assert all(m.direction == STILL for m in moves)
        assert freeze.prepared == 1

    def test_frame_counter(self):
        engine = DecisionEngine(PandaHeuristic())
        state = make_state(2, 2)
        assert engine.frame == -1
        engine.get_moves(state)
        engine.get_moves(state)
        assert engine.frame == 1

    def test_logs_timings(self, caplog):
        engine = DecisionEngine(PandaHeuristic())
        with caplog.at_level(logging.DEBUG, logger="pandabot.engine"):
            engine.get_moves(make_state(3, 3))
        messages = [r.getMessage() for r in caplog.records]
        assert any("secs to run func: get_moves" in m for m in messages)
        assert any("secs to run func: create_distance_field" in m for m in messages)


class TestSiege:

    def test_cells_next_to_the_enemy_attack_it(self, siege):
        moves = build_engine("panda", seed=1).get_moves(siege)
        assert direction_at(moves, 2, 3) == RIGHT
        assert direction_at(moves, 4, 3) == LEFT
        assert direction_at(moves, 3, 2) == UP
        assert direction_at(moves, 3, 4) == DOWN

    def test_interior_cells_close_in(self, siege):
        moves = build_engine("panda", seed=1).get_moves(siege)
        assert direction_at(moves, 1, 3) == RIGHT
        assert direction_at(moves, 5, 3) == LEFT
        assert direction_at(moves, 3, 1) == UP
        assert direction_at(moves, 3, 5) == DOWN

    def test_attack_continues_next_turn(self, siege):
        engine = build_engine("panda", seed=1)
        after = simulate(siege, engine.get_moves(siege))
        assert after.cell(2, 3).strength >= 20
        moves = engine.get_moves(after)
        assert direction_at(moves, 2, 3) == RIGHT
        assert direction_at(moves, 4, 3) == LEFT
        assert direction_at(moves, 3, 2) == UP
        assert direction_at(moves, 3, 4) == DOWN

    def test_same_seed_same_moves(self, siege):
        first = build_engine("goodgame", seed=3).get_moves(siege)
        second = build_engine("goodgame", seed=3).get_moves(siege)
        assert first == second

    def test_repeated_calls_are_stable(self, siege):
        engine = build_engine("panda", seed=1)
        assert engine.get_moves(siege) == engine.get_moves(siege)


class TestBuildEngine:

    def test_panda_has_no_overrides(self):
        engine = build_engine("panda")
        assert isinstance(engine.heuristic, PandaHeuristic)
        assert len(engine.overrides) == 0

    def test_goodgame_protects_then_draws(self):
        engine = build_engine("goodgame", seed=0)
        protected, pattern = engine.overrides.filters
        assert isinstance(protected, ProtectedCellFilter)
        assert isinstance(pattern, PatternFilter)
        assert pattern.protected is protected
        assert pattern.rng is engine.heuristic.rng

    def test_unknown_variant(self):
        with pytest.raises(ConfigError):
            build_engine("nope")
