import functools
import logging
import random
import time

from pandabot.config import Config, ConfigError
from pandabot.distance import DistanceField
from pandabot.heuristics import HEURISTICS
from pandabot.hlt import Move, STILL
from pandabot.overrides import OverrideChain, PatternFilter, ProtectedCellFilter
from pandabot.projector import StrengthProjector

logger = logging.getLogger(__name__)


def timethis(f):
    @functools.wraps(f)
    def wrap(*args, **kw):
        start = time.time()
        result = f(*args, **kw)
        end = time.time()
        logger.debug("Frame: {0} {1} secs to run func: {2}".format(args[0].frame, end - start, f.__name__))
        return result
    return wrap


class DecisionEngine:
    """Turns one GameState into one move per player-owned cell.

    Cells are visited column by column (x outer, y inner). The order matters:
    every decided move is fed to the strength projector before the next cell
    is looked at.
    """

    def __init__(self, heuristic, overrides=None, config=None):
        self.heuristic = heuristic
        self.overrides = overrides if overrides is not None else OverrideChain()
        self.config = config if config is not None else Config()
        self.frame = -1

    @timethis
    def create_distance_field(self, game_state):
        return DistanceField(game_state, self.config.aggregate_radius)

    @timethis
    def get_moves(self, game_state):
        self.frame += 1
        distance_field = self.create_distance_field(game_state)
        projector = StrengthProjector(game_state.w, game_state.h)
        self.overrides.prepare(game_state)

        moves = []
        for x, y in game_state.player_cells():
            direction = self.heuristic.get_move(x, y, game_state, distance_field, projector)
            direction = self.overrides.apply(direction, x, y, game_state)
            move = Move(x, y, direction)
            moves.append(move)
            projector.apply(game_state, move)

        if logger.isEnabledFor(logging.DEBUG):
            moving = sum(1 for m in moves if m.direction != STILL)
            logger.debug("Frame: {0} {1} moves, {2} moving".format(self.frame, len(moves), moving))
        return moves


def build_engine(variant="panda", seed=None, config=None):
    """Wire up the heuristic and override chain for one of the bot variants.

    All random choices in the engine come from one generator seeded here.
    """
    if variant not in HEURISTICS:
        raise ConfigError("unknown variant {0!r}, expected one of {1}".format(variant, ", ".join(sorted(HEURISTICS))))
    config = config if config is not None else Config()
    rng = random.Random(seed)
    heuristic = HEURISTICS[variant](rng, config)

    filters = []
    if variant == "goodgame":
        protected = ProtectedCellFilter(config)
        filters = [protected, PatternFilter(rng, config, protected)]
    logger.info("Engine: variant={0} seed={1} filters={2}".format(variant, seed, [type(f).__name__ for f in filters]))
    return DecisionEngine(heuristic, OverrideChain(filters), config)
