from pandabot.config import Config
from pandabot.distance import DistanceField
from pandabot.engine import DecisionEngine, build_engine
from pandabot.heuristics import GoodGameHeuristic, PandaHeuristic, RandomHeuristic
from pandabot.hlt import Board, Cell, GameState, Move
from pandabot.projector import StrengthProjector

__version__ = "0.1.0"
