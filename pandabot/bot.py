import argparse
import logging
from timeit import default_timer as timer

from pandabot.config import Config, DEFAULT_LOG_FILE, MAX_TURN_TIME
from pandabot.engine import build_engine
from pandabot.heuristics import HEURISTICS
from pandabot.hlt import HaliteError
from pandabot.networking import get_init, get_string, parse_frame, send_frame, send_init

BOT_NAMES = {"panda": "PandaV5", "goodgame": "GoodGameV1", "random": "dtsudo"}

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Halite bot")
    parser.add_argument("-v", "--variant", dest="variant",
                        action="store", default="panda", choices=sorted(HEURISTICS),
                        help="Which heuristic to play with")
    parser.add_argument("-n", "--name", dest="name",
                        action="store", default=None,
                        help="Name sent to the environment (defaults to the variant's name)")
    parser.add_argument("-s", "--seed", dest="seed",
                        action="store", type=int, default=None,
                        help="Seed for the engine's random generator")
    parser.add_argument("-l", "--log-file", dest="log_file",
                        action="store", default=DEFAULT_LOG_FILE,
                        help="Log file (stdout is reserved for the game)")
    parser.add_argument("--log-level", dest="log_level",
                        action="store", default="DEBUG",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    return parser.parse_args(argv)


def game_loop(engine, board, my_id):
    frames = 0
    while True:
        frame = get_string()
        if len(frame.strip()) == 0:
            logger.info("Input closed after {0} frames".format(frames))
            return frames

        start = timer()
        try:
            game_state = parse_frame(frame, board, my_id)
            moves = engine.get_moves(game_state)
        except HaliteError:
            # Skip the turn rather than crash; an empty frame leaves every cell still.
            logger.exception("Frame {0}: could not compute moves".format(frames))
            moves = []
        elapsed = timer() - start
        if elapsed > MAX_TURN_TIME:
            logger.warning("Frame {0}: took {1:.3f} secs, budget is {2}".format(frames, elapsed, MAX_TURN_TIME))

        send_frame(moves, board.h)
        frames += 1


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(filename=args.log_file, level=getattr(logging, args.log_level))

    engine = build_engine(args.variant, args.seed, Config())
    my_id, board, _ = get_init()
    logger.debug("Player {0} on {1}".format(my_id, board))
    send_init(args.name or BOT_NAMES[args.variant])

    game_loop(engine, board, my_id)
    return 0
