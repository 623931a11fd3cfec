# ==============================================================================
# Functions for communicating with the Halite game environment
# ==============================================================================
import sys

import numpy as np

from pandabot.hlt import Board, Cell, DOWN, GameState, HaliteError, LEFT, RIGHT, STILL, UP


class ProtocolError(HaliteError):
    pass


def translate_cardinal(direction):
    # Cardinal index used by the game is:
    # STILL = 0, NORTH = 1, EAST = 2, SOUTH = 3, WEST = 4
    return {STILL: 0, UP: 1, RIGHT: 2, DOWN: 3, LEFT: 4}[direction]


def send_string(to_be_sent):
    sys.stdout.write(to_be_sent + "\n")
    sys.stdout.flush()


def get_string():
    # Returns '' once the environment closes the pipe.
    return sys.stdin.readline().rstrip('\n').rstrip('\r')


def parse_ints(string, what):
    try:
        return list(map(int, string.split()))
    except ValueError:
        raise ProtocolError("non-integer token in {0}: {1!r}".format(what, string[:80]))


def to_xy(values, w, h):
    # The game lists rows top to bottom. Flip them so y = 0 is the bottom row
    # and index the result [x, y].
    return np.array(values, dtype=int).reshape((h, w))[::-1].transpose()


def parse_size(string):
    values = parse_ints(string, "map size")
    if len(values) != 2 or min(values) < 1:
        raise ProtocolError("bad map size line: {0!r}".format(string))
    return tuple(values)


def parse_production(string, w, h):
    values = parse_ints(string, "production map")
    if len(values) != w * h:
        raise ProtocolError("expected {0} production values, got {1}".format(w * h, len(values)))
    return Board(to_xy(values, w, h))


def parse_frame(string, board, my_id):
    w, h = board.w, board.h
    split_string = parse_ints(string, "frame")

    # The state of the map (including owner and strength values, but excluding production values) is sent in the following way:
    # One integer, COUNTER, representing the number of tiles with the same owner consecutively.
    # One integer, OWNER, representing the owner of the tiles COUNTER encodes.
    # The above repeats until the COUNTER total is equal to the area of the map.
    owners = list()
    pos = 0
    while len(owners) < w * h:
        if pos + 1 >= len(split_string):
            raise ProtocolError("frame ended inside the owner runs")
        counter, owner = split_string[pos], split_string[pos + 1]
        pos += 2
        if counter < 0 or len(owners) + counter > w * h:
            raise ProtocolError("owner run of {0} does not fit a map of {1} cells".format(counter, w * h))
        owners.extend([owner] * counter)

    # This is then followed by WIDTH * HEIGHT integers, representing the strength values of the tiles in the map.
    strengths = split_string[pos:]
    if len(strengths) != w * h:
        raise ProtocolError("expected {0} strength values, got {1}".format(w * h, len(strengths)))

    owner_map = to_xy(owners, w, h)
    strength_map = to_xy(strengths, w, h)
    cells = [[make_cell(owner_map[x, y], strength_map[x, y], my_id) for y in range(h)] for x in range(w)]
    return GameState(board, cells)


def make_cell(owner, strength, my_id):
    if owner == 0:
        return Cell.unowned(strength)
    if owner == my_id:
        return Cell.player(strength)
    return Cell.enemy(int(owner), strength)


def format_moves(moves, h):
    return ' '.join("{0} {1} {2}".format(move.x, h - move.y - 1, translate_cardinal(move.direction)) for move in moves)


def get_init():
    tag = parse_ints(get_string(), "player tag")
    if len(tag) != 1:
        raise ProtocolError("bad player tag line")
    my_id = tag[0]
    w, h = parse_size(get_string())
    board = parse_production(get_string(), w, h)
    game_state = parse_frame(get_string(), board, my_id)
    return (my_id, board, game_state)


def send_init(name):
    send_string(name)


def send_frame(moves, h):
    send_string(format_moves(moves, h))
