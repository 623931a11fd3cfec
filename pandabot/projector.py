import numpy as np

from pandabot.hlt import NotPlayerCellError, STILL


class StrengthProjector:
    """Strength that lands on each cell once this turn's decided moves play out.

    Moves must be applied in the order they are decided so that later
    decisions see what earlier ones already send to a cell. A cell no move
    has targeted yet projects ``None``, which is not the same as 0.
    """

    def __init__(self, w, h):
        self.w, self.h = w, h
        self.reset()

    def reset(self):
        self.projected_strength_map = np.zeros((self.w, self.h), dtype=int)
        self.targeted_map = np.zeros((self.w, self.h), dtype=bool)

    def project(self, x, y):
        x, y = x % self.w, y % self.h
        if not self.targeted_map[x, y]:
            return None
        return int(self.projected_strength_map[x, y])

    def project_or_zero(self, x, y):
        projected = self.project(x, y)
        return 0 if projected is None else projected

    def apply(self, game_state, move):
        cell = game_state.cell(move.x, move.y)
        if not cell.is_player:
            raise NotPlayerCellError("cannot project a move from ({0}, {1}), owner is {2}".format(move.x, move.y, cell.owner))

        tx, ty = game_state.get_coord(move.x, move.y, move.direction)
        self.projected_strength_map[tx, ty] += cell.strength
        # Production only accrues on a cell that stays put.
        if move.direction == STILL:
            self.projected_strength_map[tx, ty] += game_state.production(move.x, move.y)
        self.targeted_map[tx, ty] = True
