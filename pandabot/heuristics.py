"""Per-cell move heuristics.

Each heuristic looks at one player-owned cell and returns a direction. The
decision engine calls them in a fixed scan order and feeds every decided move
into the strength projector, so a heuristic may rely on the projector holding
exactly the moves decided before it this turn.
"""
import random

from pandabot.config import Config
from pandabot.hlt import CARDINALS, DIRECTIONS, NotPlayerCellError, STILL


class Heuristic:

    name = None

    def __init__(self, rng=None, config=None):
        self.rng = rng if rng is not None else random.Random()
        self.config = config if config is not None else Config()

    def get_move(self, x, y, game_state, distance_field, projector):
        raise NotImplementedError

    def check_owned(self, x, y, game_state):
        cell = game_state.cell(x, y)
        if not cell.is_player:
            raise NotPlayerCellError("({0}, {1}) is not owned by the player".format(x, y))
        return cell


def additional_strength_required(x, y, game_state):
    """Strength a player cell still lacks to take its weakest unowned neighbour.

    Counts the cell's own strength plus one turn of its production. Returns
    None when the cell is not ours, has no unowned neighbour, or could
    already take one.
    """
    cell = game_state.cell(x, y)
    if not cell.is_player:
        return None

    production = game_state.production(x, y)
    amount = None
    for d in CARDINALS:
        n = game_state.get_target(x, y, d)
        if n.is_unowned:
            needed = n.strength - cell.strength - production
            if amount is None or needed < amount:
                amount = needed

    if amount is not None and amount <= 0:
        return None
    return amount


def first_minimum(directions, key):
    # Ties go to the earliest direction in the given order.
    best = None
    best_value = None
    for d in directions:
        value = key(d)
        if best_value is None or value < best_value:
            best, best_value = d, value
    return best


class PandaHeuristic(Heuristic):

    name = "panda"

    def get_move(self, x, y, game_state, distance_field, projector):
        cell = self.check_owned(x, y, game_state)
        cfg = self.config
        neighbors = game_state.neighbors(x, y)

        # Nothing to move.
        if cell.strength == 0:
            return STILL

        # Take a weaker neutral neighbour. Two capped cells still fight it out.
        for d, n in neighbors:
            if n.is_unowned and n.strength > 0:
                if n.strength < cell.strength or (cell.strength == cfg.str_cap and n.strength == cfg.str_cap):
                    return d

        direction = self.rally(x, y, cell, neighbors, game_state, distance_field)
        if direction is not None:
            return direction

        # Enemy contact or a zero strength breach: head where the frontier is densest.
        engage = [d for d, n in neighbors if n.is_enemy or (n.is_unowned and n.strength == 0)]
        if len(engage) > 0:
            return first_minimum(engage, lambda d: distance_field.aggregate_distance(*game_state.get_coord(x, y, d)))

        if all(n.is_player for d, n in neighbors):
            return self.interior_move(x, y, cell, game_state, distance_field, projector)

        return STILL

    def rally(self, x, y, cell, neighbors, game_state, distance_field):
        # Quiet border cells on the even parity lend their strength to a
        # neighbouring border cell that is close to a capture.
        cfg = self.config
        if any(n.is_enemy for d, n in neighbors):
            return None
        targets = [n for d, n in neighbors if n.is_unowned and n.strength > 0]
        if len(targets) == 0:
            return None
        if (x + y) % 2 != 0 or self.enemy_nearby(x, y, game_state):
            return None

        required_strength = min(n.strength for n in targets)
        production = game_state.production(x, y)
        if production == 0:
            estimated_turns = cfg.zero_production_turns
        else:
            estimated_turns = (required_strength - cell.strength) // production + 1

        if estimated_turns < cfg.rally_min_turns or cell.strength < cfg.rally_multiplier * production:
            return None

        for d, n in neighbors:
            if not n.is_player:
                continue
            nx, ny = game_state.get_coord(x, y, d)
            if distance_field.distance(nx, ny) != 1:
                continue
            required = additional_strength_required(nx, ny, game_state)
            if required is not None and required <= cell.strength:
                return d
        return STILL

    def enemy_nearby(self, x, y, game_state):
        r = self.config.enemy_scan_radius
        for a in range(x - r, x + r + 1):
            for b in range(y - r, y + r + 1):
                if game_state.cell(a, b).is_enemy:
                    return True
        return False

    def interior_move(self, x, y, cell, game_state, distance_field, projector):
        cfg = self.config
        if cell.strength < cfg.buildup_multiplier * game_state.production(x, y):
            return STILL

        def fits(d):
            tx, ty = game_state.get_coord(x, y, d)
            return projector.project_or_zero(tx, ty) + cell.strength <= cfg.projected_str_cap

        distances = dict((d, distance_field.distance(*game_state.get_coord(x, y, d))) for d in CARDINALS)
        min_distance = min(distances.values())
        closest = [d for d in CARDINALS if distances[d] == min_distance and fits(d)]
        if len(closest) > 0:
            return first_minimum(closest, lambda d: distance_field.aggregate_distance(*game_state.get_coord(x, y, d)))

        # Every way toward the frontier is full. Stay if there is room here,
        # otherwise spill into any neighbour that can take it.
        open_directions = [d for d in CARDINALS if fits(d)]
        if projector.project_or_zero(x, y) + cell.strength <= cfg.str_cap:
            return STILL
        if len(open_directions) > 0:
            return self.rng.choice(open_directions)
        return STILL


class GoodGameHeuristic(Heuristic):

    name = "goodgame"

    def get_move(self, x, y, game_state, distance_field, projector):
        cell = self.check_owned(x, y, game_state)
        neighbors = game_state.neighbors(x, y)

        if cell.strength == 0:
            return STILL

        for d, n in neighbors:
            if not n.is_player and n.strength < cell.strength:
                return d

        if all(n.is_player for d, n in neighbors):
            if cell.strength < self.config.buildup_multiplier * game_state.production(x, y):
                return STILL
            distances = dict((d, distance_field.distance(*game_state.get_coord(x, y, d))) for d in CARDINALS)
            min_distance = min(distances.values())
            return self.rng.choice([d for d in CARDINALS if distances[d] == min_distance])

        return STILL


class RandomHeuristic(Heuristic):

    name = "random"

    def get_move(self, x, y, game_state, distance_field, projector):
        self.check_owned(x, y, game_state)
        return self.rng.choice(DIRECTIONS)


HEURISTICS = dict((h.name, h) for h in (PandaHeuristic, GoodGameHeuristic, RandomHeuristic))
