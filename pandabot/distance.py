from collections import deque

import numpy as np

from pandabot.hlt import CARDINALS, get_offset, window_sum

UNSETTLED = -1


class DistanceField:
    """Distance from every cell to the nearest cell the player does not own.

    Non-player cells sit at distance 0. A player cell at distance d needs d
    orthogonal steps (wrapping around the edges) to reach a non-player cell.
    When the player owns the whole map every distance is 0.
    """

    def __init__(self, game_state, aggregate_radius=2):
        self.w, self.h = game_state.w, game_state.h
        self.aggregate_radius = aggregate_radius
        self._aggregate_map = None
        self.distance_map = self.flood_fill(game_state.owned_map)
        self.distance_map.flags.writeable = False

    def flood_fill(self, owned_map):
        sources = [tuple(c) for c in np.transpose(np.nonzero(~owned_map))]
        if len(sources) == 0:
            return np.zeros((self.w, self.h), dtype=int)

        distance_matrix = np.ones((self.w, self.h), dtype=int) * UNSETTLED
        for x, y in sources:
            distance_matrix[x, y] = 0

        # BFS settles cells in waves, so the first time a cell is reached it
        # is already at 1 + the smallest settled neighbour distance.
        q = deque(sources)
        while len(q) > 0:
            x, y = q.popleft()
            c_dist = distance_matrix[x, y]
            for d in CARDINALS:
                dx, dy = get_offset(d)
                nx, ny = (x + dx) % self.w, (y + dy) % self.h
                if distance_matrix[nx, ny] == UNSETTLED:
                    distance_matrix[nx, ny] = c_dist + 1
                    q.append((nx, ny))

        return distance_matrix

    @property
    def aggregate_map(self):
        if self._aggregate_map is None:
            self._aggregate_map = window_sum(self.distance_map, self.aggregate_radius)
            self._aggregate_map.flags.writeable = False
        return self._aggregate_map

    def distance(self, x, y):
        return int(self.distance_map[x % self.w, y % self.h])

    def aggregate_distance(self, x, y):
        return int(self.aggregate_map[x % self.w, y % self.h])
