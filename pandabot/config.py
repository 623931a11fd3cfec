from pandabot.hlt import HaliteError

# ==============================================================================
# Variables
# ==============================================================================
MAX_TURN_TIME = 1.35
DEFAULT_LOG_FILE = "logging.log"


class ConfigError(HaliteError, ValueError):
    pass


class Config:

    def __init__(self, **overrides):
        self.set_configs()
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise ConfigError("unknown config option {0!r}".format(key))
            setattr(self, key, value)

    def set_configs(self):
        # Hard cap the game applies to a cell's strength.
        self.str_cap = 255
        # Looser ceiling used while estimating how much strength lands on a cell this turn.
        self.projected_str_cap = 400
        # Interior cells wait until strength reaches buildup_multiplier * production.
        self.buildup_multiplier = 5
        # Rally only once strength is at least rally_multiplier * production.
        self.rally_multiplier = 4
        self.rally_min_turns = 3
        # Turn estimate used in place of a division by zero production.
        self.zero_production_turns = 999
        # Radius of the square checked for enemies before rallying (2 -> 5x5).
        self.enemy_scan_radius = 2
        # Radius of the window summed into the aggregate distance (2 -> 5x5).
        self.aggregate_radius = 2
        # The board counts as mostly captured below this many unowned cells.
        self.mostly_captured_unowned = 10
        # Protected cell selection only on maps at least this large.
        self.protected_min_area = 400
        self.protected_radius = 1
        self.safety_scan_radius = 2

    def __repr__(self):
        return "Config({0})".format(", ".join("{0}={1!r}".format(k, v) for k, v in sorted(vars(self).items())))
