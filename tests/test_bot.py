import io
import logging
import sys

import pytest

from pandabot.bot import BOT_NAMES, game_loop, main, parse_args
from pandabot.engine import build_engine
from pandabot.networking import parse_production

INIT = "1\n3 3\n1 1 1 1 1 1 1 1 1\n"
# Our single cell sits in the middle with strength 50, surrounded by weak neutrals.
FRAME = "4 0 1 1 4 0 10 10 10 10 50 10 10 10 10\n"


@pytest.fixture
def pipes(monkeypatch):
    def connect(text):
        out = io.StringIO()
        monkeypatch.setattr(sys, "stdin", io.StringIO(text))
        monkeypatch.setattr(sys, "stdout", out)
        return out
    return connect


class TestParseArgs:

    def test_defaults(self):
        args = parse_args([])
        assert args.variant == "panda"
        assert args.name is None and args.seed is None
        assert args.log_file == "logging.log"

    def test_options(self):
        args = parse_args(["-v", "goodgame", "-s", "7", "-n", "me", "-l", "x.log", "--log-level", "INFO"])
        assert (args.variant, args.seed, args.name, args.log_file, args.log_level) == ("goodgame", 7, "me", "x.log", "INFO")

    def test_unknown_variant(self):
        with pytest.raises(SystemExit):
            parse_args(["-v", "nope"])


class TestGameLoop:

    def test_plays_until_input_closes(self, pipes):
        out = pipes(FRAME + FRAME)
        board = parse_production("1 1 1 1 1 1 1 1 1", 3, 3)
        assert game_loop(build_engine("panda"), board, 1) == 2
        assert out.getvalue() == "1 1 4\n1 1 4\n"

    def test_bad_frame_skips_the_turn(self, pipes, caplog):
        out = pipes("garbage\n" + FRAME)
        board = parse_production("1 1 1 1 1 1 1 1 1", 3, 3)
        with caplog.at_level(logging.ERROR):
            assert game_loop(build_engine("panda"), board, 1) == 2
        assert out.getvalue() == "\n1 1 4\n"
        assert any("could not compute moves" in r.getMessage() and r.name == "pandabot.bot" for r in caplog.records)

    def test_oversized_run_skips_the_turn(self, pipes):
        out = pipes("99999999999 1\n" + FRAME)
        board = parse_production("1 1 1 1 1 1 1 1 1", 3, 3)
        assert game_loop(build_engine("panda"), board, 1) == 2
        assert out.getvalue() == "\n1 1 4\n"


class TestMain:

    def test_full_game(self, pipes, tmp_path):
        out = pipes(INIT + FRAME + FRAME)
        assert main(["-l", str(tmp_path / "bot.log")]) == 0
        assert out.getvalue() == BOT_NAMES["panda"] + "\n1 1 4\n"

    @pytest.mark.parametrize("variant,name", [("panda", "PandaV5"), ("goodgame", "GoodGameV1"), ("random", "dtsudo")])
    def test_default_names(self, pipes, tmp_path, variant, name):
        out = pipes(INIT + FRAME)
        main(["-v", variant, "-s", "1", "-l", str(tmp_path / "bot.log")])
        assert out.getvalue() == name + "\n"

    def test_custom_name(self, pipes, tmp_path):
        out = pipes(INIT + FRAME)
        main(["-n", "Bamboo", "-v", "random", "-s", "3", "-l", str(tmp_path / "bot.log")])
        assert out.getvalue() == "Bamboo\n"
