"""Tests for the sandlot command line."""

import pytest

from sandlot.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def wide_terminal(monkeypatch):
    monkeypatch.setenv("COLUMNS", "200")


class TestParser:
    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_down_is_checked(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["play", "--down", "5"])

    def test_play_defaults(self):
        args = build_parser().parse_args(["play"])
        assert args.play == "Balanced_InsideZone"
        assert args.ball_on == 20
        assert args.weather == "Sunny"


class TestCommands:
    """Commands end to end."""

    def test_plays(self, capsys):
        assert main(["plays"]) == 0
        out = capsys.readouterr().out
        assert "Offensive Plays" in out
        assert "Defensive Plays" in out

    def test_play(self, capsys):
        assert main(["play", "--play", "Spread_Mesh", "--seed", "4", "--frames"]) == 0
        out = capsys.readouterr().out
        assert "Spread_Mesh" in out
        assert "Frames" in out

    def test_game_with_markdown(self, capsys, tmp_path):
        path = tmp_path / "summary.md"
        assert main(["game", "--seed", "3", "--log", "--markdown", str(path)]) == 0
        out = capsys.readouterr().out
        assert "FINAL SCORE" in out
        assert path.read_text(encoding="utf-8").startswith("# Sharks @ Comets")
