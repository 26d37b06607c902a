"""Tests for the markdown game summary."""

from sandlot.reporting.markdown_writer import MarkdownGameWriter


class TestMarkdownGameWriter:
    """Tests for MarkdownGameWriter."""

    def test_header(self, finished_game):
        text = MarkdownGameWriter().generate_summary_string(finished_game)
        lines = text.splitlines()
        assert lines[0] == "# Sharks @ Comets"
        assert "**Final Score:** Sharks 0 - Comets 7" in lines
        assert "**Weather:** Rain | **Drives:** 1 | **Plays:** 1" in lines
        assert "*Decided by forfeit.*" not in text

    def test_team_and_player_tables(self, finished_game):
        text = MarkdownGameWriter().generate_summary_string(finished_game)
        assert "| Rushing Yards | 0 | 25 |" in text
        assert "| Touchdowns | 0 | 1 |" in text
        assert "| 1 | Kid 1 | - | 3-25 | - | 1 | 0 | 0 | 0 |" in text
        assert "## Sharks Players\n\n*No recorded stats*" in text

    def test_highlights_and_breakthroughs(self, finished_game):
        text = MarkdownGameWriter().generate_summary_string(finished_game)
        assert "- TOUCHDOWN! Kid 1 scores!" in text
        assert "- Kid 1 (Comets) improved catching hands" in text

    def test_play_by_play(self, finished_game):
        text = MarkdownGameWriter().generate_summary_string(finished_game)
        assert "### Drive 1 (H1): Comets ball on own 20" in text
        assert "**1st & 10 from the own 20**" in text
        assert "- 1-point conversion GOOD!" in text

    def test_play_by_play_optional(self, finished_game):
        text = MarkdownGameWriter().generate_summary_string(finished_game, play_by_play=False)
        assert "## Play-by-Play" not in text
        assert "Generated by Sandlot" in text.splitlines()[-1]

    def test_forfeit_note(self, finished_game):
        finished_game.forfeited = True
        text = MarkdownGameWriter().generate_summary_string(finished_game)
        assert "*Decided by forfeit.*" in text

    def test_write_to_file(self, finished_game, tmp_path):
        path = tmp_path / "game.md"
        MarkdownGameWriter().write_game_summary(finished_game, path)
        content = path.read_text(encoding="utf-8")
        assert content.startswith("# Sharks @ Comets")
        assert content.endswith("\n")
