"""Game output: markdown summaries and terminal rendering."""

from sandlot.reporting.console import format_entry, render_box_score, render_game_log, render_play
from sandlot.reporting.markdown_writer import MarkdownGameWriter

__all__ = ["MarkdownGameWriter", "format_entry", "render_box_score", "render_game_log", "render_play"]
