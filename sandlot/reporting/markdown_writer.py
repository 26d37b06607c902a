"""Markdown game summary writer."""

from datetime import datetime
from pathlib import Path
from typing import Union

from sandlot.core.models import Team
from sandlot.league.game import GameResult

# Log entries worth repeating in the highlights section
HIGHLIGHT_MARKERS = ("TOUCHDOWN!", "INTERCEPTION!", "FUMBLE!", "SACK!", "Turnover on downs", "forfeits")

TEAM_STAT_ROWS = (
    ("Passing Yards", "pass_yards"),
    ("Completions", "pass_completions"),
    ("Pass Attempts", "pass_attempts"),
    ("Rushing Yards", "rush_yards"),
    ("Rush Attempts", "rush_attempts"),
    ("Touchdowns", "touchdowns"),
    ("Tackles", "tackles"),
    ("Sacks", "sacks"),
    ("Interceptions", "interceptions"),
    ("Fumbles Lost", "fumbles_lost"),
)


class MarkdownGameWriter:
    """Generates markdown game summaries."""

    def write_game_summary(self, result: GameResult, output_path: Union[str, Path]) -> None:
        """
        Write complete game summary to markdown file.

        Args:
            result: Finished game
            output_path: Path to write markdown file
        """
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.generate_summary_string(result))
            f.write("\n")

    def generate_summary_string(self, result: GameResult, play_by_play: bool = True) -> str:
        """Generate markdown summary as a string."""
        lines: list[str] = []
        lines += self._header(result)
        lines += self._team_stats(result)
        lines += self._player_stats(result, result.away)
        lines += self._player_stats(result, result.home)
        lines += self._highlights(result)
        if result.breakthroughs:
            lines.append("## Breakthroughs")
            lines.append("")
            for b in result.breakthroughs:
                lines.append(f"- {b.player_name} ({b.team_name}) improved {b.attribute.replace('_', ' ')}")
            lines.append("")
        if play_by_play:
            lines += self._play_by_play(result)

        lines.append("---")
        lines.append(f"*Generated by Sandlot - {datetime.now().strftime('%Y-%m-%d %H:%M')}*")
        return "\n".join(lines)

    def _header(self, result: GameResult) -> list[str]:
        lines = [f"# {result.away.name} @ {result.home.name}", ""]
        lines.append(f"**Final Score:** {result.away.name} {result.away_score} - "
                     f"{result.home.name} {result.home_score}")
        lines.append("")
        lines.append(f"**Weather:** {result.weather.value} | **Drives:** {result.drives} | "
                     f"**Plays:** {result.play_count}")
        if result.forfeited:
            lines.append("")
            lines.append("*Decided by forfeit.*")
        lines.append("")
        return lines

    def _team_totals(self, result: GameResult, team: Team) -> dict[str, int]:
        totals: dict[str, int] = {}
        for row in result.box_score.get(team.name, []):
            for _, key in TEAM_STAT_ROWS:
                totals[key] = totals.get(key, 0) + row.get(key, 0)
        return totals

    def _team_stats(self, result: GameResult) -> list[str]:
        away = self._team_totals(result, result.away)
        home = self._team_totals(result, result.home)
        lines = ["## Team Statistics", ""]
        lines.append(f"| Statistic | {result.away.name} | {result.home.name} |")
        lines.append("|-----------|:---:|:---:|")
        for label, key in TEAM_STAT_ROWS:
            lines.append(f"| {label} | {away.get(key, 0)} | {home.get(key, 0)} |")
        lines.append("")
        return lines

    def _player_stats(self, result: GameResult, team: Team) -> list[str]:
        rows = result.box_score.get(team.name, [])
        lines = [f"## {team.name} Players", ""]
        if not rows:
            lines.append("*No recorded stats*")
            lines.append("")
            return lines
        lines.append("| # | Player | Pass | Rush | Rec | TD | Tkl | Sck | INT |")
        lines.append("|---|--------|------|------|-----|----|-----|-----|-----|")
        for row in rows:
            passing = f"{row['pass_completions']}/{row['pass_attempts']}, {row['pass_yards']}" \
                if row["pass_attempts"] else "-"
            rushing = f"{row['rush_attempts']}-{row['rush_yards']}" if row["rush_attempts"] else "-"
            receiving = f"{row['receptions']}-{row['rec_yards']}" if row["receptions"] else "-"
            lines.append(f"| {row['number']} | {row['name']} | {passing} | {rushing} | {receiving} | "
                         f"{row['touchdowns']} | {row['tackles']} | {row['sacks']} | {row['interceptions']} |")
        lines.append("")
        return lines

    def _highlights(self, result: GameResult) -> list[str]:
        lines = ["## Highlights", ""]
        highlights = [e for e in result.log if any(m in e for m in HIGHLIGHT_MARKERS)]
        if highlights:
            lines += [f"- {entry}" for entry in highlights]
        else:
            lines.append("*No highlights*")
        lines.append("")
        return lines

    def _play_by_play(self, result: GameResult) -> list[str]:
        lines = ["## Play-by-Play", ""]
        for entry in result.log:
            if entry.startswith("-- Drive") or entry.startswith("===="):
                lines.append("")
                lines.append(f"### {entry.strip('-= ')}")
                lines.append("")
            elif entry.startswith("---"):
                lines.append(f"**{entry.strip('- ')}**")
                lines.append("")
            else:
                lines.append(f"- {entry}")
        lines.append("")
        return lines
