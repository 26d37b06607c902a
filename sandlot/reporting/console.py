"""Terminal rendering of plays and games with rich."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sandlot.core.enums import PlayOutcome
from sandlot.core.models import Team
from sandlot.engine.recorder import EventType, PlayResult
from sandlot.league.game import GameResult

EVENT_STYLES: dict[EventType, str] = {
    EventType.TOUCHDOWN: "bold #f57c00",
    EventType.INTERCEPTION: "bold #c62828",
    EventType.FUMBLE: "bold #c62828",
    EventType.TURNOVER: "bold #c62828",
    EventType.SACK: "#c62828",
    EventType.CATCH: "#2e7d32",
    EventType.BROKEN_TACKLE: "#2e7d32",
    EventType.PRESSURE: "#ef6c00",
    EventType.INJURY: "#ad1457",
    EventType.ERROR: "bold red",
    EventType.EMERGENCY_FILL: "#6a1b9a",
}


def format_entry(message: str, event_type: EventType = EventType.INFO) -> Text:
    """Style one log line by the kind of event it records."""
    return Text(message, style=EVENT_STYLES.get(event_type, ""))


def _outcome_line(result: PlayResult) -> Text:
    text = Text()
    text.append(f"{result.play_key}", style="bold")
    if result.defensive_play_key:
        text.append(f" vs {result.defensive_play_key}", style="#666666")
    text.append(" │ ", style="#999999")
    text.append(f"{result.outcome.value}", style="bold")
    text.append(f" for {result.yards} yds")
    if result.touchdown:
        text.append("  TD", style=EVENT_STYLES[EventType.TOUCHDOWN])
    if result.turnover:
        text.append("  TO", style=EVENT_STYLES[EventType.TURNOVER])
    if result.outcome == PlayOutcome.INTERCEPTION:
        text.append(f"  returned {result.return_yards}")
    if result.defensive_touchdown:
        text.append("  PICK SIX", style=EVENT_STYLES[EventType.TOUCHDOWN])
    return text


def _frames_table(result: PlayResult) -> Table:
    table = Table(title="Frames", show_lines=False)
    table.add_column("Tick", justify="right")
    table.add_column("Log", justify="right")
    table.add_column("Ball (x, y, z)")
    table.add_column("State")
    table.add_column("Carrier")
    for frame in result.frames:
        ball = frame.ball
        state = "air" if ball.in_air else "loose" if ball.is_loose else "held"
        carrier = next((p.name for p in frame.players if p.is_ball_carrier), "-")
        table.add_row(str(frame.tick), str(frame.log_index),
                      f"{ball.x:.1f}, {ball.y:.1f}, {ball.z:.1f}", state, carrier)
    return table


def render_play(result: PlayResult, console: Optional[Console] = None, show_frames: bool = False) -> None:
    """Print one play's log in a panel, optionally followed by its frames."""
    console = console or Console()
    body = Text()
    events = {e.index: e.type for e in result.events}
    for offset, message in enumerate(result.play_log):
        index = result.log_offset + offset
        body.append_text(format_entry(message, events.get(index, EventType.INFO)))
        body.append("\n")
    console.print(Panel(body, title=_outcome_line(result), border_style="#999999"))
    if show_frames:
        console.print(_frames_table(result))


def _box_table(result: GameResult, team: Team) -> Table:
    table = Table(title=team.name)
    table.add_column("#", justify="right")
    table.add_column("Player")
    table.add_column("Pass", justify="right")
    table.add_column("Rush", justify="right")
    table.add_column("Rec", justify="right")
    table.add_column("TD", justify="right")
    table.add_column("Tkl", justify="right")
    table.add_column("Sck", justify="right")
    table.add_column("INT", justify="right")
    for row in result.box_score.get(team.name, []):
        passing = f"{row['pass_completions']}/{row['pass_attempts']} {row['pass_yards']}" if row["pass_attempts"] else ""
        rushing = f"{row['rush_attempts']}-{row['rush_yards']}" if row["rush_attempts"] else ""
        receiving = f"{row['receptions']}-{row['rec_yards']}" if row["receptions"] else ""
        table.add_row(
            str(row["number"]), row["name"], passing, rushing, receiving,
            str(row["touchdowns"] or ""), str(row["tackles"] or ""),
            str(row["sacks"] or ""), str(row["interceptions"] or ""),
        )
    return table


def render_box_score(result: GameResult, console: Optional[Console] = None) -> None:
    """Print the final score and both teams' player stats."""
    console = console or Console()
    score = Text()
    score.append(f"{result.away.name} {result.away_score}", style="bold")
    score.append("  @  ", style="#999999")
    score.append(f"{result.home.name} {result.home_score}", style="bold")
    subtitle = f"{result.weather.value} · {result.drives} drives · {result.play_count} plays"
    if result.forfeited:
        subtitle += " · forfeit"
    console.print(Panel(score, title="Final", subtitle=subtitle, border_style="#999999"))
    console.print(_box_table(result, result.away))
    console.print(_box_table(result, result.home))
    for b in result.breakthroughs:
        console.print(Text(f"Breakthrough: {b.player_name} ({b.team_name}) improved {b.attribute}",
                           style="#2e7d32"))


def render_game_log(result: GameResult, console: Optional[Console] = None) -> None:
    """Print the whole game log, drive headers in bold."""
    console = console or Console()
    for entry in result.log:
        style = "bold" if entry.startswith(("--", "====")) else ""
        if "TOUCHDOWN!" in entry:
            style = EVENT_STYLES[EventType.TOUCHDOWN]
        console.print(Text(entry, style=style))
