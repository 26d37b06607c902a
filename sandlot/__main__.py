"""Entry point for sandlot package."""

import argparse
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from sandlot.core.enums import Weather


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
    )


def _cmd_play(args: argparse.Namespace, console: Console) -> int:
    from sandlot.core.rng import SimRandom
    from sandlot.engine.play import resolve_play
    from sandlot.engine.setup import FieldContext
    from sandlot.league.depth_chart import assign_depth_chart
    from sandlot.league.generator import generate_team
    from sandlot.playbook.plays import PlaybookTables
    from sandlot.reporting.console import render_play

    tables = PlaybookTables.default()
    rng = SimRandom(args.seed)
    offense = generate_team(args.offense, rng)
    defense = generate_team(args.defense, rng)
    play = tables.offensive_play(args.play)
    if play is not None:
        offense.formations.offense = play.formation
        assign_depth_chart(offense, tables)

    context = FieldContext(
        ball_on=args.ball_on,
        down=args.down,
        yards_to_go=args.yards_to_go,
        weather=Weather(args.weather),
        defensive_play_key=args.defense_play,
    )
    result = resolve_play(offense, defense, args.play, context, rng, tables)
    render_play(result, console, show_frames=args.frames)
    return 0


def _cmd_game(args: argparse.Namespace, console: Console) -> int:
    from sandlot.core.rng import SimRandom
    from sandlot.league.game import simulate_game
    from sandlot.league.generator import generate_team
    from sandlot.reporting.console import render_box_score, render_game_log
    from sandlot.reporting.markdown_writer import MarkdownGameWriter

    rng = SimRandom(args.seed)
    home = generate_team(args.home, rng, args.roster_size)
    away = generate_team(args.away, rng, args.roster_size)
    result = simulate_game(home, away, rng)
    if args.log:
        render_game_log(result, console)
    render_box_score(result, console)
    if args.markdown:
        MarkdownGameWriter().write_game_summary(result, args.markdown)
        console.print(f"Summary written to {args.markdown}")
    return 0


def _cmd_plays(args: argparse.Namespace, console: Console) -> int:
    from sandlot.playbook.plays import PlaybookTables

    tables = PlaybookTables.default()
    offense = Table(title="Offensive Plays")
    offense.add_column("Key")
    offense.add_column("Type")
    offense.add_column("Tags")
    for key, play in tables.offensive_plays.items():
        offense.add_row(key, play.type.value, ", ".join(play.tags))
    defense = Table(title="Defensive Plays")
    defense.add_column("Key")
    defense.add_column("Formations")
    defense.add_column("Concept")
    for key, play in tables.defensive_plays.items():
        defense.add_row(key, ", ".join(play.formations), play.concept + (" blitz" if play.blitz else ""))
    console.print(offense)
    console.print(defense)
    return 0


def _cmd_serve(args: argparse.Namespace, console: Console) -> int:
    from sandlot.api.main import run_api

    run_api(host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sandlot - Youth Football Simulator",
        prog="sandlot",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show developer logging")
    sub = parser.add_subparsers(dest="command", required=True)

    play = sub.add_parser("play", help="Simulate a single play")
    play.add_argument("--play", default="Balanced_InsideZone", help="Offensive play key")
    play.add_argument("--defense-play", default=None, help="Defensive play key")
    play.add_argument("--seed", type=int, default=None)
    play.add_argument("--ball-on", type=int, default=20, help="Yard line, 0-99 from own goal")
    play.add_argument("--down", type=int, default=1, choices=(1, 2, 3, 4))
    play.add_argument("--yards-to-go", type=int, default=10)
    play.add_argument("--weather", default=Weather.SUNNY.value, choices=[w.value for w in Weather])
    play.add_argument("--offense", default="Comets", help="Offense team name")
    play.add_argument("--defense", default="Sharks", help="Defense team name")
    play.add_argument("--frames", action="store_true", help="Print the frame table")
    play.set_defaults(handler=_cmd_play)

    game = sub.add_parser("game", help="Simulate a full game")
    game.add_argument("--seed", type=int, default=None)
    game.add_argument("--home", default="Comets", help="Home team name (default: Comets)")
    game.add_argument("--away", default="Sharks", help="Away team name (default: Sharks)")
    game.add_argument("--roster-size", type=int, default=10)
    game.add_argument("--log", action="store_true", help="Print the full game log")
    game.add_argument("--markdown", default=None, help="Write a markdown summary to this path")
    game.set_defaults(handler=_cmd_game)

    plays = sub.add_parser("plays", help="List playbook keys")
    plays.set_defaults(handler=_cmd_plays)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(handler=_cmd_serve)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the Sandlot command line."""
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    return args.handler(args, Console())


if __name__ == "__main__":
    raise SystemExit(main())
