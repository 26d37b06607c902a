"""
Game and week simulation.

simulate_game() drives a whole game through resolve_play(): coin toss,
drives of up to four downs each, conversions after touchdowns, field
position after turnovers, halftime, forfeits, then stat aggregation and youth breakthroughs. simulate_week()
runs a slate of games and advances player availability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sandlot.config import EngineConfig, get_config
from sandlot.core.enums import StatusType, Weather
from sandlot.core.models import Player, PlayerStatus, Team
from sandlot.core.rng import SimRandom
from sandlot.engine.play import resolve_play
from sandlot.engine.recorder import PlayResult
from sandlot.engine.setup import FieldContext
from sandlot.league.depth_chart import assign_depth_chart
from sandlot.league.play_calling import Situation, call_defensive_play, call_offensive_play
from sandlot.playbook.plays import PlaybookTables

logger = logging.getLogger(__name__)

MIN_HEALTHY_PLAYERS = 7
DRIVES_PER_HALF = (7, 9)
DRIVE_START = 20
HALFTIME_RECOVERY = 40.0
FORFEIT_SCORE = 21

TOUCHDOWN_POINTS = 6
TWO_POINT_RATE = 0.15
TWO_POINT_SUCCESS = 0.4
EXTRA_POINT_SUCCESS = 0.95

BREAKTHROUGH_MAX_AGE = 14
BREAKTHROUGH_CHANCE = 0.15
BREAKTHROUGH_ATTRIBUTES = (
    "speed", "strength", "agility", "throwing_accuracy", "catching_hands", "tackling",
    "blocking", "playbook_iq", "block_shedding", "toughness", "consistency",
)


@dataclass(frozen=True)
class WeeklyEvent:
    """Something that keeps a kid away from the field for a while."""
    type: StatusType
    description: str
    min_weeks: int
    max_weeks: int
    chance: float


WEEKLY_EVENTS = (
    WeeklyEvent(StatusType.INJURED, "Sprained Ankle", 1, 2, 0.005),
    WeeklyEvent(StatusType.INJURED, "Jammed Finger", 1, 1, 0.008),
    WeeklyEvent(StatusType.BUSY, "Grounded", 1, 2, 0.01),
    WeeklyEvent(StatusType.BUSY, "School Project", 1, 1, 0.015),
    WeeklyEvent(StatusType.BUSY, "Family Vacation", 1, 1, 0.003),
)


@dataclass
class Breakthrough:
    """A young player who improved an attribute after a good game."""
    player_id: str
    player_name: str
    team_name: str
    attribute: str


@dataclass
class GameResult:
    """Result of a simulated game."""

    home: Team
    away: Team
    home_score: int
    away_score: int
    weather: Weather
    log: list[str] = field(default_factory=list)
    breakthroughs: list[Breakthrough] = field(default_factory=list)
    box_score: dict[str, list[dict]] = field(default_factory=dict)
    forfeited: bool = False
    drives: int = 0
    plays: list[PlayResult] = field(default_factory=list)
    play_count: int = 0

    @property
    def winner(self) -> Optional[Team]:
        """Winning team, None on a tie."""
        if self.home_score > self.away_score:
            return self.home
        if self.away_score > self.home_score:
            return self.away
        return None

    @property
    def is_tie(self) -> bool:
        return self.home_score == self.away_score

    def to_dict(self) -> dict:
        return {
            "home": self.home.name,
            "away": self.away.name,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "weather": self.weather.value,
            "forfeited": self.forfeited,
            "drives": self.drives,
            "plays": self.play_count,
            "log": list(self.log),
            "box_score": self.box_score,
            "breakthroughs": [
                {"player": b.player_name, "team": b.team_name, "attribute": b.attribute}
                for b in self.breakthroughs
            ],
        }

    def __str__(self) -> str:
        winner = "TIE" if self.is_tie else self.winner.name
        return f"{self.away.name} {self.away_score} @ {self.home.name} {self.home_score} - {winner}"


@dataclass
class WeekResult:
    """Results for one week of games."""

    week: int
    games: list[GameResult] = field(default_factory=list)

    @property
    def breakthroughs(self) -> list[Breakthrough]:
        return [b for g in self.games for b in g.breakthroughs]

    def get_team_result(self, team_id: str) -> Optional[GameResult]:
        for game in self.games:
            if team_id in (game.home.id, game.away.id):
                return game
        return None

    def __str__(self) -> str:
        return f"Week {self.week}: {len(self.games)} games"


# =============================================================================
# Helpers
# =============================================================================


def _ordinal(n: int) -> str:
    return {1: "1st", 2: "2nd", 3: "3rd"}.get(n, f"{n}th")


def _yard_line(ball_on: int) -> str:
    return f"own {ball_on}" if ball_on <= 50 else f"opponent {100 - ball_on}"


def _short_handed(team: Team) -> bool:
    return len(team.healthy_players()) < MIN_HEALTHY_PLAYERS


def _reset_for_game(team: Team) -> None:
    for player in team.roster:
        player.fatigue = 0.0
        player.game_stats.reset()


def _had_big_game(player: Player) -> bool:
    s = player.game_stats
    return (s.touchdowns >= 1 or s.pass_yards > 100 or s.rec_yards > 50 or s.rush_yards > 50
            or s.tackles > 4 or s.sacks >= 1 or s.interceptions >= 1)


def _box_score(team: Team) -> list[dict]:
    return [
        {"id": p.id, "name": p.name, "number": p.number, **p.game_stats.to_dict()}
        for p in team.roster
        if not p.game_stats.is_empty()
    ]


class _Scoreboard:
    """Running score keyed by team id."""

    def __init__(self, home: Team, away: Team):
        self.home = home
        self.away = away
        self.points = {home.id: 0, away.id: 0}

    def add(self, team: Team, points: int) -> None:
        self.points[team.id] += points

    def diff_for(self, team: Team) -> int:
        other = self.away if team.id == self.home.id else self.home
        return self.points[team.id] - self.points[other.id]

    def line(self) -> str:
        return f"{self.away.name} {self.points[self.away.id]} - {self.home.name} {self.points[self.home.id]}"


@dataclass(frozen=True)
class _DriveEnd:
    """How a drive finished: where the next one starts and who has the ball."""
    next_start: int = DRIVE_START
    offense_receives: bool = False  # the defense scored and kicks off back to the offense


# =============================================================================
# Game
# =============================================================================


def _convert(offense: Team, score: _Scoreboard, log: list[str], rng: SimRandom) -> None:
    goes_for_two = rng.chance(TWO_POINT_RATE)
    success = rng.chance(TWO_POINT_SUCCESS if goes_for_two else EXTRA_POINT_SUCCESS)
    if success:
        points = 2 if goes_for_two else 1
        log.append(f"{points}-point conversion GOOD!")
        score.add(offense, TOUCHDOWN_POINTS + points)
    else:
        log.append(f"{'2-point' if goes_for_two else 'Extra point'} conversion FAILED!")
        score.add(offense, TOUCHDOWN_POINTS)


def _run_drive(
    offense: Team,
    defense: Team,
    score: _Scoreboard,
    drives_remaining: int,
    result: GameResult,
    rng: SimRandom,
    tables: PlaybookTables,
    config: EngineConfig,
    keep_plays: bool,
    start: int = DRIVE_START,
) -> Optional[_DriveEnd]:
    """Play one drive from `start`. Returns None if the game ends in a forfeit mid-drive."""
    log = result.log
    ball_on, down, yards_to_go = start, 1, min(10, 100 - start)
    while down <= 4:
        if _short_handed(offense) or _short_handed(defense):
            log.append("Forfeit condition met mid-drive.")
            return None

        log.append(f"--- {_ordinal(down)} & {'Goal' if yards_to_go <= 0 else yards_to_go} "
                   f"from the {_yard_line(ball_on)} ---")
        situation = Situation(down, yards_to_go, ball_on, score.diff_for(offense), drives_remaining)
        play_key = call_offensive_play(offense, defense, situation, rng, tables)
        defensive_key = call_defensive_play(defense, offense, situation, rng, tables)
        context = FieldContext(
            ball_on=ball_on,
            down=down,
            yards_to_go=yards_to_go,
            weather=result.weather,
            game_log=log,
            defensive_play_key=defensive_key,
        )
        play = resolve_play(offense, defense, play_key, context, rng, tables, config)
        log.extend(play.play_log)
        result.play_count += 1
        if keep_plays:
            result.plays.append(play)

        ball_on = max(0, min(100, ball_on + play.yards))
        if play.defensive_touchdown:
            _convert(defense, score, log, rng)
            return _DriveEnd(offense_receives=True)
        if play.turnover:
            next_start = play.takeover_at if play.takeover_at is not None else DRIVE_START
            log.append(f"{defense.name} takes over at the {_yard_line(next_start)}.")
            return _DriveEnd(next_start)
        if play.touchdown:
            _convert(offense, score, log, rng)
            return _DriveEnd()
        if play.incomplete:
            down += 1
        else:
            yards_to_go -= play.yards
            if yards_to_go <= 0:
                down = 1
                yards_to_go = min(10, 100 - ball_on)
                spot = f"1st & Goal at the {100 - ball_on}" if yards_to_go < 10 \
                    else f"1st & 10 at the {_yard_line(ball_on)}"
                log.append(f"First down {offense.name}! {spot}.")
            else:
                down += 1

    takeover = max(1, min(99, 100 - ball_on))
    log.append(f"Turnover on downs! {defense.name} takes over at the {_yard_line(takeover)}.")
    return _DriveEnd(takeover)


def _forfeit(offense: Team, defense: Team, score: _Scoreboard, log: list[str]) -> None:
    loser = offense if _short_handed(offense) else defense
    winner = defense if loser is offense else offense
    log.append(f"{loser.name} cannot field enough healthy players ({MIN_HEALTHY_PLAYERS}) and forfeits.")
    score.points[winner.id] = FORFEIT_SCORE
    score.points[loser.id] = 0
    logger.info(f"{loser.name} forfeits to {winner.name}")


def _post_game(result: GameResult, rng: SimRandom) -> None:
    for team in (result.home, result.away):
        for player in team.roster:
            if player.age < BREAKTHROUGH_MAX_AGE and _had_big_game(player) and rng.chance(BREAKTHROUGH_CHANCE):
                attr = rng.choice(BREAKTHROUGH_ATTRIBUTES)
                value = player.attr(attr)
                if value < 99:
                    player.attributes.set(attr, value + 1)
                    result.breakthroughs.append(Breakthrough(player.id, player.name, team.name, attr))
                    logger.info(f"Breakthrough: {player.name} improved {attr}")
            player.finish_game()
        result.box_score[team.name] = _box_score(team)


def simulate_game(
    home: Team,
    away: Team,
    rng: Optional[SimRandom] = None,
    tables: Optional[PlaybookTables] = None,
    config: Optional[EngineConfig] = None,
    keep_plays: bool = False,
) -> GameResult:
    """
    Simulate a full game between two teams.

    Both teams are mutated: depth charts, fatigue, injuries, stats and
    their win/loss records.

    Args:
        home: Home team
        away: Away team
        rng: Random source
        tables: Playbook tables
        config: Engine tuning
        keep_plays: Keep every PlayResult (with frames) on the result

    Returns:
        GameResult with score, log and box score
    """
    config = config or get_config()
    tables = tables or PlaybookTables.default()
    rng = rng or SimRandom(config.seed)

    for team in (home, away):
        _reset_for_game(team)
        assign_depth_chart(team, tables)

    weather = rng.choice(list(Weather))
    result = GameResult(home=home, away=away, home_score=0, away_score=0, weather=weather)
    log = result.log
    log.append(f"Weather: {weather.value}")
    score = _Scoreboard(home, away)

    drives_per_half = rng.randint(*DRIVES_PER_HALF)
    log.append("Coin toss to determine first possession...")
    possession = home if rng.chance(0.5) else away
    second_half_receiver = away if possession is home else home
    log.append(f"{possession.name} won the toss and will receive the ball first!")

    half = 1
    drive = 0
    start = DRIVE_START
    while drive < drives_per_half * 2:
        if drive == drives_per_half:
            half = 2
            log.append(f"==== HALFTIME ==== Score: {score.line()}")
            possession = second_half_receiver
            start = DRIVE_START
            for player in home.roster + away.roster:
                player.recover(HALFTIME_RECOVERY)
            log.append(f"-- Second Half Kickoff: {possession.name} receives --")

        offense = possession
        defense = away if offense is home else home
        if _short_handed(offense) or _short_handed(defense):
            _forfeit(offense, defense, score, log)
            result.forfeited = True
            break

        log.append(f"-- Drive {drive + 1} (H{half}): {offense.name} ball on {_yard_line(start)} --")
        remaining_in_half = drives_per_half - drive % drives_per_half
        remaining = (drives_per_half if half == 1 else 0) + remaining_in_half
        end = _run_drive(offense, defense, score, remaining, result, rng, tables, config, keep_plays, start)
        drive += 1
        if end is None:
            _forfeit(offense, defense, score, log)
            result.forfeited = True
            break
        possession = offense if end.offense_receives else defense
        start = end.next_start

    result.drives = drive
    result.home_score = score.points[home.id]
    result.away_score = score.points[away.id]
    log.append(f"==== FINAL SCORE ==== {score.line()}")

    if result.winner is home:
        home.wins += 1
        away.losses += 1
    elif result.winner is away:
        away.wins += 1
        home.losses += 1

    _post_game(result, rng)
    logger.info(f"Final: {result}")
    return result


# =============================================================================
# Week
# =============================================================================


def _roll_weekly_events(team: Team, rng: SimRandom) -> None:
    for player in team.roster:
        if player.status.type != StatusType.HEALTHY:
            continue
        for event in WEEKLY_EVENTS:
            if rng.chance(event.chance):
                weeks = rng.randint(event.min_weeks, event.max_weeks)
                player.status = PlayerStatus(event.type, weeks, event.description)
                logger.info(f"{player.name} unavailable for {weeks} week(s): {event.description}")
                break


def end_week(teams: list[Team], rng: SimRandom) -> None:
    """
    Advance availability by one week.

    Temporary fill-ins leave, statuses count down, fatigue resets and a
    few kids pick up new reasons to miss the next game.
    """
    for team in teams:
        team.roster = [p for p in team.roster if p.status.type != StatusType.TEMPORARY]
        for player in team.roster:
            player.status.tick_week()
            player.fatigue = 0.0
        _roll_weekly_events(team, rng)


def simulate_week(
    schedule: list[tuple[Team, Team]],
    rng: Optional[SimRandom] = None,
    tables: Optional[PlaybookTables] = None,
    config: Optional[EngineConfig] = None,
    week: int = 0,
) -> WeekResult:
    """
    Simulate one week of (home, away) games in order, then end the week.

    Each game draws from its own child random source so results do not
    depend on how many rolls an earlier game used.
    """
    config = config or get_config()
    rng = rng or SimRandom(config.seed)
    result = WeekResult(week=week)
    teams: list[Team] = []
    for home, away in schedule:
        result.games.append(simulate_game(home, away, rng.spawn(), tables, config))
        teams.extend(t for t in (home, away) if all(t is not seen for seen in teams))
    end_week(teams, rng)
    logger.info(f"Week {week} complete: {len(result.games)} games")
    return result
