"""Player, team and league generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sandlot.core.attributes import PlayerAttributes, clamp_rating
from sandlot.core.enums import DEFENSIVE_POSITIONS, OFFENSIVE_POSITIONS, Position
from sandlot.core.models import Coach, Player, Team, TeamFormations
from sandlot.core.rng import SimRandom
from sandlot.league.depth_chart import assign_depth_chart
from sandlot.playbook.plays import PlaybookTables

logger = logging.getLogger(__name__)

# Sample names for generation
FIRST_NAMES = [
    "Alex", "Ben", "Casey", "Dakota", "Eli", "Frankie", "Gabby", "Hayden", "Izzy", "Jordan",
    "Kai", "Leo", "Morgan", "Nico", "Olive", "Pat", "Quinn", "Riley", "Sam", "Taylor",
    "Wyn", "Andy", "Bobby", "Charlie", "Devon", "Eddie", "Fin", "Gus", "Hank", "Ivan",
    "Jack", "Kim", "Lou", "Max", "Nat", "Oscar", "Percy", "Ronnie", "Sid", "Wes",
    "Bailey", "Cameron", "Drew", "Emerson", "Harper", "Jamie", "Logan", "Micah", "Parker", "Reese",
]

LAST_NAMES = [
    "Smith", "Jones", "Williams", "Brown", "Davis", "Miller", "Wilson", "Moore", "Taylor",
    "Anderson", "Thomas", "Jackson", "White", "Harris", "Martin", "Thompson", "Garcia",
    "Martinez", "Robinson", "Clark", "Lewis", "Lee", "Walker", "Hall", "Allen", "Young",
    "King", "Wright", "Lopez", "Hill", "Scott", "Green", "Adams", "Baker", "Nelson",
    "Carter", "Mitchell", "Turner", "Phillips", "Campbell", "Parker", "Evans", "Collins",
]

# Kids who go by a nickname instead of a last name
NICKNAMES = [
    "'The Jet'", "'Rocket'", "'Sticks'", "'Wheels'", "'Flash'", "'Scout'", "'Ace'",
    "'Blaze'", "'Champ'", "'Dash'", "'Sonic'", "'Tiny'", "'Biggie'", "'Ghost'", "'Moose'",
    "'Cannon'", "'Diesel'", "'Gadget'", "'Rhino'", "'Tank'", "'Bolt'", "'Spike'", "'Thunder'",
]
NICKNAME_CHANCE = 0.4

TEAM_NAMES = [
    "Comets", "Jets", "Rockets", "Sharks", "Tigers", "Lions", "Bears", "Eagles",
    "Hornets", "Bulldogs", "Panthers", "Giants", "Wolves", "Vipers", "Pythons", "Cobras",
    "Scorpions", "Spartans", "Cyclones", "Gladiators", "Raptors", "Hawks", "Falcons", "Rebels",
]

MIN_AGE = 10
MAX_AGE = 16
DEFAULT_ROSTER_SIZE = 10


@dataclass(frozen=True)
class CoachProfile:
    """A coaching personality and the formations it lines up in."""
    type: str
    preferred_offense: str
    preferred_defense: str

    def to_coach(self) -> Coach:
        return Coach(self.type, self.preferred_offense, self.preferred_defense)


COACH_PROFILES = (
    CoachProfile("West Coast Offense", "Spread", "2-3-2"),
    CoachProfile("Ground and Pound", "Power", "4-2-1"),
    CoachProfile("Blitz-Happy Defense", "Balanced", "4-2-1"),
    CoachProfile("Balanced", "Balanced", "3-1-3"),
    CoachProfile("The Moneyballer", "Spread", "3-1-3"),
    CoachProfile("Air Raid", "Empty", "2-3-2"),
    CoachProfile("Trench Warfare", "Power", "4-2-1"),
)

ALL_POSITIONS = OFFENSIVE_POSITIONS + DEFENSIVE_POSITIONS

# (low, high) rolls blended 50/50 into a player's best-position attributes
POSITION_BOOSTS: dict[Position, dict[str, tuple[int, int]]] = {
    Position.QB: {"throwing_accuracy": (65, 95), "playbook_iq": (60, 95)},
    Position.RB: {"speed": (60, 90), "strength": (55, 85), "agility": (60, 90)},
    Position.WR: {"speed": (65, 95), "catching_hands": (60, 95), "agility": (70, 95)},
    Position.OL: {"strength": (70, 95), "blocking": (65, 95)},
    Position.DL: {"strength": (70, 95), "tackling": (65, 95), "block_shedding": (60, 90)},
    Position.LB: {"tackling": (65, 95), "speed": (60, 85), "playbook_iq": (50, 85)},
    Position.DB: {"speed": (70, 95), "agility": (70, 95), "catching_hands": (50, 80)},
}

# Base rating rolls before age scaling
BASE_RANGES: dict[str, tuple[int, int]] = {
    "speed": (40, 70),
    "strength": (40, 70),
    "agility": (40, 70),
    "stamina": (50, 80),
    "playbook_iq": (30, 70),
    "consistency": (40, 80),
    "toughness": (50, 95),
    "throwing_accuracy": (20, 50),
    "catching_hands": (30, 60),
    "tackling": (30, 60),
    "blocking": (30, 60),
    "block_shedding": (30, 60),
}
CLUTCH_RANGE = (20, 90)  # not age-scaled

# Cumulative potential thresholds by age bracket; the roll falls through to "F"
POTENTIAL_TABLE = (
    (11, (("A", 0.20), ("B", 0.55), ("C", 0.85), ("D", 1.0))),
    (13, (("A", 0.10), ("B", 0.40), ("C", 0.75), ("D", 0.95))),
    (MAX_AGE, (("A", 0.05), ("B", 0.25), ("C", 0.60), ("D", 0.90))),
)


def _new_id(rng: SimRandom) -> str:
    return f"{rng.randint(0, 16**12 - 1):012x}"


def _roll_potential(age: int, rng: SimRandom) -> str:
    roll = rng.random()
    for max_age, thresholds in POTENTIAL_TABLE:
        if age <= max_age:
            for letter, threshold in thresholds:
                if roll < threshold:
                    return letter
            return "F"
    return "F"


def generate_player(rng: SimRandom, min_age: int = MIN_AGE, max_age: int = MAX_AGE) -> Player:
    """
    Generate a random youth player.

    Younger kids are smaller and rate lower across the board. Each player
    has one hidden best position whose key attributes are pulled upward;
    weight trades speed and agility for strength.

    Args:
        rng: Random source
        min_age: Youngest possible age
        max_age: Oldest possible age

    Returns:
        Generated Player (number 0 until they join a team)
    """
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(NICKNAMES) if rng.chance(NICKNAME_CHANCE) else rng.choice(LAST_NAMES)
    age = rng.randint(min_age, max_age)
    favorite_offense = rng.choice(OFFENSIVE_POSITIONS)
    favorite_defense = rng.choice(DEFENSIVE_POSITIONS)

    age_progress = (age - MIN_AGE) / (MAX_AGE - MIN_AGE)
    height = 55 + age_progress * 15 + rng.randint(-2, 2)
    weight = 70 + age_progress * 90 + rng.randint(-10, 10)
    best = rng.choice(ALL_POSITIONS)

    if best in (Position.QB, Position.WR):
        height += rng.randint(1, 4)
        weight -= rng.randint(0, 10)
    elif best in (Position.OL, Position.DL):
        height -= rng.randint(0, 2)
        weight += rng.randint(20, 40)
    elif best == Position.RB:
        weight += rng.randint(5, 15)

    scale = 0.85 + age_progress * 0.15
    values: dict[str, float] = {name: rng.randint(lo, hi) * scale for name, (lo, hi) in BASE_RANGES.items()}
    values["clutch"] = rng.randint(*CLUTCH_RANGE)

    weight_mod = (weight - 125) / 50
    values["strength"] += weight_mod * 10
    values["speed"] -= weight_mod * 8
    values["agility"] -= weight_mod * 5

    for name, (lo, hi) in POSITION_BOOSTS[best].items():
        values[name] = values[name] * 0.5 + rng.randint(lo, hi) * 0.5

    attributes = PlayerAttributes()
    for name, value in values.items():
        attributes.set(name, clamp_rating(value))
    attributes.set("height", int(round(height)))
    attributes.set("weight", int(round(weight)))

    return Player(
        id=_new_id(rng),
        name=f"{first} {last}",
        age=age,
        attributes=attributes,
        favorite_offense=favorite_offense,
        favorite_defense=favorite_defense,
        potential=_roll_potential(age, rng),
    )


def generate_coach(rng: SimRandom) -> Coach:
    return rng.choice(COACH_PROFILES).to_coach()


def _assign_numbers(team: Team, rng: SimRandom) -> None:
    taken = {p.number for p in team.roster if p.number}
    pool = [n for n in range(1, 100) if n not in taken]
    rng.shuffle(pool)
    for player in team.roster:
        if not player.number:
            player.number = pool.pop()


def generate_team(
    name: str,
    rng: SimRandom,
    size: int = DEFAULT_ROSTER_SIZE,
    coach: Optional[Coach] = None,
    tables: Optional[PlaybookTables] = None,
) -> Team:
    """
    Generate a team with a full roster, a coach and a depth chart.

    The team lines up in its coach's preferred formations.

    Raises:
        ValueError: if size is not positive
    """
    if size <= 0:
        raise ValueError(f"Team size must be positive, got {size}")
    coach = coach or generate_coach(rng)
    team = Team(
        id=_new_id(rng),
        name=name,
        formations=TeamFormations(coach.preferred_offense, coach.preferred_defense),
        coach=coach,
    )
    for _ in range(size):
        team.add_player(generate_player(rng))
    _assign_numbers(team, rng)
    assign_depth_chart(team, tables)
    logger.debug(f"Generated {name} ({coach.type}, {size} players)")
    return team


def generate_league(
    rng: SimRandom,
    num_teams: int = 10,
    roster_size: int = DEFAULT_ROSTER_SIZE,
    tables: Optional[PlaybookTables] = None,
) -> list[Team]:
    """Generate a set of teams with distinct names."""
    if num_teams < 2:
        raise ValueError(f"A league needs at least 2 teams, got {num_teams}")
    names = list(TEAM_NAMES)
    rng.shuffle(names)
    teams = []
    for i in range(num_teams):
        name = names[i] if i < len(names) else f"{names[i % len(names)]} {i // len(names) + 1}"
        teams.append(generate_team(name, rng, roster_size, tables=tables))
    return teams


def generate_schedule(teams: list[Team], weeks: Optional[int] = None) -> list[list[tuple[Team, Team]]]:
    """
    Round-robin schedule as a list of weeks of (home, away) pairs.

    Uses the circle method: the first team stays put and the rest rotate.
    With an odd number of teams one team sits out each week. Home and away
    alternate by week.
    """
    rotation: list[Optional[Team]] = list(teams)
    if len(rotation) % 2:
        rotation.append(None)
    n = len(rotation)
    weeks = weeks if weeks is not None else n - 1
    schedule = []
    for week in range(weeks):
        games = []
        for i in range(n // 2):
            a, b = rotation[i], rotation[n - 1 - i]
            if a is None or b is None:
                continue
            games.append((a, b) if week % 2 else (b, a))
        schedule.append(games)
        rotation.insert(1, rotation.pop())
    return schedule
