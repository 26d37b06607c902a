"""
Offensive and defensive play calling.

The offense weighs a pass probability from personnel matchups, how good
its passer and runner are, down and distance, field position, the score
and the coach's leanings, then picks a concrete play from its formation.
The defense reads the situation and the offensive personnel and picks
among the calls its formation allows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sandlot.core.enums import PlayType, Position, Side
from sandlot.core.models import Player, Team
from sandlot.core.rng import SimRandom
from sandlot.engine.ratings import calculate_overall
from sandlot.engine.roster import find_emergency_player, get_player_by_slot
from sandlot.playbook.plays import DefensivePlay, OffensivePlay, PlaybookTables

logger = logging.getLogger(__name__)

BASE_PASS_CHANCE = 0.45
MIN_PASS_CHANCE = 0.05
MAX_PASS_CHANCE = 0.95
DRIVES_PER_HALF = 8  # approximate, for end-of-half reads
SNEAK_CHANCE = 0.6
SNEAK_MIN_QB = 60
OUTSIDE_RUN_CHANCE = 0.6

COACH_PASS_LEAN = {
    "Ground and Pound": -0.3,
    "West Coast Offense": 0.2,
    "Spread": 0.25,
}


@dataclass(frozen=True)
class Situation:
    """Game state a play caller reads."""
    down: int = 1
    yards_to_go: int = 10
    ball_on: int = 20
    score_diff: int = 0  # from the caller's point of view
    drives_remaining: int = 16

    @property
    def is_late_game(self) -> bool:
        return self.drives_remaining <= 2

    @property
    def is_end_of_half(self) -> bool:
        return self.drives_remaining % DRIVES_PER_HALF <= 1 and self.drives_remaining <= DRIVES_PER_HALF


def _key_player(team: Team, slot: str, position: Position) -> Optional[Player]:
    used: set[str] = set()
    player = get_player_by_slot(team, Side.OFFENSE, slot, used)
    if player is None:
        emergency = find_emergency_player(team, position, used)
        player = emergency.player if emergency else None
    return player


def pass_chance(offense: Team, defense: Team, situation: Situation, tables: PlaybookTables) -> float:
    """Probability that the offense calls a pass in this situation."""
    off = tables.offense_formation(offense.formations.offense).personnel
    dfn = tables.defense_formation(defense.formations.defense).personnel
    qb = _key_player(offense, "QB1", Position.QB)
    rb = _key_player(offense, "RB1", Position.RB)
    qb_strength = calculate_overall(qb, Position.QB) if qb else 0
    rb_strength = calculate_overall(rb, Position.RB) if rb else 0

    chance = BASE_PASS_CHANCE
    dl, lb, db = dfn.get("DL", 0), dfn.get("LB", 0), dfn.get("DB", 0)
    if dl >= 4 or (dl == 3 and lb >= 3):
        chance += 0.15
    if db >= 2 or (db == 1 and lb >= 3):
        chance -= 0.10
    if off.get("WR", 0) > db + 1:
        chance += 0.2
    if off.get("RB", 0) + off.get("OL", 0) > dl + lb + 1:
        chance -= 0.2

    if qb_strength < 50 and rb_strength > 50:
        chance -= 0.25
    if rb_strength < 50 and qb_strength > 50:
        chance += 0.15
    if qb_strength > rb_strength + 15:
        chance += 0.1
    if rb_strength > qb_strength + 15:
        chance -= 0.1

    s = situation
    if s.down == 3 and s.yards_to_go > 6:
        chance += 0.4
    elif s.down == 4 and s.yards_to_go > 3:
        chance = MAX_PASS_CHANCE
    elif s.yards_to_go <= 2:
        chance -= 0.4
    if 80 < s.ball_on < 98:
        chance += 0.1
    elif s.ball_on >= 98:
        chance -= 0.2
    if s.score_diff < -10:
        chance += 0.3 if s.is_late_game else 0.2
    if s.score_diff > 14 and (s.is_late_game or s.is_end_of_half):
        chance -= 0.4
    elif s.score_diff > 7 and (s.is_late_game or s.is_end_of_half):
        chance -= 0.2

    chance += COACH_PASS_LEAN.get(offense.coach.type, 0.0)
    return max(MIN_PASS_CHANCE, min(MAX_PASS_CHANCE, chance))


def _pick_pass(plays: list[OffensivePlay], situation: Situation, rng: SimRandom) -> Optional[OffensivePlay]:
    deep = [p for p in plays if p.has_tag("deep")]
    short = [p for p in plays if p.has_tag("short") or p.has_tag("screen")]
    medium = [p for p in plays if not p.has_tag("deep") and not p.has_tag("short")]
    if situation.down >= 3 and situation.yards_to_go >= 8 and deep:
        return rng.choice(deep)
    if situation.down <= 2 and situation.yards_to_go <= 5 and short:
        return rng.choice(short)
    if medium:
        return rng.choice(medium)
    rest = short + deep
    return rng.choice(rest) if rest else None


def _pick_run(
    plays: list[OffensivePlay],
    situation: Situation,
    qb_strength: int,
    rb_strength: int,
    rng: SimRandom,
) -> Optional[OffensivePlay]:
    plays = [p for p in plays if not p.is_sneak] or plays
    inside = [p for p in plays if p.has_tag("inside")]
    outside = [p for p in plays if p.has_tag("outside")]
    power = [p for p in plays if p.has_tag("power")]
    if situation.yards_to_go <= 2 and power:
        return rng.choice(power)
    if situation.yards_to_go <= 3 and inside:
        return rng.choice(inside)
    if rb_strength > qb_strength + 10 and outside and rng.chance(OUTSIDE_RUN_CHANCE):
        return rng.choice(outside)
    if inside:
        return rng.choice(inside)
    rest = outside + power
    return rng.choice(rest) if rest else None


def call_offensive_play(
    offense: Team,
    defense: Team,
    situation: Situation,
    rng: SimRandom,
    tables: Optional[PlaybookTables] = None,
) -> str:
    """
    Choose an offensive play key from the offense's formation.

    Returns the default play when the formation has no plays.
    """
    tables = tables or PlaybookTables.default()
    formation = offense.formations.offense
    plays = tables.plays_for_formation(formation)
    if not plays:
        logger.error(f"No plays found for formation {formation}, calling {tables.default_play_key}")
        return tables.default_play_key

    qb = _key_player(offense, "QB1", Position.QB)
    rb = _key_player(offense, "RB1", Position.RB)
    qb_strength = calculate_overall(qb, Position.QB) if qb else 0
    rb_strength = calculate_overall(rb, Position.RB) if rb else 0

    if situation.yards_to_go <= 1 and qb_strength > SNEAK_MIN_QB and rng.chance(SNEAK_CHANCE):
        sneak = next((p for p in plays if p.is_sneak), None)
        if sneak is not None:
            return sneak.key

    desired = PlayType.PASS if rng.chance(pass_chance(offense, defense, situation, tables)) else PlayType.RUN
    candidates = [p for p in plays if p.type == desired]
    if not candidates:
        desired = PlayType.RUN if desired == PlayType.PASS else PlayType.PASS
        candidates = [p for p in plays if p.type == desired]
        if not candidates:
            return plays[0].key

    if desired == PlayType.PASS:
        chosen = _pick_pass(candidates, situation, rng)
    else:
        chosen = _pick_run(candidates, situation, qb_strength, rb_strength, rng)
    chosen = chosen or rng.choice(candidates)
    logger.debug(f"{offense.name} calls {chosen.key} on {situation.down}&{situation.yards_to_go}")
    return chosen.key


def _categorize(plays: list[DefensivePlay]) -> dict[str, list[DefensivePlay]]:
    groups: dict[str, list[DefensivePlay]] = {"blitz": [], "run_stop": [], "zone": [], "man": []}
    for play in plays:
        if play.run_stop:
            groups["run_stop"].append(play)
        elif play.blitz:
            groups["blitz"].append(play)
        elif play.concept == "Zone":
            groups["zone"].append(play)
        else:
            groups["man"].append(play)
    return groups


def call_defensive_play(
    defense: Team,
    offense: Team,
    situation: Situation,
    rng: SimRandom,
    tables: Optional[PlaybookTables] = None,
) -> Optional[str]:
    """
    Choose a defensive play key compatible with the defense's formation.

    Returns None when the formation has no plays; the formation's default
    coverage then applies.
    """
    tables = tables or PlaybookTables.default()
    formation = tables.defense_formation(defense.formations.defense).key
    plays = tables.defensive_plays_for(formation)
    if not plays:
        logger.error(f"No defensive plays found for formation {formation}")
        return None

    groups = _categorize(plays)
    s = situation
    obvious_pass = (s.down == 3 and s.yards_to_go >= 7) or (s.down == 4 and s.yards_to_go >= 3) \
        or (s.down == 2 and s.yards_to_go >= 10)
    obvious_run = (s.yards_to_go <= 2 and s.down >= 3) or s.yards_to_go <= 1
    red_zone = s.ball_on >= 80

    personnel = tables.offense_formation(offense.formations.offense).personnel
    spread = personnel.get("WR", 0) >= 3
    heavy = personnel.get("RB", 0) >= 2

    preferred: list[DefensivePlay] = []
    if obvious_run or (heavy and not obvious_pass):
        preferred += groups["run_stop"] + groups["blitz"] + groups["man"]
    elif obvious_pass or spread:
        preferred += groups["zone"] + groups["man"] + groups["blitz"]
    else:
        preferred += groups["zone"] + groups["man"] + groups["run_stop"]

    coach = defense.coach.type
    if coach == "Blitz-Happy Defense":
        preferred += groups["blitz"] * 3
    elif coach == "Ground and Pound":
        preferred += groups["run_stop"] * 2
    elif coach == "West Coast Offense":
        preferred += groups["zone"] * 2
    if red_zone:
        preferred += groups["man"] + [p for p in groups["zone"] if "deep" not in p.key.lower()]

    # Coach and red-zone leanings widen the pool; each call is drawn once at most
    unique = list({p.key: p for p in preferred}.values())
    chosen = rng.choice(unique) if unique else rng.choice(plays)
    logger.debug(f"{defense.name} calls {chosen.key}")
    return chosen.key
