"""League layer: rosters, depth charts, play calling, games and weeks."""

from sandlot.league.depth_chart import assign_depth_chart
from sandlot.league.game import (
    MIN_HEALTHY_PLAYERS,
    Breakthrough,
    GameResult,
    WeekResult,
    end_week,
    simulate_game,
    simulate_week,
)
from sandlot.league.generator import (
    COACH_PROFILES,
    generate_coach,
    generate_league,
    generate_player,
    generate_schedule,
    generate_team,
)
from sandlot.league.play_calling import Situation, call_defensive_play, call_offensive_play, pass_chance

__all__ = [
    "Breakthrough",
    "COACH_PROFILES",
    "GameResult",
    "MIN_HEALTHY_PLAYERS",
    "Situation",
    "WeekResult",
    "assign_depth_chart",
    "call_defensive_play",
    "call_offensive_play",
    "end_week",
    "generate_coach",
    "generate_league",
    "generate_player",
    "generate_schedule",
    "generate_team",
    "pass_chance",
    "simulate_game",
    "simulate_week",
]
