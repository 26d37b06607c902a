"""Core data models."""

from sandlot.core.models.player import Player, PlayerStats, PlayerStatus
from sandlot.core.models.team import Coach, DepthChart, Team, TeamFormations

__all__ = [
    "Coach",
    "DepthChart",
    "Player",
    "PlayerStats",
    "PlayerStatus",
    "Team",
    "TeamFormations",
]
