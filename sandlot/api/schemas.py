"""Pydantic schemas for the simulation API."""

from typing import Optional

from pydantic import BaseModel, Field

from sandlot.core.enums import Weather
from sandlot.playbook.plays import DEFAULT_RUN_PLAY


class SimulatePlayRequest(BaseModel):
    """Request to simulate a single play between two generated teams."""
    seed: Optional[int] = Field(default=None, description="Seed for team generation and the play")
    play_key: str = Field(default=DEFAULT_RUN_PLAY)
    defensive_play_key: Optional[str] = None
    ball_on: int = Field(default=20, ge=0, le=99)
    down: int = Field(default=1, ge=1, le=4)
    yards_to_go: int = Field(default=10, ge=1, le=99)
    weather: Weather = Weather.SUNNY
    offense_size: int = Field(default=10, ge=1, le=30)
    defense_size: int = Field(default=10, ge=1, le=30)
    defense_formation: Optional[str] = None
    include_frames: bool = True


class PlayResultResponse(BaseModel):
    """Outcome of one simulated play."""
    yards: int
    touchdown: bool
    turnover: bool
    incomplete: bool
    sack: bool = False
    outcome: str
    play_key: str
    defensive_play_key: Optional[str] = None
    ticks: int = 0
    return_yards: int = 0
    defensive_touchdown: bool = False
    takeover_at: Optional[int] = None
    log: list[str] = Field(default_factory=list)
    visualization_frames: list[dict] = Field(default_factory=list)


class SimulateGameRequest(BaseModel):
    """Request to simulate a full game between two generated teams."""
    seed: Optional[int] = None
    home_name: str = Field(default="Comets", min_length=1, max_length=40)
    away_name: str = Field(default="Sharks", min_length=1, max_length=40)
    roster_size: int = Field(default=10, ge=1, le=30)


class BreakthroughResponse(BaseModel):
    player: str
    team: str
    attribute: str


class GameResultResponse(BaseModel):
    """Final score, log and box score of a simulated game."""
    home: str
    away: str
    home_score: int
    away_score: int
    weather: str
    forfeited: bool = False
    drives: int = 0
    plays: int = 0
    log: list[str] = Field(default_factory=list)
    box_score: dict[str, list[dict]] = Field(default_factory=dict)
    breakthroughs: list[BreakthroughResponse] = Field(default_factory=list)
