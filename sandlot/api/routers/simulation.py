"""REST API router for play and game simulation."""

import logging

from fastapi import APIRouter, HTTPException

from sandlot.api.schemas import (
    GameResultResponse,
    PlayResultResponse,
    SimulateGameRequest,
    SimulatePlayRequest,
)
from sandlot.core.rng import SimRandom
from sandlot.engine.play import resolve_play
from sandlot.engine.setup import FieldContext
from sandlot.league.depth_chart import assign_depth_chart
from sandlot.league.game import simulate_game
from sandlot.league.generator import generate_team
from sandlot.playbook.plays import PlaybookTables

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulate", tags=["simulation"])


@router.post("/play", response_model=PlayResultResponse)
async def simulate_play(request: SimulatePlayRequest) -> PlayResultResponse:
    """Generate two teams from the seed and run one play between them."""
    tables = PlaybookTables.default()
    play = tables.offensive_play(request.play_key)
    if play is None:
        raise HTTPException(status_code=404, detail=f"Unknown offensive play: {request.play_key}")

    defense_formation = request.defense_formation
    if request.defensive_play_key is not None:
        defensive_play = tables.defensive_plays.get(request.defensive_play_key)
        if defensive_play is None:
            raise HTTPException(status_code=404, detail=f"Unknown defensive play: {request.defensive_play_key}")
        if defense_formation is None:
            defense_formation = defensive_play.formations[0]
        elif defense_formation not in defensive_play.formations:
            raise HTTPException(
                status_code=404,
                detail=f"Defensive play {request.defensive_play_key} is not run from {defense_formation}",
            )
    if defense_formation is not None and defense_formation not in tables.defense_formations:
        raise HTTPException(status_code=404, detail=f"Unknown defensive formation: {defense_formation}")

    rng = SimRandom(request.seed)
    offense = generate_team("Offense", rng, request.offense_size, tables=tables)
    defense = generate_team("Defense", rng, request.defense_size, tables=tables)
    offense.formations.offense = play.formation
    assign_depth_chart(offense, tables)
    if defense_formation is not None:
        defense.formations.defense = defense_formation
        assign_depth_chart(defense, tables)

    context = FieldContext(
        ball_on=request.ball_on,
        down=request.down,
        yards_to_go=request.yards_to_go,
        weather=request.weather,
        defensive_play_key=request.defensive_play_key,
    )
    result = resolve_play(offense, defense, play.key, context, rng, tables)
    logger.info(f"API play {play.key}: {result.outcome.value} for {result.yards}")

    data = result.to_dict()
    if not request.include_frames:
        data["visualization_frames"] = []
    return PlayResultResponse(**data)


@router.post("/game", response_model=GameResultResponse)
async def simulate_full_game(request: SimulateGameRequest) -> GameResultResponse:
    """Generate two teams from the seed and play a full game."""
    rng = SimRandom(request.seed)
    tables = PlaybookTables.default()
    home = generate_team(request.home_name, rng, request.roster_size, tables=tables)
    away = generate_team(request.away_name, rng, request.roster_size, tables=tables)
    if home.name == away.name:
        away.name = f"{away.name} (Away)"
    result = simulate_game(home, away, rng, tables)
    return GameResultResponse(**result.to_dict())
