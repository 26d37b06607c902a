"""REST API router for read-only playbook tables."""

from fastapi import APIRouter, HTTPException

from sandlot.playbook.formations import Formation
from sandlot.playbook.plays import DefensivePlay, OffensivePlay, PlaybookTables

router = APIRouter(prefix="/playbook", tags=["playbook"])


def _offensive(play: OffensivePlay) -> dict:
    return {
        "key": play.key,
        "formation": play.formation,
        "type": play.type.value,
        "tags": list(play.tags),
        "zone": play.zone,
        "assignments": dict(play.assignments),
        "read_progression": list(play.read_progression),
    }


def _defensive(play: DefensivePlay) -> dict:
    return {
        "key": play.key,
        "name": play.name,
        "formations": list(play.formations),
        "concept": play.concept,
        "blitz": play.blitz,
        "tags": list(play.tags),
        "assignments": dict(play.assignments),
    }


def _formation(formation: Formation) -> dict:
    return {
        "key": formation.key,
        "name": formation.name,
        "side": formation.side.value,
        "slots": list(formation.slots),
        "personnel": dict(formation.personnel),
        "coordinates": {slot: list(xy) for slot, xy in formation.coordinates.items()},
    }


@router.get("/offense")
async def list_offensive_plays() -> dict:
    """All offensive plays keyed by play key."""
    tables = PlaybookTables.default()
    return {key: _offensive(play) for key, play in tables.offensive_plays.items()}


@router.get("/offense/{play_key}")
async def get_offensive_play(play_key: str) -> dict:
    """One offensive play."""
    play = PlaybookTables.default().offensive_play(play_key)
    if play is None:
        raise HTTPException(status_code=404, detail=f"Unknown offensive play: {play_key}")
    return _offensive(play)


@router.get("/defense")
async def list_defensive_plays() -> dict:
    """All defensive plays keyed by play key."""
    tables = PlaybookTables.default()
    return {key: _defensive(play) for key, play in tables.defensive_plays.items()}


@router.get("/formations")
async def list_formations() -> dict:
    """Offensive and defensive formations."""
    tables = PlaybookTables.default()
    return {
        "offense": {key: _formation(f) for key, f in tables.offense_formations.items()},
        "defense": {key: _formation(f) for key, f in tables.defense_formations.items()},
    }
