"""Static playbook data: routes, formations, offensive and defensive plays."""

from sandlot.playbook.formations import DEFENSE_FORMATIONS, OFFENSE_FORMATIONS, Formation
from sandlot.playbook.plays import (
    DEFAULT_RUN_PLAY,
    DEFENSIVE_PLAYBOOK,
    OFFENSIVE_PLAYBOOK,
    DefensivePlay,
    OffensivePlay,
    PlaybookTables,
)
from sandlot.playbook.routes import ROUTE_TREE, Route

__all__ = [
    "DEFAULT_RUN_PLAY",
    "DEFENSE_FORMATIONS",
    "DEFENSIVE_PLAYBOOK",
    "DefensivePlay",
    "Formation",
    "OFFENSE_FORMATIONS",
    "OFFENSIVE_PLAYBOOK",
    "OffensivePlay",
    "PlaybookTables",
    "ROUTE_TREE",
    "Route",
]
