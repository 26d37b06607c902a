"""Team, depth chart and coach models."""

from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4

from sandlot.core.enums import Side
from sandlot.core.models.player import Player


@dataclass
class DepthChart:
    """
    Slot -> player id assignments for each side of the ball.

    Slot names come from the team's current formations (e.g. "WR1", "DL2").
    Each slot appears once per side.
    """

    offense: dict[str, str] = field(default_factory=dict)
    defense: dict[str, str] = field(default_factory=dict)

    def side(self, side: Side) -> dict[str, str]:
        return self.offense if side == Side.OFFENSE else self.defense

    def get(self, side: Side, slot: str) -> Optional[str]:
        """Get player ID at a slot, or None if empty."""
        return self.side(side).get(slot)

    def set(self, side: Side, slot: str, player_id: Optional[str]) -> None:
        chart = self.side(side)
        if player_id is None:
            chart.pop(slot, None)
        else:
            chart[slot] = player_id

    def slots_with_prefix(self, side: Side, prefix: str) -> list[str]:
        """Slots on a side whose name starts with `prefix`, in sorted order."""
        return sorted(s for s in self.side(side) if s.startswith(prefix))

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {"offense": dict(self.offense), "defense": dict(self.defense)}


@dataclass
class TeamFormations:
    """Names of the formations a team lines up in."""

    offense: str = "Balanced"
    defense: str = "3-1-3"


@dataclass
class Coach:
    """Coach personality. Drives formation choice and play calling."""

    type: str = "Balanced"
    preferred_offense: str = "Balanced"
    preferred_defense: str = "3-1-3"


@dataclass
class Team:
    """A youth-league team with its roster and depth chart."""

    id: str = field(default_factory=lambda: uuid4().hex[:12])
    name: str = ""
    roster: list[Player] = field(default_factory=list)
    formations: TeamFormations = field(default_factory=TeamFormations)
    depth_chart: DepthChart = field(default_factory=DepthChart)
    coach: Coach = field(default_factory=Coach)
    wins: int = 0
    losses: int = 0

    def get_player(self, player_id: Optional[str]) -> Optional[Player]:
        if player_id is None:
            return None
        for player in self.roster:
            if player.id == player_id:
                return player
        return None

    def add_player(self, player: Player) -> None:
        player.team_id = self.id
        self.roster.append(player)

    def healthy_players(self) -> list[Player]:
        return [p for p in self.roster if p.is_available]

    def starter(self, side: Side, slot: str) -> Optional[Player]:
        return self.get_player(self.depth_chart.get(side, slot))

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "formations": {"offense": self.formations.offense, "defense": self.formations.defense},
            "coach": self.coach.type,
            "record": self.record,
            "depth_chart": self.depth_chart.to_dict(),
            "roster": [p.to_dict() for p in self.roster],
        }

    def __str__(self) -> str:
        return self.name
