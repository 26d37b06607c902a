"""Player model."""

from dataclasses import asdict, dataclass, field, fields
from typing import Optional
from uuid import uuid4

from sandlot.core.attributes import PlayerAttributes
from sandlot.core.enums import Position, StatusType


@dataclass
class PlayerStatus:
    """Availability of a player. Anything with duration > 0 cannot start."""

    type: StatusType = StatusType.HEALTHY
    duration: int = 0  # weeks remaining
    description: str = ""

    @property
    def is_available(self) -> bool:
        return self.duration == 0

    def tick_week(self) -> None:
        """Count down one week; a status that runs out returns to healthy."""
        if self.duration > 0:
            self.duration -= 1
        if self.duration == 0:
            self.type = StatusType.HEALTHY
            self.description = ""


@dataclass
class PlayerStats:
    """Counting stats. Used for game, season and career totals alike."""

    receptions: int = 0
    rec_yards: int = 0
    pass_yards: int = 0
    pass_attempts: int = 0
    pass_completions: int = 0
    interceptions_thrown: int = 0
    rush_attempts: int = 0
    rush_yards: int = 0
    touchdowns: int = 0
    tackles: int = 0
    sacks: int = 0
    interceptions: int = 0
    fumbles: int = 0
    fumbles_lost: int = 0

    def add(self, other: "PlayerStats") -> None:
        """Accumulate another stat line into this one."""
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, 0)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) == 0 for f in fields(self))

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class Player:
    """
    A youth-league player.

    Players persist across the season; the play engine mutates fatigue,
    status and game_stats in place.
    """

    id: str = field(default_factory=lambda: uuid4().hex[:12])
    name: str = ""
    age: int = 12
    number: int = 0
    attributes: PlayerAttributes = field(default_factory=PlayerAttributes)
    status: PlayerStatus = field(default_factory=PlayerStatus)
    fatigue: float = 0.0  # 0-100

    # Flavor from generation, not used by the engine
    favorite_offense: Optional[Position] = None
    favorite_defense: Optional[Position] = None
    potential: str = "C"
    team_id: Optional[str] = None

    game_stats: PlayerStats = field(default_factory=PlayerStats)
    season_stats: PlayerStats = field(default_factory=PlayerStats)
    career_stats: PlayerStats = field(default_factory=PlayerStats)

    @property
    def is_available(self) -> bool:
        return self.status.is_available

    @property
    def short_name(self) -> str:
        """Last word of the name, or the whole thing for one-word names."""
        parts = self.name.split()
        return parts[-1] if parts else self.id

    def attr(self, name: str, default: int = 0) -> int:
        """Shortcut for attributes.get()."""
        return self.attributes.get(name, default)

    def add_fatigue(self, amount: float) -> None:
        self.fatigue = min(100.0, max(0.0, self.fatigue + amount))

    def recover(self, amount: float) -> None:
        self.fatigue = max(0.0, self.fatigue - amount)

    def finish_game(self) -> None:
        """Roll game stats into season and career totals."""
        self.season_stats.add(self.game_stats)
        self.career_stats.add(self.game_stats)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "number": self.number,
            "attributes": self.attributes.to_dict(),
            "status": {
                "type": self.status.type.value,
                "duration": self.status.duration,
                "description": self.status.description,
            },
            "fatigue": round(self.fatigue, 2),
            "potential": self.potential,
            "game_stats": self.game_stats.to_dict(),
            "season_stats": self.season_stats.to_dict(),
        }

    def __str__(self) -> str:
        return f"#{self.number} {self.name}"
