"""
Player attribute records.

Attributes are grouped into three fixed categories. Every rating is an
integer in [1, 99]; height (inches) and weight (lbs) are stored unscaled.
Lookups by name go through PlayerAttributes.get(), which returns a default
for names that do not exist instead of raising, so scoring code can read
any attribute without guarding.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

RATING_MIN = 1
RATING_MAX = 99

# Attributes that are not on the 1-99 scale
UNSCALED_ATTRIBUTES = ("height", "weight")


def clamp_rating(value: float) -> int:
    """Round and clamp a rating into [1, 99]."""
    return max(RATING_MIN, min(RATING_MAX, int(round(value))))


@dataclass
class PhysicalAttributes:
    speed: int = 50
    strength: int = 50
    agility: int = 50
    stamina: int = 50
    height: int = 60  # inches
    weight: int = 100  # lbs


@dataclass
class MentalAttributes:
    playbook_iq: int = 50
    clutch: int = 50
    consistency: int = 50
    toughness: int = 50


@dataclass
class TechnicalAttributes:
    throwing_accuracy: int = 50
    catching_hands: int = 50
    tackling: int = 50
    blocking: int = 50
    block_shedding: int = 50


@dataclass
class PlayerAttributes:
    """All attributes of a player, grouped by category."""

    physical: PhysicalAttributes = field(default_factory=PhysicalAttributes)
    mental: MentalAttributes = field(default_factory=MentalAttributes)
    technical: TechnicalAttributes = field(default_factory=TechnicalAttributes)

    def _category_for(self, name: str) -> Any:
        for category in (self.physical, self.mental, self.technical):
            if name in _FIELD_NAMES[type(category)]:
                return category
        return None

    def get(self, name: str, default: int = 0) -> int:
        """Get an attribute by name, or `default` if no category defines it."""
        category = self._category_for(name)
        if category is None:
            return default
        return getattr(category, name)

    def set(self, name: str, value: int) -> None:
        """Set an attribute by name. Ratings are clamped; height/weight are not."""
        category = self._category_for(name)
        if category is None:
            raise KeyError(f"Unknown attribute: {name}")
        if name not in UNSCALED_ATTRIBUTES:
            value = clamp_rating(value)
        setattr(category, name, int(value))

    def names(self) -> list[str]:
        """All attribute names across categories."""
        return [n for names in _FIELD_NAMES.values() for n in names]

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> PlayerAttributes:
        """Build from nested dicts; missing categories or names keep their defaults."""
        return cls(
            physical=PhysicalAttributes(**data.get("physical", {})),
            mental=MentalAttributes(**data.get("mental", {})),
            technical=TechnicalAttributes(**data.get("technical", {})),
        )

    @classmethod
    def from_flat(cls, **values: int) -> PlayerAttributes:
        """Build from flat keyword values, e.g. from_flat(strength=95, blocking=90)."""
        attrs = cls()
        for name, value in values.items():
            attrs.set(name, value)
        return attrs


_FIELD_NAMES: dict[type, tuple[str, ...]] = {
    cls: tuple(f.name for f in fields(cls))
    for cls in (PhysicalAttributes, MentalAttributes, TechnicalAttributes)
}
