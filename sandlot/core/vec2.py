"""2D vector used for every field position.

Coordinates are absolute field coordinates in yards:
    x = across the field, 0 at the left sideline, FIELD_WIDTH at the right
    y = along the field, 0 at the back of the offense's end zone,
        FIELD_LENGTH at the back of the opponent's end zone
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vec2:
    """Immutable 2D vector (yards)."""
    x: float = 0.0
    y: float = 0.0

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar: float) -> Vec2:
        if scalar == 0:
            return Vec2(0, 0)
        return Vec2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    # =========================================================================
    # Geometry
    # =========================================================================

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vec2:
        """Unit vector in same direction (zero vector stays zero)."""
        length = self.length()
        if length < 0.0001:
            return Vec2(0, 0)
        return Vec2(self.x / length, self.y / length)

    def distance_to(self, other: Vec2) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def lerp(self, other: Vec2, t: float) -> Vec2:
        """Linear interpolation to another vector."""
        return Vec2(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t
        )

    def move_toward(self, target: Vec2, step: float) -> Vec2:
        """Step toward target by at most `step` yards, landing exactly on it if close."""
        delta = target - self
        distance = delta.length()
        if distance <= step or distance < 0.0001:
            return target
        return self + delta * (step / distance)

    def clamped(self, min_x: float, max_x: float, min_y: float, max_y: float) -> Vec2:
        return Vec2(min(max(self.x, min_x), max_x), min(max(self.y, min_y), max_y))

    def __repr__(self) -> str:
        return f"Vec2({self.x:.2f}, {self.y:.2f})"
