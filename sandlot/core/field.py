"""Field geometry and coverage/run zones.

The field is 120 yards long including both 10-yard end zones. Game code
talks about `ball_on` (0-100, own goal line to opponent goal line); field
coordinates add the end zone, so the line of scrimmage sits at
`ball_on + END_ZONE_DEPTH`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sandlot.core.vec2 import Vec2

FIELD_LENGTH = 120.0
FIELD_WIDTH = 53.3
END_ZONE_DEPTH = 10.0
CENTER_X = FIELD_WIDTH / 2
HASH_LEFT_X = 18.0
HASH_RIGHT_X = 35.3

# Opponent goal line in field coordinates
GOAL_LINE_Y = FIELD_LENGTH - END_ZONE_DEPTH

# Keep entities a hair inside the boundary lines
FIELD_MARGIN = 0.5


def line_of_scrimmage(ball_on: float) -> float:
    """Convert a 0-100 yard line into a field y coordinate."""
    return ball_on + END_ZONE_DEPTH


def clamp_to_field(point: Vec2) -> Vec2:
    return point.clamped(
        FIELD_MARGIN, FIELD_WIDTH - FIELD_MARGIN,
        FIELD_MARGIN, FIELD_LENGTH - FIELD_MARGIN,
    )


@dataclass(frozen=True)
class Zone:
    """
    A coverage area (box relative to the LOS) or a run fit (point offset
    from the snap).
    """
    name: str
    min_x: Optional[float] = None
    max_x: Optional[float] = None
    min_y: Optional[float] = None
    max_y: Optional[float] = None
    x_offset: Optional[float] = None
    y_offset: Optional[float] = None

    @property
    def is_point(self) -> bool:
        return self.x_offset is not None

    @property
    def is_deep(self) -> bool:
        return self.name.startswith("zone_deep")

    def center(self, los: float) -> Vec2:
        """Absolute center of the zone (or the run-fit point)."""
        if self.is_point:
            return Vec2(CENTER_X + self.x_offset, los + (self.y_offset or 0.0))
        cx = (self.min_x + self.max_x) / 2 if self.min_x is not None else CENTER_X
        cy = (self.min_y + self.max_y) / 2 if self.min_y is not None else 7.0
        return Vec2(cx, los + cy)

    def contains(self, point: Vec2, los: float) -> bool:
        if self.is_point:
            return point.distance_to(self.center(los)) <= 2.0
        rel_y = point.y - los
        within_x = (self.min_x is None or point.x >= self.min_x) and (
            self.max_x is None or point.x <= self.max_x
        )
        within_y = (self.min_y is None or rel_y >= self.min_y) and (
            self.max_y is None or rel_y <= self.max_y
        )
        return within_x and within_y


def _box(name: str, min_x: float, max_x: float, min_y: float, max_y: float) -> Zone:
    return Zone(name, min_x=min_x, max_x=max_x, min_y=min_y, max_y=max_y)


def _point(name: str, dx: float, dy: float) -> Zone:
    return Zone(name, x_offset=dx, y_offset=dy)


ZONES: dict[str, Zone] = {z.name: z for z in (
    _box("zone_deep_half_left", 0, CENTER_X, 15, 60),
    _box("zone_deep_half_right", CENTER_X, FIELD_WIDTH, 15, 60),
    _box("zone_deep_middle", HASH_LEFT_X - 2, HASH_RIGHT_X + 2, 15, 60),
    _box("zone_deep_third_left", 0, HASH_LEFT_X, 15, 60),
    _box("zone_deep_third_right", HASH_RIGHT_X, FIELD_WIDTH, 15, 60),
    _box("zone_flat_left", 0, HASH_LEFT_X - 3, -2, 8),
    _box("zone_flat_right", HASH_RIGHT_X + 3, FIELD_WIDTH, -2, 8),
    _box("zone_flat_left_hard", 0, HASH_LEFT_X - 3, -2, 5),
    _box("zone_flat_right_hard", HASH_RIGHT_X + 3, FIELD_WIDTH, -2, 5),
    _box("zone_hook_left", HASH_LEFT_X - 3, CENTER_X - 2, 5, 14),
    _box("zone_hook_right", CENTER_X + 2, HASH_RIGHT_X + 3, 5, 14),
    _box("zone_hook_curl_left", HASH_LEFT_X - 3, CENTER_X - 2, 5, 14),
    _box("zone_hook_curl_right", CENTER_X + 2, HASH_RIGHT_X + 3, 5, 14),
    _box("zone_hook_curl_middle", CENTER_X - 5, CENTER_X + 5, 5, 14),
    _box("zone_short_middle", CENTER_X - 7, CENTER_X + 7, 0, 12),
    _point("run_gap_A_left", -2, 0.5),
    _point("run_gap_A_right", 2, 0.5),
    _point("run_gap_B_left", -5, 0.5),
    _point("run_gap_B_right", 5, 0.5),
    _point("run_edge_left", -10, 1.0),
    _point("run_edge_right", 10, 1.0),
    _point("run_support", 0, 6.0),
)}


def get_zone(name: str) -> Optional[Zone]:
    return ZONES.get(name)


def zone_family(name: str) -> str:
    """Coarse family of a zone name: deep, flat, hook, short or run."""
    if name.startswith("zone_deep"):
        return "deep"
    if name.startswith("zone_flat"):
        return "flat"
    if name.startswith("zone_hook"):
        return "hook"
    if name.startswith("zone_short"):
        return "short"
    return "run"
