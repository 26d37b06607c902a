"""Route tree.

Route paths are waypoints relative to the receiver's alignment. Positive
dx points toward the receiver's own sideline, so the same route reads
correctly from either side of the ball; `absolute_path` does the
mirroring.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sandlot.core.enums import RouteDepth
from sandlot.core.field import CENTER_X
from sandlot.core.vec2 import Vec2

Waypoints = tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class Route:
    """A receiver pattern."""
    name: str
    path: Waypoints
    zones: tuple[str, ...]  # zone families the route attacks
    base_yards: tuple[int, int]
    development_ticks: int  # ticks until the route is fully run
    depth: RouteDepth

    @property
    def is_deep(self) -> bool:
        return self.depth == RouteDepth.DEEP

    def progress(self, tick: int) -> float:
        """Fraction of the route developed at a tick (0-1)."""
        if self.development_ticks <= 0:
            return 1.0
        return min(1.0, tick / self.development_ticks)


def _route(name, path, zones, base_yards, ticks, depth) -> Route:
    return Route(name, tuple(path), tuple(zones), base_yards, ticks, depth)


S, M, D, B = RouteDepth.SHORT, RouteDepth.MEDIUM, RouteDepth.DEEP, RouteDepth.BACKFIELD

ROUTE_TREE: dict[str, Route] = {r.name: r for r in (
    # Short / quick
    _route("Flat", [(3, 1), (8, 1.5)], ["flat"], (2, 6), 4, S),
    _route("Slant", [(1, 2), (-5, 6)], ["hook", "short"], (4, 9), 5, S),
    _route("QuickOut", [(0, 4), (5, 4)], ["flat"], (3, 7), 5, S),
    _route("Hitch", [(0, 6), (0, 4)], ["hook", "flat"], (4, 7), 6, S),
    _route("Drag", [(1, 2), (-8, 3), (-18, 3.5)], ["short", "hook"], (3, 8), 6, S),
    _route("Whip", [(0, 4), (-2, 4), (4, 4)], ["short", "flat"], (3, 6), 6, S),
    _route("Bubble", [(4, -1), (8, 0)], ["flat"], (0, 5), 3, S),
    # Medium
    _route("Out", [(0, 10), (8, 10)], ["flat", "hook"], (8, 12), 9, M),
    _route("In", [(0, 10), (-8, 10)], ["hook", "short"], (8, 13), 9, M),
    _route("Curl", [(0, 12), (0, 12.5), (-1, 10)], ["hook"], (9, 13), 10, M),
    _route("Comeback", [(0, 15), (2, 15.5), (6, 12)], ["flat", "hook"], (11, 15), 12, M),
    # Deep
    _route("Corner", [(0, 10), (8, 25)], ["deep", "flat"], (14, 25), 14, D),
    _route("Post", [(0, 10), (-6, 25)], ["deep", "hook"], (14, 25), 14, D),
    _route("Fly", [(0, 40)], ["deep"], (20, 40), 16, D),
    _route("Seam", [(0, 40)], ["deep", "short"], (15, 35), 15, D),
    _route("Fade", [(1, 10), (3, 35)], ["deep"], (15, 35), 15, D),
    _route("PostCorner", [(0, 10), (-2, 14), (6, 25)], ["deep"], (18, 30), 17, D),
    _route("Sluggo", [(1, 2), (-3, 5), (-3, 25)], ["deep"], (18, 30), 17, D),
    _route("Wheel", [(4, 1), (6, 8), (6, 25)], ["flat", "deep"], (8, 25), 14, D),
    # Backfield
    _route("Angle", [(3, 2), (-2, 6)], ["short", "hook"], (4, 8), 6, B),
    _route("Screen", [(-2, -1), (-4, -0.5)], ["flat"], (0, 6), 4, B),
    _route("CheckRelease", [(0, 1), (2, 1), (3, 4)], ["flat"], (2, 5), 6, B),
)}

# Paths for assignments that are not pass patterns
ASSIGNMENT_PATHS: dict[str, Waypoints] = {
    "run_block": ((0, 1.5),),
    "pass_block": ((0, -1.0),),
    "run_inside": ((0, 5),),
    "run_outside": ((6, 4),),
    "run_counter": ((-2, -0.5), (4, 4)),
    "qb_sneak": ((0, 2),),
}


def get_route(name: str) -> Optional[Route]:
    return ROUTE_TREE.get(name)


def absolute_path(path: Waypoints, start: Vec2) -> list[Vec2]:
    """Convert relative waypoints to field coordinates, mirroring left-side starts."""
    mirror = -1.0 if start.x < CENTER_X else 1.0
    return [Vec2(start.x + dx * mirror, start.y + dy) for dx, dy in path]
