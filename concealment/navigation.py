"""Walkable-area queries: snapping onto walkable ground and path costs.

A ``NavArea`` is a flat walkable floor at a fixed elevation: an outer
boundary polygon with obstacle polygons cut out of it, all in the x/z
ground plane. The geometry itself is handled by shapely; this module adds
the three capabilities the selector consumes:

  * ``snap`` (and the ``navigability`` adapter): the nearest walkable
    position within a snap tolerance, or None. Tolerance is measured in
    3D, so a point far above or below the floor does not snap either.
  * ``find_path``: shortest route between two walkable positions. Shortest
    paths through a polygonal domain only bend at polygon corners, so the
    search runs Dijkstra over a visibility graph whose nodes are the
    walkable area's corners plus the two endpoints. Two nodes are linked
    when the straight segment between them stays inside the walkable area.
  * ``path_cost_from``: route length from a fixed start, ``inf`` when the
    goal is in a part of the floor the start cannot reach.

The corner-to-corner links don't depend on the query, so they are built
once, on the first path search, and reused.
"""

from __future__ import annotations

import heapq
import math
from collections.abc import Sequence

from shapely.geometry import LineString, MultiPolygon, Polygon
from shapely.geometry import Point as ShapelyPoint
from shapely.ops import nearest_points, unary_union
from shapely.prepared import prep

from .selector import Navigability, PathCost
from .types import Point3

Ring = Sequence[tuple[float, float]]

# Lines running along the boundary must still count as inside.
_COVER_EPS = 1e-7


def path_length(corners: Sequence[Point3]) -> float:
    """Cumulative straight-line length through ``corners``."""
    total = 0.0
    for a, b in zip(corners, corners[1:]):
        total += a.distance_to(b)
    return total


def _rings(geom: Polygon | MultiPolygon) -> list[Ring]:
    polys = list(geom.geoms) if isinstance(geom, MultiPolygon) else [geom]
    rings: list[Ring] = []
    for poly in polys:
        if poly.is_empty:
            continue
        rings.append(list(poly.exterior.coords)[:-1])
        for interior in poly.interiors:
            rings.append(list(interior.coords)[:-1])
    return rings


class NavArea:
    def __init__(
        self,
        bounds: Ring,
        obstacles: Sequence[Ring] = (),
        elevation: float = 0.0,
    ) -> None:
        outer = Polygon(bounds)
        if outer.is_empty or not outer.is_valid or outer.area <= 0:
            raise ValueError("Walkable bounds must be a valid polygon")
        self._bounds: list[tuple[float, float]] = [
            (float(x), float(z)) for x, z in bounds
        ]
        self._obstacles: list[list[tuple[float, float]]] = [
            [(float(x), float(z)) for x, z in ring] for ring in obstacles
        ]
        walkable = outer
        if self._obstacles:
            blocked = unary_union([Polygon(r) for r in self._obstacles])
            walkable = outer.difference(blocked)
        if walkable.is_empty:
            raise ValueError("Obstacles cover the entire walkable area")
        self._walkable = walkable
        self._cover = prep(walkable.buffer(_COVER_EPS))
        self.elevation = float(elevation)
        self._corners: list[tuple[float, float]] = [
            (x, z) for ring in _rings(walkable) for x, z in ring
        ]
        self._corner_links: list[list[int]] | None = None

    @property
    def walkable(self) -> Polygon | MultiPolygon:
        return self._walkable

    @property
    def obstacles(self) -> list[list[tuple[float, float]]]:
        return self._obstacles

    @staticmethod
    def from_dict(d: dict) -> NavArea:
        return NavArea(
            bounds=[tuple(p) for p in d["bounds"]],
            obstacles=[
                [tuple(p) for p in ring] for ring in d.get("obstacles", [])
            ],
            elevation=d.get("elevation", 0.0),
        )

    def to_dict(self) -> dict:
        return {
            "bounds": [list(p) for p in self._bounds],
            "obstacles": [
                [list(p) for p in ring] for ring in self._obstacles
            ],
            "elevation": self.elevation,
        }

    def contains(self, x: float, z: float) -> bool:
        return self._cover.covers(ShapelyPoint(x, z))

    def snap(self, point: Point3, tolerance: float) -> Point3 | None:
        """Nearest walkable position within ``tolerance`` of ``point``."""
        rise = abs(point.y - self.elevation)
        if rise > tolerance:
            return None
        if self.contains(point.x, point.z):
            return Point3(point.x, self.elevation, point.z)

        p = ShapelyPoint(point.x, point.z)
        across = self._walkable.distance(p)
        if math.hypot(across, rise) > tolerance:
            return None
        nearest, _ = nearest_points(self._walkable, p)
        return Point3(nearest.x, self.elevation, nearest.y)

    def navigability(self, tolerance: float) -> Navigability:
        def is_navigable(point: Point3) -> Point3 | None:
            return self.snap(point, tolerance)

        return is_navigable

    def _sees(self, a: tuple[float, float], b: tuple[float, float]) -> bool:
        if a == b:
            return True
        return self._cover.covers(LineString([a, b]))

    def _links(self) -> list[list[int]]:
        if self._corner_links is None:
            n = len(self._corners)
            links: list[list[int]] = [[] for _ in range(n)]
            for i in range(n):
                for j in range(i + 1, n):
                    if self._sees(self._corners[i], self._corners[j]):
                        links[i].append(j)
                        links[j].append(i)
            self._corner_links = links
        return self._corner_links

    def find_path(self, start: Point3, goal: Point3) -> list[Point3] | None:
        """Shortest walkable route from ``start`` to ``goal`` as corners.

        Both endpoints must already be on walkable ground (see ``snap``).
        Returns None when no route exists.
        """
        s = start.ground()
        g = goal.ground()
        if not (self.contains(*s) and self.contains(*g)):
            return None
        if self._sees(s, g):
            return [start, goal]

        links = self._links()
        corners = self._corners
        n = len(corners)
        # Node ids: corners are 0..n-1, start is n, goal is n + 1.
        start_id = n
        goal_id = n + 1
        from_start = [i for i in range(n) if self._sees(s, corners[i])]
        to_goal = {i for i in range(n) if self._sees(corners[i], g)}
        if not from_start or not to_goal:
            return None

        def position(i: int) -> tuple[float, float]:
            if i == start_id:
                return s
            if i == goal_id:
                return g
            return corners[i]

        dist: dict[int, float] = {start_id: 0.0}
        prev: dict[int, int] = {}
        heap: list[tuple[float, int]] = [(0.0, start_id)]
        while heap:
            d, i = heapq.heappop(heap)
            if i == goal_id:
                break
            if d > dist.get(i, math.inf):
                continue
            if i == start_id:
                neighbours = from_start
            else:
                neighbours = list(links[i])
                if i in to_goal:
                    neighbours.append(goal_id)
            pi = position(i)
            for j in neighbours:
                pj = position(j)
                nd = d + math.hypot(pj[0] - pi[0], pj[1] - pi[1])
                if nd < dist.get(j, math.inf):
                    dist[j] = nd
                    prev[j] = i
                    heapq.heappush(heap, (nd, j))

        if goal_id not in dist:
            return None

        route: list[Point3] = [goal]
        i = prev[goal_id]
        while i != start_id:
            x, z = corners[i]
            route.append(Point3(x, self.elevation, z))
            i = prev[i]
        route.append(start)
        route.reverse()
        return route

    def path_cost_from(
        self, start: Point3, snap_tolerance: float = 0.0
    ) -> PathCost:
        """Route length from ``start`` to a goal; ``inf`` if unreachable."""
        origin = self.snap(start, snap_tolerance)

        def path_cost(goal: Point3) -> float:
            if origin is None:
                return math.inf
            route = self.find_path(origin, goal)
            if route is None:
                return math.inf
            return path_length(route)

        return path_cost
