"""A concrete world to search: floor, obstacles, observer and agent.

``Scenario`` is the JSON-configurable wiring between the pure selector and
the reference implementations of its capabilities:

  * samples are mapped through the agent's pose (``pose_mapper``);
  * ``NavArea.navigability`` snaps them onto the floor;
  * ``Observer.can_see`` rejects visible ones, with every obstacle edge
    acting as an occluder;
  * ``NavArea.path_cost_from`` prices the rest from the agent's position.

JSON shape (all distances in world units)::

    {
      "name": "courtyard",
      "nav": {"bounds": [[x, z], ...], "obstacles": [[[x, z], ...], ...],
              "elevation": 0.0},
      "observer": {"x": 0, "y": 0, "z": -8, "yaw_deg": 0,
                   "fov_deg": 90, "max_distance": 20},
      "agent": {"x": 0, "y": 0, "z": 0, "yaw_deg": 0},
      "search": {"region_size": 10, "cell_size": 1, "snap_tolerance": 5,
                 "infinite_cost": "rank_last", "seed": 7}
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .navigation import NavArea
from .prng import PCG32, RandomSource
from .selector import find_best_concealment
from .types import Point3, Pose, SearchParams, SearchResult
from .visibility import Observer, occluders_from_polygons


@dataclass(frozen=True)
class SampleTrace:
    """A navigable sample and whether the observer could see it."""

    position: Point3
    visible: bool


@dataclass
class ScenarioOutcome:
    result: SearchResult
    trace: list[SampleTrace] = field(default_factory=list)
    route: list[Point3] | None = None

    def to_dict(self) -> dict:
        d = self.result.to_dict()
        if self.route is not None:
            d["route"] = [p.to_dict() for p in self.route]
        return d


@dataclass
class Scenario:
    nav: NavArea
    observer: Observer
    agent: Pose
    search: SearchParams = field(default_factory=SearchParams)
    name: str | None = None

    @staticmethod
    def from_dict(d: dict) -> Scenario:
        nav = NavArea.from_dict(d["nav"])
        return Scenario(
            nav=nav,
            observer=Observer.from_dict(
                d["observer"], occluders_from_polygons(nav.obstacles)
            ),
            agent=Pose.from_dict(d["agent"]),
            search=SearchParams.from_dict(d.get("search")),
            name=d.get("name"),
        )

    def to_dict(self) -> dict:
        d: dict = {
            "nav": self.nav.to_dict(),
            "observer": self.observer.to_dict(),
            "agent": self.agent.to_dict(),
            "search": self.search.to_dict(),
        }
        if self.name:
            d["name"] = self.name
        return d

    def agent_is_seen(self) -> bool:
        return self.observer.can_see(self.agent.position)

    def find_hiding_spot(
        self, rng: RandomSource | None = None
    ) -> ScenarioOutcome:
        """Search around the agent; seeded from ``search.seed`` if set."""
        s = self.search
        if rng is None and s.seed is not None:
            rng = PCG32(s.seed)

        trace: list[SampleTrace] = []

        def is_visible(point: Point3) -> bool:
            seen = self.observer.can_see(point)
            trace.append(SampleTrace(point, seen))
            return seen

        result = find_best_concealment(
            self.agent,
            s.region_size,
            s.cell_size,
            None,
            self.nav.navigability(s.snap_tolerance),
            is_visible,
            self.nav.path_cost_from(self.agent.position, s.snap_tolerance),
            infinite_cost=s.infinite_cost,
            rng=rng,
            max_samples=s.max_samples,
        )

        route = None
        if result.found and result.position is not None:
            start = self.nav.snap(self.agent.position, s.snap_tolerance)
            if start is not None:
                route = self.nav.find_path(start, result.position)
        return ScenarioOutcome(result=result, trace=trace, route=route)
