"""Periodic "break line of sight" controller for an agent being watched.

The agent re-evaluates on a fixed schedule. Each update that is due:

  * if the observer cannot see the agent, nothing changes and the next
    check is ``poll_interval`` later;
  * if it can, a concealment search runs around the agent's current pose.
    A hit becomes the new destination (next check after ``poll_interval``);
    a miss keeps the old destination and backs off for ``retry_delay``
    before searching again.

Updates that arrive before the next check is due return immediately. Time
is supplied by the caller, so the controller never sleeps or spawns work
of its own; every search is independent of the previous one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .navigation import NavArea
from .prng import RandomSource
from .selector import find_best_concealment
from .types import InfiniteCostPolicy, Point3, Pose, SearchResult
from .visibility import Observer

logger = logging.getLogger(__name__)


@dataclass
class AvoiderParams:
    search_area_size: float = 10.0
    search_cell_size: float = 1.0
    poll_interval: float = 0.1
    retry_delay: float = 1.0
    snap_tolerance: float = 5.0
    infinite_cost: InfiniteCostPolicy = InfiniteCostPolicy.RANK_LAST

    def __post_init__(self) -> None:
        if self.poll_interval <= 0 or self.retry_delay <= 0:
            raise ValueError("poll_interval and retry_delay must be positive")

    @staticmethod
    def from_dict(d: dict | None) -> AvoiderParams:
        if not d:
            return AvoiderParams()
        return AvoiderParams(
            search_area_size=d.get("search_area_size", 10.0),
            search_cell_size=d.get("search_cell_size", 1.0),
            poll_interval=d.get("poll_interval", 0.1),
            retry_delay=d.get("retry_delay", 1.0),
            snap_tolerance=d.get("snap_tolerance", 5.0),
            infinite_cost=InfiniteCostPolicy(
                d.get("infinite_cost", InfiniteCostPolicy.RANK_LAST.value)
            ),
        )


@dataclass(frozen=True)
class AvoiderDecision:
    destination: Point3 | None
    next_update: float
    searched: bool = False
    result: SearchResult | None = None


class Avoider:
    def __init__(
        self,
        params: AvoiderParams,
        observer: Observer,
        nav: NavArea,
        rng: RandomSource | None = None,
    ) -> None:
        self.params = params
        self.observer = observer
        self.nav = nav
        self._rng = rng
        self.destination: Point3 | None = None
        self.next_update = 0.0

    def _search(self, pose: Pose) -> SearchResult:
        p = self.params
        return find_best_concealment(
            pose,
            p.search_area_size,
            p.search_cell_size,
            None,
            self.nav.navigability(p.snap_tolerance),
            self.observer.can_see,
            self.nav.path_cost_from(pose.position, p.snap_tolerance),
            infinite_cost=p.infinite_cost,
            rng=self._rng,
        )

    def update(self, now: float, pose: Pose) -> AvoiderDecision:
        if now < self.next_update:
            return AvoiderDecision(self.destination, self.next_update)

        if not self.observer.can_see(pose.position):
            self.next_update = now + self.params.poll_interval
            return AvoiderDecision(self.destination, self.next_update)

        result = self._search(pose)
        if result.found:
            self.destination = result.position
            self.next_update = now + self.params.poll_interval
            logger.info(
                "agent at (%.2f, %.2f) is seen; hiding at (%.2f, %.2f), "
                "path %.2f",
                pose.position.x,
                pose.position.z,
                result.position.x,
                result.position.z,
                result.path_cost,
            )
        else:
            self.next_update = now + self.params.retry_delay
            logger.info(
                "agent at (%.2f, %.2f) is seen and has nowhere to hide; "
                "retrying in %.2fs",
                pose.position.x,
                pose.position.z,
                self.params.retry_delay,
            )
        return AvoiderDecision(
            self.destination, self.next_update, searched=True, result=result
        )
