"""Choose the cheapest-to-reach position an observer cannot see.

``find_best_concealment`` scatters blue-noise samples over a square search
area centred on the searcher, then runs each sample through the caller's
capabilities in a fixed order:

  1. ``map_to_world`` turns the centred local sample into a world position.
  2. ``is_navigable`` snaps it onto walkable ground, or rejects it.
  3. ``is_visible_to_observer`` rejects anything the observer can see.
  4. ``path_cost`` prices every survivor.

Survivors are ranked by cost with a stable sort, so equal costs keep the
order the sampler emitted them in. Positions with no path (infinite cost)
either rank last or are dropped, depending on ``InfiniteCostPolicy``.

The selector owns nothing between calls: each call builds its own sampler.
An exhausted search is a normal outcome and comes back as a not-found
``SearchResult``; exceptions raised by the capabilities are not caught.
"""

from __future__ import annotations

import logging
import math
from typing import Protocol

from .prng import RandomSource
from .sampler import BlueNoiseSampler
from .types import (
    Candidate,
    InfiniteCostPolicy,
    Point2,
    Point3,
    Pose,
    SearchResult,
)

logger = logging.getLogger(__name__)


class MapToWorld(Protocol):
    def __call__(self, local: Point2) -> Point3:
        """Centred local sample -> world position. Deterministic per call."""
        ...


class Navigability(Protocol):
    def __call__(self, point: Point3) -> Point3 | None:
        """Nearest walkable position within snap tolerance, or None."""
        ...


class VisibilityTest(Protocol):
    def __call__(self, point: Point3) -> bool:
        """True if the observer has a line of sight to ``point``."""
        ...


class PathCost(Protocol):
    def __call__(self, point: Point3) -> float:
        """Route length from the searcher to ``point``; inf if none."""
        ...


def pose_mapper(pose: Pose) -> MapToWorld:
    """Map centred samples into ``pose``'s frame at the pose's elevation.

    Sample x runs along the pose's right axis and sample y along its
    forward axis.
    """

    def map_to_world(local: Point2) -> Point3:
        return pose.transform_point(Point3(local.x, 0.0, local.y))

    return map_to_world


def _normalize_cost(cost: float) -> float:
    cost = float(cost)
    if math.isnan(cost):
        return math.inf
    return cost


def find_best_concealment(
    search_origin: Pose,
    region_size: float,
    cell_size: float,
    map_to_world: MapToWorld | None,
    is_navigable: Navigability,
    is_visible_to_observer: VisibilityTest,
    path_cost: PathCost,
    *,
    infinite_cost: InfiniteCostPolicy = InfiniteCostPolicy.RANK_LAST,
    rng: RandomSource | None = None,
    max_samples: int | None = None,
) -> SearchResult:
    """Return the lowest-cost hidden, navigable position near the searcher.

    The search area is centred on ``search_origin``: with ``map_to_world``
    left as None, samples go through ``pose_mapper(search_origin)``;
    otherwise the caller's mapping decides where they land. Samples span
    ``[-region_size / 2, region_size / 2]`` on both local axes and are at
    least ``cell_size`` apart.

    ``max_samples`` bounds how many samples are pulled from the sampler.

    Raises ``InvalidArgument`` if region_size or cell_size is unusable.
    """
    sampler = BlueNoiseSampler(region_size, region_size, cell_size, rng=rng)
    half = region_size / 2.0

    if map_to_world is None:
        map_to_world = pose_mapper(search_origin)

    hidden: list[tuple[int, Point3]] = []
    drawn = 0
    unnavigable = 0
    visible = 0

    while max_samples is None or drawn < max_samples:
        sample = sampler.try_next()
        if sample is None:
            break
        order = drawn
        drawn += 1

        local = Point2(sample.x - half, sample.y - half)
        snapped = is_navigable(map_to_world(local))
        if snapped is None:
            unnavigable += 1
            continue

        if is_visible_to_observer(snapped):
            visible += 1
            continue

        hidden.append((order, snapped))

    candidates = [
        Candidate(
            position=p, path_cost=_normalize_cost(path_cost(p)), order=o
        )
        for o, p in hidden
    ]
    if infinite_cost is InfiniteCostPolicy.EXCLUDE:
        candidates = [c for c in candidates if math.isfinite(c.path_cost)]

    # Stable: ties stay in emission order.
    candidates.sort(key=lambda c: c.path_cost)

    logger.debug(
        "concealment search around (%.2f, %.2f, %.2f): %d samples, "
        "%d unnavigable, %d visible, %d candidates",
        search_origin.position.x,
        search_origin.position.y,
        search_origin.position.z,
        drawn,
        unnavigable,
        visible,
        len(candidates),
    )

    if not candidates:
        return SearchResult.not_found(
            samples_drawn=drawn,
            rejected_unnavigable=unnavigable,
            rejected_visible=visible,
        )

    best = candidates[0]
    return SearchResult(
        found=True,
        position=best.position,
        path_cost=best.path_cost,
        candidates=tuple(candidates),
        samples_drawn=drawn,
        rejected_unnavigable=unnavigable,
        rejected_visible=visible,
    )
