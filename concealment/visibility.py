"""Observer line-of-sight tests.

An observer sees a point when all three hold:

  * the point is inside the view arc: the angle between the observer's
    forward direction and the direction to the point is less than half of
    ``fov_deg`` (a 360 degree arc sees everything around it);
  * the point is no farther than ``max_distance``;
  * no occluder segment crosses the sight line.

Occlusion is tested in the x/z ground plane against 2D segments
(x1, z1, x2, z2); heights are ignored, so an occluder is a wall of
unlimited height. A segment that the target point itself lies on does not
hide it, which keeps positions snapped onto an obstacle's far edge hidden
and positions on its near edge visible.

``Observer.can_see`` is the scalar test the selector calls once per
candidate. ``Observer.visible_mask`` answers the same question for a whole
array of points at once using NumPy broadcasting (points x segments) and is
what the renderer uses to shade the observer's coverage.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from .types import Point3, Pose

Segment = tuple[float, float, float, float]  # (x1, z1, x2, z2)

# Hits this close to the target end of the sight line don't count.
_END_EPS = 1e-9


def _ray_segment_intersection(
    ox: float,
    oz: float,
    dx: float,
    dz: float,
    x1: float,
    z1: float,
    x2: float,
    z2: float,
) -> float | None:
    """Find t where ray (ox+t*dx, oz+t*dz) hits segment (x1,z1)-(x2,z2).

    Returns t >= 0 if hit, None if miss or parallel.
    """
    sx = x2 - x1
    sz = z2 - z1
    denom = dx * sz - dz * sx
    if abs(denom) < 1e-12:
        return None

    t = ((x1 - ox) * sz - (z1 - oz) * sx) / denom
    u = ((x1 - ox) * dz - (z1 - oz) * dx) / denom

    if t >= 0 and 0 <= u <= 1:
        return t
    return None


def occluders_from_polygons(
    polygons: Iterable[Sequence[tuple[float, float]]],
) -> list[Segment]:
    """Closed-ring edges of each (x, z) polygon as occluder segments."""
    segments: list[Segment] = []
    for ring in polygons:
        n = len(ring)
        if n < 2:
            continue
        for i in range(n):
            j = (i + 1) % n
            x1, z1 = ring[i]
            x2, z2 = ring[j]
            if (x1, z1) == (x2, z2):
                continue
            segments.append((x1, z1, x2, z2))
    return segments


@dataclass
class Observer:
    position: Point3
    yaw_deg: float = 0.0
    fov_deg: float = 45.0
    max_distance: float = 10.0
    occluders: tuple[Segment, ...] = ()

    def __post_init__(self) -> None:
        if not 0.0 < self.fov_deg <= 360.0:
            raise ValueError(
                f"fov_deg must be in (0, 360], got {self.fov_deg!r}"
            )
        if not self.max_distance > 0.0:
            raise ValueError(
                f"max_distance must be positive, got {self.max_distance!r}"
            )
        self.occluders = tuple(self.occluders)

    @property
    def pose(self) -> Pose:
        return Pose(self.position, self.yaw_deg)

    @staticmethod
    def from_dict(d: dict, occluders: Iterable[Segment] = ()) -> Observer:
        return Observer(
            position=Point3.from_dict(d),
            yaw_deg=d.get("yaw_deg", 0.0),
            fov_deg=d.get("fov_deg", 45.0),
            max_distance=d.get("max_distance", 10.0),
            occluders=tuple(occluders),
        )

    def to_dict(self) -> dict:
        d = self.position.to_dict()
        d["yaw_deg"] = self.yaw_deg
        d["fov_deg"] = self.fov_deg
        d["max_distance"] = self.max_distance
        return d

    def _in_arc(self, direction: Point3, distance: float) -> bool:
        if self.fov_deg >= 360.0:
            return True
        cos_a = direction.dot(self.pose.forward) / distance
        angle = math.degrees(math.acos(max(-1.0, min(1.0, cos_a))))
        return angle < self.fov_deg / 2.0

    def is_occluded(self, point: Point3) -> bool:
        ox, oz = self.position.ground()
        dx = point.x - ox
        dz = point.z - oz
        for x1, z1, x2, z2 in self.occluders:
            t = _ray_segment_intersection(ox, oz, dx, dz, x1, z1, x2, z2)
            if t is not None and t < 1.0 - _END_EPS:
                return True
        return False

    def can_see(self, point: Point3) -> bool:
        direction = point - self.position
        distance = direction.length()
        if distance < 1e-12:
            return True
        if distance > self.max_distance:
            return False
        if not self._in_arc(direction, distance):
            return False
        return not self.is_occluded(point)

    def visible_mask(self, points: np.ndarray) -> np.ndarray:
        """Vectorized ``can_see`` over an (N, 3) array of x, y, z points."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        origin = np.array(
            [self.position.x, self.position.y, self.position.z],
            dtype=np.float64,
        )
        d = pts - origin  # (N, 3)
        dist = np.sqrt(np.einsum("ij,ij->i", d, d))  # (N,)
        at_eye = dist < 1e-12

        visible = dist <= self.max_distance
        if self.fov_deg < 360.0:
            fwd = self.pose.forward
            fwd_arr = np.array([fwd.x, fwd.y, fwd.z], dtype=np.float64)
            safe_dist = np.where(at_eye, 1.0, dist)
            cos_a = np.clip(d @ fwd_arr / safe_dist, -1.0, 1.0)
            visible &= np.degrees(np.arccos(cos_a)) < self.fov_deg / 2.0

        if self.occluders:
            segs = np.array(self.occluders, dtype=np.float64)  # (S, 4)
            ox, oz = self.position.x, self.position.z
            dx = d[:, 0:1]  # (N, 1)
            dz = d[:, 2:3]
            sx = (segs[:, 2] - segs[:, 0])[np.newaxis, :]  # (1, S)
            sz = (segs[:, 3] - segs[:, 1])[np.newaxis, :]
            rel_x = (segs[:, 0] - ox)[np.newaxis, :]
            rel_z = (segs[:, 1] - oz)[np.newaxis, :]

            denom = dx * sz - dz * sx  # (N, S)
            non_parallel = np.abs(denom) >= 1e-12
            safe_denom = np.where(non_parallel, denom, 1.0)
            t = (rel_x * sz - rel_z * sx) / safe_denom
            u = (rel_x * dz - rel_z * dx) / safe_denom
            hits = (
                non_parallel
                & (t >= 0.0)
                & (t < 1.0 - _END_EPS)
                & (u >= 0.0)
                & (u <= 1.0)
            )
            visible &= ~hits.any(axis=1)

        return visible | at_eye
