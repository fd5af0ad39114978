"""Data types shared by the sampler, the selector and the scenario layer."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass


class InvalidArgument(ValueError):
    """A sampler or search was configured with an unusable value."""


@dataclass(frozen=True)
class Point2:
    x: float
    y: float

    def __add__(self, other: Point2) -> Point2:
        return Point2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point2) -> Point2:
        return Point2(self.x - other.x, self.y - other.y)

    def distance_squared_to(self, other: Point2) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def distance_to(self, other: Point2) -> float:
        return math.sqrt(self.distance_squared_to(other))


@dataclass(frozen=True)
class Point3:
    """World-space position. ``y`` is up; the ground plane is x/z."""

    x: float
    y: float
    z: float

    def __add__(self, other: Point3) -> Point3:
        return Point3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Point3) -> Point3:
        return Point3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scaled(self, factor: float) -> Point3:
        return Point3(self.x * factor, self.y * factor, self.z * factor)

    def dot(self, other: Point3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def distance_to(self, other: Point3) -> float:
        return (self - other).length()

    def ground(self) -> tuple[float, float]:
        """Projection onto the x/z ground plane."""
        return (self.x, self.z)

    @staticmethod
    def from_dict(d: dict) -> Point3:
        return Point3(x=d.get("x", 0.0), y=d.get("y", 0.0), z=d.get("z", 0.0))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class SamplingRegion:
    width: float
    height: float

    def contains(self, p: Point2) -> bool:
        """Half-open on the far edges: [0, width) x [0, height)."""
        return 0.0 <= p.x < self.width and 0.0 <= p.y < self.height


@dataclass(frozen=True)
class Pose:
    """Position plus heading about the up axis.

    Yaw 0 faces +z; positive yaw turns towards +x.
    """

    position: Point3
    yaw_deg: float = 0.0

    @property
    def forward(self) -> Point3:
        a = math.radians(self.yaw_deg)
        return Point3(math.sin(a), 0.0, math.cos(a))

    @property
    def right(self) -> Point3:
        a = math.radians(self.yaw_deg)
        return Point3(math.cos(a), 0.0, -math.sin(a))

    def transform_point(self, local: Point3) -> Point3:
        """Map a point from this pose's local frame into world space."""
        fwd = self.forward
        right = self.right
        return Point3(
            self.position.x + right.x * local.x + fwd.x * local.z,
            self.position.y + local.y,
            self.position.z + right.z * local.x + fwd.z * local.z,
        )

    @staticmethod
    def from_dict(d: dict) -> Pose:
        return Pose(
            position=Point3.from_dict(d),
            yaw_deg=d.get("yaw_deg", 0.0),
        )

    def to_dict(self) -> dict:
        d = self.position.to_dict()
        d["yaw_deg"] = self.yaw_deg
        return d


class InfiniteCostPolicy(enum.Enum):
    """What to do with candidates that are navigable but have no path."""

    RANK_LAST = "rank_last"
    EXCLUDE = "exclude"


@dataclass(frozen=True)
class Candidate:
    position: Point3
    path_cost: float
    order: int  # emission index of the sample it came from


@dataclass(frozen=True)
class SearchResult:
    found: bool
    position: Point3 | None = None
    path_cost: float = math.inf
    candidates: tuple[Candidate, ...] = ()
    samples_drawn: int = 0
    rejected_unnavigable: int = 0
    rejected_visible: int = 0

    def __bool__(self) -> bool:
        return self.found

    @staticmethod
    def not_found(
        samples_drawn: int = 0,
        rejected_unnavigable: int = 0,
        rejected_visible: int = 0,
        candidates: tuple[Candidate, ...] = (),
    ) -> SearchResult:
        return SearchResult(
            found=False,
            candidates=candidates,
            samples_drawn=samples_drawn,
            rejected_unnavigable=rejected_unnavigable,
            rejected_visible=rejected_visible,
        )

    def to_dict(self) -> dict:
        d: dict = {
            "found": self.found,
            "samples_drawn": self.samples_drawn,
            "rejected_unnavigable": self.rejected_unnavigable,
            "rejected_visible": self.rejected_visible,
            "candidate_count": len(self.candidates),
        }
        if self.found and self.position is not None:
            d["position"] = self.position.to_dict()
            d["path_cost"] = (
                self.path_cost if math.isfinite(self.path_cost) else None
            )
        return d


@dataclass
class SearchParams:
    region_size: float = 10.0
    cell_size: float = 1.0
    snap_tolerance: float = 5.0
    infinite_cost: InfiniteCostPolicy = InfiniteCostPolicy.RANK_LAST
    seed: int | None = None
    max_samples: int | None = None

    @staticmethod
    def from_dict(d: dict | None) -> SearchParams:
        if not d:
            return SearchParams()
        return SearchParams(
            region_size=d.get("region_size", 10.0),
            cell_size=d.get("cell_size", 1.0),
            snap_tolerance=d.get("snap_tolerance", 5.0),
            infinite_cost=InfiniteCostPolicy(
                d.get("infinite_cost", InfiniteCostPolicy.RANK_LAST.value)
            ),
            seed=d.get("seed"),
            max_samples=d.get("max_samples"),
        )

    def to_dict(self) -> dict:
        d: dict = {
            "region_size": self.region_size,
            "cell_size": self.cell_size,
            "snap_tolerance": self.snap_tolerance,
            "infinite_cost": self.infinite_cost.value,
        }
        if self.seed is not None:
            d["seed"] = self.seed
        if self.max_samples is not None:
            d["max_samples"] = self.max_samples
        return d
