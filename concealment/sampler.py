"""Blue-noise (Poisson-disc) point sampling over a rectangle.

Implements Bridson's algorithm ("Fast Poisson Disk Sampling in Arbitrary
Dimensions", SIGGRAPH 2007): samples are grown outward from an active set,
and a background grid with cells of side ``radius / sqrt(2)`` bounds every
proximity test to a fixed 5x5 block of cells. Because no two accepted
samples can share a cell, each cell stores at most one sample.

The sampler is a pull-based iterator. Each call to ``try_next`` (or
``next``) runs the algorithm just far enough to accept one more sample and
then suspends; the caller controls pacing and may simply stop pulling.
Once the active set drains the iterator is exhausted for good; build a new
sampler to resample.

Every random draw flows through a ``RandomSource``. Given the same seed the
sampler emits exactly the same sequence, so changing the order of draws
(the first point, the active-sample pick, angle then distance) changes
every downstream result.
"""

from __future__ import annotations

import math

from .prng import PCG32, RandomSource
from .types import InvalidArgument, Point2, SamplingRegion

# Candidates tried around one active sample before it is retired.
MAX_ATTEMPTS = 30

# Refuse configurations whose background grid would not fit in memory.
MAX_GRID_CELLS = 50_000_000


def _require_positive(name: str, value: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(
            f"{name} must be a number, got {value!r}"
        ) from None
    if not math.isfinite(v) or v <= 0:
        raise InvalidArgument(
            f"{name} must be a positive finite number, got {value!r}"
        )
    return v


class BlueNoiseSampler:
    """Lazy sequence of points in ``[0, width) x [0, height)``.

    Any two emitted points are at least ``radius`` apart, and the region is
    filled until no active sample can grow a neighbour within
    ``[radius, 2 * radius]``.
    """

    def __init__(
        self,
        width: float,
        height: float,
        radius: float,
        rng: RandomSource | None = None,
    ) -> None:
        self._region = SamplingRegion(
            _require_positive("width", width),
            _require_positive("height", height),
        )
        self._radius = _require_positive("radius", radius)
        self._radius2 = self._radius * self._radius
        self._cell_size = self._radius / math.sqrt(2)
        self._cols = max(1, math.ceil(self._region.width / self._cell_size))
        self._rows = max(1, math.ceil(self._region.height / self._cell_size))
        if self._cols * self._rows > MAX_GRID_CELLS:
            raise InvalidArgument(
                f"radius {radius!r} is too small for a "
                f"{width!r} x {height!r} region "
                f"({self._cols} x {self._rows} grid cells)"
            )
        # Row-major; None marks an empty cell so a sample at (0, 0) is
        # still a real sample.
        self._grid: list[Point2 | None] = [None] * (self._cols * self._rows)
        self._active: list[Point2] = []
        self._rng: RandomSource = (
            rng if rng is not None else PCG32.from_entropy()
        )
        self._started = False
        self._exhausted = False
        self._accepted = 0

    @property
    def width(self) -> float:
        return self._region.width

    @property
    def height(self) -> float:
        return self._region.height

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def grid_shape(self) -> tuple[int, int]:
        """(columns, rows) of the background grid."""
        return (self._cols, self._rows)

    @property
    def accepted_count(self) -> int:
        return self._accepted

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def samples(self) -> BlueNoiseSampler:
        """The lazy sample sequence. Not restartable."""
        return self

    def __iter__(self) -> BlueNoiseSampler:
        return self

    def __next__(self) -> Point2:
        p = self.try_next()
        if p is None:
            raise StopIteration
        return p

    def try_next(self) -> Point2 | None:
        """Accept and return the next sample, or None once exhausted."""
        if self._exhausted:
            return None

        if not self._started:
            self._started = True
            first = Point2(
                self._rng.next_float() * self._region.width,
                self._rng.next_float() * self._region.height,
            )
            return self._add_sample(first)

        while self._active:
            i = self._rng.next_int(0, len(self._active) - 1)
            sample = self._active[i]

            for _ in range(MAX_ATTEMPTS):
                candidate = self._candidate_around(sample)
                if self._region.contains(candidate) and self._is_far_enough(
                    candidate
                ):
                    return self._add_sample(candidate)

            # Retire the sample: order of the active set doesn't matter.
            last = self._active.pop()
            if i < len(self._active):
                self._active[i] = last

        self._exhausted = True
        return None

    def _candidate_around(self, sample: Point2) -> Point2:
        """Uniform-area draw from the annulus [radius, 2 * radius]."""
        angle = 2.0 * math.pi * self._rng.next_float()
        r = math.sqrt(
            self._rng.next_float() * 3.0 * self._radius2 + self._radius2
        )
        return Point2(
            sample.x + r * math.cos(angle), sample.y + r * math.sin(angle)
        )

    def _cell_of(self, p: Point2) -> tuple[int, int]:
        gx = min(int(p.x / self._cell_size), self._cols - 1)
        gy = min(int(p.y / self._cell_size), self._rows - 1)
        return gx, gy

    def _is_far_enough(self, candidate: Point2) -> bool:
        gx, gy = self._cell_of(candidate)
        xmin = max(gx - 2, 0)
        ymin = max(gy - 2, 0)
        xmax = min(gx + 2, self._cols - 1)
        ymax = min(gy + 2, self._rows - 1)

        for y in range(ymin, ymax + 1):
            row = y * self._cols
            for x in range(xmin, xmax + 1):
                s = self._grid[row + x]
                if s is not None:
                    if s.distance_squared_to(candidate) < self._radius2:
                        return False
        return True

    def _add_sample(self, sample: Point2) -> Point2:
        gx, gy = self._cell_of(sample)
        self._grid[gy * self._cols + gx] = sample
        self._active.append(sample)
        self._accepted += 1
        return sample
