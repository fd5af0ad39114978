#!/usr/bin/env python3
"""Benchmark the blue-noise sampler and a full concealment search.

Usage (from the project root):
    python scripts/bench_sampler.py            # default: 5 iterations
    python scripts/bench_sampler.py -n 10 -r 0.5
"""

import argparse
import statistics
import sys
import time
from pathlib import Path

# Add the project root to path
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from concealment.prng import PCG32  # noqa: E402
from concealment.sampler import BlueNoiseSampler  # noqa: E402
from concealment.scenario_io import (  # noqa: E402
    builtin_scenario_path,
    load_scenario,
)


def _time_ms(fn) -> float:
    start = time.perf_counter()
    fn()
    return (time.perf_counter() - start) * 1000


def _report(label: str, times_ms: list[float]) -> None:
    print(f"{label}:")
    print(f"  Median: {statistics.median(times_ms):.1f} ms")
    print(f"  Mean:   {statistics.mean(times_ms):.1f} ms")
    if len(times_ms) > 1:
        print(f"  Stdev:  {statistics.stdev(times_ms):.1f} ms")


def main():
    parser = argparse.ArgumentParser(description="Benchmark sampling")
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=5,
        help="Number of iterations (default: 5)",
    )
    parser.add_argument(
        "-s",
        "--size",
        type=float,
        default=100.0,
        help="Side of the square sampling region (default: 100)",
    )
    parser.add_argument("-r", "--radius", type=float, default=1.0)
    args = parser.parse_args()

    counts = []

    def sample():
        sampler = BlueNoiseSampler(
            args.size, args.size, args.radius, rng=PCG32(len(counts))
        )
        counts.append(sum(1 for _ in sampler.samples()))

    sample_times = [_time_ms(sample) for _ in range(args.iterations)]
    print(
        f"Sampler: {args.size:g}x{args.size:g}, radius {args.radius:g}, "
        f"~{statistics.mean(counts):.0f} samples"
    )
    _report("Sampling", sample_times)

    scenario = load_scenario(builtin_scenario_path("courtyard"))
    search_times = [
        _time_ms(scenario.find_hiding_spot) for _ in range(args.iterations)
    ]
    _report("Courtyard search", search_times)


if __name__ == "__main__":
    main()
