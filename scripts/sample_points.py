#!/usr/bin/env python3
"""Generate a blue-noise sample set and print it or render it.

Usage (from the project root):
    python scripts/sample_points.py                      # 10x10, radius 1
    python scripts/sample_points.py -W 20 -H 8 -r 0.5    # custom region
    python scripts/sample_points.py --seed 7 --png points.png
"""

import argparse
import json
import sys
from pathlib import Path

# Add the project root to path
SCRIPT_DIR = Path(__file__).resolve().parent
ROOT_DIR = SCRIPT_DIR.parent
sys.path.insert(0, str(ROOT_DIR))

from concealment.log import configure_logging  # noqa: E402
from concealment.prng import PCG32  # noqa: E402
from concealment.render import render_samples  # noqa: E402
from concealment.sampler import BlueNoiseSampler  # noqa: E402
from concealment.types import InvalidArgument  # noqa: E402


def main():
    parser = argparse.ArgumentParser(
        description="Generate Poisson-disc sample points"
    )
    parser.add_argument("-W", "--width", type=float, default=10.0)
    parser.add_argument("-H", "--height", type=float, default=10.0)
    parser.add_argument(
        "-r",
        "--radius",
        type=float,
        default=1.0,
        help="Minimum distance between samples (default: 1.0)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--png", type=Path, default=None, help="Write an image here"
    )
    parser.add_argument("--scale", type=float, default=20.0)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    configure_logging(args.log_level)
    rng = PCG32(args.seed) if args.seed is not None else None
    try:
        sampler = BlueNoiseSampler(
            args.width, args.height, args.radius, rng=rng
        )
    except InvalidArgument as e:
        parser.error(str(e))

    points = list(sampler.samples())

    if args.png is not None:
        img = render_samples(points, args.width, args.height, args.scale)
        img.save(args.png)
        print(f"{len(points)} samples -> {args.png}")
    else:
        json.dump([[p.x, p.y] for p in points], sys.stdout)
        print()


if __name__ == "__main__":
    main()
