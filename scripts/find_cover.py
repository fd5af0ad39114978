#!/usr/bin/env python3
"""Run a concealment search on a scenario file.

Prints the result as JSON; optionally renders the search to a PNG.

Usage (from the project root):
    python scripts/find_cover.py                  # built-in courtyard
    python scripts/find_cover.py my_scene.json --seed 3
    python scripts/find_cover.py --png cover.png --log-level DEBUG
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
from concealment.render import render_outcome  # noqa: E402
from concealment.scenario_io import (  # noqa: E402
    builtin_scenario_path,
    load_scenario,
)
from concealment.types import InfiniteCostPolicy  # noqa: E402


def main():
    parser = argparse.ArgumentParser(
        description="Find the nearest hiding spot in a scenario"
    )
    parser.add_argument(
        "scenario",
        nargs="?",
        type=Path,
        default=builtin_scenario_path("courtyard"),
        help="Scenario JSON file (default: built-in courtyard)",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Override the scenario seed"
    )
    parser.add_argument(
        "--exclude-unreachable",
        action="store_true",
        help="Drop hidden spots with no path instead of ranking them last",
    )
    parser.add_argument("--png", type=Path, default=None)
    parser.add_argument("--scale", type=float, default=20.0)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    configure_logging(args.log_level)
    scenario = load_scenario(args.scenario)
    if args.seed is not None:
        scenario.search.seed = args.seed
    if args.exclude_unreachable:
        scenario.search.infinite_cost = InfiniteCostPolicy.EXCLUDE

    outcome = scenario.find_hiding_spot()
    report = outcome.to_dict()
    report["agent_seen"] = scenario.agent_is_seen()
    json.dump(report, sys.stdout, indent=2)
    print()

    if args.png is not None:
        render_outcome(scenario, outcome, args.scale).save(args.png)

    if not outcome.result.found:
        sys.exit(1)


if __name__ == "__main__":
    main()
