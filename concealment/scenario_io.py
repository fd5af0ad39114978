"""Load and save scenarios from/to JSON files.

Built-in scenarios live under ``scenarios/builtin/`` at the project root.
"""

from __future__ import annotations

import json
from pathlib import Path

from .scenario import Scenario

# scenarios/ is two levels up from concealment/scenario_io.py
_SCENARIOS_DIR = Path(__file__).parent.parent / "scenarios"


def builtin_scenario_path(name: str) -> Path:
    """Return the path to a built-in scenario JSON file.

    Args:
        name: Scenario name without extension (e.g. "courtyard").

    Returns:
        Path to ``scenarios/builtin/{name}.json``.
    """
    return _SCENARIOS_DIR / "builtin" / f"{name}.json"


def load_scenario_dict(path: Path) -> dict:
    with open(path) as f:
        return json.load(f)


def load_scenario(path: Path) -> Scenario:
    """Load a JSON scenario file and return a typed ``Scenario``."""
    return Scenario.from_dict(load_scenario_dict(path))


def save_scenario_dict(data: dict, path: Path) -> None:
    """Write a scenario dict to a JSON file.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
