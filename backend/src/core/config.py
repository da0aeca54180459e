"""
Bridge configuration using python-dotenv.

This module loads environment variables from .env file into os.environ
and exposes the defaults used by the bridge presets.
"""

import os
import pathlib
from typing import Tuple

from dotenv import load_dotenv


# Determine if we're running in a test environment
# Don't load .env file during testing to ensure predictable test behavior
is_testing = os.getenv("PYTEST_VERSION") is not None or any("pytest" in str(frame) for frame in __import__('inspect').stack(0))

# Load .env file into os.environ (only outside of testing)
if not is_testing:
    possible_paths = [
        pathlib.Path(__file__).parent.parent.parent / ".env",  # backend/.env
        pathlib.Path(__file__).parent.parent.parent.parent / ".env",  # repository root
        pathlib.Path.cwd() / ".env",
    ]

    for env_path in possible_paths:
        if env_path.exists():
            load_dotenv(env_path)
            break


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def get_scenario_line_maps_coordinates() -> Tuple[float, float]:
    """
    Get the default map coordinates attached to exported scenario lines.

    Expects "lat,lng". Falls back to the Mexico City default if the variable
    is malformed.
    """
    raw = os.getenv("SCENARIO_LINE_MAPS_COORDINATES", "19.3048720286,-99.05621509437437")
    try:
        lat, lng = (float(part) for part in raw.split(","))
    except ValueError:
        return (19.3048720286, -99.05621509437437)
    return (lat, lng)


# Raise on unknown transform names when a bridge is built instead of
# degrading the affected fields at export time
BRIDGE_STRICT_CONFIG = _env_flag("BRIDGE_STRICT_CONFIG")

# Scenario line preset defaults
SCENARIO_LINE_LOCATION = os.getenv("SCENARIO_LINE_LOCATION", "zone 1")
SCENARIO_LINE_MAPS_COORDINATES = get_scenario_line_maps_coordinates()
