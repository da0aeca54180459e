"""
Services package for the drawing bridge.

This package contains the bridge itself, its transform registries, the
mapping expression parser and ready-made bridge presets.
"""

from .drawing_bridge import BridgeConfigError, DrawingBridge, validate_bridge_config
from .bridge_transforms import BridgeError, UnknownTransformError
from .bridge_presets import (
    create_bridge,
    create_csv_bridge,
    create_json_bridge,
    create_scenario_line_bridge,
    preview_transformation,
)

__all__ = [
    "DrawingBridge",
    "BridgeError",
    "BridgeConfigError",
    "UnknownTransformError",
    "validate_bridge_config",
    "create_bridge",
    "create_scenario_line_bridge",
    "create_json_bridge",
    "create_csv_bridge",
    "preview_transformation",
]
