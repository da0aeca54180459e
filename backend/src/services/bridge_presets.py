"""
Ready-made bridge configurations and helpers.

- create_scenario_line_bridge: the camera scenario-line API shape used by the
  dashboard's line editor
- create_json_bridge: flat JSON dump of element fields, importable again
- create_csv_bridge: flat tabular rows (export only)
- preview_transformation: export one sample element through a config
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from core.config import SCENARIO_LINE_LOCATION, SCENARIO_LINE_MAPS_COORDINATES
from core.sentinels import MISSING
from models.bridge_config import BridgeConfig, CustomFieldMapping
from services.bridge_transforms import center_point, coerce_int
from services.drawing_bridge import DrawingBridge
from shared_types.drawing import DrawingElement

logger = logging.getLogger(__name__)

# Suffix the backend appends to entry-line names
ENTRY_NAME_SUFFIX = " - Entrada"


def create_bridge(config: Union[BridgeConfig, Mapping[str, Any]], strict: Optional[bool] = None) -> DrawingBridge:
    """Create a bridge instance with configuration."""
    return DrawingBridge(config, strict=strict)


def strip_entry_suffix(value: Any) -> Any:
    if isinstance(value, str):
        return value.replace(ENTRY_NAME_SUFFIX, "")
    return value


def skip_null(value: Any) -> Any:
    """
    Custom import transform that leaves the destination unset for JSON null.

    The field still counts as resolved, so an optional child such as
    info.backgroundColor does not discard its parent object.
    """
    return MISSING if value is None else value


def _visual_coordinates(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> Dict[str, Any]:
    info = element.get("info") or {}
    return {
        "layer_id": element.get("layerId"),
        "type": element.get("type"),
        "fontSize": info.get("fontSize"),
        "fontFamily": info.get("fontFamily"),
        "backgroundColor": info.get("backgroundColor"),
        "backgroundOpacity": info.get("backgroundOpacity"),
        "coordinates": [
            [coerce_int(point.get("x")), coerce_int(point.get("y"))]
            for point in element.get("points") or []
        ],
    }


def scenario_line_config(
    location: Optional[str] = None,
    maps_coordinates: Optional[Tuple[float, float]] = None,
) -> Dict[str, Any]:
    """
    Mapping for the camera scenario-line API.

    Exported records carry the line geometry, the entry/exit detection lines
    and a visual_coordinates blob the editor reads back on import. Imported
    records come back with the line under "scenery", the exit line under
    "second_scenery" and the owning vehicle (layer) under "vehicle".
    """
    location = SCENARIO_LINE_LOCATION if location is None else location
    coordinates: List[float] = list(SCENARIO_LINE_MAPS_COORDINATES if maps_coordinates is None else maps_coordinates)

    return {
        "output": {
            "id": "id",
            "name": "info.name",
            "description": "info.description",
            "coordinates": "[int(points.x), int(points.y)][]",
            "detection_entry": "[int(detection.entry.x), int(detection.entry.y)][]",
            "detection_exit": "[int(detection.exit.x), int(detection.exit.y)][]",
            "distance": "info.distance",
            "color": "rgb(color)",
            "type": "info.type",
            "layer_id": "layerId",
            "visual_coordinates": _visual_coordinates,
            "maps_coordinates": lambda value, element, elements=None: list(coordinates),
            "location": lambda value, element, elements=None: location,
            "visibility": lambda value, element, elements=None: True,
            "allowed_directions": lambda value, element, elements=None: "ANY",
        },
        "input": {
            "elements": {
                "id": "id",
                "visual_coordinates.type": "type",
                "points(visual_coordinates.coordinates)": "points",
                "points(scenery.coordinates)": "detection.entry",
                "points(second_scenery.coordinates)": "detection.exit",
                "hex(scenery.color)": "color",
                "scenery.active": "completed",
                "visual_coordinates.layer_id": "layerId",
                "firstPoint(visual_coordinates.coordinates)": "direction.start",
                "endPoint(visual_coordinates.coordinates)": "direction.end",
                "scenery.name": CustomFieldMapping(key="info.name", transform=strip_entry_suffix),
                "scenery.description": "info.description",
                "scenery.type": "info.type",
                "scenery.distance": "info.distance",
                "visual_coordinates.fontSize": "info.fontSize",
                "visual_coordinates.fontFamily": "info.fontFamily",
                "visual_coordinates.backgroundColor": "info.backgroundColor",
                "visual_coordinates.backgroundOpacity": "info.backgroundOpacity",
            },
            "layers": {
                "visual_coordinates.layer_id": "id",
                "vehicle.name": "name",
                "description": "description",
                "vehicle.id": "category",
                "hex(vehicle.color)": "color",
                "time(createAt)": "createdAt",
                "time(updateAt)": "updatedAt",
            },
        },
    }


def create_scenario_line_bridge(
    location: Optional[str] = None,
    maps_coordinates: Optional[Tuple[float, float]] = None,
) -> DrawingBridge:
    """
    Create a bridge for the camera scenario-line format.

    Args:
        location: Zone label sent with every line (default SCENARIO_LINE_LOCATION)
        maps_coordinates: (lat, lng) of the camera (default SCENARIO_LINE_MAPS_COORDINATES)
    """
    return DrawingBridge(scenario_line_config(location, maps_coordinates))


def create_json_bridge() -> DrawingBridge:
    """Create a bridge for simple JSON export and re-import."""
    config = {
        "output": {
            "id": "id",
            "type": "type",
            "points": "points",
            "color": "color",
            "completed": "completed",
            "layer_id": "layerId",
            "group_id": "groupId",
            "name": "info.name",
            "description": "info.description",
            "info_type": "info.type",
            "distance": "info.distance",
            "font_size": "info.fontSize",
            "font_family": "info.fontFamily",
            "background_color": "info.backgroundColor",
            "background_opacity": "info.backgroundOpacity",
        },
        "input": {
            "elements": {
                "id": "id",
                "type": "type",
                "points": "points",
                "color": "color",
                "completed": "completed",
                "layer_id": CustomFieldMapping(key="layerId", transform=skip_null),
                "group_id": CustomFieldMapping(key="groupId", transform=skip_null),
                "name": "info.name",
                "description": "info.description",
                "info_type": "info.type",
                "distance": "info.distance",
                "font_size": "info.fontSize",
                "font_family": "info.fontFamily",
                "background_color": CustomFieldMapping(key="info.backgroundColor", transform=skip_null),
                "background_opacity": "info.backgroundOpacity",
            },
            "layers": {},
        },
    }
    return DrawingBridge(config)


def create_csv_bridge() -> DrawingBridge:
    """Create a bridge producing one flat row per element."""
    config = {
        "output": {
            "id": "id",
            "type": "type",
            "point_count": "pointCount(points)",
            "center_x": lambda value, element, elements=None: center_point(element.get("points"))[0],
            "center_y": lambda value, element, elements=None: center_point(element.get("points"))[1],
            "color_rgb": "rgb(color)",
            "name": "info.name",
            "completed": "completed",
        },
    }
    return DrawingBridge(config)


def preview_transformation(
    config: Union[BridgeConfig, Mapping[str, Any]],
    sample_element: DrawingElement,
) -> Dict[str, Any]:
    """Debug helper: export a single sample element through config."""
    bridge = DrawingBridge(config, strict=False)
    return bridge.export_single(sample_element)
