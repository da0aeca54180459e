import math
from typing import Any, Mapping

from core.constants import LAYER_VISIBILITIES


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid numeric field; ints may exceed float range
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _is_non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _absent_or_non_empty_string(container: Mapping[str, Any], key: str) -> bool:
    return key not in container or _is_non_empty_string(container[key])


def is_valid_element(item: Any) -> bool:
    """
    Structural check of an imported drawing element.

    Requires, simultaneously:
        - non-empty string id, type and color
        - non-empty points list
        - detection absent, or both entry and exit non-empty lists
        - boolean completed
        - layerId / groupId absent or non-empty strings
        - info dict with non-empty name, type and fontFamily; numeric
          distance, fontSize and backgroundOpacity; description and
          backgroundColor absent or non-empty strings

    Absent keys and explicit None are different: None never satisfies an
    "absent or ..." rule.

    Returns:
        True if the element can be handed to the drawing engine.
    """
    if not isinstance(item, Mapping):
        return False

    if not (_is_non_empty_string(item.get("id")) and _is_non_empty_string(item.get("type"))):
        return False
    if not _is_non_empty_list(item.get("points")):
        return False

    if "detection" in item:
        detection = item["detection"]
        if not isinstance(detection, Mapping):
            return False
        if not (_is_non_empty_list(detection.get("entry")) and _is_non_empty_list(detection.get("exit"))):
            return False

    if not _is_non_empty_string(item.get("color")):
        return False
    if not isinstance(item.get("completed"), bool):
        return False
    if not (_absent_or_non_empty_string(item, "layerId") and _absent_or_non_empty_string(item, "groupId")):
        return False

    info = item.get("info")
    if not isinstance(info, Mapping):
        return False

    return (
        _is_non_empty_string(info.get("name"))
        and _absent_or_non_empty_string(info, "description")
        and _is_non_empty_string(info.get("type"))
        and _is_number(info.get("distance"))
        and _is_number(info.get("fontSize"))
        and _is_non_empty_string(info.get("fontFamily"))
        and _absent_or_non_empty_string(info, "backgroundColor")
        and _is_number(info.get("backgroundOpacity"))
    )


def is_valid_layer(layer: Any) -> bool:
    """
    Structural check of an imported layer.

    Requires non-empty id and name, string description, visibility in
    LAYER_VISIBILITIES, numeric opacity within [0, 1], numeric zIndex, an
    elementIds list, color absent/None or non-empty, and numeric
    createdAt / updatedAt.
    """
    if not isinstance(layer, Mapping):
        return False

    opacity = layer.get("opacity")
    color = layer.get("color")

    return (
        _is_non_empty_string(layer.get("id"))
        and _is_non_empty_string(layer.get("name"))
        and isinstance(layer.get("description"), str)
        and layer.get("visibility") in LAYER_VISIBILITIES
        and _is_number(opacity)
        and 0 <= opacity <= 1
        and _is_number(layer.get("zIndex"))
        and isinstance(layer.get("elementIds"), list)
        and (color is None or _is_non_empty_string(color))
        and _is_number(layer.get("createdAt"))
        and _is_number(layer.get("updatedAt"))
    )
