"""
Named value transforms used by the drawing bridge.

Two registries keyed by transform name:
- FORWARD_TRANSFORMS (export): element field value -> backend representation.
  Called as fn(value, element, elements).
- REVERSE_TRANSFORMS (import): backend value -> element field value.
  Called as fn(value).

Mapping strings reference these by name, e.g. "rgb(color)" on export or
"hex(scenery.color)" on import.
"""
import logging
import math
import re
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence

from core.constants import DEFAULT_HEX_COLOR, GENERATED_ID_SUFFIX_LENGTH
from core.sentinels import MISSING
from shared_types.drawing import DrawingElement, Point
from utils.datetime_utils import now_iso, now_ms, parse_timestamp_ms

logger = logging.getLogger(__name__)

ForwardTransform = Callable[[Any, DrawingElement, Optional[Sequence[DrawingElement]]], Any]
ReverseTransform = Callable[[Any], Any]

_INT_PREFIX = re.compile(r'^\s*([+-]?\d+)')
_FLOAT_PREFIX = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')
_HEX_COLOR = re.compile(r'^[0-9a-fA-F]{6}')


class BridgeError(Exception):
    """Base exception for drawing bridge failures."""
    pass


class UnknownTransformError(BridgeError, ValueError):
    """Raised when a mapping references a transform that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown transformation function: {name}")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _is_infinite(value: Any) -> bool:
    return isinstance(value, float) and math.isinf(value)


def _point_xy(point: Any) -> List[Any]:
    if isinstance(point, dict):
        return [point.get("x"), point.get("y")]
    return [None, None]


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


# ---------------------------------------------------------------------------
# Forward (export) transforms
# ---------------------------------------------------------------------------

def hex_to_rgb(color: Any) -> List[int]:
    """
    Convert "#rrggbb" to [r, g, b].

    Raises:
        ValueError: If color is not a 6-digit hex string
    """
    if not isinstance(color, str):
        raise ValueError(f"Expected hex color string, got {type(color).__name__}")
    hex_digits = color.replace("#", "")
    if not _HEX_COLOR.match(hex_digits):
        raise ValueError(f"Invalid hex color: {color!r}")
    return [int(hex_digits[i:i + 2], 16) for i in (0, 2, 4)]


def _rgb(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> List[int]:
    return hex_to_rgb(value)


def _rgba(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> List[float]:
    return [*hex_to_rgb(value), 1]


def coerce_int(value: Any) -> int:
    """Lenient integer coercion: floors numbers, parses leading digits of strings, else 0."""
    if _is_number(value):
        if _is_infinite(value):
            return 0
        return math.floor(value)
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        return int(match.group(1)) if match else 0
    return 0


def coerce_float(value: Any) -> float:
    """Lenient float coercion: numbers pass through, strings parse their numeric prefix, else 0.0."""
    if _is_number(value):
        return value
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        return float(match.group(1)) if match else 0.0
    return 0.0


def _int(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> int:
    return coerce_int(value)


def _float(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> float:
    return coerce_float(value)


def _coordinates_array(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> List[List[Any]]:
    return [_point_xy(point) for point in _as_list(value)]


def _first_point(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> List[Any]:
    points = _as_list(value)
    return _point_xy(points[0]) if points else [0, 0]


def _last_point(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> List[Any]:
    points = _as_list(value)
    return _point_xy(points[-1]) if points else [0, 0]


def center_point(points: Any) -> List[float]:
    """Arithmetic mean of a point list as [x, y]; [0, 0] for no points."""
    points = _as_list(points)
    if not points:
        return [0, 0]
    xs = [coerce_float(p.get("x")) if isinstance(p, dict) else 0.0 for p in points]
    ys = [coerce_float(p.get("y")) if isinstance(p, dict) else 0.0 for p in points]
    return [sum(xs) / len(points), sum(ys) / len(points)]


def _center_point(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> List[float]:
    return center_point(value)


def _text_length(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> int:
    return len(value) if isinstance(value, (str, list, tuple)) else 0


def _upper_case(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> str:
    return value.upper() if isinstance(value, str) else ""


def _lower_case(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> str:
    return value.lower() if isinstance(value, str) else ""


def _timestamp(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> str:
    return now_iso()


def _time(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> int:
    parsed = parse_timestamp_ms(value)
    return now_ms() if parsed is None else parsed


def _element_index(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> int:
    # Position of the element in the batch being exported, by identity
    if elements is None:
        return 0
    for index, candidate in enumerate(elements):
        if candidate is element:
            return index
    return -1


def _is_completed(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> bool:
    return element.get("completed") is True


def _point_count(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> int:
    return len(_as_list(value))


def generate_element_id() -> str:
    return f"element-{now_ms()}-{uuid.uuid4().hex[:GENERATED_ID_SUFFIX_LENGTH]}"


def _generate_id(value: Any, element: DrawingElement, elements: Optional[Sequence[DrawingElement]] = None) -> str:
    return element.get("id") or generate_element_id()


FORWARD_TRANSFORMS: Dict[str, ForwardTransform] = {
    "rgb": _rgb,
    "rgba": _rgba,
    "int": _int,
    "float": _float,
    "coordinatesArray": _coordinates_array,
    "firstPoint": _first_point,
    "lastPoint": _last_point,
    "centerPoint": _center_point,
    "textLength": _text_length,
    "upperCase": _upper_case,
    "lowerCase": _lower_case,
    "timestamp": _timestamp,
    "time": _time,
    "elementIndex": _element_index,
    "isCompleted": _is_completed,
    "pointCount": _point_count,
    "generateId": _generate_id,
}


def get_forward_transform(name: str) -> ForwardTransform:
    """
    Look up a forward transform by name.

    Raises:
        UnknownTransformError: If no transform is registered under name
    """
    try:
        return FORWARD_TRANSFORMS[name]
    except KeyError:
        raise UnknownTransformError(name) from None


def apply_forward_transform(
    name: str,
    value: Any,
    element: DrawingElement,
    elements: Optional[Sequence[DrawingElement]] = None,
) -> Any:
    """Apply a forward transform to a resolved value. MISSING is passed on as None."""
    transform = get_forward_transform(name)
    return transform(None if value is MISSING else value, element, elements)


# ---------------------------------------------------------------------------
# Reverse (import) transforms
# ---------------------------------------------------------------------------

def rgb_to_hex(value: Any) -> str:
    """Convert [r, g, b(, a)] to "#rrggbb"; DEFAULT_HEX_COLOR on malformed input."""
    if not isinstance(value, (list, tuple)) or len(value) < 3:
        return DEFAULT_HEX_COLOR
    channels = value[:3]
    if not all(_is_number(channel) and not _is_infinite(channel) for channel in channels):
        return DEFAULT_HEX_COLOR
    r, g, b = (max(0, min(255, int(channel))) for channel in channels)
    return f"#{r:02x}{g:02x}{b:02x}"


def _pair_to_point(pair: Any) -> Point:
    if isinstance(pair, dict):
        return {"x": pair.get("x") or 0, "y": pair.get("y") or 0}
    if isinstance(pair, (list, tuple)):
        x = pair[0] if len(pair) > 0 else 0
        y = pair[1] if len(pair) > 1 else 0
        return {"x": x or 0, "y": y or 0}
    return {"x": 0, "y": 0}


def _reverse_int(value: Any) -> int:
    return math.floor(value) if _is_number(value) and not _is_infinite(value) else 0


def _reverse_float(value: Any) -> float:
    return value if _is_number(value) else 0.0


def _reverse_points(value: Any) -> List[Point]:
    if not isinstance(value, (list, tuple)):
        return []
    return [_pair_to_point(pair) for pair in value]


def _reverse_first_point(value: Any) -> Optional[Point]:
    if not isinstance(value, (list, tuple)) or not value:
        return None
    return _pair_to_point(value[0])


def _reverse_last_point(value: Any) -> Optional[Point]:
    if not isinstance(value, (list, tuple)) or not value:
        return None
    return _pair_to_point(value[-1])


def _reverse_center_point(value: Any) -> List[Point]:
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return []
    return [{"x": value[0], "y": value[1]}]


def _reverse_text_length(value: Any) -> str:
    # Original text cannot be recovered from its length
    return ""


# NOTE: upperCase/lowerCase are inverted relative to their names on import.
# Backends built against the dashboard rely on this, keep it.
def _reverse_upper_case(value: Any) -> str:
    return value.lower() if isinstance(value, str) else ""


def _reverse_lower_case(value: Any) -> str:
    return value.upper() if isinstance(value, str) else ""


def _reverse_timestamp(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _reverse_time(value: Any) -> int:
    parsed = parse_timestamp_ms(value)
    if parsed is None:
        fallback = now_ms()
        logger.warning(f"Unparseable timestamp {value!r}, substituting current time {fallback}")
        return fallback
    return parsed


def _reverse_point_count(value: Any) -> List[Point]:
    return []


def _reverse_is_completed(value: Any) -> bool:
    return bool(value)


def _reverse_generate_id(value: Any) -> str:
    return value if isinstance(value, str) else ""


REVERSE_TRANSFORMS: Dict[str, ReverseTransform] = {
    "rgb": rgb_to_hex,
    "hex": rgb_to_hex,
    "rgba": rgb_to_hex,
    "int": _reverse_int,
    "float": _reverse_float,
    "coordinatesArray": _reverse_points,
    "points": _reverse_points,
    "firstPoint": _reverse_first_point,
    "lastPoint": _reverse_last_point,
    "endPoint": _reverse_last_point,
    "centerPoint": _reverse_center_point,
    "textLength": _reverse_text_length,
    "upperCase": _reverse_upper_case,
    "lowerCase": _reverse_lower_case,
    "timestamp": _reverse_timestamp,
    "time": _reverse_time,
    "pointCount": _reverse_point_count,
    "isCompleted": _reverse_is_completed,
    "generateId": _reverse_generate_id,
}


def apply_reverse_transform(name: str, value: Any) -> Any:
    """
    Apply a reverse transform by name.

    Unknown names pass the value through unchanged (with a warning), so one
    misnamed source mapping never drops data on import.
    """
    transform = REVERSE_TRANSFORMS.get(name)
    if transform is None:
        logger.warning(f"Unknown reverse transformation function: {name}, value passed through")
        return value
    return transform(value)
