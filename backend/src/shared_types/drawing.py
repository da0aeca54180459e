"""
Type definitions for drawing elements and layers.

Elements and layers travel through the bridge as plain dicts so that the
structural validators can tell absent keys apart from explicit nulls. These
TypedDicts document the shape the drawing engine expects.
"""
from typing import Dict, List, Literal, Optional, TypedDict, Union


ElementType = Literal["line", "area", "curve", "rectangle", "circle"]
ElementSyncState = Literal["new", "edited", "deleted", "saved"]
LayerVisibility = Literal["visible", "hidden", "locked"]
AnnotationType = Literal["DETECTION", "CONFIGURATION", "NEAR_MISS"]


class Point(TypedDict):
    """Media-pixel coordinate."""
    x: float
    y: float


class Detection(TypedDict):
    """Entry/exit polylines used for vehicle detection."""
    entry: List[Point]
    exit: List[Point]


class Direction(TypedDict):
    start: Point
    end: Point


class _ElementInfoRequired(TypedDict):
    name: str
    type: AnnotationType
    distance: float
    fontSize: float
    fontFamily: str
    backgroundOpacity: float


class ElementInfo(_ElementInfoRequired, total=False):
    """Annotation metadata rendered next to an element."""
    description: str
    direction: Literal["left", "right", "top", "bottom"]
    backgroundColor: str


class _DrawingElementRequired(TypedDict):
    id: str
    type: ElementType
    points: List[Point]
    color: str  # hex, e.g. "#ff0000"
    completed: bool
    info: ElementInfo


class DrawingElement(_DrawingElementRequired, total=False):
    """Canonical UI-side vector shape."""
    detection: Detection
    layerId: str
    groupId: str
    direction: Optional[Direction]
    syncState: ElementSyncState


class _LayerInfoRequired(TypedDict):
    id: str
    name: str
    description: str
    category: Union[str, List[str]]
    visibility: LayerVisibility
    opacity: float  # 0.0 to 1.0
    zIndex: int
    elementIds: List[str]  # populated by the bridge during import
    createdAt: int  # epoch ms
    updatedAt: int  # epoch ms


class LayerInfo(_LayerInfoRequired, total=False):
    """Named, ordered grouping of elements."""
    color: Optional[str]


class ImportResult(TypedDict):
    """Result of DrawingBridge.import_records."""
    elements: List[DrawingElement]
    layers: Dict[str, LayerInfo]  # insertion ordered, keyed by layer id
