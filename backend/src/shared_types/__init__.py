"""
Shared type definitions for the drawing bridge.

This module contains the TypedDicts exchanged between the bridge and the
drawing engine.
"""

from shared_types.drawing import (
    Detection,
    Direction,
    DrawingElement,
    ElementInfo,
    ImportResult,
    LayerInfo,
    Point,
)

__all__ = [
    "Detection",
    "Direction",
    "DrawingElement",
    "ElementInfo",
    "ImportResult",
    "LayerInfo",
    "Point",
]
