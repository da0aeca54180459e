"""
Test configuration and shared fixtures for the drawing bridge test suite.

Fixtures return fresh dicts on every call so tests can mutate them freely.
"""

import copy
import pytest
from typing import Any, Dict


VALID_ELEMENT: Dict[str, Any] = {
    "id": "line-1",
    "type": "line",
    "points": [{"x": 10.4, "y": 20.6}, {"x": 110, "y": 220}],
    "detection": {
        "entry": [{"x": 1, "y": 2}, {"x": 3, "y": 4}],
        "exit": [{"x": 5, "y": 6}, {"x": 7, "y": 8}],
    },
    "color": "#ff0000",
    "completed": True,
    "layerId": "L1",
    "info": {
        "name": "Gate",
        "description": "Main gate",
        "type": "entry",
        "distance": 10,
        "fontSize": 14,
        "fontFamily": "Arial",
        "backgroundColor": "#ffffff",
        "backgroundOpacity": 0.5,
    },
}

VALID_LAYER: Dict[str, Any] = {
    "id": "L1",
    "name": "Layer 1",
    "description": "",
    "category": "",
    "visibility": "visible",
    "opacity": 1.0,
    "zIndex": 0,
    "elementIds": [],
    "createdAt": 1704067200000,
    "updatedAt": 1704067200000,
}


@pytest.fixture
def valid_element() -> Dict[str, Any]:
    """A completed line element that passes structural validation."""
    return copy.deepcopy(VALID_ELEMENT)


@pytest.fixture
def valid_layer() -> Dict[str, Any]:
    """A layer that passes structural validation."""
    return copy.deepcopy(VALID_LAYER)
