"""
Mapping expression parser for the drawing bridge.

Output (export) mapping strings take one of three forms, tried in order:
- transform call:  "rgb(color)"
- pair array:      "[int(points.x), int(points.y)][]"
- plain dot-path:  "info.name"

Source (import) mapping keys are a dot-path optionally wrapped in a single
transform call: "hex(scenery.color)".

Strings are compiled once into the small expression tree below when a
bridge is configured; evaluation never re-parses them.
"""
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Union

_CALL_PATTERN = re.compile(r'^(\w+)\(([^)]+)\)$')
_PAIR_ARRAY_PATTERN = re.compile(r'^\[([^,]+),\s*([^,]+)\]\[\]$')


@dataclass(frozen=True)
class PathExpr:
    """Direct nested field access."""
    path: str


@dataclass(frozen=True)
class TransformCallExpr:
    """Resolve path, then apply the named transform."""
    transform: str
    path: str


AxisExpr = Union[PathExpr, TransformCallExpr]


@dataclass(frozen=True)
class PairArrayExpr:
    """
    Project every item of an array field to [x, y].

    x and y are paths reaching through the array (e.g. "points.x"); the array
    itself is located at evaluation time as the longest prefix of x's path
    that resolves to a list.
    """
    x: AxisExpr
    y: AxisExpr


OutputExpr = Union[PathExpr, TransformCallExpr, PairArrayExpr]


@dataclass(frozen=True)
class SourceExpr:
    """Import-side source path with an optional reverse transform name."""
    path: str
    transform: Optional[str] = None


def _parse_axis(text: str) -> AxisExpr:
    text = text.strip()
    match = _CALL_PATTERN.match(text)
    if match:
        return TransformCallExpr(transform=match.group(1), path=match.group(2).strip())
    return PathExpr(path=text)


def parse_output_mapping(mapping: str) -> OutputExpr:
    """Compile an export mapping string."""
    match = _CALL_PATTERN.match(mapping)
    if match:
        return TransformCallExpr(transform=match.group(1), path=match.group(2).strip())

    match = _PAIR_ARRAY_PATTERN.match(mapping)
    if match:
        return PairArrayExpr(x=_parse_axis(match.group(1)), y=_parse_axis(match.group(2)))

    return PathExpr(path=mapping)


def parse_source_mapping(mapping: str) -> SourceExpr:
    """Compile an import source key."""
    match = _CALL_PATTERN.match(mapping)
    if match:
        return SourceExpr(path=match.group(2).strip(), transform=match.group(1))
    return SourceExpr(path=mapping)


def iter_transform_names(expr: OutputExpr) -> Iterator[str]:
    """Yield every transform name referenced by an output expression."""
    if isinstance(expr, TransformCallExpr):
        yield expr.transform
    elif isinstance(expr, PairArrayExpr):
        for axis in (expr.x, expr.y):
            if isinstance(axis, TransformCallExpr):
                yield axis.transform
