"""
Unit tests for mapping expression parsing.
"""

from services.bridge_expressions import (
    PairArrayExpr,
    PathExpr,
    SourceExpr,
    TransformCallExpr,
    iter_transform_names,
    parse_output_mapping,
    parse_source_mapping,
)


class TestParseOutputMapping:
    """Test cases for parse_output_mapping."""

    def test_plain_path(self):
        """Test that a dot-path compiles to PathExpr."""
        assert parse_output_mapping("info.name") == PathExpr(path="info.name")

    def test_transform_call(self):
        """Test that name(path) compiles to TransformCallExpr."""
        assert parse_output_mapping("rgb(color)") == TransformCallExpr(transform="rgb", path="color")
        assert parse_output_mapping("elementIndex(id)") == TransformCallExpr(transform="elementIndex", path="id")

    def test_pair_array(self):
        """Test pair array syntax with and without per-axis transforms."""
        assert parse_output_mapping("[points.x, points.y][]") == PairArrayExpr(
            x=PathExpr(path="points.x"),
            y=PathExpr(path="points.y"),
        )
        assert parse_output_mapping("[int(detection.entry.x), int(detection.entry.y)][]") == PairArrayExpr(
            x=TransformCallExpr(transform="int", path="detection.entry.x"),
            y=TransformCallExpr(transform="int", path="detection.entry.y"),
        )

    def test_unmatched_syntax_is_a_path(self):
        """Test that anything else is treated literally as a path."""
        assert parse_output_mapping("rgb()") == PathExpr(path="rgb()")
        assert parse_output_mapping("[a, b]") == PathExpr(path="[a, b]")

    def test_iter_transform_names(self):
        """Test transform name discovery."""
        assert list(iter_transform_names(parse_output_mapping("info.name"))) == []
        assert list(iter_transform_names(parse_output_mapping("rgb(color)"))) == ["rgb"]
        assert list(iter_transform_names(parse_output_mapping("[int(points.x), points.y][]"))) == ["int"]


class TestParseSourceMapping:
    """Test cases for parse_source_mapping."""

    def test_plain_and_wrapped(self):
        """Test plain source paths and transform-wrapped ones."""
        assert parse_source_mapping("scenery.name") == SourceExpr(path="scenery.name")
        assert parse_source_mapping("hex(scenery.color)") == SourceExpr(path="scenery.color", transform="hex")
