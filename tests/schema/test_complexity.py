"""Tests for zodforge.schema.complexity module."""

import pytest

from zodforge.schema import get_schema_complexity, parse_schema


def _score(raw) -> int:
    return get_schema_complexity(parse_schema(raw))


class TestGetSchemaComplexity:
    """Test schema complexity scores."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ({"type": "string"}, 1),
            ({"type": "null"}, 1),
            ({"type": "string", "enum": ["a", "b", "c", "d"]}, 2),
            ({"enum": ["a", "b"]}, 2),
            ({"$ref": "#/components/schemas/Pet"}, 2),
            ({}, 0),
            ({"type": "object"}, 1),
            ({"type": "object", "additionalProperties": {"type": "string"}}, 2),
            ({"type": "array", "items": {"type": "integer"}}, 2),
            ({"type": ["string", "null"]}, 2),
        ],
    )
    def test_scores(self, raw, expected):
        assert _score(raw) == expected

    def test_object_sums_properties(self):
        raw = {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"$ref": "#/components/schemas/B"}},
        }
        assert _score(raw) == 2 + 1 + 2

    def test_compositions_add_their_weight(self):
        members = [{"type": "string"}, {"type": "number"}]

        assert _score({"oneOf": members}) == 2 + 2
        assert _score({"anyOf": members}) == 3 + 2
        assert _score({"allOf": members}) == 2 + 2

    def test_enum_size_does_not_count(self):
        small = _score({"type": "integer", "enum": [1]})
        large = _score({"type": "integer", "enum": list(range(50))})
        assert small == large

    def test_none_returns_accumulated_score(self):
        assert get_schema_complexity(None, 3) == 3
