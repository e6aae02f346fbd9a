"""
Unit tests for the chat command parser.

Covers column and group-by detection, top-N extraction and clamping, and
the documented ambiguity of substring matching.
"""

import pytest

from tabsense.chat.commands import CommandParser
from tabsense.profiler.profile_result import ChartSpec


@pytest.fixture
def parser():
    return CommandParser()


@pytest.fixture
def columns():
    return ["City", "Payment Method", "Amount"]


@pytest.mark.unit
class TestParseColumns:
    """Test column detection."""

    def test_category_group_and_top_n(self, parser, columns):
        spec = parser.parse_columns("visualize City with Payment Method top 5", columns)

        assert spec == ChartSpec(category="City", group_by="Payment Method", top_n=5)

    def test_case_insensitive(self, parser, columns):
        spec = parser.parse_columns("VISUALIZE CITY WITH PAYMENT METHOD", columns)

        assert spec == ChartSpec(category="City", group_by="Payment Method")

    def test_category_follows_column_order(self, parser, columns):
        """Column order, not position in the text, picks the category."""
        spec = parser.parse_columns("bar chart of Payment Method with City", columns)

        assert spec.category == "City"
        assert spec.group_by == "Payment Method"

    def test_group_by_requires_with(self, parser, columns):
        spec = parser.parse_columns("bar chart City and Payment Method", columns)

        assert spec == ChartSpec(category="City")

    def test_with_but_single_column(self, parser, columns):
        spec = parser.parse_columns("visualize Amount with colours", columns)

        assert spec == ChartSpec(category="Amount")

    def test_no_column_mentioned(self, parser, columns):
        assert parser.parse_columns("visualize something", columns) is None

    def test_no_columns(self, parser):
        assert parser.parse_columns("visualize City", []) is None

    def test_substring_names_resolve_by_order(self, parser):
        """A column contained in another column's name wins when it comes first."""
        spec = parser.parse_columns("visualize Payment Method", ["Method", "Payment Method"])

        assert spec.category == "Method"

    def test_parse_uses_row_columns(self, parser):
        rows = [{"Product": "A"}, {"Region": "North"}]

        spec = parser.parse("show top 3 for region", rows)

        assert spec == ChartSpec(category="Region", top_n=3)

    def test_parse_empty_rows(self, parser):
        assert parser.parse("visualize City", []) is None


@pytest.mark.unit
class TestExtractTopN:
    """Test top-N extraction."""

    @pytest.mark.parametrize("text,expected", [
        ("show top 10 for product", 10),
        ("bar chart up to 7 cities", 7),
        ("top   3", 3),
        ("top 0 please", 1),
        ("top 250", 100),
        ("show everything", None),
        ("top ten", None),
    ])
    def test_extract(self, parser, text, expected):
        assert parser.extract_top_n(text) == expected

    def test_custom_bounds(self):
        parser = CommandParser(min_top_n=2, max_top_n=20)

        assert parser.extract_top_n("top 1") == 2
        assert parser.extract_top_n("top 50") == 20
