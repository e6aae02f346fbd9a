"""
Unit tests for rule_engine.py

Tests issue ordering, per-rule counting, truncation and configuration of
the validation rule engine.
"""

import logging

import pytest

from tabsense.core.config import ValidationRulesConfig
from tabsense.core.exceptions import ParameterValidationError
from tabsense.validations.rule_engine import ValidationRuleEngine


@pytest.fixture
def engine():
    return ValidationRuleEngine()


@pytest.fixture
def order_rows():
    return [
        {"Order Id": "A1", "Quantity": -2, "Order Date": "2024-01-05", "Payment Method": "Cash"},
        {"Order Id": "A1", "Quantity": 3, "Order Date": "not a date", "Payment Method": "Bitcoin"},
        {"Order Id": None, "Quantity": "many", "Order Date": "2024-02-01", "Payment Method": "Wire"},
        {"Order Id": "A3", "Quantity": 4, "Order Date": None, "Payment Method": "Credit Card"},
    ]


@pytest.mark.unit
class TestValidate:
    """Test issue detection."""

    def test_duplicate_order_id(self, engine):
        rows = [{"Order Id": v} for v in ["A1", "A2", "A1"]]

        summary = engine.validate(rows)

        assert [(issue.rule, issue.row_index) for issue in summary.issues] == [("Duplicate Order Id", 2)]
        assert summary.counts_per_rule == {"Duplicate Order Id": 1}

    def test_issue_order(self, engine, order_rows):
        """Duplicates come first, then one row-major pass over the other rules."""
        summary = engine.validate(order_rows)

        assert [(issue.rule, issue.row_index) for issue in summary.issues] == [
            ("Duplicate Order Id", 1),
            ("Negative Quantity", 0),
            ("Invalid date in Order Date", 1),
            ("Unexpected Payment Method", 1),
            ("Missing Order Id", 2),
            ("Invalid number in Quantity", 2),
        ]

    def test_counts_match_issues(self, engine, order_rows):
        summary = engine.validate(order_rows)

        assert summary.total_issues == len(summary.issues) == 6
        assert sum(summary.counts_per_rule.values()) == summary.total_issues
        assert summary.truncated is False

    def test_issue_fields(self, engine, order_rows):
        issue = engine.validate(order_rows).issues_for_rule("Unexpected Payment Method")[0]

        assert issue.column == "Payment Method"
        assert issue.value == "Bitcoin"
        assert issue.message == "Value not in allowed set"

    def test_clean_rows(self, engine):
        rows = [
            {"Order Id": "A1", "Amount": 10.5, "Purchase Type": "Online"},
            {"Order Id": "A2", "Amount": 0, "Purchase Type": "In-store"},
        ]

        summary = engine.validate(rows)

        assert summary.has_issues() is False
        assert summary.counts_per_rule == {}

    def test_empty_rows(self, engine):
        summary = engine.validate([])

        assert summary.issues == []
        assert summary.total_issues == 0

    def test_absent_identifier_counts_as_missing(self, engine):
        rows = [{"Order Id": "A1"}, {"Notes": "no id"}]

        summary = engine.validate(rows)

        assert [(issue.rule, issue.row_index) for issue in summary.issues] == [("Missing Order Id", 1)]

    def test_textual_metric_column_not_checked(self, engine):
        rows = [{"Amount": v} for v in ["-1", "n/a", "unknown"]]

        assert engine.validate(rows).has_issues() is False

    def test_rows_not_mutated(self, engine, order_rows):
        snapshot = [dict(row) for row in order_rows]

        engine.validate(order_rows)

        assert order_rows == snapshot


@pytest.mark.unit
class TestTruncation:
    """Test the issue limit."""

    @pytest.fixture
    def duplicate_rows(self):
        return [{"Order Id": "X"} for _ in range(10)]

    def test_truncates_list_not_counts(self, engine, duplicate_rows):
        summary = engine.validate(duplicate_rows, max_issues=3)

        assert [issue.row_index for issue in summary.issues] == [1, 2, 3]
        assert summary.counts_per_rule == {"Duplicate Order Id": 9}
        assert summary.total_issues == 9
        assert summary.truncated is True

    def test_zero_limit(self, engine, duplicate_rows):
        summary = engine.validate(duplicate_rows, max_issues=0)

        assert summary.issues == []
        assert summary.counts_per_rule == {"Duplicate Order Id": 9}

    def test_config_limit(self, duplicate_rows):
        engine = ValidationRuleEngine(ValidationRulesConfig(max_issues=2))

        assert len(engine.validate(duplicate_rows).issues) == 2

    def test_negative_limit(self, engine, duplicate_rows):
        with pytest.raises(ParameterValidationError) as exc_info:
            engine.validate(duplicate_rows, max_issues=-1)

        assert exc_info.value.parameter == "max_issues"

    def test_truncation_logged(self, engine, duplicate_rows, caplog):
        with caplog.at_level(logging.INFO, logger="tabsense"):
            engine.validate(duplicate_rows, max_issues=3)

        assert "truncated to 3 of 9" in caplog.text


@pytest.mark.unit
class TestCustomConfig:
    """Test engines built from a custom configuration."""

    def test_custom_allowed_values(self):
        config = ValidationRulesConfig(allowed_values={"Status": ["Open", "Closed"]})
        engine = ValidationRuleEngine(config)
        rows = [{"Status": "Open", "Payment Method": "Bitcoin"}, {"Status": "Pending", "Payment Method": "Cash"}]

        summary = engine.validate(rows)

        assert summary.counts_per_rule == {"Unexpected Status": 1}

    def test_custom_identifier_pattern(self):
        engine = ValidationRuleEngine(ValidationRulesConfig(identifier_pattern=r"^sku$"))
        rows = [{"SKU": "k1", "Order Id": "A"}, {"SKU": "k1", "Order Id": "A"}]

        summary = engine.validate(rows)

        assert summary.counts_per_rule == {"Duplicate SKU": 1}

    def test_describe_rules(self, engine):
        descriptions = engine.describe_rules()

        assert len(descriptions) == 6
        assert descriptions[0] == "Flags repeated values in identifier-like columns."

    def test_description_falls_back_to_class_name(self, engine):
        class UndocumentedCheck(type(engine.row_rules[0])):
            pass

        UndocumentedCheck.__doc__ = None

        assert UndocumentedCheck(engine.config).get_description() == "UndocumentedCheck"
