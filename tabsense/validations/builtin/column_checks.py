"""
Built-in column validation rules.

Which columns a rule inspects is decided from the column name through the
vocabularies of ValidationRulesConfig:

- DuplicateIdentifierCheck:   identifier-like names (ending in id/code/number)
- MissingRequiredFieldCheck:  identifier-like names
- InvalidNumberCheck:         columns inferred as numeric
- NegativeMetricCheck:        numeric columns named like a metric (price, qty, ...)
- InvalidDateCheck:           names containing date/time/timestamp
- AllowedValuesCheck:         names listed in the allowed values table
"""

import warnings
from typing import Any, Dict, Iterator, Optional, Sequence

import pandas as pd

from tabsense.core.results import RuleKind, ValidationIssue
from tabsense.core.scalars import (
    Row,
    ScalarKind,
    classify_scalar,
    is_missing,
    stringify,
    to_number,
)
from tabsense.validations.base import ColumnRule, RuleContext


def parses_as_date(value: Any) -> bool:
    """
    Check whether a value can be read as a date/time.

    The value's string form goes through pandas' general datetime parser
    (ISO dates, "01/15/2024", "Jan 15 2024 10:00", ...). Values pandas maps
    to NaT ("nan", "NaT") and dates outside the supported range fail.

    Values stored as numbers (spreadsheet date serials, epoch offsets) take
    pandas' numeric path instead of being parsed as text.
    """
    if classify_scalar(value) is not ScalarKind.NUMBER:
        value = stringify(value)
    try:
        with warnings.catch_warnings():
            # Format-inference warnings are irrelevant for a yes/no answer
            warnings.simplefilter("ignore")
            parsed = pd.to_datetime(value)
    except (ValueError, TypeError, OverflowError):
        return False
    return not pd.isna(parsed)


class DuplicateIdentifierCheck(ColumnRule):
    """
    Flags repeated values in identifier-like columns.

    The first occurrence of a value is accepted; every later row holding
    the same stringified value is reported. Missing values are ignored.
    """

    kind = RuleKind.DUPLICATE_IDENTIFIER
    rule_prefix = "Duplicate"

    def applies_to(self, column: str, context: RuleContext) -> bool:
        return self.config.is_identifier_column(column)

    def scan_column(self, rows: Sequence[Row], column: str) -> Iterator[ValidationIssue]:
        first_seen: Dict[str, int] = {}
        for row_index, row in enumerate(rows):
            value = row.get(column) if row else None
            if is_missing(value):
                continue
            key = stringify(value)
            if key in first_seen:
                yield self._issue(row_index, column, value, f"Duplicate identifier {key}")
            else:
                first_seen[key] = row_index


class MissingRequiredFieldCheck(ColumnRule):
    """Flags identifier-like columns with a missing or blank value."""

    kind = RuleKind.MISSING_REQUIRED
    rule_prefix = "Missing"

    def applies_to(self, column: str, context: RuleContext) -> bool:
        return self.config.is_identifier_column(column)

    def check_value(self, row_index: int, column: str, value: Any) -> Optional[ValidationIssue]:
        if is_missing(value) or stringify(value).strip() == "":
            return self._issue(row_index, column, value, f"{column} should not be empty")
        return None


class InvalidNumberCheck(ColumnRule):
    """Flags values of a numeric column that do not coerce to a number."""

    kind = RuleKind.INVALID_NUMBER
    rule_prefix = "Invalid number in"

    def applies_to(self, column: str, context: RuleContext) -> bool:
        return context.is_numeric(column)

    def check_value(self, row_index: int, column: str, value: Any) -> Optional[ValidationIssue]:
        if is_missing(value):
            return None
        if to_number(value) is None:
            return self._issue(row_index, column, value, "Expected numeric")
        return None


class NegativeMetricCheck(ColumnRule):
    """Flags negative numbers in numeric columns named like a non-negative metric."""

    kind = RuleKind.NEGATIVE_METRIC
    rule_prefix = "Negative"

    def applies_to(self, column: str, context: RuleContext) -> bool:
        return context.is_numeric(column) and self.config.is_non_negative_metric(column)

    def check_value(self, row_index: int, column: str, value: Any) -> Optional[ValidationIssue]:
        if is_missing(value):
            return None
        number = to_number(value)
        if number is not None and number < 0:
            return self._issue(row_index, column, value, "Expected non-negative")
        return None


class InvalidDateCheck(ColumnRule):
    """Flags values of date-like columns that cannot be parsed as dates."""

    kind = RuleKind.INVALID_DATE
    rule_prefix = "Invalid date in"

    def applies_to(self, column: str, context: RuleContext) -> bool:
        return self.config.is_date_column(column)

    def check_value(self, row_index: int, column: str, value: Any) -> Optional[ValidationIssue]:
        if is_missing(value):
            return None
        if not parses_as_date(value):
            return self._issue(row_index, column, value, "Unparseable date")
        return None


class AllowedValuesCheck(ColumnRule):
    """
    Flags values outside the configured allowed set of a column.

    Column names match the allowed values table exactly (case-sensitive);
    values are compared by their string form.
    """

    kind = RuleKind.ENUM_VIOLATION
    rule_prefix = "Unexpected"

    def applies_to(self, column: str, context: RuleContext) -> bool:
        return self.config.allowed_values_for(column) is not None

    def check_value(self, row_index: int, column: str, value: Any) -> Optional[ValidationIssue]:
        if is_missing(value):
            return None
        allowed = self.config.allowed_values_for(column)
        if allowed is not None and stringify(value) not in allowed:
            return self._issue(row_index, column, value, "Value not in allowed set")
        return None
