"""
Base classes for column-level validation rules.

A rule decides from the column name (and the column's inferred type) whether
it applies to a column, then inspects that column's values one row at a
time. Rules never raise on bad data: every anomaly becomes a
ValidationIssue.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterator, List, Optional, Sequence

from tabsense.core.config import ValidationRulesConfig
from tabsense.core.results import RuleKind, ValidationIssue
from tabsense.core.scalars import Row


@dataclass(frozen=True)
class RuleContext:
    """
    Facts about the row set shared by every rule during one validation run.

    Attributes:
        columns: Union of column names in first-seen order
        numeric_columns: Columns inferred as numeric
        row_count: Number of rows being validated
    """
    columns: List[str] = field(default_factory=list)
    numeric_columns: FrozenSet[str] = frozenset()
    row_count: int = 0

    def is_numeric(self, column: str) -> bool:
        return column in self.numeric_columns


class ColumnRule(ABC):
    """
    Base class for all validation rules.

    Subclasses set ``kind`` and ``rule_prefix`` and implement applies_to()
    and one of the two evaluation styles:

    - check_value(): stateless, called once per (row, column)
    - scan_column(): stateful, called once per column with all rows

    Example:
        class PositiveCheck(ColumnRule):
            kind = RuleKind.NEGATIVE_METRIC
            rule_prefix = "Negative"

            def applies_to(self, column, context):
                return context.is_numeric(column)

            def check_value(self, row_index, column, value):
                if to_number(value) is not None and to_number(value) < 0:
                    return self._issue(row_index, column, value, "Expected non-negative")
                return None
    """

    kind: RuleKind
    rule_prefix: str = ""

    def __init__(self, config: ValidationRulesConfig):
        self.config = config

    @abstractmethod
    def applies_to(self, column: str, context: RuleContext) -> bool:
        """Return True when this rule should inspect ``column``."""

    def check_value(self, row_index: int, column: str, value: Any) -> Optional[ValidationIssue]:
        """Inspect a single value; return an issue or None."""
        return None

    def scan_column(self, rows: Sequence[Row], column: str) -> Iterator[ValidationIssue]:
        """Inspect a whole column; yield issues in row order."""
        for row_index, row in enumerate(rows):
            value = row.get(column) if row else None
            issue = self.check_value(row_index, column, value)
            if issue is not None:
                yield issue

    def rule_name(self, column: str) -> str:
        """Rule name for issues on ``column``, distinct per (kind, column)."""
        return f"{self.rule_prefix} {column}"

    def get_description(self) -> str:
        """Get human-readable description."""
        doc = self.__class__.__doc__
        if not doc or not doc.strip():
            return self.__class__.__name__
        return doc.strip().splitlines()[0]

    def _issue(self, row_index: int, column: str, value: Any, message: str) -> ValidationIssue:
        return ValidationIssue(
            rule=self.rule_name(column),
            message=message,
            row_index=row_index,
            column=column,
            value=value,
            kind=self.kind
        )
