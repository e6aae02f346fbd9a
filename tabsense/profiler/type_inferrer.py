"""
Type Inferrer - Numeric vs. textual column classification.

Classifies a column by voting over its non-missing values: each value either
coerces to a finite number (a numeric vote) or does not. Booleans always
vote non-numeric.

Design Decisions:
    - Early exit: once more than NUMERIC_SHORT_CIRCUIT_THRESHOLD numeric
      votes have been seen with no non-numeric vote, the column is numeric
      without scanning the remaining rows. Very large numeric-only columns
      are classified after a handful of rows.
    - Otherwise the full column is scanned and the majority wins; ties and
      all-missing columns are textual.
    - Inference is a pure function of (rows, column): nothing is cached, so
      a different row subset may give a different answer.

Usage:
    inferrer = TypeInferrer()
    column_type = inferrer.classify(rows, "Amount")  # ColumnType.NUMERIC
"""

from typing import Sequence, Tuple

from tabsense.core.constants import NUMERIC_SHORT_CIRCUIT_THRESHOLD
from tabsense.core.logging_config import get_logger
from tabsense.core.scalars import Row, column_values, is_missing, is_numeric_value
from tabsense.profiler.profile_result import ColumnType

logger = get_logger(__name__)


class TypeInferrer:
    """
    Numeric/textual type inference for row columns.

    Attributes:
        short_circuit_threshold: Numeric votes required (with no
            non-numeric vote) before the scan stops early.

    Example:
        >>> inferrer = TypeInferrer()
        >>> inferrer.classify([{"Qty": 1}, {"Qty": "2"}, {"Qty": "x"}], "Qty")
        <ColumnType.NUMERIC: 'numeric'>
        >>> inferrer.classify([{"Qty": True}], "Qty")
        <ColumnType.TEXTUAL: 'textual'>
    """

    def __init__(self, short_circuit_threshold: int = NUMERIC_SHORT_CIRCUIT_THRESHOLD):
        """
        Initialize the type inferrer.

        Args:
            short_circuit_threshold: Numeric votes needed for the early exit
        """
        self.short_circuit_threshold = short_circuit_threshold

    def classify(self, rows: Sequence[Row], column: str) -> ColumnType:
        """
        Classify a column as numeric or textual.

        Args:
            rows: Row mappings (never modified)
            column: Column name; rows lacking it count as missing

        Returns:
            ColumnType.NUMERIC or ColumnType.TEXTUAL
        """
        numeric_count = 0
        non_numeric_count = 0

        for value in column_values(rows, column):
            if is_missing(value):
                continue
            if is_numeric_value(value):
                numeric_count += 1
            else:
                non_numeric_count += 1
            if numeric_count > self.short_circuit_threshold and non_numeric_count == 0:
                return ColumnType.NUMERIC

        column_type = self._vote(numeric_count, non_numeric_count)
        if numeric_count and non_numeric_count:
            logger.debug(
                f"Mixed column '{column}': numeric={numeric_count}, "
                f"non-numeric={non_numeric_count} -> {column_type.value}"
            )
        return column_type

    def classify_full_scan(self, rows: Sequence[Row], column: str) -> ColumnType:
        """Classify a column by majority vote over every row, with no early exit."""
        numeric_count, non_numeric_count = self.count_votes(rows, column)
        return self._vote(numeric_count, non_numeric_count)

    def count_votes(self, rows: Sequence[Row], column: str) -> Tuple[int, int]:
        """
        Count numeric and non-numeric values of a column.

        Returns:
            Tuple of (numeric_count, non_numeric_count); missing values are
            not counted
        """
        numeric_count = 0
        non_numeric_count = 0
        for value in column_values(rows, column):
            if is_missing(value):
                continue
            if is_numeric_value(value):
                numeric_count += 1
            else:
                non_numeric_count += 1
        return numeric_count, non_numeric_count

    def is_numeric(self, rows: Sequence[Row], column: str) -> bool:
        return self.classify(rows, column) is ColumnType.NUMERIC

    @staticmethod
    def _vote(numeric_count: int, non_numeric_count: int) -> ColumnType:
        if numeric_count > non_numeric_count:
            return ColumnType.NUMERIC
        return ColumnType.TEXTUAL
