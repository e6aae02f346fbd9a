"""
Statistics Calculator - Per-column descriptive statistics.

Produces one ColumnStatistics per column over the union of columns:

    - empty:   no non-missing value at all
    - numeric: count, missing, mean, median, min, max, std dev, outliers
    - textual: count, missing, number of distinct values

Design Decisions:
    - Numeric columns coerce every present value and silently drop the ones
      that fail. Type inference only needs a majority, so count can be
      smaller than the number of present values.
    - Median is the element at index n // 2 of the ascending values. For an
      even count this is the upper of the two middle values; the two are
      not averaged.
    - Standard deviation is the population form (ddof=0).
    - Results are deterministic: re-running on the same rows gives
      identical output.

Usage:
    calculator = StatisticsCalculator()
    summary = calculator.summarize(rows)
    print(summary["Quantity"].mean)
"""

from typing import Dict, Optional, Sequence

import numpy as np

from tabsense.core.logging_config import get_logger
from tabsense.core.scalars import (
    Row,
    column_values,
    is_missing,
    present_values,
    stringify,
    to_number,
    union_columns,
)
from tabsense.profiler.anomaly import OutlierDetector
from tabsense.profiler.profile_result import (
    ColumnStatistics,
    ColumnType,
    EmptyColumnStatistics,
    NumericColumnStatistics,
    TextColumnStatistics,
)
from tabsense.profiler.type_inferrer import TypeInferrer

logger = get_logger(__name__)


class StatisticsCalculator:
    """
    Descriptive statistics for every column of a row set.

    Attributes:
        type_inferrer: Decides whether a column is summarized as numeric
        outlier_detector: Supplies the outlier count of numeric columns

    Example:
        >>> rows = [{"Quantity": q} for q in [1, 2, 3, 4, 1000]]
        >>> stats = StatisticsCalculator().summarize(rows)["Quantity"]
        >>> stats.mean, stats.median
        (202.0, 3.0)
    """

    def __init__(
        self,
        type_inferrer: Optional[TypeInferrer] = None,
        outlier_detector: Optional[OutlierDetector] = None
    ):
        self.type_inferrer = type_inferrer or TypeInferrer()
        self.outlier_detector = outlier_detector or OutlierDetector()

    def summarize(self, rows: Sequence[Row]) -> Dict[str, ColumnStatistics]:
        """
        Summarize every column in the row set.

        Args:
            rows: Row mappings (never modified)

        Returns:
            Mapping of column name to its statistics, in first-seen column order
        """
        summary: Dict[str, ColumnStatistics] = {}
        for column in union_columns(rows):
            summary[column] = self.summarize_column(rows, column)

        logger.debug(f"Summarized {len(summary)} columns over {len(rows)} rows")
        return summary

    def summarize_column(self, rows: Sequence[Row], column: str) -> ColumnStatistics:
        """Compute the statistics of one column."""
        values = present_values(rows, column)
        missing = len(rows) - len(values)

        if not values:
            return EmptyColumnStatistics(missing=missing)

        if self.type_inferrer.classify(rows, column) is ColumnType.NUMERIC:
            return self._calculate_numeric_stats(values, missing)

        unique_values = {stringify(value) for value in values}
        return TextColumnStatistics(
            count=len(values),
            missing=missing,
            unique_count=len(unique_values)
        )

    def missing_counts(self, rows: Sequence[Row]) -> Dict[str, int]:
        """
        Count missing values per column.

        Rows that lack a column entirely count as missing for it.
        """
        return {
            column: sum(1 for value in column_values(rows, column) if is_missing(value))
            for column in union_columns(rows)
        }

    def _calculate_numeric_stats(self, values, missing: int) -> NumericColumnStatistics:
        numbers = sorted(
            number for number in (to_number(value) for value in values)
            if number is not None
        )
        numeric_array = np.array(numbers, dtype=np.float64)

        return NumericColumnStatistics(
            count=len(numbers),
            missing=missing,
            mean=float(np.mean(numeric_array)),
            median=numbers[len(numbers) // 2],
            min_value=numbers[0],
            max_value=numbers[-1],
            std_dev=float(np.std(numeric_array)),
            outlier_count=self.outlier_detector.detect_outliers(numbers).count
        )
