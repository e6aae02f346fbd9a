"""
Frequency Aggregator - value counts and grouped counts for bar charts.

Values are stringified before counting (so 5, 5.0 and "5" share a bucket)
and missing values are skipped. Rankings are by descending count with ties
kept in first-seen order: counts live in an insertion-ordered dict and
sorted() is stable.

Grouped aggregation selects the top categories FIRST and only then
cross-tabulates them against the group-by column, so a rare category is
dropped even if it dominates one group. Series follow the categories'
first-seen order and, within a category, the order its groups appear.

Usage:
    aggregator = FrequencyAggregator()
    entries = aggregator.top_frequencies(rows, "Product", top_n=10)
    grouped = aggregator.build_grouped(rows, "City", "Payment Method", top_n=5)
"""

from typing import Dict, List, Optional, Sequence

from tabsense.core.constants import (
    COUNT_SERIES_NAME,
    DEFAULT_CHART_TOP_N,
    DEFAULT_TOP_N,
    DEFAULT_TOP_NUMERIC_VALUES,
)
from tabsense.core.logging_config import get_logger
from tabsense.core.scalars import (
    Row,
    column_values,
    is_missing,
    require_column,
    stringify,
    to_number,
)
from tabsense.profiler.profile_result import (
    ChartSpec,
    ColumnType,
    FrequencyEntry,
    GroupedChartData,
)
from tabsense.profiler.type_inferrer import TypeInferrer

logger = get_logger(__name__)


class FrequencyAggregator:
    """
    Frequency ranking and cross-tabulation over row data.

    Attributes:
        type_inferrer: Used by build_chart to detect numeric categories

    Example:
        >>> rows = [{"Product": "A"}, {"Product": "A"}, {"Product": "B"}]
        >>> FrequencyAggregator().top_frequencies(rows, "Product", 10)
        [FrequencyEntry(value='A', count=2), FrequencyEntry(value='B', count=1)]
    """

    def __init__(self, type_inferrer: Optional[TypeInferrer] = None):
        self.type_inferrer = type_inferrer or TypeInferrer()

    def top_frequencies(
        self,
        rows: Sequence[Row],
        column: str,
        top_n: int = DEFAULT_TOP_N
    ) -> List[FrequencyEntry]:
        """
        Rank the distinct values of a column by occurrence count.

        Args:
            rows: Row mappings
            column: Column to count
            top_n: Maximum number of entries returned

        Returns:
            At most top_n entries, descending by count, ties in first-seen order

        Raises:
            ColumnNotFoundError: If rows are non-empty and no row has the column
        """
        require_column(rows, column, "top_frequencies")
        if top_n <= 0:
            return []

        counts = self._count_values(rows, column)
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

        return [FrequencyEntry(value=value, count=count) for value, count in ranked[:top_n]]

    def build_grouped(
        self,
        rows: Sequence[Row],
        category: str,
        group_by: str,
        top_n: int = DEFAULT_CHART_TOP_N
    ) -> GroupedChartData:
        """
        Cross-tabulate the top categories against a group-by column.

        Only rows where both values are present and the category is among
        the top_n ranked values are counted. Every group value seen among
        those rows becomes a series; each output record carries all series
        (0 where a category never met a group). Series are ordered by
        category (first-seen row order), then by first appearance within
        that category. A group value equal to the category column's name is
        renamed with a numeric suffix ("Type 2") so it cannot overwrite the
        category label.

        Args:
            rows: Row mappings
            category: Column labelling the bars
            group_by: Column whose values become series
            top_n: Number of category values kept

        Returns:
            GroupedChartData with one record per selected category, in rank order

        Raises:
            ColumnNotFoundError: If either column is absent from non-empty rows
        """
        require_column(rows, group_by, "build_grouped")
        top_categories = [entry.value for entry in self.top_frequencies(rows, category, top_n)]
        selected = set(top_categories)

        groups: Dict[str, Dict[str, int]] = {}

        for row in rows:
            if not row:
                continue
            category_value = row.get(category)
            group_value = row.get(group_by)
            if is_missing(category_value) or is_missing(group_value):
                continue

            category_key = stringify(category_value)
            if category_key not in selected:
                continue

            group_key = stringify(group_value)
            counts = groups.setdefault(category_key, {})
            counts[group_key] = counts.get(group_key, 0) + 1

        group_keys: Dict[str, None] = {}
        for counts in groups.values():
            for group_key in counts:
                group_keys.setdefault(group_key, None)
        series_map = self._series_names(list(group_keys), category)
        series_names = list(series_map.values())

        data = []
        for category_key in top_categories:
            counts = groups.get(category_key, {})
            record = {category: category_key}
            for group_key, name in series_map.items():
                record[name] = counts.get(group_key, 0)
            data.append(record)

        logger.debug(
            f"Grouped '{category}' by '{group_by}': "
            f"{len(data)} categories, {len(series_names)} series"
        )
        return GroupedChartData(category=category, data=data, series=series_names)

    def build_counts(
        self,
        rows: Sequence[Row],
        category: str,
        top_n: int = DEFAULT_CHART_TOP_N
    ) -> GroupedChartData:
        """Build chart records with a single count series for a category."""
        entries = self.top_frequencies(rows, category, top_n)
        data = [{category: entry.value, COUNT_SERIES_NAME: entry.count} for entry in entries]
        return GroupedChartData(category=category, data=data, series=[COUNT_SERIES_NAME])

    def build_chart(self, rows: Sequence[Row], spec: ChartSpec) -> GroupedChartData:
        """
        Build the records for a chart request.

        A numeric category column, or a spec without group_by, is drawn as
        plain value counts (numeric values are not binned). Otherwise the
        category is cross-tabulated against group_by.

        Args:
            rows: Row mappings
            spec: Chart request; top_n defaults to DEFAULT_CHART_TOP_N

        Returns:
            GroupedChartData ready for a bar chart
        """
        top_n = spec.top_n if spec.top_n is not None else DEFAULT_CHART_TOP_N
        require_column(rows, spec.category, "build_chart")

        if spec.group_by is None:
            return self.build_counts(rows, spec.category, top_n)

        if self.type_inferrer.classify(rows, spec.category) is ColumnType.NUMERIC:
            logger.debug(f"Category '{spec.category}' is numeric; ignoring group-by '{spec.group_by}'")
            return self.build_counts(rows, spec.category, top_n)

        return self.build_grouped(rows, spec.category, spec.group_by, top_n)

    def top_numeric_values(
        self,
        rows: Sequence[Row],
        column: str,
        top_n: int = DEFAULT_TOP_NUMERIC_VALUES
    ) -> List[float]:
        """
        Return the largest numeric values of a column, descending.

        Values that do not coerce to numbers are skipped.
        """
        require_column(rows, column, "top_numeric_values")
        if top_n <= 0:
            return []

        numbers = [
            number for number in (to_number(value) for value in column_values(rows, column))
            if number is not None
        ]
        numbers.sort(reverse=True)
        return numbers[:top_n]

    @staticmethod
    def _series_names(group_keys: List[str], category: str) -> Dict[str, str]:
        """Map group values to series names that never shadow the category field."""
        taken = set(group_keys) | {category}
        names: Dict[str, str] = {}
        for group_key in group_keys:
            name = group_key
            if name == category:
                suffix = 2
                while f"{group_key} {suffix}" in taken:
                    suffix += 1
                name = f"{group_key} {suffix}"
                taken.add(name)
            names[group_key] = name
        return names

    @staticmethod
    def _count_values(rows: Sequence[Row], column: str) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for value in column_values(rows, column):
            if is_missing(value):
                continue
            key = stringify(value)
            counts[key] = counts.get(key, 0) + 1
        return counts
