"""
Chat command parser - maps free text onto a ChartSpec.

This is a best-effort keyword heuristic, not language understanding:

    - top-N:    "top 10" or "up to 7", clamped to [1, 100]
    - category: the first column (in first-seen column order) whose name
                occurs anywhere in the text, case-insensitively
    - group-by: only when the text contains " with "; the first other column
                whose name occurs in the text

Matching is plain substring search with no longest-match preference: a
column named "a" matches nearly any sentence, and when one column name is
contained in another the column order decides. Callers get None when no
column is mentioned and should offer another way to build the chart.

Example:
    >>> rows = [{"City": "Oslo", "Payment Method": "Cash", "Amount": 3}]
    >>> CommandParser().parse("visualize City with Payment Method top 5", rows)
    ChartSpec(category='City', group_by='Payment Method', top_n=5)
"""

import re
from typing import Optional, Sequence

from tabsense.core.constants import MAX_TOP_N, MIN_TOP_N
from tabsense.core.logging_config import get_logger
from tabsense.core.scalars import Row, union_columns
from tabsense.profiler.profile_result import ChartSpec

logger = get_logger(__name__)

TOP_N_PATTERN = re.compile(r'(?:top|up to)\s+(\d{1,3})', re.IGNORECASE)
GROUP_BY_MARKER = " with "


class CommandParser:
    """Heuristic parser turning chat text into chart requests."""

    def __init__(self, min_top_n: int = MIN_TOP_N, max_top_n: int = MAX_TOP_N):
        self.min_top_n = min_top_n
        self.max_top_n = max_top_n

    def parse(self, text: str, rows: Sequence[Row]) -> Optional[ChartSpec]:
        """
        Parse a chart command against the columns of ``rows``.

        Args:
            text: User input
            rows: Current row set; its columns are the match candidates

        Returns:
            ChartSpec, or None when no column could be identified
        """
        return self.parse_columns(text, union_columns(rows))

    def parse_columns(self, text: str, columns: Sequence[str]) -> Optional[ChartSpec]:
        """Parse a chart command against an explicit, ordered column list."""
        if not columns:
            return None

        lower = text.lower()
        top_n = self.extract_top_n(lower)

        category = self._first_mentioned(lower, columns)
        if category is None:
            logger.debug(f"No column mentioned in command: {text!r}")
            return None

        group_by = None
        if GROUP_BY_MARKER in lower:
            group_by = self._first_mentioned(lower, columns, exclude=category)

        return ChartSpec(category=category, group_by=group_by, top_n=top_n)

    def extract_top_n(self, text: str) -> Optional[int]:
        """Return the clamped top-N quantity in ``text``, or None."""
        match = TOP_N_PATTERN.search(text)
        if not match:
            return None
        return max(self.min_top_n, min(self.max_top_n, int(match.group(1))))

    @staticmethod
    def _first_mentioned(
        lower_text: str,
        columns: Sequence[str],
        exclude: Optional[str] = None
    ) -> Optional[str]:
        for column in columns:
            if column == exclude:
                continue
            if column.lower() in lower_text:
                return column
        return None
