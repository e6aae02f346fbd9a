"""
Data structures for storing profiling results.

Contains the result classes produced by type inference, frequency
aggregation, statistical summarization, and outlier detection. Every result
is derived from the rows passed to a single call and is never cached.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, Optional, Union

import numpy as np


def convert_numpy_types(obj):
    """
    Recursively convert numpy types to Python native types for JSON serialization.

    Args:
        obj: Any object that might contain numpy types

    Returns:
        Object with numpy types converted to Python types
    """
    if isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_types(item) for item in obj]
    elif isinstance(obj, tuple):
        return tuple(convert_numpy_types(item) for item in obj)
    else:
        return obj


class ColumnType(Enum):
    """
    Inferred type of a column.

    A column is NUMERIC when most of its non-missing values coerce to
    numbers, TEXTUAL otherwise (including columns with no values at all).
    """
    NUMERIC = "numeric"
    TEXTUAL = "textual"


class StatisticsKind(Enum):
    """Discriminator for the ColumnStatistics variants."""
    EMPTY = "empty"
    NUMERIC = "numeric"
    TEXTUAL = "textual"


@dataclass(frozen=True)
class FrequencyEntry:
    """
    One distinct value of a column and how often it occurs.

    Attributes:
        value: Stringified value
        count: Number of rows holding the value (always >= 1)
    """
    value: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"value": self.value, "count": self.count}


@dataclass(frozen=True)
class ChartSpec:
    """
    Bar chart request.

    Column names always come from the current row set; building a spec for
    a column the data does not contain is a caller error.

    Attributes:
        category: Column whose values label the bars
        group_by: Optional column whose values become stacked series
        top_n: Optional number of category values to keep
    """
    category: str
    group_by: Optional[str] = None
    top_n: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"category": self.category, "group_by": self.group_by, "top_n": self.top_n}


@dataclass
class GroupedChartData:
    """
    Chart-ready records for a category column.

    Every record holds the category field plus exactly one numeric field per
    series name.

    Attributes:
        category: Name of the category column (key of the label field)
        data: One record per category value, in ranked order
        series: Series names, in first-seen order
    """
    category: str
    data: List[Dict[str, Any]] = field(default_factory=list)
    series: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "category": self.category,
            "data": [dict(record) for record in self.data],
            "series": list(self.series),
        }


@dataclass
class OutlierResult:
    """
    Values flagged by z-score outlier detection.

    Attributes:
        count: Number of flagged values
        values: Flagged values in input order
    """
    count: int = 0
    values: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"count": self.count, "values": convert_numpy_types(self.values)}


@dataclass
class EmptyColumnStatistics:
    """Statistics for a column with no non-missing values."""
    missing: int = 0

    kind = StatisticsKind.EMPTY

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"kind": self.kind.value, "missing": self.missing}


@dataclass
class NumericColumnStatistics:
    """
    Descriptive statistics for a numeric column.

    Attributes:
        count: Number of values that coerced to numbers
        missing: Number of rows with a missing value
        mean: Arithmetic mean
        median: Element at index n // 2 of the sorted values (the upper
            middle element for even n, not the averaged median)
        min_value: Smallest value
        max_value: Largest value
        std_dev: Population standard deviation (divides by n)
        outlier_count: Values with |z-score| > 3
    """
    count: int
    missing: int
    mean: float
    median: float
    min_value: float
    max_value: float
    std_dev: float
    outlier_count: int = 0

    kind = StatisticsKind.NUMERIC

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return convert_numpy_types({
            "kind": self.kind.value,
            "count": self.count,
            "missing": self.missing,
            "mean": self.mean,
            "median": self.median,
            "min": self.min_value,
            "max": self.max_value,
            "stddev": self.std_dev,
            "outlier_count": self.outlier_count,
        })


@dataclass
class TextColumnStatistics:
    """
    Statistics for a textual column.

    Attributes:
        count: Number of non-missing values
        missing: Number of rows with a missing value
        unique_count: Number of distinct stringified values
    """
    count: int
    missing: int
    unique_count: int

    kind = StatisticsKind.TEXTUAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "kind": self.kind.value,
            "count": self.count,
            "missing": self.missing,
            "unique_count": self.unique_count,
        }


ColumnStatistics = Union[EmptyColumnStatistics, NumericColumnStatistics, TextColumnStatistics]
