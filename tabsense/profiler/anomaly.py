"""
Z-score anomaly detection for numeric values.

A value is an outlier when its absolute z-score, computed with the
population mean and population standard deviation of the input, exceeds a
fixed threshold (3.0 by default). This is a heuristic flag, not a
statistical test: no distributional assumption is checked, and for n values
no z-score can exceed sqrt(n - 1), so inputs of ten values or fewer never
produce outliers at the default threshold.

A zero standard deviation is replaced by 1.0, so constant inputs flag
nothing instead of dividing by zero.
"""

from typing import Dict, Sequence

import numpy as np

from tabsense.core.constants import OUTLIER_Z_SCORE_THRESHOLD, ZERO_STDDEV_FALLBACK
from tabsense.core.logging_config import get_logger
from tabsense.core.scalars import Row, ScalarKind, classify_scalar, column_values, union_columns
from tabsense.profiler.profile_result import OutlierResult

logger = get_logger(__name__)


class OutlierDetector:
    """
    Z-score outlier detector shared by the statistics summary and chat replies.

    Attributes:
        threshold: Absolute z-score above which a value is flagged

    Example:
        >>> detector = OutlierDetector()
        >>> result = detector.detect_outliers([10.0] * 20 + [500.0])
        >>> result.count, result.values
        (1, [500.0])
    """

    def __init__(self, threshold: float = OUTLIER_Z_SCORE_THRESHOLD):
        self.threshold = threshold

    def detect_outliers(self, values: Sequence[float]) -> OutlierResult:
        """
        Flag values whose absolute z-score exceeds the threshold.

        Args:
            values: Numeric values (already coerced)

        Returns:
            OutlierResult with the count and the flagged values in input order
        """
        if len(values) == 0:
            return OutlierResult()

        array = np.asarray(values, dtype=np.float64)
        mean = float(np.mean(array))
        std = float(np.std(array)) or ZERO_STDDEV_FALLBACK

        z_scores = np.abs((array - mean) / std)
        outlier_mask = z_scores > self.threshold
        flagged = [float(value) for value in array[outlier_mask]]

        return OutlierResult(count=len(flagged), values=flagged)

    def outlier_report(self, rows: Sequence[Row]) -> Dict[str, int]:
        """
        Count outliers per column for an ad-hoc chat query.

        Only values stored as genuine numbers take part; numeric-looking
        strings are ignored. Columns without any number are left out.

        Args:
            rows: Row mappings

        Returns:
            Mapping of column name to outlier count, in column order
        """
        report: Dict[str, int] = {}
        for column in union_columns(rows):
            numbers = [
                float(value) for value in column_values(rows, column)
                if classify_scalar(value) is ScalarKind.NUMBER
            ]
            if not numbers:
                continue
            report[column] = self.detect_outliers(numbers).count

        logger.debug(f"Outlier report covers {len(report)} numeric columns")
        return report
