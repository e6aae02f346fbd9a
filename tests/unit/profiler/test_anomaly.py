"""
Unit tests for anomaly.py

Tests z-score outlier detection and the per-column outlier report.
"""

import math

import pytest

from tabsense.profiler.anomaly import OutlierDetector


@pytest.fixture
def detector():
    return OutlierDetector()


@pytest.mark.unit
class TestDetectOutliers:
    """Test z-score flagging."""

    def test_flags_extreme_value(self, detector):
        result = detector.detect_outliers([10.0] * 20 + [500.0])

        assert result.count == 1
        assert result.values == [500.0]

    def test_flags_low_and_high_in_input_order(self, detector):
        values = [-400.0] + [0.0] * 40 + [400.0]

        result = detector.detect_outliers(values)

        assert result.values == [-400.0, 400.0]

    def test_constant_values_flag_nothing(self, detector):
        result = detector.detect_outliers([7.0] * 50)

        assert result.count == 0
        assert result.values == []

    def test_empty_input(self, detector):
        result = detector.detect_outliers([])

        assert result.count == 0
        assert result.to_dict() == {"count": 0, "values": []}

    @pytest.mark.parametrize("n", [2, 5, 10])
    def test_small_samples_never_flag(self, detector, n):
        """For n values the largest possible |z| is sqrt(n - 1)."""
        values = [0.0] * (n - 1) + [1e9]

        assert math.sqrt(n - 1) <= 3.0
        assert detector.detect_outliers(values).count == 0

    def test_threshold_is_strict(self):
        # Ten zeros and one 10: z of the 10 is exactly sqrt(10) ~ 3.162
        values = [0.0] * 10 + [10.0]

        assert OutlierDetector(threshold=3.0).detect_outliers(values).count == 1
        assert OutlierDetector(threshold=math.sqrt(10) + 1e-9).detect_outliers(values).count == 0


@pytest.mark.unit
class TestOutlierReport:
    """Test per-column outlier counts."""

    def test_counts_per_numeric_column(self, detector):
        rows = [{"Amount": 10, "City": "Oslo"} for _ in range(20)]
        rows.append({"Amount": 500, "City": "Rome"})

        assert detector.outlier_report(rows) == {"Amount": 1}

    def test_numeric_strings_ignored(self, detector):
        rows = [{"Amount": "10"} for _ in range(20)] + [{"Amount": "500"}]

        assert detector.outlier_report(rows) == {}

    def test_booleans_and_missing_ignored(self, detector):
        rows = [{"Flag": True}, {"Flag": None}, {"Score": 3}]

        assert detector.outlier_report(rows) == {"Score": 0}

    def test_empty_rows(self, detector):
        assert detector.outlier_report([]) == {}
