"""
Analysis engine - single entry point over the analysis components.

The engine:
1. Holds one configured instance of every component
2. Accepts rows (or a pandas DataFrame) on each call
3. Returns the structured result objects for the presentation layer

The engine keeps no state between calls: each call recomputes its result
from the rows it is given, so one engine can serve concurrent callers as
long as the rows are not mutated during a call.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from tabsense.chat.assistant import ChatAssistant, ChatReply
from tabsense.chat.commands import CommandParser
from tabsense.core.config import ValidationRulesConfig
from tabsense.core.constants import DEFAULT_CHART_TOP_N, DEFAULT_TOP_N, DEFAULT_TOP_NUMERIC_VALUES
from tabsense.core.logging_config import get_logger
from tabsense.core.results import ValidationSummary
from tabsense.core.scalars import Row, rows_from_dataframe, union_columns
from tabsense.profiler.anomaly import OutlierDetector
from tabsense.profiler.frequency import FrequencyAggregator
from tabsense.profiler.profile_result import (
    ChartSpec,
    ColumnStatistics,
    ColumnType,
    FrequencyEntry,
    GroupedChartData,
    OutlierResult,
)
from tabsense.profiler.statistics_calculator import StatisticsCalculator
from tabsense.profiler.type_inferrer import TypeInferrer
from tabsense.validations.rule_engine import ValidationRuleEngine

logger = get_logger(__name__)

RowsLike = Union[Sequence[Row], pd.DataFrame]


class AnalysisEngine:
    """
    Facade bundling type inference, aggregation, statistics, outlier
    detection, validation, and chat command handling.

    Example usage:
        engine = AnalysisEngine.from_config('rules.yaml')
        summary = engine.summarize(rows)
        issues = engine.validate(rows, max_issues=100)
        spec = engine.parse_command("visualize City with Payment Method", rows)
        chart = engine.build_chart(rows, spec)
    """

    def __init__(self, config: Optional[ValidationRulesConfig] = None) -> None:
        """
        Initialize the analysis engine.

        Args:
            config: Validation rules configuration (default: built-in rules)
        """
        self.config: ValidationRulesConfig = config or ValidationRulesConfig()
        self.type_inferrer = TypeInferrer()
        self.outlier_detector = OutlierDetector()
        self.frequency_aggregator = FrequencyAggregator(self.type_inferrer)
        self.statistics_calculator = StatisticsCalculator(self.type_inferrer, self.outlier_detector)
        self.rule_engine = ValidationRuleEngine(self.config, self.type_inferrer)
        self.command_parser = CommandParser()
        self.assistant = ChatAssistant(
            statistics_calculator=self.statistics_calculator,
            outlier_detector=self.outlier_detector,
            frequency_aggregator=self.frequency_aggregator,
            command_parser=self.command_parser
        )

    @classmethod
    def from_config(cls, config_path: Union[str, Path]) -> "AnalysisEngine":
        """
        Create engine from a YAML rules file.

        Raises:
            ConfigError: If configuration is invalid
        """
        return cls(ValidationRulesConfig.from_yaml(config_path))

    def columns(self, rows: RowsLike) -> List[str]:
        """Union of column names in first-seen order."""
        return union_columns(self._as_rows(rows))

    def classify(self, rows: RowsLike, column: str) -> ColumnType:
        return self.type_inferrer.classify(self._as_rows(rows), column)

    def top_frequencies(self, rows: RowsLike, column: str, top_n: int = DEFAULT_TOP_N) -> List[FrequencyEntry]:
        return self.frequency_aggregator.top_frequencies(self._as_rows(rows), column, top_n)

    def build_grouped(
        self,
        rows: RowsLike,
        category: str,
        group_by: str,
        top_n: int = DEFAULT_CHART_TOP_N
    ) -> GroupedChartData:
        return self.frequency_aggregator.build_grouped(self._as_rows(rows), category, group_by, top_n)

    def build_chart(self, rows: RowsLike, spec: ChartSpec) -> GroupedChartData:
        return self.frequency_aggregator.build_chart(self._as_rows(rows), spec)

    def top_numeric_values(
        self,
        rows: RowsLike,
        column: str,
        top_n: int = DEFAULT_TOP_NUMERIC_VALUES
    ) -> List[float]:
        return self.frequency_aggregator.top_numeric_values(self._as_rows(rows), column, top_n)

    def summarize(self, rows: RowsLike) -> Dict[str, ColumnStatistics]:
        return self.statistics_calculator.summarize(self._as_rows(rows))

    def missing_counts(self, rows: RowsLike) -> Dict[str, int]:
        return self.statistics_calculator.missing_counts(self._as_rows(rows))

    def detect_outliers(self, values: Sequence[float]) -> OutlierResult:
        return self.outlier_detector.detect_outliers(values)

    def outlier_report(self, rows: RowsLike) -> Dict[str, int]:
        return self.outlier_detector.outlier_report(self._as_rows(rows))

    def validate(self, rows: RowsLike, max_issues: Optional[int] = None) -> ValidationSummary:
        return self.rule_engine.validate(self._as_rows(rows), max_issues)

    def parse_command(self, text: str, rows: RowsLike) -> Optional[ChartSpec]:
        return self.command_parser.parse(text, self._as_rows(rows))

    def respond(self, text: str, rows: RowsLike) -> ChatReply:
        return self.assistant.respond(text, self._as_rows(rows))

    @staticmethod
    def _as_rows(rows: RowsLike) -> Sequence[Row]:
        if isinstance(rows, pd.DataFrame):
            logger.debug(f"Converting DataFrame with {len(rows)} rows")
            return rows_from_dataframe(rows)
        return rows
