"""
Validation rule engine - runs the built-in data-quality rules over a row set.

Execution order:
    1. Type inference for every column (feeds the numeric rules)
    2. Duplicate identifier pass, column by column, row by row
    3. One row-major pass: for each row, for each column, every applicable
       row-wise rule (missing, invalid number, negative, date, allowed values)

All issues are collected, counted per rule, and only then truncated to
max_issues, so counts_per_rule always reflects the full issue set.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from tabsense.core.config import ValidationRulesConfig
from tabsense.core.exceptions import ParameterValidationError
from tabsense.core.logging_config import get_logger
from tabsense.core.results import ValidationIssue, ValidationSummary
from tabsense.core.scalars import Row, union_columns
from tabsense.profiler.profile_result import ColumnType
from tabsense.profiler.type_inferrer import TypeInferrer
from tabsense.validations.base import ColumnRule, RuleContext
from tabsense.validations.builtin.column_checks import (
    AllowedValuesCheck,
    DuplicateIdentifierCheck,
    InvalidDateCheck,
    InvalidNumberCheck,
    MissingRequiredFieldCheck,
    NegativeMetricCheck,
)

logger = get_logger(__name__)


class ValidationRuleEngine:
    """
    Applies the data-quality rules to rows and builds a ValidationSummary.

    Example:
        >>> engine = ValidationRuleEngine()
        >>> rows = [{"Order Id": "A1"}, {"Order Id": "A2"}, {"Order Id": "A1"}]
        >>> summary = engine.validate(rows)
        >>> [(issue.rule, issue.row_index) for issue in summary.issues]
        [('Duplicate Order Id', 2)]
    """

    def __init__(
        self,
        config: Optional[ValidationRulesConfig] = None,
        type_inferrer: Optional[TypeInferrer] = None
    ) -> None:
        """
        Initialize the rule engine.

        Args:
            config: Rules configuration (default: built-in vocabulary)
            type_inferrer: Type inference used to find numeric columns
        """
        self.config: ValidationRulesConfig = config or ValidationRulesConfig()
        self.type_inferrer: TypeInferrer = type_inferrer or TypeInferrer()
        self.column_rules: List[ColumnRule] = [DuplicateIdentifierCheck(self.config)]
        self.row_rules: List[ColumnRule] = [
            MissingRequiredFieldCheck(self.config),
            InvalidNumberCheck(self.config),
            NegativeMetricCheck(self.config),
            InvalidDateCheck(self.config),
            AllowedValuesCheck(self.config),
        ]

    def validate(self, rows: Sequence[Row], max_issues: Optional[int] = None) -> ValidationSummary:
        """
        Validate a row set.

        Args:
            rows: Row mappings (never modified)
            max_issues: Bound on the returned issue list
                (default: config.max_issues, 500 unless configured)

        Returns:
            ValidationSummary; empty when rows is empty

        Raises:
            ParameterValidationError: If max_issues is negative
        """
        limit = self.config.max_issues if max_issues is None else max_issues
        if limit < 0:
            raise ParameterValidationError(
                f"max_issues must be >= 0, got {limit}",
                operation="validate",
                parameter="max_issues",
                value=limit
            )

        if not rows:
            return ValidationSummary()

        context = self._build_context(rows)
        issues: List[ValidationIssue] = []

        for rule in self.column_rules:
            for column in context.columns:
                if rule.applies_to(column, context):
                    issues.extend(rule.scan_column(rows, column))

        issues.extend(self._run_row_rules(rows, context))

        counts_per_rule: Dict[str, int] = {}
        for issue in issues:
            counts_per_rule[issue.rule] = counts_per_rule.get(issue.rule, 0) + 1

        summary = ValidationSummary(
            issues=issues[:limit],
            counts_per_rule=counts_per_rule,
            total_issues=len(issues)
        )

        logger.info(
            f"Validated {context.row_count} rows x {len(context.columns)} columns: "
            f"{summary.total_issues} issues across {len(counts_per_rule)} rules"
        )
        if summary.truncated:
            logger.info(f"Issue list truncated to {limit} of {summary.total_issues}")

        return summary

    def describe_rules(self) -> List[str]:
        """List the human-readable descriptions of the active rules."""
        return [rule.get_description() for rule in self.column_rules + self.row_rules]

    def _build_context(self, rows: Sequence[Row]) -> RuleContext:
        columns = union_columns(rows)
        numeric_columns = frozenset(
            column for column in columns
            if self.type_inferrer.classify(rows, column) is ColumnType.NUMERIC
        )
        logger.debug(f"Numeric columns: {sorted(numeric_columns)}")
        return RuleContext(columns=columns, numeric_columns=numeric_columns, row_count=len(rows))

    def _run_row_rules(self, rows: Sequence[Row], context: RuleContext) -> List[ValidationIssue]:
        active: List[Tuple[str, List[ColumnRule]]] = []
        for column in context.columns:
            rules = [rule for rule in self.row_rules if rule.applies_to(column, context)]
            if rules:
                active.append((column, rules))

        issues: List[ValidationIssue] = []
        for row_index, row in enumerate(rows):
            for column, rules in active:
                value = row.get(column) if row else None
                for rule in rules:
                    issue = rule.check_value(row_index, column, value)
                    if issue is not None:
                        issues.append(issue)
        return issues
