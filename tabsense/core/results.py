"""
Validation Result Classes.

This module defines dataclasses for storing validation results:
- ValidationIssue: One finding of one rule on one row
- ValidationSummary: Bounded issue list plus per-rule counts for a row set
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from enum import Enum


class RuleKind(Enum):
    """
    Kinds of data-quality rule.

    Each kind produces issues under a rule name that also carries the
    column, so issues can be counted per (kind, column) pair:

        DUPLICATE_IDENTIFIER -> "Duplicate Order Id"
        MISSING_REQUIRED     -> "Missing Order Id"
        INVALID_NUMBER       -> "Invalid number in Amount"
        NEGATIVE_METRIC      -> "Negative Amount"
        INVALID_DATE         -> "Invalid date in Order Date"
        ENUM_VIOLATION       -> "Unexpected Payment Method"
    """
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    MISSING_REQUIRED = "missing_required"
    INVALID_NUMBER = "invalid_number"
    NEGATIVE_METRIC = "negative_metric"
    INVALID_DATE = "invalid_date"
    ENUM_VIOLATION = "enum_violation"


@dataclass(frozen=True)
class ValidationIssue:
    """
    A single data-quality finding.

    Attributes:
        rule: Rule name, unique per (kind, column)
        message: Human-readable description
        row_index: 0-based index of the offending row
        column: Column the finding refers to
        value: Raw value found in the row (None when missing)
        kind: Rule kind that produced the issue

    Example:
        >>> issue = ValidationIssue(
        ...     rule="Duplicate Order Id",
        ...     message="Duplicate identifier A1",
        ...     row_index=2,
        ...     column="Order Id",
        ...     value="A1",
        ...     kind=RuleKind.DUPLICATE_IDENTIFIER
        ... )
    """

    rule: str
    message: str
    row_index: int
    column: Optional[str] = None
    value: Any = None
    kind: Optional[RuleKind] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rule": self.rule,
            "message": self.message,
            "row_index": self.row_index,
            "column": self.column,
            "value": self.value,
            "kind": self.kind.value if self.kind else None,
        }


@dataclass
class ValidationSummary:
    """
    Outcome of validating a row set.

    The issue list is truncated to the requested bound, but counts_per_rule
    and total_issues always describe the full, untruncated set of findings.

    Attributes:
        issues: Issues in generation order, at most max_issues long
        counts_per_rule: Rule name -> number of issues over the full set
        total_issues: Number of issues before truncation
    """

    issues: List[ValidationIssue] = field(default_factory=list)
    counts_per_rule: Dict[str, int] = field(default_factory=dict)
    total_issues: int = 0

    @property
    def truncated(self) -> bool:
        """True when some issues were left out of the issue list."""
        return self.total_issues > len(self.issues)

    def has_issues(self) -> bool:
        return self.total_issues > 0

    def issues_for_rule(self, rule: str) -> List[ValidationIssue]:
        """Return the listed issues of one rule (bounded like the issue list)."""
        return [issue for issue in self.issues if issue.rule == rule]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "counts_per_rule": dict(self.counts_per_rule),
            "total_issues": self.total_issues,
            "truncated": self.truncated,
        }
