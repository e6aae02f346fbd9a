"""
TabSense Exception Hierarchy.

This module defines the exception hierarchy for the analysis engine, giving
every error raised by the engine a severity and a structured details
dictionary.

Malformed data values are never raised: they are reported as validation
issues. Exceptions are reserved for configuration problems and for caller
errors such as asking about a column the row set does not contain.

Exception Severity Levels:
    - FATAL: The engine cannot be constructed (bad configuration)
    - CRITICAL: The requested operation cannot proceed (bad arguments)
    - RECOVERABLE: The request failed, other requests are unaffected
    - WARNING: Non-critical issue, log and continue
"""

from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorSeverity(Enum):
    """
    Classify error severity for handling decisions.

    Attributes:
        FATAL: Unrecoverable error, engine cannot be used
        CRITICAL: Operation-level error, this request cannot proceed
        RECOVERABLE: Request failed, engine remains usable
        WARNING: Non-critical issue, log and continue
    """
    FATAL = "fatal"
    CRITICAL = "critical"
    RECOVERABLE = "recoverable"
    WARNING = "warning"


class TabSenseException(Exception):
    """
    Base exception for all TabSense errors with enhanced context.

    All TabSense exceptions inherit from this base class, providing:
    - Severity classification for handling decisions
    - Structured details dictionary for logging/reporting
    - Original exception preservation for debugging
    - Serialization support for JSON/dict output

    Attributes:
        message (str): Human-readable error message
        severity (ErrorSeverity): Error severity level
        details (Dict[str, Any]): Additional context (column, operation, etc.)
        original_exception (Optional[Exception]): Original exception if wrapping

    Example:
        >>> try:
        ...     pattern = re.compile(raw_pattern)
        ... except re.error as e:
        ...     raise TabSenseException(
        ...         "Invalid pattern",
        ...         severity=ErrorSeverity.FATAL,
        ...         details={'pattern': raw_pattern},
        ...         original_exception=e
        ...     )
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize TabSense exception.

        Args:
            message: Human-readable error description
            severity: Error severity level (default: RECOVERABLE)
            details: Additional context dictionary
            original_exception: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for logging/reporting.

        Returns:
            Dictionary containing exception details suitable for JSON serialization

        Example:
            >>> exc = TabSenseException("Test error", details={'column': 'City'})
            >>> exc.to_dict()
            {
                'type': 'TabSenseException',
                'message': 'Test error',
                'severity': 'recoverable',
                'details': {'column': 'City'},
                'original_error': None
            }
        """
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'severity': self.severity.value,
            'details': self.details,
            'original_error': str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Configuration Errors (Fatal)
# ============================================================================

class ConfigError(TabSenseException):
    """
    Rules configuration errors (fatal - the engine cannot be built).

    Raised when:
    - Configuration file not found
    - Invalid YAML syntax
    - Invalid configuration structure

    Attributes:
        field (Optional[str]): Specific config field that caused error

    Example:
        >>> raise ConfigError(
        ...     "Configuration must have 'validation_rules' key",
        ...     field="validation_rules"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize configuration error.

        Args:
            message: Error description
            field: Specific config field that failed (optional)
            original_exception: Original exception if wrapping
        """
        super().__init__(
            message,
            severity=ErrorSeverity.FATAL,
            details={'field': field} if field else {},
            original_exception=original_exception
        )
        self.field = field


class YAMLSizeError(ConfigError):
    """
    YAML file too large.

    Raised when a rules file exceeds the maximum allowed size.

    Example:
        >>> raise YAMLSizeError(
        ...     "Config file exceeds 1MB limit",
        ...     file_size=1500000,
        ...     max_size=1048576
        ... )
    """

    def __init__(self, message: str, file_size: Optional[int] = None, max_size: Optional[int] = None):
        """
        Initialize YAML size error.

        Args:
            message: Error description
            file_size: Actual file size in bytes
            max_size: Maximum allowed size in bytes
        """
        super().__init__(message)
        self.details.update({
            'file_size': file_size,
            'max_size': max_size
        })


class ConfigValidationError(ConfigError):
    """
    Configuration value has the wrong shape or cannot be used.

    Example:
        >>> raise ConfigValidationError(
        ...     "Invalid regular expression for 'date_pattern'",
        ...     field="date_pattern",
        ...     expected="valid regular expression",
        ...     actual="date|("
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize config validation error.

        Args:
            message: Error description
            field: Config field that failed validation
            expected: Expected value or type
            actual: Actual value found
            original_exception: Original exception if wrapping
        """
        super().__init__(message, field, original_exception=original_exception)
        self.details.update({
            'expected': expected,
            'actual': actual
        })


# ============================================================================
# Analysis Errors (Recoverable/Critical)
# ============================================================================

class AnalysisError(TabSenseException):
    """
    Error raised by an analysis operation.

    Raised when an aggregation, summary, or validation request cannot be
    answered (not when data is of poor quality - that produces a
    ValidationSummary).

    Attributes:
        operation (str): Name of the operation that failed
    """

    def __init__(
        self,
        message: str,
        operation: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize analysis error.

        Args:
            message: Error description
            operation: Name of the operation that failed
            severity: Error severity level (default: RECOVERABLE)
            original_exception: Original exception if wrapping
        """
        super().__init__(
            message,
            severity=severity,
            details={'operation': operation},
            original_exception=original_exception
        )
        self.operation = operation


class ParameterValidationError(AnalysisError):
    """
    Invalid argument passed to an analysis operation.

    Example:
        >>> raise ParameterValidationError(
        ...     "max_issues must be >= 0",
        ...     operation="validate",
        ...     parameter="max_issues",
        ...     value=-1
        ... )
    """

    def __init__(
        self,
        message: str,
        operation: str,
        parameter: str,
        value: Any
    ):
        """
        Initialize parameter validation error.

        Args:
            message: Error description
            operation: Name of the operation
            parameter: Parameter name that's invalid
            value: Invalid parameter value
        """
        super().__init__(message, operation, severity=ErrorSeverity.CRITICAL)
        self.details.update({
            'parameter': parameter,
            'value': value
        })
        self.parameter = parameter
        self.value = value


class ColumnNotFoundError(AnalysisError):
    """
    Requested column does not occur in any row.

    This is the explicit "column not found" outcome of an aggregation:
    the engine never answers such a request with silently empty output.
    Empty row sets are not affected and yield empty results.

    Example:
        >>> raise ColumnNotFoundError(
        ...     operation="top_frequencies",
        ...     column="Cty",
        ...     available_columns=["City", "Amount"]
        ... )
    """

    def __init__(
        self,
        operation: str,
        column: str,
        available_columns: List[str]
    ):
        """
        Initialize column not found error.

        Args:
            operation: Name of the operation
            column: Column that's missing
            available_columns: List of available columns
        """
        super().__init__(
            f"Column '{column}' not found in data. Available: {', '.join(available_columns)}",
            operation,
            severity=ErrorSeverity.CRITICAL
        )
        self.details.update({
            'column': column,
            'available_columns': available_columns
        })
        self.column = column
        self.available_columns = available_columns
