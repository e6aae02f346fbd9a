"""
TabSense Engine Constants.

This module defines the magic numbers, configuration defaults, and name
vocabularies used throughout the analysis engine. Centralizing these values
keeps the heuristics visible in one place and documents their purpose.
"""

# ============================================================================
# Type Inference Constants
# ============================================================================

# Numeric votes needed (with zero non-numeric votes) before type inference
# stops scanning a column and declares it numeric
NUMERIC_SHORT_CIRCUIT_THRESHOLD: int = 3


# ============================================================================
# Aggregation Constants
# ============================================================================

# Default number of categories returned by frequency ranking
DEFAULT_TOP_N: int = 5

# Default number of categories shown on a bar chart
DEFAULT_CHART_TOP_N: int = 10

# Bounds applied to a top-N quantity parsed from chat text
MIN_TOP_N: int = 1
MAX_TOP_N: int = 100

# Series name used when a chart shows plain counts (no group-by column)
COUNT_SERIES_NAME: str = "Count"

# Default number of values returned by top_numeric_values
DEFAULT_TOP_NUMERIC_VALUES: int = 10


# ============================================================================
# Outlier Detection Constants
# ============================================================================

# Z-score threshold for outlier detection
# Fixed heuristic: values more than 3 standard deviations from the mean are
# flagged. No distributional assumption is checked.
OUTLIER_Z_SCORE_THRESHOLD: float = 3.0

# Standard deviation substituted when a column has no spread
ZERO_STDDEV_FALLBACK: float = 1.0


# ============================================================================
# Validation Constants
# ============================================================================

# Maximum number of issues returned in a ValidationSummary
# Per-rule counts are always computed over the full issue set.
DEFAULT_MAX_ISSUES: int = 500

# Column names ending with one of these words are treated as identifiers
IDENTIFIER_NAME_PATTERN: str = r"(id|code|number)$"

# Column names containing one of these words are expected to hold dates
DATE_NAME_PATTERN: str = r"date|time|timestamp"

# Column names containing one of these words must not hold negative numbers
NON_NEGATIVE_METRIC_PATTERN: str = (
    r"(price|amount|total|quantity|qty|count|cost|revenue|sales|units)"
)

# Allowed values per column (exact, case-sensitive column name match)
DEFAULT_ALLOWED_VALUES: dict = {
    "Purchase Type": ["Online", "In-store"],
    "Payment Method": ["Credit Card", "Gift Card", "Cash", "Wire", "Debit Card"],
}


# ============================================================================
# Configuration Security Limits
# ============================================================================

# Maximum YAML configuration file size (1MB)
# A rules file holds a handful of patterns and value lists
MAX_YAML_FILE_SIZE: int = 1024 * 1024

# Top-level key of a rules configuration file
CONFIG_ROOT_KEY: str = "validation_rules"


# ============================================================================
# Logging Constants
# ============================================================================

# Default log message format
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Log date format
LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
