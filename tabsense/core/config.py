"""Validation rules configuration parsing and validation."""

import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import yaml

from tabsense.core.constants import (
    CONFIG_ROOT_KEY,
    DATE_NAME_PATTERN,
    DEFAULT_ALLOWED_VALUES,
    DEFAULT_MAX_ISSUES,
    IDENTIFIER_NAME_PATTERN,
    MAX_YAML_FILE_SIZE,
    NON_NEGATIVE_METRIC_PATTERN,
)
from tabsense.core.exceptions import ConfigError, ConfigValidationError, YAMLSizeError
from tabsense.core.scalars import stringify

PatternLike = Union[str, re.Pattern]


class ValidationRulesConfig:
    """
    Dataset-specific settings of the validation rule engine.

    The name vocabularies decide which columns a rule looks at; the allowed
    values table lists, per exact column name, the only values that column
    may hold. Defaults reproduce the built-in retail vocabulary.

    Example:
        >>> config = ValidationRulesConfig(allowed_values={"Status": ["Open", "Closed"]})
        >>> config.is_identifier_column("Order Id")
        True
        >>> config.allowed_values_for("Status")
        ('Open', 'Closed')
    """

    MAX_YAML_FILE_SIZE = MAX_YAML_FILE_SIZE

    def __init__(
        self,
        identifier_pattern: PatternLike = IDENTIFIER_NAME_PATTERN,
        date_pattern: PatternLike = DATE_NAME_PATTERN,
        non_negative_pattern: PatternLike = NON_NEGATIVE_METRIC_PATTERN,
        allowed_values: Optional[Mapping[str, Sequence[Any]]] = None,
        max_issues: int = DEFAULT_MAX_ISSUES
    ):
        """
        Initialize the rules configuration.

        Args:
            identifier_pattern: Regex searched in column names to find identifiers
            date_pattern: Regex searched in column names to find date columns
            non_negative_pattern: Regex searched in column names to find metrics
            allowed_values: Column name -> allowed values (None: built-in table)
            max_issues: Default bound on the returned issue list

        Raises:
            ConfigValidationError: If a pattern or value is unusable
        """
        self.identifier_pattern = self._compile_pattern("identifier_pattern", identifier_pattern)
        self.date_pattern = self._compile_pattern("date_pattern", date_pattern)
        self.non_negative_pattern = self._compile_pattern("non_negative_pattern", non_negative_pattern)
        self.allowed_values = self._parse_allowed_values(
            DEFAULT_ALLOWED_VALUES if allowed_values is None else allowed_values
        )
        self.max_issues = self._parse_max_issues(max_issues)

    @classmethod
    def from_dict(cls, config_dict: Optional[Mapping[str, Any]]) -> "ValidationRulesConfig":
        """
        Build configuration from a dictionary.

        Accepts either the section itself or a mapping holding it under the
        'validation_rules' key. Keys that are not given keep their defaults.

        Raises:
            ConfigError: If the structure is not a mapping
        """
        if config_dict is None:
            return cls()
        if not isinstance(config_dict, Mapping):
            raise ConfigError("Rules configuration must be a mapping", field=CONFIG_ROOT_KEY)

        section = config_dict.get(CONFIG_ROOT_KEY, config_dict)
        if section is None:
            return cls()
        if not isinstance(section, Mapping):
            raise ConfigError(f"'{CONFIG_ROOT_KEY}' must be a mapping", field=CONFIG_ROOT_KEY)

        known = {
            "identifier_pattern",
            "date_pattern",
            "non_negative_pattern",
            "allowed_values",
            "max_issues",
        }
        unknown = sorted(str(key) for key in section if key not in known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown rules configuration keys: {', '.join(unknown)}",
                field=CONFIG_ROOT_KEY,
                expected=", ".join(sorted(known)),
                actual=", ".join(unknown)
            )

        return cls(**{key: section[key] for key in known if key in section})

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "ValidationRulesConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ValidationRulesConfig instance

        Raises:
            ConfigError: If file not found or invalid
            YAMLSizeError: If file exceeds size limit
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        file_size = os.path.getsize(config_file)
        if file_size > cls.MAX_YAML_FILE_SIZE:
            raise YAMLSizeError(
                f"Configuration file too large: {file_size:,} bytes. "
                f"Maximum allowed: {cls.MAX_YAML_FILE_SIZE:,} bytes",
                file_size=file_size,
                max_size=cls.MAX_YAML_FILE_SIZE
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file: {str(e)}", original_exception=e)
        except UnicodeDecodeError as e:
            raise ConfigError(f"Invalid file encoding (expected UTF-8): {str(e)}", original_exception=e)

        return cls.from_dict(config_dict)

    def is_identifier_column(self, column: str) -> bool:
        return self.identifier_pattern.search(column) is not None

    def is_date_column(self, column: str) -> bool:
        return self.date_pattern.search(column) is not None

    def is_non_negative_metric(self, column: str) -> bool:
        return self.non_negative_pattern.search(column) is not None

    def allowed_values_for(self, column: str) -> Optional[Tuple[str, ...]]:
        """Return the allowed values of a column, or None when it is unrestricted."""
        return self.allowed_values.get(column)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dictionary shape accepted by from_dict()."""
        return {
            CONFIG_ROOT_KEY: {
                "identifier_pattern": self.identifier_pattern.pattern,
                "date_pattern": self.date_pattern.pattern,
                "non_negative_pattern": self.non_negative_pattern.pattern,
                "allowed_values": {
                    column: list(values) for column, values in self.allowed_values.items()
                },
                "max_issues": self.max_issues,
            }
        }

    @staticmethod
    def _compile_pattern(field: str, pattern: PatternLike) -> re.Pattern:
        """Compile a case-insensitive name pattern."""
        if isinstance(pattern, re.Pattern):
            return pattern
        if not isinstance(pattern, str):
            raise ConfigValidationError(
                f"'{field}' must be a regular expression string",
                field=field,
                expected="string",
                actual=type(pattern).__name__
            )
        try:
            return re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise ConfigValidationError(
                f"Invalid regular expression for '{field}': {e}",
                field=field,
                expected="valid regular expression",
                actual=pattern,
                original_exception=e
            )

    @staticmethod
    def _parse_allowed_values(allowed_values: Any) -> Dict[str, Tuple[str, ...]]:
        if not isinstance(allowed_values, Mapping):
            raise ConfigValidationError(
                "'allowed_values' must map column names to lists of values",
                field="allowed_values",
                expected="mapping",
                actual=type(allowed_values).__name__
            )

        parsed: Dict[str, Tuple[str, ...]] = {}
        for column, values in allowed_values.items():
            if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
                raise ConfigValidationError(
                    f"Allowed values for '{column}' must be a list",
                    field=f"allowed_values.{column}",
                    expected="list",
                    actual=type(values).__name__
                )
            parsed[str(column)] = tuple(stringify(value) for value in values)
        return parsed

    @staticmethod
    def _parse_max_issues(max_issues: Any) -> int:
        if isinstance(max_issues, bool) or not isinstance(max_issues, int) or max_issues < 0:
            raise ConfigValidationError(
                "'max_issues' must be a non-negative integer",
                field="max_issues",
                expected="integer >= 0",
                actual=repr(max_issues)
            )
        return max_issues
