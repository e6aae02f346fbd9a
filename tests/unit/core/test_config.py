"""
Unit tests for the validation rules configuration.

Tests defaults, dictionary and YAML loading, and rejection of unusable
settings.
"""

import re

import pytest

from tabsense.core.config import ValidationRulesConfig
from tabsense.core.constants import DEFAULT_MAX_ISSUES
from tabsense.core.exceptions import ConfigError, ConfigValidationError, YAMLSizeError


@pytest.mark.unit
class TestDefaults:
    """Test the built-in vocabulary."""

    @pytest.fixture
    def config(self):
        return ValidationRulesConfig()

    @pytest.mark.parametrize("column", ["Order Id", "customer_ID", "Product Code", "Invoice Number", "id"])
    def test_identifier_columns(self, config, column):
        assert config.is_identifier_column(column)

    @pytest.mark.parametrize("column", ["Identity", "Codes", "Numbers", "City"])
    def test_non_identifier_columns(self, config, column):
        assert not config.is_identifier_column(column)

    @pytest.mark.parametrize("column", ["Order Date", "created_timestamp", "TIME", "Update"])
    def test_date_columns(self, config, column):
        assert config.is_date_column(column)

    @pytest.mark.parametrize("column", ["Unit Price", "AMOUNT", "Total Sales", "qty_shipped", "Discount Units"])
    def test_metric_columns(self, config, column):
        assert config.is_non_negative_metric(column)

    def test_metric_vocabulary_excludes_others(self, config):
        assert not config.is_non_negative_metric("Temperature")

    def test_default_allowed_values(self, config):
        assert config.allowed_values_for("Purchase Type") == ("Online", "In-store")
        assert "Debit Card" in config.allowed_values_for("Payment Method")

    def test_allowed_values_match_exact_name(self, config):
        assert config.allowed_values_for("payment method") is None

    def test_default_max_issues(self, config):
        assert config.max_issues == DEFAULT_MAX_ISSUES == 500


@pytest.mark.unit
class TestCustomConfig:
    """Test constructor overrides."""

    def test_replace_allowed_values(self):
        config = ValidationRulesConfig(allowed_values={"Status": ["Open", "Closed"]})

        assert config.allowed_values_for("Status") == ("Open", "Closed")
        assert config.allowed_values_for("Payment Method") is None

    def test_empty_allowed_values_disables_rule(self):
        config = ValidationRulesConfig(allowed_values={})

        assert config.allowed_values == {}

    def test_allowed_values_are_stringified(self):
        config = ValidationRulesConfig(allowed_values={"Rating": [1, 2, 3.0]})

        assert config.allowed_values_for("Rating") == ("1", "2", "3")

    def test_precompiled_pattern_kept(self):
        pattern = re.compile(r"^sku$")
        config = ValidationRulesConfig(identifier_pattern=pattern)

        assert config.identifier_pattern is pattern
        assert config.is_identifier_column("sku")
        assert not config.is_identifier_column("SKU")

    def test_invalid_regex(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ValidationRulesConfig(date_pattern="date|(")

        assert exc_info.value.field == "date_pattern"

    def test_non_string_pattern(self):
        with pytest.raises(ConfigValidationError):
            ValidationRulesConfig(identifier_pattern=42)

    def test_allowed_values_must_be_lists(self):
        with pytest.raises(ConfigValidationError):
            ValidationRulesConfig(allowed_values={"Status": "Open"})

    @pytest.mark.parametrize("value", [-1, 1.5, "10", True])
    def test_invalid_max_issues(self, value):
        with pytest.raises(ConfigValidationError):
            ValidationRulesConfig(max_issues=value)


@pytest.mark.unit
class TestFromDict:
    """Test dictionary loading."""

    def test_nested_section(self):
        config = ValidationRulesConfig.from_dict({
            "validation_rules": {"max_issues": 10, "allowed_values": {"Size": ["S", "M"]}}
        })

        assert config.max_issues == 10
        assert config.allowed_values_for("Size") == ("S", "M")

    def test_flat_section(self):
        config = ValidationRulesConfig.from_dict({"date_pattern": "when"})

        assert config.is_date_column("Shipped When")
        assert not config.is_date_column("Order Date")

    def test_none_gives_defaults(self):
        assert ValidationRulesConfig.from_dict(None).max_issues == 500

    def test_unknown_key(self):
        with pytest.raises(ConfigValidationError):
            ValidationRulesConfig.from_dict({"validation_rules": {"max_issue": 5}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError):
            ValidationRulesConfig.from_dict({"validation_rules": ["a"]})

    def test_to_dict_round_trip(self):
        original = ValidationRulesConfig(max_issues=7, allowed_values={"A": ["x"]})

        restored = ValidationRulesConfig.from_dict(original.to_dict())

        assert restored.to_dict() == original.to_dict()


@pytest.mark.unit
class TestFromYaml:
    """Test YAML loading."""

    def test_load_yaml(self, tmp_path):
        config_file = tmp_path / "rules.yaml"
        config_file.write_text(
            "validation_rules:\n"
            "  max_issues: 25\n"
            "  allowed_values:\n"
            "    Purchase Type: [Online, In-store, Phone]\n",
            encoding="utf-8"
        )

        config = ValidationRulesConfig.from_yaml(config_file)

        assert config.max_issues == 25
        assert config.allowed_values_for("Purchase Type") == ("Online", "In-store", "Phone")
        assert config.allowed_values_for("Payment Method") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            ValidationRulesConfig.from_yaml(tmp_path / "missing.yaml")

        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("validation_rules: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            ValidationRulesConfig.from_yaml(config_file)

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert ValidationRulesConfig.from_yaml(config_file).max_issues == 500

    def test_file_too_large(self, tmp_path, monkeypatch):
        config_file = tmp_path / "big.yaml"
        config_file.write_text("validation_rules:\n  max_issues: 5\n", encoding="utf-8")
        monkeypatch.setattr(ValidationRulesConfig, "MAX_YAML_FILE_SIZE", 10)

        with pytest.raises(YAMLSizeError):
            ValidationRulesConfig.from_yaml(config_file)
