"""Data-quality validation rules and the rule engine."""
